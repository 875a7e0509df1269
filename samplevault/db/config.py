from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    url: str = "sqlite:///./data/samplevault.db"
    echo: bool = False

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    @property
    def sync_url(self) -> str:
        # 워커/라우트 모두 동기 드라이버(pymysql) 사용
        url = self.url
        if url.startswith("mysql+aiomysql://"):
            url = url.replace("mysql+aiomysql://", "mysql+pymysql://", 1)
        if url.startswith("mysql://"):
            url = url.replace("mysql://", "mysql+pymysql://", 1)
        return url
