import uuid

from sqlalchemy import JSON, BigInteger, Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func
from samplevault.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Sample(Base):
    __tablename__ = "samples"

    id = Column(String(36), primary_key=True, default=_new_id)
    pack_id = Column(String(36), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    file_path = Column(String(512), nullable=False)
    preview_path = Column(String(512))
    file_size = Column(BigInteger, default=0)
    duration = Column(Float, default=0.0)
    bpm = Column(Float)
    key = Column(String(16))
    order_index = Column(Integer, default=0)
    # list[float] in [0, 1]; overwritten wholesale on regeneration
    waveform_peaks = Column(JSON(none_as_null=True))
    created_at = Column(DateTime, server_default=func.now())
