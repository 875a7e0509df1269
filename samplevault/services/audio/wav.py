import struct
from dataclasses import dataclass
from typing import Iterator

RIFF_TAG = b"RIFF"
RIFF_HEADER_SIZE = 12          # "RIFF" + size + "WAVE"
CHUNK_HEADER_SIZE = 8          # id + uint32 LE size
FMT_MIN_SIZE = 16
SUPPORTED_BIT_DEPTHS = (16, 24, 32)

# fallback when "data" shows up before "fmt "
DEFAULT_CHANNELS = 2
DEFAULT_BITS_PER_SAMPLE = 16

_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_FIELDS = struct.Struct("<HHIIHH")  # tag, channels, rate, byte rate, block align, bits


class WavFormatError(ValueError):
    """Buffer is not a RIFF/WAVE container with a usable PCM data chunk."""


class UnsupportedBitDepthError(WavFormatError):
    pass


@dataclass(frozen=True)
class Chunk:
    chunk_id: str
    offset: int
    size: int

    @property
    def payload_offset(self) -> int:
        return self.offset + CHUNK_HEADER_SIZE

    @property
    def next_offset(self) -> int:
        # odd-sized chunks carry one pad byte
        return self.payload_offset + self.size + (self.size & 1)


@dataclass(frozen=True)
class WavHeader:
    num_channels: int
    bits_per_sample: int
    sample_rate: int
    format_tag: int
    data_offset: int
    data_size: int
    fmt_found: bool

    @property
    def is_supported(self) -> bool:
        return self.bits_per_sample in SUPPORTED_BIT_DEPTHS

    @property
    def block_align(self) -> int:
        return self.bits_per_sample * self.num_channels // 8

    @property
    def total_frames(self) -> int:
        return (self.data_size * 8) // (self.bits_per_sample * self.num_channels)

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.total_frames / self.sample_rate


def iter_chunks(buffer: bytes, start: int = RIFF_HEADER_SIZE) -> Iterator[Chunk]:
    """
    Walk chunk headers from ``start`` until fewer than 8 bytes remain.
    The chunk payload is not bounds-checked here; callers decide what a
    truncated payload means.
    """
    offset = start
    end = len(buffer)
    while end - offset >= CHUNK_HEADER_SIZE:
        raw_id, size = _CHUNK_HEADER.unpack_from(buffer, offset)
        chunk = Chunk(raw_id.decode("latin-1"), offset, size)
        yield chunk
        offset = chunk.next_offset


def _read_fmt(buffer: bytes, chunk: Chunk) -> tuple[int, int, int, int]:
    if chunk.size < FMT_MIN_SIZE or chunk.payload_offset + FMT_MIN_SIZE > len(buffer):
        raise WavFormatError("truncated fmt chunk")
    tag, channels, rate, _, _, bits = _FMT_FIELDS.unpack_from(buffer, chunk.payload_offset)
    return tag, channels, rate, bits


def parse_wav_header(buffer: bytes, strict: bool = False) -> WavHeader:
    """
    Read the facts needed to decode PCM from a fully buffered WAV file.

    Stops at the first "data" chunk. In non-strict mode a missing "fmt "
    chunk falls back to 2 channels / 16-bit and unsupported bit depths are
    accepted (they decode as silence). ``strict=True`` rejects both.
    """
    if bytes(buffer[:4]) != RIFF_TAG:
        raise WavFormatError("not a valid WAV file")

    channels, bits = DEFAULT_CHANNELS, DEFAULT_BITS_PER_SAMPLE
    rate, tag = 0, 0
    fmt_found = False
    data: Chunk | None = None

    for chunk in iter_chunks(buffer):
        if chunk.chunk_id == "fmt ":
            tag, channels, rate, bits = _read_fmt(buffer, chunk)
            fmt_found = True
        elif chunk.chunk_id == "data":
            data = chunk
            break

    if data is None or data.size == 0:
        raise WavFormatError("could not find data chunk")
    if not fmt_found and strict:
        raise WavFormatError("data chunk precedes fmt chunk")
    if channels == 0 or bits == 0:
        raise WavFormatError(f"invalid fmt chunk: channels={channels} bits={bits}")
    if strict and bits not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedBitDepthError(f"unsupported bit depth: {bits}")

    available = max(0, len(buffer) - data.payload_offset)
    if available == 0:
        # header only, payload truncated away
        raise WavFormatError("could not find data chunk")
    return WavHeader(
        num_channels=channels,
        bits_per_sample=bits,
        sample_rate=rate,
        format_tag=tag,
        data_offset=data.payload_offset,
        data_size=min(data.size, available),
        fmt_found=fmt_found,
    )
