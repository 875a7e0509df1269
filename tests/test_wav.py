import struct

import pytest

from samplevault.services.audio.wav import (
    UnsupportedBitDepthError,
    WavFormatError,
    iter_chunks,
    parse_wav_header,
)
from wavbuilder import build_wav, chunk, fmt_chunk, pack_samples, riff


def test_rejects_non_riff():
    wav = build_wav([0, 1, 2])
    with pytest.raises(WavFormatError, match="not a valid WAV file"):
        parse_wav_header(b"RIFX" + wav[4:])


def test_rejects_tiny_buffer():
    with pytest.raises(WavFormatError, match="not a valid WAV file"):
        parse_wav_header(b"RI")


def test_header_only_has_no_data_chunk():
    buf = b"RIFF" + struct.pack("<I", 4) + b"WAVE"
    assert len(buf) == 12
    with pytest.raises(WavFormatError, match="could not find data chunk"):
        parse_wav_header(buf)


def test_missing_data_chunk():
    with pytest.raises(WavFormatError, match="could not find data chunk"):
        parse_wav_header(riff([fmt_chunk(), chunk(b"LIST", b"abcd")]))


def test_empty_data_chunk_is_rejected():
    with pytest.raises(WavFormatError):
        parse_wav_header(riff([fmt_chunk(), chunk(b"data", b"")]))


def test_reads_fmt_fields():
    h = parse_wav_header(build_wav([0] * 8, channels=2, bits=24, rate=48000))
    assert (h.num_channels, h.bits_per_sample, h.sample_rate) == (2, 24, 48000)
    assert h.format_tag == 1
    assert h.data_offset == 12 + 24 + 8
    assert h.data_size == 24
    assert h.block_align == 6
    assert h.total_frames == 4
    assert h.fmt_found


def test_iter_chunks_skips_odd_padding():
    buf = riff([fmt_chunk(), chunk(b"LIST", b"123456789"), chunk(b"data", b"\x00\x00")])
    chunks = list(iter_chunks(buf))
    assert [c.chunk_id for c in chunks] == ["fmt ", "LIST", "data"]
    listc = chunks[1]
    assert listc.size == 9
    assert listc.next_offset == listc.offset + 8 + 10
    assert chunks[2].offset == listc.next_offset


def test_unknown_chunk_before_data_is_skipped():
    buf = riff([
        fmt_chunk(),
        chunk(b"LIST", b"\xff" * 10),
        chunk(b"junk", b"\xff" * 3),
        chunk(b"data", pack_samples([100, 200], 16)),
    ])
    h = parse_wav_header(buf)
    assert h.data_size == 4
    assert buf[h.data_offset:h.data_offset + 4] == pack_samples([100, 200], 16)


def test_stops_at_first_data_chunk():
    buf = riff([fmt_chunk(), chunk(b"data", b"\x01\x00"), chunk(b"data", b"\x02\x00\x03\x00")])
    h = parse_wav_header(buf)
    assert h.data_size == 2


def test_data_before_fmt_uses_defaults():
    buf = riff([chunk(b"data", b"\x00" * 16), fmt_chunk(channels=1, bits=24)])
    h = parse_wav_header(buf)
    assert not h.fmt_found
    assert (h.num_channels, h.bits_per_sample) == (2, 16)
    assert h.total_frames == 4


def test_data_before_fmt_strict():
    buf = riff([chunk(b"data", b"\x00" * 16), fmt_chunk()])
    with pytest.raises(WavFormatError, match="precedes fmt"):
        parse_wav_header(buf, strict=True)


def test_truncated_fmt_chunk():
    buf = riff([chunk(b"fmt ", b"\x01\x00\x02\x00"), chunk(b"data", b"\x00" * 4)])
    with pytest.raises(WavFormatError, match="truncated fmt"):
        parse_wav_header(buf)


def test_zero_channels_rejected():
    buf = riff([fmt_chunk(channels=0), chunk(b"data", b"\x00" * 4)])
    with pytest.raises(WavFormatError, match="invalid fmt"):
        parse_wav_header(buf)


def test_declared_data_size_is_clamped():
    payload = pack_samples([1, 2, 3], 16)
    buf = riff([fmt_chunk(), chunk(b"data", payload, declared_size=0xFFFFFFFF)])
    h = parse_wav_header(buf)
    assert h.data_size == len(buf) - h.data_offset
    assert h.total_frames == 3


def test_partial_trailing_frame_is_floored():
    payload = pack_samples([0] * 20, 24) + b"\x01\x02\x03\x04"
    buf = riff([fmt_chunk(channels=2, bits=24), chunk(b"data", payload)])
    h = parse_wav_header(buf)
    assert h.data_size == 64
    assert h.total_frames == 10


def test_unsupported_bit_depth():
    buf = build_wav([1, 2, 3, 4], bits=8)
    assert not parse_wav_header(buf).is_supported
    with pytest.raises(UnsupportedBitDepthError):
        parse_wav_header(buf, strict=True)


def test_duration():
    h = parse_wav_header(build_wav([0] * 22050, rate=44100))
    assert h.duration_seconds == pytest.approx(0.5)


def test_data_header_without_payload():
    buf = riff([fmt_chunk(), b"data" + struct.pack("<I", 4000)])
    with pytest.raises(WavFormatError, match="could not find data chunk"):
        parse_wav_header(buf)
