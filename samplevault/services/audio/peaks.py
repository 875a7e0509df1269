import numpy as np

from samplevault.services.audio.wav import WavHeader, parse_wav_header

# Normalized [0, 1] peaks for fast waveform rendering
TARGET_PEAKS = 300

_INT_DTYPES = {16: "<i2", 32: "<i4"}


def decode_first_channel(buffer: bytes, header: WavHeader) -> np.ndarray:
    """abs(sample) / 2**(bits-1) for the first channel of every frame."""
    total = header.total_frames
    if not header.is_supported:
        return np.zeros(total, dtype=np.float64)

    bits = header.bits_per_sample
    width = bits // 8
    frames = np.frombuffer(
        buffer, dtype=np.uint8, count=total * header.block_align, offset=header.data_offset
    ).reshape(total, header.block_align)
    first = np.ascontiguousarray(frames[:, :width])

    if bits == 24:
        values = (
            (first[:, 2].astype(np.int8).astype(np.int32) << 16)
            | (first[:, 1].astype(np.int32) << 8)
            | first[:, 0].astype(np.int32)
        )
    else:
        values = first.view(_INT_DTYPES[bits])[:, 0]

    return np.abs(values.astype(np.float64)) / float(2 ** (bits - 1))


def extract_peaks(buffer: bytes, target_peaks: int = TARGET_PEAKS, strict: bool = False) -> list[float]:
    if target_peaks < 1:
        raise ValueError(f"target_peaks must be positive, got {target_peaks}")
    header = parse_wav_header(buffer, strict=strict)
    total = header.total_frames
    if total == 0:
        return []

    samples_per_peak = max(1, total // target_peaks)
    magnitudes = decode_first_channel(buffer, header)
    # compute peak (max abs) in each window; the last window may be short
    starts = np.arange(0, total, samples_per_peak)
    peaks = np.maximum.reduceat(magnitudes, starts)
    return np.clip(peaks, 0.0, 1.0).tolist()
