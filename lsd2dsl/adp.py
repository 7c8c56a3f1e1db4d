"""Decoder for the 4-bit ADPCM sound format."""

from __future__ import annotations

import math
import os

ADP_SAMPLE_RATE = 21000
ADP_CHANNELS = 1

_STEP_TABLE = (
    16, 17, 19, 21, 23, 25, 28, 31, 34, 37, 41, 45, 50,
    55, 60, 66, 73, 80, 88, 97, 107, 118, 130, 143, 157, 173,
    190, 209, 230, 253, 279, 307, 337, 371, 408, 449, 494, 544, 598,
    658, 724, 796, 876, 963, 1060, 1166, 1282, 1411, 1552,
)

_INDEX_DELTA = (-1, -1, -1, -1, 2, 4, 6, 8)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def decode_adp(data: bytes) -> list[int]:
    """Decode ADPCM bytes into signed 16-bit samples, two per byte."""
    samples: list[int] = []
    sample = 0.0
    index = 0
    for byte in data:
        for code in (byte >> 4, byte & 0xF):
            step = _STEP_TABLE[index]
            delta = (step * ((code >> 2) & 1) + step / 2 * ((code >> 1) & 1)
                     + step / 4 * (code & 1) + step / 8)
            sample += -delta if code & 8 else delta
            samples.append(_round_half_away(min(max(sample, -32768.0), 32767.0)))
            index = min(max(index + _INDEX_DELTA[code & 7], 0), len(_STEP_TABLE) - 1)
    return samples


def replace_adp_ext_with_wav(name: str) -> str | None:
    """Return ``name`` with an ``.adp`` extension changed to ``.wav``, or None."""
    stem, ext = os.path.splitext(name)
    if ext.lower() == ".adp":
        return stem + ".wav"
    return None