"""
Shared fixtures: a scripted recognition engine and WAV file writers.
"""

import numpy as np
import pytest
import soundfile as sf

from synthsub.engine import RecognitionEngine


class FakeEngine(RecognitionEngine):
    """Returns canned segment records and remembers what it was given."""

    def __init__(self, records=None, error=None):
        self.records = records if records is not None else []
        self.error = error
        self.calls = []

    def run(self, samples, strategy, language):
        self.calls.append((samples.copy(), strategy, language))
        if self.error is not None:
            raise self.error
        return [dict(r) for r in self.records]


@pytest.fixture
def two_segment_engine():
    return FakeEngine([
        {"start": 0, "end": 500, "text": " Once upon a time."},
        {"start": 500, "end": 1000, "text": " The backpack glowed."},
    ])


@pytest.fixture
def write_wav(tmp_path):
    """Writes a 16-bit PCM WAV and returns its path."""
    def _write(name="speech.wav", seconds=1.0, sample_rate=16000, channels=1, subtype="PCM_16"):
        frames = int(seconds * sample_rate)
        t = np.arange(frames) / sample_rate
        tone = (0.3 * np.sin(2 * np.pi * 440 * t) * 32767).astype(np.int16)
        data = np.repeat(tone[:, None], channels, axis=1) if channels > 1 else tone
        path = tmp_path / name
        sf.write(str(path), data, sample_rate, subtype=subtype)
        return str(path)
    return _write
