"""Data models for SynthSub."""

from dataclasses import dataclass, field
from typing import List

import numpy as np


@dataclass(frozen=True, eq=False)
class WaveformBuffer:
    """Interleaved signed 16-bit PCM samples loaded from a container file."""
    samples: np.ndarray = field(repr=False)
    sample_rate: int
    channels: int

    @property
    def sample_count(self) -> int:
        """Total number of samples across all channels."""
        return int(self.samples.size)

    @property
    def frame_count(self) -> int:
        return self.sample_count // self.channels

    @property
    def duration(self) -> float:
        """Duration in seconds: sample_count / (sample_rate * channels)."""
        return self.sample_count / (self.sample_rate * self.channels)

@dataclass(frozen=True)
class RawSegment:
    """A recognized span with bounds in engine ticks, not seconds."""
    engine_start: int
    engine_end: int
    text: str

@dataclass(frozen=True)
class TimeScale:
    """Mapping parameters from engine ticks onto wall-clock time."""
    max_engine_time: int
    true_duration_seconds: float

@dataclass(frozen=True)
class RescaledSegment:
    """A recognized span with bounds in wall-clock centiseconds."""
    start_centiseconds: int
    end_centiseconds: int
    text: str

@dataclass
class SubtitleCue:
    """One numbered subtitle entry with formatted timestamps."""
    index: int
    start: str
    end: str
    text: str

SubtitleDocument = List[SubtitleCue]
