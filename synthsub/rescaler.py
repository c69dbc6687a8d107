"""Maps engine ticks onto wall-clock centiseconds."""

import logging
from typing import List, Sequence

from .exceptions import NoSpeechDetected
from .models import RawSegment, RescaledSegment, TimeScale

logger = logging.getLogger(__name__)

class TimeRescaler:
    """
    Rescales segment bounds with one global linear factor.

    The factor is the true audio duration divided by the largest segment end
    the engine reported. This absorbs any resampling or padding the engine
    applied, but it assumes the last recognized segment ends where the audio
    does. Trailing silence therefore stretches every timestamp.
    """

    def time_scale(self, segments: Sequence[RawSegment], true_duration_seconds: float) -> TimeScale:
        """
        Derives the mapping parameters for a run.

        Raises:
            NoSpeechDetected: If there are no segments or every segment ends at tick 0.
        """
        if not segments:
            raise NoSpeechDetected("Recognition returned no segments; time scale is undefined")
        max_engine_time = max(segment.engine_end for segment in segments)
        if max_engine_time <= 0:
            raise NoSpeechDetected(f"Largest segment end is {max_engine_time}; time scale is undefined")
        return TimeScale(max_engine_time=max_engine_time, true_duration_seconds=true_duration_seconds)

    @staticmethod
    def to_centiseconds(engine_time: int, scale: TimeScale) -> int:
        scaled_seconds = (engine_time / scale.max_engine_time) * scale.true_duration_seconds
        return int(round(scaled_seconds * 100))

    def rescale(self, segments: Sequence[RawSegment], true_duration_seconds: float) -> List[RescaledSegment]:
        """
        Converts every segment's bounds to centiseconds.

        Args:
            segments: Raw segments in recognition order.
            true_duration_seconds: Duration of the source audio.

        Returns:
            Rescaled segments in the same order.

        Raises:
            NoSpeechDetected: If the scale cannot be derived.
        """
        scale = self.time_scale(segments, true_duration_seconds)
        logger.debug(
            f"Time scale: {scale.true_duration_seconds:.3f}s / {scale.max_engine_time} ticks "
            f"= {scale.true_duration_seconds / scale.max_engine_time:.6f} s/tick"
        )
        return [
            RescaledSegment(
                start_centiseconds=self.to_centiseconds(segment.engine_start, scale),
                end_centiseconds=self.to_centiseconds(segment.engine_end, scale),
                text=segment.text
            )
            for segment in segments
        ]
