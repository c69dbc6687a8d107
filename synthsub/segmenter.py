"""Converts a waveform into raw recognized segments."""

import logging
from typing import List, Optional

import numpy as np
import torch
import torchaudio

from .engine import DecodingStrategy, RecognitionEngine
from .exceptions import ConversionError, EngineError
from .models import RawSegment, WaveformBuffer

logger = logging.getLogger(__name__)

INT16_FULL_SCALE = 32768.0
REQUIRED_FIELDS = ("start", "end", "text")

class SpeechSegmenter:
    """Prepares samples for the engine and collects its segments."""

    def __init__(self, strategy: Optional[DecodingStrategy] = None):
        self.strategy = strategy or DecodingStrategy()

    @staticmethod
    def _scale(samples: np.ndarray) -> np.ndarray:
        return np.asarray(samples, dtype=np.float32) / np.float32(INT16_FULL_SCALE)

    @classmethod
    def normalize(cls, samples: np.ndarray) -> np.ndarray:
        """
        Scales int16 samples to float32 amplitude in [-1.0, 1.0].

        Raises:
            ConversionError: If the normalized buffer length differs from the input.
        """
        expected = np.asarray(samples).size
        normalized = cls._scale(samples)
        if normalized.size != expected:
            raise ConversionError(f"Normalized buffer has {normalized.size} samples, expected {expected}")
        return normalized

    @staticmethod
    def downmix(samples: np.ndarray, channels: int) -> np.ndarray:
        """Averages interleaved channels into a single mono channel."""
        if channels <= 1:
            return samples
        return samples.reshape(-1, channels).mean(axis=1, dtype=np.float32)

    @staticmethod
    def resample(samples: np.ndarray, source_rate: int, target_rate: int) -> np.ndarray:
        """Converts mono float32 samples to the rate the engine expects."""
        if source_rate == target_rate:
            return samples
        logger.info(f"Resampling audio from {source_rate} Hz to {target_rate} Hz")
        resampled = torchaudio.functional.resample(torch.from_numpy(np.ascontiguousarray(samples)), source_rate, target_rate)
        return resampled.numpy().astype(np.float32, copy=False)

    def segment(self, engine: RecognitionEngine, waveform: WaveformBuffer, language: str) -> List[RawSegment]:
        """
        Runs the engine over the waveform.

        Args:
            engine: The recognition engine to use for this run.
            waveform: Loaded PCM samples.
            language: Two-letter language hint.

        Returns:
            Raw segments in the engine's emission order.

        Raises:
            ConversionError: If sample normalization fails its length check.
            EngineError: If inference fails or a record lacks a required field.
        """
        mono = self.downmix(self.normalize(waveform.samples), waveform.channels)
        mono = self.resample(mono, waveform.sample_rate, engine.sample_rate)
        logger.info(
            f"Running recognition on {mono.size} mono samples at {engine.sample_rate} Hz "
            f"(beam_size={self.strategy.beam_size}, patience={self.strategy.patience}, language={language})"
        )

        try:
            records = engine.run(mono, self.strategy, language)
        except EngineError:
            raise
        except Exception as e:
            logger.error(f"Recognition engine failed: {e}", exc_info=True)
            raise EngineError(f"Recognition engine failed: {e}") from e

        segments = []
        for i, record in enumerate(records):
            for key in REQUIRED_FIELDS:
                if key not in record or record[key] is None:
                    raise EngineError(f"Segment {i} is missing the '{key}' field")
            segments.append(
                RawSegment(
                    engine_start=int(record["start"]),
                    engine_end=int(record["end"]),
                    text=str(record["text"]).strip()
                )
            )

        logger.info(f"Recognition produced {len(segments)} segments.")
        return segments
