"""Recognition engine interface and decoding strategy."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Mapping

import numpy as np

DEFAULT_BEAM_SIZE = 5
DEFAULT_PATIENCE = 1.0
DEFAULT_SAMPLE_RATE = 16000

@dataclass(frozen=True)
class DecodingStrategy:
    """Deterministic beam search settings passed to the engine."""
    beam_size: int = DEFAULT_BEAM_SIZE
    patience: float = DEFAULT_PATIENCE

class RecognitionEngine(ABC):
    """Abstract base class for speech recognition engines."""

    # Rate of the mono buffer passed to run()
    sample_rate: int = DEFAULT_SAMPLE_RATE

    @abstractmethod
    def run(self, samples: np.ndarray, strategy: DecodingStrategy, language: str) -> List[Mapping[str, Any]]:
        """
        Runs recognition over a mono float32 buffer at sample_rate Hz.

        Args:
            samples: Mono float32 samples in [-1.0, 1.0].
            strategy: Beam search settings.
            language: Two-letter language hint (e.g., 'en').

        Returns:
            One record per emitted segment, in emission order, each with
            'start' and 'end' in engine ticks and 'text'.

        Raises:
            EngineError: If inference fails.
        """
        pass
