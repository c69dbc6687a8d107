"""Speech recognition engine backed by OpenAI's Whisper model."""

import logging
from typing import Any, Dict, List

import numpy as np
import torch
import whisper
from whisper.audio import FRAMES_PER_SECOND, SAMPLE_RATE

from .engine import DecodingStrategy, RecognitionEngine
from .exceptions import EngineError

logger = logging.getLogger(__name__)

class WhisperEngine(RecognitionEngine):
    """
    Runs Whisper over in-memory samples and reports bounds in mel-frame ticks.

    Callers hand it mono audio already resampled to SAMPLE_RATE. Ticks are
    nominal frames and are rescaled against the real duration downstream.
    """
    sample_rate = SAMPLE_RATE

    def __init__(self, model_name: str = "base", device: str = "cuda", fp16: bool = True):
        """
        Initializes the WhisperEngine.

        Args:
            model_name: The name of the Whisper model to use (e.g., "base", "medium.en").
            device: The device to run the model on ("cuda" or "cpu").
            fp16: Whether to use float16 precision (only honoured on CUDA).

        Raises:
            ValueError: If the specified device is invalid.
            EngineError: If the model fails to load.
        """
        self.model_name = model_name
        self.device = device

        if self.device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA device requested but not available. Falling back to CPU.")
            self.device = "cpu"
        elif self.device not in ["cuda", "cpu"]:
            raise ValueError(f"Invalid device specified: {self.device}. Choose 'cuda' or 'cpu'.")
        self.fp16 = fp16 and self.device == "cuda"

        logger.info(f"Initializing WhisperEngine with model '{self.model_name}' on device '{self.device}' (FP16: {self.fp16})")
        try:
            self.model = whisper.load_model(self.model_name, device=self.device)
            logger.info(f"Whisper model '{self.model_name}' loaded successfully.")
        except Exception as e:
            logger.error(f"Failed to load Whisper model '{self.model_name}': {e}", exc_info=True)
            raise EngineError(f"Failed to load Whisper model '{self.model_name}': {e}") from e

    @staticmethod
    def _to_ticks(seconds: float) -> int:
        return int(round(float(seconds) * FRAMES_PER_SECOND))

    def run(self, samples: np.ndarray, strategy: DecodingStrategy, language: str) -> List[Dict[str, Any]]:
        try:
            # temperature=0.0 alone disables the sampling fallback, keeping runs repeatable
            result = self.model.transcribe(
                samples,
                language=language,
                beam_size=strategy.beam_size,
                patience=strategy.patience,
                temperature=0.0,
                fp16=self.fp16,
                verbose=None
            )
        except Exception as e:
            logger.error(f"Whisper inference failed: {e}", exc_info=True)
            raise EngineError(f"Whisper inference failed: {e}") from e

        if "segments" not in result:
            raise EngineError("Whisper result did not contain 'segments'")

        records = []
        for seg_data in result["segments"]:
            record = dict(seg_data)
            # Whisper reports nominal seconds; expose them as frame ticks
            if "start" in record:
                record["start"] = self._to_ticks(record["start"])
            if "end" in record:
                record["end"] = self._to_ticks(record["end"])
            records.append(record)
        logger.info(f"Whisper emitted {len(records)} segments (language hint: {language}).")
        return records
