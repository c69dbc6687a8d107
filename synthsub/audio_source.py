"""Loads 16-bit PCM audio from container files using soundfile."""

import logging
import os

import numpy as np
import soundfile as sf

from .exceptions import FormatError
from .models import WaveformBuffer

logger = logging.getLogger(__name__)

SUPPORTED_SUBTYPE = "PCM_16"

class AudioSource:
    """Reads a mono or stereo PCM waveform and its declared duration."""

    def load(self, audio_path: str) -> WaveformBuffer:
        """
        Loads the samples of a PCM container file.

        The duration comes from the header's declared frame count and sample
        rate. The decoded sample count must agree with the header; if it does
        not, the file is treated as corrupt.

        Args:
            audio_path: Path to the audio file (WAV recommended).

        Returns:
            A WaveformBuffer holding interleaved int16 samples.

        Raises:
            FormatError: If the file is missing, unreadable, malformed, or
                         not 16-bit integer PCM.
        """
        logger.info(f"Loading audio from: {audio_path}")
        if not os.path.isfile(audio_path):
            raise FormatError(f"Audio file not found: {audio_path}")

        try:
            with sf.SoundFile(audio_path) as f:
                if f.subtype != SUPPORTED_SUBTYPE:
                    raise FormatError(
                        f"Unsupported sample format '{f.subtype}' in {audio_path}; expected {SUPPORTED_SUBTYPE}"
                    )
                declared_frames = f.frames
                sample_rate = f.samplerate
                channels = f.channels
                data = f.read(dtype="int16", always_2d=True)
        except FormatError:
            raise
        except (RuntimeError, ValueError) as e:
            # LibsndfileError derives from RuntimeError
            logger.error(f"Could not read audio container {audio_path}: {e}")
            raise FormatError(f"Unreadable or malformed audio container {audio_path}: {e}") from e

        if sample_rate <= 0 or channels <= 0:
            raise FormatError(
                f"Malformed header in {audio_path}: sample_rate={sample_rate}, channels={channels}"
            )

        samples = np.ascontiguousarray(data, dtype=np.int16).reshape(-1)
        declared_samples = declared_frames * channels
        if samples.size != declared_samples:
            raise FormatError(
                f"Corrupt audio file {audio_path}: header declares {declared_samples} samples "
                f"but {samples.size} were decoded"
            )

        waveform = WaveformBuffer(samples=samples, sample_rate=sample_rate, channels=channels)
        logger.info(
            f"Loaded {waveform.sample_count} samples ({channels} ch @ {sample_rate} Hz, "
            f"{waveform.duration:.2f}s)"
        )
        return waveform
