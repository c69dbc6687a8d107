"""Orchestrates the timed subtitle pipeline."""

import logging
import os
import time
from typing import Callable, Dict, Optional, TypeVar

from .audio_source import AudioSource
from .engine import RecognitionEngine
from .exceptions import SynthSubError, PipelineError
from .media import MediaOrchestrator
from .rescaler import TimeRescaler
from .segmenter import SpeechSegmenter
from .subtitle_encoder import SRTEncoder
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

T = TypeVar("T")

class SubtitlePipeline:
    """
    Runs audio loading, recognition, rescaling and encoding in sequence.

    Each stage blocks until its output is complete. A failure in any stage
    aborts the run.
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        audio_source: Optional[AudioSource] = None,
        segmenter: Optional[SpeechSegmenter] = None,
        rescaler: Optional[TimeRescaler] = None,
        encoder: Optional[SRTEncoder] = None,
        media: Optional[MediaOrchestrator] = None
    ):
        """
        Initializes the SubtitlePipeline.

        Args:
            engine: The recognition engine used by the segmentation stage.
            audio_source: Loader for PCM audio.
            segmenter: Prepares samples and collects raw segments.
            rescaler: Maps engine ticks to centiseconds.
            encoder: Writes the SRT document.
            media: ffmpeg wrapper, only needed for produce_video.
        """
        self.engine = engine
        self.audio_source = audio_source or AudioSource()
        self.segmenter = segmenter or SpeechSegmenter()
        self.rescaler = rescaler or TimeRescaler()
        self.encoder = encoder or SRTEncoder()
        self.media = media

    @staticmethod
    def _run_stage(stage: str, func: Callable[..., T], *args) -> T:
        logger.info(f"Stage '{stage}' starting...")
        try:
            return func(*args)
        except SynthSubError as e:
            if e.stage is None:
                e.stage = stage
            logger.error(f"Stage '{stage}' failed: {e}", exc_info=False)
            raise
        except FileNotFoundError as e:
            logger.error(f"Stage '{stage}' failed: {e}", exc_info=False)
            raise PipelineError(str(e), stage=stage) from e
        except Exception as e:
            logger.critical(f"Unexpected error in stage '{stage}': {e}", exc_info=True)
            raise PipelineError(f"Unexpected error: {e}", stage=stage) from e

    def generate_subtitles(self, audio_path: str, subtitle_path: str, language: str = "en") -> str:
        """
        Produces a subtitle file for an audio file.

        Args:
            audio_path: Path to the PCM audio container.
            subtitle_path: Where to write the SRT file.
            language: Two-letter language hint for recognition.

        Returns:
            The subtitle path.

        Raises:
            SynthSubError: Any stage failure, tagged with its stage name.
        """
        start_time = time.time()
        logger.info(f"--- Generating subtitles for: {audio_path} ---")

        waveform = self._run_stage("audio_source", self.audio_source.load, audio_path)
        raw_segments = self._run_stage("segmentation", self.segmenter.segment, self.engine, waveform, language)
        rescaled = self._run_stage("rescaling", self.rescaler.rescale, raw_segments, waveform.duration)
        self._run_stage("encoding", self.encoder.write, rescaled, subtitle_path)

        logger.info(f"--- Subtitles written to {subtitle_path} in {time.time() - start_time:.2f} seconds ---")
        return subtitle_path

    def produce_video(self, video_path: str, audio_path: str, subtitle_path: str, output_dir: str) -> Dict[str, str]:
        """
        Merges the narration into the video, then burns in the subtitles.

        Returns:
            Paths of the 'merged' and 'subtitled' videos.

        Raises:
            SynthSubError: If ffmpeg fails or no media orchestrator is configured.
        """
        if self.media is None:
            raise PipelineError("No media orchestrator configured", stage="media")
        ensure_dir_exists(output_dir)

        base_name = os.path.splitext(os.path.basename(video_path))[0]
        merged_path = os.path.join(output_dir, f"{base_name}.merged.mp4")
        subtitled_path = os.path.join(output_dir, f"{base_name}.subtitled.mp4")

        self._run_stage("media", self.media.merge_audio, video_path, audio_path, merged_path)
        self._run_stage("media", self.media.burn_subtitles, merged_path, subtitle_path, subtitled_path)
        return {"merged": merged_path, "subtitled": subtitled_path}
