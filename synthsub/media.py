"""Muxes audio into video and burns subtitles using ffmpeg."""

import ffmpeg
import os
import logging
from typing import Optional

from .exceptions import MediaError
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

# Fixed ASS style override applied to burned-in subtitles
SUBTITLE_STYLE = "Alignment=2,FontName=Arial"

# Filter option values are unescaped once by the option parser and once by
# the filtergraph parser, so special characters need both layers.
OPTION_SPECIAL_CHARS = "\\':"
GRAPH_SPECIAL_CHARS = "\\',;[]"

def escape_filter_value(value: str) -> str:
    """Escapes a value for use inside an ffmpeg -vf filtergraph option."""
    for specials in (OPTION_SPECIAL_CHARS, GRAPH_SPECIAL_CHARS):
        value = "".join(f"\\{ch}" if ch in specials else ch for ch in value)
    return value

class MediaOrchestrator:
    """Drives the external ffmpeg process for the final deliverables."""

    def __init__(self, ffmpeg_path: Optional[str] = None):
        """
        Initializes the MediaOrchestrator.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def merge_stream(self, video_path: str, audio_path: str, output_path: str):
        """Builds the ffmpeg stream that replaces the video's audio track."""
        video = ffmpeg.input(video_path).video
        audio = ffmpeg.input(audio_path).audio
        return (
            ffmpeg
            .output(video, audio, output_path, vcodec='copy', acodec='aac', shortest=None)
            .overwrite_output()
        )

    def burn_stream(self, video_path: str, subtitle_path: str, output_path: str):
        """Builds the ffmpeg stream that renders subtitles into the picture."""
        return (
            ffmpeg
            .input(video_path)
            .output(
                output_path,
                vf=f"subtitles={escape_filter_value(subtitle_path)}:force_style='{SUBTITLE_STYLE}'",
                acodec='copy'
            )
            .overwrite_output()
        )

    def merge_audio(self, video_path: str, audio_path: str, output_path: str) -> str:
        """
        Combines the video stream of one file with the audio of another.

        Args:
            video_path: Path to the input video file.
            audio_path: Path to the narration audio file.
            output_path: Path for the combined file.

        Returns:
            The output path.

        Raises:
            FileNotFoundError: If an input file does not exist.
            MediaError: If ffmpeg fails.
        """
        for path in (video_path, audio_path):
            if not os.path.exists(path):
                raise FileNotFoundError(f"Input media file not found: {path}")
        logger.info(f"Merging audio {audio_path} into video {video_path}...")
        self._run(self.merge_stream(video_path, audio_path, output_path), output_path)
        logger.info(f"Successfully merged audio to: {output_path}")
        return output_path

    def burn_subtitles(self, video_path: str, subtitle_path: str, output_path: str) -> str:
        """
        Renders a subtitle file into the video picture.

        Args:
            video_path: Path to the input video file.
            subtitle_path: Path to the SRT file.
            output_path: Path for the subtitled video.

        Returns:
            The output path.

        Raises:
            FileNotFoundError: If an input file does not exist.
            MediaError: If ffmpeg fails.
        """
        for path in (video_path, subtitle_path):
            if not os.path.exists(path):
                raise FileNotFoundError(f"Input media file not found: {path}")
        logger.info(f"Burning subtitles {subtitle_path} into {video_path}...")
        self._run(self.burn_stream(video_path, subtitle_path, output_path), output_path)
        logger.info(f"Successfully burned subtitles to: {output_path}")
        return output_path

    def _run(self, stream, output_path: str) -> None:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            ensure_dir_exists(output_dir)
        try:
            stream.run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg stderr: {stderr_output}")
            self._remove_partial(output_path)
            raise MediaError(f"ffmpeg failed for {output_path}") from e
        except OSError as e:
            logger.error(f"Could not start ffmpeg ({self.ffmpeg_cmd}): {e}", exc_info=True)
            self._remove_partial(output_path)
            raise MediaError(f"Could not start ffmpeg: {e}") from e

    @staticmethod
    def _remove_partial(output_path: str) -> None:
        if os.path.exists(output_path):
            try:
                os.remove(output_path)
            except OSError:
                logger.warning(f"Could not clean up partially created file: {output_path}")
