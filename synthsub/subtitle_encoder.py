"""Handles encoding rescaled segments into subtitle files (SRT)."""

import logging
import os
from typing import Sequence

from .exceptions import EncodingError
from .models import RescaledSegment, SubtitleCue, SubtitleDocument
from .utils import format_time_srt

logger = logging.getLogger(__name__)

class SRTEncoder:
    """Encodes subtitles into the SRT (SubRip Text) numbered-cue format."""

    def __init__(self, drop_degenerate: bool = True):
        """
        Args:
            drop_degenerate: Skip cues whose start and end are equal.
        """
        self.drop_degenerate = drop_degenerate

    def build_cues(self, segments: Sequence[RescaledSegment]) -> SubtitleDocument:
        """Numbers the segments and formats their timestamps. Overlaps are kept as-is."""
        cues = []
        for segment in segments:
            if self.drop_degenerate and segment.end_centiseconds == segment.start_centiseconds:
                logger.warning(
                    f"Dropping zero-duration cue at {format_time_srt(segment.start_centiseconds)}: "
                    f"'{segment.text[:30]}'"
                )
                continue
            cues.append(
                SubtitleCue(
                    index=len(cues) + 1,
                    start=format_time_srt(segment.start_centiseconds),
                    end=format_time_srt(segment.end_centiseconds),
                    text=segment.text
                )
            )
        return cues

    @staticmethod
    def render(cues: SubtitleDocument) -> str:
        return "".join(
            f"{cue.index}\n{cue.start} --> {cue.end}\n{cue.text}\n\n"
            for cue in cues
        )

    def encode(self, segments: Sequence[RescaledSegment]) -> str:
        return self.render(self.build_cues(segments))

    def write(self, segments: Sequence[RescaledSegment], output_path: str) -> str:
        """
        Writes the subtitle document to disk as UTF-8.

        Args:
            segments: Rescaled segments in chronological order.
            output_path: Path to save the SRT file.

        Returns:
            The path written.

        Raises:
            EncodingError: If the file cannot be written.
        """
        logger.info(f"Encoding subtitles to SRT: {output_path}")
        cues = self.build_cues(segments)
        document = self.render(cues)
        try:
            parent = os.path.dirname(output_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(document)
        except OSError as e:
            logger.error(f"Failed to write SRT file to {output_path}: {e}", exc_info=True)
            raise EncodingError(f"Could not write SRT file {output_path}: {e}") from e

        logger.info(f"Successfully wrote {len(cues)} subtitle blocks to {output_path}")
        return output_path
