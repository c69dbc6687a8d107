"""Custom Exceptions for the SynthSub application."""

from typing import Optional


class SynthSubError(Exception):
    """Base class for exceptions in this package.

    Each subclass names the pipeline stage it belongs to so that a failure
    can be diagnosed from the message alone.
    """
    stage: Optional[str] = None

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        message = super().__str__()
        if self.stage:
            return f"[{self.stage}] {message}"
        return message

class ConfigurationError(SynthSubError):
    """Exception raised for errors in configuration loading."""
    stage = "config"

class FileSystemError(SynthSubError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass

class FormatError(SynthSubError):
    """Exception raised when an audio container is unreadable or malformed."""
    stage = "audio_source"

class ConversionError(SynthSubError):
    """Exception raised when sample normalization produces a buffer of the wrong length."""
    stage = "segmentation"

class EngineError(SynthSubError):
    """Exception raised when the recognition model fails to load or run."""
    stage = "segmentation"

class NoSpeechDetected(SynthSubError):
    """Exception raised when recognition yields no segments to scale."""
    stage = "rescaling"

class EncodingError(SynthSubError):
    """Exception raised when the subtitle document cannot be written."""
    stage = "encoding"

class MediaError(SynthSubError):
    """Exception raised when ffmpeg fails to mux or burn media."""
    stage = "media"

class GenerationError(SynthSubError):
    """Exception raised for errors talking to the script generation service."""
    stage = "generation"

class MissingFieldError(GenerationError):
    """Exception raised when a generation response lacks an expected field."""

    def __init__(self, field: str):
        super().__init__(f"Response is missing the '{field}' field")
        self.field = field

class PipelineError(SynthSubError):
    """Exception raised for unexpected failures inside a pipeline stage."""
    pass
