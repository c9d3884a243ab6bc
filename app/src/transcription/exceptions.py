"""Custom exceptions for the subtitle pipeline."""


class SubtitleGeneratorError(Exception):
    """Base exception class."""

    pass


class TranscriptionError(SubtitleGeneratorError):
    """Speech recognition failed."""

    pass


class TranscriptionTransportError(TranscriptionError):
    """The transcription service could not be reached or answered badly."""

    pass


class TranscriptionServiceError(TranscriptionError):
    """The transcription service reported the job as failed."""

    pass


class TranscriptionTimeoutError(TranscriptionServiceError):
    """The transcript was not ready within the configured polling budget."""

    pass
