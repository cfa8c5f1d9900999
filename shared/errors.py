"""
Error taxonomy for the blog publisher.

Two families:
- ValidationError: the request itself is malformed (HTTP 400)
- PipelineError: a pipeline stage failed downstream (HTTP 500)

Every PipelineError carries the stage it came from so the handler can log
where the request aborted. The message is forwarded to the caller as-is.
"""


class BlogPublisherError(Exception):
    """Base class for all errors raised by the blog publisher."""

    stage = 'processing'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogPublisherError):
    """Missing or malformed request fields."""

    stage = 'validation'


class PipelineError(BlogPublisherError):
    """A downstream step failed; the whole request is aborted."""


class FetchError(PipelineError):
    """Non-success status (or transport failure) fetching a link or audio file."""

    stage = 'fetch'


class TranscriptionError(PipelineError):
    stage = 'transcription'


class SummarizationError(PipelineError):
    """Model call failed or its output was not the expected JSON."""

    stage = 'summarization'


class ImageGenerationError(PipelineError):
    stage = 'image'


class ConfigError(PipelineError):
    """Required environment configuration is missing."""

    stage = 'config'


class AuthError(PipelineError):
    """OAuth token exchange was rejected."""

    stage = 'auth'


class PublishError(PipelineError):
    """Blogger rejected the post."""

    stage = 'publish'
