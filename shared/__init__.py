"""Shared utilities for the blog publisher."""

from .artifacts import (
    ImageArtifact,
    PublishResult,
    SummaryArtifact,
)

from .config import (
    Settings,
)

from .errors import (
    AuthError,
    BlogPublisherError,
    ConfigError,
    FetchError,
    ImageGenerationError,
    PipelineError,
    PublishError,
    SummarizationError,
    TranscriptionError,
    ValidationError,
)

from .submission import (
    LinkSubmission,
    SubmissionRequest,
    TextSubmission,
    VoiceSubmission,
    parse_submission,
)

from .summary_utils import (
    REQUIRED_SUMMARY_KEYS,
    parse_summary_response,
)

from .title_utils import (
    MAX_TITLE_LENGTH,
    clean_title,
    sanitize_title,
    title_warnings,
    truncate_title,
)

__all__ = [
    # Artifacts
    'ImageArtifact',
    'PublishResult',
    'SummaryArtifact',
    # Configuration
    'Settings',
    # Errors
    'AuthError',
    'BlogPublisherError',
    'ConfigError',
    'FetchError',
    'ImageGenerationError',
    'PipelineError',
    'PublishError',
    'SummarizationError',
    'TranscriptionError',
    'ValidationError',
    # Submissions
    'LinkSubmission',
    'SubmissionRequest',
    'TextSubmission',
    'VoiceSubmission',
    'parse_submission',
    # Summary decoding
    'REQUIRED_SUMMARY_KEYS',
    'parse_summary_response',
    # Title utilities
    'MAX_TITLE_LENGTH',
    'clean_title',
    'sanitize_title',
    'title_warnings',
    'truncate_title',
]
