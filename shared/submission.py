"""
Submission model for POST /api/process.

The wire format is a single object tagged by "type" with variant-specific
optional fields. It is decoded here into one class per variant, each carrying
only its own payload, so the rest of the pipeline never looks at the tag.
"""

from dataclasses import dataclass
from typing import Any, Union

from .errors import ValidationError


@dataclass(frozen=True)
class TextSubmission:
    text: str

    kind = 'text'


@dataclass(frozen=True)
class LinkSubmission:
    link: str

    kind = 'link'


@dataclass(frozen=True)
class VoiceSubmission:
    voice_url: str

    kind = 'voice'


Submission = Union[TextSubmission, LinkSubmission, VoiceSubmission]

# type tag -> (wire field, submission class)
VARIANTS = {
    'text': ('text', TextSubmission),
    'link': ('link', LinkSubmission),
    'voice': ('voiceUrl', VoiceSubmission),
}


@dataclass(frozen=True)
class SubmissionRequest:
    source: Submission
    publish: bool = False


def parse_submission(body: Any) -> SubmissionRequest:
    """
    Validate a decoded JSON body and build a SubmissionRequest.

    Fields belonging to other variants are ignored.

    Raises:
        ValidationError: body is not an object, the type is missing/unknown,
            or the variant's payload field is missing or blank
    """
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    kind = body.get('type')
    if not kind:
        raise ValidationError('Missing required field: type')
    if kind not in VARIANTS:
        raise ValidationError(
            f"Invalid type '{kind}': expected one of {', '.join(sorted(VARIANTS))}"
        )

    field_name, submission_cls = VARIANTS[kind]
    payload = body.get(field_name)
    if not isinstance(payload, str) or not payload.strip():
        raise ValidationError(f'Missing required field: {field_name}')

    # Raw text is used verbatim; URLs are trimmed
    if kind != 'text':
        payload = payload.strip()

    return SubmissionRequest(
        source=submission_cls(payload),
        publish=body.get('postToBlogger') is True,
    )
