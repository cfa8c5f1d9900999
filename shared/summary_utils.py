"""
Decoding of the summarizer's model output.

The model is asked for a JSON object with exactly two keys, "title" and
"html". Its output is never trusted: anything that is not an object with two
non-empty strings is a SummarizationError.
"""

import json
import re
from typing import Any, Dict

from .artifacts import SummaryArtifact
from .errors import SummarizationError

REQUIRED_SUMMARY_KEYS = ('title', 'html')

# Outermost {...} block, for responses wrapped in ```json fences
_JSON_OBJECT = re.compile(r'\{[\s\S]*\}')


def _load_json_object(response_text: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(response_text)
    except json.JSONDecodeError:
        json_match = _JSON_OBJECT.search(response_text)
        if not json_match:
            raise SummarizationError('Model response is not valid JSON')
        try:
            parsed = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            raise SummarizationError(f'Model response is not valid JSON: {e.msg}') from e

    if not isinstance(parsed, dict):
        raise SummarizationError('Model response is not a JSON object')

    return parsed


def parse_summary_response(response_text: str) -> SummaryArtifact:
    """
    Parse the model's JSON output into a SummaryArtifact.

    Args:
        response_text: Raw text returned by the model

    Raises:
        SummarizationError: not valid JSON, not an object, or a required key
            is missing, not a string, or blank
    """
    if not response_text or not response_text.strip():
        raise SummarizationError('Model returned an empty response')

    parsed = _load_json_object(response_text.strip())

    missing = [
        key for key in REQUIRED_SUMMARY_KEYS
        if not isinstance(parsed.get(key), str) or not parsed[key].strip()
    ]
    if missing:
        raise SummarizationError(
            f"Model response is missing required keys: {', '.join(missing)}"
        )

    return SummaryArtifact(title=parsed['title'].strip(), html=parsed['html'].strip())
