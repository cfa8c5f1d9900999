"""
Title processing utilities for the blog publisher.

Post titles are limited to 70 characters. The model is asked to respect the
limit but is not trusted to; titles that exceed it are:
1. Truncated at word boundaries (not mid-word)
2. Reported as warnings so the operator can see it in the logs
"""

import re
from typing import List, Tuple

# Title limit for published posts
MAX_TITLE_LENGTH = 70

# Portuguese function words a cut-off title tends to end with
INCOMPLETE_ENDINGS = (
    ' e', ' ou', ' de', ' da', ' do', ' das', ' dos', ' em', ' no', ' na',
    ' o', ' a', ' os', ' as', ' um', ' uma', ' para', ' com', ' por',
)


def truncate_title(title: str, max_length: int = MAX_TITLE_LENGTH) -> Tuple[str, bool]:
    """
    Truncate title at word boundary, not mid-word.

    Args:
        title: The title to truncate
        max_length: Maximum length (default 70)

    Returns:
        Tuple of (truncated_title, was_truncated)

    Examples:
        >>> truncate_title("Juros em alta", 70)
        ('Juros em alta', False)

        >>> truncate_title("Como a alta dos juros afeta sua carteira de investimentos", 20)
        ('Como a alta dos', True)
    """
    if not title:
        return ('', False)

    title = ' '.join(title.split())

    if len(title) <= max_length:
        return (title, False)

    truncated = title[:max_length]
    last_space = truncated.rfind(' ')

    # Single long word: hard cut with ellipsis
    if last_space == -1:
        return (title[:max_length - 3] + '...', True)

    return (truncated[:last_space].rstrip(' ,;:-'), True)


def sanitize_title(title: str) -> str:
    """
    Remove control characters and surrounding quotes, normalize whitespace.

    Accented letters are kept.
    """
    if not title:
        return ''

    title = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', title)
    title = ' '.join(title.split())

    # Models sometimes wrap the title in quotes
    if len(title) >= 2 and title[0] == title[-1] and title[0] in '"\'':
        title = title[1:-1].strip()

    return title


def title_warnings(title: str) -> List[str]:
    """Return quality warnings for a (sanitized, truncated) title."""
    warnings = []

    if not any(c.isalnum() for c in title):
        warnings.append("Title contains no alphanumeric characters")

    if title.isupper() and len(title) > 5:
        warnings.append("Title is all uppercase")

    lower_title = title.lower()
    for ending in INCOMPLETE_ENDINGS:
        if lower_title.endswith(ending):
            warnings.append(f"Title ends with incomplete word '{ending.strip()}'")
            break

    return warnings


def clean_title(title: str) -> Tuple[str, List[str]]:
    """
    Sanitize and truncate a generated title.

    Returns:
        Tuple of (clean_title, warnings)
    """
    title, was_truncated = truncate_title(sanitize_title(title))

    warnings = []
    if was_truncated:
        warnings.append(f"Title truncated to {MAX_TITLE_LENGTH} characters")
    warnings.extend(title_warnings(title))

    return title, warnings
