"""
Environment configuration for the blog publisher.

Values are read once when the function module is imported and frozen into a
Settings instance that is passed explicitly to every pipeline step. Missing
values are not an error at startup; each step calls require() for the keys it
needs, so a missing key only fails the request that actually uses it.
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_GEMINI_MODEL = 'gemini-2.0-flash'
DEFAULT_IMAGE_MODEL = 'gpt-image-1'

# Field name -> environment variable
ENV_VARS = {
    'gemini_api_key': 'GEMINI_API_KEY',
    'openai_api_key': 'OPENAI_API_KEY',
    'assemblyai_api_key': 'ASSEMBLYAI_API_KEY',
    'google_client_id': 'GOOGLE_CLIENT_ID',
    'google_client_secret': 'GOOGLE_CLIENT_SECRET',
    'google_refresh_token': 'GOOGLE_REFRESH_TOKEN',
    'blogger_blog_id': 'BLOGGER_BLOG_ID',
    'gemini_model': 'GEMINI_MODEL',
    'image_model': 'OPENAI_IMAGE_MODEL',
    'log_level': 'LOG_LEVEL',
}


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    assemblyai_api_key: Optional[str] = None
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_refresh_token: Optional[str] = None
    blogger_blog_id: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Build settings from environment variables (empty strings count as unset)."""
        if environ is None:
            environ = os.environ

        values = {}
        for field in fields(cls):
            raw = environ.get(ENV_VARS[field.name], '').strip()
            if raw:
                values[field.name] = raw
        return cls(**values)

    def require(self, *names: str) -> None:
        """
        Raise ConfigError naming every missing setting.

        Args:
            names: Settings field names, e.g. 'gemini_api_key'
        """
        missing = [ENV_VARS[name] for name in names if not getattr(self, name)]
        if missing:
            raise ConfigError(f"Missing environment variables: {', '.join(missing)}")
