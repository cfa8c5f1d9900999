"""
Artifacts produced by the pipeline stages. None of them outlive a request.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SummaryArtifact:
    title: str
    html: str


@dataclass(frozen=True)
class ImageArtifact:
    b64_data: str
    mime_type: str = 'image/png'

    @property
    def data_url(self) -> str:
        return f'data:{self.mime_type};base64,{self.b64_data}'


@dataclass(frozen=True)
class PublishResult:
    url: Optional[str] = None
    post_id: Optional[str] = None
