"""
Shared pytest fixtures for blog publisher tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path
from unittest.mock import MagicMock, patch

# Project root for finding the Cloud Function module
PROJECT_ROOT = Path(__file__).parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from shared.config import Settings


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Directory name has a hyphen, so load it under an importable name
_blog_publisher_module = _load_module_from_path(
    'blog_publisher_main',
    PROJECT_ROOT / 'blog-publisher' / 'main.py'
)

BLOG_ID = '1234567890'
IMAGE_B64 = 'iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk'


# ============================================================================
# Module fixtures
# ============================================================================

@pytest.fixture
def publisher():
    """Returns the blog-publisher function module."""
    return _blog_publisher_module


@pytest.fixture
def settings():
    """Settings with every credential present."""
    return Settings(
        gemini_api_key='test-gemini-key',
        openai_api_key='test-openai-key',
        assemblyai_api_key='test-assemblyai-key',
        google_client_id='test-client-id',
        google_client_secret='test-client-secret',
        google_refresh_token='test-refresh-token',
        blogger_blog_id=BLOG_ID,
    )


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST', path='/api/process'):
            self._json = json_data
            self.method = method
            self.path = path
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


# ============================================================================
# External SDK fakes
# ============================================================================

@pytest.fixture
def summary_json():
    """A well-formed summarizer response."""
    return (
        '{"title": "Selic em alta: o que muda para o investidor", '
        '"html": "<h2>Resumo</h2><p>O Copom elevou a Selic.</p>'
        '<ul><li>Revise a renda fixa</li><li>Reavalie dívidas</li><li>Mantenha reserva</li></ul>"}'
    )


@pytest.fixture
def mock_gemini(publisher, summary_json):
    """Patches the Gemini SDK; override generate_content.return_value to change the output."""
    with patch.object(publisher, 'genai') as genai:
        model = genai.GenerativeModel.return_value
        model.generate_content.return_value = MagicMock(text=summary_json)
        yield genai


@pytest.fixture
def mock_openai(publisher):
    """Patches the OpenAI client class used for image generation."""
    with patch.object(publisher, 'OpenAI') as openai_cls:
        client = openai_cls.return_value
        client.images.generate.return_value = MagicMock(
            data=[MagicMock(b64_json=IMAGE_B64)]
        )
        yield openai_cls


@pytest.fixture
def mock_assemblyai(publisher):
    """Patches the AssemblyAI SDK with a completed Portuguese transcript."""
    with patch.object(publisher, 'aai') as aai:
        transcript = MagicMock(
            status='completed',
            text='A taxa Selic subiu meio ponto percentual nesta quarta-feira.',
            error=None,
        )
        aai.TranscriptStatus.error = 'error'
        aai.Transcriber.return_value.transcribe.return_value = transcript
        yield aai


@pytest.fixture
def sample_article_html():
    """A news article page with navigation boilerplate."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Copom eleva Selic | Portal Financeiro</title>
        <script>var tracking = true;</script>
    </head>
    <body>
        <nav><a href="/">Início</a> <a href="/mercados">Mercados</a></nav>
        <article>
            <h1>Copom eleva Selic para 11,25%</h1>
            <p>O Comitê de Política Monetária do Banco Central elevou a taxa básica de juros
            em meio ponto percentual, para 11,25% ao ano, em decisão unânime.</p>
            <p>Segundo o comunicado, a decisão reflete a desancoragem das expectativas de
            inflação e a resiliência da atividade econômica acima do esperado.</p>
            <p>Analistas avaliam que o ciclo de alta deve continuar nas próximas reuniões,
            o que favorece aplicações atreladas ao CDI e encarece o crédito.</p>
        </article>
        <footer>© Portal Financeiro</footer>
    </body>
    </html>
    """
