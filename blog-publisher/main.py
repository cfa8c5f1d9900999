"""
Blog Publisher Cloud Function

Turns a piece of content into a published Blogger post for a Brazilian
finance blog.

Responsibilities:
- Normalize the input (raw text, article link, or audio URL) into plain text
- Generate a title and HTML summary with Gemini
- Generate an illustration with the OpenAI Images API
- Publish the post to Blogger (optional, OAuth refresh-token flow)
- Serve the operator form at GET /

Does NOT:
- Store submissions or results
- Retry failed steps (the operator resubmits)
- Schedule posts
"""

import functions_framework
import requests
from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable
import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
import assemblyai as aai
import openai
from openai import OpenAI
import html as html_lib
import io
import json
import logging
import os
import re
import sys
from pathlib import Path

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.artifacts import ImageArtifact, PublishResult, SummaryArtifact
from shared.config import Settings
from shared.errors import (
    AuthError,
    FetchError,
    ImageGenerationError,
    PipelineError,
    PublishError,
    SummarizationError,
    TranscriptionError,
    ValidationError,
)
from shared.submission import (
    LinkSubmission,
    SubmissionRequest,
    TextSubmission,
    VoiceSubmission,
    parse_submission,
)
from shared.summary_utils import parse_summary_response
from shared.title_utils import clean_title

# Configuration (read once, passed explicitly to every step)
SETTINGS = Settings.from_env()


def resolve_log_level(name: str) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    level = getattr(logging, (name or '').strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(
    level=resolve_log_level(SETTINGS.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
HTTP_TIMEOUT = 30
MAX_CONTENT_CHARS = 15000

GOOGLE_TOKEN_URL = 'https://oauth2.googleapis.com/token'
BLOGGER_POSTS_URL = 'https://www.googleapis.com/blogger/v3/blogs/{blog_id}/posts/'

INDEX_HTML_PATH = Path(__file__).parent / 'static' / 'index.html'

JSON_HEADERS = {'Content-Type': 'application/json'}

SYSTEM_INSTRUCTION = 'Você escreve resumos para um blog financeiro brasileiro.'

SUMMARY_PROMPT = """Você é um redator financeiro em PT-BR. Receba o conteúdo a seguir (pode ser transcrição de voz, texto bruto ou notícia) e produza:
- Um título curto e chamativo (<= 70 caracteres)
- Um resumo estruturado e objetivo, com subtítulos quando fizer sentido
- Tom profissional, educativo, sem jargões excessivos
- Inclua 3 a 5 bullet points de insights práticos

Retorne APENAS um JSON com as chaves: title, html. O valor de html deve ser um fragmento HTML (sem <html>, <head> ou <body>). Não inclua código, markdown ou explicações.

CONTEÚDO:
\"\"\"
{content}
\"\"\""""

IMAGE_PROMPT = 'Ilustração editorial minimalista e limpa sobre finanças: {title}. Estilo moderno, cores sóbrias, sem texto.'


# ============================================================================
# Content Normalizer
# ============================================================================

def fetch_url(url: str, what: str) -> requests.Response:
    """
    GET a URL following redirects.

    Args:
        url: URL to fetch
        what: Human-readable name for error messages ('link', 'audio')

    Raises:
        FetchError: timeout, connection failure or non-success status
    """
    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'pt-BR,pt;q=0.9,en;q=0.5',
    }

    try:
        response = requests.get(url, headers=headers, timeout=HTTP_TIMEOUT, allow_redirects=True)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise FetchError(f'Failed to fetch {what}: request timed out') from e
    except requests.exceptions.HTTPError as e:
        raise FetchError(f'Failed to fetch {what}: HTTP error {e.response.status_code}') from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f'Failed to fetch {what}: {e}') from e

    return response


def clean_text(text: str) -> str:
    """Collapse whitespace and cap the length sent to the model."""
    text = re.sub(r'\s+', ' ', text or '').strip()
    return text[:MAX_CONTENT_CHARS]


def extract_body_text(html: str) -> str:
    """Visible text of the page body, without scripts and styles."""
    soup = BeautifulSoup(html, 'html.parser')
    for element in soup.find_all(['script', 'style', 'noscript', 'template']):
        element.decompose()

    body = soup.find('body') or soup
    return body.get_text(separator=' ', strip=True)


def extract_article_text(html: str, url: str = None) -> str:
    """
    Extract the readable article text from a page.

    Uses the readability heuristic first; falls back to the full body text
    when it finds nothing.
    """
    if not html or not html.strip():
        return ''

    article_text = ''
    try:
        article_html = Document(html, url=url).summary(html_partial=True)
        article_text = BeautifulSoup(article_html, 'html.parser').get_text(separator=' ', strip=True)
    except Unparseable as e:
        logger.warning(f"Readability could not parse {url}: {e}")

    if article_text.strip():
        return clean_text(article_text)

    return clean_text(extract_body_text(html))


def decode_html(response: requests.Response) -> str:
    """
    Page text, sniffing the encoding when the Content-Type header has no charset.

    requests falls back to ISO-8859-1 for text/html without a charset, which
    garbles UTF-8 pages that only declare it in a <meta> tag.
    """
    if 'charset' not in response.headers.get('Content-Type', '').lower():
        response.encoding = response.apparent_encoding
    return response.text


def fetch_text_from_link(url: str) -> str:
    """Fetch an article and return its readable text."""
    response = fetch_url(url, 'link')
    text = extract_article_text(decode_html(response), url=response.url or url)

    if not text:
        raise FetchError(f'No readable content found at {url}')

    return text


def transcribe_audio(audio: bytes, settings: Settings) -> str:
    """Transcribe Portuguese audio bytes with AssemblyAI."""
    settings.require('assemblyai_api_key')

    aai.settings.api_key = settings.assemblyai_api_key
    config = aai.TranscriptionConfig(
        language_code='pt',
        punctuate=True,
        format_text=True,
    )

    try:
        transcriber = aai.Transcriber(config=config)
        transcript = transcriber.transcribe(io.BytesIO(audio))
    except Exception as e:
        raise TranscriptionError(f'Transcription failed: {e}') from e

    if transcript.status == aai.TranscriptStatus.error:
        raise TranscriptionError(f'Transcription failed: {transcript.error}')

    text = (transcript.text or '').strip()
    if not text:
        raise TranscriptionError('Transcription returned no text')

    return text


def transcribe_from_url(voice_url: str, settings: Settings) -> str:
    """Download an audio file and transcribe it."""
    response = fetch_url(voice_url, 'audio')
    logger.info(f"Downloaded {len(response.content)} bytes of audio")
    return transcribe_audio(response.content, settings)


def normalize(submission: SubmissionRequest, settings: Settings) -> str:
    """
    Turn any input variant into plain text.

    Raises:
        ValidationError: empty text payload
        FetchError: link or audio could not be fetched
        TranscriptionError: speech-to-text failed
    """
    source = submission.source

    if isinstance(source, TextSubmission):
        if not source.text.strip():
            raise ValidationError('Missing required field: text')
        return source.text

    if isinstance(source, LinkSubmission):
        return fetch_text_from_link(source.link)

    if isinstance(source, VoiceSubmission):
        return clean_text(transcribe_from_url(source.voice_url, settings))

    raise ValidationError(f'Unsupported submission type: {type(source).__name__}')


# ============================================================================
# Summarizer
# ============================================================================

def summarize(content: str, settings: Settings) -> SummaryArtifact:
    """
    Generate a title and HTML summary in Brazilian Portuguese using Gemini.

    Raises:
        ConfigError: GEMINI_API_KEY not configured
        SummarizationError: model call failed or returned unusable JSON
    """
    settings.require('gemini_api_key')

    genai.configure(api_key=settings.gemini_api_key)
    model = genai.GenerativeModel(
        settings.gemini_model,
        system_instruction=SYSTEM_INSTRUCTION,
        generation_config=genai.GenerationConfig(
            temperature=0.5,
            response_mime_type='application/json',
        ),
    )

    try:
        response = model.generate_content(SUMMARY_PROMPT.format(content=content))
        response_text = response.text
    except google_exceptions.GoogleAPIError as e:
        raise SummarizationError(f'Gemini API error: {e}') from e
    except ValueError as e:
        # response.text raises when the candidate was blocked or is empty
        raise SummarizationError(f'Gemini returned no usable text: {e}') from e

    summary = parse_summary_response(response_text)

    title, warnings = clean_title(summary.title)
    if not title:
        raise SummarizationError('Model response has an empty title')

    for warning in warnings:
        logger.warning(f"Generated title '{title}': {warning}")

    return SummaryArtifact(title=title, html=summary.html)


# ============================================================================
# Illustrator
# ============================================================================

def illustrate(title: str, settings: Settings) -> ImageArtifact:
    """
    Generate a square editorial illustration for the title.

    Raises:
        ConfigError: OPENAI_API_KEY not configured
        ImageGenerationError: API failure or no image payload returned
    """
    settings.require('openai_api_key')

    client = OpenAI(api_key=settings.openai_api_key)
    try:
        response = client.images.generate(
            model=settings.image_model,
            prompt=IMAGE_PROMPT.format(title=title),
            size='1024x1024',
            quality='high',
            n=1,
        )
    except openai.OpenAIError as e:
        raise ImageGenerationError(f'Image generation failed: {e}') from e

    b64_data = response.data[0].b64_json if response.data else None
    if not b64_data:
        raise ImageGenerationError('Image generation returned no image')

    return ImageArtifact(b64_data=b64_data, mime_type='image/png')


def compose_post_html(title: str, image: ImageArtifact, summary_html: str) -> str:
    """Post body: the illustration centred above the summary."""
    return (
        '<div style="text-align:center;margin:0 0 16px 0">'
        f'<img src="{image.data_url}" alt="{html_lib.escape(title, quote=True)}" '
        'style="max-width:100%;height:auto" />'
        '</div>\n'
        f'{summary_html}'
    )


# ============================================================================
# Publisher
# ============================================================================

def _json_or_empty(response: requests.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def get_google_access_token(settings: Settings) -> str:
    """
    Exchange the long-lived refresh token for an access token.

    Raises:
        ConfigError: client id, client secret or refresh token missing
        AuthError: the token endpoint rejected the exchange
    """
    settings.require('google_client_id', 'google_client_secret', 'google_refresh_token')

    try:
        response = requests.post(
            GOOGLE_TOKEN_URL,
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            data={
                'client_id': settings.google_client_id,
                'client_secret': settings.google_client_secret,
                'refresh_token': settings.google_refresh_token,
                'grant_type': 'refresh_token',
            },
            timeout=HTTP_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        raise AuthError(f'OAuth error: {e}') from e

    data = _json_or_empty(response)
    if not response.ok:
        raise AuthError(f"OAuth error: {data.get('error') or response.status_code}")

    access_token = data.get('access_token')
    if not access_token:
        raise AuthError('OAuth error: no access_token in response')

    return access_token


def create_blogger_post(title: str, content_html: str, access_token: str, blog_id: str) -> PublishResult:
    """
    Create an immediately published (non-draft) Blogger post.

    Raises:
        PublishError: Blogger rejected the request
    """
    try:
        response = requests.post(
            BLOGGER_POSTS_URL.format(blog_id=blog_id),
            params={'isDraft': 'false', 'fetchImages': 'true', 'revert': 'false'},
            headers={
                'Authorization': f'Bearer {access_token}',
                'Content-Type': 'application/json',
            },
            json={
                'kind': 'blogger#post',
                'title': title,
                'content': content_html,
            },
            timeout=HTTP_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        raise PublishError(f'Blogger error: {e}') from e

    data = _json_or_empty(response)
    if not response.ok:
        error = data.get('error')
        message = error.get('message') if isinstance(error, dict) else None
        raise PublishError(f'Blogger error: {message or response.status_code}')

    return PublishResult(url=data.get('url'), post_id=data.get('id'))


def publish(title: str, content_html: str, settings: Settings) -> PublishResult:
    """Token exchange followed by post creation."""
    settings.require('blogger_blog_id')
    access_token = get_google_access_token(settings)
    return create_blogger_post(title, content_html, access_token, settings.blogger_blog_id)


# ============================================================================
# Request Orchestrator
# ============================================================================

def run_pipeline(submission: SubmissionRequest, settings: Settings) -> dict:
    """
    Normalize -> Summarize -> Illustrate -> (Publish) for one submission.

    Returns the response envelope. Any PipelineError aborts the run.
    """
    variant = submission.source.kind

    logger.info(f"Normalizing {variant} submission")
    content = normalize(submission, settings)

    logger.info(f"Summarizing {len(content)} characters")
    summary = summarize(content, settings)

    logger.info(f"Generating illustration for '{summary.title}'")
    image = illustrate(summary.title, settings)

    post_html = compose_post_html(summary.title, image, summary.html)

    envelope = {
        'title': summary.title,
        'html': post_html,
        'imageDataUrl': image.data_url,
    }

    if submission.publish:
        logger.info("Publishing to Blogger")
        result = publish(summary.title, post_html, settings)
        logger.info(f"Published post {result.post_id}: {result.url}")
        if result.url:
            envelope['bloggerPostUrl'] = result.url

    return envelope


def _json_response(payload: dict, status: int, extra_headers: dict = None) -> tuple:
    headers = dict(JSON_HEADERS)
    if extra_headers:
        headers.update(extra_headers)
    return (json.dumps(payload, ensure_ascii=False), status, headers)


def render_index() -> tuple:
    """The operator form."""
    return (INDEX_HTML_PATH.read_text(encoding='utf-8'), 200, {'Content-Type': 'text/html; charset=utf-8'})


def handle_process(request, settings: Settings) -> tuple:
    """POST /api/process"""
    if request.method != 'POST':
        return _json_response({'error': 'Method not allowed'}, 405, {'Allow': 'POST'})

    try:
        submission = parse_submission(request.get_json(silent=True))
        envelope = run_pipeline(submission, settings)
        return _json_response(envelope, 200)

    except ValidationError as e:
        logger.info(f"Rejected request: {e.message}")
        return _json_response({'error': e.message}, 400)

    except PipelineError as e:
        logger.error(f"Pipeline failed at {e.stage}: {e.message}")
        return _json_response({'error': e.message}, 500)

    except Exception:
        logger.exception("Unexpected error while processing submission")
        return _json_response({'error': 'Internal error'}, 500)


def handle_request(request, settings: Settings) -> tuple:
    """Route a request to the form or the processing endpoint."""
    path = (request.path or '/').rstrip('/') or '/'

    if path == '/api/process':
        return handle_process(request, settings)

    if path == '/' and request.method in ('GET', 'HEAD'):
        return render_index()

    return _json_response({'error': 'Not found'}, 404)


@functions_framework.http
def process(request):
    """
    Main Cloud Function entry point.

    POST /api/process expects JSON:
    {
        "type": "text" | "link" | "voice",
        "text": "...",          # type == "text"
        "link": "https://...",  # type == "link"
        "voiceUrl": "https://...",  # type == "voice"
        "postToBlogger": true
    }
    """
    return handle_request(request, SETTINGS)
