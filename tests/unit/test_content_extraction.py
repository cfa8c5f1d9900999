"""
Unit tests for the content normalizer helpers in blog-publisher.

Tests pure functions that don't require external API calls.
"""

import pytest
from unittest.mock import patch

from shared.artifacts import ImageArtifact


class TestExtractArticleText:
    """Tests for extract_article_text()"""

    def test_extracts_article_body(self, publisher, sample_article_html):
        text = publisher.extract_article_text(sample_article_html, url='https://example.com/selic')
        assert 'Comitê de Política Monetária' in text
        assert 'tracking' not in text

    def test_drops_navigation(self, publisher, sample_article_html):
        text = publisher.extract_article_text(sample_article_html, url='https://example.com/selic')
        assert 'Mercados' not in text

    def test_collapses_whitespace(self, publisher, sample_article_html):
        text = publisher.extract_article_text(sample_article_html)
        assert '\n' not in text
        assert '  ' not in text

    def test_falls_back_to_body_text_when_readability_is_empty(self, publisher):
        html = "<html><body><div>Dólar fecha em queda</div><script>x()</script></body></html>"
        with patch.object(publisher, 'Document') as document:
            document.return_value.summary.return_value = '<div></div>'
            text = publisher.extract_article_text(html)
        assert text == 'Dólar fecha em queda'

    def test_falls_back_when_readability_cannot_parse(self, publisher):
        html = "<html><body><p>Ibovespa sobe 2%</p></body></html>"
        with patch.object(publisher, 'Document') as document:
            document.return_value.summary.side_effect = publisher.Unparseable('broken')
            text = publisher.extract_article_text(html)
        assert text == 'Ibovespa sobe 2%'

    @pytest.mark.parametrize("html", ['', '   ', None])
    def test_empty_html(self, publisher, html):
        assert publisher.extract_article_text(html) == ''


class TestExtractBodyText:
    """Tests for extract_body_text()"""

    def test_removes_scripts_and_styles(self, publisher):
        html = """
        <html><head><style>p {color: red}</style></head>
        <body><p>Renda fixa</p><script>track()</script><noscript>ative o JS</noscript></body></html>
        """
        assert publisher.extract_body_text(html) == 'Renda fixa'

    def test_document_without_body(self, publisher):
        assert publisher.extract_body_text('<p>Fragmento</p>') == 'Fragmento'


class TestCleanText:
    """Tests for clean_text()"""

    def test_collapses_whitespace(self, publisher):
        assert publisher.clean_text("  a\n\n b\t c ") == 'a b c'

    def test_caps_length(self, publisher):
        assert len(publisher.clean_text('x' * 50000)) == publisher.MAX_CONTENT_CHARS

    def test_none(self, publisher):
        assert publisher.clean_text(None) == ''


class TestComposePostHtml:
    """Tests for compose_post_html()"""

    def test_image_precedes_summary(self, publisher):
        image = ImageArtifact(b64_data='QUJD')
        html = publisher.compose_post_html('Selic', image, '<p>Resumo</p>')
        assert html.index('<img') < html.index('<p>Resumo</p>')
        assert 'src="data:image/png;base64,QUJD"' in html

    def test_title_escaped_in_alt(self, publisher):
        image = ImageArtifact(b64_data='QUJD')
        html = publisher.compose_post_html('Juros "altos" & <dívida>', image, '<p>x</p>')
        assert 'alt="Juros &quot;altos&quot; &amp; &lt;dívida&gt;"' in html


class TestImageArtifact:
    """Tests for ImageArtifact.data_url"""

    def test_data_url(self):
        assert ImageArtifact(b64_data='QUJD').data_url == 'data:image/png;base64,QUJD'

    def test_custom_mime_type(self):
        assert ImageArtifact(b64_data='QUJD', mime_type='image/webp').data_url.startswith('data:image/webp;')
