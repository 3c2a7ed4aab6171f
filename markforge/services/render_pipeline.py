from __future__ import annotations

import html

from markforge.domain.interfaces import IMarkdownRenderer
from markforge.services.html_sanitizer import HtmlSanitizer
from markforge.services.markdown_renderer import MarkdownRenderer
from markforge.utils.constants import CSS_PREVIEW, DEFAULT_MATH_STYLESHEET, HTML_TEMPLATE


class RenderPipeline(IMarkdownRenderer):
    """
    math -> Markdown -> sanitizer, recomputed from scratch on every call.

    ``to_body`` gives the sanitized fragment; ``to_html`` wraps it in the
    standalone document used by both the preview and the exporters.
    """

    def __init__(
        self,
        renderer: MarkdownRenderer | None = None,
        sanitizer: HtmlSanitizer | None = None,
        *,
        math_stylesheet: str = DEFAULT_MATH_STYLESHEET,
    ) -> None:
        self.renderer = renderer or MarkdownRenderer()
        self.sanitizer = sanitizer or HtmlSanitizer()
        self.math_stylesheet = math_stylesheet

    def to_body(self, markdown_text: str) -> str:
        return self.sanitizer.sanitize(self.renderer.render(markdown_text))

    def to_html(self, markdown_text: str, title: str = "Untitled") -> str:
        css = CSS_PREVIEW + self.renderer.highlighter.stylesheet()
        return HTML_TEMPLATE.format(
            title=html.escape(title),
            math_stylesheet=html.escape(self.math_stylesheet),
            css=css,
            body=self.to_body(markdown_text),
        )
