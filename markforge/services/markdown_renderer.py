# markforge/services/markdown_renderer.py
from __future__ import annotations

import markdown

from markforge.services.code_highlighter import CodeHighlighter
from markforge.services.markdown_ext import MarkForgeExtension
from markforge.services.math_renderer import MathRenderer


class MarkdownRenderer:
    """
    Converts Markdown (with LaTeX math) to an HTML body fragment.

    Math spans are typeset server-side to MathML, so the output needs no
    JavaScript to display. The result is NOT safe to show as-is: pass it through
    ``HtmlSanitizer`` (``RenderPipeline`` does both).
    """

    def __init__(
        self,
        math: MathRenderer | None = None,
        highlighter: CodeHighlighter | None = None,
        *,
        sanitize: bool = True,
    ) -> None:
        self.math = math or MathRenderer()
        self.highlighter = highlighter or CodeHighlighter()
        self.sanitize = sanitize

    def render(self, markdown_text: str) -> str:
        exts = [
            "tables",
            "toc",
            "sane_lists",
            "smarty",
            "footnotes",
            "def_list",
            "abbr",
            MarkForgeExtension(
                math=self.math,
                highlighter=self.highlighter,
                escape_script_blocks=self.sanitize,
            ),
        ]

        # A fresh parser per call keeps renders independent (no stash/footnote carry-over).
        md = markdown.Markdown(extensions=exts, output_format="html")
        return md.convert(markdown_text)
