"""
Python-Markdown extension wiring math and code rendering into the parser.

| Processor                   | Registry         | Name                  | Priority |
| --------------------------- | ---------------- | --------------------- | :------: |
| `MathSpanPreprocessor`      | `preprocessors`  | `markforge_math`      | `27`     |
| `FencedCodePreprocessor`    | `preprocessors`  | `fenced_code_block`   | `25`     |
| `InlineCodeProcessor`       | `inlinePatterns` | `backtick`            | `190`    |
| `ScriptBlockPostprocessor`  | `postprocessors` | `markforge_scripts`   | `35`     |

Math spans are rendered before block parsing and kept in the raw HTML stash, so
Markdown never re-reads the generated markup.
"""

from __future__ import annotations

import html
import re
import xml.etree.ElementTree as etree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.extensions.fenced_code import FencedBlockPreprocessor
from markdown.inlinepatterns import BACKTICK_RE, BacktickInlineProcessor
from markdown.postprocessors import Postprocessor
from markdown.preprocessors import Preprocessor

from markforge.services.code_highlighter import CodeHighlighter
from markforge.services.math_renderer import MathRenderer

MATH_FENCE_LANGS = frozenset({"math", "latex"})
INLINE_LANG_PREFIX = "#!"

_ATTR_LANG_RE = re.compile(r"(?:^|\s)\.([\w#.+-]+)")
_SCRIPT_TAG_RE = re.compile(r"\s*<\s*/?\s*script\b", re.IGNORECASE)


class MathSpanPreprocessor(Preprocessor):
    """Render ``$$...$$`` / ``$...$`` spans and stash the markup."""

    def __init__(self, md: Markdown, math: MathRenderer) -> None:
        super().__init__(md)
        self.math = math

    def run(self, lines: list[str]) -> list[str]:
        text = self.math.substitute("\n".join(lines), store=self.md.htmlStash.store)
        return text.split("\n")


class FencedCodePreprocessor(Preprocessor):
    """
    Replacement for the stock fenced-code preprocessor.

    ``math``/``latex`` fences are typeset in display mode; every other fence goes
    through the Pygments highlighter.
    """

    FENCED_BLOCK_RE = FencedBlockPreprocessor.FENCED_BLOCK_RE

    def __init__(self, md: Markdown, math: MathRenderer, highlighter: CodeHighlighter) -> None:
        super().__init__(md)
        self.math = math
        self.highlighter = highlighter

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        index = 0
        while True:
            m = self.FENCED_BLOCK_RE.search(text, index)
            if not m:
                break
            lang = m.group("lang") or _lang_from_attrs(m.group("attrs"))
            code = m.group("code")
            if lang and lang.lower() in MATH_FENCE_LANGS:
                rendered = self.math.render(code, display=True)
            else:
                rendered = self.highlighter.highlight_block(code, lang or None)

            placeholder = self.md.htmlStash.store(rendered)
            text = f"{text[:m.start()]}\n{placeholder}\n{text[m.end():]}"
            index = m.start() + 1 + len(placeholder)
        return text.split("\n")


class InlineCodeProcessor(BacktickInlineProcessor):
    """
    Inline code with two extras:
      - `` `$a^2$` `` renders as inline math
      - `` `#!python len(x)` `` is highlighted with the named language
    """

    def __init__(self, pattern: str, md: Markdown, math: MathRenderer, highlighter: CodeHighlighter):
        super().__init__(pattern)
        self.md = md
        self.math = math
        self.highlighter = highlighter

    def handleMatch(  # type: ignore[override]
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element | str | None, int | None, int | None]:
        if m.group(1):
            return super().handleMatch(m, data)

        begin = m.start(0)
        span = self.find_code_spans(begin, data)
        if span is None:
            return None, None, None
        start, end = span
        raw = data[start:end].strip()
        consumed = end + (start - begin)

        if len(raw) > 2 and raw.startswith("$") and raw.endswith("$"):
            markup = self.math.render(raw[1:-1], display=False)
            return self.md.htmlStash.store(markup), begin, consumed

        if raw.startswith(INLINE_LANG_PREFIX):
            lang, _, code = raw[len(INLINE_LANG_PREFIX) :].partition(" ")
            if lang and code.strip():
                markup = self.highlighter.highlight_inline(code.strip(), lang)
                return self.md.htmlStash.store(markup), begin, consumed

        return super().handleMatch(m, data)


class ScriptBlockPostprocessor(Postprocessor):
    """
    Best-effort: escape stashed raw HTML that opens or closes a ``<script>`` tag.

    Inline tags are stashed one at a time, so ``<script src=x>`` and ``</script>``
    are escaped separately and both stay visible as text. Event handler
    attributes and URL schemes are left to ``HtmlSanitizer``.
    """

    def run(self, text: str) -> str:
        blocks = self.md.htmlStash.rawHtmlBlocks
        for i, block in enumerate(blocks):
            if isinstance(block, str) and _SCRIPT_TAG_RE.match(block):
                blocks[i] = html.escape(block)
        return text


class MarkForgeExtension(Extension):
    def __init__(
        self,
        math: MathRenderer | None = None,
        highlighter: CodeHighlighter | None = None,
        **kwargs,
    ) -> None:
        self.config = {
            "escape_script_blocks": [True, "Escape raw <script> HTML blocks - Default: True"],
        }
        super().__init__(**kwargs)
        self.math = math or MathRenderer()
        self.highlighter = highlighter or CodeHighlighter()

    def extendMarkdown(self, md: Markdown) -> None:
        md.registerExtension(self)
        md.preprocessors.register(MathSpanPreprocessor(md, self.math), "markforge_math", 27)
        md.preprocessors.register(
            FencedCodePreprocessor(md, self.math, self.highlighter), "fenced_code_block", 25
        )
        md.inlinePatterns.register(
            InlineCodeProcessor(BACKTICK_RE, md, self.math, self.highlighter), "backtick", 190
        )
        if self.getConfig("escape_script_blocks"):
            md.postprocessors.register(ScriptBlockPostprocessor(md), "markforge_scripts", 35)


def _lang_from_attrs(attrs: str | None) -> str | None:
    if not attrs:
        return None
    m = _ATTR_LANG_RE.search(attrs)
    return m.group(1) if m else None


def makeExtension(**kwargs):  # pragma: no cover
    return MarkForgeExtension(**kwargs)
