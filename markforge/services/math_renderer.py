from __future__ import annotations

import html
import logging
import re
from typing import Callable

import latex2mathml.converter

logger = logging.getLogger(__name__)

DEFAULT_ERROR_COLOR = "#ff6b6b"

# $$...$$ may span lines; $...$ may not, and must not be empty.
DISPLAY_MATH_RE = re.compile(r"\$\$([\s\S]*?)\$\$")
INLINE_MATH_RE = re.compile(r"\$([^$\n]+?)\$")

# Regions the marker scan never looks inside: fenced code blocks, indented code
# blocks (after a blank line or at the start) and inline code spans.
CODE_REGION_RE = re.compile(
    r"(?P<fence>^[ ]{0,3}(?P<marker>`{3,}|~{3,})[^\n]*\n[\s\S]*?^[ ]{0,3}(?P=marker)[ \t]*$)"
    r"|(?P<indented>(?:\A|(?<=\n\n))(?:(?:[ ]{4}|\t)[^\n]*(?:\n|\Z)(?:[ \t]*\n)*)+)"
    r"|(?P<ticks>`+)(?:(?!\n[ \t]*\n)[\s\S])+?(?<!`)(?P=ticks)(?!`)",
    re.MULTILINE,
)

# An indented block after one of these lines is a list paragraph, not code.
_LIST_LINE_RE = re.compile(r"[ ]{0,3}(?:[*+-]|\d+[.)])[ \t]|[ \t]")

# Display math is a block of its own only with blank lines (or the text edges) around it.
_BLANK_BEFORE_RE = re.compile(r"(?:\A|\n[ \t]*\n)[ \t]*\Z")
_BLANK_AFTER_RE = re.compile(r"[ \t]*(?:\Z|\n[ \t]*(?:\n|\Z))")


class MathRenderer:
    """
    Typesets LaTeX to MathML with latex2mathml.

    ``render`` handles a single expression and never raises: malformed input is
    replaced by a visible, colored ``math-error`` element carrying the message.
    ``substitute`` scans raw document text for ``$$...$$`` and ``$...$`` spans.
    """

    def __init__(self, error_color: str = DEFAULT_ERROR_COLOR) -> None:
        self.error_color = error_color

    # -------------------- single expression --------------------

    def render(self, latex: str, *, display: bool, standalone: bool = True) -> str:
        """
        ``standalone=False`` marks display math that sits inside a paragraph: it is
        wrapped in a block-styled ``<span>`` because a ``<div>`` cannot live in a ``<p>``.
        """
        source = latex.strip()
        try:
            _check_braces(source)
            mathml = latex2mathml.converter.convert(
                source, display="block" if display else "inline"
            )
        except Exception as exc:  # latex2mathml raises a zoo of unrelated exception types
            logger.debug("LaTeX rendering failed for %r: %s", source, exc)
            return self._error_markup(exc, display=display, standalone=standalone)

        if not display:
            return f'<span class="math-inline">{_neutralize(mathml)}</span>'
        if standalone:
            return f'<div class="math-display">{_neutralize(mathml)}</div>'
        return f'<span class="math-display" style="display: block">{_neutralize(mathml)}</span>'

    # -------------------- marker scan --------------------

    def substitute(self, text: str, store: Callable[[str], str] | None = None) -> str:
        """
        Replace every math span in ``text`` with rendered markup.

        Display spans are consumed first, then inline spans in what remains.
        ``store`` receives each rendered fragment and returns the text to insert in
        its place (the Markdown pipeline passes its raw HTML stash here).
        """
        keep = store or (lambda markup: markup)
        out: list[str] = []
        pos = 0
        for m in CODE_REGION_RE.finditer(text):
            if m.group("indented") and _follows_list_line(text, m.start()):
                continue
            out.append(self._substitute_spans(text, pos, m.start(), keep))
            out.append(m.group(0))
            pos = m.end()
        out.append(self._substitute_spans(text, pos, len(text), keep))
        return "".join(out)

    def _substitute_spans(
        self, text: str, start: int, end: int, keep: Callable[[str], str]
    ) -> str:
        chunk = text[start:end]
        if "$" not in chunk:
            return chunk

        # (already rendered, text) pieces; display spans are all rendered before any inline one.
        pieces: list[tuple[bool, str]] = []
        literal = start
        for m in DISPLAY_MATH_RE.finditer(text, start, end):
            if not m.group(1).strip():
                continue
            markup = self.render(
                m.group(1), display=True, standalone=_stands_alone(text, m.start(), m.end())
            )
            pieces.append((False, text[literal : m.start()]))
            pieces.append((True, keep(markup)))
            literal = m.end()
        pieces.append((False, text[literal:end]))

        def inline(m: re.Match[str]) -> str:
            if not m.group(1).strip():
                return m.group(0)
            return keep(self.render(m.group(1), display=False))

        return "".join(
            piece if rendered else INLINE_MATH_RE.sub(inline, piece) for rendered, piece in pieces
        )

    # -------------------- helpers --------------------

    def _error_markup(self, exc: Exception, *, display: bool, standalone: bool = True) -> str:
        message = str(exc).strip() or type(exc).__name__
        message = html.escape(" ".join(message.split()))
        tag = "div" if display and standalone else "span"
        style = f"color: {html.escape(self.error_color)}"
        if display and not standalone:
            style = f"display: block; {style}"
        return (
            f'<{tag} class="math-error" style="{style}">'
            f"LaTeX Error: {_neutralize(message)}</{tag}>"
        )


def _stands_alone(text: str, start: int, end: int) -> bool:
    return bool(_BLANK_BEFORE_RE.search(text, 0, start)) and bool(_BLANK_AFTER_RE.match(text, end))


def _follows_list_line(text: str, start: int) -> bool:
    previous = text[:start].rstrip().rpartition("\n")[2]
    return bool(previous) and bool(_LIST_LINE_RE.match(previous))


def _check_braces(source: str) -> None:
    """latex2mathml silently closes open groups; report them instead."""
    depth = 0
    escaped = False
    for ch in source:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise ValueError("Unexpected '}'")
    if depth:
        raise ValueError("Missing closing brace '}'")


def _neutralize(markup: str) -> str:
    # No bare '$' may survive into text that is scanned again for math markers.
    return markup.replace("$", "&#36;")
