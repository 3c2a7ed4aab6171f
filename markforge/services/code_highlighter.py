from __future__ import annotations

import html

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

CSS_CLASS = "hljs"


class CodeHighlighter:
    """
    Pygments highlighting for code blocks.

    Lexer resolution: the explicit language tag if Pygments knows it, else a guess
    from the source (when ``guess_lang`` is on), else plain escaped text.
    """

    def __init__(self, style: str = "default", guess_lang: bool = True) -> None:
        self.guess_lang = guess_lang
        self._formatter = HtmlFormatter(nowrap=True, style=style)

    def highlight_block(self, code: str, lang: str | None = None) -> str:
        inner, resolved = self._highlight(code, lang, allow_guess=self.guess_lang)
        return f"<pre><code{_class_attr(resolved)}>{inner}</code></pre>"

    def highlight_inline(self, code: str, lang: str | None = None) -> str:
        # Short inline spans make for poor guesses, so only explicit tags count.
        inner, resolved = self._highlight(code, lang, allow_guess=False)
        inner = inner.rstrip("\n")
        return f"<code{_class_attr(resolved)}>{inner}</code>"

    def stylesheet(self, selector: str = f".{CSS_CLASS}") -> str:
        return self._formatter.get_style_defs(selector)

    # -------------------- helpers --------------------

    def resolve_lexer(self, code: str, lang: str | None, *, allow_guess: bool) -> Lexer | None:
        if lang:
            try:
                return get_lexer_by_name(lang)
            except ClassNotFound:
                pass
        if allow_guess:
            try:
                lexer = guess_lexer(code)
            except ClassNotFound:
                return None
            if not isinstance(lexer, TextLexer):
                return lexer
        return None

    def _highlight(self, code: str, lang: str | None, *, allow_guess: bool) -> tuple[str, str | None]:
        lexer = self.resolve_lexer(code, lang, allow_guess=allow_guess)
        if lexer is None:
            return html.escape(code, quote=False), None
        name = lang.lower() if lang and lang.lower() in lexer.aliases else _lexer_name(lexer)
        return highlight(code, lexer, self._formatter), name


def _lexer_name(lexer: Lexer) -> str:
    return lexer.aliases[0] if lexer.aliases else lexer.name.lower()


def _class_attr(lang: str | None) -> str:
    if not lang:
        return f' class="{CSS_CLASS}"'
    return f' class="{CSS_CLASS} language-{html.escape(lang)}"'
