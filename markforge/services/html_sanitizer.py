from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

Replacement = Union[str, Callable[["re.Match[str]"], str]]

_FLAGS = re.IGNORECASE | re.DOTALL

# on<word>= attribute, quoted or unquoted value.
_EVENT_ATTR_RE = re.compile(
    r"""\s*\bon\w+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]*)""",
    _FLAGS,
)
# An opening tag (quoted values may contain '>'), possibly unterminated at the end.
_TAG_RE = re.compile(r"""<[a-z](?:"[^"]*"|'[^']*'|[^'">])*>?""", _FLAGS)


def _strip_event_handlers(m: re.Match[str]) -> str:
    return _EVENT_ATTR_RE.sub("", m.group(0))


@dataclass(frozen=True)
class SanitizationRule:
    name: str
    pattern: re.Pattern[str]
    replacement: Replacement = ""

    def apply(self, html: str) -> str:
        return self.pattern.sub(self.replacement, html)


def _rule(name: str, pattern: str, replacement: Replacement = "") -> SanitizationRule:
    return SanitizationRule(name, re.compile(pattern, _FLAGS), replacement)


# Order matters: later rules clean up residue the earlier ones leave behind.
DEFAULT_RULES: tuple[SanitizationRule, ...] = (
    _rule("script-element", r"<script\b[^>]*>.*?</script\s*>"),
    _rule("script-tag", r"</?script\b[^>]*>?"),
    SanitizationRule("event-handler-attr", _TAG_RE, _strip_event_handlers),
    _rule("javascript-scheme", r"javascript:"),
    _rule("data-html-scheme", r"data:text/html"),
    _rule("data-js-scheme", r"data:application/javascript"),
    _rule("frame-element", r"<(iframe|object|embed)\b[^>]*>.*?</\1\s*>"),
    _rule("frame-tag", r"</?(?:iframe|object|embed)\b[^>]*>?"),
    _rule("base-tag", r"<base\b[^>]*>?"),
    _rule("meta-refresh", r"""<meta\b[^>]*http-equiv\s*=\s*["']?\s*refresh\b[^>]*>?"""),
    _rule("link-javascript", r"""<link\b[^>]*href\s*=\s*["']?\s*javascript:[^>]*>?"""),
    _rule("style-element", r"<style\b[^>]*>.*?</style\s*>"),
    _rule("style-tag", r"</?style\b[^>]*>?"),
    _rule(
        "dangerous-url-attr",
        r"""\s*\b(?:href|src)\s*=\s*(?:"\s*(?:javascript:|data:text/html)[^"]*"|"""
        r"""'\s*(?:javascript:|data:text/html)[^']*'|(?:javascript:|data:text/html)[^\s>]*)""",
    ),
)


class HtmlSanitizer:
    """
    Blocklist sanitizer: an ordered chain of regex removals.

    The chain is re-run until the output stops changing. Every rule only deletes
    text, so this terminates, and the result is a fixed point: sanitizing twice
    gives the same output, and a tag re-assembled by one removal
    (``<scr<script></script>ipt>``) is caught on the next round.

    This is not an HTML parser. Markup that browsers parse differently from these
    patterns (entity-encoded schemes, exotic whitespace) is out of reach.
    """

    def __init__(self, rules: tuple[SanitizationRule, ...] = DEFAULT_RULES) -> None:
        self.rules = rules

    def sanitize(self, html: str) -> str:
        previous = None
        while html != previous:
            previous = html
            for rule in self.rules:
                html = rule.apply(html)
        return html
