APP_ORG = "MarkForge"
APP_NAME = "MarkForge"

APP_VERSION = "0.1.0"
ABOUT_TEXT = (
    f"{APP_NAME} v{APP_VERSION}\n\n"
    "A lightweight Markdown editor with preview and export capabilities."
)

DEFAULT_MATH_STYLESHEET = "https://cdn.jsdelivr.net/npm/katex@0.16.8/dist/katex.min.css"

CSS_PREVIEW = """
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
  line-height: 1.6; color: #24292e; background-color: #fff; max-width: 800px; margin: 0 auto; padding: 20px; }
h1, h2, h3, h4, h5, h6 { margin-top: 24px; margin-bottom: 16px; font-weight: 600; line-height: 1.25; }
h1, h2 { padding-bottom: .3em; border-bottom: 1px solid #eaecef; }
h1 { font-size: 2em; } h2 { font-size: 1.5em; } h3 { font-size: 1.25em; } h6 { color: #6a737d; }
p, blockquote, ul, ol, dl, table, pre { margin-top: 0; margin-bottom: 16px; }
code { padding: .2em .4em; font-size: 85%; background-color: rgba(27, 31, 35, .05); border-radius: 3px;
  font-family: "SF Mono", Monaco, "Cascadia Code", "Roboto Mono", Consolas, "Courier New", monospace; }
pre { padding: 16px; overflow: auto; font-size: 85%; line-height: 1.45; background-color: #f6f8fa;
  border: 1px solid #e1e4e8; border-radius: 3px; }
pre code { padding: 0; font-size: 100%; white-space: pre; background: transparent; }
blockquote { padding: 0 1em; color: #6a737d; border-left: .25em solid #dfe2e5; margin: 0 0 16px 0; }
table { border-collapse: collapse; display: block; width: 100%; overflow: auto; }
th, td { padding: 6px 13px; border: 1px solid #dfe2e5; }
th { font-weight: 600; background-color: #f6f8fa; }
tr:nth-child(2n) { background-color: #f6f8fa; }
img { max-width: 100%; }
hr { height: .25em; padding: 0; margin: 24px 0; background-color: #e1e4e8; border: 0; }
ul, ol { padding-left: 2em; }
a { color: #0366d6; text-decoration: none; } a:hover { text-decoration: underline; }
.math-display { margin: 1.5em 0; text-align: center; overflow-x: auto; }
.math-error { background: #ffeef0; border: 1px solid #f97583; border-radius: 3px; padding: 2px 6px;
  font-family: "SF Mono", Monaco, Consolas, "Courier New", monospace; font-size: .9em; }
div.math-error { display: block; padding: 8px 12px; margin: 1em 0; }
"""

HTML_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1.0"/>
<meta http-equiv="Content-Security-Policy" content="default-src 'self'; img-src 'self' https: data:; style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; font-src 'self' https://cdn.jsdelivr.net;"/>
<title>{title}</title>
<link rel="stylesheet" href="{math_stylesheet}"/>
<style>{css}</style>
</head>
<body>
{body}
</body>
</html>
"""

MARKDOWN_OPEN_FILTER = "Markdown (*.md *.markdown);;All files (*)"
MARKDOWN_SAVE_FILTER = "Markdown (*.md *.markdown);;All files (*)"

SETTINGS_GEOMETRY = "window/geometry"
SETTINGS_SPLITTER = "window/splitter"
SETTINGS_RECENTS = "file/recent"
MAX_RECENTS = 8

WELCOME_TEXT = r"""# Welcome to MarkForge

A Markdown editor with live preview, LaTeX math and export to HTML and PDF.

## Math

Inline math such as $E = mc^2$ or $\frac{a}{b}$ sits inside a sentence.
Display math gets its own block:

$$
\int_{-\infty}^{\infty} e^{-x^2} dx = \sqrt{\pi}
$$

```math
\sum_{n=1}^{\infty} \frac{1}{n^2} = \frac{\pi^2}{6}
```

## Code

```python
def greet(name: str) -> str:
    return f"Hello, {name}!"
```

## Tables

| Feature           | Status |
|-------------------|--------|
| Live preview      | yes    |
| LaTeX             | yes    |
| HTML & PDF export | yes    |

> Start typing on the left; the preview follows.
"""
