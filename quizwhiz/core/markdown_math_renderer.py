"""Markdown + LaTeX rendering helpers shared by the Qt player and the share server.

Architecture note:
    Question text is authored as markdown and may contain ``$...$`` math. The
    renderer converts it to HTML once and relies on MathJax at display time,
    so the desktop player (QWebEngineView) and the browser preview served by
    the share server render identically. Raw HTML in question text is
    disabled by default because quizzes can be imported from other people.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from quizwhiz.constants.about import APP_NAME

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def wrap_with_mathjax(
        self,
        body_html: str,
        title: str = APP_NAME,
        font_size: int = 18,
        text_color: str = "#f5f7ff",
    ) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: {text_color}; }}
      .question-html {{ font-size: {font_size}px; line-height: 1.5; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(
        self,
        markdown_text: str,
        title: str = APP_NAME,
        font_size: int = 18,
        text_color: str = "#f5f7ff",
    ) -> str:
        """Convenience wrapper to render markdown and embed MathJax."""

        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title, font_size=font_size, text_color=text_color)


renderer = MarkdownMathRenderer()
# Shared instance; MarkdownIt renders are read-only so the Qt thread and the
# share-server thread can both use it.
