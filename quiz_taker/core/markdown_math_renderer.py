"""Markdown + LaTeX rendering helpers shared by the Qt and web widgets.

Architecture note:
    Question text is converted to HTML once per view and MathJax typesets the
    formulas at display time, both inside QWebEngineView and in the browser.
    Option texts are rendered inline so a formula in an option does not get
    wrapped in its own paragraph.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)

MATHJAX_HEAD = (
    "<script>\n"
    "  window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, "
    "svg: { fontCache: 'global' } };\n"
    "</script>\n"
    f"<script defer src=\"{_MATHJAX_SCRIPT}\"></script>"
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

        sanitized = markdown_text.strip() or ""
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line of markdown without the surrounding paragraph."""

        return self._markdown.renderInline(markdown_text.strip())

    def wrap_with_mathjax(
        self, body_html: str, title: str = "QuizTaker", font_size: int = 14, extra_css: str = ""
    ) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{title}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      {extra_css}
    </style>
    {MATHJAX_HEAD}
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(self, markdown_text: str, title: str = "QuizTaker", font_size: int = 14) -> str:
        """Convenience wrapper to render markdown and embed MathJax."""

        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title, font_size=font_size)


# MarkdownIt renders are read-only, so one instance serves every thread.
renderer = MarkdownMathRenderer()
