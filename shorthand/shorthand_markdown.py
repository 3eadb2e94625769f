"""
Markdown to HTML rendering. Kept behind one function so the markdown
library can be swapped without touching the operators.
"""
from typing import Optional, Sequence

import markdown

DEFAULT_EXTENSIONS = ("tables", "fenced_code", "sane_lists")


def markdown_to_html(src: str, extensions: Optional[Sequence[str]] = None) -> str:
    exts = list(DEFAULT_EXTENSIONS if extensions is None else extensions)
    return markdown.markdown(src, extensions=exts, output_format="html")
