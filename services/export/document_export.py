"""Word-compatible document export for compositions.

The export is an HTML document carrying the Office namespaces, which Word
opens as a `.doc`. It is prefixed with a UTF-8 byte order mark so that
accented text survives the round trip.
"""

from __future__ import annotations

import html
import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote

DOC_MEDIA_TYPE = "application/msword"
DEFAULT_FILENAME = "PhotoPoet-Poem"
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\r\n\t]+')

_DOC_STYLE = """
    body { font-family: 'Georgia', serif; line-height: 1.6; color: #1a1a1a; }
    .header { text-align: center; border-bottom: 2pt solid #064e3b; padding-bottom: 10pt; margin-bottom: 20pt; }
    .title-main { font-size: 28pt; color: #064e3b; margin-bottom: 0; }
    .poem-title { font-size: 22pt; color: #065f46; text-align: center; margin-bottom: 10pt; font-weight: bold; }
    .subtitle { font-size: 12pt; color: #065f46; font-style: italic; }
    .section-title { font-size: 14pt; color: #065f46; font-weight: bold; margin-top: 20pt; border-bottom: 1pt solid #eee; }
    .inspiration-box { background-color: #f0fdf4; border: 1pt solid #c1d4bb; padding: 15pt; margin-top: 10pt; font-style: italic; }
    .poem-content { font-size: 16pt; margin-top: 20pt; white-space: pre-wrap; color: #000; text-align: center; }
    .footer { margin-top: 50pt; text-align: center; font-size: 9pt; color: #9ca3af; border-top: 1pt solid #eee; padding-top: 10pt; }
"""


def format_display_date(value: datetime) -> str:
    """Return dates as e.g. 'October 19, 2026'."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def document_filename(title: Optional[str]) -> str:
    """Return a download filename derived from the poem title."""
    stem = _UNSAFE_FILENAME_CHARS.sub(" ", (title or "").strip()).strip() or DEFAULT_FILENAME
    return f"{stem}.doc"


def content_disposition(filename: str) -> str:
    """Return an attachment header value that survives non-ASCII titles."""
    fallback = filename.encode("ascii", "ignore").decode("ascii").strip()
    if not fallback or fallback.startswith("."):
        fallback = f"{DEFAULT_FILENAME}.doc"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def build_document_html(
    poem: str,
    *,
    title: Optional[str] = None,
    inspiration: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> str:
    """Render the composition as Word-flavoured HTML. All text is escaped."""
    created_at = created_at or datetime.now()
    sections = []
    if title:
        sections.append(f'<div class="poem-title">{html.escape(title)}</div>')
    if inspiration:
        sections.append(
            '<div class="section-title">The Inspiration</div>'
            f'<div class="inspiration-box">&ldquo;{html.escape(inspiration)}&rdquo;</div>'
        )
    sections.append('<div class="section-title">The Composition</div>')
    poem_html = "<br>".join(html.escape(line) for line in poem.split("\n"))
    sections.append(f'<div class="poem-content">{poem_html}</div>')
    body = "\n    ".join(sections)

    return f"""<html xmlns:o='urn:schemas-microsoft-com:office:office' xmlns:w='urn:schemas-microsoft-com:office:word' xmlns='http://www.w3.org/TR/REC-html40'>
<head>
  <meta charset='utf-8'>
  <title>PhotoPoet Composition</title>
  <style>{_DOC_STYLE}</style>
</head>
<body>
  <div class="header">
    <h1 class="title-main">PhotoPoet</h1>
    <p class="subtitle">Where your moments find their voice</p>
  </div>
    {body}
  <div class="footer">Generated with PhotoPoet &bull; {format_display_date(created_at)}</div>
</body>
</html>
"""


def build_document(
    poem: str,
    *,
    title: Optional[str] = None,
    inspiration: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> bytes:
    """Return the downloadable `.doc` bytes (UTF-8 with BOM)."""
    content = build_document_html(poem, title=title, inspiration=inspiration, created_at=created_at)
    return ("\ufeff" + content).encode("utf-8")
