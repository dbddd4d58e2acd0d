"""HTML rendering of quote bodies.

The quote body is the only user text rendered through here. It is escaped first, and
only the image, link and line-break tags built below are emitted unescaped.
"""

import re
from urllib.parse import urlparse

from markupsafe import Markup, escape

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif")

URL_RE = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)
TRAILING_PUNCTUATION = ".,;:!?)"
NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def is_image_url(text: str) -> bool:
    text = text.strip()
    if not text or any(c.isspace() for c in text):
        return False
    try:
        parsed = urlparse(text)
    except ValueError:
        return False
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        return False
    return parsed.path.lower().endswith(IMAGE_EXTENSIONS)


def autolink(text: str) -> Markup:
    """Escape ``text`` and wrap every http(s) URL in an anchor."""
    out = Markup("")
    pos = 0
    for match in URL_RE.finditer(text):
        out += escape(text[pos : match.start()])
        url = match.group(0).rstrip(TRAILING_PUNCTUATION)
        out += Markup('<a href="{0}" rel="nofollow noopener" target="_blank">{0}</a>').format(url)
        pos = match.start() + len(url)
    out += escape(text[pos:])
    return out


def quote_html(text: str) -> Markup:
    if is_image_url(text):
        return Markup('<img src="{0}" class="img img-fluid" style="max-height: 400px;">').format(text.strip())

    lines = NEWLINE_RE.split(text)
    return Markup("<br>").join(autolink(line) for line in lines)
