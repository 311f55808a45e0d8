"""Clipboard text and social share URLs for a composition."""

from __future__ import annotations

import os
from typing import Dict, Optional
from urllib.parse import quote

DEFAULT_APP_URL = "http://localhost:8000/"
TWEET_POEM_CHARS = 180


def build_share_text(poem: str, *, title: Optional[str] = None, inspiration: Optional[str] = None) -> str:
    """Return the text copied to the clipboard and handed to native share."""
    parts = []
    if title:
        parts.append(title)
    if inspiration:
        parts.append(f"Inspiration: {inspiration}")
    parts.append(poem)
    return "\n\n".join(parts)


def twitter_url(poem: str, app_url: str, *, title: Optional[str] = None) -> str:
    text = f'"{title or "A new verse"}" from PhotoPoet:\n\n{poem[:TWEET_POEM_CHARS]}...'
    return f"https://twitter.com/intent/tweet?text={quote(text, safe='')}&url={quote(app_url, safe='')}"


def whatsapp_url(poem: str, *, title: Optional[str] = None) -> str:
    text = f"*{title or 'PhotoPoet Composition'}*\n\n{poem}\n\nShared via PhotoPoet"
    return f"https://wa.me/?text={quote(text, safe='')}"


def facebook_url(app_url: str) -> str:
    return f"https://www.facebook.com/sharer/sharer.php?u={quote(app_url, safe='')}"


def build_share_links(
    poem: str,
    *,
    title: Optional[str] = None,
    inspiration: Optional[str] = None,
    app_url: Optional[str] = None,
) -> Dict[str, object]:
    """Return every share target for a composition.

    The `native` payload is what a client passes to the platform share
    sheet; clients without one fall back to the provider links.
    """
    app_url = app_url or os.getenv("PUBLIC_APP_URL", DEFAULT_APP_URL)
    text = build_share_text(poem, title=title, inspiration=inspiration)
    return {
        "clipboard_text": text,
        "native": {"title": title or "PhotoPoet Poem", "text": text, "url": app_url},
        "links": {
            "twitter": twitter_url(poem, app_url, title=title),
            "facebook": facebook_url(app_url),
            "whatsapp": whatsapp_url(poem, title=title),
        },
    }
