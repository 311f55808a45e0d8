from datetime import datetime
from urllib.parse import parse_qs, urlparse

from services.export.document_export import (
    build_document,
    build_document_html,
    content_disposition,
    document_filename,
    format_display_date,
)
from services.export.share_links import build_share_links, build_share_text


def test_document_escapes_and_breaks_lines():
    doc = build_document_html(
        "first <line>\nsecond & last",
        title="<b>Dawn</b>",
        inspiration='Light "pooled" on water',
        created_at=datetime(2026, 10, 19),
    )

    assert "<b>Dawn</b>" not in doc
    assert "&lt;b&gt;Dawn&lt;/b&gt;" in doc
    assert "first &lt;line&gt;<br>second &amp; last" in doc
    assert "The Inspiration" in doc
    assert "October 19, 2026" in doc


def test_document_omits_missing_sections():
    doc = build_document_html("verse", created_at=datetime(2026, 1, 2))
    assert "poem-title\">" not in doc
    assert "The Inspiration" not in doc
    assert "The Composition" in doc


def test_document_bytes_start_with_bom():
    assert build_document("verse").startswith("\ufeff".encode("utf-8"))


def test_filenames():
    assert document_filename(None) == "PhotoPoet-Poem.doc"
    assert document_filename("   ") == "PhotoPoet-Poem.doc"
    assert document_filename("Dawn / Dusk") == "Dawn   Dusk.doc"
    assert content_disposition("Été.doc") == "attachment; filename=\"t.doc\"; filename*=UTF-8''%C3%89t%C3%A9.doc"
    assert "PhotoPoet-Poem.doc" in content_disposition("é.doc")


def test_display_date_has_no_zero_padding():
    assert format_display_date(datetime(2026, 3, 5)) == "March 5, 2026"


def test_share_text_layout():
    assert build_share_text("verse", title="Dawn", inspiration="calm") == "Dawn\n\nInspiration: calm\n\nverse"
    assert build_share_text("verse") == "verse"


def test_share_links_are_encoded():
    poem = "x" * 200 + " & more"
    shared = build_share_links(poem, title="Dawn", app_url="https://poet.example/app?a=1")

    twitter = parse_qs(urlparse(shared["links"]["twitter"]).query)
    assert twitter["text"] == ['"Dawn" from PhotoPoet:\n\n' + "x" * 180 + "..."]
    assert twitter["url"] == ["https://poet.example/app?a=1"]

    whatsapp = parse_qs(urlparse(shared["links"]["whatsapp"]).query)
    assert whatsapp["text"] == [f"*Dawn*\n\n{poem}\n\nShared via PhotoPoet"]

    facebook = parse_qs(urlparse(shared["links"]["facebook"]).query)
    assert facebook["u"] == ["https://poet.example/app?a=1"]

    assert shared["native"] == {"title": "Dawn", "text": "Dawn\n\n" + poem, "url": "https://poet.example/app?a=1"}
    assert shared["clipboard_text"] == shared["native"]["text"]


def test_share_defaults_without_title():
    shared = build_share_links("verse", app_url="https://poet.example/")
    assert shared["native"]["title"] == "PhotoPoet Poem"
    assert "A%20new%20verse" in shared["links"]["twitter"]


def test_share_url_comes_from_environment_at_call_time(monkeypatch):
    monkeypatch.setenv("PUBLIC_APP_URL", "https://poems.example/")
    assert build_share_links("verse")["native"]["url"] == "https://poems.example/"

    monkeypatch.delenv("PUBLIC_APP_URL")
    assert build_share_links("verse")["native"]["url"] == "http://localhost:8000/"
