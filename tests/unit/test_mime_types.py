"""
Unit tests for content type detection.
"""

from pathlib import Path

import pytest

from minihttpd.http.mime_types import get_content_type


@pytest.mark.parametrize("path, expected", [
    ("/index.html", "text/html"),
    ("/docs/page.html", "text/html"),
    ("/style.css", "text/css"),
    ("/css/site.css", "text/css"),
    ("/notes.txt", "text/plain"),
    ("/logo.png", "text/plain"),
    ("/README", "text/plain"),
    ("", "text/plain"),
])
def test_suffix_rule(path: str, expected: str):
    assert get_content_type(path) == expected


def test_html_checked_before_css():
    """Test that ".html" wins when both markers appear."""
    assert get_content_type("/theme.css.html") == "text/html"
    assert get_content_type("/page.html.css") == "text/html"


def test_marker_anywhere_in_path():
    """Test that the match is a substring match, not a suffix match."""
    assert get_content_type("/page.html.bak") == "text/html"
    assert get_content_type("/old.css/readme") == "text/css"


def test_match_is_case_sensitive():
    assert get_content_type("/INDEX.HTML") == "text/plain"


def test_accepts_path_objects():
    assert get_content_type(Path("/var/www/style.css")) == "text/css"
