"""Shared pytest fixtures and configuration for ellu-dl tests."""

import json
from typing import Any

import pytest

from ellu_dl.models import ElluConfig


def make_reader_line(chapters: list[dict[str, Any]] | str) -> str:
    """Build a ``new Reader(...)`` statement around a chapter array."""
    manifest = chapters if isinstance(chapters, str) else json.dumps(chapters)
    return f'new Reader(20480, 0, "bookmark", {manifest}, true, "et", function() {{}});'


def make_reader_page(*script_lines: str) -> str:
    """Build a reader landing page with the given inline script lines."""
    script = "\n".join(script_lines)
    return (
        "<!DOCTYPE html><html><head><title>Reader</title></head><body>"
        '<div id="reader"></div>'
        f"<script>\nvar settings = {{}};\n{script}\n</script>"
        "</body></html>"
    )


@pytest.fixture
def reader_line():
    """Factory for ``new Reader(...)`` statements."""
    return make_reader_line


@pytest.fixture
def reader_page():
    """Factory for reader landing pages."""
    return make_reader_page


@pytest.fixture
def config(tmp_path) -> ElluConfig:
    """Test configuration writing into a temporary directory."""
    return ElluConfig(cookie="abc", output_dir=tmp_path / "Books", timeout=10)


@pytest.fixture
def sample_manifest() -> list[dict[str, Any]]:
    """Chapter manifest as embedded in the reader page."""
    return [
        {"number": 0, "Title": "Intro"},
        {"number": 1, "Title": "Ch. 1"},
    ]


@pytest.fixture
def book_page_html() -> str:
    """Public book page with the hidden book id and the book header."""
    return """
    <!DOCTYPE html>
    <html>
    <body>
        <form action="/cart"><input type="hidden" id="book_id" name="book_id" value="42"></form>
        <div class="book-head">
            <h1>Kevade</h1>
            <p>
                Oskar Luts
            </p>
        </div>
    </body>
    </html>
    """


@pytest.fixture
def reader_page_html(sample_manifest) -> str:
    """Reader landing page carrying the chapter manifest."""
    return make_reader_page(make_reader_line(sample_manifest))


@pytest.fixture
def sample_chapter_html() -> dict[int, str]:
    """Chapter bodies by chapter number."""
    return {
        0: '<div class="cover"><img src="/static/books/12345/cover.jpg" alt="Kaas"/></div>',
        1: (
            "<h2>Ch. 1</h2>\n<p>Tere &amp; head aega.</p>"
            '<figure data-full="/static/books/12345/fig1.png">'
            '<img src="/static/books/12345/fig1.png"/></figure>'
        ),
    }


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
