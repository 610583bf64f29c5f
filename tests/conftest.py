"""Test configuration and fixtures for Raven tests."""

import pytest
import tempfile
import shutil
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mdraven_pkg.highlight import Base16EightiesStyle, SyntaxHighlighter
from mdraven_pkg.settings import Config, RavenSettings

TEMPLATE = (
    "<html><head><title>[/raven_title/]</title>"
    "<meta name=\"description\" content=\"[/raven_description/]\">"
    "[/raven_favicon/][/raven_stylesheet/]</head>"
    "<body><h6>[/raven_site_name/]</h6><address>[/raven_authors/]</address>"
    "[/raven_body/]</body></html>"
)

STYLESHEET = "body { color : red ; }"

FAVICON_BYTES = b'abcd'


def make_page(title='Test Page', description='A test page', extra='', body='Some text.'):
    """Markdown source for a page with a pageinfo block."""
    return (
        "```pageinfo\n"
        f"title: {title}\n"
        f"description: {description}\n"
        f"{extra}"
        "```\n\n"
        f"# {title}\n\n"
        f"{body}\n"
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def project_dir(temp_dir):
    """A project with a template, stylesheet, favicon and two markdown pages."""
    root = Path(temp_dir)
    (root / 'src' / 'sub').mkdir(parents=True)
    (root / 'template.html').write_text(TEMPLATE, encoding='utf-8')
    (root / 'style.css').write_text(STYLESHEET, encoding='utf-8')
    (root / 'favicon.ico').write_bytes(FAVICON_BYTES)
    (root / 'src' / 'index.md').write_text(make_page('Home'), encoding='utf-8')
    (root / 'src' / 'sub' / 'page.md').write_text(make_page('Nested'), encoding='utf-8')
    return temp_dir


def make_settings(**overrides):
    """Default settings with minification off, plus overrides."""
    settings = RavenSettings('.').merge_with_args({
        'generation': {'process': {'minify': False}, 'treat_source_as_template': False},
    })
    settings.update(overrides)
    return settings


@pytest.fixture
def config(project_dir):
    """Config for ``project_dir`` with minification disabled."""
    return Config(make_settings(), project_dir)


@pytest.fixture
def highlighter():
    return SyntaxHighlighter(Base16EightiesStyle)
