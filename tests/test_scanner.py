"""Tests for source discovery."""

import os
from pathlib import Path

from mdraven_pkg.scanner import (
    DirectoryScanner, HTML_TEMPLATE_SOURCE, IGNORED, MARKDOWN, STYLESHEET, SourceFile, classify,
)


def test_classify():
    assert classify('md') == MARKDOWN
    assert classify('markdown') == MARKDOWN
    assert classify('html') == HTML_TEMPLATE_SOURCE
    assert classify('htm') == HTML_TEMPLATE_SOURCE
    assert classify('css') == STYLESHEET
    assert classify('png') == IGNORED
    assert classify('') == IGNORED


class TestDirectoryScanner:
    """Test cases for DirectoryScanner."""

    def test_nested_files(self, temp_dir):
        root = Path(temp_dir)
        (root / 'a' / 'b').mkdir(parents=True)
        for name in ('index.md', 'a/page.MD', 'a/b/deep.markdown', 'a/style.css', 'a/b/raw.html',
                     'image.png', 'notes.txt', 'README'):
            (root / name).write_text('x', encoding='utf-8')

        scanner = DirectoryScanner()
        found = sorted(scanner.scan(temp_dir))

        assert found == sorted([
            (os.path.join(temp_dir, 'index.md'), 'md'),
            (os.path.join(temp_dir, 'a', 'page.MD'), 'md'),
            (os.path.join(temp_dir, 'a', 'b', 'deep.markdown'), 'markdown'),
            (os.path.join(temp_dir, 'a', 'style.css'), 'css'),
            (os.path.join(temp_dir, 'a', 'b', 'raw.html'), 'html'),
        ])
        assert scanner.errors == []

    def test_collect(self, temp_dir):
        Path(temp_dir, 'index.md').write_text('x', encoding='utf-8')
        Path(temp_dir, 'style.css').write_text('x', encoding='utf-8')

        collected = sorted(DirectoryScanner().collect(temp_dir))
        assert collected == [
            SourceFile(os.path.join(temp_dir, 'index.md'), MARKDOWN),
            SourceFile(os.path.join(temp_dir, 'style.css'), STYLESHEET),
        ]

    def test_directories_are_not_files(self, temp_dir):
        Path(temp_dir, 'folder.md').mkdir()
        assert DirectoryScanner().scan(temp_dir) == []

    def test_missing_root_is_reported(self, temp_dir):
        scanner = DirectoryScanner()
        assert scanner.scan(os.path.join(temp_dir, 'missing')) == []
        assert len(scanner.errors) == 1
