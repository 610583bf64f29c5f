"""HTML minification of generated pages."""

import re

import csscompressor
import minify_html

from .errors import PostprocessError

_STYLE_BLOCK = re.compile(r'(<style\b[^>]*>)(.*?)(</style\s*>)', re.IGNORECASE | re.DOTALL)


class PostProcessor:
    """Minify generated HTML. A disabled processor returns its input unchanged."""

    def __init__(self, enabled=True):
        self.enabled = enabled

    @staticmethod
    def minify_css(html):
        """Compress the contents of every embedded ``<style>`` element."""
        return _STYLE_BLOCK.sub(
            lambda m: m.group(1) + csscompressor.compress(m.group(2)) + m.group(3),
            html,
        )

    def minify(self, html, source_path=''):
        if not self.enabled:
            return html
        try:
            html = self.minify_css(html)
            # attribute values stay quoted wherever an unquoted value would be invalid
            return minify_html.minify(html, minify_css=False, minify_js=False)
        except Exception as e:
            raise PostprocessError(source_path, str(e)) from e
