"""
Markdown to HTML transform with embedded page metadata.

Each markdown document carries its metadata in a fenced code block tagged
``pageinfo``. The block is removed from the rendered body and its raw text is
parsed as YAML into a :class:`PageInfo`.
"""

import logging

import emoji
import mistune
import yaml

from .errors import MissingPageInfoError, PageInfoParseError
from .settings import SiteMeta

PAGEINFO_LANGUAGE = 'pageinfo'

logger = logging.getLogger('Raven.transform')


def replace_emoji(text):
    """Replace github-style ``:shortcode:`` tokens with their glyphs."""
    if ':' not in text:
        return text
    return emoji.emojize(text, language='alias')


class PageInfo:
    """Metadata for a single page, parsed from its ``pageinfo`` block."""

    def __init__(self, title, description, style=None, template=None, favicon=None, meta=None):
        self.title = title
        self.description = description
        self.style = style
        self.template = template
        self.favicon = favicon
        self.meta = meta

    @staticmethod
    def _text(data, key, required=False):
        value = data.get(key)
        if value is None:
            if required:
                raise ValueError(f"missing field '{key}'")
            return None
        if isinstance(value, (dict, list)):
            raise ValueError(f"field '{key}' must be a string")
        return str(value)

    @classmethod
    def parse(cls, payload, source_path):
        """Parse a raw ``pageinfo`` payload.

        Raises:
            PageInfoParseError: if the payload is not valid YAML or is missing
                ``title``/``description``.
        """
        try:
            data = yaml.safe_load(payload)
        except yaml.YAMLError as e:
            raise PageInfoParseError(source_path, str(e))

        try:
            if not isinstance(data, dict):
                raise ValueError('page info must be a mapping')
            meta = data.get('meta')
            return cls(
                title=cls._text(data, 'title', required=True),
                description=cls._text(data, 'description', required=True),
                style=cls._text(data, 'style'),
                template=cls._text(data, 'template'),
                favicon=cls._text(data, 'favicon'),
                meta=SiteMeta.from_dict(meta) if meta is not None else None,
            )
        except ValueError as e:
            raise PageInfoParseError(source_path, str(e))

    def __repr__(self):
        return f"PageInfo(title={self.title!r}, description={self.description!r})"


class PageRenderer(mistune.HTMLRenderer):
    """HTML renderer that captures ``pageinfo`` blocks, inserts emoji and highlights code."""

    def __init__(self, highlighter=None):
        super().__init__(escape=False)
        self.highlighter = highlighter
        self.page_info_source = None
        self.page_info_blocks = 0

    def render_tokens(self, tokens, state):
        # emphasis markers that don't open emphasis come back as separate text
        # tokens; join them so shortcodes like :world_map: stay whole
        merged = []
        for token in tokens:
            if token['type'] == 'text' and merged and merged[-1]['type'] == 'text':
                merged[-1] = {'type': 'text', 'raw': merged[-1]['raw'] + token['raw']}
            else:
                merged.append(token)
        return super().render_tokens(merged, state)

    def text(self, text):
        return super().text(replace_emoji(text))

    def block_code(self, code, info=None):
        language = info.split(None, 1)[0] if info and info.strip() else None

        if language == PAGEINFO_LANGUAGE:
            self.page_info_blocks += 1
            # first non-empty block wins
            if self.page_info_source is None and code.strip():
                self.page_info_source = code
            return ''

        code = replace_emoji(code)
        lexer = self.highlighter.find_lexer(language) if self.highlighter else None
        if lexer is None:
            return super().block_code(code, info)

        highlighted = self.highlighter.highlight(code, lexer)
        return f'<pre><code class="language-{mistune.escape(language)}">{highlighted}</code></pre>\n'


class MarkdownTransformer:
    """Turns markdown source into body HTML and a PageInfo."""

    def __init__(self, highlighter=None):
        self.highlighter = highlighter

    def create_markdown_parser(self, renderer):
        """Create a Mistune markdown parser around ``renderer``."""
        return mistune.create_markdown(
            renderer=renderer,
            plugins=['table', 'task_lists', 'strikethrough']
        )

    def parse(self, source_text, source_path):
        """Render ``source_text`` and extract its page info.

        Returns:
            Tuple of (body_html, PageInfo)
        """
        # renderers hold per-document state, so each parse gets its own
        renderer = PageRenderer(self.highlighter)
        body_html = self.create_markdown_parser(renderer)(source_text)

        if renderer.page_info_source is None:
            raise MissingPageInfoError(source_path)
        if renderer.page_info_blocks > 1:
            logger.warning(
                f"{source_path}: found {renderer.page_info_blocks} pageinfo blocks, using the first one"
            )

        return body_html, PageInfo.parse(renderer.page_info_source, source_path)
