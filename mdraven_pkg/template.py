"""
Literal marker substitution into HTML templates.

Templates are plain HTML containing marker tokens such as ``[/raven_body/]``.
Markers are replaced in a single left-to-right pass; replacement text is never
scanned again, so a page body that happens to contain a marker is left alone.
"""

import html
import os
import re

from . import files
from .assets import load_favicon_fragment, load_stylesheet_fragment
from .errors import MissingTemplateError
from .settings import SiteMeta
from .transform import PageInfo

MARKER_BODY = '[/raven_body/]'
MARKER_TITLE = '[/raven_title/]'
MARKER_DESCRIPTION = '[/raven_description/]'
MARKER_FAVICON = '[/raven_favicon/]'
MARKER_STYLESHEET = '[/raven_stylesheet/]'
MARKER_SITE_NAME = '[/raven_site_name/]'
MARKER_AUTHORS = '[/raven_authors/]'

MARKERS = (
    MARKER_BODY,
    MARKER_TITLE,
    MARKER_DESCRIPTION,
    MARKER_FAVICON,
    MARKER_STYLESHEET,
    MARKER_SITE_NAME,
    MARKER_AUTHORS,
)

AUTHOR_DELIMITER = ', '

_MARKER_PATTERN = re.compile('|'.join(re.escape(marker) for marker in MARKERS))


def substitute_markers(template_text, values):
    """Replace every marker in ``template_text`` with ``values[marker]`` in one pass."""
    return _MARKER_PATTERN.sub(lambda match: values.get(match.group(0), match.group(0)), template_text)


def build_title(title, site_name, separator):
    """Append the site name to ``title`` when a separator is configured."""
    if separator is None or not site_name:
        return title
    if not title:
        return site_name
    return f"{title}{separator}{site_name}"


class TemplateIntegrator:
    """Merges rendered page bodies into their templates."""

    def __init__(self, config, assets):
        self.config = config
        self.assets = assets

    def template_path(self, page_info):
        return self.config.resolve(page_info.template or self.config.default_template)

    def stylesheet_path(self, page_info):
        return self.config.resolve(page_info.style or self.config.default_stylesheet)

    def favicon_path(self, page_info):
        return self.config.resolve(page_info.favicon or self.config.default_favicon)

    def site_meta(self, page_info):
        """Page-level site name and authors, falling back to the project defaults."""
        default = self.config.default_meta or SiteMeta()
        page = page_info.meta or SiteMeta()
        return SiteMeta(
            site_name=page.site_name or default.site_name,
            authors=page.authors or default.authors,
        )

    async def integrate(self, page_info, source_path, body_html):
        """Produce the final HTML for one markdown page.

        Raises:
            MissingTemplateError: if the resolved template file doesn't exist
            RavenIOError: if the template or stylesheet can't be read
        """
        template_path = self.template_path(page_info)
        if not os.path.isfile(template_path):
            raise MissingTemplateError(source_path, template_path)
        template_text = await files.read_text(template_path)
        return await self.render(template_text, page_info, body_html)

    async def integrate_source_template(self, source_text):
        """Treat an HTML source file as its own template, using project defaults."""
        return await self.render(source_text, PageInfo(title='', description=''), '')

    async def render(self, template_text, page_info, body_html):
        stylesheet = await self.assets.get_or_load(self.stylesheet_path(page_info), load_stylesheet_fragment)
        favicon = await self.assets.get_or_load(self.favicon_path(page_info), load_favicon_fragment)
        meta = self.site_meta(page_info)
        title = build_title(page_info.title, meta.site_name, self.config.title_separator)

        values = {
            MARKER_BODY: body_html,
            MARKER_TITLE: html.escape(title),
            MARKER_DESCRIPTION: page_info.description,
            MARKER_FAVICON: favicon,
            MARKER_STYLESHEET: stylesheet,
            MARKER_SITE_NAME: html.escape(meta.site_name),
            MARKER_AUTHORS: html.escape(AUTHOR_DELIMITER.join(meta.authors)),
        }
        return substitute_markers(template_text, values)
