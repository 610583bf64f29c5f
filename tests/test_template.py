"""Tests for template marker substitution."""

import asyncio
import os
from pathlib import Path

import pytest

from mdraven_pkg.assets import AssetCache
from mdraven_pkg.errors import MissingTemplateError, RavenIOError
from mdraven_pkg.settings import Config, SiteMeta
from mdraven_pkg.template import (
    MARKER_BODY, MARKER_TITLE, TemplateIntegrator, build_title, substitute_markers,
)
from mdraven_pkg.transform import PageInfo

from conftest import make_settings


def integrate(integrator, page_info, body='<p>Body</p>'):
    return asyncio.run(integrator.integrate(page_info, 'src/index.md', body))


class TestSubstitution:
    """Test cases for substitute_markers and build_title."""

    def test_single_pass(self):
        out = substitute_markers(
            f'<title>{MARKER_TITLE}</title>{MARKER_BODY}',
            {MARKER_TITLE: 'T', MARKER_BODY: f'literal {MARKER_TITLE} in body'},
        )
        assert out == f'<title>T</title>literal {MARKER_TITLE} in body'

    def test_repeated_markers(self):
        out = substitute_markers(f'{MARKER_TITLE}-{MARKER_TITLE}', {MARKER_TITLE: 'x'})
        assert out == 'x-x'

    def test_unknown_text_untouched(self):
        assert substitute_markers('[/raven_other/]', {}) == '[/raven_other/]'

    def test_build_title(self):
        assert build_title('Page', 'Site', None) == 'Page'
        assert build_title('Page', '', ' | ') == 'Page'
        assert build_title('Page', 'Site', ' | ') == 'Page | Site'
        assert build_title('', 'Site', ' | ') == 'Site'


class TestTemplateIntegrator:
    """Test cases for TemplateIntegrator."""

    def test_all_markers(self, config):
        integrator = TemplateIntegrator(config, AssetCache())
        page_info = PageInfo('Home & Away', 'About <b>us</b>', meta=SiteMeta('Site', ['Ann', 'Bob']))

        out = integrate(integrator, page_info)

        assert '<title>Home &amp; Away</title>' in out
        assert 'content="About <b>us</b>"' in out
        assert '<style>body { color : red ; }</style>' in out
        assert 'data:image/x-icon;base64,YWJjZA' in out
        assert '<h6>Site</h6>' in out
        assert '<address>Ann, Bob</address>' in out
        assert '<p>Body</p></body>' in out
        assert '[/raven_' not in out

    def test_site_name_appended_to_title(self, project_dir):
        config = Config(make_settings(meta={'append_site_name_to_title': True}), project_dir)
        integrator = TemplateIntegrator(config, AssetCache())
        out = integrate(integrator, PageInfo('Home', 'D', meta=SiteMeta('Site')))
        assert '<title>Home | Site</title>' in out

    def test_custom_title_separator(self, project_dir):
        config = Config(make_settings(meta={'append_site_name_to_title': ' - '}), project_dir)
        integrator = TemplateIntegrator(config, AssetCache())
        out = integrate(integrator, PageInfo('Home', 'D', meta=SiteMeta('Site')))
        assert '<title>Home - Site</title>' in out

    def test_default_meta_fallback(self, project_dir):
        settings = make_settings()
        settings['default']['meta'] = {'site_name': 'Default Site', 'authors': 'Solo'}
        integrator = TemplateIntegrator(Config(settings, project_dir), AssetCache())

        out = integrate(integrator, PageInfo('Home', 'D'))
        assert '<h6>Default Site</h6>' in out
        assert '<address>Solo</address>' in out

        out = integrate(integrator, PageInfo('Home', 'D', meta=SiteMeta('Page Site')))
        assert '<h6>Page Site</h6>' in out
        assert '<address>Solo</address>' in out

    def test_page_overrides(self, config, project_dir):
        Path(project_dir, 'other.html').write_text('<main>[/raven_stylesheet/][/raven_body/]</main>', encoding='utf-8')
        Path(project_dir, 'other.css').write_text('p{}', encoding='utf-8')
        integrator = TemplateIntegrator(config, AssetCache())

        out = integrate(integrator, PageInfo('T', 'D', style='other.css', template='other.html'))
        assert out == '<main><style>p{}</style><p>Body</p></main>'

    def test_missing_template(self, config):
        integrator = TemplateIntegrator(config, AssetCache())
        with pytest.raises(MissingTemplateError) as excinfo:
            integrate(integrator, PageInfo('T', 'D', template='nope.html'))
        assert excinfo.value.source_file == 'src/index.md'
        assert excinfo.value.expected_template_file == os.path.join(config.directory, 'nope.html')

    def test_missing_favicon_is_empty(self, config, project_dir):
        os.remove(os.path.join(project_dir, 'favicon.ico'))
        integrator = TemplateIntegrator(config, AssetCache())
        out = integrate(integrator, PageInfo('T', 'D'))
        assert '</title><meta name="description" content="D"><style>' in out

    def test_missing_stylesheet(self, config):
        integrator = TemplateIntegrator(config, AssetCache())
        with pytest.raises(RavenIOError):
            integrate(integrator, PageInfo('T', 'D', style='nope.css'))

    def test_assets_are_cached(self, config):
        assets = AssetCache()
        integrator = TemplateIntegrator(config, assets)
        integrate(integrator, PageInfo('A', 'D'))
        integrate(integrator, PageInfo('B', 'D'))
        assert len(assets) == 2

    def test_source_template(self, config):
        integrator = TemplateIntegrator(config, AssetCache())
        out = asyncio.run(integrator.integrate_source_template('<p>[/raven_title/]|[/raven_body/]|[/raven_stylesheet/]</p>'))
        assert out == '<p>||<style>body { color : red ; }</style></p>'
