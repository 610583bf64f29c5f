"""
Syntax highlighting tables for fenced code blocks.

Lexers and styles come from Pygments. Projects may add lexers (Python files
defining ``CustomLexer``) in the configured syntaxes directory and colour
themes (YAML files) in the custom themes directory.
"""

import os
import re
import html
import logging

import yaml
from pygments import highlight as pygments_highlight
from pygments.formatter import Formatter
from pygments.lexers import get_lexer_by_name, load_lexer_from_file
from pygments.style import Style
from pygments.styles import get_all_styles, get_style_by_name
from pygments.token import (
    Token, Comment, Keyword, Name, String, Number, Operator, Generic, Error,
    string_to_tokentype,
)
from pygments.util import ClassNotFound

from .errors import LoadSyntaxError, LoadSyntaxThemeError, MissingThemeError, SyntaxHighlightError

logger = logging.getLogger('Raven.highlight')

_LINE_PIECES = re.compile(r'[^\n]*\n|[^\n]+')


class Base16EightiesStyle(Style):
    """The base16 "eighties" dark palette."""

    name = 'base16-eighties.dark'
    background_color = '#2d2d2d'
    highlight_color = '#515151'

    styles = {
        Token: '#d3d0c8',
        Comment: '#747369',
        Comment.Preproc: '#cc99cc',
        Keyword: '#cc99cc',
        Keyword.Type: '#cc99cc',
        Keyword.Constant: '#f99157',
        Name.Function: '#6699cc',
        Name.Class: '#ffcc66',
        Name.Namespace: '#ffcc66',
        Name.Builtin: '#66cccc',
        Name.Decorator: '#6699cc',
        Name.Tag: '#f2777a',
        Name.Attribute: '#ffcc66',
        Name.Variable: '#f2777a',
        Name.Constant: '#f99157',
        Name.Exception: '#f2777a',
        String: '#99cc99',
        String.Escape: '#66cccc',
        String.Regex: '#66cccc',
        String.Interpol: '#d27b53',
        Number: '#f99157',
        Operator.Word: '#cc99cc',
        Generic.Deleted: '#f2777a',
        Generic.Inserted: '#99cc99',
        Generic.Heading: 'bold #6699cc',
        Generic.Subheading: 'bold #66cccc',
        Generic.Emph: 'italic',
        Generic.Strong: 'bold',
        Error: '#f2777a',
    }


BUNDLED_STYLES = {
    Base16EightiesStyle.name: Base16EightiesStyle,
}


class InlineStyleFormatter(Formatter):
    """Render tokens as a ``<pre>`` with inline-styled spans.

    Adjacent tokens that resolve to the same style share one span, and every
    span ends at a line break. Whitespace takes the style of the token before
    it on the same line; indentation takes the base ``Token`` style.
    """

    name = 'Raven inline'
    aliases = []

    def __init__(self, **options):
        super().__init__(**options)
        self._css_cache = {}

    def _css_for(self, ttype):
        css = self._css_cache.get(ttype)
        if css is None:
            style = self.style.style_for_token(ttype)
            parts = []
            if style['color']:
                parts.append(f"color:#{style['color']};")
            if style['bold']:
                parts.append('font-weight:bold;')
            if style['italic']:
                parts.append('font-style:italic;')
            if style['underline']:
                parts.append('text-decoration:underline;')
            css = ''.join(parts)
            self._css_cache[ttype] = css
        return css

    @staticmethod
    def _write_run(outfile, css, text):
        text = html.escape(text, quote=False)
        if css:
            outfile.write(f'<span style="{css}">{text}</span>')
        else:
            outfile.write(text)

    def format(self, tokensource, outfile):
        background = self.style.background_color
        if background:
            outfile.write(f'<pre style="background-color:{background};">\n')
        else:
            outfile.write('<pre>\n')

        base_css = self._css_for(Token)
        current_css = None
        # run is empty exactly at the start of a line
        run = []
        for ttype, value in tokensource:
            for piece in _LINE_PIECES.findall(value):
                if piece.isspace():
                    css = current_css if run else base_css
                else:
                    css = self._css_for(ttype)
                if run and css != current_css:
                    self._write_run(outfile, current_css, ''.join(run))
                    run = []
                current_css = css
                run.append(piece)
                if piece.endswith('\n'):
                    self._write_run(outfile, current_css, ''.join(run))
                    run = []
        if run:
            self._write_run(outfile, current_css, ''.join(run))

        outfile.write('</pre>\n')


def style_from_dict(data, default_name):
    """Build a Pygments style class from a parsed theme file."""
    if not isinstance(data, dict):
        raise ValueError('theme file must contain a mapping')
    name = data.get('name') or default_name
    rules = data.get('styles') or {}
    if not isinstance(rules, dict):
        raise ValueError("'styles' must be a mapping of token names to style strings")

    styles = {}
    for token_name, rule in rules.items():
        token_name = str(token_name)
        if token_name.startswith('Token.'):
            token_name = token_name[len('Token.'):]
        styles[string_to_tokentype('' if token_name == 'Token' else token_name)] = str(rule)

    return type(f'CustomStyle_{default_name}', (Style,), {
        'name': name,
        'background_color': data.get('background', '#ffffff'),
        'styles': styles,
    })


def load_custom_themes(directory):
    """Load every ``*.yml``/``*.yaml`` theme in ``directory``, keyed by theme name."""
    themes = {}
    if not os.path.isdir(directory):
        return themes

    for filename in sorted(os.listdir(directory)):
        if not filename.lower().endswith(('.yml', '.yaml')):
            continue
        path = os.path.join(directory, filename)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            theme = style_from_dict(data, os.path.splitext(filename)[0])
        except (IOError, OSError, yaml.YAMLError, ValueError, TypeError, AssertionError) as e:
            raise LoadSyntaxThemeError(path, str(e))
        themes[theme.name] = theme
        logger.debug(f"Loaded syntax theme '{theme.name}' from {path}")
    return themes


def load_custom_lexers(directory):
    """Load every ``*.py`` lexer module in ``directory``, keyed by lowercase alias."""
    lexers = {}
    if not os.path.isdir(directory):
        return lexers

    for filename in sorted(os.listdir(directory)):
        if not filename.endswith('.py'):
            continue
        path = os.path.join(directory, filename)
        try:
            lexer = load_lexer_from_file(path, lexername='CustomLexer')
        except ClassNotFound as e:
            raise LoadSyntaxError(path, str(e))
        names = [os.path.splitext(filename)[0]] + list(getattr(lexer, 'aliases', None) or [])
        for name in names:
            lexers[name.lower()] = lexer
        logger.debug(f"Loaded syntax {names} from {path}")
    return lexers


def resolve_theme(name, custom_themes=None):
    """Look up a theme by name: custom themes, then bundled, then Pygments built-ins."""
    custom_themes = custom_themes or {}
    if name in custom_themes:
        return custom_themes[name]
    if name in BUNDLED_STYLES:
        return BUNDLED_STYLES[name]
    try:
        return get_style_by_name(name)
    except ClassNotFound:
        available = list(custom_themes) + list(BUNDLED_STYLES) + list(get_all_styles())
        raise MissingThemeError(name, available)


class SyntaxHighlighter:
    """Shared, read-only lexer and theme tables used while parsing markdown."""

    def __init__(self, theme, custom_lexers=None):
        self.theme = theme
        self.custom_lexers = custom_lexers or {}
        self.formatter = InlineStyleFormatter(style=theme)

    @classmethod
    def from_config(cls, config):
        """Load the project's syntaxes and themes and select the configured theme."""
        custom_lexers = load_custom_lexers(config.resolve(config.syntaxes))
        custom_themes = load_custom_themes(config.resolve(config.custom_syntax_themes))
        return cls(resolve_theme(config.syntax_theme, custom_themes), custom_lexers)

    def find_lexer(self, language):
        """Return a lexer for a fenced block's language tag, or None."""
        if not language:
            return None
        lexer = self.custom_lexers.get(language.lower())
        if lexer is not None:
            return lexer
        try:
            return get_lexer_by_name(language)
        except ClassNotFound:
            return None

    def highlight(self, code, lexer):
        """Render ``code`` to inline-styled HTML."""
        try:
            return pygments_highlight(code, lexer, self.formatter)
        except Exception as e:
            raise SyntaxHighlightError(str(e)) from e
