#!/usr/bin/env python3
"""
Settings loader for Raven static HTML generator.
Supports configuration from raven.yml, raven.yaml, or raven.json files.
"""

import os
import copy
import json
import yaml
from typing import Dict, Any, List, Optional

from .errors import ConfigParseError, RavenIOError

DEFAULT_TITLE_SEPARATOR = ' | '


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SiteMeta:
    """Site name and authors, either project-wide or per page."""

    def __init__(self, site_name: str = '', authors: Optional[List[str]] = None):
        self.site_name = site_name
        self.authors = list(authors or [])

    @classmethod
    def from_dict(cls, data: Any) -> 'SiteMeta':
        """
        Build a SiteMeta from a parsed mapping.

        Raises:
            ValueError: if the mapping has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"'meta' must be a mapping, got {type(data).__name__}")
        site_name = data.get('site_name', '')
        if site_name is None:
            site_name = ''
        if not isinstance(site_name, str):
            raise ValueError("'meta.site_name' must be a string")
        authors = data.get('authors') or []
        if isinstance(authors, str):
            authors = [authors]
        if not isinstance(authors, list) or not all(isinstance(a, str) for a in authors):
            raise ValueError("'meta.authors' must be a list of strings")
        return cls(site_name, authors)

    def __eq__(self, other):
        if not isinstance(other, SiteMeta):
            return NotImplemented
        return self.site_name == other.site_name and self.authors == other.authors

    def __repr__(self):
        return f"SiteMeta(site_name={self.site_name!r}, authors={self.authors!r})"


class Config:
    """Read-only view of the merged project settings.

    Directory and file paths are kept as written in the config file; use
    :meth:`resolve` to turn one into a path under the project directory.
    """

    def __init__(self, settings: Dict[str, Any], directory: str = '.'):
        self.directory = os.path.abspath(directory)
        try:
            self.source = self._path(settings, 'source')
            self.dest = self._path(settings, 'dest')
            self.syntaxes = self._path(settings, 'syntaxes')
            self.custom_syntax_themes = self._path(settings, 'custom_syntax_themes')
            self.syntax_theme = settings['syntax_theme']
            if not isinstance(self.syntax_theme, str):
                raise ValueError("'syntax_theme' must be a string")

            default = settings.get('default') or {}
            if not isinstance(default, dict):
                raise ValueError("'default' must be a mapping")
            self.default_favicon = self._path(default, 'favicon', 'default.favicon')
            self.default_stylesheet = self._path(default, 'stylesheet', 'default.stylesheet')
            self.default_template = self._path(default, 'template', 'default.template')
            meta = default.get('meta')
            self.default_meta = SiteMeta.from_dict(meta) if meta is not None else None

            generation = settings.get('generation') or {}
            process = generation.get('process') or {}
            self.minify = bool(process.get('minify', True))
            self.treat_source_as_template = bool(generation.get('treat_source_as_template', False))

            site_meta = settings.get('meta') or {}
            append = site_meta.get('append_site_name_to_title', False)
            if append is True:
                self.title_separator = DEFAULT_TITLE_SEPARATOR
            elif isinstance(append, str):
                self.title_separator = append
            elif append in (False, None):
                self.title_separator = None
            else:
                raise ValueError("'meta.append_site_name_to_title' must be a boolean or a separator string")
        except KeyError as e:
            raise ConfigParseError(f"Missing required configuration key {e}")
        except (ValueError, AttributeError) as e:
            raise ConfigParseError(str(e))

    @staticmethod
    def _path(section: Dict[str, Any], key: str, label: Optional[str] = None) -> str:
        value = section[key]
        if not isinstance(value, str) or not value:
            raise ValueError(f"'{label or key}' must be a non-empty path")
        return value

    def resolve(self, path: str) -> str:
        """Return ``path`` joined onto the project directory (absolute paths pass through)."""
        return os.path.join(self.directory, os.path.expanduser(path))

    @property
    def source_dir(self) -> str:
        return self.resolve(self.source)

    @property
    def dest_dir(self) -> str:
        return self.resolve(self.dest)

    @classmethod
    def load(cls, directory: str = '.', config_path: Optional[str] = None) -> 'Config':
        """Load the configuration for the project in ``directory``."""
        loader = RavenSettings(directory)
        return cls(loader.load_settings(config_path), directory)


class RavenSettings:
    """Load and manage Raven configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'source': 'src',
        'dest': 'dest',
        'syntaxes': 'syntaxes',
        'syntax_theme': 'base16-eighties.dark',
        'custom_syntax_themes': 'syntax-themes',
        'default': {
            'favicon': 'favicon.ico',
            'stylesheet': 'style.css',
            'template': 'template.html',
        },
        'generation': {
            'process': {
                'minify': True,
            },
            'treat_source_as_template': False,
        },
        'meta': {
            'append_site_name_to_title': False,
        },
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['raven.yml', 'raven.yaml', 'raven.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Project directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.config_file_path = None

    def load_settings(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load settings from a configuration file.

        Args:
            config_path: Explicit config file, relative to the project directory.
                When omitted the first of CONFIG_FILES that exists is used.

        Returns:
            Dictionary of configuration settings

        Raises:
            RavenIOError: if an explicit config file is missing or unreadable
            ConfigParseError: if the file is not valid YAML/JSON or not a mapping
        """
        if config_path:
            config_file = os.path.join(self.config_dir, config_path)
            if not os.path.exists(config_file):
                raise RavenIOError(config_file, FileNotFoundError('Configuration file not found'))
        else:
            config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if not isinstance(loaded_settings, dict):
                raise ConfigParseError(f"Couldn't parse {config_file}: top level must be a mapping")
            # Merge with defaults, giving preference to loaded settings
            self.settings = _merge(self.settings, loaded_settings)

        return copy.deepcopy(self.settings)

    def has_config_file(self) -> bool:
        """Whether the project directory already holds one of CONFIG_FILES."""
        return self._find_config_file() is not None

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Any:
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext == '.json':
                    return json.load(f) or {}
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Couldn't parse {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"Couldn't parse {config_path}: {e}")
        except (IOError, OSError) as e:
            raise RavenIOError(config_path, e)

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file from the current settings.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'raven.{file_format}'
        config_path = os.path.join(self.config_dir, filename)
        s = self.settings

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# Raven Configuration File\n\n")
                    f.write("# Where markdown sources are read from and HTML is written to\n")
                    f.write(f"source: {s['source']}\n")
                    f.write(f"dest: {s['dest']}\n\n")
                    f.write("# Syntax highlighting\n")
                    f.write(f"syntaxes: {s['syntaxes']}\n")
                    f.write(f"syntax_theme: {s['syntax_theme']}\n")
                    f.write(f"custom_syntax_themes: {s['custom_syntax_themes']}\n\n")
                    f.write("# Used by pages that don't set their own\n")
                    f.write("default:\n")
                    f.write(f"  favicon: {s['default']['favicon']}\n")
                    f.write(f"  stylesheet: {s['default']['stylesheet']}\n")
                    f.write(f"  template: {s['default']['template']}\n")
                    f.write("  # meta:\n")
                    f.write("  #   site_name: My Site\n")
                    f.write("  #   authors: [Me]\n\n")
                    f.write("generation:\n")
                    f.write("  process:\n")
                    f.write(f"    minify: {str(s['generation']['process']['minify']).lower()}\n")
                    f.write(f"  treat_source_as_template: {str(s['generation']['treat_source_as_template']).lower()}\n\n")
                    f.write("meta:\n")
                    f.write("  # true, false, or a custom separator such as ' - '\n")
                    f.write("  append_site_name_to_title: false\n")
                elif file_format == 'json':
                    json.dump(s, f, indent=2)
                else:
                    raise ConfigParseError(f"Unsupported config file format: {file_format}")
        except (IOError, OSError) as e:
            raise RavenIOError(config_path, e)

        self.config_file_path = config_path
        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of top-level setting overrides

        Returns:
            Merged configuration dictionary
        """
        overrides = {key: value for key, value in args_dict.items() if value is not None}
        self.settings = _merge(self.settings, overrides)
        return copy.deepcopy(self.settings)
