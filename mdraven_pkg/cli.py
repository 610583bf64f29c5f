#!/usr/bin/env python3
"""
Command-line interface for Raven - static HTML generator.
"""

import os
import sys
import argparse
import shutil
from typing import Dict, List, Optional

from . import __version__
from .core import Raven, setup_logging
from .defaults import DEFAULT_CSS_STYLESHEET_SRC, DEFAULT_HTML_TEMPLATE_SRC, DEFAULT_MD_STARTER_SRC
from .errors import RavenError, RavenIOError
from .settings import Config, RavenSettings


def _write_starter_file(path: str, label: str, content: str) -> None:
    if os.path.exists(path):
        print(f"File already exists: {label}")
        return
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except (IOError, OSError) as e:
        raise RavenIOError(path, e)
    print(f"Created: \"{label}\"")


def init_project(directory: str = '.', overrides: Optional[Dict[str, str]] = None) -> None:
    """Create the config file, directories and starter files for a project."""
    settings_loader = RavenSettings(directory)
    settings = settings_loader.merge_with_args(overrides or {})

    if settings_loader.has_config_file():
        print(f"Configuration file already exists in {directory}")
    else:
        settings_loader.create_sample_config('yml')
        print("Created: \"raven.yml\"")

    for key in ('source', 'dest', 'syntaxes', 'custom_syntax_themes'):
        dir_path = os.path.join(directory, settings[key])
        if os.path.exists(dir_path):
            print(f"Directory already exists: {settings[key]}")
            continue
        try:
            os.makedirs(dir_path, exist_ok=True)
        except (IOError, OSError) as e:
            raise RavenIOError(dir_path, e)
        print(f"Created: \"{settings[key]}\"")

    default = settings['default']
    _write_starter_file(os.path.join(directory, default['template']), default['template'], DEFAULT_HTML_TEMPLATE_SRC)
    _write_starter_file(os.path.join(directory, default['stylesheet']), default['stylesheet'], DEFAULT_CSS_STYLESHEET_SRC)
    index_label = os.path.join(settings['source'], 'index.md')
    _write_starter_file(os.path.join(directory, index_label), index_label, DEFAULT_MD_STARTER_SRC)


def new_project(name: str, overrides: Optional[Dict[str, str]] = None) -> None:
    """Create directory ``name`` and initialise a project inside it."""
    try:
        os.makedirs(name)
    except FileExistsError:
        print(f"Directory already exists: {name}")
    except (IOError, OSError) as e:
        raise RavenIOError(name, e)
    else:
        print(f"Created: \"{name}\"")
    init_project(name, overrides)


def build_project(directory: str = '.', config_path: Optional[str] = None, rebuild_all: bool = False):
    """Build the project in ``directory`` and return the build report."""
    config = Config.load(directory, config_path)
    setup_logging(os.path.join(config.directory, 'logs'))
    generator = Raven(config)
    return generator.run(force_rebuild=rebuild_all)


def clean_project(directory: str = '.', config_path: Optional[str] = None) -> None:
    """Delete the configured destination directory."""
    config = Config.load(directory, config_path)
    logger = setup_logging()
    dest_dir = config.dest_dir
    if not os.path.exists(dest_dir):
        return
    try:
        shutil.rmtree(dest_dir)
    except (IOError, OSError) as e:
        raise RavenIOError(dest_dir, e)
    logger.info(f"Cleaned {dest_dir}")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='raven', description='Raven - A static html generator')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', required=True)

    new_parser = subparsers.add_parser('new', help='Create a new project directory')
    new_parser.add_argument('name', help='Name of the project directory to create')
    new_parser.add_argument('--source', type=str, help='Directory markdown sources are read from')
    new_parser.add_argument('--dest', type=str, help='Directory generated HTML is written to')
    new_parser.add_argument('--syntaxes', type=str, help='Directory for additional syntax definitions')
    new_parser.add_argument('--syntax_themes', type=str, help='Directory for custom syntax themes')

    init_parser = subparsers.add_parser('init', help='Initialize a project in an existing directory')
    init_parser.add_argument('directory', nargs='?', default='.', help='The project directory')

    build_parser = subparsers.add_parser('build', help='Build static HTML from an existing project')
    build_parser.add_argument('directory', nargs='?', default='.', help='The project directory')
    build_parser.add_argument('--config', type=str, help='Alternate config file path')
    build_parser.add_argument('--rebuild_all', '-a', action='store_true',
                              help='Regenerate every page even if it is up to date')

    clean_parser = subparsers.add_parser('clean', help='Delete the generated output directory')
    clean_parser.add_argument('directory', nargs='?', default='.', help='The project directory')
    clean_parser.add_argument('--config', type=str, help='Alternate config file path')

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = create_parser().parse_args(argv)

    try:
        if args.command == 'new':
            new_project(args.name, {
                'source': args.source,
                'dest': args.dest,
                'syntaxes': args.syntaxes,
                'custom_syntax_themes': args.syntax_themes,
            })
        elif args.command == 'init':
            init_project(args.directory)
        elif args.command == 'build':
            build_project(args.directory, args.config, args.rebuild_all)
        elif args.command == 'clean':
            clean_project(args.directory, args.config)
    except RavenError as e:
        print(e, file=sys.stderr)
        sys.exit(e.exit_code)


if __name__ == '__main__':
    main()
