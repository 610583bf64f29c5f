"""
Error types for Raven.

Every error raised by the build pipeline derives from RavenError and carries the
process exit code the CLI should use when the error is fatal.
"""

from typing import Optional

NAME = 'Raven'

EXIT_IO = 74
EXIT_CONFIG = 78
EXIT_OTHER = 64


class RavenError(Exception):
    """Base class for all Raven errors."""

    kind = 'Error'
    exit_code = EXIT_OTHER

    def __init__(self, message: str):
        super().__init__(f"[{NAME}] {self.kind}: {message}")


class RavenIOError(RavenError):
    """A read, write or directory creation failed."""

    kind = 'IoError'
    exit_code = EXIT_IO

    def __init__(self, path: str, err: Exception):
        self.path = path
        self.err = err
        super().__init__(f'"{path}": {err}')


class ConfigParseError(RavenError):
    kind = 'ConfigParseError'
    exit_code = EXIT_CONFIG


class MissingPageInfoError(RavenError):
    kind = 'MissingPageInfoError'

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'"{path}": Missing page info in file')


class PageInfoParseError(RavenError):
    kind = 'ParsePageInfoError'

    def __init__(self, path: str, err: str):
        self.path = path
        self.err = err
        super().__init__(f'"{path}": {err}')


class SyntaxHighlightError(RavenError):
    kind = 'SyntaxHighlightError'


class LoadSyntaxError(RavenError):
    kind = 'LoadSyntaxError'

    def __init__(self, path: str, err: str):
        self.path = path
        super().__init__(f'"{path}": {err}')


class LoadSyntaxThemeError(RavenError):
    kind = 'LoadSyntaxThemesError'

    def __init__(self, path: str, err: str):
        self.path = path
        super().__init__(f'"{path}": {err}')


class MissingTemplateError(RavenError):
    kind = 'MissingTemplateError'

    def __init__(self, source_file: str, expected_template_file: str):
        self.source_file = source_file
        self.expected_template_file = expected_template_file
        super().__init__(
            f'"{source_file}": Requested template file "{expected_template_file}", but it doesn\'t exist'
        )


class MissingThemeError(RavenError):
    kind = 'MissingThemeError'

    def __init__(self, theme: str, available: Optional[list] = None):
        self.theme = theme
        message = f'Requested theme "{theme}" in configuration file, but it doesn\'t exist'
        if available:
            message += f" (available: {', '.join(sorted(available))})"
        super().__init__(message)


class NoSourceFilesError(RavenError):
    kind = 'MissingSourceFilesError'

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'"{path}": No source files found')


class PostprocessError(RavenError):
    kind = 'HtmlPostprocessError'

    def __init__(self, path: str, err: str):
        self.path = path
        super().__init__(f'"{path}": There was an error processing generated HTML: {err}')


class BuildJoinError(RavenError):
    kind = 'AsyncJoinError'

    def __init__(self, err: Exception):
        self.err = err
        super().__init__(f"There was an internal error during the build process: {err}")
