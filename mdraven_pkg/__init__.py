"""
Raven - A static HTML generator.

Raven turns a tree of Markdown documents into HTML pages. Each document carries
its title, description and asset overrides in a ``pageinfo`` code block, and
its rendered body is merged into a plain HTML template through marker tokens.
Pages are built concurrently and skipped when their output is already newer
than the source.
"""

__version__ = "0.1.0"

from .core import Raven, FileProcessor, BuildReport
from .settings import Config, RavenSettings

__all__ = ['Raven', 'FileProcessor', 'BuildReport', 'Config', 'RavenSettings']
