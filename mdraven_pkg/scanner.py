"""Discovery and classification of source files."""

import logging
import os
from collections import namedtuple

MARKDOWN = 'markdown'
HTML_TEMPLATE_SOURCE = 'html-template-source'
STYLESHEET = 'stylesheet-passthrough'
IGNORED = 'ignored'

EXTENSION_KINDS = {
    'md': MARKDOWN,
    'markdown': MARKDOWN,
    'html': HTML_TEMPLATE_SOURCE,
    'htm': HTML_TEMPLATE_SOURCE,
    'css': STYLESHEET,
}

logger = logging.getLogger('Raven.scanner')


def classify(extension):
    """Kind of source file for a lowercase extension without the dot."""
    return EXTENSION_KINDS.get(extension, IGNORED)


SourceFile = namedtuple('SourceFile', ['path', 'kind'])


class DirectoryScanner:
    """Walk a source tree and report the files Raven knows how to build."""

    def __init__(self):
        self.errors = []

    def _on_error(self, err):
        self.errors.append(err)
        logger.warning(f"[Raven] ReadSourceDirError: \"{getattr(err, 'filename', None) or 'UNKNOWNPATH'}\": {err}")

    def scan(self, root):
        """Return ``(path, extension)`` for every recognised file under ``root``.

        Order is unspecified.
        """
        found = []
        for dirpath, _dirnames, filenames in os.walk(root, onerror=self._on_error):
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                extension = os.path.splitext(filename)[1].lstrip('.').lower()
                if classify(extension) == IGNORED:
                    continue
                try:
                    if not os.path.isfile(path):
                        continue
                except OSError as e:
                    self._on_error(e)
                    continue
                found.append((path, extension))
        return found

    def collect(self, root):
        """Scan ``root`` and wrap the results as SourceFile objects."""
        return [SourceFile(path, classify(extension)) for path, extension in self.scan(root)]
