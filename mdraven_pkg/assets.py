"""
Run-scoped cache of rendered favicon and stylesheet fragments.

The cache is sharded: each shard owns its own lock, so lookups and inserts for
keys in different shards never wait on each other. Two tasks that miss on the
same key at the same time may both run the loader; the first insert wins and
both get the stored fragment back.
"""

import base64
import os
import threading

from . import files

DEFAULT_SHARD_COUNT = 16


class _Shard:
    __slots__ = ('lock', 'entries')

    def __init__(self):
        self.lock = threading.Lock()
        self.entries = {}


class AssetCache:
    """Map of canonical asset path to pre-rendered HTML fragment."""

    def __init__(self, shard_count=DEFAULT_SHARD_COUNT):
        if shard_count < 1:
            raise ValueError('shard_count must be at least 1')
        self._shards = [_Shard() for _ in range(shard_count)]

    @staticmethod
    def canonicalize(path):
        """Absolute, symlink-free form of ``path``; the path itself if that fails."""
        try:
            return os.path.realpath(path, strict=True)
        except (OSError, ValueError):
            return path

    def _shard_for(self, key):
        return self._shards[hash(key) % len(self._shards)]

    def get(self, path):
        key = self.canonicalize(path)
        shard = self._shard_for(key)
        with shard.lock:
            return shard.entries.get(key)

    async def get_or_load(self, path, loader):
        """Return the cached fragment for ``path``, running ``loader(key)`` on a miss.

        ``loader`` is an async callable taking the canonical key.
        """
        key = self.canonicalize(path)
        shard = self._shard_for(key)
        with shard.lock:
            fragment = shard.entries.get(key)
        if fragment is not None:
            return fragment

        fragment = await loader(key)
        with shard.lock:
            return shard.entries.setdefault(key, fragment)

    def __contains__(self, path):
        return self.get(path) is not None

    def __len__(self):
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total


async def load_favicon_fragment(path):
    """Base64 icon link for ``path``, or an empty string when there is no such file."""
    if not os.path.isfile(path):
        return ''
    data = await files.read_bytes(path)
    encoded = base64.b64encode(data).decode('ascii').rstrip('=')
    return f'<link rel="icon" type="image/x-icon" href="data:image/x-icon;base64,{encoded}">'


async def load_stylesheet_fragment(path):
    """The stylesheet at ``path`` wrapped in a style element."""
    css = await files.read_text(path)
    return f'<style>{css}</style>'
