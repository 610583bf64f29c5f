"""Asynchronous file helpers. Blocking calls run on the default thread pool."""

import asyncio
import os
import shutil

from .errors import RavenIOError


def _read_text(path):
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _read_bytes(path):
    with open(path, 'rb') as f:
        return f.read()


def _write_text(path, text):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)


async def read_text(path):
    try:
        return await asyncio.to_thread(_read_text, path)
    except (IOError, OSError, UnicodeDecodeError) as e:
        raise RavenIOError(path, e)


async def read_bytes(path):
    try:
        return await asyncio.to_thread(_read_bytes, path)
    except (IOError, OSError) as e:
        raise RavenIOError(path, e)


async def write_text(path, text):
    """Write ``text`` to ``path``, creating parent directories as needed."""
    await makedirs(os.path.dirname(path))
    try:
        await asyncio.to_thread(_write_text, path, text)
    except (IOError, OSError) as e:
        raise RavenIOError(path, e)


async def copy_file(source, dest):
    await makedirs(os.path.dirname(dest))
    try:
        await asyncio.to_thread(shutil.copyfile, source, dest)
    except (IOError, OSError) as e:
        raise RavenIOError(source, e)


async def makedirs(path):
    if not path:
        return
    try:
        await asyncio.to_thread(os.makedirs, path, exist_ok=True)
    except (IOError, OSError) as e:
        raise RavenIOError(path, e)
