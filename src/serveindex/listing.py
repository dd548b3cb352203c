# Directory enumeration and per-entry metadata.
# Created: 2026-10-19

from __future__ import annotations

import asyncio
import errno
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from stat import S_ISDIR

from pyuca import Collator

from serveindex.errors import InternalError, PathTooLong

logger = logging.getLogger(__name__)

# Maximum number of outstanding stat() calls per request in full mode.
STAT_CONCURRENCY = 10

PARENT = ".."

EntryFilter = Callable[[str, int, list[str], str], bool]


@dataclass(frozen=True)
class FileStat:
    """The subset of stat() a listing needs.

    Brief mode only knows the entry type, so ``size`` and ``mtime`` are None.
    """

    is_dir: bool
    size: int | None = None
    mtime: datetime | None = None

    @classmethod
    def from_stat_result(cls, result: os.stat_result) -> FileStat:
        return cls(
            is_dir=S_ISDIR(result.st_mode),
            size=result.st_size,
            mtime=datetime.fromtimestamp(result.st_mtime),
        )


@dataclass
class Entry:
    """One child of the listed directory. ``stat`` is None if it vanished."""

    name: str
    stat: FileStat | None = None

    @property
    def is_dir(self) -> bool:
        return self.stat is not None and self.stat.is_dir


async def probe_directory(path: str) -> bool:
    """Return True if *path* is a directory, False if it should pass through.

    Missing paths and non-directories pass through to the next app. A name that
    is too long raises :class:`PathTooLong`; anything else, including a path
    that runs through a regular file, raises :class:`InternalError`.
    """
    logger.debug('stat "%s"', path)
    try:
        result = await asyncio.to_thread(os.stat, path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        if exc.errno == errno.ENAMETOOLONG:
            raise PathTooLong() from exc
        raise InternalError() from exc

    return S_ISDIR(result.st_mode)


def remove_hidden(names: list[str]) -> list[str]:
    return [name for name in names if not name.startswith(".")]


async def read_directory(
    path: str,
    *,
    hidden: bool = False,
    filter: EntryFilter | None = None,
) -> list[str]:
    """List entry names of *path*, filtered and sorted by codepoint.

    The custom *filter* sees the list left after hidden files were dropped and
    is called as ``filter(name, index, names, path)``.
    """
    logger.debug('readdir "%s"', path)
    try:
        names = await asyncio.to_thread(os.listdir, path)
    except OSError as exc:
        raise InternalError() from exc

    if not hidden:
        names = remove_hidden(names)

    if filter is not None:
        candidates = names
        names = [
            name for index, name in enumerate(candidates) if filter(name, index, candidates, path)
        ]

    names.sort()
    return names


async def _stat_entry(path: str) -> FileStat | None:
    try:
        result = await asyncio.to_thread(os.stat, path)
    except FileNotFoundError:
        # Removed between readdir and stat.
        return None
    return FileStat.from_stat_result(result)


async def stat_full(
    directory: str, names: list[str], limit: int = STAT_CONCURRENCY
) -> list[Entry]:
    """Stat every entry with at most *limit* calls in flight.

    The first hard failure stops further stats from starting; those already
    running finish before the error is raised. Results keep the input order.
    """
    semaphore = asyncio.Semaphore(limit)
    failures: list[OSError] = []

    async def worker(name: str) -> Entry | None:
        async with semaphore:
            if failures:
                return None
            try:
                stat = await _stat_entry(os.path.join(directory, name))
            except OSError as exc:
                failures.append(exc)
                return None
            return Entry(name, stat)

    results = await asyncio.gather(*(worker(name) for name in names))
    if failures:
        raise InternalError() from failures[0]
    return list(results)


def _scan_types(directory: str) -> dict[str, FileStat]:
    with os.scandir(directory) as it:
        return {entry.name: FileStat(is_dir=entry.is_dir(follow_symlinks=False)) for entry in it}


async def stat_brief(directory: str, names: list[str]) -> list[Entry]:
    """Attach type-only metadata from a single scandir() pass.

    ``..`` is always reported as a directory without size or date.
    """
    try:
        listing = await asyncio.to_thread(_scan_types, directory)
    except OSError as exc:
        raise InternalError() from exc
    listing[PARENT] = FileStat(is_dir=True)
    return [Entry(name, listing.get(name)) for name in names]


async def stat_entries(directory: str, names: list[str], *, brief: bool = False) -> list[Entry]:
    if brief:
        return await stat_brief(directory, names)
    return await stat_full(directory, names)


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the Unicode collation table; done once, on first sort.
    return Collator()


def _sort_key(entry: Entry) -> tuple[int, int, tuple[int, ...]]:
    if entry.name == PARENT:
        return (0, 0, ())
    return (1, 0 if entry.is_dir else 1, _collator().sort_key(entry.name.lower()))


def sort_entries(entries: list[Entry]) -> list[Entry]:
    """``..`` first, then directories, then case-insensitive name order.

    Names compare by the Unicode Collation Algorithm, so punctuation sorts
    before digits, digits before letters, and accented letters next to their
    base letter, independent of the process locale.
    """
    return sorted(entries, key=_sort_key)
