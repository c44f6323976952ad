"""
Disk File System Module

Development stand-in for VirtualFileSystem that serves a directory
straight from disk, so edits show up without regenerating the index.
It answers with the same entry types, error kinds and listing order
as the in-memory filesystem.
"""

import os
import stat
from typing import List, Optional, Union

from .path_resolver import PathResolver
from .vfs import SEEK_SET
from assetfs.exceptions import (
    EndOfStreamError,
    InvalidOperationError,
    IsDirectoryError,
    PathNotFoundError,
)
from assetfs.index import AnyEntry, DirectoryEntry, FileEntry


def entry_from_stat(name: str, info: os.stat_result) -> AnyEntry:
    """Entry for an on-disk item. Its identity is -1, children are not tracked."""
    if stat.S_ISDIR(info.st_mode):
        return DirectoryEntry(
            identity=-1, name=name, mode=info.st_mode, mtime_ns=info.st_mtime_ns
        )
    return FileEntry(
        identity=-1, name=name, mode=info.st_mode, mtime_ns=info.st_mtime_ns,
        size=info.st_size
    )


class DiskFile:
    """Handle to a file or directory on disk with AssetFile semantics."""

    def __init__(self, source: str, path: str, entry: AnyEntry):
        self._source = source
        self._path = path
        self._entry = entry
        self._file = None if entry.is_dir else open(source, 'rb')
        self._children: Optional[List[AnyEntry]] = None
        self._listed = 0
        self._closed = False

    @property
    def name(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'DiskFile':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
        self._closed = True

    def stat(self) -> AnyEntry:
        self._check_open('stat')
        return self._entry

    def _stream(self, operation: str):
        self._check_open(operation)
        if self._file is None:
            raise IsDirectoryError(self._path, operation=operation)
        return self._file

    def read(self, size: int = -1) -> bytes:
        return self._stream('read').read(size)

    def readinto(self, buffer) -> int:
        return self._stream('read').readinto(buffer)

    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        stream = self._stream('seek')
        try:
            return stream.seek(offset, whence)
        except (ValueError, OSError) as e:
            raise InvalidOperationError(
                self._path, operation='seek', reason=str(e)
            ) from e

    def tell(self) -> int:
        return self._stream('tell').tell()

    def readdir(self, count: Optional[int] = 0) -> List[AnyEntry]:
        """Same cursor rules as ``AssetFile.readdir``."""
        self._check_open('readdir')
        if self._file is not None:
            raise InvalidOperationError(
                self._path, operation='readdir', reason="not a directory"
            )

        if self._children is None:
            self._children = self._scan()
        children = self._children

        if count is None or count <= 0:
            if self._listed >= len(children):
                return []
            batch = children[self._listed:]
        else:
            if self._listed >= len(children):
                raise EndOfStreamError(self._path)
            batch = children[self._listed:self._listed + count]

        self._listed += len(batch)
        return batch

    def _scan(self) -> List[AnyEntry]:
        """Children in build order: files first, then directories, by name."""
        files: List[AnyEntry] = []
        dirs: List[AnyEntry] = []
        with os.scandir(self._source) as it:
            for child in sorted(it, key=lambda e: e.name):
                # links are followed, so the bucket comes from the target
                entry = entry_from_stat(child.name, child.stat())
                (dirs if entry.is_dir else files).append(entry)
        return files + dirs

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise InvalidOperationError(
                self._path, operation=operation, reason="handle is closed"
            )


class DiskFileSystem:
    """
    Serves a directory from disk with the VirtualFileSystem interface.

    Query paths are normalized before being joined to the root, so
    ``..`` can never leave it.
    """

    def __init__(self, root: Union[str, os.PathLike]):
        self.root = os.fspath(root)

    def __repr__(self) -> str:
        return f"DiskFileSystem({self.root!r})"

    def _locate(self, name: str):
        path = PathResolver.clean(name)
        source = os.path.join(self.root, path.lstrip('/')) if path != '/' else self.root
        try:
            info = os.stat(source)
        except (FileNotFoundError, NotADirectoryError):
            raise PathNotFoundError(path) from None
        entry_name = PathResolver.basename(path) if path != '/' else (
            os.path.basename(os.path.normpath(os.path.abspath(self.root))) or '/'
        )
        return path, source, entry_from_stat(entry_name, info)

    def open(self, name: str) -> DiskFile:
        path, source, entry = self._locate(name)
        return DiskFile(source, path, entry)

    def stat(self, name: str) -> AnyEntry:
        return self._locate(name)[2]

    def exists(self, name: str) -> bool:
        try:
            self._locate(name)
        except PathNotFoundError:
            return False
        return True

    def is_directory(self, name: str) -> bool:
        return self.exists(name) and self.stat(name).is_dir

    def is_file(self, name: str) -> bool:
        return self.exists(name) and not self.stat(name).is_dir

    def read_bytes(self, name: str) -> bytes:
        with self.open(name) as f:
            return f.read()

    def list_dir(self, name: str = '/') -> List[AnyEntry]:
        with self.open(name) as f:
            return f.readdir()
