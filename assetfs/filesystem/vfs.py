"""
Virtual File System (VFS) Module

Read-only filesystem answering open, stat, read, seek and directory
listing queries against a PathIndex, using only in-memory data.

The index is shared and never mutated; every ``open`` returns a new
``AssetFile`` owning its own read offset and listing cursor, so any
number of threads can query one filesystem without locking.
"""

import io
from typing import Iterator, List, Optional, Tuple, Union

from .path_resolver import PathResolver
from assetfs.exceptions import (
    EndOfStreamError,
    InvalidOperationError,
    IsDirectoryError,
    PathNotFoundError,
)
from assetfs.index import AnyEntry, DirectoryEntry, FileEntry, PathIndex, loads
from assetfs.logger import get_logger


SEEK_SET = io.SEEK_SET
SEEK_CUR = io.SEEK_CUR
SEEK_END = io.SEEK_END


class AssetFile:
    """
    A handle to one entry of a virtual filesystem.

    Files support ``read``, ``readinto``, ``seek`` and ``tell`` with the
    usual stream semantics; an empty result marks the end of the data.
    Directories support ``readdir``. Using the wrong family raises
    ``IsDirectoryError`` (byte operations on a directory) or
    ``InvalidOperationError`` (listing a file).
    """

    def __init__(self, index: PathIndex, identity: int, path: str):
        self._index = index
        self._entry: AnyEntry = index.entry(identity)
        self._path = path
        self._offset = 0
        self._listed = 0
        self._closed = False

    @property
    def name(self) -> str:
        """Normalized path this handle was opened with."""
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        kind = 'directory' if self._entry.is_dir else 'file'
        return f"<AssetFile {kind} {self._path!r}>"

    def __enter__(self) -> 'AssetFile':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Drop the cursor. Closing twice is allowed."""
        self._closed = True

    def stat(self) -> AnyEntry:
        """Metadata of the entry, exactly as recorded at build time."""
        self._check_open('stat')
        return self._entry

    def _data(self, operation: str) -> memoryview:
        self._check_open(operation)
        if isinstance(self._entry, DirectoryEntry):
            raise IsDirectoryError(self._path, operation=operation)
        return memoryview(self._index.content(self._entry.identity))

    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes (all remaining when negative).

        Returns:
            The bytes read; ``b''`` once the end has been reached
        """
        data = self._data('read')
        start = min(self._offset, len(data))
        end = len(data) if size is None or size < 0 else min(start + size, len(data))
        self._offset = max(self._offset, end)
        return bytes(data[start:end])

    def readinto(self, buffer) -> int:
        """
        Copy bytes into a writable buffer.

        Returns:
            Number of bytes copied; 0 once the end has been reached
        """
        data = self._data('read')
        target = memoryview(buffer).cast('B')
        start = min(self._offset, len(data))
        count = min(len(target), len(data) - start)
        target[:count] = data[start:start + count]
        self._offset = max(self._offset, start + count)
        return count

    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        """
        Move the read offset.

        Args:
            offset: Byte offset
            whence: SEEK_SET, SEEK_CUR or SEEK_END

        Returns:
            New absolute offset
        """
        data = self._data('seek')

        if whence == SEEK_SET:
            position = offset
        elif whence == SEEK_CUR:
            position = self._offset + offset
        elif whence == SEEK_END:
            position = len(data) + offset
        else:
            raise InvalidOperationError(
                self._path, operation='seek', reason=f"invalid whence {whence!r}"
            )

        if position < 0:
            raise InvalidOperationError(
                self._path, operation='seek', reason="negative position"
            )

        self._offset = position
        return position

    def tell(self) -> int:
        self._data('tell')
        return self._offset

    def readdir(self, count: Optional[int] = 0) -> List[AnyEntry]:
        """
        List children from the handle's cursor onwards.

        With ``count <= 0`` (or None) all remaining children are returned
        and an exhausted cursor gives ``[]``. With ``count > 0`` at most
        ``count`` children are returned and an exhausted cursor raises
        ``EndOfStreamError``. Callers rely on this difference.

        Raises:
            InvalidOperationError: If the handle is a file
            EndOfStreamError: Bounded listing past the last child
        """
        self._check_open('readdir')
        if isinstance(self._entry, FileEntry):
            raise InvalidOperationError(
                self._path, operation='readdir', reason="not a directory"
            )

        children = self._entry.children

        if count is None or count <= 0:
            if self._listed >= len(children):
                return []
            batch = children[self._listed:]
        else:
            if self._listed >= len(children):
                raise EndOfStreamError(self._path)
            batch = children[self._listed:self._listed + count]

        self._listed += len(batch)
        return [self._index.entry(i) for i in batch]

    def _check_open(self, operation: str) -> None:
        if self._closed:
            raise InvalidOperationError(
                self._path, operation=operation, reason="handle is closed"
            )


class VirtualFileSystem:
    """
    Query surface over one PathIndex.

    Constructed with ``None`` the filesystem is absent: every query
    raises ``PathNotFoundError``, the same failure as a missing path.

    Example:
        >>> vfs = VirtualFileSystem(index)
        >>> with vfs.open('/css/site.css') as f:
        ...     f.read()
        b'body{}'
    """

    def __init__(self, index: Optional[PathIndex] = None):
        self._index = index
        self._logger = get_logger('vfs')

    @property
    def index(self) -> Optional[PathIndex]:
        return self._index

    @property
    def available(self) -> bool:
        return self._index is not None

    def __repr__(self) -> str:
        return f"VirtualFileSystem({self._index!r})"

    def _resolve(self, name: str) -> Tuple[str, int]:
        path = PathResolver.clean(name)
        if self._index is None:
            self._logger.debug("Query against absent filesystem", context={'path': path})
            raise PathNotFoundError(path)

        identity = self._index.lookup(path)
        if identity is None:
            raise PathNotFoundError(path)
        return path, identity

    def open(self, name: str) -> AssetFile:
        """
        Open a path.

        The path is normalized first: a leading slash is implied and
        ``.``, ``..`` and repeated slashes are resolved.

        Raises:
            PathNotFoundError: If nothing is stored at the path
        """
        path, identity = self._resolve(name)
        return AssetFile(self._index, identity, path)

    def stat(self, name: str) -> AnyEntry:
        """Metadata for a path."""
        _, identity = self._resolve(name)
        return self._index.entry(identity)

    def exists(self, name: str) -> bool:
        """Check if a path exists."""
        try:
            self._resolve(name)
        except PathNotFoundError:
            return False
        return True

    def is_directory(self, name: str) -> bool:
        """Check if a path is a directory."""
        return self.exists(name) and self.stat(name).is_dir

    def is_file(self, name: str) -> bool:
        """Check if a path is a regular file."""
        return self.exists(name) and not self.stat(name).is_dir

    def read_bytes(self, name: str) -> bytes:
        """Whole content of a file."""
        with self.open(name) as f:
            return f.read()

    def list_dir(self, name: str = '/') -> List[AnyEntry]:
        """All children of a directory in build order."""
        with self.open(name) as f:
            return f.readdir()

    def walk(self, top: str = '/') -> Iterator[Tuple[str, List[str], List[str]]]:
        """
        Depth-first walk like ``os.walk``.

        Yields:
            ``(dirpath, dirnames, filenames)`` for every directory under
            ``top``, parents before children; nothing when ``top`` is a
            file

        Raises:
            PathNotFoundError: If ``top`` does not exist
        """
        start, identity = self._resolve(top)
        if not self._index.entry(identity).is_dir:
            return
        pending = [start]
        while pending:
            dirpath = pending.pop()
            children = self.list_dir(dirpath)
            dirnames = [c.name for c in children if c.is_dir]
            filenames = [c.name for c in children if not c.is_dir]
            yield dirpath, dirnames, filenames
            pending.extend(
                PathResolver.join(dirpath, d) for d in reversed(dirnames)
            )


def open_filesystem(
    source: Union[PathIndex, str, bytes, None]
) -> VirtualFileSystem:
    """
    Build a filesystem from an index or its JSON serialization.

    ``None`` gives the absent filesystem.

    Raises:
        IndexIntegrityError: If serialized input is malformed
    """
    if source is None or isinstance(source, PathIndex):
        return VirtualFileSystem(source)
    return VirtualFileSystem(loads(source))
