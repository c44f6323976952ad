"""
Path Index Module

The immutable value handed from the build step to the runtime: file
contents, entry metadata and the path map.

Layout:
    entries[0:F]      file entries, contents[i] holds the bytes of entry i
    entries[F:F+D]    directory entries
    names             normalized absolute path -> identity

Because files always occupy ``[0, F)`` a single range test tells the two
variants apart without touching the entry.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from .entry import AnyEntry, DirectoryEntry, FileEntry
from assetfs.exceptions import IndexIntegrityError, InvalidOperationError


ROOT_PATH = '/'


class PathIndex:
    """
    Serialized representation of one walked directory tree.

    Instances are never mutated after construction and may be shared by
    any number of filesystems and handles across threads.

    Example:
        >>> index = PathIndex(
        ...     contents=[b'abc'],
        ...     entries=[
        ...         FileEntry(identity=0, name='red', mode=0o100644, mtime_ns=0, size=3),
        ...         DirectoryEntry(identity=1, name='static', mode=0o40755, mtime_ns=0, children=(0,)),
        ...     ],
        ...     names={'/red': 0, '/': 1},
        ... )
        >>> index.lookup('/red')
        0
    """

    __slots__ = ('_contents', '_entries', '_names', '_file_count')

    def __init__(
        self,
        contents: Iterable[bytes],
        entries: Iterable[AnyEntry],
        names: Mapping[str, int],
        validate: bool = True
    ):
        self._contents: Tuple[bytes, ...] = tuple(bytes(c) for c in contents)
        self._entries: Tuple[AnyEntry, ...] = tuple(entries)
        self._names = MappingProxyType(dict(names))
        self._file_count = len(self._contents)
        if validate:
            self.validate()

    @property
    def contents(self) -> Sequence[bytes]:
        return self._contents

    @property
    def entries(self) -> Sequence[AnyEntry]:
        return self._entries

    @property
    def names(self) -> Mapping[str, int]:
        """Read-only path map."""
        return self._names

    @property
    def file_count(self) -> int:
        return self._file_count

    @property
    def directory_count(self) -> int:
        return len(self._entries) - self._file_count

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathIndex):
            return NotImplemented
        return (
            self._contents == other._contents
            and self._entries == other._entries
            and dict(self._names) == dict(other._names)
        )

    def __hash__(self) -> int:
        return hash((self._contents, self._entries))

    def __repr__(self) -> str:
        return (
            f"PathIndex(files={self.file_count}, "
            f"directories={self.directory_count})"
        )

    def is_file_identity(self, identity: int) -> bool:
        return 0 <= identity < self._file_count

    def entry(self, identity: int) -> AnyEntry:
        return self._entries[identity]

    def content(self, identity: int) -> bytes:
        """Bytes of a file entry; undefined for directories."""
        if not self.is_file_identity(identity):
            raise InvalidOperationError(
                self.path_of(identity) or str(identity),
                operation="content",
                reason="not a file identity"
            )
        return self._contents[identity]

    def lookup(self, path: str) -> Optional[int]:
        """Identity for an already normalized path, or None."""
        return self._names.get(path)

    def path_of(self, identity: int) -> Optional[str]:
        for path, i in self._names.items():
            if i == identity:
                return path
        return None

    def paths(self) -> list[Tuple[str, int]]:
        """Path map in identity order."""
        return sorted(self._names.items(), key=lambda item: item[1])

    @property
    def root(self) -> DirectoryEntry:
        return self._entries[self._names[ROOT_PATH]]

    def validate(self) -> None:
        """
        Check every structural rule of the index.

        Raises:
            IndexIntegrityError: naming the first violated rule
        """
        files = self._file_count

        for i, entry in enumerate(self._entries):
            if entry.identity != i:
                raise IndexIntegrityError(
                    f"entry at position {i} carries identity {entry.identity}",
                    identity=i
                )
            if i < files:
                if not isinstance(entry, FileEntry):
                    raise IndexIntegrityError(
                        "directory inside the file identity range", identity=i
                    )
                if entry.size != len(self._contents[i]):
                    raise IndexIntegrityError(
                        f"size {entry.size} does not match {len(self._contents[i])} content bytes",
                        identity=i
                    )
            elif not isinstance(entry, DirectoryEntry):
                raise IndexIntegrityError(
                    "file without content buffer", identity=i
                )

        if len(self._entries) < files:
            raise IndexIntegrityError(
                f"{files} content buffers for {len(self._entries)} entries"
            )

        linked: set[int] = set()
        for entry in self._entries[files:]:
            for child in entry.children:
                if not 0 <= child < len(self._entries):
                    raise IndexIntegrityError(
                        f"child identity {child} does not exist",
                        identity=entry.identity
                    )
                if child in linked:
                    raise IndexIntegrityError(
                        f"child identity {child} has more than one parent",
                        identity=entry.identity
                    )
                linked.add(child)

        seen: set[int] = set()
        for path, identity in self._names.items():
            if path != ROOT_PATH and (
                not path.startswith('/') or path.endswith('/')
                or '//' in path or '/./' in path + '/' or '/../' in path + '/'
            ):
                raise IndexIntegrityError("path is not normalized", path=path)
            if not 0 <= identity < len(self._entries):
                raise IndexIntegrityError(
                    "path maps to a missing entry", identity=identity, path=path
                )
            if identity in seen:
                raise IndexIntegrityError(
                    "two paths map to one entry", identity=identity, path=path
                )
            seen.add(identity)

        if len(seen) != len(self._entries):
            missing = min(set(range(len(self._entries))) - seen)
            raise IndexIntegrityError("entry without a path", identity=missing)

        root = self._names.get(ROOT_PATH)
        if root is None:
            raise IndexIntegrityError("root path is missing", path=ROOT_PATH)
        if not isinstance(self._entries[root], DirectoryEntry):
            raise IndexIntegrityError("root path is not a directory", path=ROOT_PATH)
