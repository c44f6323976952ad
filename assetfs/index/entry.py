"""
Entry Module

Metadata records stored in a path index. An entry is either a
``FileEntry`` or a ``DirectoryEntry``; queries dispatch on the variant.

Entries double as the stat result handed to callers, mirroring what
``os.stat`` would report for the source file.
"""

import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Tuple, Union


class FileType(Enum):
    """Types of index entries."""
    REGULAR = 1
    DIRECTORY = 2


@dataclass(frozen=True)
class Entry(ABC):
    """
    Fields shared by both entry variants.

    ``mode`` holds the raw ``st_mode`` bits of the source entry and is
    exposed verbatim; ``mtime_ns`` is nanoseconds since the epoch.
    """

    identity: int
    name: str
    mode: int
    mtime_ns: int

    @property
    def is_dir(self) -> bool:
        return False

    @property
    @abstractmethod
    def file_type(self) -> FileType:
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        """Byte length of the content, 0 for directories."""

    @property
    def mod_time(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        seconds, nanos = divmod(self.mtime_ns, 1_000_000_000)
        return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(
            microsecond=nanos // 1000
        )

    @property
    def permissions(self) -> int:
        """Permission bits only (``mode & 0o777``)."""
        return stat.S_IMODE(self.mode)

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to dictionary for display."""
        return {
            'identity': self.identity,
            'name': self.name,
            'type': self.file_type.name,
            'size': self.size,
            'mode': oct(self.mode),
            'mtime': self.mod_time.strftime('%Y-%m-%d %H:%M'),
        }


@dataclass(frozen=True)
class FileEntry(Entry):
    """A regular file; its bytes live at ``contents[identity]``."""

    size: int = 0

    @property
    def file_type(self) -> FileType:
        return FileType.REGULAR


@dataclass(frozen=True)
class DirectoryEntry(Entry):
    """A directory; ``children`` lists child identities in build order."""

    children: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))

    @property
    def size(self) -> int:
        return 0

    @property
    def is_dir(self) -> bool:
        return True

    @property
    def file_type(self) -> FileType:
        return FileType.DIRECTORY


AnyEntry = Union[FileEntry, DirectoryEntry]
