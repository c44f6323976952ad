"""
Tree Builder Module

Walks a source directory once and produces a PathIndex.

Identity assignment happens in two phases. During the walk files are
numbered ``0, 1, 2, ...`` and directories get a provisional sequence
number of their own. Once the walk is finished the file count ``F`` is
known and every directory number (including those already recorded in
parent child lists and in the path map) is shifted by ``F``. Everything
is addressed by list position, so no entry ever references another
entry object.
"""

import os
import stat
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from assetfs.core.config_loader import MAX_FILE_SIZE
from assetfs.exceptions import BuildFailureError, FileTooLargeError, SourceReadError
from assetfs.filesystem.path_resolver import PathResolver
from assetfs.index import DirectoryEntry, FileEntry, PathIndex, ROOT_PATH
from assetfs.logger import get_logger


@dataclass
class _PendingFile:
    path: str
    entry: FileEntry
    data: bytes


@dataclass
class _PendingDirectory:
    """Directory record with child numbers that are not final yet."""
    path: str
    name: str
    mode: int
    mtime_ns: int
    files: List[int] = field(default_factory=list)
    subdirs: List[int] = field(default_factory=list)


# (source path, index path, parent directory sequence number, scandir entry)
_WalkItem = Tuple[str, str, Optional[int], Optional[os.DirEntry]]


class TreeBuilder:
    """
    Builds a PathIndex from a directory on disk.

    The walk is depth-first with children visited in lexical name order,
    so repeated builds of an unchanged tree give identical indexes. A
    directory's children list holds its files first, then its
    subdirectories, each group in visitation order.

    Only regular files and directories are accepted. Symlinks to regular
    files are followed; anything else aborts the build.

    Example:
        >>> index = TreeBuilder('static').build()
        >>> index.lookup('/css/site.css')
        0
    """

    def __init__(
        self,
        root: Union[str, os.PathLike],
        max_file_size: int = MAX_FILE_SIZE
    ):
        self.root = os.fspath(root)
        self.max_file_size = max_file_size
        self._logger = get_logger('builder')
        self._files: List[_PendingFile] = []
        self._dirs: List[_PendingDirectory] = []

    def build(self) -> PathIndex:
        """
        Walk the root and return the finished index.

        Raises:
            BuildFailureError: If the root is missing or not a directory,
                or an entry is neither a regular file nor a directory
            FileTooLargeError: If a file exceeds ``max_file_size``
            SourceReadError: If a file or directory cannot be read
        """
        self._files = []
        self._dirs = []

        self._logger.info(
            "Walk started",
            context={'root': self.root, 'max_file_size': self.max_file_size}
        )

        try:
            root_info = os.stat(self.root)
        except FileNotFoundError:
            raise BuildFailureError(
                f"Root path does not exist: {self.root}", path=self.root
            ) from None
        except OSError as e:
            raise SourceReadError(self.root, reason=e.strerror) from e

        if not stat.S_ISDIR(root_info.st_mode):
            raise BuildFailureError(
                f"Root path is not a directory: {self.root}", path=self.root
            )

        self._walk(root_info)
        index = self._finalize()

        self._logger.info(
            "Walk finished",
            context={
                'root': self.root,
                'files': index.file_count,
                'directories': index.directory_count,
                'bytes': sum(len(c) for c in index.contents),
            }
        )
        return index

    def _walk(self, root_info: os.stat_result) -> None:
        root_name = os.path.basename(os.path.normpath(os.path.abspath(self.root))) or '/'
        self._add_directory(ROOT_PATH, root_name, root_info, parent=None)

        stack: List[_WalkItem] = self._scan(self.root, ROOT_PATH, 0)
        while stack:
            source, rooted, parent, dir_entry = stack.pop()
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
                info = dir_entry.stat(follow_symlinks=not is_dir)
            except OSError as e:
                raise SourceReadError(source, reason=e.strerror) from e

            if is_dir:
                seq = self._add_directory(rooted, dir_entry.name, info, parent)
                stack.extend(self._scan(source, rooted, seq))
            elif stat.S_ISREG(info.st_mode):
                self._add_file(source, rooted, dir_entry.name, info, parent)
            else:
                raise BuildFailureError(
                    f"Not a regular file or directory: {source}", path=source
                )

    def _scan(self, source: str, rooted: str, seq: int) -> List[_WalkItem]:
        """Children of a directory, reversed so the stack pops them in name order."""
        try:
            with os.scandir(source) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise SourceReadError(source, reason=e.strerror) from e

        return [
            (child.path, PathResolver.join(rooted, child.name), seq, child)
            for child in reversed(children)
        ]

    def _add_directory(
        self,
        rooted: str,
        name: str,
        info: os.stat_result,
        parent: Optional[int]
    ) -> int:
        seq = len(self._dirs)
        self._dirs.append(_PendingDirectory(
            path=rooted,
            name=name,
            mode=info.st_mode,
            mtime_ns=info.st_mtime_ns,
        ))
        if parent is not None:
            self._dirs[parent].subdirs.append(seq)

        self._logger.debug("Directory", context={'path': rooted, 'seq': seq})
        return seq

    def _add_file(
        self,
        source: str,
        rooted: str,
        name: str,
        info: os.stat_result,
        parent: int
    ) -> None:
        if info.st_size > self.max_file_size:
            raise FileTooLargeError(source, size=info.st_size, limit=self.max_file_size)

        try:
            with open(source, 'rb') as f:
                data = f.read(self.max_file_size + 1)
        except OSError as e:
            raise SourceReadError(source, reason=e.strerror) from e

        # File grew between stat and read
        if len(data) > self.max_file_size:
            raise FileTooLargeError(source, size=len(data), limit=self.max_file_size)

        identity = len(self._files)
        self._files.append(_PendingFile(
            path=rooted,
            entry=FileEntry(
                identity=identity,
                name=name,
                mode=info.st_mode,
                mtime_ns=info.st_mtime_ns,
                size=len(data),
            ),
            data=data,
        ))
        self._dirs[parent].files.append(identity)

        self._logger.debug(
            "File", context={'path': rooted, 'identity': identity, 'size': len(data)}
        )

    def _finalize(self) -> PathIndex:
        """Shift directory numbers past the file range and assemble the index."""
        shift = len(self._files)

        entries: list = [f.entry for f in self._files]
        names: dict[str, int] = {f.path: f.entry.identity for f in self._files}

        for seq, d in enumerate(self._dirs):
            identity = seq + shift
            entries.append(DirectoryEntry(
                identity=identity,
                name=d.name,
                mode=d.mode,
                mtime_ns=d.mtime_ns,
                children=tuple(d.files) + tuple(s + shift for s in d.subdirs),
            ))
            names[d.path] = identity

        return PathIndex(
            contents=[f.data for f in self._files],
            entries=entries,
            names=names,
        )


def build_index(
    root: Union[str, os.PathLike],
    max_file_size: Optional[int] = None
) -> PathIndex:
    """
    Build a PathIndex for ``root``.

    Args:
        root: Directory to walk
        max_file_size: Per-file ceiling in bytes, defaults to 10 MiB

    Returns:
        The finished, validated index
    """
    builder = TreeBuilder(
        root,
        max_file_size=MAX_FILE_SIZE if max_file_size is None else max_file_size
    )
    return builder.build()
