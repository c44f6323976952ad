"""
assetfs - Embedded read-only asset filesystems

Walks a directory of small static files at build time and serializes it
as a compact index (a generated Python module or a JSON bundle). At run
time the index is served as an in-memory filesystem supporting open,
stat, read, seek and paginated directory listing.
"""

__version__ = "1.0.0"

from .index import (
    Entry,
    FileEntry,
    DirectoryEntry,
    FileType,
    PathIndex,
    dumps,
    loads,
    dump_bundle,
    load_bundle,
)
from .filesystem import (
    VirtualFileSystem,
    AssetFile,
    DiskFileSystem,
    PathResolver,
    open_filesystem,
)
from .builder import TreeBuilder, build_index
from .core.config_loader import MAX_FILE_SIZE

__all__ = [
    # Index
    'Entry',
    'FileEntry',
    'DirectoryEntry',
    'FileType',
    'PathIndex',
    'dumps',
    'loads',
    'dump_bundle',
    'load_bundle',
    # Runtime
    'VirtualFileSystem',
    'AssetFile',
    'DiskFileSystem',
    'PathResolver',
    'open_filesystem',
    # Build
    'TreeBuilder',
    'build_index',
    'MAX_FILE_SIZE',
]
