"""
assetfs Index Module

The value passed from the build step to the runtime:
- Entry variants (files and directories)
- The immutable PathIndex
- JSON serialization
"""

from .entry import Entry, FileEntry, DirectoryEntry, FileType, AnyEntry
from .path_index import PathIndex, ROOT_PATH
from .codec import dumps, loads, dump_bundle, load_bundle, FORMAT_VERSION

__all__ = [
    # Entries
    'Entry',
    'FileEntry',
    'DirectoryEntry',
    'FileType',
    'AnyEntry',
    # Index
    'PathIndex',
    'ROOT_PATH',
    # Codec
    'dumps',
    'loads',
    'dump_bundle',
    'load_bundle',
    'FORMAT_VERSION',
]
