"""
assetfs File System Module

Runtime side:
- Path normalization
- In-memory VirtualFileSystem over a PathIndex
- DiskFileSystem with the same interface for development
"""

from .path_resolver import PathResolver
from .vfs import (
    VirtualFileSystem,
    AssetFile,
    open_filesystem,
    SEEK_SET,
    SEEK_CUR,
    SEEK_END,
)
from .disk import DiskFileSystem, DiskFile

__all__ = [
    # Path Resolver
    'PathResolver',
    # VFS
    'VirtualFileSystem',
    'AssetFile',
    'open_filesystem',
    'SEEK_SET',
    'SEEK_CUR',
    'SEEK_END',
    # Development
    'DiskFileSystem',
    'DiskFile',
]
