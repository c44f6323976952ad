"""
assetfs Exception Hierarchy

Architecture:
    BuildException
    ├── BuildFailureError
    │   ├── FileTooLargeError
    │   └── SourceReadError
    └── ConfigValidationError
    FileSystemException
    ├── PathNotFoundError
    ├── IsDirectoryError
    ├── InvalidOperationError
    ├── EndOfStreamError
    └── IndexIntegrityError
"""

from .build_exceptions import (
    BuildException,
    BuildFailureError,
    FileTooLargeError,
    SourceReadError,
    ConfigValidationError,
)

from .fs_exceptions import (
    FileSystemException,
    PathNotFoundError,
    IsDirectoryError,
    InvalidOperationError,
    EndOfStreamError,
    IndexIntegrityError,
)

__all__ = [
    # Build exceptions
    "BuildException",
    "BuildFailureError",
    "FileTooLargeError",
    "SourceReadError",
    "ConfigValidationError",
    # Filesystem exceptions
    "FileSystemException",
    "PathNotFoundError",
    "IsDirectoryError",
    "InvalidOperationError",
    "EndOfStreamError",
    "IndexIntegrityError",
]
