"""
Filesystem Exceptions

Exceptions raised by the runtime side: path lookups, handle operations
and decoding of a serialized index.

Runtime failures carry their kind and the queried path, nothing more.
"""

from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all virtual filesystem errors.

    Attributes:
        message: Human-readable error description
        path: Path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.context = context or {}
        if path:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base


class PathNotFoundError(FileSystemException):
    """
    The path does not resolve to any entry.

    Also raised for every query against an absent filesystem, so callers
    treat "no such bundle" and "no such path" the same way.

    Example:
        >>> raise PathNotFoundError("/css/site.css")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"File not found: {path}",
            path=path,
            error_code=4001,
            context=context
        )


class IsDirectoryError(FileSystemException):
    """
    A byte-stream operation was attempted on a directory handle.

    Example:
        >>> raise IsDirectoryError("/css", operation="read")
    """

    def __init__(
        self,
        path: str,
        operation: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(
            message=f"Is a directory: {path}",
            path=path,
            error_code=4002,
            context=ctx
        )
        self.operation = operation


class InvalidOperationError(FileSystemException):
    """
    The operation is not valid for this handle.

    Raised when listing a file, seeking to a negative offset, or using
    a handle after it was closed.
    """

    def __init__(
        self,
        path: str,
        operation: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Invalid operation: {path}",
            path=path,
            error_code=4003,
            context=ctx
        )
        self.operation = operation
        self.reason = reason


class EndOfStreamError(FileSystemException):
    """
    Bounded directory listing is exhausted.

    This is the normal "stop asking" signal, not a failure of the
    filesystem.
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"End of stream: {path}",
            path=path,
            error_code=4004,
            context=context
        )


class IndexIntegrityError(FileSystemException):
    """
    A path index violates its structural rules.

    Raised when validating a freshly constructed index or when decoding
    a serialized one.

    Example:
        >>> raise IndexIntegrityError("root path is missing")
    """

    def __init__(
        self,
        reason: str,
        identity: Optional[int] = None,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if identity is not None:
            ctx["identity"] = identity
        super().__init__(
            message=f"Invalid path index: {reason}",
            path=path,
            error_code=4005,
            context=ctx
        )
        self.reason = reason
        self.identity = identity
