"""
Build Exceptions

Exceptions raised while walking a source directory and producing an
index, and while loading generator configuration.

Any of these aborts the build; no partial index is ever returned.
"""

from typing import Optional, Any


class BuildException(Exception):
    """
    Base exception for all build-time errors.

    Attributes:
        message: Human-readable error description
        path: Offending source path (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise BuildException("Generator failure", error_code=4100)
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
        self.error_code = error_code or 0
        self.context = context or {}
        if path:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"path={self.path!r}, "
            f"error_code={self.error_code})"
        )


class BuildFailureError(BuildException):
    """
    The build could not produce an index.

    Common causes:
    - Root path missing or not a directory
    - Entry that is neither a regular file nor a directory
    - Invalid generator arguments
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            path=path,
            error_code=error_code or 4100,
            context=context
        )


class FileTooLargeError(BuildFailureError):
    """
    A source file exceeds the per-file size ceiling.

    Example:
        >>> raise FileTooLargeError("/srv/static/video.mp4", size=11534336, limit=10485760)
    """

    def __init__(
        self,
        path: str,
        size: int,
        limit: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["size"] = size
        ctx["limit"] = limit
        super().__init__(
            message=f"File {path!r} size exceeds max allowed size",
            path=path,
            error_code=4101,
            context=ctx
        )
        self.size = size
        self.limit = limit


class SourceReadError(BuildFailureError):
    """
    A source file or directory could not be read.

    Wraps the underlying OSError (permission, I/O).
    """

    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Cannot read source: {path}",
            path=path,
            error_code=4102,
            context=ctx
        )
        self.reason = reason


class ConfigValidationError(BuildException):
    """Raised when configuration loading or validation fails."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            path=path,
            error_code=4103,
            context=context
        )
