"""
Path Resolver Module

Normalizes the slash-separated paths used as keys of a path index.
Index paths are always absolute, with ``.`` and ``..`` resolved, no
repeated slashes and no trailing slash except for the root ``/``.
"""

from typing import List


class PathResolver:
    """Builds index keys from query paths."""

    @staticmethod
    def parse(path: str) -> List[str]:
        """Non-empty components of a path, ``.`` dropped."""
        return [part for part in path.split('/') if part not in ('', '.')]

    @staticmethod
    def normalize(path: str) -> str:
        """
        Resolve ``.``, ``..`` and repeated slashes.

        ``..`` never climbs above the root of an absolute path; leading
        ``..`` components of a relative path are kept.
        """
        rooted = path.startswith('/')
        stack: List[str] = []

        for part in PathResolver.parse(path):
            if part != '..':
                stack.append(part)
            elif stack and stack[-1] != '..':
                stack.pop()
            elif not rooted:
                stack.append(part)

        if rooted:
            return '/' + '/'.join(stack)
        return '/'.join(stack) or '.'

    @staticmethod
    def clean(path: str) -> str:
        """
        Turn any query path into its index key.

        A leading slash is implied, so ``"css/site.css"``,
        ``"/css//site.css"`` and ``"/img/../css/site.css"`` all give
        ``"/css/site.css"``.
        """
        return PathResolver.normalize('/' + path)

    @staticmethod
    def join(parent: str, *names: str) -> str:
        """Append names to ``parent``; a name starting with ``/`` restarts at the root."""
        joined = parent
        for name in names:
            joined = name if name.startswith('/') else f"{joined.rstrip('/')}/{name}"
        return PathResolver.normalize(joined)

    @staticmethod
    def basename(path: str) -> str:
        """Last component of a normalized path; ``/`` for the root."""
        normalized = PathResolver.normalize(path)
        if normalized == '/':
            return normalized
        return normalized.rpartition('/')[2]
