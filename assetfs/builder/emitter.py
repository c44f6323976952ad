"""
Emitter Module

Renders indexes as an importable Python module.

The module holds an ``INDEXES`` literal mapping each asset directory
name to its PathIndex, and an ``asset_dir(name)`` function that builds a
VirtualFileSystem from it. The development stub exposes the same
``asset_dir`` backed by DiskFileSystem.
"""

from typing import List, Mapping

from assetfs.index import DirectoryEntry, PathIndex

HEADER = "# autogenerated module, do not edit\n"

# bytes per literal line for file contents
CHUNK_SIZE = 64

_MAIN_TAIL = '''

def asset_dir(name):
    """Filesystem for an embedded directory; unknown names answer not-found."""
    return VirtualFileSystem(INDEXES.get(name))
'''

_DEV_STUB = '''
from assetfs import DiskFileSystem


def asset_dir(name):
    """Serve the directory from disk."""
    return DiskFileSystem(name)
'''


def render_module(indexes: Mapping[str, PathIndex]) -> str:
    """
    Render the main generated module.

    Args:
        indexes: Asset directory name -> index, emitted in the given order

    Returns:
        Python source text
    """
    lines: List[str] = [
        HEADER,
        "from assetfs import DirectoryEntry, FileEntry, PathIndex, VirtualFileSystem",
        "",
        "INDEXES = {",
    ]
    for name, index in indexes.items():
        lines.extend(_render_index(name, index))
    lines.append("}")
    return "\n".join(lines) + "\n" + _MAIN_TAIL


def render_dev_stub() -> str:
    """Render the development module."""
    return HEADER + _DEV_STUB


def _render_index(name: str, index: PathIndex) -> List[str]:
    lines = [f"    {name!r}: PathIndex(", "        contents=["]
    for data in index.contents:
        lines.extend(_render_bytes(data, indent=" " * 12))
    lines.append("        ],")

    lines.append("        entries=[")
    for entry in index.entries:
        fields = (
            f"identity={entry.identity}, name={entry.name!r}, "
            f"mode={oct(entry.mode)}, mtime_ns={entry.mtime_ns}"
        )
        if isinstance(entry, DirectoryEntry):
            if entry.children:
                fields += f", children={entry.children!r}"
            lines.append(f"            DirectoryEntry({fields}),")
        else:
            lines.append(f"            FileEntry({fields}, size={entry.size}),")
    lines.append("        ],")

    # identity order
    lines.append("        names={")
    for path, identity in index.paths():
        lines.append(f"            {path!r}: {identity},")
    lines.append("        },")
    lines.append("    ),")
    return lines


def _render_bytes(data: bytes, indent: str) -> List[str]:
    if len(data) <= CHUNK_SIZE:
        return [f"{indent}{data!r},"]

    lines = [f"{indent}("]
    for start in range(0, len(data), CHUNK_SIZE):
        lines.append(f"{indent}    {data[start:start + CHUNK_SIZE]!r}")
    lines.append(f"{indent}),")
    return lines
