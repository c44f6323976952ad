"""
Index Codec

JSON serialization of path indexes. File contents are base64 encoded.
Output is deterministic: entries in identity order, object keys sorted,
so two builds of an unchanged tree produce identical documents.

Document layout::

    {
      "format": 1,
      "contents": ["YWJj", ...],
      "entries": [
        {"identity": 0, "type": "file", "name": "red", "mode": 33188,
         "mtime_ns": 0, "size": 3},
        {"identity": 2, "type": "directory", "name": "static",
         "mode": 16877, "mtime_ns": 0, "children": [0, 1]}
      ],
      "names": {"/": 2, "/red": 0, ...}
    }

A bundle wraps several named indexes: ``{"format": 1, "indexes": {...}}``.
"""

import base64
import binascii
import json
from typing import Any, Mapping, Union

from .entry import AnyEntry, DirectoryEntry, FileEntry
from .path_index import PathIndex
from assetfs.exceptions import IndexIntegrityError


FORMAT_VERSION = 1


def index_to_dict(index: PathIndex) -> dict[str, Any]:
    """Convert an index to plain JSON-compatible data."""
    return {
        'format': FORMAT_VERSION,
        'contents': [base64.b64encode(c).decode('ascii') for c in index.contents],
        'entries': [_entry_to_dict(e) for e in index.entries],
        'names': {path: identity for path, identity in index.paths()},
    }


def index_from_dict(data: Mapping[str, Any]) -> PathIndex:
    """
    Rebuild an index from plain data.

    Raises:
        IndexIntegrityError: If the data is malformed or violates an
            index invariant
    """
    _check_format(data)
    try:
        contents = [base64.b64decode(c, validate=True) for c in data['contents']]
        entries = [_entry_from_dict(e) for e in data['entries']]
        names = {str(path): int(identity) for path, identity in data['names'].items()}
    except (KeyError, TypeError, ValueError, AttributeError, binascii.Error) as e:
        raise IndexIntegrityError(f"malformed document: {e}") from e
    return PathIndex(contents=contents, entries=entries, names=names)


def dumps(index: PathIndex) -> str:
    """Serialize one index to JSON text."""
    return json.dumps(index_to_dict(index), sort_keys=True, indent=1) + '\n'


def loads(text: Union[str, bytes]) -> PathIndex:
    """Deserialize and validate one index."""
    return index_from_dict(_parse(text))


def dump_bundle(indexes: Mapping[str, PathIndex]) -> str:
    """Serialize several named indexes into one document."""
    document = {
        'format': FORMAT_VERSION,
        'indexes': {
            name: index_to_dict(index) for name, index in indexes.items()
        },
    }
    return json.dumps(document, sort_keys=True, indent=1) + '\n'


def load_bundle(text: Union[str, bytes]) -> dict[str, PathIndex]:
    """Deserialize a bundle written by ``dump_bundle``."""
    data = _parse(text)
    _check_format(data)
    indexes = data.get('indexes')
    if not isinstance(indexes, dict):
        raise IndexIntegrityError("malformed bundle: 'indexes' is not an object")
    return {str(name): index_from_dict(doc) for name, doc in indexes.items()}


def _parse(text: Union[str, bytes]) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise IndexIntegrityError(f"invalid JSON: {e}") from e


def _check_format(data: Any) -> None:
    if not isinstance(data, dict):
        raise IndexIntegrityError("document is not an object")
    version = data.get('format')
    if version != FORMAT_VERSION:
        raise IndexIntegrityError(f"unsupported format version {version!r}")


def _entry_to_dict(entry: AnyEntry) -> dict[str, Any]:
    item: dict[str, Any] = {
        'identity': entry.identity,
        'type': 'directory' if entry.is_dir else 'file',
        'name': entry.name,
        'mode': entry.mode,
        'mtime_ns': entry.mtime_ns,
    }
    if isinstance(entry, DirectoryEntry):
        item['children'] = list(entry.children)
    else:
        item['size'] = entry.size
    return item


def _entry_from_dict(item: Mapping[str, Any]) -> AnyEntry:
    kind = item['type']
    common = dict(
        identity=int(item['identity']),
        name=str(item['name']),
        mode=int(item['mode']),
        mtime_ns=int(item['mtime_ns']),
    )
    if kind == 'file':
        return FileEntry(size=int(item['size']), **common)
    if kind == 'directory':
        return DirectoryEntry(
            children=tuple(int(c) for c in item.get('children', ())),
            **common
        )
    raise ValueError(f"unknown entry type {kind!r}")
