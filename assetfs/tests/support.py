"""Shared helpers for the assetfs test suite."""

import os
import shutil
import tempfile
import unittest
from typing import Union

from assetfs.index import DirectoryEntry, FileEntry, PathIndex

Layout = dict[str, Union[bytes, 'Layout']]


def make_tree(root: str, layout: Layout) -> None:
    """Create files (bytes values) and directories (dict values) under root."""
    for name, value in layout.items():
        path = os.path.join(root, name)
        if isinstance(value, dict):
            os.mkdir(path)
            make_tree(path, value)
        else:
            with open(path, 'wb') as f:
                f.write(value)


def red_green_index() -> PathIndex:
    """Two files directly under the root, stored as a generated module would."""
    return PathIndex(
        contents=[b'abc', b'cde'],
        entries=[
            FileEntry(identity=0, name='red', mode=0o100644, mtime_ns=0, size=3),
            FileEntry(identity=1, name='green', mode=0o100644, mtime_ns=0, size=3),
            DirectoryEntry(identity=2, name='static', mode=0o40755, mtime_ns=0, children=(0, 1)),
        ],
        names={'/red': 0, '/green': 1, '/': 2},
    )


class TempDirTestCase(unittest.TestCase):
    """Provides ``self.tmp``, a scratch directory removed after each test."""

    def setUp(self):
        self.tmp = tempfile.mkdtemp(prefix='assetfs-test-')

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def make_root(self, layout: Layout, name: str = 'static') -> str:
        root = os.path.join(self.tmp, name)
        os.mkdir(root)
        make_tree(root, layout)
        return root
