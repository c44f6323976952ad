#!/usr/bin/env python3
"""
Virtual File System Tests

Exercises the in-memory query surface: path resolution, byte access,
seeking and the directory listing cursor.
"""

import os
import unittest

from assetfs.builder import build_index
from assetfs.exceptions import (
    EndOfStreamError,
    FileSystemException,
    InvalidOperationError,
    IsDirectoryError,
    PathNotFoundError,
)
from assetfs.filesystem import (
    SEEK_CUR,
    SEEK_END,
    SEEK_SET,
    VirtualFileSystem,
    open_filesystem,
)
from assetfs.index import dumps
from assetfs.tests.support import TempDirTestCase, red_green_index


class TestVirtualFileSystem(unittest.TestCase):
    """Test lookups against a literal red/green index."""

    def setUp(self):
        self.vfs = VirtualFileSystem(red_green_index())

    def test_read_red(self):
        """Opening /red and reading everything gives its content."""
        with self.vfs.open('/red') as f:
            self.assertEqual(f.read(), b'abc')
            self.assertEqual(f.stat().size, 3)
            self.assertEqual(f.stat().name, 'red')
            self.assertFalse(f.stat().is_dir)

    def test_root_listing(self):
        with self.vfs.open('/') as f:
            children = f.readdir()
        self.assertEqual([c.name for c in children], ['red', 'green'])
        self.assertEqual([c.size for c in children], [3, 3])

    def test_missing_path(self):
        with self.assertRaises(PathNotFoundError) as ctx:
            self.vfs.open('not/a/real/path')
        self.assertEqual(ctx.exception.path, '/not/a/real/path')
        self.assertIsInstance(ctx.exception, FileSystemException)

    def test_path_normalization(self):
        """Equivalent spellings reach the same entry."""
        for name in ('red', '/red', '//red', '/./red', '/blue/../red', '../red'):
            with self.subTest(name=name):
                with self.vfs.open(name) as f:
                    self.assertEqual(f.name, '/red')
                    self.assertEqual(f.read(), b'abc')

    def test_root_spellings(self):
        for name in ('', '/', '.', '/..'):
            with self.subTest(name=name):
                self.assertTrue(self.vfs.stat(name).is_dir)

    def test_stat_and_predicates(self):
        self.assertEqual(self.vfs.stat('/green').identity, 1)
        self.assertTrue(self.vfs.exists('/green'))
        self.assertFalse(self.vfs.exists('/blue'))
        self.assertTrue(self.vfs.is_file('/green'))
        self.assertFalse(self.vfs.is_file('/'))
        self.assertTrue(self.vfs.is_directory('/'))
        self.assertFalse(self.vfs.is_directory('/blue'))

    def test_read_bytes_and_list_dir(self):
        self.assertEqual(self.vfs.read_bytes('green'), b'cde')
        self.assertEqual([c.name for c in self.vfs.list_dir()], ['red', 'green'])


class TestAssetFileBytes(unittest.TestCase):
    """Test read, readinto, seek and tell on file handles."""

    def setUp(self):
        self.vfs = VirtualFileSystem(red_green_index())

    def test_partial_reads(self):
        with self.vfs.open('/red') as f:
            self.assertEqual(f.read(2), b'ab')
            self.assertEqual(f.tell(), 2)
            self.assertEqual(f.read(2), b'c')
            self.assertEqual(f.read(2), b'')
            self.assertEqual(f.read(), b'')

    def test_readinto(self):
        buf = bytearray(2)
        with self.vfs.open('/green') as f:
            self.assertEqual(f.readinto(buf), 2)
            self.assertEqual(bytes(buf), b'cd')
            self.assertEqual(f.readinto(buf), 1)
            self.assertEqual(buf[:1], b'e')
            self.assertEqual(f.readinto(buf), 0)

    def test_seek(self):
        with self.vfs.open('/red') as f:
            self.assertEqual(f.seek(1), 1)
            self.assertEqual(f.read(), b'bc')
            self.assertEqual(f.seek(-2, SEEK_END), 1)
            self.assertEqual(f.read(1), b'b')
            self.assertEqual(f.seek(-1, SEEK_CUR), 1)
            self.assertEqual(f.seek(0, SEEK_SET), 0)
            self.assertEqual(f.read(), b'abc')

    def test_seek_past_end(self):
        """Positions past the end are allowed and read nothing."""
        with self.vfs.open('/red') as f:
            self.assertEqual(f.seek(10), 10)
            self.assertEqual(f.read(), b'')
            self.assertEqual(f.tell(), 10)

    def test_seek_negative(self):
        with self.vfs.open('/red') as f:
            with self.assertRaises(InvalidOperationError):
                f.seek(-1)
            self.assertEqual(f.tell(), 0)

    def test_seek_bad_whence(self):
        with self.vfs.open('/red') as f:
            with self.assertRaises(InvalidOperationError):
                f.seek(0, 7)

    def test_byte_operations_on_directory(self):
        with self.vfs.open('/') as f:
            with self.assertRaises(IsDirectoryError):
                f.read()
            with self.assertRaises(IsDirectoryError):
                f.readinto(bytearray(4))
            with self.assertRaises(IsDirectoryError):
                f.seek(0)

    def test_handles_are_independent(self):
        first = self.vfs.open('/red')
        second = self.vfs.open('/red')
        self.assertEqual(first.read(2), b'ab')
        self.assertEqual(second.read(), b'abc')
        self.assertEqual(first.read(), b'c')

    def test_closed_handle(self):
        f = self.vfs.open('/red')
        f.close()
        f.close()
        self.assertTrue(f.closed)
        with self.assertRaises(InvalidOperationError):
            f.read()
        with self.assertRaises(InvalidOperationError):
            f.stat()


class TestReaddir(TempDirTestCase):
    """Test the directory listing cursor."""

    def setUp(self):
        super().setUp()
        root = self.make_root({
            'a.txt': b'a',
            'b.txt': b'b',
            'c.txt': b'c',
            'd.txt': b'd',
            'e.txt': b'e',
            'sub': {'x.txt': b'x'},
        })
        self.vfs = VirtualFileSystem(build_index(root))

    def test_readdir_on_file(self):
        with self.vfs.open('/a.txt') as f:
            with self.assertRaises(InvalidOperationError):
                f.readdir()
            with self.assertRaises(InvalidOperationError):
                f.readdir(1)

    def test_unbounded_listing_then_empty(self):
        with self.vfs.open('/') as f:
            names = [c.name for c in f.readdir()]
            self.assertEqual(names, ['a.txt', 'b.txt', 'c.txt', 'd.txt', 'e.txt', 'sub'])
            self.assertEqual(f.readdir(), [])
            self.assertEqual(f.readdir(-1), [])
            self.assertEqual(f.readdir(None), [])

    def test_bounded_batches(self):
        """Batches concatenate to the full children sequence."""
        with self.vfs.open('/') as f:
            batches = []
            while True:
                try:
                    batch = f.readdir(4)
                except EndOfStreamError:
                    break
                self.assertTrue(0 < len(batch) <= 4)
                batches.append([c.name for c in batch])

        self.assertEqual(batches, [
            ['a.txt', 'b.txt', 'c.txt', 'd.txt'],
            ['e.txt', 'sub'],
        ])

    def test_bounded_and_unbounded_exhaustion_differ(self):
        """Bounded listings signal exhaustion, unbounded ones return empty."""
        with self.vfs.open('/sub') as f:
            self.assertEqual(len(f.readdir(1)), 1)
            with self.assertRaises(EndOfStreamError):
                f.readdir(1)
            self.assertEqual(f.readdir(0), [])

    def test_empty_directory_bounded(self):
        root = self.make_root({'empty': {}}, name='other')
        vfs = VirtualFileSystem(build_index(root))
        with vfs.open('/empty') as f:
            with self.assertRaises(EndOfStreamError):
                f.readdir(3)
        with vfs.open('/empty') as f:
            self.assertEqual(f.readdir(), [])

    def test_mixed_cursor(self):
        with self.vfs.open('/') as f:
            self.assertEqual([c.name for c in f.readdir(2)], ['a.txt', 'b.txt'])
            self.assertEqual([c.name for c in f.readdir()], ['c.txt', 'd.txt', 'e.txt', 'sub'])

    def test_each_open_has_its_own_cursor(self):
        first = self.vfs.open('/')
        first.readdir()
        second = self.vfs.open('/')
        self.assertEqual(len(second.readdir()), 6)

    def test_walk(self):
        self.assertEqual(list(self.vfs.walk()), [
            ('/', ['sub'], ['a.txt', 'b.txt', 'c.txt', 'd.txt', 'e.txt']),
            ('/sub', [], ['x.txt']),
        ])

    def test_walk_file_yields_nothing(self):
        """Walking a file gives no directories, as os.walk does."""
        self.assertEqual(list(self.vfs.walk('/sub/x.txt')), [])

    def test_walk_missing_path(self):
        with self.assertRaises(PathNotFoundError):
            list(self.vfs.walk('/nope'))


class TestAbsentFileSystem(unittest.TestCase):
    """A filesystem with no index fails every query."""

    def setUp(self):
        self.vfs = VirtualFileSystem(None)

    def test_every_query_fails(self):
        self.assertFalse(self.vfs.available)
        for name in ('/', '', '/red', 'anything'):
            with self.subTest(name=name):
                with self.assertRaises(PathNotFoundError):
                    self.vfs.open(name)
                with self.assertRaises(PathNotFoundError):
                    self.vfs.stat(name)
                self.assertFalse(self.vfs.exists(name))

    def test_open_filesystem_none(self):
        self.assertFalse(open_filesystem(None).available)


class TestOpenFileSystem(TempDirTestCase):
    """Test construction from serialized indexes."""

    def test_from_json(self):
        root = self.make_root({'css': {'site.css': b'body{}'}})
        text = dumps(build_index(root))

        vfs = open_filesystem(text)
        self.assertEqual(vfs.read_bytes('/css/site.css'), b'body{}')

        vfs = open_filesystem(text.encode('utf-8'))
        self.assertTrue(vfs.is_directory('/css'))

    def test_from_index(self):
        index = red_green_index()
        self.assertIs(open_filesystem(index).index, index)

    def test_built_tree_round_trip(self):
        """Every file on disk reads back identically."""
        root = self.make_root({
            'index.html': b'<html></html>',
            'img': {'logo.png': bytes(range(256)) * 4},
        })
        vfs = VirtualFileSystem(build_index(root))

        for dirpath, _, filenames in os.walk(root):
            for name in filenames:
                source = os.path.join(dirpath, name)
                rel = os.path.relpath(source, root).replace(os.sep, '/')
                with open(source, 'rb') as f:
                    self.assertEqual(vfs.read_bytes(rel), f.read())


if __name__ == '__main__':
    unittest.main()
