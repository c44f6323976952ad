"""
Emitter Tests

Renders generated modules, executes them and queries the result the
way an application importing them would.
"""

import os
import unittest

from assetfs.builder import build_index, render_dev_stub, render_module, write_atomic
from assetfs.builder.emitter import HEADER
from assetfs.exceptions import PathNotFoundError
from assetfs.filesystem import DiskFileSystem, VirtualFileSystem
from assetfs.tests.support import TempDirTestCase, red_green_index


def load_source(text):
    namespace = {}
    exec(compile(text, '<generated>', 'exec'), namespace)
    return namespace


class TestRenderModule(TempDirTestCase):
    """Test the main generated module."""

    def test_header(self):
        text = render_module({'static': red_green_index()})
        self.assertTrue(text.startswith(HEADER))

    def test_red_green(self):
        module = load_source(render_module({'static': red_green_index()}))

        self.assertEqual(module['INDEXES']['static'], red_green_index())
        vfs = module['asset_dir']('static')
        self.assertIsInstance(vfs, VirtualFileSystem)
        with vfs.open('/red') as f:
            self.assertEqual(f.read(), b'abc')
        with vfs.open('/') as f:
            self.assertEqual([c.name for c in f.readdir()], ['red', 'green'])

    def test_unknown_directory_is_absent(self):
        module = load_source(render_module({'static': red_green_index()}))
        vfs = module['asset_dir']('missing')
        with self.assertRaises(PathNotFoundError):
            vfs.open('/')

    def test_large_and_binary_content(self):
        """Contents longer than one literal line survive rendering."""
        payload = bytes(range(256)) * 3
        root = self.make_root({'blob.bin': payload, 'dir': {}})
        index = build_index(root)

        module = load_source(render_module({'static': index}))
        self.assertEqual(module['INDEXES']['static'], index)
        self.assertEqual(module['asset_dir']('static').read_bytes('/blob.bin'), payload)

    def test_several_directories(self):
        a = self.make_root({'one.txt': b'1'}, name='a')
        b = self.make_root({'two.txt': b'2'}, name='b')
        module = load_source(render_module({'a': build_index(a), 'b': build_index(b)}))

        self.assertTrue(module['asset_dir']('a').exists('/one.txt'))
        self.assertFalse(module['asset_dir']('a').exists('/two.txt'))
        self.assertTrue(module['asset_dir']('b').exists('/two.txt'))

    def test_rendering_is_deterministic(self):
        root = self.make_root({'x': {'y.txt': b'y'}})
        self.assertEqual(
            render_module({'static': build_index(root)}),
            render_module({'static': build_index(root)}),
        )


class TestDevStub(TempDirTestCase):
    """Test the development module."""

    def test_serves_from_disk(self):
        root = self.make_root({'live.txt': b'v1'})
        module = load_source(render_dev_stub())

        vfs = module['asset_dir'](root)
        self.assertIsInstance(vfs, DiskFileSystem)
        self.assertEqual(vfs.read_bytes('/live.txt'), b'v1')

        with open(os.path.join(root, 'live.txt'), 'wb') as f:
            f.write(b'v2')
        self.assertEqual(vfs.read_bytes('/live.txt'), b'v2')


class TestWriteAtomic(TempDirTestCase):
    """Test output file replacement."""

    def test_write_and_replace(self):
        target = os.path.join(self.tmp, 'assets.py')
        write_atomic(target, 'first\n')
        write_atomic(target, 'second\n')

        with open(target, encoding='utf-8') as f:
            self.assertEqual(f.read(), 'second\n')
        self.assertEqual(os.listdir(self.tmp), ['assets.py'])

    def test_missing_directory(self):
        target = os.path.join(self.tmp, 'nope', 'assets.py')
        with self.assertRaises(OSError):
            write_atomic(target, 'text')
        self.assertFalse(os.path.exists(target))


if __name__ == '__main__':
    unittest.main()
