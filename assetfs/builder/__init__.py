"""
assetfs Builder Module

Build-time side:
- Directory walk producing a PathIndex
- Python module emission
- Atomic output writing
"""

from .tree_builder import TreeBuilder, build_index
from .emitter import render_module, render_dev_stub
from .output import write_atomic

__all__ = [
    'TreeBuilder',
    'build_index',
    'render_module',
    'render_dev_stub',
    'write_atomic',
]
