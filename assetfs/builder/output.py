"""
Output Module

Writes generated files without ever leaving a half-written target: the
text goes to a temporary file in the target's directory which is then
renamed over the target.
"""

import os
import tempfile
from typing import Union

from assetfs.logger import get_logger

OUTPUT_MODE = 0o644

_logger = get_logger('output')


def write_atomic(path: Union[str, os.PathLike], text: str) -> None:
    """
    Replace ``path`` with ``text``.

    Raises:
        OSError: If the file cannot be written; the target is untouched
    """
    target = os.fspath(path)
    directory = os.path.dirname(os.path.abspath(target))

    fd, tmp_path = tempfile.mkstemp(prefix='.assetfs-tmp.', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
            f.write(text)
        os.chmod(tmp_path, OUTPUT_MODE)
        os.replace(tmp_path, target)
    except BaseException:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
        raise

    _logger.info("Wrote output", context={'path': target, 'bytes': len(text.encode('utf-8'))})
