"""
assetfs command line interface.

Subcommands:
    build   walk asset directories and write the generated module or
            JSON bundle (plus an optional development stub)
    ls      list a directory stored in a JSON bundle
    cat     print files stored in a JSON bundle

Exit status is 0 on success, 1 when a build or query fails and 2 for
usage errors.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from assetfs import __version__
from assetfs.builder import build_index, render_dev_stub, render_module, write_atomic
from assetfs.core.config_loader import Config, ConfigLoader, OUTPUT_FORMATS
from assetfs.exceptions import BuildException, BuildFailureError, FileSystemException
from assetfs.filesystem import VirtualFileSystem
from assetfs.index import dump_bundle, load_bundle
from assetfs.logger import Logger, LogLevel, get_logger

_logger = get_logger('cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='assetfs',
        description="Embed directories of static files as a read-only in-memory filesystem.",
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    sub = parser.add_subparsers(dest='command')

    build = sub.add_parser('build', help="generate a module or JSON bundle from directories")
    build.add_argument('dirs', nargs='+', metavar='DIR', help="asset directory to embed")
    build.add_argument('-o', '--out', help="path to write generated content")
    build.add_argument('--dev', help="path to write development stub")
    build.add_argument('--format', choices=OUTPUT_FORMATS, help="output format (default: python)")
    build.add_argument('--config', help="JSON configuration file")
    build.add_argument('--max-file-size', type=int, metavar='BYTES',
                       help="per-file size ceiling (default: 10 MiB)")
    build.add_argument('-v', '--verbose', action='store_true', help="log every walked entry")
    build.set_defaults(handler=cmd_build)

    ls = sub.add_parser('ls', help="list a directory of a JSON bundle")
    ls.add_argument('bundle', help="JSON bundle written by 'assetfs build --format json'")
    ls.add_argument('path', nargs='?', default='/')
    ls.add_argument('--name', help="asset directory inside the bundle")
    ls.set_defaults(handler=cmd_ls)

    cat = sub.add_parser('cat', help="print files of a JSON bundle")
    cat.add_argument('bundle', help="JSON bundle written by 'assetfs build --format json'")
    cat.add_argument('paths', nargs='+', metavar='PATH')
    cat.add_argument('--name', help="asset directory inside the bundle")
    cat.set_defaults(handler=cmd_cat)

    return parser


def _setup_logging(config: Config) -> None:
    """Route logging per a validated config."""
    Logger.reset()
    Logger.initialize(
        level=LogLevel.from_name(config.logging.level),
        log_file=config.logging.log_file or None,
        use_colors=config.logging.use_colors,
    )


def _load_config(args: argparse.Namespace) -> Config:
    loader = ConfigLoader()
    if args.config:
        loader.load(args.config)
    loader.apply_environment()

    if args.out:
        loader.set('output.output', args.out)
    if args.dev:
        loader.set('output.dev_output', args.dev)
    if args.format:
        loader.set('output.format', args.format)
    if args.max_file_size is not None:
        loader.set('builder.max_file_size', args.max_file_size)
    if args.verbose:
        loader.set('logging.level', 'DEBUG')

    loader.validate()
    return loader.config


def cmd_build(args: argparse.Namespace) -> int:
    """Build indexes for every directory and write the outputs."""
    try:
        config = _load_config(args)
    except BuildException as e:
        _setup_logging(Config())
        _logger.error(str(e))
        return 1

    _setup_logging(config)
    output = config.output

    try:
        if not output.output:
            raise BuildFailureError("invalid output: no output path given")
        if output.dev_output and os.path.abspath(output.output) == os.path.abspath(output.dev_output):
            raise BuildFailureError(
                "normal and dev output cannot be the same", path=output.output
            )

        indexes = {}
        for directory in args.dirs:
            key = os.path.normpath(directory)
            if key in indexes:
                raise BuildFailureError(
                    f"asset directory given twice: {key}", path=directory
                )
            indexes[key] = build_index(directory, max_file_size=config.builder.max_file_size)

        if output.format == 'json':
            text = dump_bundle(indexes)
        else:
            text = render_module(indexes)
        write_atomic(output.output, text)

        if output.dev_output:
            write_atomic(output.dev_output, render_dev_stub())
    except BuildException as e:
        _logger.error(str(e))
        return 1
    except OSError as e:
        _logger.error(f"Cannot write output: {e}", context={'path': e.filename})
        return 1

    return 0


def _open_bundle(bundle: str, name: Optional[str]) -> VirtualFileSystem:
    indexes = load_bundle(Path(bundle).read_bytes())
    if name is None:
        if len(indexes) != 1:
            raise BuildFailureError(
                f"bundle holds {len(indexes)} asset directories, pick one with --name: "
                + ", ".join(sorted(indexes)),
                path=bundle
            )
        name = next(iter(indexes))
    return VirtualFileSystem(indexes.get(name))


def _format_row(entry) -> str:
    perm = 'd' if entry.is_dir else '-'
    perm += 'r' if entry.mode & 0o400 else '-'
    perm += 'w' if entry.mode & 0o200 else '-'
    perm += 'x' if entry.mode & 0o100 else '-'
    name = entry.name + '/' if entry.is_dir else entry.name
    return f"{perm} {str(entry.size).rjust(8)} {name}"


def cmd_ls(args: argparse.Namespace) -> int:
    """List directory contents."""
    _setup_logging(Config())
    try:
        vfs = _open_bundle(args.bundle, args.name)
        for entry in vfs.list_dir(args.path):
            print(_format_row(entry))
    except (BuildException, FileSystemException) as e:
        _logger.error(f"ls: {e}")
        return 1
    except OSError as e:
        _logger.error(f"ls: cannot read bundle: {e}", context={'path': args.bundle})
        return 1
    return 0


def cmd_cat(args: argparse.Namespace) -> int:
    """Write file contents to stdout."""
    _setup_logging(Config())
    try:
        vfs = _open_bundle(args.bundle, args.name)
        for path in args.paths:
            data = vfs.read_bytes(path)
            out = getattr(sys.stdout, 'buffer', None)
            if out is None:
                sys.stdout.write(data.decode('utf-8', errors='replace'))
            else:
                out.write(data)
                out.flush()
    except (BuildException, FileSystemException) as e:
        _logger.error(f"cat: {e}")
        return 1
    except OSError as e:
        _logger.error(f"cat: cannot read bundle: {e}", context={'path': args.bundle})
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_usage(sys.stderr)
        return 2
    return args.handler(args)


if __name__ == '__main__':
    sys.exit(main())
