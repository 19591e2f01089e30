#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import argparse
import os
import random
import sys
from pathlib import Path
from typing import List, Optional

from am_closure import ClosureResolver
from am_compressor import compress
from am_context import AmalgamContext, LogLevel
from am_diagnostics import diag_from_error
from am_errors import AmalgamError, InvalidArgument
from am_logger import log_error, log_info
from am_paths import SourceSearchPaths
from am_shuffle import ShuffleInts
from am_sink import ListSink, render_amalgamation


def _init_env_defaults() -> None:
    home = os.getenv("AMALGAM_HOME")
    if not home:
        return
    if not os.getenv("AMALGAM_SOURCE_PATH"):
        os.environ["AMALGAM_SOURCE_PATH"] = os.path.join(home, "src")


def _env_roots(var: str) -> List[str]:
    value = os.getenv(var)
    if not value:
        return []
    return [p for p in value.split(os.pathsep) if p]


def build_context(args: argparse.Namespace) -> AmalgamContext:
    """Build an AmalgamContext from command-line arguments."""
    verbosity = getattr(args, 'verbosity', 0)
    if verbosity >= 3:
        log_level = LogLevel.DEBUG
    elif verbosity >= 1:
        log_level = LogLevel.INFO
    else:
        log_level = LogLevel.ERROR

    return AmalgamContext(
        log_rich_format=getattr(args, 'log', False),
        log_level=log_level,
    )


def build_search_paths(context: AmalgamContext, args: argparse.Namespace) -> Optional[SourceSearchPaths]:
    """
    Build search paths from -S/-C/-E, falling back to $AMALGAM_SOURCE_PATH and
    $AMALGAM_CLASS_PATH. Returns None (after logging) if an extern list cannot be read.
    """
    source_roots = args.source_root or _env_roots("AMALGAM_SOURCE_PATH") or ["."]
    class_roots = args.class_root or _env_roots("AMALGAM_CLASS_PATH")

    sp = SourceSearchPaths()
    for root in source_roots:
        sp.add_source_root(root)
    for root in class_roots:
        sp.add_class_root(root)
    for extern_list in args.extern_list:
        try:
            count = sp.load_extern_list(extern_list)
        except OSError as e:
            log_error(context, f"error: [CLI-0020] cannot read extern list {extern_list}: {e}")
            return None
        log_info(context, f"Read {count} extern name(s) from '{extern_list}'")

    src_list = ",".join(f"'{p}'" for p in sp.source_roots)
    cls_list = ",".join(f"'{p}'" for p in sp.class_roots)
    log_info(context, f"Source root(s): {src_list or '<none>'}")
    log_info(context, f"Class root(s): {cls_list or '<none>'}")
    return sp


def _run_closure(args: argparse.Namespace):
    """Run the closure computation, returning (sink, result, exit_code)."""
    context = build_context(args)
    search_paths = build_search_paths(context, args)
    if search_paths is None:
        return None, None, 1

    resolver = ClosureResolver(search_paths=search_paths, context=context)
    try:
        sink, result = resolver.resolve(args.imports, args.inlines)
    except AmalgamError as e:
        # Partial output is unusable: nothing is written.
        log_error(context, diag_from_error(e).format())
        return None, None, 1
    return sink, result, 0


def cmd_inline(args: argparse.Namespace) -> int:
    """Write the amalgamated source of the inline closure."""
    sink, _, exit_code = _run_closure(args)
    if exit_code != 0:
        return exit_code

    text = render_amalgamation(sink)
    if args.output:
        try:
            Path(args.output).write_text(text, encoding="utf-8")
        except OSError as e:
            log_error(build_context(args), f"error: [CLI-0010] cannot write {args.output}: {e}")
            return 1
    else:
        sys.stdout.write(text)
    return 0


def cmd_closure(args: argparse.Namespace) -> int:
    """List the units that would be inlined and imported, without code."""
    _, result, exit_code = _run_closure(args)
    if exit_code != 0:
        return exit_code

    for unit in result.inlined:
        print(f"inline {unit}")
    for name in result.imports:
        print(f"import {name}")
    return 0


def cmd_archive(args: argparse.Namespace) -> int:
    context = build_context(args)
    # progress is always reported for archives
    context.log_level = max(context.log_level, LogLevel.INFO)
    rc = compress(args.path, args.destination, context=context)
    return 0 if rc == 0 else 1


def cmd_shuffle(args: argparse.Namespace) -> int:
    context = build_context(args)
    rng = random.Random(args.seed)
    try:
        shuffler = ShuffleInts(rng, args.size)
        batch = shuffler.take(args.count)
    except (InvalidArgument, IndexError) as e:
        log_error(context, f"error: {e}")
        return 1
    print(" ".join(str(i) for i in batch))
    return 0


def _add_closure_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--import", "-i",
        action="append",
        default=[],
        dest="imports",
        metavar="NAME",
        help="Unit to reference by import (can be passed multiple times)",
    )
    parser.add_argument("inlines", nargs="+", metavar="UNIT",
                        help="Unit to inline, with everything it needs (e.g. 'app.Main')")


def main(argv=None) -> None:
    _init_env_defaults()
    parser = argparse.ArgumentParser(prog="amc", description="Java source amalgamator")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    parser.add_argument("-v", "--verbose",
                        action='count',
                        default=0,
                        dest='verbosity',
                        help="Increase verbosity: -v=INFO, -vvv=DEBUG")
    parser.add_argument("-l", "--log",
                        action='store_true',
                        default=False,
                        help="Enable rich log formatting (timestamps, levels)")
    parser.add_argument(
        "-S", "--source-root",
        action="append",
        default=[],
        help="Add a source root (can be passed multiple times; default: $AMALGAM_SOURCE_PATH or '.')",
    )
    parser.add_argument(
        "-C", "--class-root",
        action="append",
        default=[],
        help="Add a root of compiled classes (can be passed multiple times; default: $AMALGAM_CLASS_PATH)",
    )
    parser.add_argument(
        "-E", "--extern-list",
        action="append",
        default=[],
        help="File listing externally available units, one per line (can be passed multiple times)",
    )

    ###########################
    # inline command
    ###########################
    p_inline = subparsers.add_parser("inline", help="Amalgamate units into one source")
    p_inline.add_argument("--output", "-o", help="Output file (default: stdout)")
    _add_closure_args(p_inline)
    p_inline.set_defaults(func=cmd_inline)

    ###########################
    # closure command
    ###########################
    p_closure = subparsers.add_parser("closure", help="List inlined and imported units", aliases=["deps"])
    _add_closure_args(p_closure)
    p_closure.set_defaults(func=cmd_closure)

    ###########################
    # archive command
    ###########################
    p_archive = subparsers.add_parser("archive", help="Compress a file or folder to .tar.xz")
    p_archive.add_argument("path", help="File or folder to compress")
    p_archive.add_argument("destination", nargs="?", default=None,
                           help="Archive file or folder (default: next to the source)")
    p_archive.set_defaults(func=cmd_archive)

    ###########################
    # shuffle command
    ###########################
    p_shuffle = subparsers.add_parser("shuffle", help="Draw a batch from a shuffled permutation")
    p_shuffle.add_argument("size", type=int, help="Permutation size")
    p_shuffle.add_argument("count", type=int, help="Number of elements to draw")
    p_shuffle.add_argument("--seed", type=int, default=None, help="Random seed")
    p_shuffle.set_defaults(func=cmd_shuffle)

    args = parser.parse_args(argv)

    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
