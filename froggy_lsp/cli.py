"""
Console entry points: the language server and a parse-tree dumper.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import argparse
import sys
from typing import List, Optional

from .config import ServerConfig, configure_logging
from .errors import ParseFailure
from .server import FroggyLanguageServer
from .syntax import parse


def serve(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='froggy-lsp', description='Froggy language server (stdio).')
    parser.add_argument('--log-level', help='debug, info, warning or error (default: warning)')
    args = parser.parse_args(argv)

    config = ServerConfig.from_env()
    configure_logging(args.log_level or config.log_level)
    return FroggyLanguageServer(config=config).run()


def dump_tree(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='froggy-parse', description='Print the syntax tree of a .frog file.')
    parser.add_argument('path')
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 2

    try:
        with open(args.path, encoding='utf-8') as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        print(f'Failed to read {args.path}: {exc}', file=sys.stderr)
        return 2

    try:
        tree = parse(source)
    except ParseFailure as exc:
        print(f'Failed to parse {args.path}: {exc}', file=sys.stderr)
        return 2

    root = tree.root_node
    print(f'has_error: {str(root.has_error).lower()}')
    print(root.sexp())
    return 0


def main():
    sys.exit(serve())


def parse_main():
    sys.exit(dump_tree())
