"""Entry point of the ffind command."""

from __future__ import annotations

import sys

from swifttools.find.cli import parse_args
from swifttools.find.search import SearchEngine


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        SearchEngine(args).run()
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())