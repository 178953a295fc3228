"""Entry point of the fcut field extraction command."""

from __future__ import annotations

import json
import sys

from swifttools.cut.cli import Args, FieldSelector, parse_args
from swifttools.cut.errors import FastCutError, InvalidConfigError
from swifttools.cut.stream_processor import StreamProcessor


def validate_args(args: Args) -> FieldSelector:
    """Check the options for consistency; returns the parsed field selector."""
    if not args.fields.strip():
        raise InvalidConfigError("No fields specified")

    selector = args.parse_field_selector()

    delimiter_options = [
        args.delimiter is not None,
        args.tab_delimiter,
        args.space_delimiter,
        args.csv_mode,
    ]
    if sum(delimiter_options) > 1:
        raise InvalidConfigError(
            "Multiple delimiter options specified. Use only one of: -d, -t, -s, -c"
        )
    return selector


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.verbose:
        print(f"fcut starting with {len(args.files)} files", file=sys.stderr)
        delimiter = args.input_delimiter()
        if delimiter is not None:
            shown = json.dumps(delimiter, ensure_ascii=False)
            print(f"Using delimiter: {shown}", file=sys.stderr)
        else:
            print("Auto-detecting delimiter", file=sys.stderr)

    try:
        validate_args(args)
        StreamProcessor(args).process_files(args.files)
    except FastCutError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        print("Processing completed successfully", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())