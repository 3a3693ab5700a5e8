"""
Command-line front end.

    qfjgen -i OrchestraFIXLatest.xml -o target/generated-sources
    python -m qfjgen -i repository.yaml --exclude-session --no-generate-fixt11-package
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from qfjgen.config import DEFAULT_OUTPUT_DIR, ConfigurationError, GeneratorConfig
from qfjgen.generator import generate
from qfjgen.orchestra_parser import OrchestraParseError
from qfjgen.serialization import RepositoryFormatError, load_repository

FAIL_STATUS = 1


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qfjgen",
        description="Generate QuickFIX/J message classes from a FIX Orchestra repository",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=Path(DEFAULT_OUTPUT_DIR),
        help=f"The output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "-i", "--orchestra-file", type=Path, required=True,
        help="The path/name of the FIX Orchestra file (.xml, .yaml or .json)",
    )
    parser.add_argument(
        "--disable-big-decimal", action="store_true", default=False,
        help="Use DoubleField instead of BigDecimal DecimalField for decimal fields",
    )
    parser.add_argument(
        "--generate-message-base-class", action="store_true", default=False,
        help="Generate the Message base class, StandardHeader and StandardTrailer",
    )
    parser.add_argument(
        "--exclude-session", action="store_true", default=False,
        help="Exclude session messages, session-only groups and fields used by the session layer",
    )
    parser.add_argument(
        "--generate-fixt11-package", action=argparse.BooleanOptionalAction, default=True,
        help="Generate session artifacts in the fixt11 package (default: true)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    """Map parsed arguments 1:1 onto a validated GeneratorConfig."""
    return GeneratorConfig(
        use_extended_decimal=not args.disable_big_decimal,
        emit_base_message_class=args.generate_message_base_class,
        exclude_session_layer=args.exclude_session,
        emit_dedicated_session_package=args.generate_fixt11_package,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argument_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return FAIL_STATUS

    try:
        repository = load_repository(args.orchestra_file)
    except (FileNotFoundError, OrchestraParseError, RepositoryFormatError) as e:
        print(f"error: {e}", file=sys.stderr)
        return FAIL_STATUS

    report = generate(repository, args.output_dir, config)

    print(f"Generated {report.total_files} files for {report.version or report.repository_name} "
          f"into {report.output_dir}")
    for kind, count in sorted(report.artifact_counts.items()):
        print(f"  {kind}: {count}")
    if report.warnings:
        print(f"Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            print(f"  - {warning}")
    return 0


__all__ = ["build_argument_parser", "config_from_args", "main"]
