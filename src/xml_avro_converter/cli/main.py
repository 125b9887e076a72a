"""Main CLI entry point for the xml-avro-convert command-line tool.

Converts one XML document against an Avro schema and prints the resulting
value graph as JSON, or writes it to an Avro object container file with
``--format avro`` when fastavro is installed.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml_avro_converter import __version__
from xml_avro_converter.api import ConversionResult, XMLAvroConverter
from xml_avro_converter.encoding import CODECS, write_container
from xml_avro_converter.shared import (
    ConfigError,
    ConversionError,
    ConverterConfig,
    configure_logging,
)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-avro-convert",
        description="Convert an XML document into an Avro value graph (as JSON)"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "input",
        type=Path,
        help="XML file to convert"
    )
    parser.add_argument(
        "--schema", "-s",
        type=Path,
        required=True,
        help="Avro schema file (.avsc)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "avro"],
        default="json",
        help="Output format; avro writes an object container file and needs --output"
    )
    parser.add_argument(
        "--codec",
        choices=list(CODECS),
        default="null",
        help="Block compression for --format avro (default: null)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--reader",
        choices=["dom", "etree", "lxml"],
        help="Markup reader (default: from configuration, dom)"
    )
    parser.add_argument(
        "--attribute-suffix",
        help="Suffix for attributes that collide with element names"
    )
    parser.add_argument(
        "--no-datetime-detection",
        action="store_true",
        help="Never parse long fields as ISO-8601 date-times"
    )
    parser.add_argument(
        "--show-tree",
        action="store_true",
        help="Print the intermediate document tree to stderr"
    )
    parser.add_argument(
        "--show-diagnostics",
        action="store_true",
        help="Include diagnostics and metrics in the JSON output"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> ConverterConfig:
    """Build the configuration from the config file and command-line overrides."""
    config = ConverterConfig()
    if args.config:
        config = ConverterConfig.from_file(args.config)

    overrides: Dict[str, Any] = {}
    if args.reader:
        overrides["tree__reader"] = args.reader
    if args.attribute_suffix:
        overrides["tree__attribute_suffix"] = args.attribute_suffix
    if args.no_datetime_detection:
        overrides["encoder__enable_datetime_heuristic"] = False
    if overrides:
        config = config.override(**overrides)
    return config


def format_result(result: ConversionResult, include_diagnostics: bool) -> str:
    """Format a conversion result for output."""
    if include_diagnostics:
        return json.dumps(result.to_dict(), indent=2)
    return json.dumps(result.record.to_dict(), indent=2)


def write_avro(result: ConversionResult, args: argparse.Namespace) -> None:
    """Write the record to ``args.output`` as an Avro object container file."""
    schema_json = json.loads(args.schema.read_text(encoding="utf-8"))
    with args.output.open("wb") as out:
        write_container(out, schema_json, [result.record], args.codec)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    if args.format == "avro" and not args.output:
        parser.error("--format avro requires --output")

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Set up logging verbosity; flags win over the configuration
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    try:
        converter = XMLAvroConverter(args.schema, config)
        result = converter.convert(args.input)
    except (ConfigError, ConversionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT

    if args.show_tree:
        print(result.tree.render(), file=sys.stderr)

    if args.format == "avro":
        try:
            write_avro(result, args)
        except (ConversionError, OSError) as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Record written to {args.output}", file=sys.stderr)
    else:
        formatted_output = format_result(result, args.show_diagnostics)
        if args.output:
            try:
                args.output.write_text(formatted_output + "\n", encoding="utf-8")
            except OSError as e:
                print(f"Error writing output: {e}", file=sys.stderr)
                return 1
            if not args.quiet:
                print(f"Record written to {args.output}", file=sys.stderr)
        else:
            print(formatted_output)

    if result.warnings and not args.quiet:
        print(
            f"{len(result.warnings)} warning(s); some data was not converted",
            file=sys.stderr
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
