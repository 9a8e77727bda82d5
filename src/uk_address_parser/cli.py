"""Command-line interface for UK Address Parser."""

import argparse
import json
import logging
import sys
from dataclasses import replace

from uk_address_parser import __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uk-address-parser",
        description="Parse UK addresses against a gazetteer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse single address
  uk-address-parser --gazetteer gazetteer.json "10 Downing Street, London SW1A 2AA"

  # Parse from file
  uk-address-parser -g gazetteer.json --input addresses.txt --output parsed.json

  # Gazetteer and grid pins from the environment (or .env)
  GAZETTEER_PATH=gazetteer.json PIN_LAT=0.01 uk-address-parser "Flat 2, 1 High Street, Guildford"
        """
    )

    parser.add_argument(
        "address",
        nargs="?",
        help="Address to parse (or use --input for file)"
    )
    parser.add_argument(
        "--input", "-i",
        help="Input file with addresses (one per line)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output JSON file"
    )
    parser.add_argument(
        "--gazetteer", "-g",
        help="Gazetteer JSON file (default: $GAZETTEER_PATH)"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "simple"],
        default="json",
        help="Output format (default: json)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every pipeline stage"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"uk-address-parser {__version__}"
    )
    return parser


def _simple(result) -> str:
    parts = []
    for label, value in (
        ("Flat", result.flat),
        ("Floor", result.floor),
        ("Name", result.name),
        ("Number", result.number),
        ("Street", result.street),
        ("Locality", result.locality),
        ("Town", result.town),
        ("City", result.city),
        ("County", result.county),
        ("Postcode", result.postcode),
    ):
        if value:
            parts.append(f"{label}: {value}")
    if result.errors:
        parts.append(f"Errors: {','.join(result.errors)}")
    return " | ".join(parts) if parts else "No fields found"


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from uk_address_parser.config import ParserConfig
    from uk_address_parser.pipeline import AddressParser

    config = ParserConfig.from_env()
    if args.gazetteer:
        config = replace(config, gazetteer_path=args.gazetteer)
    if not config.gazetteer_path:
        parser.error("no gazetteer given: use --gazetteer or set GAZETTEER_PATH")

    # Get addresses to parse
    if args.input:
        with open(args.input, encoding="utf-8") as f:
            addresses = [line.strip() for line in f if line.strip()]
    elif args.address:
        addresses = [args.address]
    else:
        parser.print_help()
        return 1

    print(f"Loading gazetteer from {config.gazetteer_path}...", file=sys.stderr)
    address_parser = AddressParser.from_gazetteer(config.gazetteer_path, config=config)

    results = [address_parser.parse(address) for address in addresses]

    if args.format == "json":
        output = [r.model_dump(exclude_none=True) for r in results]
        json_str = json.dumps(output, indent=2, ensure_ascii=False)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(json_str)
            print(f"Saved to {args.output}", file=sys.stderr)
        else:
            print(json_str)
    else:
        for result in results:
            print(_simple(result))

    return 0


if __name__ == "__main__":
    sys.exit(main())
