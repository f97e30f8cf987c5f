#!/usr/bin/env python3
"""
Demo script: converts time, distance and velocity quantities.

Usage:
    python demo_conversions.py                  # the six sample conversions
    python demo_conversions.py --list           # supported pairs and factors
    python demo_conversions.py --quantity 42 --from-kind Meter --to-kind Kilometer
"""

import argparse
import logging
import sys

from conversion_settings import configure_logging
from unit_conversion_engine import (
    ConversionError,
    UNIT_CONSTRUCTORS,
    UnitKind,
    convert,
    create_unit,
    get_conversion_factor,
    hour,
    kilometer,
    kilometers_per_hour,
    meter,
    meters_per_second,
    second,
    supported_conversions,
)

logger = logging.getLogger(__name__)

# (source constructor, source quantity, destination constructor)
SAMPLE_CONVERSIONS = [
    (second, 3600, hour),
    (hour, 1, second),
    (meter, 1000, kilometer),
    (kilometer, 1, meter),
    (meters_per_second, 1, kilometers_per_hour),
    (kilometers_per_hour, 3.6, meters_per_second),
]

KIND_CHOICES = [kind.value for kind in UnitKind]


def format_conversion(source, destination) -> str:
    return f"{source} = {destination}"


def run_samples():
    """Run the sample conversions and return the output lines"""
    lines = []
    for source_constructor, quantity, destination_constructor in SAMPLE_CONVERSIONS:
        source = source_constructor(quantity)
        destination = destination_constructor()
        convert(source, destination)
        lines.append(format_conversion(source, destination))
    return lines


def list_conversions():
    """Return one line per supported pair with its factor"""
    return [
        f"{from_kind.value} -> {to_kind.value}: x{get_conversion_factor(from_kind, to_kind):.15g}"
        for from_kind, to_kind in supported_conversions()
    ]


def run_single(quantity: float, from_kind: str, to_kind: str) -> str:
    source = create_unit(from_kind, quantity)
    destination = UNIT_CONSTRUCTORS[UnitKind(to_kind)]()
    convert(source, destination)
    return format_conversion(source, destination)


def build_parser():
    parser = argparse.ArgumentParser(description="Convert quantities between distance, velocity and time units")
    parser.add_argument("--list", action="store_true", help="List supported conversions and exit")
    parser.add_argument("--quantity", type=float, help="Quantity to convert")
    parser.add_argument("--from-kind", choices=KIND_CHOICES, help="Unit kind of the quantity")
    parser.add_argument("--to-kind", choices=KIND_CHOICES, help="Unit kind to convert to")
    parser.add_argument("--log-level", help="Log level (or set UNIT_CONVERTER_LOG_LEVEL env var)")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    if args.list:
        for line in list_conversions():
            print(line)
        return 0

    single = (args.quantity, args.from_kind, args.to_kind)
    is_single = any(value is not None for value in single)
    if is_single and any(value is None for value in single):
        parser.error("--quantity, --from-kind and --to-kind must be given together")

    try:
        lines = [run_single(*single)] if is_single else run_samples()
    except ConversionError as e:
        logger.debug(f"Conversion failed: {e.to_dict()}")
        print(f"Error [{e.error_code}]: {e.message}")
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
