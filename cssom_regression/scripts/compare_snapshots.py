"""
cssom_regression/scripts/compare_snapshots.py

Script for comparing two stored snapshots.
"""

import sys
from argparse import ArgumentParser, Namespace

from rich.console import Console
from rich.table import Table

from cssom_regression.comparison.comparator import compare_snapshots
from cssom_regression.data_models.comparison import ComparisonOptions, ComparisonResult
from cssom_regression.snapshot.io import load_snapshot


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Compare two computed-style snapshots.")
    parser.add_argument("expected", type=str, help="Baseline snapshot JSON.")
    parser.add_argument("actual", type=str, help="Snapshot JSON under test.")
    parser.add_argument("--ignore-class-names", action="store_true", help="Skip attribute comparison.")
    parser.add_argument("--strict", action="store_true", help="Also report children-count mismatches.")
    parser.add_argument("--style-property", action="append", default=None, help="Style property to compare (repeatable).")
    parser.add_argument("--exclude-attribute", action="append", default=[], help="Attribute name to ignore (repeatable).")
    parser.add_argument("--exclude-element", action="append", default=[], help="Tag name to ignore (repeatable).")
    return parser


def build_comparison_options(args: Namespace) -> ComparisonOptions:
    return ComparisonOptions(
        ignore_class_names=args.ignore_class_names,
        strict_structure_comparison=args.strict,
        style_properties=args.style_property,
        exclude_attributes=args.exclude_attribute,
        exclude_elements=args.exclude_element,
    )


def print_result(result: ComparisonResult, console: Console) -> None:
    if result.is_equal:
        console.print("[green]✅ Snapshots are equal[/green]")
        return

    table = Table(title=f"{len(result.differences)} differences")
    table.add_column("Type", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("Expected")
    table.add_column("Actual")
    for difference in result.differences:
        table.add_row(difference.type.value, difference.path, repr(difference.expected), repr(difference.actual))
    console.print(table)


def main() -> None:
    args = build_parser().parse_args()
    result = compare_snapshots(
        load_snapshot(args.expected),
        load_snapshot(args.actual),
        build_comparison_options(args),
    )
    print_result(result, Console())
    sys.exit(0 if result.is_equal else 1)


if __name__ == "__main__":
    main()
