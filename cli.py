"""
Command-line interface for the Award Opportunity Engine.
Balances are kept in a local CSV file; explore runs the full engine pipeline.
"""

import argparse
import csv
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from engine.booking import build_award_search_url
from engine.catalog import load_default_catalog
from engine.explorer import explore
from engine.models import PointBalance
from engine.opportunities import get_all_destination_options, get_available_destinations


# Default CSV file path
CSV_PATH = Path("data/balances.csv")
CSV_HEADERS = ["program_id", "balance", "last_updated"]


def load_balances() -> List[PointBalance]:
    """
    Load all balances from the CSV file.

    Returns:
        List of PointBalance objects in file order
    """
    balances = []

    if not CSV_PATH.exists():
        return balances

    with open(CSV_PATH, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            balances.append(
                PointBalance(
                    program_id=row["program_id"],
                    balance=int(row["balance"]),
                    last_updated=row.get("last_updated") or "",
                )
            )

    return balances


def save_balances(balances: List[PointBalance]):
    """Rewrite the CSV file with the given balances."""
    CSV_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(CSV_PATH, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        for b in balances:
            writer.writerow([b.program_id, b.balance, b.last_updated])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _validate_program(program_id: str):
    if load_default_catalog().get_program(program_id) is None:
        print(f"Error: Unknown program '{program_id}'. Run 'show --programs' to list program ids.")
        sys.exit(1)


def _validate_points(points: int):
    if points < 0:
        print(f"Error: Balance must be 0 or greater. Got: {points}")
        sys.exit(1)


def cmd_add(args):
    """
    Add a balance for a program that has none yet.

    Args:
        args: Parsed command-line arguments with fields:
            - program: program id (e.g. 'chase-ur')
            - points: non-negative integer
    """
    _validate_program(args.program)
    _validate_points(args.points)

    balances = load_balances()
    if any(b.program_id == args.program for b in balances):
        print(f"Error: A balance for '{args.program}' already exists. Use 'update' instead.")
        sys.exit(1)

    balances.append(PointBalance(args.program, args.points, _now()))
    save_balances(balances)

    program = load_default_catalog().get_program(args.program)
    print(f"Balance added: {program.name}")
    print(f"  Points: {args.points:,}")


def cmd_update(args):
    _validate_points(args.points)

    balances = load_balances()
    if not any(b.program_id == args.program for b in balances):
        print(f"Error: No balance for '{args.program}'. Use 'add' first.")
        sys.exit(1)

    balances = [
        PointBalance(b.program_id, args.points, _now()) if b.program_id == args.program else b
        for b in balances
    ]
    save_balances(balances)
    print(f"Balance updated: {args.program} = {args.points:,}")


def cmd_remove(args):
    balances = load_balances()
    remaining = [b for b in balances if b.program_id != args.program]
    if len(remaining) == len(balances):
        print(f"Error: No balance for '{args.program}'.")
        sys.exit(1)

    save_balances(remaining)
    print(f"Balance removed: {args.program}")


def cmd_show(args):
    """Show stored balances, or the program list with --programs."""
    catalog = load_default_catalog()

    if args.programs:
        print("\n=== Loyalty Programs ===\n")
        for program in catalog.programs.values():
            kind = "card" if program.type == "credit_card" else "airline"
            print(f"  {program.id:<22} {program.name} ({kind})")
        print()
        return

    balances = load_balances()
    if not balances:
        print("No balances found. Add one with: cli.py add --program chase-ur --points 80000")
        return

    print("\n=== Point Balances ===\n")
    for b in balances:
        program = catalog.get_program(b.program_id)
        name = program.name if program else b.program_id
        print(f"  {name:<32} {b.balance:>10,}")
    print(f"\n  {'Total':<32} {sum(b.balance for b in balances):>10,}")

    reachable = get_available_destinations(balances, catalog)
    if reachable:
        print(f"\nReachable regions: {', '.join(reachable)}")
    print()


def cmd_explore(args):
    """
    Run the explore pipeline over the stored balances.

    Args:
        args: Parsed command-line arguments with fields:
            - destination: optional region or country
            - home: optional home airport IATA code
            - limit: number of opportunities to print
    """
    if args.limit <= 0:
        print(f"Error: Limit must be greater than 0. Got: {args.limit}")
        sys.exit(1)

    balances = load_balances()
    if not balances:
        print("No balances found. Add one with: cli.py add --program chase-ur --points 80000")
        return

    result = explore(balances, args.destination, args.home)
    summary = result.summary

    target = f" to {result.destination}" if result.destination else ""
    print(f"\n=== Award Opportunities{target} ===\n")
    print(f"{summary.affordable} of {summary.total} bookable now, "
          f"{summary.almost_affordable} almost there, "
          f"${summary.total_potential_value:,.0f} potential value")
    if summary.best_value:
        print(f"Best value: {summary.best_value.sweet_spot.title} "
              f"({summary.best_value.sweet_spot.value_cpp} cpp)")
    print()

    if not result.opportunities:
        print("  (No matching sweet spots)")

    for i, opp in enumerate(result.opportunities[:args.limit], 1):
        spot = opp.sweet_spot
        status = "CAN BOOK" if opp.can_afford else f"{opp.percentage_owned}% - need {opp.points_shortfall:,} more"
        print(f"{i}. {spot.title} [{spot.cabin_class}]")
        print(f"   {spot.points_required:,} {opp.program.name} points, {spot.value_cpp} cpp - {status}")
        if opp.transfer_source:
            print(f"   • Transfer from {opp.transfer_source.program_name}")
        if args.links:
            url = build_award_search_url(opp.program.id, result.home_airport, "", cabin=spot.cabin_class)
            if url:
                print(f"   • {url}")
        print()

    if result.positioning_options:
        print(f"--- Positioning from {result.home_airport} ---\n")
        for option in result.positioning_options:
            print(f"  {option.alternate_origin} ({option.alternate_origin_city}): "
                  f"{option.award_opportunity.sweet_spot.title}, "
                  f"~${option.estimated_positioning_cost:,.0f} fare, "
                  f"net ${option.total_value:,.0f}")
            print(f"     {option.reasoning}")
        print()


def cmd_destinations(args):
    catalog = load_default_catalog()

    if args.query:
        matches = catalog.search_destinations(args.query)
        if not matches:
            print(f"No destinations match '{args.query}'.")
            return
        for kind, value, region in matches:
            label = value if kind == "region" else f"{value} ({region.name})"
            print(f"  {label}")
        return

    for option in get_all_destination_options(catalog):
        indent = "  " if option.type == "region" else "      "
        print(f"{indent}{option.label}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Award Opportunity Engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Add command
    parser_add = subparsers.add_parser("add", help="Add a point balance")
    parser_add.add_argument("--program", required=True, help="Program id (e.g. chase-ur, aeroplan)")
    parser_add.add_argument("--points", type=int, required=True, help="Point balance")

    # Update command
    parser_update = subparsers.add_parser("update", help="Update a point balance")
    parser_update.add_argument("--program", required=True, help="Program id")
    parser_update.add_argument("--points", type=int, required=True, help="New point balance")

    # Remove command
    parser_remove = subparsers.add_parser("remove", help="Remove a point balance")
    parser_remove.add_argument("--program", required=True, help="Program id")

    # Show command
    parser_show = subparsers.add_parser("show", help="Show balances")
    parser_show.add_argument("--programs", action="store_true", help="List all program ids instead")

    # Explore command
    parser_explore = subparsers.add_parser("explore", help="Find award opportunities")
    parser_explore.add_argument("--destination", default=None, help="Region or country (e.g. Japan)")
    parser_explore.add_argument("--home", default=None, help="Home airport IATA code (e.g. BOS)")
    parser_explore.add_argument("--limit", type=int, default=10, help="Opportunities to show")
    parser_explore.add_argument("--links", action="store_true", help="Print award search links")

    # Destinations command
    parser_dest = subparsers.add_parser("destinations", help="List or search destinations")
    parser_dest.add_argument("query", nargs="?", default="", help="Optional search text")

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    commands = {
        "add": cmd_add,
        "update": cmd_update,
        "remove": cmd_remove,
        "show": cmd_show,
        "explore": cmd_explore,
        "destinations": cmd_destinations,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
