"""
Command-line entry point for walking the OpenAlex graph through the adapter.

Examples:

# Look up a work and print a few fields
python main.py --id W2741809807 --field title --field publication_year

# Follow an edge and print fields of the first 3 neighbors
python main.py --id W2741809807 --edge Authors --edge-field display_name --limit 3

# Random institution, then its linked funder (if it has one)
python main.py --random Institution --edge Funder --edge-field display_name

# Full-text search over sources
python main.py --search "nature" --kind Source --field display_name --limit 5
"""

import argparse
from itertools import islice

from api_client import OpenAlexAPI
from adapter import OpenAlexAdapter
from config import config
from context import DataContext
from logging_config import configure_logging
from neighbors import neighbor_edge


def _print_fields(adapter, rows, kind, fields, indent=""):
    """Resolve each field over the rows and print them per row."""
    for field_name in fields:
        for ctx, value in adapter.resolve_property(rows, kind.value, field_name):
            ctx.values[field_name] = value

    for ctx in rows:
        vertex = ctx.active_vertex
        print(f"{indent}{vertex.typename} {vertex.id}")
        for field_name in fields:
            print(f"{indent}  {field_name}: {ctx.values[field_name]}")


def main():
    """Main function to run a traversal with command-line arguments"""

    parser = argparse.ArgumentParser(
        description="Query the OpenAlex graph one hop at a time"
    )
    start = parser.add_mutually_exclusive_group(required=True)
    start.add_argument("--id", type=str, help="OpenAlex ID, OpenAlex URL, DOI or ORCID URL")
    start.add_argument("--random", type=str, metavar="KIND", help="Start from a random entity")
    start.add_argument("--search", type=str, help="Full-text search (requires --kind)")
    parser.add_argument(
        "--kind",
        type=str,
        help="Entity kind for --id/--search (inferred from OpenAlex IDs)",
    )
    parser.add_argument(
        "--field",
        action="append",
        default=[],
        help="Field of the starting entity to print (repeatable)",
    )
    parser.add_argument("--edge", type=str, help="Edge to follow from the starting entity")
    parser.add_argument(
        "--edge-field",
        action="append",
        default=[],
        help="Field of each neighbor to print (repeatable)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of starting entities / neighbors to fetch (default: 10)",
    )
    parser.add_argument(
        "--email",
        type=str,
        default=config.api.email,
        help="Your email for OpenAlex polite pool (faster access)",
    )

    args = parser.parse_args()
    configure_logging()

    adapter = OpenAlexAdapter(OpenAlexAPI(email=args.email))

    if args.id:
        parameters = {"id": args.id}
        if args.kind:
            parameters["kind"] = args.kind
        starting = adapter.resolve_starting_vertices("OpenAlexIDSearch", parameters)
    elif args.random:
        starting = adapter.resolve_starting_vertices("OpenAlexRandom", {"kind": args.random})
    else:
        if not args.kind:
            parser.error("--search requires --kind")
        starting = adapter.resolve_starting_vertices(
            "OpenAlexSearch", {"kind": args.kind, "search": args.search}
        )

    rows = [DataContext(active_vertex=vertex) for vertex in islice(starting, args.limit)]
    if not rows:
        print("No entity found.")
        return

    kind = rows[0].active_vertex.kind
    fields = args.field or ["display_name"]
    _print_fields(adapter, rows, kind, fields)

    if not args.edge:
        return

    target = neighbor_edge(kind, args.edge).target
    edge_fields = args.edge_field or ["display_name"]
    for ctx, neighbors in adapter.resolve_neighbors(rows, kind.value, args.edge):
        print(f"\n{ctx.active_vertex.id} -> {args.edge}")
        neighbor_rows = [
            DataContext(active_vertex=vertex) for vertex in islice(neighbors, args.limit)
        ]
        if not neighbor_rows:
            print("  (none)")
            continue
        _print_fields(adapter, neighbor_rows, target, edge_fields, indent="  ")


if __name__ == "__main__":
    main()
