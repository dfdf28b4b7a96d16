#!/usr/bin/env python3
"""
Order the nodes and paths of a variation graph.

Reads a GFA graph, applies one ordering mode (a single strategy, a pipeline
of strategies, an order file, or id compaction) followed by optional path
sorts, and writes the sorted graph as GFA.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from vgorder.exceptions import ConfigurationError, VGOrderError
from vgorder.io import read_gfa, write_gfa, write_order
from vgorder.ordering import DEFAULT_REGISTRY, OrderingParameters, StrategyRegistry
from vgorder.paths import PathKeyStrategy
from vgorder.sort import GraphSorter, SortConfig, dump_order

logger = logging.getLogger("vgorder")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

STRATEGY_FLAGS = (
    ("-c", "--cycle-breaking", "cycle-breaking", "use a cycle breaking sort"),
    ("-b", "--breadth-first", "breadth-first", "use a breadth first topological sort"),
    ("-d", "--dagify-sort", "dagify", "sort on the basis of the DAGified graph"),
    ("-e", "--eades", "eades", "use Eades algorithm"),
    ("-l", "--lazy", "lazy", "use lazy topological algorithm (DAG only)"),
    (
        "-w",
        "--two-way",
        "two-way",
        "use two-way (max of head-first and tail-first) topological algorithm",
    ),
    ("-r", "--random", "random", "randomly sort the graph"),
    ("-m", "--partition", "partition", "use sparse matrix diagonalization to sort the graph"),
)


def describe_strategies(registry: StrategyRegistry = DEFAULT_REGISTRY) -> str:
    """Render the registered strategies as a table of code, name and description."""
    rows = [(s.code, s.name, s.description) for s in registry]
    table = tabulate(rows, headers=["code", "strategy", "description"], tablefmt="simple")
    return f"pipeline codes (default: {registry.default.code}):\n\n{table}"


def setup_argument_parser() -> argparse.ArgumentParser:
    """
    Configure and return the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="vgorder",
        description=__doc__,
        epilog=describe_strategies(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    io_group = parser.add_argument_group("input/output options")
    io_group.add_argument(
        "-i",
        "--idx",
        help="load the graph from this GFA file ('-' for stdin)",
        required=True,
    )
    io_group.add_argument(
        "-o",
        "--out",
        help="store the sorted graph in this file ('-' for stdout)",
    )
    io_group.add_argument(
        "-S",
        "--show",
        help="write the topological order of the loaded graph to stdout, one id per line",
        action="store_true",
    )

    modes = parser.add_argument_group("ordering modes (choose at most one)")
    exclusive = modes.add_mutually_exclusive_group()
    exclusive.add_argument(
        "-s",
        "--sort-order",
        help="load the sort order from this file, one node id per line",
        type=Path,
    )
    exclusive.add_argument(
        "-p",
        "--pipeline",
        help="apply a series of sorts given as single-character codes, "
        "with 's' the default sort and 'f' to reverse the sort order",
    )
    exclusive.add_argument(
        "-O",
        "--optimize",
        help="compact node ids to 1..N in the current order",
        action="store_true",
    )
    for short, long, name, text in STRATEGY_FLAGS:
        exclusive.add_argument(
            short, long, help=text, dest="strategy", action="store_const", const=name
        )

    params = parser.add_argument_group("strategy parameters")
    params.add_argument(
        "-n",
        "--no-seeds",
        help="don't use heads to seed the topological sort",
        action="store_true",
    )
    params.add_argument(
        "-N",
        "--partition-n-parts",
        help="number of partitions for the partition sort (default: 1)",
        default=1,
        type=int,
    )
    params.add_argument(
        "-E",
        "--partition-epsilon",
        help="allowed imbalance of each partition cut (default: 0.05)",
        default=0.05,
        type=float,
    )
    params.add_argument(
        "-W",
        "--partition-path-weight",
        help="weight the partition input matrix by path coverage of edges",
        action="store_true",
    )
    params.add_argument(
        "--seed",
        help="seed for the random sort",
        type=int,
    )

    paths = parser.add_argument_group("path sorting options")
    paths.add_argument(
        "-L", "--paths-min", help="sort paths by their lowest contained node", action="store_true"
    )
    paths.add_argument(
        "-M", "--paths-max", help="sort paths by their highest contained node", action="store_true"
    )
    paths.add_argument(
        "-A", "--paths-avg", help="sort paths by their average contained node", action="store_true"
    )
    paths.add_argument(
        "-R",
        "--paths-avg-rev",
        help="sort paths in reverse by their average contained node",
        action="store_true",
    )
    paths.add_argument(
        "-D",
        "--path-delim",
        help="sort paths in bins by their prefix up to this delimiter",
        default="",
    )

    output = parser.add_argument_group("reporting options")
    output.add_argument(
        "-P", "--progress", help="display progress of the sort", action="store_true"
    )
    output.add_argument(
        "--log-level",
        help="logging level (default: WARNING)",
        default="WARNING",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
    )

    return parser


def build_sort_config(args: argparse.Namespace) -> SortConfig:
    """Translate parsed arguments into a SortConfig."""
    strategy = args.strategy
    if strategy is None and args.no_seeds and not (
        args.sort_order or args.pipeline or args.optimize
    ):
        strategy = "topological-no-seeds"

    path_strategies: List[PathKeyStrategy] = [
        s
        for s, flag in (
            (PathKeyStrategy.MINIMUM, args.paths_min),
            (PathKeyStrategy.MAXIMUM, args.paths_max),
            (PathKeyStrategy.AVERAGE, args.paths_avg),
            (PathKeyStrategy.AVERAGE_REVERSED, args.paths_avg_rev),
        )
        if flag
    ]

    return SortConfig(
        strategy=strategy,
        order_file=args.sort_order,
        optimize=args.optimize,
        pipeline=args.pipeline,
        parameters=OrderingParameters(
            n_parts=args.partition_n_parts,
            epsilon=args.partition_epsilon,
            path_weight=args.partition_path_weight,
            no_seeds=args.no_seeds,
            progress=args.progress,
            seed=args.seed,
        ),
        path_strategies=path_strategies,
        path_delimiter=args.path_delim,
        logger_name="vgorder.sort",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, args.log_level)
    if args.progress:
        level = min(level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        config = build_sort_config(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    try:
        graph = read_gfa(args.idx)

        if args.show:
            write_order(dump_order(graph, lazy=args.strategy == "lazy"), sys.stdout)
            sys.stdout.flush()

        if not args.out:
            logger.debug("No output requested; graph left unsorted")
            return 0

        GraphSorter(config).sort(graph)
        write_gfa(graph, args.out)
    except VGOrderError as exc:
        print(f"vgorder: error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"vgorder: error: {exc.filename}: {exc.strerror}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
