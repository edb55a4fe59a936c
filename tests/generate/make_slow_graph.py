#!/usr/bin/env python3

"""
Generate a bipartite graph that is "difficult" for the Hopcroft-Karp
algorithm.

Output in DIMACS-style bipartite format.
"""

from __future__ import annotations

import sys
import argparse
from typing import Any, TextIO


count_phase = [0]


def patch_matching_code() -> None:
    """Patch the matching code to count phases."""

    import bpmatching

    orig_run_phase = bpmatching.BipartiteMatcher.run_phase

    def stub_run_phase(*args: Any, **kwargs: Any) -> Any:
        ret = orig_run_phase(*args, **kwargs)
        if ret:
            count_phase[0] += 1
        return ret

    bpmatching.BipartiteMatcher.run_phase = stub_run_phase  # type: ignore


def run_matching(
        num_left: int,
        num_right: int,
        edges: list[tuple[int, int]]
        ) -> tuple[list[tuple[int, int]], int]:
    """Run the matching algorithm and count phases."""
    import bpmatching

    count_phase[0] = 0

    pairs = bpmatching.maximum_cardinality_matching(
        num_left, num_right, edges)
    return (pairs, count_phase[0])


def write_bipartite_graph(
        f: TextIO,
        num_left: int,
        num_right: int,
        edges: list[tuple[int, int]]
        ) -> None:
    """Write a bipartite graph in DIMACS-style edge list format."""

    print(f"p bip {num_left} {num_right} {len(edges)}", file=f)

    for (u, v) in edges:
        print(f"e {u} {v}", file=f)


def make_chain(first: int, k: int) -> list[tuple[int, int]]:
    """Generate a chain of "k" left and "k" right vertices, numbered
    from "first" on both sides.

    Left vertex "i" is adjacent to right vertices "i + 1" and "i",
    in that order. The first phase greedily matches each left vertex
    to its successor, leaving the last left vertex and the first right
    vertex unmatched. The remaining augmenting path has length 2*k - 1.
    """

    edges: list[tuple[int, int]] = []

    for i in range(first, first + k - 1):
        edges.append((i, i + 1))
        edges.append((i, i))

    edges.append((first + k - 1, first + k - 1))

    return edges


def make_staircase_graph(k: int) -> tuple[int, list[tuple[int, int]]]:
    """Generate disjoint chains with 1, 2, ..., K left vertices.

    The first phase greedily matches pairs in every chain. After that,
    the shortest augmenting path left after phase "p - 1" lies only in
    the chain with "p" left vertices, so the algorithm needs K phases
    for N = K * (K + 1) / 2 vertices per side.
    This is the O(sqrt(N)) worst case for the number of phases.

    Returns:
        Tuple (number of vertices per side, edges).
    """

    assert k >= 1

    edges: list[tuple[int, int]] = []
    first = 1

    for size in range(1, k + 1):
        edges += make_chain(first, size)
        first += size

    return (first - 1, edges)


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = "Generate a difficult bipartite graph."

    parser.add_argument("--check",
                        action="store_true",
                        help="solve the matching and count phases")
    parser.add_argument("structure",
                        action="store",
                        choices=("staircase", "chain"),
                        help="graph structure")
    parser.add_argument("k",
                        action="store",
                        type=int,
                        help="size parameter;"
                             " number of chains (staircase)"
                             " or chain length (chain)")

    args = parser.parse_args()

    if args.k < 1:
        print("ERROR: K must be at least 1", file=sys.stderr)
        return 1

    if args.check:
        patch_matching_code()

    if args.structure == "staircase":
        (n, edges) = make_staircase_graph(args.k)

    elif args.structure == "chain":
        n = args.k
        edges = make_chain(1, args.k)

    else:
        assert False

    if args.check:
        (pairs, num_phase) = run_matching(n, n, edges)
        print(f"n={n} m={len(edges)} "
              f"size={len(pairs)} nphase={num_phase}",
              file=sys.stderr)

    write_bipartite_graph(sys.stdout, n, n, edges)

    return 0


if __name__ == "__main__":
    sys.exit(main())
