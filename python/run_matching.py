#!/usr/bin/env python3

"""
Calculate maximum cardinality matching of bipartite graphs.
"""

from __future__ import annotations

import sys
import argparse
import os
import os.path
import warnings
from typing import NamedTuple, TextIO

from bpmatching import BipartiteMatcher, OutOfRangeEdge


class BipartiteGraph(NamedTuple):
    """Bipartite graph as read from an input file."""
    num_left: int
    num_right: int
    edges: list[tuple[int, int]]


def read_bipartite_graph(f: TextIO) -> BipartiteGraph:
    """Read a bipartite graph in DIMACS-style edge list format.

    The problem line "p bip NLEFT NRIGHT NEDGE" must come before
    the edge lines "e U V". Vertex ranges are not checked here.
    """

    num_left = -1
    num_right = -1
    edges: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "p":
            # Handle "problem" line.
            if len(words) != 5:
                raise ValueError(
                    f"Expecting bipartite problem line but got {s!r}")
            if words[1] != "bip":
                raise ValueError(
                    f"Expecting bipartite format but got {words[1]!r}")
            if num_left >= 0:
                raise ValueError("Duplicate problem line")
            num_left = int(words[2])
            num_right = int(words[3])
            if (num_left < 0) or (num_right < 0):
                raise ValueError(f"Invalid vertex count {s!r}")

        elif words[0] == "e":
            # Handle "edge" line.
            if num_left < 0:
                raise ValueError("Edge before problem line")
            if len(words) != 3:
                raise ValueError(f"Expecting edge but got {s!r}")
            u = int(words[1])
            v = int(words[2])
            edges.append((u, v))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    if num_left < 0:
        raise ValueError("Missing problem line")

    return BipartiteGraph(num_left, num_right, edges)


def read_bipartite_graph_file(filename: str) -> BipartiteGraph:
    """Read a graph from file or stdin."""
    if filename:
        with open(filename, "r", encoding="ascii") as f:
            try:
                return read_bipartite_graph(f)
            except ValueError as exc:
                raise ValueError(f"{exc} in {filename!r}") from None
    else:
        try:
            return read_bipartite_graph(sys.stdin)
        except ValueError as exc:
            raise ValueError(f"{exc} in (stdin)") from None


def read_matching(f: TextIO) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching solution in DIMACS-style format."""

    have_size = False
    size = 0
    pairs: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "s":
            # Handle "solution" line.
            if len(words) != 2:
                raise ValueError(
                    f"Expecting solution line but got {s!r}")
            if have_size:
                raise ValueError("Duplicate solution line")
            have_size = True
            size = int(words[1])

        elif words[0] == "m":
            # Handle "matching" line.
            if len(words) != 3:
                raise ValueError(
                    f"Expecting matched pair but got {s!r}")
            u = int(words[1])
            v = int(words[2])
            if (u < 1) or (v < 1):
                raise ValueError(f"Invalid vertex index {s!r}")
            pairs.append((u, v))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    if not have_size:
        raise ValueError("Missing solution line")

    return (size, pairs)


def read_matching_file(filename: str) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching from file."""
    with open(filename, "r", encoding="ascii") as f:
        try:
            return read_matching(f)
        except ValueError as exc:
            raise ValueError(f"{exc} in {filename!r}") from None


def check_matching(
        graph: BipartiteGraph,
        pairs: list[tuple[int, int]]
        ) -> None:
    """Check that "pairs" is a valid matching in the graph.

    Raises:
        ValueError: If a vertex is used twice or a pair is not an edge.
    """

    edge_set = set(graph.edges)
    left_used: set[int] = set()
    right_used: set[int] = set()

    for (u, v) in pairs:
        if u in left_used:
            raise ValueError(f"Matching uses left vertex {u} twice")
        if v in right_used:
            raise ValueError(f"Matching uses right vertex {v} twice")
        if (u, v) not in edge_set:
            raise ValueError(
                f"Matching contains non-existing edge ({u}, {v})")
        left_used.add(u)
        right_used.add(v)


def write_matching(f: TextIO, pairs: list[tuple[int, int]]) -> None:
    """Write a matching solution in DIMACS-style format."""
    print("s", len(pairs), file=f)
    for (u, v) in pairs:
        print("m", u, v, file=f)


def write_matching_file(filename: str, pairs: list[tuple[int, int]]) -> None:
    """Write a matching to file or stdout."""
    if filename:
        with open(filename, "x", encoding="ascii") as f:
            write_matching(f, pairs)
    else:
        write_matching(sys.stdout, pairs)


def compute_matching(
        graph: BipartiteGraph,
        source: str
        ) -> list[tuple[int, int]]:
    """Calculate a maximum matching and report skipped edges on stderr."""

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", OutOfRangeEdge)
        matcher = BipartiteMatcher(graph.num_left, graph.num_right)
        matcher.add_edges(graph.edges)

    for w in caught:
        if issubclass(w.category, OutOfRangeEdge):
            print(f"WARNING: {w.message} in {source}", file=sys.stderr)
        else:
            warnings.showwarning(
                w.message, w.category, w.filename, w.lineno)

    matcher.compute_maximum_matching()
    return matcher.matched_pairs()


def generate_matching(input_filename: str, output_filename: str) -> None:
    """Calculate matching of one graph instance."""

    graph = read_bipartite_graph_file(input_filename)
    source = repr(input_filename) if input_filename else "(stdin)"
    pairs = compute_matching(graph, source)
    write_matching_file(output_filename, pairs)


def run_generate(filenames: list[str], outdir: str) -> int:
    """Calculate matching(s) and write output to disk or stdout."""

    if len(filenames) == 0:
        # Read from stdin; write to stdout.
        generate_matching("", "")

    elif not outdir:
        # Read from file, write to stdout.
        assert len(filenames) == 1
        generate_matching(filenames[0], "")

    else:
        # Read from file, write to file.
        for filename in filenames:
            output_filename = os.path.join(
                outdir,
                os.path.splitext(os.path.basename(filename))[0] + ".out")
            print(f"Processing {filename!r} -> {output_filename!r} ...",
                  end=" ")
            sys.stdout.flush()

            generate_matching(filename, output_filename)

            print(" OK")
            sys.stdout.flush()

    return 0


def verify_matching(filename: str) -> bool:
    """Verify matching of one graph instance."""

    print("Verifying", repr(filename), "...", end=" ")
    sys.stdout.flush()

    matching_filename = os.path.splitext(filename)[0] + ".out"

    graph = read_bipartite_graph_file(filename)
    (gold_size, gold_pairs) = read_matching_file(matching_filename)

    # The reference answer must itself be a matching of the stated size.
    try:
        check_matching(graph, gold_pairs)
    except ValueError as exc:
        print("FAILED", f"(invalid reference matching: {exc})")
        return False
    if len(gold_pairs) != gold_size:
        print("FAILED",
              f"(reference lists {len(gold_pairs)} pairs"
              f" but claims size {gold_size})")
        return False

    pairs = compute_matching(graph, repr(filename))

    if len(pairs) != gold_size:
        print("FAILED", f"(got {len(pairs)} pairs, expected {gold_size})")
        return False

    print("OK")
    return True


def run_verify(filenames: list[str]) -> int:
    """Verify matching(s)."""

    num_passed = 0
    failed_tests: list[str] = []

    for filename in filenames:
        if verify_matching(filename):
            num_passed += 1
        else:
            failed_tests.append(filename)
        sys.stdout.flush()

    print("done.")
    print(num_passed, "tests passed")
    if failed_tests:
        print(len(failed_tests), "tests failed:")
        for filename in failed_tests:
            print("   ", filename, "FAILED")
    else:
        print("All tests passed")
    sys.stdout.flush()

    return 1 if failed_tests else 0


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = (
        "Calculate maximum cardinality matching of bipartite graphs.")

    parser.add_argument("--verify",
                        action="store_true",
                        help="verify existing output file(s)")
    parser.add_argument("--outdir",
                        action="store",
                        type=str,
                        help="directory to write output")
    parser.add_argument("input",
                        nargs="*",
                        help="input file(s); leave empty to read from stdin")

    args = parser.parse_args()

    if (not args.input) and os.isatty(sys.stdin.fileno()):
        print("ERROR: Expecting input from stdin but stdin is a terminal",
              file=sys.stderr)
        print(file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if (not args.input) and args.verify:
        print("ERROR: Can not verify when reading from stdin",
              file=sys.stderr)
        return 1

    if len(args.input) > 1 and (not args.verify) and (not args.outdir):
        print("ERROR: Need --outdir or --verify to process multiple inputs",
              file=sys.stderr)
        return 1

    try:
        if args.verify:
            return run_verify(args.input)
        else:
            return run_generate(args.input, args.outdir)
    except (OSError, ValueError) as exc:
        print("ERROR:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
