"""
Algorithm for finding a maximum cardinality matching in bipartite graphs.
"""

from __future__ import annotations

import math
import warnings
from collections import deque
from typing import Optional


class MatchingError(Exception):
    """Raised when verification of the matching fails."""


class OutOfRangeEdge(UserWarning):
    """Issued when an edge refers to a vertex outside the declared range.

    The offending edge is ignored. This is a warning, not an error:
    the graph remains usable and accepts further edges.
    """


def maximum_cardinality_matching(
        num_left: int,
        num_right: int,
        edges: list[tuple[int, int]]
        ) -> list[tuple[int, int]]:
    """Compute a maximum-cardinality matching in the bipartite graph
    given by "edges".

    The graph has left vertices "1 .. num_left" and right vertices
    "1 .. num_right". Each edge connects a left vertex to a right vertex.
    Duplicate edges are allowed; they have no effect on the result.

    Edges that refer to a vertex outside the declared range are skipped.
    An "OutOfRangeEdge" warning is issued for each skipped edge.

    This function takes time O(m * sqrt(n)), where "n" is the number of
    vertices and "m" is the number of edges.
    This function uses O(n + m) memory.

    Parameters:
        num_left: Number of vertices on the left side.
        num_right: Number of vertices on the right side.
        edges: List of edges, each edge specified as a tuple "(u, v)"
            where "u" is a left vertex and "v" is a right vertex.

    Returns:
        List of matched pairs "(u, v)", sorted by left vertex.

    Raises:
        ValueError: If a vertex count is negative.
        TypeError: If the input contains invalid data types.
        MatchingError: If the verification of the result fails.
    """

    _check_input_types(edges)

    matcher = BipartiteMatcher(num_left, num_right)
    matcher.add_edges(edges)
    matcher.compute_maximum_matching()

    return matcher.matched_pairs()


def _check_input_types(edges: list[tuple[int, int]]) -> None:
    """Check that the edge list consists of valid data types.

    Vertex ranges are not checked here; out-of-range edges are handled
    by "BipartiteMatcher.add_edge()".

    Raises:
        TypeError: If the input contains invalid data types.
    """

    if not isinstance(edges, list):
        raise TypeError('"edges" must be a list')

    for e in edges:
        if (not isinstance(e, tuple)) or (len(e) != 2):
            raise TypeError("Each edge must be specified as a 2-tuple")

        (u, v) = e
        if not (_is_vertex_id(u) and _is_vertex_id(v)):
            raise TypeError("Edge endpoints must be integers")


def _is_vertex_id(x: object) -> bool:
    """Return True if "x" has a valid type for a vertex id."""
    return isinstance(x, int) and not isinstance(x, bool)


class BipartiteMatcher:
    """Maximum-cardinality matching in a bipartite graph using
    the Hopcroft-Karp algorithm.

    The graph is built incrementally by calling "add_edge()".
    Calling "compute_maximum_matching()" then runs the algorithm
    in phases until the matching can not be improved any further.

    An instance must not be used by multiple threads at the same time.
    """

    def __init__(self, num_left: int, num_right: int) -> None:
        """Initialize an empty graph with the specified number of vertices.

        Raises:
            ValueError: If a vertex count is negative.
            TypeError: If a vertex count is not an integer.
        """

        if not (_is_vertex_id(num_left) and _is_vertex_id(num_right)):
            raise TypeError("Vertex counts must be integers")
        if num_left < 0:
            raise ValueError(f"Invalid number of left vertices {num_left}")
        if num_right < 0:
            raise ValueError(f"Invalid number of right vertices {num_right}")

        # Left vertices are indexed by integers in range 1 .. num_left.
        # Right vertices are indexed by integers in range 1 .. num_right.
        # Index 0 is never used as a vertex.
        self.num_left: int = num_left
        self.num_right: int = num_right

        # "adjacent[u]" is the list of right vertices adjacent to
        # left vertex "u", in the order in which the edges were added.
        self.adjacent: list[list[int]] = [[] for u in range(num_left + 1)]

        # If left vertex "u" is matched to right vertex "v",
        # "pair_left[u] == v" and "pair_right[v] == u".
        #
        # Unmatched vertices have mate "None".
        # Initially all vertices are unmatched.
        self.pair_left: list[Optional[int]] = (num_left + 1) * [None]
        self.pair_right: list[Optional[int]] = (num_right + 1) * [None]

        # "dist[u]" is the layer of left vertex "u" in the current phase,
        # or infinity if "u" is not (or no longer) part of the layering.
        self.dist: list[int|float] = (num_left + 1) * [math.inf]

        # "free_dist" is the length (in left-vertex layers) of the
        # shortest augmenting path found by the current layering,
        # or infinity if no augmenting path exists.
        self.free_dist: int|float = math.inf

        # Number of matched pairs.
        self._size: int = 0

        # Edges rejected by "add_edge()", in the order they were seen.
        self.rejected_edges: list[tuple[int, int]] = []

    @property
    def matching_size(self) -> int:
        """Number of pairs in the current matching."""
        return self._size

    def add_edge(self, u: int, v: int) -> bool:
        """Add an edge between left vertex "u" and right vertex "v".

        If either vertex is out of range, the edge is ignored and
        an "OutOfRangeEdge" warning is issued.

        Returns:
            True if the edge was added, False if it was rejected.

        Raises:
            TypeError: If a vertex id is not an integer.
        """

        if not (_is_vertex_id(u) and _is_vertex_id(v)):
            raise TypeError("Edge endpoints must be integers")

        if (u < 1) or (u > self.num_left) or (v < 1) or (v > self.num_right):
            self.rejected_edges.append((u, v))
            warnings.warn(
                f"Invalid edge ({u}, {v}): vertex out of range",
                OutOfRangeEdge,
                stacklevel=2)
            return False

        self.adjacent[u].append(v)
        return True

    def add_edges(self, edges: list[tuple[int, int]]) -> int:
        """Add a batch of edges.

        Out-of-range edges are skipped with a warning;
        the remaining edges are still added.

        Returns:
            Number of edges that were added.
        """
        num_added = 0
        for (u, v) in edges:
            if self.add_edge(u, v):
                num_added += 1
        return num_added

    def _build_layers(self) -> bool:
        """Assign layer numbers to left vertices by breadth-first search
        from all unmatched left vertices.

        This function takes time O(n + m).

        Returns:
            True if an augmenting path exists, otherwise False.
        """

        dist = self.dist
        pair_right = self.pair_right
        queue: deque[int] = deque()

        # Unmatched left vertices form layer 0.
        for u in range(1, self.num_left + 1):
            if self.pair_left[u] is None:
                dist[u] = 0
                queue.append(u)
            else:
                dist[u] = math.inf

        self.free_dist = math.inf

        while queue:
            u = queue.popleft()

            # Vertices at or beyond the shortest augmenting path length
            # can not contribute to a shortest augmenting path.
            if dist[u] < self.free_dist:
                for v in self.adjacent[u]:
                    w = pair_right[v]
                    if w is None:
                        # Reached an unmatched right vertex.
                        if self.free_dist == math.inf:
                            self.free_dist = dist[u] + 1
                    elif dist[w] == math.inf:
                        dist[w] = dist[u] + 1
                        queue.append(w)

        return self.free_dist != math.inf

    def _augment_from(self, root: int) -> bool:
        """Search an augmenting path that starts at unmatched left vertex
        "root" and respects the current layering, then augment along it.

        Uses an explicit stack instead of recursion.

        Returns:
            True if the matching was augmented, otherwise False.
        """

        dist = self.dist
        adjacent = self.adjacent
        pair_left = self.pair_left
        pair_right = self.pair_right

        # Each stack entry is "[u, i, v]" where "u" is a left vertex on the
        # current path, "i" is the position of the next adjacent edge to try,
        # and "v" is the right vertex via which the path continues.
        stack: list[list[int]] = [[root, 0, 0]]

        while stack:
            frame = stack[-1]
            (u, i, _v) = frame
            neighbors = adjacent[u]
            next_layer = dist[u] + 1

            descend = False
            while i < len(neighbors):
                v = neighbors[i]
                i += 1
                w = pair_right[v]

                if w is None:
                    if self.free_dist == next_layer:
                        # Found an augmenting path. Flip it.
                        frame[2] = v
                        for (x, _i, y) in stack:
                            pair_left[x] = y
                            pair_right[y] = x
                        return True

                elif dist[w] == next_layer:
                    # Continue the path via the mate of "v".
                    frame[1] = i
                    frame[2] = v
                    stack.append([w, 0, 0])
                    descend = True
                    break

            if not descend:
                # All edges of "u" are exhausted in this phase.
                dist[u] = math.inf
                stack.pop()

        return False

    def run_phase(self) -> bool:
        """Run one phase of the Hopcroft-Karp algorithm.

        The phase finds a maximal set of vertex-disjoint shortest
        augmenting paths and augments the matching along each of them.

        This function takes time O(n + m).

        Returns:
            True if the matching was augmented.
            False if no augmenting path exists, i.e. the matching is maximum.
        """

        if not self._build_layers():
            return False

        for u in range(1, self.num_left + 1):
            if self.pair_left[u] is None:
                if self._augment_from(u):
                    self._size += 1

        return True

    def compute_maximum_matching(self) -> int:
        """Compute a maximum-cardinality matching.

        Runs phases until no augmenting path remains, then verifies
        that the matching is maximum.

        This function takes time O(m * sqrt(n)).

        Returns:
            Number of pairs in the maximum matching.

        Raises:
            MatchingError: If the verification of the result fails.
        """

        # Each phase increases the length of the shortest augmenting path.
        # This loop runs through at most O(sqrt(n)) iterations.
        while self.run_phase():
            pass

        _verify_optimum(self)

        return self._size

    def matched_pairs(self) -> list[tuple[int, int]]:
        """Return the list of matched pairs "(u, v)", sorted by "u"."""
        return [(u, v)
                for (u, v) in enumerate(self.pair_left)
                if v is not None]


def _verify_optimum(matcher: BipartiteMatcher) -> None:
    """Verify that the matching is valid and has maximum cardinality.

    By König's theorem, a matching is maximum if and only if there is
    a vertex cover with the same number of vertices. This function
    constructs such a cover from the set "Z" of vertices that are reachable
    from unmatched left vertices via alternating paths: the cover consists
    of the left vertices not in "Z" and the right vertices in "Z".

    This function takes time O(n + m).

    Raises:
        MatchingError: If the matching is invalid or not maximum.
    """

    num_left = matcher.num_left
    num_right = matcher.num_right
    adjacent = matcher.adjacent
    pair_left = matcher.pair_left
    pair_right = matcher.pair_right

    # Double-check that the pairing is symmetric.
    num_matched = 0
    for u in range(1, num_left + 1):
        v = pair_left[u]
        if v is not None:
            if (v < 1) or (v > num_right) or (pair_right[v] != u):
                raise MatchingError(f"Asymmetric pairing of left vertex {u}")
            num_matched += 1

    for v in range(1, num_right + 1):
        u = pair_right[v]
        if u is not None:
            if (u < 1) or (u > num_left) or (pair_left[u] != v):
                raise MatchingError(
                    f"Asymmetric pairing of right vertex {v}")

    if num_matched != matcher.matching_size:
        raise MatchingError(
            f"Matching has {num_matched} pairs"
            f" but size is {matcher.matching_size}")

    # Double-check that each matched pair is an edge of the graph.
    for u in range(1, num_left + 1):
        v = pair_left[u]
        if (v is not None) and (v not in adjacent[u]):
            raise MatchingError(f"Matched pair ({u}, {v}) is not an edge")

    # Find all vertices reachable via alternating paths.
    left_reached = (num_left + 1) * [False]
    right_reached = (num_right + 1) * [False]
    stack: list[int] = []
    for u in range(1, num_left + 1):
        if pair_left[u] is None:
            left_reached[u] = True
            stack.append(u)

    while stack:
        u = stack.pop()
        for v in adjacent[u]:
            if not right_reached[v]:
                right_reached[v] = True
                w = pair_right[v]
                if w is None:
                    raise MatchingError(
                        f"Augmenting path ends at right vertex {v}")
                if not left_reached[w]:
                    left_reached[w] = True
                    stack.append(w)

    # Check that the vertex cover covers all edges.
    for u in range(1, num_left + 1):
        if left_reached[u]:
            for v in adjacent[u]:
                if not right_reached[v]:
                    raise MatchingError(f"Edge ({u}, {v}) is not covered")

    # Check that the vertex cover has the same size as the matching.
    cover_size = (sum(1 for u in range(1, num_left + 1)
                      if not left_reached[u])
                  + sum(1 for v in range(1, num_right + 1)
                        if right_reached[v]))
    if cover_size != num_matched:
        raise MatchingError(
            f"Vertex cover has {cover_size} vertices"
            f" but matching has {num_matched} pairs")

    # Optimum solution confirmed.
