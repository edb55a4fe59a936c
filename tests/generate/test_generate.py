"""Unit tests for the test graph generators."""

import io
import random
import unittest

from bpmatching import BipartiteMatcher
from make_random_graph import make_random_graph
from make_slow_graph import (
    make_chain,
    make_staircase_graph,
    write_bipartite_graph)


def count_phases(num_left, num_right, edges):
    """Run the matcher phase by phase and return (size, number of phases)."""
    matcher = BipartiteMatcher(num_left, num_right)
    matcher.add_edges(edges)
    num_phase = 0
    while matcher.run_phase():
        num_phase += 1
    return (matcher.compute_maximum_matching(), num_phase)


class TestMakeSlowGraph(unittest.TestCase):
    """Test make_slow_graph generators."""

    def test_chain(self):
        self.assertEqual(make_chain(1, 1), [(1,1)])
        self.assertEqual(
            make_chain(4, 3),
            [(4,5), (4,4), (5,6), (5,5), (6,6)])

    def test_chain_two_phases(self):
        for k in (2, 5, 40):
            edges = make_chain(1, k)
            self.assertEqual(count_phases(k, k, edges), (k, 2))

    def test_staircase_size(self):
        for k in (1, 2, 6):
            (n, edges) = make_staircase_graph(k)
            self.assertEqual(n, k * (k + 1) // 2)
            self.assertEqual(len(edges), k * k)

    def test_staircase_phases(self):
        for k in (1, 2, 3, 6, 10):
            (n, edges) = make_staircase_graph(k)
            with self.subTest(k=k):
                self.assertEqual(count_phases(n, n, edges), (n, k))

    def test_write_graph(self):
        f = io.StringIO()
        write_bipartite_graph(f, 2, 2, make_chain(1, 2))
        self.assertEqual(f.getvalue(), "p bip 2 2 3\ne 1 2\ne 1 1\ne 2 2\n")


class TestMakeRandomGraph(unittest.TestCase):
    """Test make_random_graph generator."""

    def test_sparse_and_dense(self):
        rng = random.Random(4321)
        for (nl, nr, m) in ((10, 7, 5), (4, 5, 20), (3, 3, 9), (6, 2, 0)):
            edges = make_random_graph(nl, nr, m, rng)
            with self.subTest(nl=nl, nr=nr, m=m):
                self.assertEqual(len(edges), m)
                self.assertEqual(len(set(edges)), m)
                for (u, v) in edges:
                    self.assertTrue(1 <= u <= nl)
                    self.assertTrue(1 <= v <= nr)


if __name__ == "__main__":
    unittest.main()
