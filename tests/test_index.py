# tests/test_index.py
import os
import sys
import unittest

import numpy as np

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from supramod.core._Index import (
    flat_index,
    flatten_partition,
    layer_of,
    layer_rows,
    node_of,
    unflatten_partition,
)


class TestFlattenedIndex(unittest.TestCase):
    def test_flat_index_is_node_major_within_layer(self):
        self.assertEqual(flat_index(0, 0, 4), 0)
        self.assertEqual(flat_index(3, 0, 4), 3)
        self.assertEqual(flat_index(0, 1, 4), 4)
        self.assertEqual(flat_index(2, 3, 4), 14)

    def test_bijection_over_supra_range(self):
        n, t = 5, 3
        seen = set()
        for s in range(t):
            for i in range(n):
                c = flat_index(i, s, n)
                self.assertEqual(layer_of(c, n), s)
                self.assertEqual(node_of(c, n), i)
                seen.add(c)
        self.assertEqual(seen, set(range(n * t)))

    def test_layer_of_block_boundaries(self):
        # exact integer division: last row of a block stays in that block
        n = 7
        self.assertEqual(layer_of(6, n), 0)
        self.assertEqual(layer_of(7, n), 1)
        self.assertEqual(layer_of(13, n), 1)
        self.assertEqual(layer_of(14, n), 2)

    def test_layer_rows(self):
        self.assertEqual(list(layer_rows(2, 3)), [6, 7, 8])
        self.assertEqual(len(layer_rows(0, 1)), 1)

    def test_numpy_integers_accepted(self):
        self.assertEqual(layer_of(np.int64(9), np.int32(4)), 2)
        self.assertIsInstance(flat_index(np.int64(1), np.int64(1), 4), int)


class TestPartitionReshape(unittest.TestCase):
    def test_flatten_is_column_major(self):
        S_m = np.array([[0, 1], [0, 1], [2, 1]])  # N=3, T=2
        S = flatten_partition(S_m)
        np.testing.assert_array_equal(S, [0, 0, 2, 1, 1, 1])
        # entry i + s*N is node i in layer s
        self.assertEqual(S[flat_index(2, 0, 3)], 2)

    def test_unflatten_inverts_flatten(self):
        S = np.arange(12)
        S_m = unflatten_partition(S, 4, 3)
        self.assertEqual(S_m.shape, (4, 3))
        np.testing.assert_array_equal(S_m[:, 1], [4, 5, 6, 7])
        np.testing.assert_array_equal(flatten_partition(S_m), S)

    def test_unflatten_length_mismatch(self):
        with self.assertRaises(ValueError):
            unflatten_partition(np.arange(5), 2, 3)

    def test_flatten_rejects_vectors(self):
        with self.assertRaises(ValueError):
            flatten_partition(np.arange(6))


class TestCoreModuleDocs(unittest.TestCase):
    def test_core_modules_have_docstrings(self):
        import importlib

        for name in ("_Index", "_Params", "_Triplets", "_Supra", "operator"):
            mod = importlib.import_module(f"supramod.core.{name}")
            with self.subTest(module=name):
                self.assertTrue(mod.__doc__ and mod.__doc__.strip())


if __name__ == "__main__":
    unittest.main()
