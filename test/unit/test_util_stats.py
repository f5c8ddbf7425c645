# Unit tests for util.stats

import math
import unittest

import util.stats


class TestExpectedCounts(unittest.TestCase):

    def test_two_by_two(self):
        self.assertEqual(util.stats.expected_counts([[8, 2], [2, 8]]), [[5, 5], [5, 5]])

    def test_uneven_margins(self):
        expect = util.stats.expected_counts([[19, 5], [1, 15]])
        self.assertEqual(expect, [[12, 12], [8, 8]])

    def test_ragged(self):
        self.assertRaises(ValueError, util.stats.expected_counts, [[1, 2], [3]])

    def test_all_zero(self):
        self.assertRaises(ValueError, util.stats.expected_counts, [[0, 0], [0, 0]])


class TestGStatistic(unittest.TestCase):

    def test_worked_example(self):
        # mut ref=2 alt=8, sib ref=8 alt=2
        g = util.stats.g_statistic([[8, 2], [2, 8]])
        self.assertAlmostEqual(g, 2 * (16 * math.log(1.6) + 4 * math.log(0.4)))
        self.assertAlmostEqual(g, 7.70979, places=4)

    def test_independent(self):
        self.assertAlmostEqual(util.stats.g_statistic([[5, 10], [10, 20]]), 0.0)

    def test_zero_cells(self):
        self.assertAlmostEqual(util.stats.g_statistic([[10, 0], [0, 10]]), 40 * math.log(2))

    def test_larger_table(self):
        # scipy.stats.chi2_contingency([[10, 20, 30], [30, 20, 10]], lambda_="log-likelihood")[0]
        self.assertAlmostEqual(util.stats.g_statistic([[10, 20, 30], [30, 20, 10]]), 20.93, places=2)

    def test_invalid(self):
        self.assertRaises(ValueError, util.stats.g_statistic, [])
        self.assertRaises(ValueError, util.stats.g_statistic, [[1, -1], [2, 2]])
        self.assertRaises(ValueError, util.stats.g_statistic, [[0, 0], [0, 0]])
