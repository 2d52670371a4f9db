"""Tests for the analytical cost model."""

import unittest
import numpy as np

from convsplit.models.cost_model import (
    ELEMENT_SIZE_BYTES,
    estimate_breakdown,
    estimate_exec_time,
)
from convsplit.models.problem import ProblemSpec, PerfProfile


class TestEstimateExecTime(unittest.TestCase):
    """Test cases for estimate_exec_time."""

    def test_matrix_smaller_than_kernel(self):
        """Test the estimate ignores the split when M < K."""
        result = estimate_exec_time(2, 10, 3, 100, 200, 50, 5)
        self.assertGreater(result, 0)
        self.assertEqual(result, estimate_exec_time(2, 10, 3, 100, 200, 50, 0))

    def test_degenerate_invariance_over_rows(self):
        """Test every split gives the same estimate for several M < K shapes."""
        for M, N, K in [(0, 10, 3), (1, 1, 2), (2, 10, 3), (4, 50, 5), (6, 3, 7)]:
            expected = estimate_exec_time(M, N, K, 100, 200, 50, 0)
            for rows in range(-5, 15):
                self.assertEqual(
                    estimate_exec_time(M, N, K, 100, 200, 50, rows), expected,
                    f"M={M}, N={N}, K={K}, rows={rows}"
                )

    def test_matrix_equal_to_kernel(self):
        """Test M == K gives one output row: 120B in, 136 ops, 32B out."""
        # 120/50 + 136/200 + 32/50 = 3.72
        self.assertEqual(estimate_exec_time(3, 10, 3, 100, 200, 50, 3), 4)

    def test_all_rows_on_fast_gpu(self):
        """Test a hand-computed estimate with every output row on the GPU."""
        # in 20*20*4/10000, compute 18*18*17/10000, out 18*18*4/10000 -> 0.84
        self.assertEqual(estimate_exec_time(20, 20, 3, 100, 10000, 10000, 20), 1)

    def test_no_rows_offloaded(self):
        """Test a zero split costs the full CPU time."""
        # CPU: 18*18*17/100 = 55.08, GPU only pays for K-1 rows of input
        self.assertEqual(estimate_exec_time(20, 20, 3, 100, 10000, 10000, 0), 56)

    def test_rows_are_clamped(self):
        """Test splits outside [0, M] behave like the nearest bound."""
        args = (20, 20, 3, 100, 200, 50)
        self.assertEqual(estimate_exec_time(*args, -10), estimate_exec_time(*args, 0))
        self.assertEqual(estimate_exec_time(*args, 500), estimate_exec_time(*args, 20))

    def test_fewer_rows_than_kernel_gives_no_gpu_output(self):
        """Test that splits below K produce the same estimate as no split."""
        args = (30, 30, 5, 100, 200, 50)
        expected = estimate_exec_time(*args, 0)
        for rows in range(1, 5):
            self.assertEqual(estimate_exec_time(*args, rows), expected)

    def test_gpu_throughput_monotonic(self):
        """Test a faster GPU never increases the estimate."""
        for rows in [0, 3, 10, 17, 25, 40]:
            previous = None
            for gpu_ops in [1, 10, 100, 1000, 10000, 100000]:
                time = estimate_exec_time(40, 30, 3, 500, gpu_ops, 200, rows)
                if previous is not None:
                    self.assertLessEqual(time, previous)
                previous = time

    def test_bandwidth_monotonic(self):
        """Test more bandwidth never increases the estimate."""
        for rows in [0, 3, 10, 17, 25, 40]:
            previous = None
            for bandwidth in [1, 7, 50, 400, 3000, 100000]:
                time = estimate_exec_time(40, 30, 3, 500, 2000, bandwidth, rows)
                if previous is not None:
                    self.assertLessEqual(time, previous)
                previous = time

    def test_non_negative(self):
        """Test estimates are never negative."""
        for M, N, K in [(0, 0, 1), (1, 1, 1), (5, 5, 3), (64, 16, 9), (2, 100, 3)]:
            for rows in [-3, 0, 1, M // 2, M, M + 3]:
                self.assertGreaterEqual(estimate_exec_time(M, N, K, 7, 3, 11, rows), 0)

    def test_large_problem_does_not_overflow(self):
        """Test products beyond 32 bits are kept exact."""
        spec = ProblemSpec(100000, 100000, 11)
        perf = PerfProfile(10 ** 9, 10 ** 10, 10 ** 8)
        bd = estimate_breakdown(spec, perf, 0)

        self.assertEqual(bd.cpu_total_ops, 99990 * 99990 * 241)
        self.assertGreater(bd.cpu_total_ops, 2 ** 31)
        self.assertEqual(bd.total_time, 2410)

    def test_numpy_integers_accepted(self):
        """Test numpy integer arguments match plain ints."""
        expected = estimate_exec_time(500, 400, 5, 300, 900, 80, 250)
        result = estimate_exec_time(np.int32(500), np.int64(400), np.int32(5),
                                    np.int32(300), np.int32(900), np.int32(80), np.int64(250))
        self.assertEqual(result, expected)
        self.assertIsInstance(result, int)


class TestInvalidArguments(unittest.TestCase):
    """Test cases for argument validation."""

    def test_non_positive_rates_rejected(self):
        """Test zero or negative rates raise ValueError."""
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 3, 0, 200, 50, 5)
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 3, 100, -1, 50, 5)
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 3, 100, 200, 0, 5)

    def test_non_positive_kernel_rejected(self):
        """Test K <= 0 raises ValueError."""
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 0, 100, 200, 50, 5)
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, -2, 100, 200, 50, 5)

    def test_negative_dimensions_rejected(self):
        """Test negative M or N raises ValueError."""
        with self.assertRaises(ValueError):
            estimate_exec_time(-1, 10, 3, 100, 200, 50, 5)
        with self.assertRaises(ValueError):
            estimate_exec_time(10, -1, 3, 100, 200, 50, 5)

    def test_non_integer_rejected(self):
        """Test floats and bools raise ValueError."""
        with self.assertRaises(ValueError):
            estimate_exec_time(10.5, 10, 3, 100, 200, 50, 5)
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 3, True, 200, 50, 5)

    def test_non_integer_rows_rejected(self):
        """Test a fractional split raises TypeError."""
        with self.assertRaises(TypeError):
            estimate_exec_time(10, 10, 3, 100, 200, 50, 2.5)

    def test_bool_rows_rejected(self):
        """Test a bool split raises ValueError like the other fields."""
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 3, 100, 200, 50, True)
        with self.assertRaises(ValueError):
            estimate_exec_time(10, 10, 3, 100, 200, 50, False)


class TestCostBreakdown(unittest.TestCase):
    """Test cases for estimate_breakdown."""

    def setUp(self):
        """Set up test fixtures."""
        self.spec = ProblemSpec(M=20, N=20, K=3)
        self.perf = PerfProfile(cpu_ops=100, gpu_ops=10000, bandwidth=10000)

    def test_partial_split(self):
        """Test intermediate quantities for 19 offloaded rows."""
        bd = estimate_breakdown(self.spec, self.perf, 19)

        self.assertEqual(bd.output_height, 18)
        self.assertEqual(bd.output_width, 18)
        self.assertEqual(bd.gpu_output_rows, 17)
        self.assertEqual(bd.cpu_output_rows, 1)
        self.assertEqual(bd.gpu_positions, 17 * 18)
        self.assertEqual(bd.cpu_positions, 18)
        self.assertEqual(bd.rows_to_transfer, 19)
        self.assertEqual(bd.transfer_in_bytes, 19 * 20 * ELEMENT_SIZE_BYTES)
        self.assertEqual(bd.transfer_out_bytes, 17 * 18 * ELEMENT_SIZE_BYTES)
        self.assertAlmostEqual(bd.cpu_time, 3.06)
        self.assertEqual(bd.total_time, 4)
        self.assertEqual(bd.bottleneck, 'cpu')

    def test_gpu_time_is_sum_of_stages(self):
        """Test GPU time adds both transfers and compute."""
        bd = estimate_breakdown(self.spec, self.perf, 12)
        self.assertAlmostEqual(
            bd.gpu_time,
            bd.gpu_transfer_in_time + bd.gpu_compute_time + bd.gpu_transfer_out_time
        )

    def test_total_matches_estimate(self):
        """Test breakdown total agrees with estimate_exec_time."""
        for rows in range(0, 21):
            bd = estimate_breakdown(self.spec, self.perf, rows)
            self.assertEqual(bd.total_time, estimate_exec_time(20, 20, 3, 100, 10000, 10000, rows))

    def test_degenerate_shape(self):
        """Test a kernel taller than the input leaves no output rows."""
        bd = estimate_breakdown(ProblemSpec(2, 10, 3), PerfProfile(100, 200, 50), 5)

        self.assertEqual(bd.output_height, 0)
        self.assertEqual(bd.gpu_output_rows, 0)
        self.assertEqual(bd.cpu_output_rows, 0)
        self.assertEqual(bd.cpu_total_ops, 0)
        self.assertEqual(bd.rows_to_transfer, 2)
        self.assertEqual(bd.total_time, 2)

    def test_to_dict_includes_bottleneck(self):
        """Test serialization keeps the derived bottleneck."""
        data = estimate_breakdown(self.spec, self.perf, 20).to_dict()
        self.assertEqual(data['bottleneck'], 'gpu')
        self.assertEqual(data['num_offloaded_rows'], 20)


class TestProblemSpec(unittest.TestCase):
    """Test cases for ProblemSpec and PerfProfile."""

    def test_derived_dimensions(self):
        """Test output grid and op counts."""
        spec = ProblemSpec(10, 8, 3)
        self.assertEqual(spec.output_height, 8)
        self.assertEqual(spec.output_width, 6)
        self.assertEqual(spec.ops_per_position, 17)
        self.assertFalse(spec.is_degenerate)

    def test_degenerate_dimensions_clamp_to_zero(self):
        """Test output dims never go negative."""
        spec = ProblemSpec(2, 10, 5)
        self.assertEqual(spec.output_height, 0)
        self.assertEqual(spec.output_width, 6)
        self.assertTrue(spec.is_degenerate)

    def test_from_dict_aliases(self):
        """Test config aliases for the shape."""
        spec = ProblemSpec.from_dict({'rows': 64, 'cols': 32, 'kernel_size': 3})
        self.assertEqual(spec, ProblemSpec(64, 32, 3))

    def test_from_dict_missing_key(self):
        """Test a missing key is reported."""
        with self.assertRaises(KeyError):
            ProblemSpec.from_dict({'M': 10, 'N': 10})
        with self.assertRaises(KeyError):
            PerfProfile.from_dict({'cpu_ops': 1, 'gpu_ops': 2})


if __name__ == '__main__':
    unittest.main()
