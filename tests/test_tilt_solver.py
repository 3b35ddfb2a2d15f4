import math
import unittest

from partgen.engine.errors import TiltConvergenceError
from partgen.engine.tilt import (
    allowed_sizes,
    expected_sum,
    find_tilt,
    solve_tilt,
    unrestricted_tilt,
)
from partgen.schema.policies import (
    Even,
    MaxPart,
    MinPart,
    Odd,
    Residue,
    Triangular,
    Unrestricted,
)


class ExpectedSumTests(unittest.TestCase):
    def test_single_part_closed_form(self):
        self.assertAlmostEqual(expected_sum(0.5, 1), 1.0)
        self.assertAlmostEqual(expected_sum(0.25, 1), 1.0 / 3.0)

    def test_matches_direct_sum(self):
        x = 0.8
        direct = sum(i * x**i / (1 - x**i) for i in range(2, 21, 2))
        self.assertAlmostEqual(expected_sum(x, 20, Even()), direct, places=10)

    def test_monotone_in_tilt(self):
        for policy in (Unrestricted(), Even(), Triangular()):
            with self.subTest(policy=policy):
                values = [expected_sum(x, 30, policy) for x in (0.2, 0.5, 0.8, 0.95)]
                self.assertEqual(values, sorted(values))
                self.assertLess(values[0], values[-1])

    def test_finite_policy_stops_at_sentinel(self):
        x = 0.9
        direct = sum(i * x**i / (1 - x**i) for i in (1, 2, 3))
        self.assertAlmostEqual(expected_sum(x, 100, MaxPart(3)), direct, places=10)

    def test_no_sizes_gives_zero(self):
        self.assertEqual(expected_sum(0.7, 0), 0.0)
        self.assertEqual(expected_sum(0.7, 1, Even()), 0.0)
        self.assertEqual(allowed_sizes(1, Even()).size, 0)


class SolveTiltTests(unittest.TestCase):
    def test_residual_within_tolerance_for_many_policies(self):
        policies = (
            Unrestricted(),
            Even(),
            Odd(),
            Triangular(),
            Residue(5, 7),
            MinPart(4),
            MaxPart(10),
        )
        for policy in policies:
            for n in (5, 10, 37, 100, 500):
                with self.subTest(policy=policy, n=n):
                    solution = solve_tilt(n, policy)
                    self.assertTrue(solution.converged)
                    self.assertGreater(solution.x, 0.0)
                    self.assertLess(solution.x, 1.0)
                    self.assertLess(abs(expected_sum(solution.x, n, policy) - n), 1e-3)

    def test_target_one_unrestricted_is_one_half(self):
        solution = solve_tilt(1)
        self.assertAlmostEqual(solution.x, 0.5, places=5)
        self.assertGreater(solution.iterations, 0)
        self.assertEqual(solution.method, "bisection")

    def test_zero_target_and_missing_sizes(self):
        zero = solve_tilt(0)
        self.assertTrue(zero.converged)
        self.assertEqual(zero.iterations, 0)

        unreachable = solve_tilt(1, Even())
        self.assertFalse(unreachable.converged)
        self.assertEqual(unreachable.iterations, 0)
        self.assertTrue(0.0 < unreachable.x < 1.0)

    def test_iteration_cap_is_silent_unless_strict(self):
        capped = solve_tilt(50, max_iters=3)
        self.assertFalse(capped.converged)
        self.assertEqual(capped.iterations, 3)

        with self.assertRaises(TiltConvergenceError) as exc:
            solve_tilt(50, max_iters=3, strict=True)
        self.assertEqual(exc.exception.solution.iterations, 3)

    def test_negative_target_rejected(self):
        with self.assertRaises(ValueError):
            solve_tilt(-1)


class FastPathTests(unittest.TestCase):
    def test_table_and_asymptotic_values(self):
        self.assertEqual(unrestricted_tilt(1), 0.5)
        self.assertEqual(unrestricted_tilt(200), 0.91443)
        self.assertAlmostEqual(
            unrestricted_tilt(1000), 1.0 - math.pi / math.sqrt(6.0 * 1000)
        )

    def test_table_agrees_with_bisection(self):
        for n in (2, 10, 50, 150, 200):
            with self.subTest(n=n):
                self.assertAlmostEqual(
                    unrestricted_tilt(n), solve_tilt(n).x, delta=5e-4
                )

    def test_find_tilt_dispatch(self):
        fast = find_tilt(100, method="fast")
        self.assertEqual(fast.method, "fast")
        self.assertEqual(fast.x, unrestricted_tilt(100))

        bisection = find_tilt(100, Even())
        self.assertEqual(bisection.method, "bisection")

        with self.assertRaises(ValueError):
            find_tilt(100, Even(), method="fast")
        with self.assertRaises(ValueError):
            find_tilt(100, method="newton")


if __name__ == "__main__":
    unittest.main()
