import io
import os
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from partgen.benchmarks import benchmark_methods as bench


class BenchmarkHelpersTests(unittest.TestCase):
    def test_env_parsing(self):
        with patch.dict(os.environ, {"BENCH_TARGETS": "10, x, -3,,40", "BENCH_SAMPLES": "z"}):
            self.assertEqual(bench._env_targets("BENCH_TARGETS", [1]), [10, 40])
            self.assertEqual(bench._env_int("BENCH_SAMPLES", 7), 7)
        with patch.dict(os.environ, {"BENCH_TARGETS": "bad"}):
            self.assertEqual(bench._env_targets("BENCH_TARGETS", [5]), [5])

    def test_main_reports_both_methods(self):
        out = io.StringIO()
        with patch.object(bench, "BENCH_TARGETS", [6]), patch.object(
            bench, "BENCH_SAMPLES", 5
        ), patch.object(bench, "BENCH_REPEATS", 1), patch.object(
            bench, "BENCH_POLICY", "odd"
        ):
            with redirect_stdout(out):
                bench.main()
        text = out.getvalue()
        self.assertIn("[BENCH] policy=Odd()", text)
        self.assertIn("method=rejection", text)
        self.assertIn("method=pdc", text)


if __name__ == "__main__":
    unittest.main()
