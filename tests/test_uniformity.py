import unittest

from partgen.api.sampler import PartitionSampler
from partgen.engine.sampling import sample_exact_by_pdc, sample_exact_by_rejection
from partgen.engine.tilt import solve_tilt
from partgen.runtime.rng import RNG
from partgen.schema.policies import Even, Odd, Residue
from partgen.scoring.frequencies import (
    count_partitions,
    partition_frequencies,
    uniformity_report,
)


def _draw(sampler, target, policy, samples, seed):
    rng = RNG(seed)
    tilt = solve_tilt(target, policy).x
    return [sampler(target, policy, tilt=tilt, rng=rng) for _ in range(samples)]


class UnrestrictedUniformityTests(unittest.TestCase):
    SAMPLES = 14000

    def _check_uniform(self, method, seed):
        sampler = PartitionSampler({"method": method, "seed": seed})
        partitions = sampler.sample_many(5, self.SAMPLES)
        frame = partition_frequencies(partitions, target=5)
        report = uniformity_report(frame)

        self.assertEqual(len(frame), 7)
        self.assertEqual(report["outside_support"], 0)
        for count in frame["count"]:
            self.assertLess(abs(count - self.SAMPLES / 7), 250)
        self.assertLess(report["chi_square"], 40.0)

    def test_pdc_is_uniform_for_five(self):
        self._check_uniform("pdc", 11)

    def test_rejection_is_uniform_for_five(self):
        self._check_uniform("rejection", 12)


class RestrictedUniformityTests(unittest.TestCase):
    def _check(self, sampler, target, policy, seed, samples=8000):
        partitions = _draw(sampler, target, policy, samples, seed)
        frame = partition_frequencies(partitions, target=target, policy=policy)
        report = uniformity_report(frame)
        expected_rows = count_partitions(target, policy)

        self.assertEqual(report["partitions"], expected_rows)
        self.assertEqual(report["outside_support"], 0)
        self.assertEqual(int(frame["count"].sum()), samples)
        # 99.9% quantile of chi-square with <= 6 degrees of freedom is ~22.5.
        self.assertLess(report["chi_square"], 30.0)

    def test_even_parts(self):
        self._check(sample_exact_by_pdc, 8, Even(), 21)
        self._check(sample_exact_by_rejection, 8, Even(), 22)

    def test_odd_parts(self):
        self._check(sample_exact_by_pdc, 7, Odd(), 23)
        self._check(sample_exact_by_rejection, 7, Odd(), 24)

    def test_residue_parts_with_smallest_above_one(self):
        # 24 = 19+5 = 12+12
        self._check(sample_exact_by_pdc, 24, Residue(5, 7), 25, samples=4000)


class MethodAgreementTests(unittest.TestCase):
    def test_pdc_and_rejection_frequency_tables_agree(self):
        samples = 6000
        pdc = partition_frequencies(
            _draw(sample_exact_by_pdc, 6, None, samples, 31), target=6
        )
        rejection = partition_frequencies(
            _draw(sample_exact_by_rejection, 6, None, samples, 32), target=6
        )
        self.assertEqual(list(pdc["partition"]), list(rejection["partition"]))
        gap = (pdc["frequency"] - rejection["frequency"]).abs().max()
        self.assertLess(gap, 0.03)


if __name__ == "__main__":
    unittest.main()
