import tempfile
import unittest
from pathlib import Path

from partgen.schema.config import (
    check_feasibility,
    load_config,
    resolve_policy,
    validate_config,
)
from partgen.schema.policies import Even, MaxPart, MinPart, Residue, Unrestricted


class LoadConfigTests(unittest.TestCase):
    def test_none_and_mapping(self):
        self.assertEqual(load_config(None), {})
        self.assertEqual(load_config({"seed": 3}), {"seed": 3})

    def test_yaml_text(self):
        config = load_config("policy: even\nmethod: rejection\nseed: 7\n")
        self.assertEqual(config, {"policy": "even", "method": "rejection", "seed": 7})

    def test_yaml_file_from_path_and_string(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "sampler.yaml"
            path.write_text("policy:\n  type: residue\n  j: 5\n  m: 7\n", encoding="utf-8")
            from_path = load_config(path)
            from_string = load_config(str(path))
        self.assertEqual(from_path, from_string)
        self.assertEqual(from_path["policy"], {"type": "residue", "j": 5, "m": 7})

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            load_config("   ")
        with self.assertRaises(ValueError):
            load_config("- just\n- a list\n")
        with self.assertRaises(ValueError):
            load_config("policy: [unclosed")
        with self.assertRaises(TypeError):
            load_config(42)


class ValidateConfigTests(unittest.TestCase):
    def test_clean_config_has_no_warnings(self):
        config = {
            "policy": "residue",
            "policy_params": {"j": 5, "m": 7},
            "method": "pdc",
            "seed": 1,
            "tilt": 0.9,
            "tilt_method": "bisection",
            "max_rounds": 100,
            "strict_tilt": True,
            "check_feasibility": False,
            "log_level": "info",
            "log_dir": "logs",
        }
        self.assertEqual(validate_config(config), [])

    def test_reports_each_problem(self):
        warnings = validate_config(
            {
                "colour": "blue",
                "method": "gibbs",
                "tilt_method": "newton",
                "log_level": "debug",
                "log_dir": "",
                "seed": "abc",
                "max_rounds": 0,
                "strict_tilt": "yes",
                "policy": "primes",
            }
        )
        text = "\n".join(warnings)
        for fragment in (
            "unknown config key 'colour'",
            "method must be one of",
            "tilt_method must be one of",
            "log_level must be",
            "log_dir must be",
            "seed must be an integer",
            "max_rounds must be >= 1",
            "strict_tilt must be a boolean",
            "policy: Unknown policy",
        ):
            self.assertIn(fragment, text)

    def test_tilt_range(self):
        self.assertIn(
            "tilt >= 1 is ignored; the solver is used instead",
            validate_config({"tilt": 1.5}),
        )
        self.assertEqual(validate_config({"tilt": -0.1}), ["tilt must lie in (0, 1)"])
        self.assertEqual(validate_config({"tilt": "warm"}), ["tilt must be numeric"])

    def test_policy_params_must_be_mapping(self):
        self.assertEqual(
            validate_config({"policy": "even", "policy_params": [1, 2]}),
            ["policy_params must be a mapping"],
        )


class ResolvePolicyTests(unittest.TestCase):
    def test_defaults_and_names(self):
        self.assertEqual(resolve_policy(None), Unrestricted())
        self.assertEqual(resolve_policy("even"), Even())

    def test_params_merge_into_named_and_mapping_specs(self):
        self.assertEqual(resolve_policy("residue", {"j": 5, "m": 7}), Residue(5, 7))
        self.assertEqual(resolve_policy({"type": "min_part"}, {"k": 4}), MinPart(4))
        self.assertEqual(resolve_policy("max-part", {"k": 3}), MaxPart(3))

    def test_params_need_a_named_policy(self):
        with self.assertRaises(ValueError):
            resolve_policy(Even(), {"k": 2})
        # Default policy takes no parameters.
        with self.assertRaises(ValueError):
            resolve_policy(None, {"k": 3})


class FeasibilityTests(unittest.TestCase):
    def test_zero_target_is_always_feasible(self):
        self.assertEqual(check_feasibility(0, MaxPart(0)), ([], []))

    def test_invalid_targets(self):
        _, errors = check_feasibility(-3)
        self.assertEqual(errors, ["target must be >= 0"])
        _, errors = check_feasibility("many")
        self.assertTrue(errors[0].startswith("target must be an integer"))

    def test_structural_errors(self):
        _, errors = check_feasibility(5, MaxPart(0))
        self.assertIn("admits no part sizes", errors[0])

        _, errors = check_feasibility(3, MinPart(4))
        self.assertEqual(errors, ["smallest allowed part 4 exceeds target 3"])

        _, errors = check_feasibility(7, Even())
        self.assertIn("multiple of 2", errors[0])

    def test_warning_when_smallest_does_not_divide(self):
        warnings, errors = check_feasibility(24, Residue(5, 7))
        self.assertEqual(errors, [])
        self.assertEqual(len(warnings), 1)
        self.assertIn("not a multiple of the smallest part 5", warnings[0])

    def test_clean_case(self):
        self.assertEqual(check_feasibility(10, Even()), ([], []))
        self.assertEqual(check_feasibility(100), ([], []))


if __name__ == "__main__":
    unittest.main()
