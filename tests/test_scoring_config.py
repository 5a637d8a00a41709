import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import scoring  # noqa: E402
from app.core.config.scoring import (  # noqa: E402
    clear_scoring_config_cache,
    get_scoring_config,
    get_scoring_float_map,
    get_scoring_value,
)


class ScoringConfigTests(unittest.TestCase):
    def tearDown(self):
        clear_scoring_config_cache()

    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("categories.max_scores.ats"), 25)
        self.assertEqual(get_scoring_value("keywords.stuffing.density_threshold"), 0.022)

    def test_missing_path_returns_default(self):
        self.assertIsNone(get_scoring_value("categories.max_scores.unknown"))
        self.assertEqual(get_scoring_value("categories.max_scores.ats.nested", "fallback"), "fallback")
        self.assertEqual(get_scoring_value("", 7), 7)

    def test_float_map_merges_known_keys(self):
        merged = get_scoring_float_map("penalties.extraction_weights", {"high": 1.0, "medium": 0.5, "low": 0.1})
        self.assertEqual(merged, {"high": 1.0, "medium": 0.7, "low": 0.4})
        self.assertEqual(get_scoring_float_map("does.not.exist", {"a": 1.0}), {"a": 1.0})

    def test_float_map_ignores_unknown_and_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "scoring.yaml")
            with open(path, "w", encoding="utf-8") as handle:
                handle.write("weights:\n  high: fast\n  medium: 0.6\n  extra: 2\n")
            with patch.object(scoring, "_scoring_config_path", return_value=Path(path)):
                clear_scoring_config_cache()
                merged = get_scoring_float_map("weights", {"high": 1.0, "medium": 0.7})
        self.assertEqual(merged, {"high": 1.0, "medium": 0.6})

    def test_missing_file_raises(self):
        with patch.object(scoring, "_scoring_config_path", return_value=Path("/nonexistent/scoring.yaml")):
            clear_scoring_config_cache()
            with self.assertRaises(RuntimeError):
                get_scoring_config()

    def test_non_mapping_yaml_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "scoring.yaml")
            with open(path, "w", encoding="utf-8") as handle:
                handle.write("- just\n- a list\n")
            with patch.object(scoring, "_scoring_config_path", return_value=Path(path)):
                clear_scoring_config_cache()
                with self.assertRaises(RuntimeError):
                    get_scoring_config()


if __name__ == "__main__":
    unittest.main()
