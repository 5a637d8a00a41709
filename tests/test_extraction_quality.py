import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.extraction_quality import analyze_extraction_quality, extraction_level  # noqa: E402


CLEAN_LINES = [
    "Senior Frontend Engineer, Acme Corp",
    "Jan 2021 - Present",
    "- Built reporting dashboards for finance users.",
    "- Improved onboarding flow for new customers.",
]


class ExtractionQualityTests(unittest.TestCase):
    def test_clean_lines_score_high(self):
        quality = analyze_extraction_quality(CLEAN_LINES)
        self.assertEqual(quality.score, 1.0)
        self.assertEqual(quality.level, "high")
        self.assertEqual(quality.notes, [])
        self.assertEqual(quality.signals.midline_bullet_tokens, 0)

    def test_level_thresholds(self):
        self.assertEqual(extraction_level(0.75), "high")
        self.assertEqual(extraction_level(0.749), "medium")
        self.assertEqual(extraction_level(0.5), "medium")
        self.assertEqual(extraction_level(0.49), "low")

    def test_hyphen_wrap_is_penalized(self):
        quality = analyze_extraction_quality(
            ["Improved rendering perfor-", "mance across the checkout flow"]
        )
        self.assertEqual(quality.signals.suspicious_hyphen_wraps, 1)
        self.assertEqual(quality.score, 0.97)
        self.assertIn("Detected suspicious hyphen line wraps from PDF extraction.", quality.notes)

    def test_merged_lines_and_midline_tokens_lower_the_score(self):
        line = "• Built dashboards for users. • Improved load time by 20%. • Shipped 3 features."
        quality = analyze_extraction_quality([line], merged_line_numbers=[1, 1])
        self.assertEqual(quality.signals.merged_bullet_lines, 1)
        self.assertEqual(quality.signals.midline_bullet_tokens, 2)
        self.assertEqual(quality.score, 0.68)
        self.assertEqual(quality.level, "medium")
        self.assertEqual(len(quality.notes), 2)

    def test_degraded_structure_never_scores_higher(self):
        clean = analyze_extraction_quality(CLEAN_LINES)
        merged_line = " • ".join(line.lstrip("- ") for line in CLEAN_LINES[2:]) + " " + "detail " * 30
        degraded = analyze_extraction_quality(CLEAN_LINES[:2] + [merged_line], merged_line_numbers=[3])
        self.assertLess(degraded.score, clean.score)
        self.assertGreaterEqual(degraded.signals.very_long_lines, 1)

    def test_dash_bullets_merged_onto_one_line_lower_the_level(self):
        split = analyze_extraction_quality(
            ["Experience", "- Built dashboards with Angular", "- Reduced latency by 20%", "- Led team of 5 engineers"]
        )
        merged = analyze_extraction_quality(
            ["Experience", "- Built dashboards with Angular - Reduced latency by 20% - Led team of 5 engineers"],
            merged_line_numbers=[2],
        )
        self.assertEqual(split.signals.midline_bullet_tokens, 0)
        self.assertEqual(split.level, "high")
        self.assertEqual(merged.signals.midline_bullet_tokens, 2)
        self.assertEqual(merged.score, 0.59)
        self.assertEqual(merged.level, "medium")

    def test_short_lines_and_empty_input(self):
        quality = analyze_extraction_quality(["Jane", "Doe", "Experience", "Built dashboards for users"])
        self.assertEqual(quality.signals.very_short_lines, 3)
        self.assertIn("Many very short lines suggest extraction noise.", quality.notes)

        empty = analyze_extraction_quality([])
        self.assertEqual(empty.score, 1.0)
        self.assertEqual(empty.signals.avg_line_length, 0.0)


if __name__ == "__main__":
    unittest.main()
