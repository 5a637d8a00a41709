import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize import (  # noqa: E402
    count_spacing_issues,
    first_word,
    normalize_cv_text,
    word_count,
)
from app.services.cv_service import analyze, analyze_cv_payload  # noqa: E402


class TextNormalizerTests(unittest.TestCase):
    def test_normalizes_line_endings_spaces_and_blank_runs(self):
        raw = "Jane Doe\r\n\r\n\r\n\r\nExperience\t\t  Lead\rSkills  "
        self.assertEqual(normalize_cv_text(raw), "Jane Doe\n\nExperience Lead\nSkills")

    def test_none_and_blank_input_become_empty(self):
        self.assertEqual(normalize_cv_text(None), "")
        self.assertEqual(normalize_cv_text(" \n\t "), "")

    def test_non_breaking_space_becomes_space(self):
        self.assertEqual(normalize_cv_text("Jane\u00a0Doe"), "Jane Doe")

    def test_lone_surrogate_is_replaced(self):
        self.assertEqual(normalize_cv_text("Jane\ud800Doe"), "Jane?Doe")
        self.assertEqual(normalize_cv_text("Experience\n- Built \udfff dashboards"), "Experience\n- Built ? dashboards")

    def test_lone_surrogate_does_not_break_analysis(self):
        report = analyze("Experience\n- Built dashboards\ud800 for 2M users.")
        self.assertTrue(all("\ud800" not in entry.snippet for issue in report.issues for entry in issue.evidence))
        report.model_dump_json()

        response = analyze_cv_payload("Jane Doe\ud83d\nExperience\n- Built dashboards for 2M users.")
        self.assertTrue(response.text_preview.startswith("Jane Doe?"))

    def test_line_helpers(self):
        self.assertEqual(word_count("Built two dashboards"), 3)
        self.assertEqual(word_count(None), 0)
        self.assertEqual(first_word("- Built dashboards"), "built")
        self.assertEqual(first_word("2. Led, the team"), "led")
        self.assertEqual(first_word(""), "")

    def test_spacing_issues_are_counted_on_raw_text(self):
        self.assertEqual(count_spacing_issues("a  b\tc   d"), 3)
        self.assertEqual(count_spacing_issues(normalize_cv_text("a  b\tc   d")), 0)


if __name__ == "__main__":
    unittest.main()
