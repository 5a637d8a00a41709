import math
import re
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.cv_context import MergedBulletLine  # noqa: E402
from app.linter.evidence import (  # noqa: E402
    add_evidence,
    make_snippet,
    mask_email,
    mask_phone,
    normalize_evidence,
    normalize_evidence_entry,
)
from app.schemas.cv import Evidence, Issue  # noqa: E402
from app.services.cv_service import analyze  # noqa: E402
from cv_samples import SHORT_CV, STRONG_CV  # noqa: E402

UNMASKED_DIGIT_RUN_RE = re.compile(r"\d{7,}")


def _issue(**overrides) -> Issue:
    fields = {
        "id": "missing_phone",
        "severity": "warn",
        "category": "ats",
        "score_delta": -3,
        "title": "Missing phone number",
        "message": "A phone number was not detected.",
        "explanation": "A phone number was not detected.",
        "why": "Some recruiters still prefer a direct call option.",
        "fix": "Include an international-format phone number in the header.",
    }
    fields.update(overrides)
    return Issue(**fields)


class SnippetTests(unittest.TestCase):
    def test_long_snippet_is_truncated_with_ellipsis(self):
        snippet = make_snippet("word " * 60)
        self.assertLessEqual(len(snippet), 140)
        self.assertTrue(snippet.endswith("..."))

    def test_whitespace_is_collapsed(self):
        self.assertEqual(make_snippet("  Built \n dashboards\tfast "), "Built dashboards fast")
        self.assertEqual(make_snippet(None), "")

    def test_email_local_part_is_masked(self):
        self.assertEqual(mask_email("Contact john.smith@example.com today"), "Contact j***h@example.com today")
        self.assertEqual(mask_email("jo@example.com"), "jo@example.com")

    def test_phone_keeps_only_last_three_digits(self):
        self.assertEqual(mask_phone("+1 555 123 4567"), "+* *** *** *567")
        self.assertEqual(mask_phone("call 5551234567 now"), "call *******567 now")
        self.assertEqual(mask_phone("Built 3 apps"), "Built 3 apps")


class EvidenceNormalizationTests(unittest.TestCase):
    def test_mapping_entry_with_line_number(self):
        evidence = normalize_evidence_entry(
            {"line_number": 4, "text": "jane.doe@example.com | +49 151 2345 6789", "reason": "contact line"}
        )
        self.assertIsNotNone(evidence)
        self.assertEqual(evidence.line_start, 4)
        self.assertEqual(evidence.line_end, 4)
        self.assertNotIn("jane.doe", evidence.snippet)
        self.assertIsNone(UNMASKED_DIGIT_RUN_RE.search(evidence.snippet.replace(" ", "")))
        self.assertTrue(evidence.snippet.endswith("789"))

    def test_dataclass_entry_maps_line_fields(self):
        evidence = normalize_evidence_entry(
            MergedBulletLine(line_number=7, text="• Built a • Led b", reason="multiple bullet tokens on one line")
        )
        self.assertEqual(evidence.line_start, 7)
        self.assertEqual(evidence.snippet, "• Built a • Led b")
        self.assertIsNone(evidence.confidence)

    def test_confidence_is_clamped_and_rejects_non_finite(self):
        self.assertEqual(normalize_evidence_entry({"snippet": "x", "confidence": 1.7}).confidence, 1.0)
        self.assertIsNone(normalize_evidence_entry({"snippet": "x", "confidence": math.nan}).confidence)
        self.assertIsNone(normalize_evidence_entry({"snippet": "x", "confidence": True}).confidence)

    def test_empty_and_unknown_entries_are_dropped(self):
        self.assertIsNone(normalize_evidence_entry(""))
        self.assertIsNone(normalize_evidence_entry({"snippet": "   "}))
        self.assertIsNone(normalize_evidence_entry(42))

    def test_unknown_source_is_discarded(self):
        self.assertIsNone(normalize_evidence_entry({"snippet": "x", "source": "scanner"}).source)
        self.assertEqual(normalize_evidence_entry({"snippet": "x", "source": "pdf"}).source, "pdf")

    def test_at_most_three_entries(self):
        entries = [{"snippet": f"line {index}"} for index in range(6)]
        normalized = normalize_evidence(entries)
        self.assertEqual([item.snippet for item in normalized], ["line 0", "line 1", "line 2"])
        self.assertEqual(normalize_evidence("single"), [Evidence(snippet="single")])

    def test_add_evidence_returns_new_issue(self):
        issue = _issue()
        updated = add_evidence(issue, ["Jane Doe", "Senior Frontend Engineer"])
        self.assertEqual(issue.evidence, [])
        self.assertEqual(len(updated.evidence), 2)
        self.assertIs(add_evidence(issue, []), issue)


class ReportEvidencePrivacyTests(unittest.TestCase):
    def test_report_snippets_are_bounded_and_masked(self):
        for text in (STRONG_CV, SHORT_CV):
            report = analyze(text)
            for issue in report.issues:
                self.assertLessEqual(len(issue.evidence), 3)
                for evidence in issue.evidence:
                    self.assertLessEqual(len(evidence.snippet), 140)
                    self.assertNotIn("jane.doe@", evidence.snippet)
                    self.assertIsNone(UNMASKED_DIGIT_RUN_RE.search(re.sub(r"[\s().-]", "", evidence.snippet)))


if __name__ == "__main__":
    unittest.main()
