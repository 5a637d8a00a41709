import sys
import unittest
from dataclasses import FrozenInstanceError
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.cv_context import build_document_context  # noqa: E402
from cv_samples import MERGED_BULLETS_CV, MIXED_DATES_CV, NON_CV_TEXT, STRONG_CV  # noqa: E402


class DocumentContextTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.ctx = build_document_context(STRONG_CV, "angular")

    def test_sections_regions_and_contact(self):
        ctx = self.ctx
        self.assertEqual(ctx.role_id, "senior_frontend_angular")
        self.assertTrue(ctx.sections_present.experience)
        self.assertTrue(ctx.sections_present.skills)
        self.assertTrue(ctx.sections_present.education)
        self.assertTrue(ctx.sections_present.summary)
        self.assertFalse(ctx.sections_present.projects)
        self.assertEqual(ctx.section_count, 4)
        self.assertTrue(ctx.contact.has_email)
        self.assertTrue(ctx.contact.has_phone)
        self.assertTrue(ctx.contact.has_linkedin)
        self.assertFalse(ctx.likely_non_cv)
        self.assertEqual(ctx.cv_signal_score, 9)

        experience_headings = [entry for entry in ctx.line_entries if entry.is_heading and entry.section == "experience"]
        self.assertEqual(len(experience_headings), 1)
        self.assertEqual(experience_headings[0].region, "header")

        by_text = {entry.text: entry for entry in ctx.line_entries}
        self.assertEqual(by_text["Jan 2020 - Present"].region, "experience")
        self.assertEqual(by_text["Angular, TypeScript, RxJS, NgRx, Jest, Cypress, HTML, CSS"].region, "skills")
        self.assertEqual(by_text["Jane Doe"].rank, 1)
        self.assertEqual(by_text["Jane Doe"].line_number, 1)

    def test_bullet_signals(self):
        ctx = self.ctx
        self.assertEqual(ctx.bullet_count, 10)
        self.assertEqual(ctx.experience_bullet_count, 10)
        self.assertEqual(ctx.numeric_bullet_ratio, 1.0)
        self.assertEqual(ctx.weak_action_verb_count, 0)
        self.assertEqual(ctx.responsible_for_count, 0)
        self.assertEqual(ctx.outcome_ratio, 1.0)
        self.assertGreater(ctx.scope_language_count, 0)
        self.assertFalse(ctx.mixed_bullet_markers)
        self.assertFalse(ctx.trailing_punctuation_mixed)
        self.assertFalse(ctx.merged_bullets.suspected)
        self.assertEqual({bullet.marker for bullet in ctx.bullet_lines}, {"-"})
        self.assertEqual(ctx.bullet_lines[0].line, "Led migration of 40 Angular modules to standalone components, reducing bundle size by 30%.")

    def test_date_range_lines_are_not_merged_bullets(self):
        self.assertEqual(self.ctx.extraction_quality.signals.midline_bullet_tokens, 0)
        self.assertEqual(self.ctx.extraction_quality.level, "high")
        self.assertEqual(self.ctx.date_formats.used_formats, ("MMM YYYY",))

    def test_context_is_immutable(self):
        with self.assertRaises(FrozenInstanceError):
            self.ctx.bullet_count = 0  # type: ignore[misc]
        with self.assertRaises(TypeError):
            self.ctx.date_formats.evidence["YYYY"] = ()  # type: ignore[index]


class MergedBulletTests(unittest.TestCase):
    def test_multiple_markers_on_one_line_split_into_bullets(self):
        ctx = build_document_context(MERGED_BULLETS_CV)
        self.assertTrue(ctx.merged_bullets.suspected)
        self.assertEqual(ctx.merged_bullets.count, 1)
        evidence = ctx.merged_bullets.evidence[0]
        self.assertEqual(evidence.line_number, 2)
        self.assertEqual(evidence.reason, "multiple bullet tokens on one line")

        self.assertEqual(ctx.bullet_count, 4)
        self.assertTrue(all(bullet.merged_from_line for bullet in ctx.bullet_lines))
        self.assertEqual(ctx.bullet_lines[1].line, "Improved onboarding flow for new customers.")
        self.assertEqual(ctx.bullet_lines[3].line, "Migrated legacy forms to a new layout.")
        self.assertEqual(ctx.extraction_quality.level, "low")

    def test_dash_markers_merged_onto_one_line(self):
        ctx = build_document_context(
            "Experience\n- Built dashboards with Angular - Reduced latency by 20% - Led team of 5 engineers"
        )
        self.assertTrue(ctx.merged_bullets.suspected)
        self.assertEqual(ctx.merged_bullets.evidence[0].reason, "multiple bullet tokens on one line")
        self.assertEqual(ctx.bullet_count, 3)
        self.assertEqual(
            [bullet.line for bullet in ctx.bullet_lines],
            ["Built dashboards with Angular", "Reduced latency by 20%", "Led team of 5 engineers"],
        )
        self.assertEqual(ctx.extraction_quality.signals.midline_bullet_tokens, 2)

    def test_dash_merged_layout_never_scores_above_split_layout(self):
        split = build_document_context(
            "Experience\n- Built dashboards with Angular\n- Reduced latency by 20%\n- Led team of 5 engineers"
        )
        merged = build_document_context(
            "Experience\n- Built dashboards with Angular - Reduced latency by 20% - Led team of 5 engineers"
        )
        self.assertEqual(split.extraction_quality.level, "high")
        self.assertLess(merged.extraction_quality.score, split.extraction_quality.score)
        self.assertEqual(merged.extraction_quality.level, "medium")

    def test_single_midline_symbol_is_flagged(self):
        ctx = build_document_context("Experience\nBuilt dashboards for users • Improved load time by 20%")
        self.assertTrue(ctx.merged_bullets.suspected)
        self.assertEqual(ctx.merged_bullets.evidence[0].reason, "bullet token found in mid-line")
        self.assertEqual(ctx.bullet_count, 1)
        self.assertEqual(ctx.bullet_lines[0].line, "Improved load time by 20%")


class DateFormatContextTests(unittest.TestCase):
    def test_mixed_formats_are_all_reported(self):
        ctx = build_document_context(MIXED_DATES_CV)
        formats = ctx.date_formats
        self.assertEqual(formats.used_formats, ("MMM YYYY", "MM/YYYY", "YYYY"))
        self.assertEqual(formats.used_count, 3)
        self.assertEqual(formats.suggested_format, "MMM YYYY")
        self.assertEqual(formats.evidence["MM/YYYY"][0].text, "03/2019 - 12/2020")
        self.assertEqual(formats.evidence["YYYY"][0].line_number, 11)
        self.assertEqual(formats.month_year, 1)
        self.assertEqual(formats.slash_date, 1)
        self.assertEqual(formats.year_only, 1)


class AliasDetectionTests(unittest.TestCase):
    def test_skills_label_block_without_heading(self):
        text = (
            "Jane Doe\n"
            "Languages: TypeScript, JavaScript\n"
            "Frameworks: Angular, RxJS\n"
            "Experience\n"
            "- Built dashboards for 2M users."
        )
        ctx = build_document_context(text)
        detection = ctx.section_detection
        self.assertTrue(ctx.sections_present.skills)
        self.assertFalse(detection.explicit_headings.skills)
        self.assertTrue(detection.implicit_by_alias.skills)
        self.assertTrue(detection.heading_suggestion.skills)
        self.assertEqual([line.line_number for line in detection.skills_alias.lines], [2, 3])
        self.assertEqual(ctx.keyword_coverage.found_in_skills_count, 3)

    def test_explicit_skills_heading_suppresses_alias_suggestion(self):
        text = "Skills\nLanguages: TypeScript\nExperience\n- Built dashboards for 2M users."
        ctx = build_document_context(text)
        self.assertTrue(ctx.section_detection.explicit_headings.skills)
        self.assertFalse(ctx.section_detection.heading_suggestion.skills)

    def test_untitled_intro_paragraph_counts_as_summary(self):
        text = (
            "Jane Doe\n"
            "Senior frontend engineer with 8 years of experience in Angular and TypeScript, "
            "focused on performance and accessibility for large web platforms.\n"
            "Experience\n"
            "- Built dashboards for 2M users."
        )
        ctx = build_document_context(text)
        self.assertTrue(ctx.sections_present.summary)
        self.assertFalse(ctx.section_detection.explicit_headings.summary)
        self.assertTrue(ctx.section_detection.heading_suggestion.summary)
        self.assertEqual(ctx.section_detection.summary_alias.alias_type, "intro_paragraph")

    def test_short_intro_is_not_a_summary(self):
        ctx = build_document_context("Jane Doe\nFrontend engineer.\nExperience\n- Built dashboards.")
        self.assertFalse(ctx.sections_present.summary)


class StackContradictionTests(unittest.TestCase):
    def test_conflicting_stacks_within_window(self):
        text = (
            "Experience\n"
            "- Built MERN stack dashboards for internal users.\n"
            "- Migrated the admin portal to Angular 15."
        )
        ctx = build_document_context(text)
        self.assertEqual(len(ctx.stack_contradictions), 1)
        contradiction = ctx.stack_contradictions[0]
        self.assertEqual(contradiction.id, "mern_vs_angular")
        self.assertEqual((contradiction.line_start, contradiction.line_end), (2, 3))
        self.assertEqual(contradiction.reason, "matched MERN + Angular within 2 lines")

    def test_clarified_architecture_is_not_a_contradiction(self):
        text = (
            "Experience\n"
            "- Built MERN tooling with an Angular frontend and Node backend for 3 teams."
        )
        ctx = build_document_context(text)
        self.assertEqual(ctx.stack_contradictions, ())

    def test_stacks_in_different_blocks_are_not_compared(self):
        text = (
            "Experience\n"
            "- Built MERN stack dashboards.\n"
            "Education\n"
            "Experience\n"
            "- Migrated the admin portal to Angular."
        )
        ctx = build_document_context(text)
        self.assertEqual(ctx.stack_contradictions, ())


class HygieneCounterTests(unittest.TestCase):
    def test_duplicate_caps_and_long_lines(self):
        repeated = "Delivered the quarterly roadmap"
        text = "\n".join(
            [
                "SENIOR FRONTEND ENGINEER AT ACME",
                repeated,
                repeated,
                repeated,
                "short",
                "short",
                "x " * 80,
            ]
        )
        ctx = build_document_context(text)
        self.assertEqual(ctx.duplicate_line_count, 2)
        self.assertEqual(ctx.caps_heavy_line_count, 1)
        self.assertEqual(ctx.long_line_count, 1)

    def test_spacing_issues_use_raw_text(self):
        ctx = build_document_context("Jane  Doe\nBuilt\tdashboards   fast")
        self.assertEqual(ctx.spacing_issue_count, 3)

    def test_non_cv_text(self):
        ctx = build_document_context(NON_CV_TEXT)
        self.assertTrue(ctx.likely_non_cv)
        self.assertEqual(ctx.cv_signal_score, 0)
        self.assertEqual(ctx.bullet_count, 0)

    def test_empty_text(self):
        ctx = build_document_context("")
        self.assertEqual(ctx.text_length, 0)
        self.assertEqual(ctx.line_entries, ())
        self.assertTrue(ctx.likely_non_cv)


if __name__ == "__main__":
    unittest.main()
