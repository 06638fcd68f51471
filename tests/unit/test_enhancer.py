"""Unit tests for OutputEnhancer."""

from dataclasses import replace

import pytest

from codeguard.models import AnalysisReport, Bottleneck, Hotspot
from codeguard.quality import OutputEnhancer
from codeguard.quality.enhancer import AFTER_HEADER, BEFORE_HEADER


def hotspots(count: int) -> tuple[Hotspot, ...]:
    return tuple(
        Hotspot(file=f"src/a.ts:{i}", issue=f"Issue number {i}", impact="1s") for i in range(count)
    )


class TestEnhanceSummary:
    """Tests for the synthesized summary lead."""

    @pytest.mark.parametrize(
        ("count", "word"),
        [(0, "minor"), (1, "important"), (2, "important"), (3, "critical")],
    )
    def test_severity_word(self, count: int, word: str) -> None:
        """Test the attention word follows the hotspot count."""
        report = AnalysisReport(high_risk_hotspots=hotspots(count))

        text = OutputEnhancer.enhance_summary(report)

        assert f"requiring {word} attention." in text

    def test_lead_restates_counts(self) -> None:
        """Test the lead sentence uses the report's counts."""
        report = AnalysisReport(
            high_risk_hotspots=hotspots(1),
            bottlenecks=(Bottleneck(location="a.ts:1", pattern="N+1", reason="", suggestion=""),),
            summary="Short.",
        )

        text = OutputEnhancer.enhance_summary(report)

        assert text == (
            "Analysis found 1 high-risk hotspots and 1 performance bottlenecks "
            "requiring important attention. Short."
        )


class TestAddBeforeAfter:
    """Tests for BEFORE/AFTER framing."""

    def test_splits_code_in_half(self) -> None:
        """Test the code is split at its midpoint."""
        text = OutputEnhancer.add_before_after("abcdef")

        assert text == f"{BEFORE_HEADER}\nabc\n\n{AFTER_HEADER}\ndef"

    @pytest.mark.parametrize("code", ["// BEFORE\nx = 1", "x = 1 // AFTER"])
    def test_existing_markers_untouched(self, code: str) -> None:
        """Test code that already has markers is returned as is."""
        assert OutputEnhancer.add_before_after(code) == code


class TestEnhance:
    """Tests for OutputEnhancer.enhance."""

    def test_good_report_unchanged(self, good_report: AnalysisReport) -> None:
        """Test a report meeting the surface rules is returned equal."""
        assert OutputEnhancer().enhance(good_report) == good_report

    def test_short_summary_gets_lead(self) -> None:
        """Test summaries below the minimum length are prefixed."""
        report = AnalysisReport(summary="Fine.")

        enhanced = OutputEnhancer().enhance(report)

        assert enhanced.summary.startswith("Analysis found 0 high-risk hotspots")
        assert enhanced.summary.endswith("Fine.")

    def test_code_without_before_is_framed(self) -> None:
        """Test code lacking BEFORE gets both headers."""
        report = AnalysisReport(summary="x" * 80, optimized_code_example="const a = await load()")

        enhanced = OutputEnhancer().enhance(report)

        assert BEFORE_HEADER in enhanced.optimized_code_example
        assert AFTER_HEADER in enhanced.optimized_code_example
        assert enhanced.summary == report.summary

    def test_lowercase_before_counts_as_present(self) -> None:
        """Test a lowercase marker suppresses framing."""
        code = "# before: loop\nfor x in y: pass\n# after: join"
        report = AnalysisReport(summary="x" * 80, optimized_code_example=code)

        assert OutputEnhancer().enhance(report).optimized_code_example == code

    def test_empty_code_left_empty(self) -> None:
        """Test no code is synthesized."""
        report = AnalysisReport(summary="x" * 80)

        assert OutputEnhancer().enhance(report).optimized_code_example == ""

    def test_input_not_mutated(self, good_report: AnalysisReport) -> None:
        """Test enhance returns a new report."""
        report = replace(good_report, summary="Short")

        enhanced = OutputEnhancer().enhance(report)

        assert report.summary == "Short"
        assert enhanced is not report
        assert enhanced.high_risk_hotspots == report.high_risk_hotspots

    def test_enhance_is_idempotent(self) -> None:
        """Test a second pass changes nothing."""
        report = AnalysisReport(summary="Tiny", optimized_code_example="const a = 1")
        enhancer = OutputEnhancer()

        once = enhancer.enhance(report)

        assert enhancer.enhance(once) == once
