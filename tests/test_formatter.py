"""Tests for the analysis formatter."""

from app.schemas.analysis import TextAnalysis
from app.services.formatter import format_analysis


def test_formats_title_facts_and_summary() -> None:
    analysis = TextAnalysis(title="T", facts=["F1", "F2"], summary="S")

    assert format_analysis(analysis) == "T\n\nKey Facts:\n1. F1\n2. F2\n\nSummary:\nS"


def test_single_fact_leaves_second_slot_empty() -> None:
    analysis = TextAnalysis(title="T", facts=["only one"], summary="S")

    assert format_analysis(analysis) == "T\n\nKey Facts:\n1. only one\n2. \n\nSummary:\nS"


def test_no_facts_leaves_both_slots_empty() -> None:
    analysis = TextAnalysis(title="T", facts=[], summary="S")

    lines = format_analysis(analysis).split("\n")
    assert lines[3] == "1. "
    assert lines[4] == "2. "


def test_extra_facts_are_dropped() -> None:
    analysis = TextAnalysis(title="T", facts=["F1", "F2", "F3"], summary="S")

    output = format_analysis(analysis)
    assert "F3" not in output
    assert output.count("\n") == 7


def test_empty_summary_keeps_section_header() -> None:
    analysis = TextAnalysis(title="Untitled", facts=["a", "b"], summary="")

    assert format_analysis(analysis).endswith("Summary:\n")
