"""Render a TextAnalysis into the display string returned to clients."""

from app.schemas.analysis import TextAnalysis

FACT_SLOTS = 2


def format_analysis(analysis: TextAnalysis) -> str:
    """Format title, key facts and summary as one multi-section string.

    Exactly two fact lines are always emitted. A missing fact renders as an
    empty string after its number; facts beyond the second are dropped.

    Args:
        analysis: Result of the text analysis.

    Returns:
        The formatted output, without a trailing newline.
    """
    facts = list(analysis.facts[:FACT_SLOTS])
    facts += [""] * (FACT_SLOTS - len(facts))

    return (
        f"{analysis.title}\n\n"
        "Key Facts:\n"
        f"1. {facts[0]}\n"
        f"2. {facts[1]}\n\n"
        "Summary:\n"
        f"{analysis.summary}"
    )
