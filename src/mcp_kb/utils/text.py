"""Text helpers for keyword search."""

ELLIPSIS = "..."


def extract_snippet(
    content: str,
    offset: int,
    match_length: int,
    before: int = 100,
    after: int = 200,
) -> str:
    """Slice ``content`` around a match and wrap it in ellipsis markers.

    The slice spans [offset - before, offset + match_length + after),
    clamped to the content bounds.
    """
    start = max(0, offset - before)
    end = min(len(content), offset + match_length + after)
    return f"{ELLIPSIS}{content[start:end]}{ELLIPSIS}"


def relevance_score(occurrences: int, saturation: int = 10) -> float:
    """Term-frequency score normalised to [0, 1]."""
    return min(occurrences / saturation, 1.0)
