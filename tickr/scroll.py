"""Bounded vertical offset into the ticker list."""


def max_offset(ticker_count: int, visible_rows: int) -> int:
    return max(0, ticker_count - visible_rows)


def clamp(offset: int, ticker_count: int, visible_rows: int) -> int:
    return max(0, min(offset, max_offset(ticker_count, visible_rows)))


def increase(offset: int, step: int, ticker_count: int, visible_rows: int) -> int:
    """Scroll down by ``step`` lines, stopping once the last ticker is visible."""
    return clamp(offset + step, ticker_count, visible_rows)


def decrease(offset: int, step: int, ticker_count: int, visible_rows: int) -> int:
    """Scroll up by ``step`` lines, stopping at the top.

    The list may have shrunk since the last scroll, so the result is also
    pulled back under the current bound.
    """
    return clamp(offset - step, ticker_count, visible_rows)
