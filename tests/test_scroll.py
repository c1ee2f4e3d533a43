import random

import pytest

from tickr import scroll


@pytest.mark.parametrize("ticker_count", [0, 3, 10, 11, 57])
@pytest.mark.parametrize("visible_rows", [1, 10, 40])
def test_offset_stays_in_bounds(ticker_count, visible_rows):
    rng = random.Random(ticker_count * 100 + visible_rows)
    upper = max(0, ticker_count - visible_rows)
    offset = 0
    for _ in range(200):
        step = rng.randint(0, 25)
        if rng.random() < 0.5:
            offset = scroll.increase(offset, step, ticker_count, visible_rows)
        else:
            offset = scroll.decrease(offset, step, ticker_count, visible_rows)
        assert 0 <= offset <= upper


def test_fully_visible_list_never_scrolls():
    assert scroll.increase(0, 10, 3, 10) == 0


def test_clamped_at_both_ends():
    assert scroll.increase(10, 10, 25, 10) == 15
    assert scroll.increase(15, 10, 25, 10) == 15
    assert scroll.decrease(5, 10, 25, 10) == 0
    assert scroll.decrease(0, 10, 25, 10) == 0


def test_list_shrinking_pulls_offset_back():
    assert scroll.increase(20, 0, 12, 10) == 2


def test_scrolling_up_after_list_shrank_lands_in_bounds():
    # Offset left at 20 by a 40-ticker list that now holds 3
    assert scroll.decrease(20, 10, 3, 10) == 0
    assert scroll.decrease(20, 10, 25, 10) == 10
    assert scroll.clamp(20, 25, 10) == 15
    assert scroll.clamp(7, 3, 10) == 0
