import pytest

from landlord.rand import SeededRandom


def test_intn_is_bounded():
    r = SeededRandom(1)
    values = [r.intn(5) for _ in range(1000)]
    assert min(values) == 0
    assert max(values) == 4


def test_intn_rejects_non_positive():
    r = SeededRandom(1)
    with pytest.raises(ValueError):
        r.intn(0)
    with pytest.raises(ValueError):
        r.intn(-3)


def shuffled(r, items):
    items = list(items)

    def swap(i, j):
        items[i], items[j] = items[j], items[i]
    r.shuffle(len(items), swap)
    return items


def test_shuffle_is_a_permutation():
    items = list(range(20))
    result = shuffled(SeededRandom(7), items)
    assert sorted(result) == items
    assert result != items


def test_shuffle_is_reproducible_under_seed():
    items = list("abcdefghij")
    assert shuffled(SeededRandom(42), items) == shuffled(SeededRandom(42), items)


def test_shuffle_of_zero_or_one_element_never_swaps():
    swaps = []
    r = SeededRandom(3)
    r.shuffle(0, lambda i, j: swaps.append((i, j)))
    r.shuffle(1, lambda i, j: swaps.append((i, j)))
    assert swaps == []


def test_shuffle_first_position_is_uniform():
    r = SeededRandom(1234)
    trials = 6000
    counts = {item: 0 for item in "abc"}
    for _ in range(trials):
        counts[shuffled(r, "abc")[0]] += 1
    for count in counts.values():
        assert abs(count - trials / 3) < trials * 0.05
