"""Tests for command/delay length conformity."""

import pytest

from pyJsonGroupDeck.conformity import (
    DEFAULT_DELAY_MS,
    check_length_conformity,
    enforce_length_conformity,
)


class TestCheckLengthConformity:

    @pytest.mark.parametrize("items", [[], ["a"]])
    def test_short_lists_always_conform(self, items):
        assert check_length_conformity(items, []) is True
        assert check_length_conformity(items, [1, 2, 3]) is True

    def test_exact_length_conforms(self):
        assert check_length_conformity(["a", "b", "c"], [10, 20]) is True

    def test_too_short_does_not_conform(self):
        assert check_length_conformity(["a", "b", "c"], [10]) is False

    def test_too_long_does_not_conform(self):
        assert check_length_conformity(["a", "b"], [10, 20]) is False


class TestEnforceLengthConformity:

    def test_pads_missing_delays_with_default(self):
        delays = [100]
        enforce_length_conformity(["a", "b", "c", "d"], delays, 500)
        assert delays == [100, 500, 500]

    def test_empty_delays_for_two_items(self):
        delays = []
        enforce_length_conformity(["a.sh", "b.sh"], delays, 500)
        assert delays == [500]

    def test_default_delay_constant(self):
        delays = []
        enforce_length_conformity(["a", "b"], delays)
        assert delays == [DEFAULT_DELAY_MS]
        assert DEFAULT_DELAY_MS == 500

    def test_never_truncates(self):
        delays = [1, 2, 3, 4]
        enforce_length_conformity(["a", "b"], delays, 500)
        assert delays == [1, 2, 3, 4]

    @pytest.mark.parametrize("items", [[], ["only"]])
    def test_single_item_is_noop(self, items):
        delays = [7, 8]
        enforce_length_conformity(items, delays, 500)
        assert delays == [7, 8]

    def test_conforming_list_unchanged(self):
        delays = [10, 20]
        enforce_length_conformity(["a", "b", "c"], delays, 500)
        assert delays == [10, 20]

    def test_mutates_in_place(self):
        delays = []
        same = delays
        enforce_length_conformity(["a", "b", "c"], delays, 250)
        assert same is delays
        assert same == [250, 250]

    def test_shared_delay_list_longest_wins(self):
        delays = []
        enforce_length_conformity(["s1", "s2"], delays, 500)
        enforce_length_conformity(["c1", "c2", "c3", "c4"], delays, 500)
        enforce_length_conformity(["o1"], delays, 500)
        assert delays == [500, 500, 500]

    @pytest.mark.parametrize("n", range(2, 7))
    @pytest.mark.parametrize("m", range(0, 7))
    def test_length_property(self, n, m):
        items = list(range(n))
        original = [float(i) for i in range(m)]
        delays = list(original)
        enforce_length_conformity(items, delays, 500)
        assert len(delays) >= n - 1
        if m < n - 1:
            assert len(delays) == n - 1
            assert delays[:m] == original
            assert all(d == 500 for d in delays[m:])
        else:
            assert delays == original
