"""Tests for the n-of-13 character tables and the bar table."""

import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

import imb_tables
from imb_errors import TableConsistencyError
from imb_tables import BARS, init_n_of_13, reverse_int13, tab2, tab5


def popcount(v):
    return bin(int(v)).count('1')


class TestReverse:
    """Tests for 13-bit reversal."""

    @pytest.mark.parametrize("value,expected", [
        (0, 0),
        (1, 0x1000),
        (0x1000, 1),
        (0b11, 0b1100000000000),
        (0x1fff, 0x1fff),
        (0x0040, 0x0040),          # middle bit maps onto itself
    ])
    def test_reverse_int13(self, value, expected):
        assert reverse_int13(value) == expected

    def test_reverse_is_involution(self):
        for v in range(0, 8192, 37):
            assert reverse_int13(reverse_int13(v)) == v


class TestNof13Tables:
    """Tests for the 5-of-13 and 2-of-13 tables."""

    @pytest.mark.parametrize("table,n,length", [
        (tab5, 5, 1287),
        (tab2, 2, 78),
    ])
    def test_size_and_popcount(self, table, n, length):
        """Every entry has exactly n bits set, and every such value appears once."""
        t = table()
        assert len(t) == length
        assert all(popcount(v) == n for v in t)
        assert len(set(int(v) for v in t)) == length
        assert all(0 <= int(v) < 8192 for v in t)

    @pytest.mark.parametrize("table,palindromes", [
        (tab5, 15),     # middle bit set, 2 of the 6 mirror pairs
        (tab2, 6),      # 1 of the 6 mirror pairs
    ])
    def test_symmetric_placement(self, table, palindromes):
        """Pairs fill from the bottom, palindromes from the top."""
        t = [int(v) for v in table()]
        split = len(t) - palindromes
        for i in range(0, split, 2):
            assert t[i] < t[i + 1]
            assert reverse_int13(t[i]) == t[i + 1]
        for v in t[split:]:
            assert reverse_int13(v) == v

    def test_palindromes_descend(self):
        """Palindromes are placed from the top cursor downwards."""
        t = [int(v) for v in tab2()[72:]]
        assert t == sorted(t, reverse=True)

    def test_known_entries(self):
        """Entries used by the published example."""
        assert int(tab2()[7]) == 0x1200
        assert int(tab5()[0]) == 0x001f
        assert int(tab5()[1]) == 0x1f00

    def test_tables_are_read_only(self):
        with pytest.raises(ValueError):
            tab5()[0] = 0

    def test_tables_are_cached(self):
        assert tab5() is tab5()
        assert tab2() is tab2()

    def test_table_dtype(self):
        assert tab5().dtype == np.uint16

    @pytest.mark.parametrize("n,length", [
        (5, 1286),      # too short: cursors collide mid-scan
        (5, 1300),      # too long: gap left between cursors
        (2, 77),
        (2, 79),
        (3, 78),
    ])
    def test_inconsistent_parameters(self, n, length):
        with pytest.raises(TableConsistencyError) as exc:
            init_n_of_13(n, length)
        assert exc.value.n == n
        assert exc.value.length == length

    def test_single_flight_build(self, monkeypatch):
        """Concurrent first use builds each table exactly once."""
        calls = []
        barrier = threading.Barrier(8)
        real_build = imb_tables.init_n_of_13

        def counting_build(n, length):
            calls.append((n, length))
            return real_build(n, length)

        def first_use():
            barrier.wait()
            return tab5()

        monkeypatch.setattr(imb_tables, "_tables", {})
        monkeypatch.setattr(imb_tables, "init_n_of_13", counting_build)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: first_use(), range(8)))

        assert calls == [(5, 1287)]
        assert all(r is results[0] for r in results)


class TestBarTable:
    """Tests for the bar-to-character table."""

    def test_sixty_five_bars(self):
        assert len(BARS) == 65

    def test_first_and_last_entries(self):
        assert BARS[0] == (7, 2, 4, 3)        # H 2 E 3
        assert BARS[-1] == (3, 10, 8, 2)      # D 10 I 2

    def test_every_character_bit_used_once(self):
        """130 (character, bit) slots: 10 characters x 13 bits, each used once."""
        slots = []
        for desc_char, desc_bit, asc_char, asc_bit in BARS:
            slots.append((desc_char, desc_bit))
            slots.append((asc_char, asc_bit))
        assert len(set(slots)) == 130
        assert set(slots) == {(c, b) for c in range(10) for b in range(13)}
