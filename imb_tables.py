# Table generation derived from samrushing/pyimb
# Original: https://github.com/samrushing/pyimb
# License: Simplified BSD

"""
Lookup tables for the Intelligent Mail barcode (USPS-B-3200).

  - the 5-of-13 and 2-of-13 character tables (Tables 19 and 20), generated
    by the symmetric bit-reversal placement of Appendix D
  - the bar-to-character table (Table 22)

The n-of-13 tables are pure functions of fixed parameters. They are built
on first use, once per process, and handed out as read-only numpy arrays.
"""

import logging
import threading

import numpy as np

from imb_errors import TableConsistencyError

logger = logging.getLogger("imb.tables")

CHARACTER_BITS = 13
CHARACTER_MASK = (1 << CHARACTER_BITS) - 1     # 0x1fff

TAB5_N, TAB5_LENGTH = 5, 1287                  # C(13, 5)
TAB2_N, TAB2_LENGTH = 2, 78                    # C(13, 2)


def reverse_int13(value):
    """Mirror the low 13 bits: bit i of value becomes bit 12 - i."""
    reverse = 0
    for _ in range(CHARACTER_BITS):
        reverse <<= 1
        reverse |= value & 1
        value >>= 1
    return reverse


def init_n_of_13(n, table_length):
    """
    Build the table of 13-bit values with exactly n bits set.

    Each value is placed next to its bit-reversed partner, filling from the
    bottom; palindromic values fill from the top. The two cursors must meet
    exactly, otherwise (n, table_length) is not a valid pair.
    """
    table = np.zeros(table_length, dtype=np.uint16)
    index_low = 0
    index_hi = table_length - 1
    for i in range(CHARACTER_MASK + 1):
        if bin(i).count('1') != n:
            continue
        reverse = reverse_int13(i)
        if reverse < i:
            continue
        # a palindrome takes one free slot, a pair takes two
        if index_hi - index_low + 1 < (1 if i == reverse else 2):
            raise TableConsistencyError(n, table_length, index_low, index_hi)
        if i == reverse:
            table[index_hi] = i
            index_hi -= 1
        else:
            table[index_low] = i
            index_low += 1
            table[index_low] = reverse
            index_low += 1
    if index_low != index_hi + 1:
        raise TableConsistencyError(n, table_length, index_low, index_hi)
    table.flags.writeable = False
    return table


_tables = {}
_tables_lock = threading.Lock()


def _cached_table(n, table_length):
    key = (n, table_length)
    table = _tables.get(key)
    if table is not None:
        return table
    with _tables_lock:
        table = _tables.get(key)
        if table is None:
            table = init_n_of_13(n, table_length)
            _tables[key] = table
            logger.info("built %d-of-13 table (%d entries)", n, table_length)
    return table


def tab5():
    """The 5-of-13 table, codewords 0..1286."""
    return _cached_table(TAB5_N, TAB5_LENGTH)


def tab2():
    """The 2-of-13 table, codewords 1287..1364."""
    return _cached_table(TAB2_N, TAB2_LENGTH)


# Bar n is "i j k l": descender present if bit j of character i is set,
# ascender present if bit l of character k is set.
BAR_TABLE = [
    'H 2 E 3', 'B 10 A 0', 'J 12 C 8', 'F 5 G 11', 'I 9 D 1',
    'A 1 F 12', 'C 5 B 8', 'E 4 J 11', 'G 3 I 10', 'D 9 H 6',
    'F 11 B 4', 'I 5 C 12', 'J 10 A 2', 'H 1 G 7', 'D 6 E 9',
    'A 3 I 6', 'G 4 C 7', 'B 1 J 9', 'H 10 F 2', 'E 0 D 8',
    'G 2 A 4', 'I 11 B 0', 'J 8 D 12', 'C 6 H 7', 'F 1 E 10',
    'B 12 G 9', 'H 3 I 0', 'F 8 J 7', 'E 6 C 10', 'D 4 A 5',
    'I 4 F 7', 'H 11 B 9', 'G 0 J 6', 'A 6 E 8', 'C 1 D 2',
    'F 9 I 12', 'E 11 G 1', 'J 5 H 4', 'D 3 B 2', 'A 7 C 0',
    'B 3 E 1', 'G 10 D 5', 'I 7 J 4', 'C 11 F 6', 'A 8 H 12',
    'E 2 I 1', 'F 10 D 0', 'J 3 A 9', 'G 5 C 4', 'H 8 B 7',
    'F 0 E 5', 'C 3 A 10', 'G 12 J 2', 'D 11 B 6', 'I 8 H 9',
    'F 4 A 11', 'B 5 C 2', 'J 1 E 12', 'I 3 G 6', 'H 0 D 7',
    'E 7 H 5', 'A 12 B 11', 'C 9 J 0', 'G 8 F 3', 'D 10 I 2',
]


def process_bar_table(entries):
    """Turn 'H 2 E 3' entries into (desc_char, desc_bit, asc_char, asc_bit)."""
    bars = []
    for entry in entries:
        c0, d, c1, a = entry.split()
        bars.append((ord(c0) - 65, int(d), ord(c1) - 65, int(a)))
    return tuple(bars)


BARS = process_bar_table(BAR_TABLE)
