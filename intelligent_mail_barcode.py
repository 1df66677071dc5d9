#!/usr/bin/env python3
# Encoder derived from samrushing/pyimb
# Original: https://github.com/samrushing/pyimb
# License: Simplified BSD
"""
USPS Intelligent Mail Barcode (IMb) encoder
===========================================
Implements the encode steps of USPS-B-3200:

    1. Fields → 104-bit binary data (routing code, then tracking digits)
    2. 11-bit CRC over the rightmost 102 bits → FCS
    3. Binary data → ten codewords A..J (bases 659, 1365 x 8, 636)
    4. FCS bit 10 and orientation folded into codewords A and J
    5. Codewords → 13-bit characters (5-of-13 / 2-of-13 tables),
       characters negated where the matching FCS bit is set
    6. Characters → 65 bars (T, D, A, F)

Every step is exposed so an encode can be followed one stage at a time.
"""

import logging

from imb_errors import EncodingError, EncodingOverflowError, ValidationError
from imb_record import DIGITS, ROUTING_CODE_LENGTHS, TRACKING_CODE_LENGTH
from imb_tables import BARS, CHARACTER_MASK, TAB5_LENGTH, TAB2_LENGTH, tab2, tab5

logger = logging.getLogger("imb.encoder")

PAYLOAD_BYTES = 13
PAYLOAD_MASK = 0x3f            # top 2 bits of byte 0 are not part of the data

CRC_POLY = 0x0f35
CRC_INIT = 0x07ff
CRC_BITS = 102                 # rightmost bits of the binary data covered by the CRC

CODEWORD_COUNT = 10
CODEWORD_J_BASE = 636
CODEWORD_BASE = 1365
CODEWORD_A_MAX = 658
FCS_A_OFFSET = 659

BAR_COUNT = 65
BAR_STATES = 'TDAF'            # index is (ascender << 1) | descender


# =============================================================================
# STEP 1 — FIELDS → BINARY DATA
# =============================================================================

def convert_routing_code(zip):
    if len(zip) not in ROUTING_CODE_LENGTHS or not set(zip) <= DIGITS:
        raise ValidationError('routing_code', f"must be 0, 5, 9 or 11 digits, got {zip!r}")
    if len(zip) == 0:
        return 0
    elif len(zip) == 5:
        return int(zip) + 1
    elif len(zip) == 9:
        return int(zip) + 100000 + 1
    else:
        return int(zip) + 1000000000 + 100000 + 1


def convert_tracking_code(enc, track):
    if len(track) != TRACKING_CODE_LENGTH or not set(track) <= DIGITS:
        raise EncodingError(f"tracking code must be {TRACKING_CODE_LENGTH} digits, got {track!r}")
    enc = (enc * 10) + int(track[0])
    # second Barcode ID digit is limited to 0..4
    enc = (enc * 5) + int(track[1])
    for i in range(2, TRACKING_CODE_LENGTH):
        enc = (enc * 10) + int(track[i])
    return enc


def to_bytes(val, nbytes=PAYLOAD_BYTES):
    """Big-endian bytes; refuses to drop high bits."""
    if val < 0 or val >> (8 * nbytes):
        raise EncodingOverflowError(f"value {val} does not fit in {nbytes} bytes")
    return val.to_bytes(nbytes, 'big')


def binary_data(record):
    """The 13-byte binary data for a TrackingRecord."""
    n = convert_routing_code(record.routing_code)
    n = convert_tracking_code(n, record.tracking_code)
    return to_bytes(n, PAYLOAD_BYTES)


# =============================================================================
# STEP 2 — CRC-11 FRAME CHECK SEQUENCE
# =============================================================================

def crc11(input):
    """
    CRC-11 (generator 0xF35) over the rightmost 102 bits of the binary data.

    The two most significant bits of byte 0 are skipped; everything else is
    fed MSB first. Returns the FCS, 0..2047.
    """
    if len(input) != PAYLOAD_BYTES:
        raise EncodingError(f"CRC input must be {PAYLOAD_BYTES} bytes, got {len(input)}")
    data = int.from_bytes(bytes(input), 'big') & ((1 << CRC_BITS) - 1)
    fcs = CRC_INIT
    for shift in range(CRC_BITS - 1, -1, -1):
        bit = (data >> shift) & 1
        if (fcs ^ (bit << 10)) & 0x400:
            fcs = (fcs << 1) ^ CRC_POLY
        else:
            fcs <<= 1
        fcs &= 0x7ff
    return fcs


# =============================================================================
# STEP 3 — BINARY DATA → CODEWORDS
# =============================================================================

def binary_to_codewords(input):
    """Split the 102-bit value into codewords A..J (A most significant)."""
    if len(input) != PAYLOAD_BYTES:
        raise EncodingError(f"binary data must be {PAYLOAD_BYTES} bytes, got {len(input)}")
    n = int.from_bytes(bytes([input[0] & PAYLOAD_MASK]) + bytes(input[1:]), 'big')
    r = []
    n, x = divmod(n, CODEWORD_J_BASE)
    r.append(x)
    for i in range(CODEWORD_COUNT - 2):
        n, x = divmod(n, CODEWORD_BASE)
        r.append(x)
    if n > CODEWORD_A_MAX:
        raise EncodingOverflowError(f"codeword A must be 0..{CODEWORD_A_MAX}, was {n}")
    r.append(n)
    r.reverse()
    return r


# =============================================================================
# STEP 4 — ADDITIONAL INFORMATION IN CODEWORDS
# =============================================================================

def insert_fcs(fcs, codewords):
    """
    Codeword J is doubled: its low bit is the orientation flag, 0 for an
    upright barcode. Codeword A gains 659 when FCS bit 10 is set.
    """
    r = list(codewords)
    r[9] *= 2
    if fcs & (1 << 10):
        r[0] += FCS_A_OFFSET
    return r


# =============================================================================
# STEP 5 — CODEWORDS → CHARACTERS
# =============================================================================

def codeword_to_character(b):
    if 0 <= b < TAB5_LENGTH:
        return int(tab5()[b])
    elif TAB5_LENGTH <= b < TAB5_LENGTH + TAB2_LENGTH:
        return int(tab2()[b - TAB5_LENGTH])
    raise EncodingOverflowError(f"codeword {b} is outside 0..{TAB5_LENGTH + TAB2_LENGTH - 1}")


def codewords_to_characters(codewords):
    return [codeword_to_character(b) for b in codewords]


def apply_fcs(fcs, characters):
    """Bitwise-negate character i (within 13 bits) where FCS bit i is set."""
    r = list(characters)
    for i in range(CODEWORD_COUNT):
        if fcs & 1 << i:
            r[i] = r[i] ^ CHARACTER_MASK
    return r


# =============================================================================
# STEP 6 — CHARACTERS → BARS
# =============================================================================

def make_bars(code):
    if len(code) != CODEWORD_COUNT:
        raise EncodingError(f"expected {CODEWORD_COUNT} characters, got {len(code)}")
    r = []
    for desc_char, desc_bit, asc_char, asc_bit in BARS:
        descend = (code[desc_char] >> desc_bit) & 1
        ascend = (code[asc_char] >> asc_bit) & 1
        r.append(BAR_STATES[ascend << 1 | descend])
    return ''.join(r)


# =============================================================================
# FULL PIPELINE
# =============================================================================

def encode(record):
    """
    Encode a TrackingRecord into its 65-character T/D/A/F bar string.

    Raises EncodingError (or a subclass) if any stage leaves its range;
    nothing is returned in that case.
    """
    data = binary_data(record)
    fcs = crc11(data)
    codewords = binary_to_codewords(data)
    logger.debug("binary data %s, FCS 0x%03x", data.hex(' ').upper(), fcs)
    logger.debug("codewords %s", codewords)

    codewords = insert_fcs(fcs, codewords)
    characters = apply_fcs(fcs, codewords_to_characters(codewords))
    logger.debug("characters %s", ' '.join(f"{c:04X}" for c in characters))

    bars = make_bars(characters)
    assert len(bars) == BAR_COUNT
    return bars
