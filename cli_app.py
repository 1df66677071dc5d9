"""
USPS Intelligent Mail Barcode (IMb) Encoder
============================================
Full pipeline:
    1. Validate fields → TrackingRecord
    2. Fields → 13 bytes of binary data
    3. CRC-11 → FCS
    4. Binary data → codewords A..J, FCS folded in
    5. Codewords → characters → 65 bars (FADT string)

Usage:
    python cli_app.py <barcode_id> <service_type_id> <mailer_id> <serial> [routing]
    python cli_app.py 01 234 567094 987654321 01234567891 --debug

Options:
    --strict   Only accept registered Barcode IDs and Service Type IDs
    --debug    Log every pipeline stage
"""

import logging
import sys

import intelligent_mail_barcode as imb
from imb_record import make_record
from imb_registry import describe, parse_record

OPTIONS = ("--strict", "--debug")


# =============================================================================
# FULL PIPELINE
# =============================================================================

def process_fields(fields, strict=False):
    """
    Validate and encode one set of fields.

    Returns dict with record, description, binary, fcs, codewords, fadt.
    """
    build = parse_record if strict else make_record
    record = build(*fields)

    binary = imb.binary_data(record)
    fcs = imb.crc11(binary)
    codewords = imb.insert_fcs(fcs, imb.binary_to_codewords(binary))

    return {
        'record':      record,
        'description': describe(record),
        'binary':      binary,
        'fcs':         fcs,
        'codewords':   codewords,
        'fadt':        imb.encode(record),
    }


def print_result(r: dict) -> None:
    record = r['record']
    fadt = r['fadt']

    print()
    print("=" * 50)
    print("  IMb Encode Result")
    print("=" * 50)
    print(f"  FADT string   : {fadt}")
    print(f"  Tracking code : {record.tracking_code}")
    print(f"  Routing code  : {record.routing_code or 'none'}")
    print(f"  Registry      : {r['description']}")
    print(f"  Binary data   : {r['binary'].hex(' ').upper()}")
    print(f"  FCS           : 0x{r['fcs']:03X}")
    print(f"  Codewords     : {' '.join(str(c) for c in r['codewords'])}")
    print(f"  Bars          : F={fadt.count('F')} A={fadt.count('A')} "
          f"D={fadt.count('D')} T={fadt.count('T')}")
    print("=" * 50)


def print_usage() -> None:
    print("Usage: python cli_app.py <barcode_id> <service_type_id> <mailer_id> "
          "<serial> [routing] [--strict] [--debug]")
    print("  --strict  Only accept registered Barcode IDs and Service Type IDs")
    print("  --debug   Log every pipeline stage")


# =============================================================================
# ENTRY POINT
# =============================================================================

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    fields = [a for a in argv if not a.startswith('--')]
    options = [a for a in argv if a.startswith('--')]
    strict = "--strict" in options

    unknown = [o for o in options if o not in OPTIONS]
    if unknown:
        print(f"[ERROR] unknown option: {' '.join(unknown)}")
        print_usage()
        return 1

    if len(fields) not in (4, 5):
        print_usage()
        return 1

    if "--debug" in argv:
        logging.basicConfig(level=logging.DEBUG, format="  %(name)s: %(message)s")

    try:
        result = process_fields(fields, strict=strict)
    except ValueError as e:
        print(f"\n[ERROR] {e}")
        return 1
    print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
