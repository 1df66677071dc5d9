"""
USPS Barcode Identifier and Service Type Identifier registries
Source: Intelligent Mail Barcode Technical Resource Guide, Rev. 4.1,
Appendix B, Tables B1 and B2

Only the non-automation / "other" Service Type IDs are listed: no
Full-Service, no Basic option, no ancillary service endorsements.

parse_record() is a stricter front door to imb_record.make_record(): it
builds the same TrackingRecord, but only for codes in these registries.
"""

from enum import Enum

from imb_errors import ValidationError
from imb_record import make_record

BARCODE_ID_SECOND_DIGITS = '01234'


class BarcodeIdentifier(Enum):
    # Table B1: presort identification
    NONE = "00"
    CARRIER_ROUTE_ENHANCED_AND_FIRM = "10"
    FIVE_DIGIT_SCHEME = "20"
    THREE_DIGIT_SCHEME = "30"
    AREA_DISTRIBUTION_CENTER = "40"
    MIXED_AREA_DISTRIBUTION_CENTER = "50"


class ServiceTypeIdentifier(Enum):
    # Table B2: non-automation / other
    FIRST_CLASS_MAIL = "700"
    STANDARD_MAIL = "702"
    PERIODICALS = "704"
    BOUND_PRINTED_MATTER = "706"
    BUSINESS_REPLY_MAIL = "708"
    PRIORITY_MAIL = "710"
    PRIORITY_MAIL_FLAT_RATE = "712"


def _member(enum_cls, field, value):
    try:
        return enum_cls(value)
    except ValueError:
        known = ', '.join(m.value for m in enum_cls)
        raise ValidationError(field, f"{value!r} is not a registered code ({known})") from None


def parse_record(barcode_id, service_type_id, mailer_id, serial_number, routing_code=''):
    """
    Like make_record(), but the Barcode ID second digit must be 0-4 and both
    the Barcode ID and the Service Type ID must be registered codes.
    """
    record = make_record(barcode_id, service_type_id, mailer_id, serial_number, routing_code)
    if record.barcode_id[1] not in BARCODE_ID_SECOND_DIGITS:
        raise ValidationError(
            'barcode_id', f"second digit must be 0-4, got {record.barcode_id!r}")
    _member(BarcodeIdentifier, 'barcode_id', record.barcode_id)
    _member(ServiceTypeIdentifier, 'service_type_id', record.service_type_id)
    return record


def _title(member):
    return member.name.replace('_', ' ').title()


def describe(record):
    """Concise one-line description of a record's registered codes."""
    parts = []
    try:
        parts.append(f"Barcode ID {record.barcode_id} ({_title(BarcodeIdentifier(record.barcode_id))})")
    except ValueError:
        parts.append(f"Unknown Barcode ID {record.barcode_id}")
    try:
        parts.append(f"STID {record.service_type_id} ({_title(ServiceTypeIdentifier(record.service_type_id))})")
    except ValueError:
        parts.append(f"Unknown STID {record.service_type_id}")
    return " · ".join(parts)
