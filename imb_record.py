"""
Validated Intelligent Mail barcode records.

TrackingRecord checks only lengths and digits, the way USPS-B-3200 lays out
the fields. Registry checks (known Barcode IDs and Service Type IDs) live in
imb_registry.py on top of this.
"""

from dataclasses import dataclass

from imb_errors import ValidationError

DIGITS = frozenset('0123456789')

BARCODE_ID_LENGTH = 2
SERVICE_TYPE_ID_LENGTH = 3
MAILER_ID_LENGTHS = (6, 9)
MAILER_AND_SERIAL_LENGTH = 15
ROUTING_CODE_LENGTHS = (0, 5, 9, 11)
TRACKING_CODE_LENGTH = 20


def _check_field(field, value, lengths, describe, note=""):
    if not isinstance(value, str):
        raise ValidationError(field, f"must be a string of digits, got {type(value).__name__}")
    if len(value) not in lengths:
        raise ValidationError(
            field, f"must be {describe} digits long{note}, got {len(value)} ({value!r})")
    # str.isdigit() also accepts things like '²' and Arabic-Indic digits
    if not set(value) <= DIGITS:
        raise ValidationError(field, f"must be all digits, got {value!r}")


@dataclass(frozen=True)
class TrackingRecord:
    """
    Tracking and routing fields of one mailpiece, all decimal strings.

    Fields are checked on construction; ValidationError names the first
    offending one. Values are never padded or truncated.
    """
    barcode_id: str
    service_type_id: str
    mailer_id: str
    serial_number: str
    routing_code: str = ''

    def __post_init__(self):
        _check_field('barcode_id', self.barcode_id, (BARCODE_ID_LENGTH,), '2')
        _check_field('service_type_id', self.service_type_id, (SERVICE_TYPE_ID_LENGTH,), '3')
        _check_field('mailer_id', self.mailer_id, MAILER_ID_LENGTHS, '6 or 9')
        serial_length = MAILER_AND_SERIAL_LENGTH - len(self.mailer_id)
        _check_field('serial_number', self.serial_number, (serial_length,),
                     str(serial_length), f" with a {len(self.mailer_id)}-digit mailer ID")
        _check_field('routing_code', self.routing_code, ROUTING_CODE_LENGTHS, '0, 5, 9 or 11')

    @property
    def tracking_code(self) -> str:
        """Barcode ID + Service Type ID + Mailer ID + Serial Number (20 digits)."""
        return self.barcode_id + self.service_type_id + self.mailer_id + self.serial_number

    @property
    def payload(self) -> str:
        """Tracking code followed by the routing code (20 to 31 digits)."""
        return self.tracking_code + self.routing_code


def make_record(barcode_id, service_type_id, mailer_id, serial_number, routing_code=''):
    """Validate the five fields and return a TrackingRecord."""
    return TrackingRecord(barcode_id, service_type_id, mailer_id, serial_number, routing_code)
