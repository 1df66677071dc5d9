"""Shared fixtures: the worked example of USPS-B-3200, section 2.2."""

import pytest

from imb_record import make_record

# Sample values used throughout the examples of USPS-B-3200 Rev. H.
# Not a real-world IMb: "01" / "234" are not registered codes.
EXAMPLE_FIELDS = ("01", "234", "567094", "987654321", "01234567891")
EXAMPLE_BARS = "AADTFFDFTDADTAADAATFDTDDAAADDTDTTDAFADADDDTFFFDDTTTADFAAADFTDAADA"


@pytest.fixture
def example_fields():
    return EXAMPLE_FIELDS


@pytest.fixture
def example_record():
    return make_record(*EXAMPLE_FIELDS)


@pytest.fixture
def make_example():
    """Build the example record with some fields overridden."""

    def _make(**overrides):
        names = ("barcode_id", "service_type_id", "mailer_id", "serial_number", "routing_code")
        fields = dict(zip(names, EXAMPLE_FIELDS))
        fields.update(overrides)
        return make_record(**fields)

    return _make
