"""
Tests for the legacy XML decoder: long and short attribute names,
sparse documents, uid truncation, photos and malformed input.
"""

import base64

import pytest

from aadhaar_qr.errors import MalformedDocument
from aadhaar_qr.models import PayloadKind
from aadhaar_qr.xml_decoder import XMLQRDecoder
from conftest import SAMPLE_XML


@pytest.fixture
def decoder():
    return XMLQRDecoder()


class TestLongFormAttributes:

    def test_all_fields(self, decoder):
        record = decoder.decode(SAMPLE_XML)

        assert record.name == "Jane Doe"
        assert record.gender == "Female"
        assert record.date_of_birth == "01/01/1990"
        assert record.year_of_birth == "1990"
        assert record.care_of == "W/O John Doe"
        assert record.house == "12B"
        assert record.street == "MG Road"
        assert record.landmark == "Near Temple"
        assert record.locality == "Kothrud"
        assert record.village == "Pune City"
        assert record.post_office == "Kothrud PO"
        assert record.district == "Pune"
        assert record.sub_district == "Haveli"
        assert record.state == "Maharashtra"
        assert record.postcode == "411038"
        assert record.payload_kind == PayloadKind.XML

    def test_only_last_four_of_uid_kept(self, decoder):
        record = decoder.decode(SAMPLE_XML)
        assert record.uid_last_four == "9012"
        assert "123456789012" not in repr(record)
        assert "123456789012" not in str(record.to_dict())


class TestShortAliases:

    def test_single_letter_names(self, decoder):
        xml = '<QRData n="Ravi Kumar" g="M" d="12-05-1985" u="xxxxxxxx4321" st="Karnataka" h="7" l="Jayanagar"/>'
        record = decoder.decode(xml)

        assert record.name == "Ravi Kumar"
        assert record.gender == "Male"
        assert record.date_of_birth == "12-05-1985"
        assert record.year_of_birth == "1985"
        assert record.uid_last_four == "4321"
        assert record.state == "Karnataka"
        assert record.house == "7"
        assert record.locality == "Jayanagar"

    def test_long_name_preferred_over_alias(self, decoder):
        record = decoder.decode('<QRData name="Long" n="Short"/>')
        assert record.name == "Long"

    def test_mobile_and_email(self, decoder):
        record = decoder.decode('<QRData name="A" m="xxxxxx9876" e="a***@example.com"/>')
        assert record.mobile_last_four == "9876"
        assert record.email_masked == "a***@example.com"


class TestSparseDocuments:

    def test_missing_attributes_are_absent(self, decoder):
        record = decoder.decode('<QRData name="Only Name"/>')
        assert record.name == "Only Name"
        assert record.gender is None
        assert record.date_of_birth is None
        assert record.year_of_birth is None
        assert record.uid_last_four is None
        assert record.postcode is None
        assert record.has_photo is False

    def test_blank_attribute_is_absent(self, decoder):
        record = decoder.decode('<QRData name="  " pc=""/>')
        assert record.name is None
        assert record.postcode is None

    def test_wrapped_element(self, decoder):
        record = decoder.decode('<QRData><PrintLetterBarcodeData name="Inner" gender="F"/></QRData>')
        assert record.name == "Inner"
        assert record.gender == "Female"

    def test_unrecognised_gender_passes_through(self, decoder):
        record = decoder.decode('<QRData gender="Other"/>')
        assert record.gender == "Other"


class TestPhoto:

    def test_base64_photo_decoded(self, decoder):
        photo = b"\xff\xd8\xff\xe0fake-jpeg"
        encoded = base64.b64encode(photo).decode("ascii")
        record = decoder.decode(f'<QRData name="A" i="{encoded}"/>')
        assert record.has_photo is True
        assert record.photo_bytes == photo
        assert record.to_dict()["photoBase64"] == encoded

    def test_invalid_photo_dropped(self, decoder):
        record = decoder.decode('<QRData name="A" photo="!!not base64!!"/>')
        assert record.has_photo is False
        assert record.photo_bytes is None


class TestMalformed:

    @pytest.mark.parametrize("text", [
        '<QRData name="x"',
        "<QRData><unclosed></QRData>",
        "",
        "just some text",
    ])
    def test_malformed_document(self, decoder, text):
        with pytest.raises(MalformedDocument):
            decoder.decode(text)
