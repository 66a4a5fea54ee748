from datetime import datetime

import pytest

from pulseox.measurements import MeasurementParser, format_record
from pulseox.patients import Patient


def test_heart_rate_pair():
    parser = MeasurementParser()
    parser.feed(0)
    assert parser.awaiting_value
    parser.feed(72)
    assert parser.heart_rate == 72
    assert parser.oxygen is None
    assert not parser.awaiting_value


def test_oxygen_pair():
    parser = MeasurementParser()
    parser.feed(1)
    parser.feed(97)
    assert parser.oxygen == 97
    assert parser.heart_rate is None


def test_unknown_header_is_ignored():
    parser = MeasurementParser()
    parser.feed(5)
    assert not parser.awaiting_value
    parser.feed(1)
    parser.feed(95)
    assert parser.oxygen == 95


def test_parse_chunk_sequence():
    parser = MeasurementParser()
    for chunk in (b"0", b"80", b"1", b"98"):
        assert parser.parse_chunk(chunk)
    assert (parser.heart_rate, parser.oxygen) == (80, 98)


@pytest.mark.parametrize("chunk", [b"", b"abc", b"\xff\xfe", b"1 2"])
def test_parse_chunk_rejects_non_numbers(chunk):
    parser = MeasurementParser()
    parser.parse_chunk(b"0")
    assert parser.parse_chunk(chunk) is False
    assert parser.awaiting_value


@pytest.fixture
def patient():
    return Patient(name="Ana", surname="PEREZ", dni=30111222, sex="Mujer",
                   date=datetime(2024, 1, 2, 3, 4, 5))


def test_record_starts_with_date_and_ends_with_newline(patient):
    record = format_record(patient, 97, 72)
    assert record.startswith("02/01/2024  03:04:05\tPaciente: PEREZ, Ana")
    assert record.endswith("\n")
    assert record.count("\n") == 1


def test_record_fields_in_order(patient):
    record = format_record(patient, 97, 72)
    fields = [field.rstrip() for field in record.rstrip("\n").split("\t")]
    assert fields[1:] == [
        "Paciente: PEREZ, Ana",
        "DNI: 30111222",
        "Sexo: Mujer",
        "Nivel de oxigeno: 97",
        "Heart rate: 72",
    ]


def test_record_field_padding(patient):
    record = format_record(patient, 97, 72)
    assert record.index("\tDNI") == 20 + 50


def test_record_without_date_uses_now():
    before = datetime.now().replace(microsecond=0)
    record = format_record(Patient(name="A", surname="B"), 1, 2)
    stamped = datetime.strptime(record[:20], "%d/%m/%Y  %H:%M:%S")
    assert stamped >= before