"""
Tests for the JSON appointment store adapter.
"""

import asyncio
import json
from datetime import date

import pytest

from salonslots.adapters.json_appointment_store import JsonAppointmentStore
from salonslots.domain.exceptions import OccupancyFetchError
from salonslots.domain.models import AppointmentStatus

TZ = "America/Sao_Paulo"


def _write(tmp_path, records):
    data_file = tmp_path / "appointments.json"
    data_file.write_text(json.dumps(records), encoding="utf-8")
    return data_file


def test_filters_by_professional_and_date(tmp_path):
    data_file = _write(
        tmp_path,
        [
            {"professionalId": "ana", "start": "2024-11-25T10:00:00", "end": "2024-11-25T10:30:00", "status": "scheduled"},
            {"professionalId": "ana", "start": "2024-11-26T10:00:00", "end": "2024-11-26T10:30:00"},
            {"professionalId": "bruno", "start": "2024-11-25T11:00:00", "end": "2024-11-25T11:30:00"},
            {"professionalId": "ana", "start": "2024-11-25T14:00:00", "end": "2024-11-25T15:00:00", "status": "confirmed"},
        ],
    )
    store = JsonAppointmentStore(data_file=data_file, timezone=TZ)

    appointments = asyncio.run(store.fetch_appointments("ana", date(2024, 11, 25)))

    assert [a.start.format("HH:mm") for a in appointments] == ["10:00", "14:00"]
    assert appointments[0].status is AppointmentStatus.SCHEDULED
    assert appointments[1].status is AppointmentStatus.CONFIRMED
    assert all(a.professional_id == "ana" for a in appointments)


def test_naive_timestamps_use_store_timezone(tmp_path):
    data_file = _write(
        tmp_path,
        [{"professionalId": "ana", "start": "2024-11-25T10:00:00", "end": "2024-11-25T10:30:00"}],
    )
    store = JsonAppointmentStore(data_file=data_file, timezone=TZ)

    appointment = asyncio.run(store.fetch_appointments("ana", date(2024, 11, 25)))[0]

    assert appointment.start.timezone_name == TZ


def test_cancelled_appointments_are_excluded(tmp_path):
    data_file = _write(
        tmp_path,
        [
            {"professionalId": "ana", "start": "2024-11-25T10:00:00", "end": "2024-11-25T10:30:00", "status": "cancelled"},
            {"professionalId": "ana", "start": "2024-11-25T11:00:00", "end": "2024-11-25T11:30:00", "status": "pending"},
        ],
    )
    store = JsonAppointmentStore(data_file=data_file, timezone=TZ)

    appointments = asyncio.run(store.fetch_appointments("ana", date(2024, 11, 25)))

    assert len(appointments) == 1
    assert appointments[0].status is AppointmentStatus.PENDING


def test_invalid_records_are_skipped(tmp_path, caplog):
    data_file = _write(
        tmp_path,
        [
            {"professionalId": "ana", "start": "not a date", "end": "2024-11-25T10:30:00"},
            {"professionalId": "ana", "start": "2024-11-25T10:30:00", "end": "2024-11-25T10:00:00"},
            {"professionalId": "ana", "start": "2024-11-25T10:00:00"},
            {"professionalId": "ana", "start": "2024-11-25T12:00:00", "end": "2024-11-25T12:30:00", "status": "unknown"},
            {"professionalId": "ana", "start": 1732539600, "end": "2024-11-25T13:30:00"},
            {"professionalId": "ana", "start": "2024-11-25T14:00:00", "end": None},
            {"professionalId": "ana", "start": "2024-11-25T16:00:00", "end": "2024-11-25T16:30:00"},
        ],
    )
    store = JsonAppointmentStore(data_file=data_file, timezone=TZ)

    with caplog.at_level("WARNING"):
        appointments = asyncio.run(store.fetch_appointments("ana", date(2024, 11, 25)))

    assert [a.start.format("HH:mm") for a in appointments] == ["16:00"]
    assert caplog.text.count("Skipping invalid appointment record") == 6


def test_appointment_crossing_midnight_touches_both_days(tmp_path):
    data_file = _write(
        tmp_path,
        [{"professionalId": "ana", "start": "2024-11-25T23:30:00", "end": "2024-11-26T00:30:00"}],
    )
    store = JsonAppointmentStore(data_file=data_file, timezone=TZ)

    assert len(asyncio.run(store.fetch_appointments("ana", date(2024, 11, 25)))) == 1
    assert len(asyncio.run(store.fetch_appointments("ana", date(2024, 11, 26)))) == 1
    assert asyncio.run(store.fetch_appointments("ana", date(2024, 11, 27))) == []


def test_missing_file_raises(tmp_path):
    with pytest.raises(OccupancyFetchError, match="not found"):
        JsonAppointmentStore(data_file=tmp_path / "missing.json", timezone=TZ)


def test_malformed_json_raises(tmp_path):
    data_file = tmp_path / "appointments.json"
    data_file.write_text("{not json", encoding="utf-8")

    with pytest.raises(OccupancyFetchError, match="Could not read"):
        JsonAppointmentStore(data_file=data_file, timezone=TZ)


def test_root_must_be_an_array(tmp_path):
    data_file = _write(tmp_path, {"appointments": []})

    with pytest.raises(OccupancyFetchError, match="JSON array"):
        JsonAppointmentStore(data_file=data_file, timezone=TZ)
