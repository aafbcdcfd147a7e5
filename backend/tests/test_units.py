"""Tests for the vehicle unit record service."""

import asyncio

from app.core.results import Err, ErrorKind, Ok
from app.core.store import InMemoryDocumentStore
from app.services import units


def add(store, **overrides):
    fields = {"no_placas": " vhd-12-34 ", "no_unidad": "07", "capacidad": 40}
    fields.update(overrides)
    return asyncio.run(units.add_unit(store, **fields))


def test_add_unit():
    store = InMemoryDocumentStore()
    result = add(store)
    assert isinstance(result, Ok)
    assert result.value["no_placas"] == "VHD-12-34"
    assert result.value["capacidad"] == 40


def test_capacity_must_be_positive_integer():
    store = InMemoryDocumentStore()
    for bad in (0, -3, 12.5, True):
        result = add(store, capacidad=bad)
        assert isinstance(result, Err), bad
        assert result.message == units.CAPACITY_MESSAGE
    # Whole floats are accepted and stored as int
    assert add(store, capacidad=30.0).value["capacidad"] == 30


def test_required_fields():
    store = InMemoryDocumentStore()
    assert add(store, no_placas="").message == "El número de placas es requerido"
    assert add(store, no_unidad=" ").message == "El número de unidad es requerido"


def test_update_toggle_delete():
    store = InMemoryDocumentStore()
    unit_id = add(store).value["id"]

    result = asyncio.run(units.update_unit(store, unit_id, capacidad=55))
    assert result.ok
    assert asyncio.run(units.get_all_units(store))[0]["capacidad"] == 55

    assert asyncio.run(units.update_unit(store, unit_id, capacidad=0)).kind == ErrorKind.VALIDATION

    toggled = asyncio.run(units.toggle_unit_active(store, unit_id, 0))
    assert toggled.message == "Unidad marcada como inactiva"

    assert asyncio.run(units.delete_unit(store, unit_id)).ok
    assert asyncio.run(units.get_all_units(store)) == []


def test_format_capacity():
    assert units.format_capacity(1) == "1 pasajero"
    assert units.format_capacity(40) == "40 pasajeros"
    assert units.format_capacity(1200) == "1,200 pasajeros"


def test_filter_units():
    rows = [
        {"id": "u1", "no_placas": "VHD1234", "no_unidad": "07", "capacidad": 40},
        {"id": "u2", "no_placas": "ABC9999", "no_unidad": "12", "capacidad": 25},
    ]
    assert [u["id"] for u in units.filter_units(rows, "vhd")] == ["u1"]
    assert [u["id"] for u in units.filter_units(rows, "25")] == ["u2"]
    assert len(units.filter_units(rows, None)) == 2
