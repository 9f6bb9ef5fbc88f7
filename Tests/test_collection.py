# Tests/test_collection.py
"""Tests for DocumentCollection over the cars table."""
import pytest

from Models import Car
from Services.collection import DocumentCollection
from Services.exceptions import StorageError


@pytest.fixture
def cars(session_factory):
    return DocumentCollection(session_factory, Car)


def car_document(**overrides):
    document = {
        "make": "Skoda",
        "model": "Octavia",
        "year": 2018,
        "price": 14900.0,
        "status": "available",
        "customer": None,
        "picture": "picture-1",
    }
    document.update(overrides)
    return document


def test_insert_assigns_id(cars):
    result = cars.insert_one(car_document())

    document = cars.find_one({"id": result.id})
    assert document["model"] == "Octavia"
    assert document["customer"] is None
    assert document["created_at"] is not None


def test_insert_keeps_given_id(cars):
    result = cars.insert_one(car_document(id="car-1"))
    assert result.id == "car-1"


def test_find_filters_on_all_keys(cars):
    cars.insert_one(car_document(id="a"))
    cars.insert_one(car_document(id="b", status="sold"))
    cars.insert_one(car_document(id="c", make="Seat", status="sold"))

    assert {doc["id"] for doc in cars.find({"status": "sold"})} == {"b", "c"}
    assert [doc["id"] for doc in cars.find({"status": "sold", "make": "Seat"})] == ["c"]
    assert cars.find_one({"id": "a", "status": "sold"}) is None


def test_update_one_is_conditional(cars):
    cars.insert_one(car_document(id="a"))
    customer = {"fullName": "Ann Lee", "email": "ann@x.com", "phoneNumber": "12345"}

    hit = cars.update_one({"id": "a", "status": "available"}, {"status": "reserved", "customer": customer})
    miss = cars.update_one({"id": "a", "status": "available"}, {"status": "sold"})

    assert (hit.matched_count, hit.modified_count) == (1, 1)
    assert (miss.matched_count, miss.modified_count) == (0, 0)
    document = cars.find_one({"id": "a"})
    assert document["status"] == "reserved"
    assert document["customer"] == customer


def test_delete_one(cars):
    cars.insert_one(car_document(id="a", status="sold"))

    assert cars.delete_one({"id": "a", "status": "available"}).deleted_count == 0
    assert cars.delete_one({"id": "a"}).deleted_count == 1
    assert cars.find({}) == []


def test_duplicate_id_is_a_storage_error(cars):
    cars.insert_one(car_document(id="a"))
    with pytest.raises(StorageError):
        cars.insert_one(car_document(id="a"))


def test_unknown_field_is_a_storage_error(cars):
    with pytest.raises(StorageError):
        cars.find({"colour": "red"})
