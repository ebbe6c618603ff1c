import copy
import re

from bson import ObjectId
from pymongo.errors import ConfigurationError

import database
import sample_data
from database import (
    count_documents,
    create_document,
    delete_document,
    find_by_id,
    get_documents,
    serialize,
    to_object_id,
    update_document,
)
from main import generate_order_number


def test_serialize_replaces_object_ids():
    oid, ref = ObjectId(), ObjectId()
    doc = {"_id": oid, "name": "x", "products": [{"productId": ref, "quantity": 1}]}
    assert serialize(doc) == {"id": str(oid), "name": "x", "products": [{"productId": str(ref), "quantity": 1}]}


def test_to_object_id():
    oid = ObjectId()
    assert to_object_id(str(oid)) == oid
    assert to_object_id("1") is None
    assert to_object_id(None) is None


def test_document_helpers(mongo_db):
    doc = create_document(mongo_db, "product", {"name": "Scarf", "price": 10.0})
    doc_id = str(doc["_id"])
    assert "createdAt" in doc and "updatedAt" in doc
    assert count_documents(mongo_db, "product") == 1

    assert find_by_id(mongo_db, "product", doc_id)["name"] == "Scarf"
    assert find_by_id(mongo_db, "product", "nope") is None

    updated = update_document(mongo_db, "product", doc_id, {"price": 12.0})
    assert updated["price"] == 12.0 and updated["name"] == "Scarf"
    assert update_document(mongo_db, "product", "nope", {"price": 1}) is None

    create_document(mongo_db, "product", {"name": "Belt", "price": 5.0})
    names = [d["name"] for d in get_documents(mongo_db, "product", {}, [("price", 1)], 1)]
    assert names == ["Belt"]

    assert delete_document(mongo_db, "product", doc_id) is True
    assert delete_document(mongo_db, "product", doc_id) is False
    assert count_documents(mongo_db, "product") == 1


def test_sample_ids_are_numeric_text():
    assert [p["id"] for p in sample_data.SAMPLE_PRODUCTS] == [str(i) for i in range(1, len(sample_data.SAMPLE_PRODUCTS) + 1)]
    assert {p["gender"] for p in sample_data.SAMPLE_PRODUCTS} == {"men", "women", "unisex"}


def test_sample_copies_do_not_leak():
    before = copy.deepcopy(sample_data.SAMPLE_PRODUCTS)
    items = sample_data.sample_products()
    items[0]["price"] = 0
    items[0]["sizes"].append("XXXL")
    found = sample_data.find_sample_product("2")
    found["name"] = "changed"
    seeded = sample_data.seed_catalog()
    seeded[0]["colors"].clear()
    assert sample_data.SAMPLE_PRODUCTS == before
    assert all("id" not in p for p in sample_data.seed_catalog())


def test_query_samples_filters():
    assert {p["gender"] for p in sample_data.query_samples(gender="women")} == {"women"}
    assert [p["name"] for p in sample_data.query_samples(search="blazer")] == ["Men's Premium Blazer"]
    assert sample_data.query_samples(category="no such category") == []
    assert [p["id"] for p in sample_data.query_samples(limit=2)] == ["6", "5"]


def test_order_number_format():
    number = generate_order_number(41)
    assert re.fullmatch(r"ORD-\d+-42-[0-9A-F]{4}", number)
    assert len({generate_order_number(0) for _ in range(50)}) > 1


def test_connect_failure_falls_back_to_no_database(monkeypatch):
    def unresolvable(*args, **kwargs):
        raise ConfigurationError("The DNS query name does not exist: _mongodb._tcp.nohost.invalid.")

    monkeypatch.setattr(database, "MongoClient", unresolvable)
    assert database.connect("mongodb+srv://nohost.invalid/", "stylehub") is None
    assert database.connect(None, "stylehub") is None
