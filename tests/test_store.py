import sqlite3

import pytest

from transaction_analytics.core.models import Transaction
from transaction_analytics.store import TransactionStore
from tests.conftest import SAMPLE_DOCS, make_doc, seed


def test_empty_store_queries(tmp_path):
    store = TransactionStore(tmp_path / "empty.db")

    assert store.find(3) == []
    assert store.count(3) == 0
    assert store.sum_price(3) == 0.0
    assert store.count_by_category(3) == []


def test_replace_all_is_a_full_destructive_replace(store):
    seed(store)
    assert store.count(3) == 6

    replacement = [make_doc(100, "Only record", 150, 3)]
    assert seed(store, replacement).count(3) == 1
    assert [doc["id"] for doc in store.find(3)] == [100]
    assert store.count(4) == 0


def test_documents_are_returned_verbatim_in_feed_order(seeded_store):
    docs = seeded_store.find(3)
    assert docs == [doc for doc in SAMPLE_DOCS if doc["id"] <= 6]
    assert docs[0]["image"] == "https://example.com/1.jpg"


def test_find_offset_and_limit(seeded_store):
    page = seeded_store.find(3, offset=2, limit=2)
    assert [doc["id"] for doc in page] == [3, 4]
    assert seeded_store.find(3, offset=10, limit=5) == []
    assert [doc["id"] for doc in seeded_store.find(3, offset=4)] == [5, 6]


def test_search_matches_title_description_or_price(seeded_store):
    def ids(search, price=0.0):
        return [doc["id"] for doc in seeded_store.find(3, search, price)]

    assert ids("ssd") == [5, 6]
    assert ids("PORTABLE") == [4]
    assert ids("64", 64.0) == [4]
    assert ids("nothing") == []


def test_count_filters(seeded_store):
    assert seeded_store.count(3, sold=True) == 3
    assert seeded_store.count(3, sold=False) == 3
    assert seeded_store.count(3, price_from=0, price_to=100) == 2
    assert seeded_store.count(3, price_above=100, price_to=200) == 2
    assert seeded_store.count(3, price_above=900) == 1


def test_sum_and_categories(seeded_store):
    assert seeded_store.sum_price(3) == pytest.approx(7597.95)
    assert seeded_store.count_by_category(3) == [
        ("electronics", 3),
        ("jewelery", 1),
        ("men's clothing", 2),
    ]


def test_failed_replace_keeps_previous_contents(seeded_store):
    good = Transaction.from_document(make_doc(200, "Fine", 10, 3))
    bad = Transaction.from_document(make_doc(201, "Broken", 10, 3))
    bad.title = None

    with pytest.raises(sqlite3.IntegrityError):
        seeded_store.replace_all([good, bad])
    assert seeded_store.count(3) == 6


def test_schema_stores_utc_sale_dates(seeded_store):
    conn = sqlite3.connect(seeded_store.db_path)
    try:
        row = conn.execute("SELECT date_of_sale FROM transactions WHERE id = 1").fetchone()
    finally:
        conn.close()
    assert row[0] == "2021-03-15T14:59:54"


def test_sale_dates_before_year_1000_keep_their_month(store):
    doc = make_doc(1, "Antique", 50, 3)
    doc["dateOfSale"] = "0999-03-15T00:00:00Z"
    seed(store, [doc])

    assert store.count(3) == 1
    assert store.find(3) == [doc]
