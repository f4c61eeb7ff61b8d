import pytest

from transaction_analytics.core.models import Transaction
from transaction_analytics.store import TransactionStore


def make_doc(id, title, price, month, sold=True, category="electronics", description=None, day=15):
    return {
        "id": id,
        "title": title,
        "description": description if description is not None else f"{title} description",
        "price": price,
        "category": category,
        "sold": sold,
        "image": f"https://example.com/{id}.jpg",
        "dateOfSale": f"2021-{month:02d}-{day:02d}T20:29:54+05:30",
    }


SAMPLE_DOCS = [
    make_doc(1, "Fjallraven Backpack", 329.85, 3, sold=False, category="men's clothing"),
    make_doc(2, "Mens Casual T-Shirt", 44.6, 3, category="men's clothing"),
    make_doc(3, "Solid Gold Bracelet", 6950.0, 3, sold=False, category="jewelery"),
    make_doc(4, "WD 2TB External Hard Drive", 64.0, 3, category="electronics",
             description="USB 3.0 portable drive"),
    make_doc(5, "SanDisk SSD", 109.0, 3, category="electronics"),
    make_doc(6, "Silicon Power SSD", 100.5, 3, sold=False, category="electronics"),
    make_doc(7, "Rain Jacket", 39.99, 4, category="women's clothing"),
    make_doc(8, "Monitor", 999.99, 4, sold=False, category="electronics"),
    make_doc(9, "Short Sleeve Top", 9.85, 11, category="women's clothing"),
    make_doc(10, "Opna Women's Short Sleeve", 7.95, 12, category="women's clothing"),
]


def seed(store, docs=SAMPLE_DOCS):
    store.replace_all([Transaction.from_document(doc) for doc in docs])
    return store


@pytest.fixture
def store(tmp_path):
    return TransactionStore(tmp_path / "transactions.db")


@pytest.fixture
def seeded_store(store):
    return seed(store)
