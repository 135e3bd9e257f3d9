import time

import pytest

from aqua_bridge.errors import NotFound, ValidationError
from aqua_bridge.services.document_store import DocumentStore
from aqua_bridge.services.harvest_service import HarvestService
from aqua_bridge.services.market_service import MarketService


@pytest.fixture
def documents(db):
    return DocumentStore(db)


@pytest.fixture
def harvest(documents):
    return HarvestService(documents)


@pytest.fixture
def market(documents):
    return MarketService(documents)


# ---------------------------------------------------------
# harvest requests
# ---------------------------------------------------------
def test_submit_creates_pending_request(harvest):
    before = int(time.time() * 1000)
    created = harvest.submit_request({"farmerId": "f1", "grade": "A", "quantity": 10, "location": "Pond 3"})

    assert created["status"] == "Pending Approval"
    assert created["id"].startswith("req_")
    assert before <= created["timestamp"] <= int(time.time() * 1000)
    assert created["location"] == "Pond 3"


def test_list_filters_by_farmer(harvest):
    created = harvest.submit_request({"farmerId": "f1", "grade": "A", "quantity": 10})

    assert [r["id"] for r in harvest.list_requests("f1")] == [created["id"]]
    assert harvest.list_requests("f2") == []


def test_list_is_newest_first(harvest, documents):
    documents.insert("harvest_requests", {"id": "old", "farmerId": "f1", "timestamp": 1})
    documents.insert("harvest_requests", {"id": "new", "farmerId": "f1", "timestamp": 2})

    assert [r["id"] for r in harvest.list_requests()] == ["new", "old"]


def test_submit_ignores_client_supplied_status_and_id(harvest):
    created = harvest.submit_request(
        {"farmerId": "f1", "grade": "B", "quantity": 3, "status": "Approved", "id": "mine"}
    )
    assert created["status"] == "Pending Approval"
    assert created["id"] != "mine"


def test_submitted_ids_are_unique(harvest):
    ids = {harvest.submit_request({"farmerId": "f1", "grade": "A", "quantity": 1})["id"] for _ in range(50)}
    assert len(ids) == 50


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"farmerId": "f1", "grade": "A"},
        {"farmerId": "f1", "quantity": 10},
        {"grade": "A", "quantity": 10},
        {"farmerId": "f1", "grade": "Z", "quantity": 10},
        {"farmerId": "f1", "grade": "A", "quantity": -4},
    ],
)
def test_submit_rejects_invalid_payloads(harvest, payload):
    with pytest.raises(ValidationError):
        harvest.submit_request(payload)


def test_update_status_transitions_request(harvest):
    created = harvest.submit_request({"farmerId": "f1", "grade": "A", "quantity": 10})

    updated = harvest.update_status(created["id"], {"status": "Approved"})
    assert updated["status"] == "Approved"
    assert harvest.list_requests("f1")[0]["status"] == "Approved"


def test_update_status_unknown_id(harvest):
    with pytest.raises(NotFound):
        harvest.update_status("req_missing", {"status": "Rejected"})


@pytest.mark.parametrize("payload", [{}, {"status": "Eaten"}])
def test_update_status_validates(harvest, payload):
    created = harvest.submit_request({"farmerId": "f1", "grade": "A", "quantity": 10})
    with pytest.raises(ValidationError):
        harvest.update_status(created["id"], payload)


# ---------------------------------------------------------
# market
# ---------------------------------------------------------
def test_market_defaults_to_open(market):
    assert market.get_status() is True


def test_market_status_round_trip(market):
    assert market.set_status({"isOpen": False}) is False
    assert market.get_status() is False


@pytest.mark.parametrize("payload", [{}, {"isOpen": "yes"}])
def test_market_status_requires_boolean(market, payload):
    with pytest.raises(ValidationError):
        market.set_status(payload)


def test_prices_seeded_on_first_read(market, documents):
    prices = market.list_prices()

    assert [p["grade"] for p in prices] == ["Premium", "A", "B", "C"]
    assert all(p["previousPrice"] is None for p in prices)
    # second read does not seed again
    market.list_prices()
    assert documents.count("market_prices") == 4


def test_price_update_shifts_previous_price(market):
    market.update_price({"grade": "Premium", "price": 500})

    updated = market.update_price({"grade": "Premium", "price": 550})
    assert (updated["grade"], updated["price"], updated["previousPrice"]) == ("Premium", 550, 500)

    updated = market.update_price({"grade": "Premium", "price": 600})
    assert (updated["price"], updated["previousPrice"]) == (600, 550)

    stored = [p for p in market.list_prices() if p["grade"] == "Premium"]
    assert len(stored) == 1
    assert (stored[0]["price"], stored[0]["previousPrice"]) == (600, 550)


@pytest.mark.parametrize(
    "payload",
    [
        {"grade": "Premium"},
        {"grade": "Premium", "price": "550"},
        {"grade": "Premium", "price": True},
        {"grade": "Premium", "price": -1},
        {"grade": "Golden", "price": 10},
    ],
)
def test_price_update_validates(market, payload):
    with pytest.raises(ValidationError):
        market.update_price(payload)
