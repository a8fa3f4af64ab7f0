"""
Integration tests for the explore endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.db import Base
from app.dependencies.db import get_db
from app.main import app
from app.services.explore_service import explore_cache
from app import models  # noqa: F401


USER_HEADERS = {"x-user-id": "7"}


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    explore_cache.clear()
    yield TestClient(app)
    app.dependency_overrides = {}


def _add_balance(client, program_id, balance):
    response = client.post(
        "/api/v1/balances",
        json={"program_id": program_id, "balance": balance},
        headers=USER_HEADERS,
    )
    assert response.status_code == 201


def test_explore_requires_user(client):
    assert client.get("/api/v1/explore").status_code == 401


def test_explore_without_balances_is_empty(client):
    response = client.get("/api/v1/explore", headers=USER_HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["opportunities"] == []
    assert data["positioning_options"] == []
    assert data["summary"]["total"] == 0


def test_explore_stored_balances(client):
    _add_balance(client, "chase-ur", 80000)

    response = client.get(
        "/api/v1/explore",
        params={"destination": "Japan", "home_airport": "bos"},
        headers=USER_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["destination"] == "Japan"
    assert data["home_airport"] == "BOS"
    ids = [o["sweet_spot"]["id"] for o in data["opportunities"]]
    assert "ana-first-virgin" in ids
    assert "cathay-first-alaska" not in ids  # Alaska is not a Chase partner
    assert data["summary"]["affordable"] >= 1
    assert 0 < len(data["positioning_options"]) <= 4
    assert {p["alternate_origin"] for p in data["positioning_options"]} <= {"LAX", "SFO"}
    assert "Asia" in data["available_destinations"]
    assert len(data["fingerprint"]) == 64


def test_explore_remembers_last_filters(client):
    _add_balance(client, "chase-ur", 80000)
    client.get(
        "/api/v1/explore",
        params={"destination": "Europe", "home_airport": "MIA"},
        headers=USER_HEADERS,
    )

    response = client.get("/api/v1/explore", headers=USER_HEADERS)

    data = response.json()
    assert data["destination"] == "Europe"
    assert data["home_airport"] == "MIA"


def test_explore_reflects_balance_updates(client):
    _add_balance(client, "chase-ur", 80000)
    before = client.get("/api/v1/explore", params={"destination": "Japan"}, headers=USER_HEADERS).json()

    client.put("/api/v1/balances/chase-ur", json={"balance": 1000}, headers=USER_HEADERS)
    after = client.get("/api/v1/explore", params={"destination": "Japan"}, headers=USER_HEADERS).json()

    assert before["summary"]["affordable"] > 0
    assert after["summary"]["affordable"] == 0
    assert before["fingerprint"] != after["fingerprint"]


def test_evaluate_is_stateless(client):
    """80,000 Chase points cover the 72,500 point ANA First award via Virgin Atlantic."""
    response = client.post(
        "/api/v1/explore/evaluate",
        json={"balances": [{"program_id": "chase-ur", "balance": 80000}], "destination": "Japan"},
    )

    assert response.status_code == 200
    opportunity = next(
        o for o in response.json()["opportunities"] if o["sweet_spot"]["id"] == "ana-first-virgin"
    )
    assert opportunity["can_afford"] is True
    assert opportunity["points_shortfall"] == 0
    assert opportunity["percentage_owned"] == 100
    assert opportunity["transfer_source"]["program_id"] == "chase-ur"
    assert response.json()["positioning_options"] == []


def test_evaluate_rejects_negative_balance(client):
    response = client.post(
        "/api/v1/explore/evaluate",
        json={"balances": [{"program_id": "chase-ur", "balance": -1}]},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_evaluate_unknown_destination(client):
    response = client.post(
        "/api/v1/explore/evaluate",
        json={"balances": [{"program_id": "chase-ur", "balance": 80000}], "destination": "Atlantis"},
    )

    regions = {o["sweet_spot"]["destination_region"] for o in response.json()["opportunities"]}
    assert regions == {"Various"}


def test_booking_link(client):
    response = client.get(
        "/api/v1/explore/booking-link",
        params={"program_id": "alaska-mileageplan", "origin": "SEA", "destination": "HND"},
    )

    assert response.status_code == 200
    assert response.json()["url"].startswith("https://www.alaskaair.com/search/results?A=1&O=SEA&D=HND")


def test_booking_link_unknown_program(client):
    response = client.get("/api/v1/explore/booking-link", params={"program_id": "nope"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_opportunity_booking_links(client):
    _add_balance(client, "chase-ur", 80000)

    response = client.get(
        "/api/v1/explore/opportunities/opp-ana-first-virgin/booking-links",
        params={"origin": "JFK", "destination": "HND"},
        headers=USER_HEADERS,
    )

    assert response.status_code == 200
    links = response.json()
    assert links[0]["is_primary"] is True
    assert "virginatlantic.com" in links[0]["url"]
    assert links[1]["label"].startswith("Transfer 72,500 points from Chase Ultimate Rewards")


def test_unreachable_opportunity_links_404(client):
    _add_balance(client, "chase-ur", 80000)

    response = client.get(
        "/api/v1/explore/opportunities/opp-cathay-first-alaska/booking-links",
        headers=USER_HEADERS,
    )

    assert response.status_code == 404
