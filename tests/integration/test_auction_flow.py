"""End-to-end auction flow through the HTTP API (in-memory backend)."""
from datetime import timedelta

from httpx import AsyncClient

from src.au_common.clock import ManualClock
from src.au_gateway.auth.jwt_handler import create_access_token


def auth(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


SELLER = auth("seller-1")
ALICE = auth("alice")
BOB = auth("bob")


async def _create_auction(client: AsyncClient, base_price: int = 100, days: int = 1) -> str:
    resp = await client.post("/api/v1/listings", headers=SELLER, json={
        "title": "Brass lamp",
        "sale_type": "auction",
        "base_price": base_price,
        "auction_duration_days": days,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_full_auction_lifecycle(client: AsyncClient, clock: ManualClock) -> None:
    lid = await _create_auction(client)

    # Opening bid at the base price is too low
    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 100})
    assert resp.status_code == 422
    assert resp.json()["code"] == 4003
    assert resp.json()["data"] == {"reason": "BID_TOO_LOW"}

    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 150})
    assert resp.status_code == 201
    assert resp.json()["data"]["status"] == "WINNING"

    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=BOB, json={"amount": 200})
    assert resp.status_code == 201

    detail = (await client.get(f"/api/v1/listings/{lid}")).json()["data"]
    assert detail["current_price"] == 200
    assert detail["bid_count"] == 2
    assert detail["highest_bid"]["bidder_id"] == "bob"
    assert detail["listing"]["state"] == "OPEN"

    highest = (await client.get(f"/api/v1/listings/{lid}/bids/highest")).json()["data"]
    assert highest["amount"] == 200

    bids = (await client.get(f"/api/v1/listings/{lid}/bids")).json()["data"]
    assert bids["count"] == 2
    assert [b["status"] for b in bids["items"]] == ["WINNING", "OUTBID"]

    # Time passes; the auction ends
    clock.advance(timedelta(days=1))

    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 999})
    assert resp.status_code == 422
    assert resp.json()["code"] == 4002

    ended = (await client.get("/api/v1/listings", params={"view": "ended"})).json()["data"]
    assert [x["id"] for x in ended["items"]] == [lid]
    assert ended["items"][0]["state"] == "SOLD"
    active = (await client.get("/api/v1/listings")).json()["data"]
    assert active["items"] == []

    # Relist opens a fresh window; the floor is still the previous high
    resp = await client.post(f"/api/v1/listings/{lid}/relist", headers=SELLER)
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["state"] == "OPEN"

    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 200})
    assert resp.json()["code"] == 4003
    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 201})
    assert resp.status_code == 201

    # Delete voids every bid
    resp = await client.delete(f"/api/v1/listings/{lid}", headers=SELLER)
    assert resp.status_code == 200
    assert resp.json()["data"]["voided_bids"] == 3

    resp = await client.get(f"/api/v1/listings/{lid}")
    assert resp.status_code == 404
    assert resp.json()["code"] == 3001


async def test_fixed_price_listing_rejects_bids(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/listings", headers=SELLER, json={
        "title": "Oak desk", "sale_type": "fixed", "base_price": 9000,
    })
    assert resp.status_code == 201
    lid = resp.json()["data"]["id"]
    assert resp.json()["data"]["state"] == "NOT_AUCTION"

    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 9500})
    assert resp.status_code == 422
    assert resp.json()["code"] == 4001


async def test_relist_while_open_conflicts(client: AsyncClient) -> None:
    lid = await _create_auction(client)
    resp = await client.post(f"/api/v1/listings/{lid}/relist", headers=SELLER, json={})
    assert resp.status_code == 409
    assert resp.json()["code"] == 3003


async def test_update_end_time(client: AsyncClient, clock: ManualClock) -> None:
    lid = await _create_auction(client)
    new_end = (clock.now() + timedelta(days=4)).isoformat()

    resp = await client.put(
        f"/api/v1/listings/{lid}/end-time", headers=SELLER, json={"auction_end_time": new_end}
    )
    assert resp.status_code == 200, resp.text

    clock.advance(timedelta(days=2))
    resp = await client.post(f"/api/v1/listings/{lid}/bids", headers=ALICE, json={"amount": 150})
    assert resp.status_code == 201


async def test_invalid_duration_rejected(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/listings", headers=SELLER, json={
        "title": "Lamp", "sale_type": "auction", "base_price": 100, "auction_duration_days": 0,
    })
    assert resp.status_code == 422
    assert resp.json()["code"] == 3002


async def test_writes_require_token(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/listings", json={
        "title": "Lamp", "sale_type": "fixed", "base_price": 100,
    })
    assert resp.status_code == 401

    lid = await _create_auction(client)
    resp = await client.post(f"/api/v1/listings/{lid}/bids", json={"amount": 500})
    assert resp.status_code == 401


async def test_only_seller_can_manage_listing(client: AsyncClient) -> None:
    lid = await _create_auction(client)
    resp = await client.delete(f"/api/v1/listings/{lid}", headers=ALICE)
    assert resp.status_code == 403
    assert resp.json()["code"] == 3005

    resp = await client.patch(f"/api/v1/listings/{lid}", headers=ALICE, json={"title": "Mine"})
    assert resp.status_code == 403


async def test_unknown_listing_bid_is_404(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/listings/nope/bids", headers=ALICE, json={"amount": 500})
    assert resp.status_code == 404
    assert resp.json()["code"] == 3001


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/listings", headers={"X-Request-ID": "trace-42"})
    assert resp.headers["X-Request-ID"] == "trace-42"
    assert resp.json()["request_id"] == "trace-42"


async def test_reserve_rules_on_edit(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/listings", headers=SELLER, json={
        "title": "Oak desk", "sale_type": "fixed", "base_price": 9000,
    })
    fixed_id = resp.json()["data"]["id"]
    resp = await client.patch(
        f"/api/v1/listings/{fixed_id}", headers=SELLER, json={"reserve_price": 10000}
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == 3006

    lid = await _create_auction(client)
    resp = await client.patch(f"/api/v1/listings/{lid}", headers=SELLER, json={"reserve_price": 500})
    assert resp.json()["data"]["reserve_price"] == 500
    resp = await client.patch(f"/api/v1/listings/{lid}", headers=SELLER, json={"clear_reserve": True})
    assert resp.status_code == 200
    assert resp.json()["data"]["reserve_price"] is None
