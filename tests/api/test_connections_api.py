from datetime import timedelta

from app.core.db import utcnow
from app.modules.connections.models import ConnectionRequest

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
CAROL = "0x" + "c3" * 20


def _as(wallet):
    return {"X-Wallet-Address": wallet}


def _request(client, sender, recipient, **body):
    return client.post("/v1/connections/request", json={"to_wallet": recipient, **body}, headers=_as(sender))


def test_request_returns_created_record(client):
    resp = _request(client, ALICE, BOB.upper().replace("0X", "0x"), message="gm")

    assert resp.status_code == 201
    body = resp.json()
    assert body["from_wallet"] == ALICE
    assert body["to_wallet"] == BOB
    assert body["status"] == "pending"
    assert body["is_global"] is True
    assert body["message"] == "gm"


def test_request_requires_wallet_header(client):
    resp = client.post("/v1/connections/request", json={"to_wallet": BOB})
    assert resp.status_code == 401


def test_request_rejects_malformed_recipient(client):
    assert _request(client, ALICE, "0x1234").status_code == 400
    assert _request(client, ALICE, "").status_code == 400


def test_self_request_is_400(client):
    resp = _request(client, ALICE, ALICE)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot send connection request to yourself"


def test_duplicate_is_409_but_other_scope_is_fine(client):
    assert _request(client, ALICE, BOB).status_code == 201
    assert _request(client, BOB, ALICE).status_code == 409
    assert _request(client, ALICE, BOB, event_id="evt1").status_code == 201


def test_accept_flow(client):
    created = _request(client, ALICE, BOB).json()

    resp = client.patch(f"/v1/connections/{created['id']}/accept", headers=_as(ALICE))
    assert resp.status_code == 403

    resp = client.patch(f"/v1/connections/{created['id']}/accept", headers=_as(BOB))
    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"

    resp = client.patch(f"/v1/connections/{created['id']}/accept", headers=_as(BOB))
    assert resp.status_code == 404

    notes = client.get("/v1/notifications", headers=_as(ALICE)).json()
    assert [n["type"] for n in notes] == ["connection_accepted"]


def test_rejected_pair_gets_429_with_retry_after(client, db):
    created = _request(client, ALICE, BOB).json()
    assert client.patch(f"/v1/connections/{created['id']}/reject", headers=_as(BOB)).status_code == 200

    resp = _request(client, ALICE, BOB)
    assert resp.status_code == 429
    assert resp.json()["detail"] == "You cannot send another request for 30 more days"
    assert resp.headers["Retry-After"] == str(30 * 24 * 60 * 60)

    # push the rejection past the cooldown
    row = db.get(ConnectionRequest, created["id"])
    row.updated_at = utcnow() - timedelta(days=31)
    db.commit()

    assert _request(client, ALICE, BOB).status_code == 201


def test_block_forbids_future_requests(client):
    created = _request(client, ALICE, BOB).json()

    assert client.patch(f"/v1/connections/{created['id']}/block", headers=_as(CAROL)).status_code == 403

    resp = client.patch(f"/v1/connections/{created['id']}/block", headers=_as(BOB))
    assert resp.status_code == 200
    assert resp.json()["status"] == "blocked"

    resp = _request(client, ALICE, BOB)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "You cannot send a connection request to this user"


def test_list_connections(client):
    _request(client, ALICE, BOB)
    _request(client, CAROL, ALICE, event_id="evt1")
    _request(client, BOB, CAROL)

    resp = client.get("/v1/connections", headers=_as(ALICE))
    assert resp.status_code == 200
    assert len(resp.json()) == 2

    resp = client.get("/v1/connections", params={"event_id": "evt1"}, headers=_as(ALICE))
    assert [c["from_wallet"] for c in resp.json()] == [CAROL]

    resp = client.get("/v1/connections", params={"global_only": "true"}, headers=_as(ALICE))
    assert [c["to_wallet"] for c in resp.json()] == [BOB]

    resp = client.get("/v1/connections", params={"status": "accepted"}, headers=_as(ALICE))
    assert resp.json() == []

    assert client.get("/v1/connections", params={"status": "bogus"}, headers=_as(ALICE)).status_code == 422


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
