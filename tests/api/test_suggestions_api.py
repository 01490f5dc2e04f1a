import pytest


ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
CAROL = "0x" + "c3" * 20
DAVE = "0x" + "d4" * 20
ERIN = "0x" + "e5" * 20


def _persona(client, wallet, interests=(), looking_for=(), visibility="attendees", event_id=7):
    resp = client.post(
        "/v1/personas",
        json={
            "event_id": event_id,
            "display_name": wallet[-4:],
            "interests": list(interests),
            "looking_for": list(looking_for),
            "visibility": visibility,
        },
        headers={"X-Wallet-Address": wallet},
    )
    assert resp.status_code == 201
    return resp.json()["data"]


def _suggest(client, wallet, event_id=7, **params):
    return client.get(f"/v1/events/{event_id}/suggested-connections", params={"wallet": wallet, **params})


def test_suggestions_are_ranked_and_labelled(client):
    _persona(client, ALICE, ["zk", "defi", "dao"], ["cofounder"])
    _persona(client, BOB, ["zk"])
    _persona(client, CAROL, ["zk", "defi"], ["cofounder"])
    _persona(client, DAVE, ["gaming"])
    _persona(client, ERIN, ["zk", "defi", "dao"], ["cofounder"], visibility="private")

    resp = _suggest(client, ALICE)

    assert resp.status_code == 200
    body = resp.json()
    assert body["cached"] is False
    data = body["data"]
    assert [m["attendee"]["wallet_address"] for m in data] == [CAROL, BOB]

    top = data[0]
    assert top["score"] == 50
    assert top["percentage"] == 50
    assert top["shared_interests"] == ["zk", "defi"]
    assert top["reasons"] == [
        "You both are interested in #zk, #defi",
        "You both are looking for cofounder",
    ]
    assert top["quality"]["label"] == "Good Match"
    assert data[1]["quality"]["label"] == "Low Match"


def test_second_call_is_served_from_cache(client):
    _persona(client, ALICE, ["zk"])
    _persona(client, BOB, ["zk"])

    assert _suggest(client, ALICE).json()["cached"] is False

    _persona(client, CAROL, ["zk"])
    resp = _suggest(client, ALICE.upper().replace("0X", "0x"), limit=1)
    body = resp.json()
    assert body["cached"] is True
    assert [m["attendee"]["wallet_address"] for m in body["data"]] == [BOB]


def test_limit_bounds(client):
    assert _suggest(client, ALICE, limit=0).status_code == 400
    assert _suggest(client, ALICE, limit=21).status_code == 400


def test_wallet_is_required(client):
    assert client.get("/v1/events/7/suggested-connections").status_code == 400


def test_no_persona_is_404(client):
    _persona(client, BOB, ["zk"])
    assert _suggest(client, ALICE).status_code == 404


def test_alone_at_event(client):
    _persona(client, ALICE, ["zk"])
    _persona(client, BOB, ["zk"], event_id=8)

    body = _suggest(client, ALICE).json()
    assert body["data"] == []
    assert body["message"] == "No other attendees found for suggestions"


def test_cached_list_expires_after_an_hour(client, fake_redis):
    _persona(client, ALICE, ["zk"])
    _persona(client, BOB, ["zk"])

    _suggest(client, ALICE)

    key = f"suggestions:7:{ALICE}"
    assert 3500 < fake_redis.ttl(key) <= 3600

    fake_redis.delete(key)
    assert _suggest(client, ALICE).json()["cached"] is False


@pytest.mark.parametrize("event_id", ["abc", "0", "-3"])
def test_invalid_event_id_is_400(client, event_id):
    resp = _suggest(client, ALICE, event_id=event_id)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid event ID"
