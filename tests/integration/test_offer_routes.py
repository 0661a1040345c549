from tests.fixtures.helpers import seed_property
from tests.fixtures.mocks import auth_headers


async def make_offer(client, buyer, prop, amount=250000, message=None):
    body = {"propertyId": prop.id, "amount": amount}
    if message is not None:
        body["message"] = message
    return await client.post("/api/offers", json=body, headers=auth_headers(buyer.id))


async def test_offer_lifecycle(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller, price=300000)

    created = await make_offer(client, buyer, prop, amount=280000, message="Cash buyer")
    assert created.status_code == 201
    offer = created.json()
    assert offer["status"] == "pending"
    assert offer["buyerId"] == buyer.id

    listed = await client.get(f"/api/properties/{prop.id}/offers", headers=auth_headers(seller.id))
    assert [o["id"] for o in listed.json()] == [offer["id"]]

    accepted = await client.put(
        f"/api/offers/{offer['id']}/status",
        json={"status": "accepted"},
        headers=auth_headers(seller.id),
    )
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    mine = await client.get(f"/api/users/{buyer.id}/offers", headers=auth_headers(buyer.id))
    assert [o["status"] for o in mine.json()] == ["accepted"]


async def test_resolved_offer_cannot_change_again(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)
    offer_id = (await make_offer(client, buyer, prop)).json()["id"]
    headers = auth_headers(seller.id)

    await client.put(f"/api/offers/{offer_id}/status", json={"status": "rejected"}, headers=headers)
    again = await client.put(
        f"/api/offers/{offer_id}/status", json={"status": "accepted"}, headers=headers
    )
    back = await client.put(
        f"/api/offers/{offer_id}/status", json={"status": "pending"}, headers=headers
    )

    assert again.status_code == 400
    assert back.status_code == 400


async def test_only_owner_resolves_offers(client, db_session, seller, buyer, other_buyer):
    prop = await seed_property(db_session, seller)
    offer_id = (await make_offer(client, buyer, prop)).json()["id"]

    by_buyer = await client.put(
        f"/api/offers/{offer_id}/status",
        json={"status": "accepted"},
        headers=auth_headers(buyer.id),
    )
    listing = await client.get(
        f"/api/properties/{prop.id}/offers", headers=auth_headers(other_buyer.id)
    )

    assert by_buyer.status_code == 403
    assert listing.status_code == 403


async def test_offer_validations(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)

    zero = await make_offer(client, buyer, prop, amount=0)
    negative = await make_offer(client, buyer, prop, amount=-5)
    own_listing = await make_offer(client, seller, prop)
    missing = await client.post(
        "/api/offers",
        json={"propertyId": 999, "amount": 1000},
        headers=auth_headers(buyer.id),
    )

    assert zero.status_code == 400
    assert negative.status_code == 400
    assert own_listing.status_code == 400
    assert missing.status_code == 404


async def test_user_offers_are_private(client, buyer, other_buyer, admin):
    stranger = await client.get(f"/api/users/{buyer.id}/offers", headers=auth_headers(other_buyer.id))
    by_admin = await client.get(f"/api/users/{buyer.id}/offers", headers=auth_headers(admin.id))

    assert stranger.status_code == 403
    assert by_admin.status_code == 200
