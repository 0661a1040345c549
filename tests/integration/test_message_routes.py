from datetime import datetime

from models.models import Message
from tests.fixtures.helpers import seed_property
from tests.fixtures.mocks import auth_headers


async def send(client, sender, recipient, prop, text):
    return await client.post(
        "/api/messages",
        json={"toUserId": recipient.id, "propertyId": prop.id, "message": text},
        headers=auth_headers(sender.id),
    )


async def test_send_message(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)

    res = await send(client, buyer, seller, prop, "Is it still available?")

    assert res.status_code == 201
    body = res.json()
    assert body["fromUserId"] == buyer.id
    assert body["toUserId"] == seller.id
    assert body["isRead"] is False


async def test_send_validations(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)
    headers = auth_headers(buyer.id)

    to_self = await send(client, buyer, buyer, prop, "hello me")
    missing_property = await client.post(
        "/api/messages",
        json={"toUserId": seller.id, "propertyId": 999, "message": "hi"},
        headers=headers,
    )
    missing_recipient = await client.post(
        "/api/messages",
        json={"toUserId": "ghost", "propertyId": prop.id, "message": "hi"},
        headers=headers,
    )
    blank = await send(client, buyer, seller, prop, "  ")

    assert to_self.status_code == 400
    assert missing_property.status_code == 404
    assert missing_recipient.status_code == 404
    assert blank.status_code == 400


async def test_inbox_lists_sent_and_received_newest_first(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)
    db_session.add_all(
        [
            Message(
                from_user_id=buyer.id,
                to_user_id=seller.id,
                property_id=prop.id,
                message="first",
                created_at=datetime(2026, 2, 1, 9, 0),
            ),
            Message(
                from_user_id=seller.id,
                to_user_id=buyer.id,
                property_id=prop.id,
                message="second",
                created_at=datetime(2026, 2, 1, 10, 0),
            ),
        ]
    )
    await db_session.commit()

    res = await client.get("/api/messages", headers=auth_headers(buyer.id))

    assert [m["message"] for m in res.json()] == ["second", "first"]


async def test_conversation_is_oldest_first_and_scoped(
    client, db_session, seller, buyer, other_buyer
):
    prop = await seed_property(db_session, seller)
    db_session.add_all(
        [
            Message(
                from_user_id=buyer.id,
                to_user_id=seller.id,
                property_id=prop.id,
                message="question",
                created_at=datetime(2026, 2, 1, 9, 0),
            ),
            Message(
                from_user_id=seller.id,
                to_user_id=buyer.id,
                property_id=prop.id,
                message="answer",
                created_at=datetime(2026, 2, 1, 9, 30),
            ),
            Message(
                from_user_id=other_buyer.id,
                to_user_id=seller.id,
                property_id=prop.id,
                message="someone else",
                created_at=datetime(2026, 2, 1, 9, 15),
            ),
        ]
    )
    await db_session.commit()

    res = await client.get(
        f"/api/conversations/{seller.id}/{prop.id}", headers=auth_headers(buyer.id)
    )

    assert res.status_code == 200
    assert [m["message"] for m in res.json()] == ["question", "answer"]


async def test_conversation_for_missing_property_is_404(client, seller, buyer):
    res = await client.get(f"/api/conversations/{seller.id}/999", headers=auth_headers(buyer.id))

    assert res.status_code == 404


async def test_property_messages_owner_only(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)
    await send(client, buyer, seller, prop, "hello")

    owner = await client.get(f"/api/properties/{prop.id}/messages", headers=auth_headers(seller.id))
    stranger = await client.get(
        f"/api/properties/{prop.id}/messages", headers=auth_headers(buyer.id)
    )

    assert owner.status_code == 200
    assert len(owner.json()) == 1
    assert stranger.status_code == 403


async def test_mark_read_is_idempotent(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)
    message_id = (await send(client, buyer, seller, prop, "hello")).json()["id"]

    first = await client.post(f"/api/messages/{message_id}/read", headers=auth_headers(seller.id))
    second = await client.post(f"/api/messages/{message_id}/read", headers=auth_headers(seller.id))

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json() == {"success": True, "id": message_id, "isRead": True}


async def test_only_recipient_marks_read(client, db_session, seller, buyer, other_buyer):
    prop = await seed_property(db_session, seller)
    message_id = (await send(client, buyer, seller, prop, "hello")).json()["id"]

    by_sender = await client.post(
        f"/api/messages/{message_id}/read", headers=auth_headers(buyer.id)
    )
    by_stranger = await client.post(
        f"/api/messages/{message_id}/read", headers=auth_headers(other_buyer.id)
    )
    missing = await client.post("/api/messages/999/read", headers=auth_headers(seller.id))

    assert by_sender.status_code == 403
    assert by_stranger.status_code == 403
    assert missing.status_code == 404
