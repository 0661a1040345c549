from sqlalchemy import func, select

from app import app as fastapi_app
from core.settings import settings
from fintechs.stripe_client import get_payment_client
from models.models import PremiumTransaction, Property
from tests.fixtures.helpers import seed_property
from tests.fixtures.mocks import auth_headers


async def create_intent(client, user, prop):
    return await client.post(
        "/api/create-payment-intent",
        json={"propertyId": prop.id},
        headers=auth_headers(user.id),
    )


async def verify(client, user, prop, intent_id):
    return await client.post(
        "/api/premium-listing/verify",
        json={"paymentIntentId": intent_id, "propertyId": prop.id},
        headers=auth_headers(user.id),
    )


async def ledger_count(db_session) -> int:
    return await db_session.scalar(select(func.count(PremiumTransaction.id)))


async def test_create_payment_intent(client, db_session, seller, mock_payment_client):
    prop = await seed_property(db_session, seller)

    res = await create_intent(client, seller, prop)

    assert res.status_code == 200
    body = res.json()
    assert body["amount"] == settings.PREMIUM_LISTING_PRICE == 99900
    assert body["currency"] == "usd"
    assert body["clientSecret"]
    metadata = mock_payment_client.intents[body["paymentIntentId"]]["metadata"]
    assert metadata == {"propertyId": str(prop.id), "userId": seller.id}


async def test_only_owner_can_pay_for_premium(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)

    res = await create_intent(client, buyer, prop)

    assert res.status_code == 403


async def test_verify_succeeded_payment_upgrades_once(
    client, db_session, seller, mock_payment_client
):
    prop = await seed_property(db_session, seller)
    intent_id = (await create_intent(client, seller, prop)).json()["paymentIntentId"]
    mock_payment_client.set_status(intent_id, "succeeded")

    first = await verify(client, seller, prop, intent_id)
    second = await verify(client, seller, prop, intent_id)

    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["property"]["isPremium"] is True
    assert first.json()["property"]["premiumUntil"] is not None
    assert second.status_code == 200
    assert second.json()["success"] is True
    assert await ledger_count(db_session) == 1

    row = (await db_session.execute(select(PremiumTransaction))).scalar_one()
    assert row.amount == 99900
    assert row.stripe_payment_id == intent_id
    assert row.user_id == seller.id
    assert row.property_id == prop.id


async def test_verify_unfinished_payment_changes_nothing(
    client, db_session, seller, mock_payment_client
):
    prop = await seed_property(db_session, seller)
    intent_id = (await create_intent(client, seller, prop)).json()["paymentIntentId"]
    mock_payment_client.set_status(intent_id, "processing")

    res = await verify(client, seller, prop, intent_id)

    assert res.status_code == 400
    assert res.json()["success"] is False
    assert await ledger_count(db_session) == 0
    premium = await db_session.scalar(select(Property.is_premium).where(Property.id == prop.id))
    assert premium is False


async def test_verify_rejects_payment_for_another_property(
    client, db_session, seller, mock_payment_client
):
    paid_for = await seed_property(db_session, seller)
    other = await seed_property(db_session, seller)
    intent_id = (await create_intent(client, seller, paid_for)).json()["paymentIntentId"]
    mock_payment_client.set_status(intent_id, "succeeded")

    res = await verify(client, seller, other, intent_id)

    assert res.status_code == 400
    assert res.json()["success"] is False
    assert await ledger_count(db_session) == 0


async def test_verify_rejects_payment_without_listing_metadata(
    client, db_session, seller, mock_payment_client
):
    prop = await seed_property(db_session, seller)
    mock_payment_client.intents["pi_other"] = {
        "id": "pi_other",
        "client_secret": "pi_other_secret",
        "status": "succeeded",
        "amount": 50,
        "currency": "usd",
        "metadata": {},
    }

    res = await verify(client, seller, prop, "pi_other")

    assert res.status_code == 400
    assert res.json()["success"] is False
    assert await ledger_count(db_session) == 0
    premium = await db_session.scalar(select(Property.is_premium).where(Property.id == prop.id))
    assert premium is False


async def test_verify_rejects_wrong_amount_or_currency(
    client, db_session, seller, mock_payment_client
):
    prop = await seed_property(db_session, seller)
    metadata = {"propertyId": str(prop.id), "userId": seller.id}
    mock_payment_client.intents["pi_cheap"] = {
        "id": "pi_cheap",
        "client_secret": "pi_cheap_secret",
        "status": "succeeded",
        "amount": 50,
        "currency": "usd",
        "metadata": metadata,
    }
    mock_payment_client.intents["pi_eur"] = {
        "id": "pi_eur",
        "client_secret": "pi_eur_secret",
        "status": "succeeded",
        "amount": settings.PREMIUM_LISTING_PRICE,
        "currency": "eur",
        "metadata": metadata,
    }

    cheap = await verify(client, seller, prop, "pi_cheap")
    eur = await verify(client, seller, prop, "pi_eur")

    assert cheap.status_code == 400
    assert eur.status_code == 400
    assert await ledger_count(db_session) == 0


async def test_ledger_survives_property_deletion(client, db_session, seller, mock_payment_client):
    prop = await seed_property(db_session, seller)
    intent_id = (await create_intent(client, seller, prop)).json()["paymentIntentId"]
    mock_payment_client.set_status(intent_id, "succeeded")
    await verify(client, seller, prop, intent_id)

    res = await client.delete(f"/api/properties/{prop.id}", headers=auth_headers(seller.id))

    assert res.status_code == 200
    property_id = await db_session.scalar(select(PremiumTransaction.property_id))
    assert property_id is None
    assert await ledger_count(db_session) == 1


async def test_payments_disabled_returns_503(client, db_session, seller):
    del fastapi_app.dependency_overrides[get_payment_client]
    prop = await seed_property(db_session, seller)

    res = await create_intent(client, seller, prop)

    assert res.status_code == 503
