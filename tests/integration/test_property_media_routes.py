from tests.fixtures.helpers import seed_property
from tests.fixtures.mocks import auth_headers


async def test_owner_adds_images_listed_by_sort_order(client, db_session, seller):
    prop = await seed_property(db_session, seller)
    headers = auth_headers(seller.id)

    for url, order in (("https://img/b.jpg", 2), ("https://img/a.jpg", 1), ("https://img/c.jpg", 2)):
        res = await client.post(
            f"/api/properties/{prop.id}/images",
            json={"imageUrl": url, "sortOrder": order},
            headers=headers,
        )
        assert res.status_code == 201

    res = await client.get(f"/api/properties/{prop.id}/images")

    assert res.status_code == 200
    assert [i["imageUrl"] for i in res.json()] == [
        "https://img/a.jpg",
        "https://img/b.jpg",
        "https://img/c.jpg",
    ]


async def test_non_owner_cannot_add_media(client, db_session, seller, buyer):
    prop = await seed_property(db_session, seller)

    image = await client.post(
        f"/api/properties/{prop.id}/images",
        json={"imageUrl": "https://img/x.jpg"},
        headers=auth_headers(buyer.id),
    )
    feature = await client.post(
        f"/api/properties/{prop.id}/features",
        json={"feature": "Pool"},
        headers=auth_headers(buyer.id),
    )

    assert image.status_code == 403
    assert feature.status_code == 403


async def test_media_on_missing_property_is_404(client, seller):
    res = await client.post(
        "/api/properties/999/features",
        json={"feature": "Pool"},
        headers=auth_headers(seller.id),
    )

    assert res.status_code == 404
    assert (await client.get("/api/properties/999/images")).status_code == 404


async def test_delete_image_must_belong_to_property(client, db_session, seller):
    first = await seed_property(db_session, seller)
    second = await seed_property(db_session, seller)
    headers = auth_headers(seller.id)
    created = await client.post(
        f"/api/properties/{first.id}/images",
        json={"imageUrl": "https://img/1.jpg"},
        headers=headers,
    )
    image_id = created.json()["id"]

    wrong = await client.delete(f"/api/properties/{second.id}/images/{image_id}", headers=headers)
    right = await client.delete(f"/api/properties/{first.id}/images/{image_id}", headers=headers)

    assert wrong.status_code == 404
    assert right.status_code == 200
    assert (await client.get(f"/api/properties/{first.id}/images")).json() == []


async def test_features_add_list_and_delete(client, db_session, seller):
    prop = await seed_property(db_session, seller)
    headers = auth_headers(seller.id)

    garage = await client.post(
        f"/api/properties/{prop.id}/features", json={"feature": "Garage"}, headers=headers
    )
    await client.post(
        f"/api/properties/{prop.id}/features", json={"feature": "Fireplace"}, headers=headers
    )

    listed = await client.get(f"/api/properties/{prop.id}/features")
    assert [f["feature"] for f in listed.json()] == ["Garage", "Fireplace"]

    res = await client.delete(
        f"/api/properties/{prop.id}/features/{garage.json()['id']}", headers=headers
    )

    assert res.status_code == 200
    listed = await client.get(f"/api/properties/{prop.id}/features")
    assert [f["feature"] for f in listed.json()] == ["Fireplace"]


async def test_blank_feature_is_rejected(client, db_session, seller):
    prop = await seed_property(db_session, seller)

    res = await client.post(
        f"/api/properties/{prop.id}/features",
        json={"feature": "   "},
        headers=auth_headers(seller.id),
    )

    assert res.status_code == 400
