import pytest
from services.inquiries_service.models import NewsletterSubscriber, Registration
from sqlalchemy import false, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from tests.factories import RegistrationFactory


def _registration_payload(**overrides):
    payload = {
        "firstName": "Jamie",
        "lastName": "Rivera",
        "email": "jamie.rivera@example.com",
        "phone": "+15551234567",
        "athleteAge": 8,
        "interests": "Ninja, Tumbling",
        "message": "Is there a trial class on Saturdays?",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Public registration form
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_registration(client, db_session):
    response = await client.post("/api/registrations", json=_registration_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Registration submitted successfully"

    stored = await db_session.get(Registration, body["data"]["id"])
    assert stored.email == "jamie.rivera@example.com"
    assert stored.athlete_age == 8
    assert stored.archived is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blank_optional_fields_are_stored_as_null(client, db_session):
    response = await client.post(
        "/api/registrations",
        json=_registration_payload(phone="", athleteAge="", message=""),
    )
    assert response.status_code == 200

    stored = await db_session.get(Registration, response.json()["data"]["id"])
    assert stored.phone is None
    assert stored.athlete_age is None
    assert stored.message is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_registration_email_conflicts(client):
    await client.post("/api/registrations", json=_registration_payload())

    response = await client.post(
        "/api/registrations",
        json=_registration_payload(email="JAMIE.RIVERA@example.com"),
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Email already registered"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "path, payload, message",
    [
        ("/api/registrations", _registration_payload(), "Email already registered"),
        ("/api/newsletter", {"email": "jamie.rivera@example.com"}, "Email already subscribed"),
    ],
)
async def test_concurrent_duplicate_hits_unique_constraint(
    client, monkeypatch, path, payload, message
):
    first = await client.post(path, json=payload)
    assert first.status_code == 200

    # Second submission passes the lookup as if the first had not committed yet
    original_execute = AsyncSession.execute

    async def stale_execute(self, statement, *args, **kwargs):
        return await original_execute(self, statement.where(false()), *args, **kwargs)

    monkeypatch.setattr(AsyncSession, "execute", stale_execute)

    response = await client.post(path, json=payload)
    assert response.status_code == 409
    assert response.json()["message"] == message


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"firstName": "J"}, "firstName"),
        ({"email": "not-an-email"}, "email"),
        ({"athleteAge": 4}, "athleteAge"),
        ({"athleteAge": 19}, "athleteAge"),
        ({"phone": "call me"}, "phone"),
    ],
)
async def test_registration_validation(client, overrides, field):
    response = await client.post("/api/registrations", json=_registration_payload(**overrides))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert any(error.startswith(f"{field}:") for error in body["errors"])


# ---------------------------------------------------------------------------
# Newsletter
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_newsletter_subscribe_once(client, db_session):
    response = await client.post("/api/newsletter", json={"email": "fan@example.com"})
    assert response.status_code == 200
    assert response.json()["message"] == "Successfully subscribed to newsletter"

    again = await client.post("/api/newsletter", json={"email": "Fan@Example.com"})
    assert again.status_code == 409
    assert again.json()["message"] == "Email already subscribed"

    count = await db_session.scalar(select(func.count(NewsletterSubscriber.id)))
    assert count == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_newsletter_rejects_bad_email(client):
    response = await client.post("/api/newsletter", json={"email": "nope"})
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Admin inquiry management
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_lists_active_registrations(client, db_session, admin_headers):
    active = RegistrationFactory.create(first_name="Active")
    archived = RegistrationFactory.create(first_name="Old", archived=True)
    db_session.add_all([active, archived])
    await db_session.commit()

    response = await client.get("/api/admin/registrations", headers=admin_headers)
    assert response.status_code == 200
    names = [r["firstName"] for r in response.json()["data"]]
    assert names == ["Active"]

    response = await client.get(
        "/api/admin/registrations",
        params={"includeArchived": "true"},
        headers=admin_headers,
    )
    assert {r["firstName"] for r in response.json()["data"]} == {"Active", "Old"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_updates_registration(client, db_session, admin_headers):
    first = RegistrationFactory.create(email="first@example.com")
    second = RegistrationFactory.create(email="second@example.com")
    db_session.add_all([first, second])
    await db_session.commit()

    response = await client.put(
        f"/api/admin/registrations/{first.id}",
        json={"interests": "Parkour", "athleteAge": 10},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["interests"] == "Parkour"
    assert data["athleteAge"] == 10
    assert data["email"] == "first@example.com"

    clash = await client.put(
        f"/api/admin/registrations/{first.id}",
        json={"email": "SECOND@example.com"},
        headers=admin_headers,
    )
    assert clash.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_delete_archives_registration(client, db_session, admin_headers):
    registration = RegistrationFactory.create()
    db_session.add(registration)
    await db_session.commit()

    response = await client.delete(
        f"/api/admin/registrations/{registration.id}", headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["archived"] is True

    archived = await db_session.scalar(
        select(Registration.archived).where(Registration.id == registration.id)
    )
    assert archived is True

    missing = await client.delete("/api/admin/registrations/9999", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Registration not found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_lists_newsletter_subscribers(client, db_session, admin_headers):
    db_session.add(NewsletterSubscriber(email="reader@example.com"))
    await db_session.commit()

    response = await client.get("/api/admin/newsletter", headers=admin_headers)
    assert response.status_code == 200
    assert [s["email"] for s in response.json()["data"]] == ["reader@example.com"]
