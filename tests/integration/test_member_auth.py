import pytest
from tests.factories import TEST_PASSWORD, MemberFactory, bearer, member_headers_for


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("identifier", ["casey.p", "CASEY@Example.com"])
async def test_member_login(client, db_session, identifier):
    member = MemberFactory.create(
        first_name="Casey",
        last_name="Parker",
        email="casey@example.com",
        username="Casey.P",
        password=TEST_PASSWORD,
    )
    db_session.add(member)
    await db_session.commit()

    response = await client.post(
        "/api/members/login", json={"username": identifier, "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["member"]["id"] == member.id
    assert data["member"]["hasLogin"] is True
    assert "passwordHash" not in data["member"]

    me = await client.get("/api/members/me", headers=bearer(data["token"]))
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "casey@example.com"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_member_without_password_cannot_login(client, db_session):
    db_session.add(MemberFactory.create(email="nologin@example.com"))
    await db_session.commit()

    response = await client.post(
        "/api/members/login",
        json={"username": "nologin@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_member_wrong_password(client, db_session):
    db_session.add(MemberFactory.create(email="casey@example.com", password=TEST_PASSWORD))
    await db_session.commit()

    response = await client.post(
        "/api/members/login",
        json={"username": "casey@example.com", "password": "not-it"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inactive_member_cannot_login(client, db_session):
    db_session.add(
        MemberFactory.create(
            email="gone@example.com",
            password=TEST_PASSWORD,
            status="archived",
            is_active=False,
        )
    )
    await db_session.commit()

    response = await client.post(
        "/api/members/login",
        json={"username": "gone@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Member account is inactive"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_rejects_admin_token(client, admin_headers):
    response = await client.get("/api/members/me", headers=admin_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Member account required"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_for_deleted_member(client, db_session):
    member = MemberFactory.create()
    db_session.add(member)
    await db_session.commit()
    headers = member_headers_for(member)
    await db_session.delete(member)
    await db_session.commit()

    response = await client.get("/api/members/me", headers=headers)
    assert response.status_code == 404
