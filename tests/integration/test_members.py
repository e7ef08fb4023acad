from datetime import date

import pytest
from services.academy_service.models import MemberProgram
from services.members_service.models import Member
from sqlalchemy import func, select
from tests.factories import (
    EnrollmentFactory,
    FamilyFactory,
    MemberFactory,
    ProgramFactory,
)

# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_member(client, admin_headers):
    response = await client.post(
        "/api/admin/members",
        json={
            "firstName": "Casey",
            "lastName": "Parker",
            "email": "casey@example.com",
            "username": "casey",
            "password": "flip-flop-123",
            "dateOfBirth": "2015-04-02",
            "phone": "",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Member created successfully"
    data = body["data"]
    assert data["status"] == "enrolled"
    assert data["isActive"] is True
    assert data["familyIsActive"] is True
    assert data["hasLogin"] is True
    assert data["phone"] is None
    assert data["age"] is not None
    assert "passwordHash" not in data


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_member_rejects_duplicates(client, db_session, admin_headers):
    db_session.add(MemberFactory.create(email="taken@example.com", username="taken"))
    await db_session.commit()

    response = await client.post(
        "/api/admin/members",
        json={"firstName": "A", "lastName": "B", "email": "TAKEN@example.com"},
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["message"] == "A member with this email already exists"

    response = await client.post(
        "/api/admin/members",
        json={"firstName": "A", "lastName": "B", "username": "Taken"},
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["message"] == "A member with this username already exists"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_member_rejects_password_over_bcrypt_limit(client, db_session, admin_headers):
    response = await client.post(
        "/api/admin/members",
        json={"firstName": "Long", "lastName": "Pass", "password": "x" * 100},
        headers=admin_headers,
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert any(error.startswith("password:") for error in body["errors"])

    # 72 ASCII bytes is still accepted
    response = await client.post(
        "/api/admin/members",
        json={"firstName": "Edge", "lastName": "Case", "password": "x" * 72},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert (await db_session.execute(select(func.count(Member.id)))).scalar_one() == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_member_unknown_family(client, admin_headers):
    response = await client.post(
        "/api/admin/members",
        json={"firstName": "A", "lastName": "B", "familyId": 404},
        headers=admin_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Family not found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_member_not_found(client, admin_headers):
    response = await client.get("/api/admin/members/12345", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Member not found"


# ---------------------------------------------------------------------------
# Listing and search
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_members_search_and_archived(client, db_session, admin_headers):
    db_session.add_all(
        [
            MemberFactory.create(first_name="Casey", last_name="Parker"),
            MemberFactory.create(first_name="Jordan", last_name="Parker", email="jp@example.com"),
            MemberFactory.create(first_name="Robin", last_name="Solo", status="archived"),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/admin/members", headers=admin_headers)
    assert [m["firstName"] for m in response.json()["data"]] == ["Casey", "Jordan"]

    response = await client.get(
        "/api/admin/members", params={"search": "casey park"}, headers=admin_headers
    )
    assert [m["firstName"] for m in response.json()["data"]] == ["Casey"]

    response = await client.get(
        "/api/admin/members", params={"search": "JP@"}, headers=admin_headers
    )
    assert [m["firstName"] for m in response.json()["data"]] == ["Jordan"]

    response = await client.get(
        "/api/admin/members", params={"includeArchived": "true"}, headers=admin_headers
    )
    assert len(response.json()["data"]) == 3

    response = await client.get(
        "/api/admin/members", params={"status": "archived"}, headers=admin_headers
    )
    assert [m["firstName"] for m in response.json()["data"]] == ["Robin"]


# ---------------------------------------------------------------------------
# Update / archive / delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_member_partial(client, db_session, admin_headers):
    member = MemberFactory.create(first_name="Casey", medical_notes="Asthma")
    db_session.add(member)
    await db_session.commit()

    response = await client.put(
        f"/api/admin/members/{member.id}",
        json={"lastName": "Rivera", "firstName": None, "medicalNotes": None},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["firstName"] == "Casey"
    assert data["lastName"] == "Rivera"
    assert data["medicalNotes"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_archiving_last_active_member_deactivates_family(client, db_session, admin_headers):
    family = FamilyFactory.create(family_name="Parker")
    db_session.add(family)
    await db_session.flush()
    active = MemberFactory.create(first_name="Active", family_id=family.id)
    inactive = MemberFactory.create(first_name="Inactive", family_id=family.id, is_active=False)
    db_session.add_all([active, inactive])
    await db_session.commit()

    response = await client.patch(
        f"/api/admin/members/{active.id}/archive", headers=admin_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "archived"
    assert data["isActive"] is False
    assert data["familyIsActive"] is False

    flags = (
        await db_session.execute(
            select(Member.id, Member.family_is_active).where(Member.family_id == family.id)
        )
    ).all()
    assert dict(flags) == {active.id: False, inactive.id: False}

    # Reactivating the other member brings the whole family back
    response = await client.put(
        f"/api/admin/members/{inactive.id}", json={"isActive": True}, headers=admin_headers
    )
    assert response.json()["data"]["familyIsActive"] is True
    flag = await db_session.scalar(
        select(Member.family_is_active).where(Member.id == active.id)
    )
    assert flag is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_member_removes_enrollments(client, db_session, admin_headers):
    member = MemberFactory.create(date_of_birth=date(2014, 1, 1))
    program = ProgramFactory.create()
    db_session.add_all([member, program])
    await db_session.flush()
    db_session.add(EnrollmentFactory.create(member_id=member.id, program_id=program.id))
    await db_session.commit()

    response = await client.delete(f"/api/admin/members/{member.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Member deleted successfully"

    assert await db_session.scalar(select(func.count(Member.id))) == 0
    assert await db_session.scalar(select(func.count(MemberProgram.id))) == 0
