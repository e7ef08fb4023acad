from datetime import date

import pytest
from services.members_service.models import Family, FamilyGuardian, Member
from sqlalchemy import select
from tests.factories import FamilyFactory, MemberFactory


async def _household(db_session):
    parent = MemberFactory.create(first_name="Pat", last_name="Parker", date_of_birth=date(1984, 2, 2))
    child = MemberFactory.create(first_name="Casey", last_name="Parker", date_of_birth=date(2015, 5, 5))
    db_session.add_all([parent, child])
    await db_session.commit()
    return parent, child


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_family_with_guardian(client, db_session, admin_headers):
    parent, child = await _household(db_session)

    response = await client.post(
        "/api/admin/families",
        json={
            "familyName": "Parker",
            "memberIds": [child.id],
            "guardians": [{"memberId": parent.id, "isPrimary": True}],
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Family created successfully"
    data = body["data"]
    assert data["primaryMemberId"] == parent.id
    assert data["memberCount"] == 2
    # Oldest first
    assert [m["firstName"] for m in data["members"]] == ["Pat", "Casey"]
    assert data["guardians"] == [
        {
            "id": data["guardians"][0]["id"],
            "memberId": parent.id,
            "isPrimary": True,
            "firstName": "Pat",
            "lastName": "Parker",
            "email": parent.email,
        }
    ]

    family_ids = set(
        await db_session.scalars(select(Member.family_id).where(Member.id.in_([parent.id, child.id])))
    )
    assert family_ids == {data["id"]}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_primary_member_becomes_guardian(client, db_session, admin_headers):
    parent, child = await _household(db_session)

    response = await client.post(
        "/api/admin/families",
        json={"familyName": "Parker", "primaryMemberId": parent.id, "memberIds": [child.id]},
        headers=admin_headers,
    )
    assert response.status_code == 201
    family_id = response.json()["data"]["id"]

    guardians = (
        await db_session.execute(
            select(FamilyGuardian.member_id, FamilyGuardian.is_primary).where(
                FamilyGuardian.family_id == family_id
            )
        )
    ).all()
    assert [tuple(g) for g in guardians] == [(parent.id, True)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_family_with_unknown_members(client, admin_headers):
    response = await client.post(
        "/api/admin/families",
        json={"familyName": "Ghosts", "memberIds": [998, 999]},
        headers=admin_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Members not found: 998, 999"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_families_with_counts(client, db_session, admin_headers):
    parker = FamilyFactory.create(family_name="Parker")
    solo = FamilyFactory.create(family_name="Solo", archived=True)
    db_session.add_all([parker, solo])
    await db_session.flush()
    db_session.add_all(
        [MemberFactory.create(family_id=parker.id), MemberFactory.create(family_id=parker.id)]
    )
    await db_session.commit()

    response = await client.get("/api/admin/families", headers=admin_headers)
    data = response.json()["data"]
    assert [(f["familyName"], f["memberCount"]) for f in data] == [("Parker", 2)]

    response = await client.get(
        "/api/admin/families",
        params={"includeArchived": "true", "search": "SOL"},
        headers=admin_headers,
    )
    assert [(f["familyName"], f["memberCount"]) for f in response.json()["data"]] == [("Solo", 0)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_family_adds_members(client, db_session, admin_headers):
    family = FamilyFactory.create(family_name="Parker")
    db_session.add(family)
    await db_session.commit()
    parent, child = await _household(db_session)

    response = await client.put(
        f"/api/admin/families/{family.id}",
        json={"familyName": "Parker-Lee", "primaryMemberId": parent.id, "addMemberIds": [child.id]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["familyName"] == "Parker-Lee"
    assert data["primaryMemberId"] == parent.id
    assert {m["id"] for m in data["members"]} == {parent.id, child.id}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_remove_member_from_family(client, db_session, admin_headers):
    parent, child = await _household(db_session)
    created = await client.post(
        "/api/admin/families",
        json={
            "familyName": "Parker",
            "memberIds": [child.id],
            "guardians": [{"memberId": parent.id, "isPrimary": True}],
        },
        headers=admin_headers,
    )
    family_id = created.json()["data"]["id"]

    response = await client.delete(
        f"/api/admin/families/{family_id}/members/{parent.id}", headers=admin_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Member removed from family"
    assert body["data"]["primaryMemberId"] is None
    assert body["data"]["guardians"] == []
    assert [m["id"] for m in body["data"]["members"]] == [child.id]

    # Member record is kept
    assert await db_session.scalar(select(Member.family_id).where(Member.id == parent.id)) is None
    assert await db_session.get(Family, family_id) is not None

    again = await client.delete(
        f"/api/admin/families/{family_id}/members/{parent.id}", headers=admin_headers
    )
    assert again.status_code == 404
    assert again.json()["message"] == "Member not found in this family"
