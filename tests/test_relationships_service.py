"""Relationship service tests: storage of both derived labels and the per-person view."""

import pytest

from people_tracker.models import RelationKind, RelationshipGroup
from people_tracker.services import relationships as relationships_service
from people_tracker.services.relationships import DuplicateRelationshipError, edge_from_record


@pytest.mark.asyncio
async def test_add_stores_both_directions(db, relationships):
    created = await relationships_service.add_relationship(db, "u1", "sam", "robin", RelationKind.PARENT)

    stored = relationships.docs[-1]
    assert stored["person_a_id"] == "sam"
    assert stored["person_b_id"] == "robin"
    assert stored["relationship_type"] == "son"
    assert stored["relationship_type_b"] == "mother"
    assert stored["user_id"] == "u1"
    assert created["id"] == stored["_id"]


@pytest.mark.asyncio
async def test_add_rejects_self_relationship(db, relationships):
    with pytest.raises(ValueError):
        await relationships_service.add_relationship(db, "u1", "sam", "sam", RelationKind.FRIEND)
    relationships.insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_add_requires_both_people(db):
    with pytest.raises(KeyError, match="nobody"):
        await relationships_service.add_relationship(db, "u1", "sam", "nobody", RelationKind.FRIEND)


@pytest.mark.asyncio
async def test_add_does_not_see_other_users_people(db):
    with pytest.raises(KeyError):
        await relationships_service.add_relationship(db, "u1", "sam", "zoe", RelationKind.FRIEND)


@pytest.mark.asyncio
async def test_pair_is_unique_in_either_order(db, relationships):
    await relationships_service.add_relationship(db, "u1", "sam", "robin", RelationKind.FRIEND)

    with pytest.raises(DuplicateRelationshipError):
        await relationships_service.add_relationship(db, "u1", "robin", "sam", RelationKind.COLLEAGUE)
    assert len(relationships.docs) == 1


@pytest.mark.asyncio
async def test_update_rederives_both_labels(db, people, relationships):
    created = await relationships_service.add_relationship(db, "u1", "sam", "robin", RelationKind.FRIEND)
    for person in people.docs:
        if person["_id"] == "sam":
            person["sex"] = "female"

    updated = await relationships_service.update_relationship(db, "u1", created["id"], RelationKind.SIBLING)

    assert updated["relationship_type"] == "sister"
    assert updated["relationship_type_b"] == "sister"
    changes = relationships.find_one_and_update.call_args.args[1]["$set"]
    assert {"relationship_type", "relationship_type_b", "updated_at"} == set(changes)


@pytest.mark.asyncio
async def test_update_twice_gives_the_same_labels(db):
    created = await relationships_service.add_relationship(db, "u1", "sam", "robin", RelationKind.FRIEND)

    first = await relationships_service.update_relationship(db, "u1", created["id"], RelationKind.BOSS)
    second = await relationships_service.update_relationship(db, "u1", created["id"], RelationKind.BOSS)

    assert (first["relationship_type"], first["relationship_type_b"]) == ("employee", "boss")
    assert edge_from_record(first) == edge_from_record(second)


@pytest.mark.asyncio
async def test_update_missing_relationship(db):
    with pytest.raises(KeyError):
        await relationships_service.update_relationship(db, "u1", "missing", RelationKind.FRIEND)


@pytest.mark.asyncio
async def test_list_relationships_for_one_person(db, relationships):
    relationships.docs.extend([
        {"_id": "r1", "user_id": "u1", "person_a_id": "sam", "person_b_id": "robin"},
        {"_id": "r2", "user_id": "u1", "person_a_id": "alex", "person_b_id": "robin"},
        {"_id": "r3", "user_id": "u2", "person_a_id": "sam", "person_b_id": "zoe"},
    ])

    assert [r["id"] for r in await relationships_service.list_relationships(db, "u1")] == ["r1", "r2"]
    assert [r["id"] for r in await relationships_service.list_relationships(db, "u1", "sam")] == ["r1"]


@pytest.mark.asyncio
async def test_delete_relationship(db, relationships):
    created = await relationships_service.add_relationship(db, "u1", "sam", "robin", RelationKind.FRIEND)

    await relationships_service.delete_relationship(db, "u1", created["id"])

    assert relationships.docs == []
    with pytest.raises(KeyError):
        await relationships_service.delete_relationship(db, "u1", created["id"])


@pytest.mark.asyncio
async def test_person_view_reads_each_edge_from_the_viewer(db):
    await relationships_service.add_relationship(db, "u1", "sam", "robin", RelationKind.PARENT)
    # Sam is Alex's boss, so Alex is Sam's employee.
    await relationships_service.add_relationship(db, "u1", "alex", "sam", RelationKind.BOSS)

    sams_view = await relationships_service.person_relationship_view(db, "u1", "sam")
    robins_view = await relationships_service.person_relationship_view(db, "u1", "robin")

    by_name = {view["other_person_name"]: view for view in sams_view}
    assert by_name["Robin"]["label"] == "mother"
    assert by_name["Robin"]["group"] is RelationshipGroup.FAMILY
    assert by_name["Alex"]["label"] == "employee"
    assert by_name["Alex"]["group"] is RelationshipGroup.WORK
    assert [(v["other_person_id"], v["label"]) for v in robins_view] == [("sam", "son")]


@pytest.mark.asyncio
async def test_person_view_for_missing_person(db):
    with pytest.raises(KeyError):
        await relationships_service.person_relationship_view(db, "u1", "nobody")
