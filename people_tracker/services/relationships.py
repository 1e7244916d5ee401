# people_tracker/services/relationships.py
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from people_tracker.config import PEOPLE_COLLECTION, RELATIONSHIPS_COLLECTION
from people_tracker.database import fetch_documents, to_record
from people_tracker.logging_setup import logger
from people_tracker.models import RelationKind, RelationshipEdge
from people_tracker.relationships.resolver import perspective_label, resolve_edited_edge, resolve_new_edge
from people_tracker.relationships.taxonomy import base_kind_of, inverse_kind_of, relationship_group
from people_tracker.services.common import new_id, utc_now


class DuplicateRelationshipError(ValueError):
    """Raised when the user already has a relationship between the two people."""


def edge_from_record(record: Dict[str, Any]) -> RelationshipEdge:
    """
    Reads the stored fields of a relationship: 'relationship_type' is what
    person A is to person B, 'relationship_type_b' is what B is to A.
    """
    return RelationshipEdge(
        person_a_id=record["person_a_id"],
        person_b_id=record["person_b_id"],
        type_a_to_b=record.get("relationship_type") or "",
        type_b_to_a=record.get("relationship_type_b") or "",
    )

def _pair_query(user_id: str, first_id: str, second_id: str) -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "$or": [
            {"person_a_id": first_id, "person_b_id": second_id},
            {"person_a_id": second_id, "person_b_id": first_id},
        ],
    }

async def _fetch_pair(
    db: AsyncIOMotorDatabase,
    user_id: str,
    first_id: str,
    second_id: str,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Fetches both people of a relationship in one query.
    Raises KeyError naming the first missing person.
    """
    people = await fetch_documents(
        db, PEOPLE_COLLECTION, {"_id": {"$in": [first_id, second_id]}, "user_id": user_id}
    )
    by_id = {person["id"]: person for person in people}
    for person_id in (first_id, second_id):
        if person_id not in by_id:
            raise KeyError(f"Person with ID '{person_id}' not found")
    return by_id[first_id], by_id[second_id]

async def list_relationships(
    db: AsyncIOMotorDatabase,
    user_id: str,
    person_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    query: Dict[str, Any] = {"user_id": user_id}
    if person_id:
        query["$or"] = [{"person_a_id": person_id}, {"person_b_id": person_id}]
    return await fetch_documents(db, RELATIONSHIPS_COLLECTION, query)

async def get_relationship(db: AsyncIOMotorDatabase, user_id: str, relationship_id: str) -> Dict[str, Any]:
    doc = await db[RELATIONSHIPS_COLLECTION].find_one({"_id": relationship_id, "user_id": user_id})
    if doc is None:
        raise KeyError(f"Relationship with ID '{relationship_id}' not found")
    return to_record(doc)

async def add_relationship(
    db: AsyncIOMotorDatabase,
    user_id: str,
    current_person_id: str,
    other_person_id: str,
    relationship_type: RelationKind,
) -> Dict[str, Any]:
    """
    Stores "other person is <relationship_type> to current person" as a single
    edge with the current person as person A and both labels derived.
    """
    if current_person_id == other_person_id:
        raise ValueError("A person cannot have a relationship with themselves")

    current_person, other_person = await _fetch_pair(db, user_id, current_person_id, other_person_id)

    existing = await db[RELATIONSHIPS_COLLECTION].find_one(_pair_query(user_id, current_person_id, other_person_id))
    if existing is not None:
        logger.warning(
            "Duplicate relationship rejected",
            extra={"person_a_id": current_person_id, "person_b_id": other_person_id},
        )
        raise DuplicateRelationshipError(
            f"A relationship between '{current_person_id}' and '{other_person_id}' already exists"
        )

    edge = resolve_new_edge(current_person, other_person, relationship_type)
    now = utc_now()
    doc = {
        "_id": new_id(),
        "user_id": user_id,
        "person_a_id": edge.person_a_id,
        "person_b_id": edge.person_b_id,
        "relationship_type": edge.type_a_to_b,
        "relationship_type_b": edge.type_b_to_a,
        "created_at": now,
        "updated_at": now,
    }
    await db[RELATIONSHIPS_COLLECTION].insert_one(doc)
    logger.info(
        "Relationship created",
        extra={
            "relationship_id": doc["_id"],
            "asserted_type": getattr(relationship_type, "value", relationship_type),
            "relationship_type": edge.type_a_to_b,
            "relationship_type_b": edge.type_b_to_a,
        },
    )
    return to_record(doc)

async def update_relationship(
    db: AsyncIOMotorDatabase,
    user_id: str,
    relationship_id: str,
    relationship_type: RelationKind,
) -> Dict[str, Any]:
    """
    Re-derives both labels from what person B now is to person A and the
    people's current sexes, and writes them in a single update.
    """
    existing = await get_relationship(db, user_id, relationship_id)
    person_a, person_b = await _fetch_pair(db, user_id, existing["person_a_id"], existing["person_b_id"])
    edge = resolve_edited_edge(edge_from_record(existing), person_a, person_b, relationship_type)

    doc = await db[RELATIONSHIPS_COLLECTION].find_one_and_update(
        {"_id": relationship_id, "user_id": user_id},
        {"$set": {
            "relationship_type": edge.type_a_to_b,
            "relationship_type_b": edge.type_b_to_a,
            "updated_at": utc_now(),
        }},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise KeyError(f"Relationship with ID '{relationship_id}' not found")
    logger.info(
        "Relationship updated",
        extra={
            "relationship_id": relationship_id,
            "relationship_type": edge.type_a_to_b,
            "relationship_type_b": edge.type_b_to_a,
        },
    )
    return to_record(doc)

def _stored_kind_of_b_to_a(edge: RelationshipEdge):
    # Older edges may only carry what A is to B.
    if edge.type_b_to_a:
        return base_kind_of(edge.type_b_to_a)
    return inverse_kind_of(edge.type_a_to_b)

async def relabel_relationships(db: AsyncIOMotorDatabase, user_id: str, person_id: str) -> int:
    """
    Re-derives both labels of every relationship the person is part of from
    the people's current sexes, keeping each relationship's kind. Returns the
    number of relationships whose labels changed.
    """
    changed = 0
    for record in await list_relationships(db, user_id, person_id):
        existing = edge_from_record(record)
        person_a, person_b = await _fetch_pair(db, user_id, existing.person_a_id, existing.person_b_id)
        edge = resolve_edited_edge(existing, person_a, person_b, _stored_kind_of_b_to_a(existing))
        if edge == existing:
            continue
        await db[RELATIONSHIPS_COLLECTION].update_one(
            {"_id": record["id"], "user_id": user_id},
            {"$set": {
                "relationship_type": edge.type_a_to_b,
                "relationship_type_b": edge.type_b_to_a,
                "updated_at": utc_now(),
            }},
        )
        changed += 1
    logger.info("Relationships relabelled", extra={"person_id": person_id, "relationships_changed": changed})
    return changed

async def delete_relationship(db: AsyncIOMotorDatabase, user_id: str, relationship_id: str) -> None:
    result = await db[RELATIONSHIPS_COLLECTION].delete_one({"_id": relationship_id, "user_id": user_id})
    if result.deleted_count == 0:
        raise KeyError(f"Relationship with ID '{relationship_id}' not found")
    logger.info("Relationship deleted", extra={"relationship_id": relationship_id})

async def person_relationship_view(
    db: AsyncIOMotorDatabase,
    user_id: str,
    person_id: str,
) -> List[Dict[str, Any]]:
    """
    Lists a person's relationships as seen from their page: for each one, the
    other person and what that person is to them.
    """
    if await db[PEOPLE_COLLECTION].find_one({"_id": person_id, "user_id": user_id}) is None:
        raise KeyError(f"Person with ID '{person_id}' not found")
    relationships = await list_relationships(db, user_id, person_id)

    views = []
    for record in relationships:
        views.append((record["id"], perspective_label(edge_from_record(record), person_id)))

    other_ids = sorted({view.other_person_id for _, view in views})
    others = await fetch_documents(db, PEOPLE_COLLECTION, {"_id": {"$in": other_ids}, "user_id": user_id})
    names = {person["id"]: person.get("name") for person in others}

    return [
        {
            "relationship_id": relationship_id,
            "other_person_id": view.other_person_id,
            "other_person_name": names.get(view.other_person_id) or "Unknown",
            "label": view.label,
            "group": relationship_group(view.label),
        }
        for relationship_id, view in views
    ]
