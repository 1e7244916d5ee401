# people_tracker/services/people.py
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from people_tracker.config import PEOPLE_COLLECTION, RELATIONSHIPS_COLLECTION
from people_tracker.database import fetch_documents, to_record
from people_tracker.logging_setup import logger
from people_tracker.models import PersonCreate, PersonUpdate, Proximity
from people_tracker.services.common import enum_values, new_id, proximity_rank, utc_now
from people_tracker.services.relationships import relabel_relationships
from people_tracker.textual_manipulation import matches_all_words, split_search_words

# Fields a person record always carries; null in an update leaves them as they are.
_REQUIRED_FIELDS = {"name", "sex", "proximity"}


def sort_by_proximity(people: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Orders people Close, Medium, Far, and by name within each proximity."""
    return sorted(people, key=lambda p: (proximity_rank(p), (p.get("name") or "").casefold()))

async def list_people(
    db: AsyncIOMotorDatabase,
    user_id: str,
    proximity: Optional[Proximity] = None,
) -> List[Dict[str, Any]]:
    query: Dict[str, Any] = {"user_id": user_id}
    if proximity is Proximity.MEDIUM:
        # People saved without a proximity count as Medium.
        query["proximity"] = {"$in": [Proximity.MEDIUM.value, None]}
    elif proximity is not None:
        query["proximity"] = proximity.value
    people = await fetch_documents(db, PEOPLE_COLLECTION, query, sort=[("name", 1)])
    return sort_by_proximity(people)

async def search_people(db: AsyncIOMotorDatabase, user_id: str, query: str) -> List[Dict[str, Any]]:
    """
    Returns the people whose name, nicknames or notes contain every word of
    the query, ignoring case and diacritics. An empty query matches nobody.
    """
    words = split_search_words(query)
    if not words:
        return []
    people = await fetch_documents(db, PEOPLE_COLLECTION, {"user_id": user_id}, sort=[("name", 1)])
    return [
        person for person in people
        if matches_all_words(words, (person.get("name"), person.get("nicknames"), person.get("notes")))
    ]

async def get_person(db: AsyncIOMotorDatabase, user_id: str, person_id: str) -> Dict[str, Any]:
    """
    Retrieves a single person owned by the user.
    Raises KeyError if not found.
    """
    doc = await db[PEOPLE_COLLECTION].find_one({"_id": person_id, "user_id": user_id})
    if doc is None:
        raise KeyError(f"Person with ID '{person_id}' not found")
    return to_record(doc)

async def create_person(db: AsyncIOMotorDatabase, user_id: str, data: PersonCreate) -> Dict[str, Any]:
    now = utc_now()
    doc = {
        "_id": new_id(),
        "user_id": user_id,
        **enum_values(data.model_dump()),
        "created_at": now,
        "updated_at": now,
    }
    await db[PEOPLE_COLLECTION].insert_one(doc)
    logger.info("Person created", extra={"person_id": doc["_id"], "user_id": user_id})
    return to_record(doc)

async def update_person(
    db: AsyncIOMotorDatabase,
    user_id: str,
    person_id: str,
    data: PersonUpdate,
) -> Dict[str, Any]:
    """
    Applies the fields present in the update. Nullable text fields may be
    cleared with null. A change of sex re-derives the labels of every
    relationship the person is part of.
    """
    changes = enum_values({
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in _REQUIRED_FIELDS
    })
    changes["updated_at"] = utc_now()
    doc = await db[PEOPLE_COLLECTION].find_one_and_update(
        {"_id": person_id, "user_id": user_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise KeyError(f"Person with ID '{person_id}' not found")
    logger.info("Person updated", extra={"person_id": person_id, "fields": sorted(changes)})
    if "sex" in changes:
        await relabel_relationships(db, user_id, person_id)
    return to_record(doc)

async def delete_person(db: AsyncIOMotorDatabase, user_id: str, person_id: str) -> None:
    """
    Deletes a person together with every relationship they are part of.
    """
    result = await db[PEOPLE_COLLECTION].delete_one({"_id": person_id, "user_id": user_id})
    if result.deleted_count == 0:
        raise KeyError(f"Person with ID '{person_id}' not found")
    removed = await db[RELATIONSHIPS_COLLECTION].delete_many({
        "user_id": user_id,
        "$or": [{"person_a_id": person_id}, {"person_b_id": person_id}],
    })
    logger.info(
        "Person deleted",
        extra={"person_id": person_id, "relationships_deleted": removed.deleted_count},
    )
