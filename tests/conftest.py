"""Shared fixtures: an in-memory stand-in for the motor database."""

from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from people_tracker.config import PEOPLE_COLLECTION, RELATIONSHIPS_COLLECTION


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
        elif isinstance(cond, dict) and "$in" in cond:
            if doc.get(key) not in cond["$in"]:
                return False
        elif doc.get(key) != cond:
            return False
    return True


class FakeCollection:
    """Collection double backed by a list; every method is an AsyncMock so calls can be asserted."""

    def __init__(self, docs: List[Dict[str, Any]] = None):
        self.docs: List[Dict[str, Any]] = [dict(d) for d in (docs or [])]
        self.find = MagicMock(side_effect=self._find)
        self.find_one = AsyncMock(side_effect=self._find_one)
        self.insert_one = AsyncMock(side_effect=self._insert_one)
        self.find_one_and_update = AsyncMock(side_effect=self._find_one_and_update)
        self.update_one = AsyncMock(side_effect=self._update_one)
        self.delete_one = AsyncMock(side_effect=self._delete_one)
        self.delete_many = AsyncMock(side_effect=self._delete_many)

    def _find(self, query):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[dict(d) for d in self.docs if _matches(d, query)])
        return cursor

    async def _find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return dict(doc)
        return None

    async def _insert_one(self, doc):
        self.docs.append(dict(doc))
        return MagicMock(inserted_id=doc["_id"])

    async def _find_one_and_update(self, query, update, return_document=None):
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return dict(doc)
        return None

    async def _update_one(self, query, update):
        doc = await self._find_one_and_update(query, update)
        return MagicMock(matched_count=int(doc is not None), modified_count=int(doc is not None))

    async def _delete_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return MagicMock(deleted_count=1)
        return MagicMock(deleted_count=0)

    async def _delete_many(self, query):
        kept = [d for d in self.docs if not _matches(d, query)]
        removed = len(self.docs) - len(kept)
        self.docs[:] = kept
        return MagicMock(deleted_count=removed)


def person_doc(person_id: str, name: str, sex: str = "other", proximity: str = "Medium", **extra) -> Dict[str, Any]:
    return {
        "_id": person_id,
        "user_id": "u1",
        "name": name,
        "sex": sex,
        "nicknames": "",
        "notes": "",
        "photo_url": None,
        "proximity": proximity,
        **extra,
    }


@pytest.fixture
def people() -> FakeCollection:
    return FakeCollection([
        person_doc("sam", "Sam", sex="male", proximity="Close"),
        person_doc("robin", "Robin", sex="female", proximity="Far", nicknames="Rob", notes="Met at the café"),
        person_doc("alex", "Alex", sex="other"),
        person_doc("zoe", "Zoe", sex="female", user_id="u2"),
    ])


@pytest.fixture
def relationships() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def db(people: FakeCollection, relationships: FakeCollection) -> MagicMock:
    collections = {PEOPLE_COLLECTION: people, RELATIONSHIPS_COLLECTION: relationships}
    database = MagicMock()
    database.__getitem__.side_effect = collections.__getitem__
    return database
