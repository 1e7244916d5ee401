# people_tracker/routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from fastapi.responses import ORJSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from people_tracker.config import DEFAULT_USER_ID
from people_tracker.database import get_database, is_connected
from people_tracker.models import (
    Person,
    PersonCreate,
    PersonRelationshipView,
    PersonUpdate,
    Proximity,
    Relationship,
    RelationshipCreate,
    RelationshipOption,
    RelationshipUpdate,
)
from people_tracker.relationships.taxonomy import relationship_options
from people_tracker.services import people as people_service
from people_tracker.services import relationships as relationships_service
from people_tracker.services.relationships import DuplicateRelationshipError

router = APIRouter()


def database() -> AsyncIOMotorDatabase:
    try:
        return get_database()
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

def current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    The owning user for every read and write. Requests without the header
    share the development user.
    """
    return x_user_id or DEFAULT_USER_ID

def _not_found(e: KeyError) -> HTTPException:
    # KeyError wraps its message in quotes when converted with str().
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.args[0] if e.args else "Not found")


@router.get("/health/ready", tags=["Health"])
def get_readiness_status():
    """
    Readiness check: reports whether the database connection is up.
    """
    if is_connected():
        return {"status": "ready"}
    return ORJSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "database_unavailable"}
    )

# --- PEOPLE ---

@router.get("/people", response_model=List[Person], tags=["People"])
async def list_people(
    proximity: Optional[Proximity] = Query(None, description="Only return people with this proximity."),
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    """
    Lists the user's people, closest first.
    """
    return await people_service.list_people(db, user_id, proximity)

@router.get("/people/search", response_model=List[Person], tags=["People"])
async def search_people(
    q: str = Query("", description="Words that must all appear in the name, nicknames or notes."),
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    return await people_service.search_people(db, user_id, q)

@router.post("/people", response_model=Person, status_code=status.HTTP_201_CREATED, tags=["People"])
async def create_person(
    payload: PersonCreate,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    return await people_service.create_person(db, user_id, payload)

@router.get("/people/{person_id}", response_model=Person, tags=["People"])
async def get_person(
    person_id: str,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    try:
        return await people_service.get_person(db, user_id, person_id)
    except KeyError as e:
        raise _not_found(e)

@router.patch("/people/{person_id}", response_model=Person, tags=["People"])
async def update_person(
    person_id: str,
    payload: PersonUpdate,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    try:
        return await people_service.update_person(db, user_id, person_id, payload)
    except KeyError as e:
        raise _not_found(e)

@router.delete("/people/{person_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["People"])
async def delete_person(
    person_id: str,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    """
    Deletes a person and all of their relationships.
    """
    try:
        await people_service.delete_person(db, user_id, person_id)
    except KeyError as e:
        raise _not_found(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/people/{person_id}/relationships", response_model=List[PersonRelationshipView], tags=["People"])
async def get_person_relationships(
    person_id: str,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    """
    Returns the person's relationships, each labelled with what the other
    person is to them.
    """
    try:
        return await relationships_service.person_relationship_view(db, user_id, person_id)
    except KeyError as e:
        raise _not_found(e)

# --- RELATIONSHIPS ---

@router.get("/relationships/options", response_model=List[RelationshipOption], tags=["Relationships"])
def get_relationship_options():
    """
    Returns the relationship types offered by the add/edit forms.
    """
    return relationship_options()

@router.get("/relationships", response_model=List[Relationship], tags=["Relationships"])
async def list_relationships(
    person_id: Optional[str] = Query(None, description="Only return relationships involving this person."),
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    return await relationships_service.list_relationships(db, user_id, person_id)

@router.post("/relationships", response_model=Relationship, status_code=status.HTTP_201_CREATED, tags=["Relationships"])
async def add_relationship(
    payload: RelationshipCreate,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    """
    Adds "other person is <relationship_type> to current person".
    """
    try:
        return await relationships_service.add_relationship(
            db, user_id, payload.current_person_id, payload.other_person_id, payload.relationship_type
        )
    except KeyError as e:
        raise _not_found(e)
    except DuplicateRelationshipError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.patch("/relationships/{relationship_id}", response_model=Relationship, tags=["Relationships"])
async def update_relationship(
    relationship_id: str,
    payload: RelationshipUpdate,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    """
    Changes what person B is to person A; both stored labels are re-derived.
    """
    try:
        return await relationships_service.update_relationship(db, user_id, relationship_id, payload.relationship_type)
    except KeyError as e:
        raise _not_found(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/relationships/{relationship_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Relationships"])
async def delete_relationship(
    relationship_id: str,
    db: AsyncIOMotorDatabase = Depends(database),
    user_id: str = Depends(current_user_id),
):
    try:
        await relationships_service.delete_relationship(db, user_id, relationship_id)
    except KeyError as e:
        raise _not_found(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
