from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# -ENUMS for validation and type safety
class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

class RelationKind(str, Enum):
    """
    Abstract, sex-neutral relation kinds. Every member needs a row in the
    label table and in the inverse table of the taxonomy.
    """
    SIBLING = "sibling"
    SPOUSE = "spouse"
    EX_SPOUSE = "ex_spouse"
    PARENT = "parent"
    CHILD = "child"
    GRANDPARENT = "grandparent"
    GRANDCHILD = "grandchild"
    PARENTAL_SIBLING = "parental_sibling"
    SIBLING_CHILD = "sibling_child"
    FRIEND = "friend"
    COLLEAGUE = "colleague"
    BOSS = "boss"
    EMPLOYEE = "employee"

class Proximity(str, Enum):
    # Capitalization is part of the stored value.
    CLOSE = "Close"
    MEDIUM = "Medium"
    FAR = "Far"

class RelationshipGroup(str, Enum):
    FAMILY = "family"
    FRIEND = "friend"
    WORK = "work"
    OTHER = "other"


def _normalize_proximity(value):
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value.strip().capitalize()
    return value


# --- PYDANTIC MODELS for API requests

class PersonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    sex: Sex = Sex.OTHER
    nicknames: Optional[str] = ""
    notes: Optional[str] = ""
    photo_url: Optional[str] = None
    proximity: Proximity = Proximity.MEDIUM

    @field_validator("proximity", mode="before")
    @classmethod
    def normalize_proximity(cls, value):
        return _normalize_proximity(value) or Proximity.MEDIUM

class PersonUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    sex: Optional[Sex] = None
    nicknames: Optional[str] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    proximity: Optional[Proximity] = None

    @field_validator("proximity", mode="before")
    @classmethod
    def normalize_proximity(cls, value):
        return _normalize_proximity(value)

class RelationshipCreate(BaseModel):
    current_person_id: str = Field(..., min_length=1, description="The person whose page the relationship is added from.")
    other_person_id: str = Field(..., min_length=1, description="The related person.")
    relationship_type: RelationKind = Field(..., description="What the other person is to the current person.")

class RelationshipUpdate(BaseModel):
    relationship_type: RelationKind = Field(..., description="What person B is to person A.")


# --- PYDANTIC MODELS for API responses

class Person(BaseModel):
    id: str
    user_id: str
    name: str
    sex: Sex = Sex.OTHER
    nicknames: Optional[str] = ""
    notes: Optional[str] = ""
    photo_url: Optional[str] = None
    proximity: Proximity = Proximity.MEDIUM
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Relationship(BaseModel):
    id: str
    user_id: str
    person_a_id: str
    person_b_id: str
    relationship_type: str = Field(..., description="What person A is to person B.")
    relationship_type_b: str = Field(..., description="What person B is to person A.")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RelationshipOption(BaseModel):
    type: RelationKind
    label: str

class PersonRelationshipView(BaseModel):
    relationship_id: str
    other_person_id: str
    other_person_name: str
    label: str
    group: RelationshipGroup


# --- RELATIONSHIP CORE VALUES

class RelationshipEdge(BaseModel):
    """
    A bidirectional relationship between two people. 'type_a_to_b' is what
    person A is to person B; 'type_b_to_a' is what person B is to person A.
    """
    model_config = ConfigDict(frozen=True)

    person_a_id: str
    person_b_id: str
    type_a_to_b: str
    type_b_to_a: str

class PerspectiveLabel(BaseModel):
    model_config = ConfigDict(frozen=True)

    other_person_id: str
    label: str
