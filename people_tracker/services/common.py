import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from people_tracker.config import DEFAULT_PROXIMITY, VALID_PROXIMITIES


def new_id() -> str:
    """Generates the string id stored as a document's '_id'."""
    return uuid.uuid4().hex

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def proximity_rank(person: Dict[str, Any]) -> int:
    """
    Sort position of a person's proximity: Close first, then Medium, then Far.
    A missing or unknown proximity ranks as the default.
    """
    proximity = person.get("proximity") or DEFAULT_PROXIMITY
    if proximity not in VALID_PROXIMITIES:
        proximity = DEFAULT_PROXIMITY
    return VALID_PROXIMITIES.index(proximity)

def enum_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replaces enum members with their plain values before writing to MongoDB."""
    return {key: getattr(value, "value", value) for key, value in data.items()}
