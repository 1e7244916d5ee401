# people_tracker/relationships/resolver.py
"""
Derives the stored, bidirectional labels of a relationship from a single
assertion of what one person is to another, and reads a stored edge back
from one person's point of view.

Convention: person A is always the person the relationship was entered from.
'type_a_to_b' is what A is to B, 'type_b_to_a' is what B is to A.
"""
from typing import Any, Mapping

from people_tracker.models import PerspectiveLabel, RelationshipEdge
from people_tracker.relationships.taxonomy import KindLike, inverse_kind_of, label_for


def _field(person: Any, name: str) -> Any:
    """Reads a field from a person given either as a mapping or as an object."""
    if isinstance(person, Mapping):
        return person.get(name)
    return getattr(person, name, None)

def _derive(person_a: Any, person_b: Any, kind_of_b_to_a: KindLike) -> RelationshipEdge:
    kind_of_a_to_b = inverse_kind_of(kind_of_b_to_a)
    return RelationshipEdge(
        person_a_id=str(_field(person_a, "id")),
        person_b_id=str(_field(person_b, "id")),
        type_a_to_b=label_for(kind_of_a_to_b, _field(person_a, "sex")),
        type_b_to_a=label_for(kind_of_b_to_a, _field(person_b, "sex")),
    )

def resolve_new_edge(current_person: Any, other_person: Any, asserted_kind: KindLike) -> RelationshipEdge:
    """
    Builds the edge for "other_person is my <asserted_kind>", said from
    current_person's page. The current person becomes person A.
    """
    return _derive(current_person, other_person, asserted_kind)

def resolve_edited_edge(
    existing_edge: RelationshipEdge,
    person_a: Any,
    person_b: Any,
    new_kind_of_b_to_a: KindLike,
) -> RelationshipEdge:
    """
    Re-derives both labels of an existing edge from what person B now is to
    person A, using the people's current sexes. The pair of ids is kept.
    """
    a_id, b_id = str(_field(person_a, "id")), str(_field(person_b, "id"))
    if (a_id, b_id) != (existing_edge.person_a_id, existing_edge.person_b_id):
        raise ValueError(
            f"People ({a_id}, {b_id}) do not match the relationship "
            f"({existing_edge.person_a_id}, {existing_edge.person_b_id})"
        )
    return _derive(person_a, person_b, new_kind_of_b_to_a)

def perspective_label(edge: RelationshipEdge, viewer_id: str) -> PerspectiveLabel:
    """
    Returns who the other party is and what they are to the viewer. Edges
    stored before 'type_b_to_a' existed only carry 'type_a_to_b', which
    person A then sees.
    """
    if viewer_id == edge.person_a_id:
        return PerspectiveLabel(other_person_id=edge.person_b_id, label=edge.type_b_to_a or edge.type_a_to_b)
    if viewer_id == edge.person_b_id:
        return PerspectiveLabel(other_person_id=edge.person_a_id, label=edge.type_a_to_b)
    raise ValueError(f"Person '{viewer_id}' is not part of this relationship")
