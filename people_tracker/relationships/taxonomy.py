# people_tracker/relationships/taxonomy.py
"""
Fixed catalog of relation kinds: the sex-specific label of each kind, the
structural inverse of each kind, and the reverse lookup from a specific label
back to its kind. The tables are built once at import and are read-only.
"""
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Union

from people_tracker.models import RelationKind, RelationshipGroup, Sex

KindLike = Union[RelationKind, str]


# --- SEX-SPECIFIC LABELS ---
# Kinds without an entry (friend, colleague, boss, employee) read the same
# for every sex.
_LABELS: Mapping[RelationKind, Mapping[Sex, str]] = MappingProxyType({
    # --- Core Family ---
    RelationKind.SIBLING: MappingProxyType({Sex.MALE: "brother", Sex.FEMALE: "sister", Sex.OTHER: "sibling"}),
    RelationKind.SPOUSE: MappingProxyType({Sex.MALE: "husband", Sex.FEMALE: "wife", Sex.OTHER: "spouse"}),
    RelationKind.EX_SPOUSE: MappingProxyType({Sex.MALE: "ex-husband", Sex.FEMALE: "ex-wife", Sex.OTHER: "ex-spouse"}),
    RelationKind.PARENT: MappingProxyType({Sex.MALE: "father", Sex.FEMALE: "mother", Sex.OTHER: "parent"}),
    RelationKind.CHILD: MappingProxyType({Sex.MALE: "son", Sex.FEMALE: "daughter", Sex.OTHER: "child"}),

    # --- Extended Family ---
    RelationKind.GRANDPARENT: MappingProxyType({Sex.MALE: "grandfather", Sex.FEMALE: "grandmother", Sex.OTHER: "grandparent"}),
    RelationKind.GRANDCHILD: MappingProxyType({Sex.MALE: "grandson", Sex.FEMALE: "granddaughter", Sex.OTHER: "grandchild"}),
    RelationKind.PARENTAL_SIBLING: MappingProxyType({Sex.MALE: "uncle", Sex.FEMALE: "aunt", Sex.OTHER: "parent's sibling"}),
    RelationKind.SIBLING_CHILD: MappingProxyType({Sex.MALE: "nephew", Sex.FEMALE: "niece", Sex.OTHER: "sibling's child"}),
})


# --- STRUCTURAL INVERSES ---
_INVERSES: Mapping[RelationKind, RelationKind] = MappingProxyType({
    RelationKind.SIBLING: RelationKind.SIBLING,
    RelationKind.SPOUSE: RelationKind.SPOUSE,
    RelationKind.EX_SPOUSE: RelationKind.EX_SPOUSE,
    RelationKind.PARENT: RelationKind.CHILD,
    RelationKind.CHILD: RelationKind.PARENT,
    RelationKind.GRANDPARENT: RelationKind.GRANDCHILD,
    RelationKind.GRANDCHILD: RelationKind.GRANDPARENT,
    RelationKind.PARENTAL_SIBLING: RelationKind.SIBLING_CHILD,
    RelationKind.SIBLING_CHILD: RelationKind.PARENTAL_SIBLING,
    RelationKind.FRIEND: RelationKind.FRIEND,
    RelationKind.COLLEAGUE: RelationKind.COLLEAGUE,
    RelationKind.BOSS: RelationKind.EMPLOYEE,
    RelationKind.EMPLOYEE: RelationKind.BOSS,
})


# --- SPECIFIC LABEL -> KIND ---
_BASE_KINDS: Mapping[str, RelationKind] = MappingProxyType({
    label: kind
    for kind, labels in _LABELS.items()
    for label in labels.values()
})


# --- FORM CHOICES ---
# Order in which the add/edit relationship forms list the kinds.
_OPTION_LABELS: Dict[RelationKind, str] = {
    RelationKind.PARENT: "Parent",
    RelationKind.CHILD: "Child",
    RelationKind.SIBLING: "Sibling",
    RelationKind.SPOUSE: "Spouse",
    RelationKind.EX_SPOUSE: "Ex-spouse",
    RelationKind.GRANDPARENT: "Grandparent",
    RelationKind.GRANDCHILD: "Grandchild",
    RelationKind.PARENTAL_SIBLING: "Aunt/Uncle",
    RelationKind.SIBLING_CHILD: "Niece/Nephew",
    RelationKind.FRIEND: "Friend",
    RelationKind.COLLEAGUE: "Colleague",
    RelationKind.BOSS: "Boss",
    RelationKind.EMPLOYEE: "Employee",
}

_GROUPS: Mapping[RelationKind, RelationshipGroup] = MappingProxyType({
    **{kind: RelationshipGroup.FAMILY for kind in _LABELS},
    RelationKind.FRIEND: RelationshipGroup.FRIEND,
    RelationKind.COLLEAGUE: RelationshipGroup.WORK,
    RelationKind.BOSS: RelationshipGroup.WORK,
    RelationKind.EMPLOYEE: RelationshipGroup.WORK,
})


def _as_kind(value: KindLike) -> Union[RelationKind, str]:
    """Returns the RelationKind member for a kind name, or the input unchanged."""
    if isinstance(value, RelationKind):
        return value
    try:
        return RelationKind(value)
    except ValueError:
        return value

def coerce_sex(value: Any) -> Sex:
    """
    Maps a recorded sex onto Sex. Missing or unrecognized values count as
    'other' so that every label lookup stays defined.
    """
    if isinstance(value, Sex):
        return value
    if isinstance(value, str):
        try:
            return Sex(value.strip().lower())
        except ValueError:
            pass
    return Sex.OTHER

def label_for(kind: KindLike, sex: Any) -> str:
    """
    Returns the sex-specific label for a kind ('parent' + 'male' -> 'father').
    Kinds outside the taxonomy are treated as already specific and returned
    unchanged.
    """
    resolved = _as_kind(kind)
    labels = _LABELS.get(resolved)
    if labels is None:
        return resolved.value if isinstance(resolved, RelationKind) else resolved
    return labels[coerce_sex(sex)]

def base_kind_of(label: KindLike) -> Union[RelationKind, str]:
    """
    Strips sex-specificity from a label ('niece' -> sibling_child). Kind names
    map to themselves; unrecognized labels are returned unchanged.
    """
    if isinstance(label, RelationKind):
        return label
    resolved = _as_kind(label)
    if isinstance(resolved, RelationKind):
        return resolved
    return _BASE_KINDS.get(label, label)

def inverse_kind_of(kind: KindLike) -> Union[RelationKind, str]:
    """
    Returns the structurally opposite kind (parent <-> child). Specific labels
    such as 'father' are reduced to their kind first. Unknown input is
    returned unchanged.
    """
    base = base_kind_of(kind)
    if isinstance(base, RelationKind):
        return _INVERSES[base]
    return base

def relationship_group(label: KindLike) -> RelationshipGroup:
    base = base_kind_of(label)
    if isinstance(base, RelationKind):
        return _GROUPS[base]
    return RelationshipGroup.OTHER

def relationship_options() -> List[Dict[str, str]]:
    return [{"type": kind.value, "label": text} for kind, text in _OPTION_LABELS.items()]
