# SPDX-License-Identifier: MIT
"""Generic helpers that turn old/new value pairs into tracked properties.

The helpers know nothing about risk scorecards; the comparator composes them
field by field. Change nodes are only produced for unequal values.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Hashable, Sequence, TypeVar

from ..models import (
    AddedProperty,
    ChangedProperty,
    ContentChangedProperty,
    DeletedProperty,
    RiScScenarioRisk,
    RiScScenarioRiskChange,
    TrackedProperty,
    UnchangedProperty,
)

T = TypeVar("T")
C = TypeVar("C")
K = TypeVar("K", bound=Hashable)


class EmitPolicy(str, Enum):
    """Whether an unchanged scalar is reported or left out."""

    ALWAYS = "always"
    ON_CHANGE = "on_change"


def track_value(old: T, new: T, policy: EmitPolicy) -> TrackedProperty | None:
    """Compare a scalar field.

    Returns ``CHANGED`` when the values differ. Equal values produce
    ``UNCHANGED`` under :attr:`EmitPolicy.ALWAYS` and ``None`` under
    :attr:`EmitPolicy.ON_CHANGE`.
    """

    if old != new:
        return ChangedProperty(old_value=old, new_value=new)
    if policy is EmitPolicy.ALWAYS:
        return UnchangedProperty(value=new)
    return None


def track_mandatory(old: T, new: T) -> TrackedProperty:
    if old != new:
        return ChangedProperty(old_value=old, new_value=new)
    return UnchangedProperty(value=new)


def track_optional(old: T, new: T) -> TrackedProperty | None:
    return track_value(old, new, EmitPolicy.ON_CHANGE)


def track_value_list(old: Sequence[T], new: Sequence[T]) -> list[TrackedProperty]:
    """Compare lists without identity by value membership.

    Values missing from ``new`` are reported as deleted, then values missing
    from ``old`` as added. Values present in both lists are not reported.
    """

    deleted = [DeletedProperty(old_value=value) for value in old if value not in new]
    added = [AddedProperty(new_value=value) for value in new if value not in old]
    return [*deleted, *added]


def track_keyed_list(
    old: Sequence[T],
    new: Sequence[T],
    key: Callable[[T], K],
    content_diff: Callable[[T, T], C],
) -> list[TrackedProperty]:
    """Compare lists whose members are matched by a stable identity key.

    Args:
        old: Members of the old list.
        new: Members of the new list.
        key: Extracts the identity key of a member, e.g. its ``id``.
        content_diff: Builds the nested change record for a member present
            in both lists with different content.

    Returns:
        Deletions, then content changes, then additions, each group in
        source order. Members that are equal in both lists are omitted.
    """

    new_by_key: dict[K, T] = {}
    for value in new:
        new_by_key.setdefault(key(value), value)
    old_keys = {key(value) for value in old}

    deleted: list[TrackedProperty] = []
    changed: list[TrackedProperty] = []
    for old_value in old:
        new_value = new_by_key.get(key(old_value))
        if new_value is None:
            deleted.append(DeletedProperty(old_value=old_value))
        elif old_value != new_value:
            changed.append(
                ContentChangedProperty(value=content_diff(old_value, new_value))
            )
    added: list[TrackedProperty] = [
        AddedProperty(new_value=value) for value in new if key(value) not in old_keys
    ]
    return [*deleted, *changed, *added]


def track_risk(old: RiScScenarioRisk, new: RiScScenarioRisk) -> TrackedProperty:
    """Compare a risk object.

    The result is always ``CONTENT_CHANGED``: probability and consequence are
    always reported, the summary only when it changed.
    """

    return ContentChangedProperty(
        value=RiScScenarioRiskChange(
            summary=track_optional(old.summary, new.summary),
            probability=track_mandatory(old.probability, new.probability),
            consequence=track_mandatory(old.consequence, new.consequence),
        )
    )


__all__ = [
    "EmitPolicy",
    "track_value",
    "track_mandatory",
    "track_optional",
    "track_value_list",
    "track_keyed_list",
    "track_risk",
]
