# SPDX-License-Identifier: MIT
"""Schema-agnostic path diff of two raw documents.

Both inputs are flattened into ``/path -> value`` pairs, where list indices
become path segments and every leaf value is rendered as compact JSON. Empty
lists and objects are kept as leaves so that clearing a collection still shows
up. The diff knows nothing about schema versions or identity keys; use
:func:`risc_core.comparison.compare` when scenarios must be matched by id.
"""

from __future__ import annotations

from typing import Any

import logfire
from pydantic import Field
from pydantic_core import to_json

from .exceptions import NotComparableError
from .io_utils.loader import parse_raw
from .models.changes import ReportModel


class FlatDiff(ReportModel):
    """Paths found in only one document, or in both with different values."""

    only_in_base: list[str] = Field(default_factory=list)
    only_in_head: list[str] = Field(default_factory=list)
    differing: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _render(value: Any) -> str:
    return to_json(value).decode()


def flatten(data: Any, prefix: str = "") -> dict[str, str]:
    """Return the ``/path -> rendered value`` pairs of ``data``."""

    if isinstance(data, dict) and data:
        children = data.items()
    elif isinstance(data, list) and data:
        children = enumerate(data)
    else:
        return {prefix: _render(data)}
    flat: dict[str, str] = {}
    for key, value in children:
        flat.update(flatten(value, f"{prefix}/{key}"))
    return flat


def _load_object(text: str, label: str) -> dict[str, Any]:
    try:
        data = parse_raw(text)
    except ValueError as exc:
        raise NotComparableError(f"The {label} document could not be parsed") from exc
    if not isinstance(data, dict):
        raise NotComparableError(
            f"The {label} document is not an object but {type(data).__name__}"
        )
    return data


def diff(base: str, head: str) -> FlatDiff:
    """Compare two raw documents path by path.

    Args:
        base: JSON or YAML text of the earlier document.
        head: JSON or YAML text of the later document.

    Returns:
        The paths only present in ``base``, only present in ``head`` and
        present in both with different values, each in document order.

    Raises:
        NotComparableError: If either input does not parse to an object.
    """

    with logfire.span("flat_diff.diff"):
        base_flat = flatten(_load_object(base, "base"))
        head_flat = flatten(_load_object(head, "head"))
        result = FlatDiff(
            only_in_base=[path for path in base_flat if path not in head_flat],
            only_in_head=[path for path in head_flat if path not in base_flat],
            differing=[
                path
                for path, value in base_flat.items()
                if path in head_flat and head_flat[path] != value
            ],
        )
        logfire.debug(
            "Computed flat diff",
            only_in_base=len(result.only_in_base),
            only_in_head=len(result.only_in_head),
            differing=len(result.differing),
        )
        return result


__all__ = ["FlatDiff", "diff", "flatten"]
