"""Common Marshmallow fields shared across schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import fields


class StringSet(fields.List):
    """Serialize a set of strings as a sorted list; load it back as a frozenset."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(fields.String(), **kwargs)

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs: Any) -> Any:
        if value is None:
            return None
        # sorted output keeps encoded snapshots deterministic
        return sorted(super()._serialize(list(value), attr, obj, **kwargs))

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> Any:
        return frozenset(super()._deserialize(value, attr, data, **kwargs))
