# src/fetchgate/users/user_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _nested_str(data: dict[str, Any], outer: str, inner: str) -> str:
    block = data.get(outer)
    if not isinstance(block, dict):
        return ""
    return str(block.get(inner) or "")


@dataclass(slots=True, frozen=True)
class UserSummary:
    id: int
    name: str
    username: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> UserSummary:
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            username=str(data.get("username") or ""),
        )


@dataclass(slots=True, frozen=True)
class UserDetails:
    """Detail view of a user (JSONPlaceholder /users/<id> shape, flattened)."""

    id: int
    name: str
    email: str
    phone: str
    company: str
    city: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> UserDetails:
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            phone=str(data.get("phone") or ""),
            company=_nested_str(data, "company", "name"),
            city=_nested_str(data, "address", "city"),
        )
