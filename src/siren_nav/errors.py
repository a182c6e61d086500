"""Exceptions raised while resolving a navigation chain.

Failures from the HTTP layer (``httpx.HTTPError`` and friends) and from
document parsing (``pydantic.ValidationError``) are not wrapped; they
propagate through the chain unchanged.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from siren_nav.siren import Entity


class NavigationError(Exception):
    """Base class for errors raised by the navigation engine."""


class RelationError(NavigationError):
    """A relation could not be resolved to exactly one resource."""

    def __init__(self, message: str, *, rel: str, document: Entity) -> None:
        self.rel = rel
        self.document = document
        super().__init__(f"{message}\n{_render(document)}")


class NoMatchError(RelationError):
    """No sub-entity or link carries the requested relation."""

    def __init__(self, rel: str, document: Entity) -> None:
        super().__init__(
            f"Cannot follow relation '{rel}', no links with that relation in",
            rel=rel,
            document=document,
        )


class AmbiguousMatchError(RelationError):
    """Several candidates carry the relation and only one was expected."""

    def __init__(self, rel: str, document: Entity, count: int) -> None:
        self.count = count
        super().__init__(
            f"Multiple links ({count}) with relation '{rel}' found "
            "when only one was expected in",
            rel=rel,
            document=document,
        )


class ActionNotFoundError(NavigationError):
    """The current resource does not offer the named action."""

    def __init__(self, name: str, available: list[str], uri: str) -> None:
        self.name = name
        self.available = available
        self.uri = uri
        offered = ", ".join(available) if available else "none"
        super().__init__(f"No action named '{name}' on {uri} (available: {offered})")


def _render(document: Entity) -> str:
    return json.dumps(document.to_json_dict(), indent=4, default=str)
