"""Pydantic models for Siren hypermedia documents.

A Siren entity exposes ``properties``, embedded sub-entities, ``links``
and ``actions``. Sub-entities come in two shapes that navigation treats
differently:

- ``EmbeddedLink``: carries its own ``href`` and nothing else of
  interest; following it means fetching that href.
- ``EmbeddedEntity``: a full inline representation; it is reachable
  through its ``self`` link, when it has one.

The shape is decided once, when the document is parsed, by the
``SubEntity`` discriminator (``href`` present => embedded link).
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

SIREN_MEDIA_TYPE = "application/vnd.siren+json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
JSON_MEDIA_TYPE = "application/json"


class _SirenModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using wire names (``class`` rather than ``class_``)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ------------------------------------------------------------------ #
# Links and actions
# ------------------------------------------------------------------ #


class Link(_SirenModel):
    """A navigational link to another resource."""

    rel: list[str] = Field(..., description="Relations this link plays")
    href: str = Field(..., description="Target URI")
    class_: list[str] = Field(default_factory=list, alias="class")
    type: str | None = None
    title: str | None = None


class ActionField(_SirenModel):
    """A single input of an action."""

    name: str
    type: str = "text"
    value: Any = None
    title: str | None = None
    class_: list[str] = Field(default_factory=list, alias="class")


class Action(_SirenModel):
    """A state transition the server offers on a resource."""

    name: str
    href: str
    method: str = "GET"
    type: str = FORM_MEDIA_TYPE
    fields: list[ActionField] = Field(default_factory=list)
    title: str | None = None
    class_: list[str] = Field(default_factory=list, alias="class")


# ------------------------------------------------------------------ #
# Entities
# ------------------------------------------------------------------ #


class _EntityBody(_SirenModel):
    class_: list[str] = Field(default_factory=list, alias="class")
    properties: dict[str, Any] = Field(default_factory=dict)
    entities: list[SubEntity] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    title: str | None = None

    @property
    def self_href(self) -> str | None:
        """Href of the first link with the ``self`` relation, if any."""
        for link in self.links:
            if "self" in link.rel:
                return link.href
        return None

    def links_for(self, rel: str) -> list[Link]:
        """All top-level links carrying *rel*, in declaration order."""
        return [link for link in self.links if rel in link.rel]

    def action(self, name: str) -> Action | None:
        """Look up an action by name."""
        for action in self.actions:
            if action.name == name:
                return action
        return None


class EmbeddedLink(_SirenModel):
    """A sub-entity that only points at another resource."""

    rel: list[str]
    href: str
    class_: list[str] = Field(default_factory=list, alias="class")
    type: str | None = None
    title: str | None = None


class EmbeddedEntity(_EntityBody):
    """A sub-entity carrying a full inline representation."""

    rel: list[str]


class Entity(_EntityBody):
    """A top-level Siren document."""


def _sub_entity_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "link" if "href" in value else "entity"
    return "link" if isinstance(value, EmbeddedLink) else "entity"


SubEntity = Annotated[
    Union[
        Annotated[EmbeddedLink, Tag("link")],
        Annotated[EmbeddedEntity, Tag("entity")],
    ],
    Discriminator(_sub_entity_kind),
]

_EntityBody.model_rebuild()
EmbeddedEntity.model_rebuild()
Entity.model_rebuild()


def parse_entity(data: Any) -> Entity:
    """Validate a decoded JSON document into an ``Entity``."""
    return Entity.model_validate(data)
