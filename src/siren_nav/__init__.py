"""siren-nav -- declarative navigation of Siren hypermedia APIs.

Describe a path through an API (follow relation X, then Y, accepting
content type Z) and let the engine turn it into HTTP requests only when
a result is needed.

- ``Navigator``: single-path chain builder and terminal operations
- ``MultiNavigator``: fan-out over several resources
- ``steps``: the step algebra (``follow``, ``accept``) and reduction
- ``ResourceCache`` / ``HttpTransport``: default collaborators
"""

from siren_nav.cache import Cache, CacheHandle, ResourceCache
from siren_nav.errors import (
    ActionNotFoundError,
    AmbiguousMatchError,
    NavigationError,
    NoMatchError,
    RelationError,
)
from siren_nav.multi import MultiNavigator, MultiStep
from siren_nav.navigation import Navigator
from siren_nav.pending import Pending
from siren_nav.response import MultiResponse, NavResponse
from siren_nav.siren import Action, EmbeddedEntity, EmbeddedLink, Entity, Link, parse_entity
from siren_nav.state import NavState, RequestConfig
from siren_nav.steps import Step, accept, follow
from siren_nav.trace import Debug, NavigationEvent, TraceEmitter
from siren_nav.transport import HttpTransport, Transport, TransportConfig

__all__ = [
    "Action",
    "ActionNotFoundError",
    "AmbiguousMatchError",
    "Cache",
    "CacheHandle",
    "Debug",
    "EmbeddedEntity",
    "EmbeddedLink",
    "Entity",
    "HttpTransport",
    "Link",
    "MultiNavigator",
    "MultiResponse",
    "MultiStep",
    "NavResponse",
    "NavState",
    "NavigationError",
    "NavigationEvent",
    "Navigator",
    "NoMatchError",
    "Pending",
    "RelationError",
    "RequestConfig",
    "ResourceCache",
    "Step",
    "TraceEmitter",
    "Transport",
    "TransportConfig",
    "accept",
    "follow",
    "parse_entity",
]
