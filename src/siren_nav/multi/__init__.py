"""Fan-out navigation: one chain, many resources."""

from siren_nav.multi.multinav import MultiNavigator
from siren_nav.multi.multistep import MultiStep, follow_each, reduce_each, to_multi

__all__ = [
    "MultiNavigator",
    "MultiStep",
    "follow_each",
    "reduce_each",
    "to_multi",
]
