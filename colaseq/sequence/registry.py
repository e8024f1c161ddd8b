"""Name-based lookup of sequence policies."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Union

from .model import SequencePolicy
from .policies import (
    ChangeEmphasisPolicy,
    IgnoreHistoryPolicy,
    RandomPositioningPolicy,
    StabilityPolicy,
)

logger = logging.getLogger(__name__)

PolicyFactory = Callable[[], SequencePolicy]

DEFAULT_POLICY_NAME = "ignore_history"

# Legacy spellings accepted by older callers. Lookup is exact: anything not
# listed here or registered is unknown.
POLICY_ALIASES: Dict[str, str] = {
    "ignore-history": "ignore_history",
    "ignoreHistory": "ignore_history",
    "none": "ignore_history",
    "fresh": "ignore_history",
    "stable": "stability",
    "pin": "stability",
    "change-emphasis": "change_emphasis",
    "changeEmphasis": "change_emphasis",
    "emphasis": "change_emphasis",
    "random": "random_positioning",
    "random-positioning": "random_positioning",
    "randomPositioning": "random_positioning",
}


def normalize_policy_name(name: str) -> str:
    return POLICY_ALIASES.get(name, name)


class SequencePolicyRegistry:
    """Maps policy names to factories.

    Each lookup builds a new policy object so that stateful policies never
    share memory between callers. Hold on to the returned instance for the
    whole sequence.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, PolicyFactory] = {}

    def register(self, policy: Union[SequencePolicy, PolicyFactory], name: str = "") -> None:
        """Register a policy instance (shared as-is) or a zero-argument factory.

        Policy classes count as factories.
        """

        if not isinstance(policy, type) and hasattr(policy, "apply"):
            instance = policy
            key = name or instance.name
            self._factories[key] = lambda: instance
        else:
            if not name:
                raise ValueError("A name is required when registering a policy factory")
            key = name
            self._factories[key] = policy
        logger.info("Registered sequence policy '%s'", key)

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return normalize_policy_name(name) in self._factories

    def get(self, name: str) -> SequencePolicy:
        key = normalize_policy_name(name)
        factory = self._factories.get(key)
        if factory is None:
            logger.warning(
                "Unknown sequence policy '%s'; falling back to '%s'", name, DEFAULT_POLICY_NAME
            )
            factory = self._factories[DEFAULT_POLICY_NAME]
        return factory()


def default_registry() -> SequencePolicyRegistry:
    registry = SequencePolicyRegistry()
    registry.register(IgnoreHistoryPolicy, name="ignore_history")
    registry.register(StabilityPolicy, name="stability")
    registry.register(ChangeEmphasisPolicy, name="change_emphasis")
    registry.register(RandomPositioningPolicy, name="random_positioning")
    return registry


_REGISTRY = default_registry()


def get_sequence_policy(name: str) -> SequencePolicy:
    """Return a new policy for ``name``; unknown names give ``ignore_history``."""

    return _REGISTRY.get(name)


def register_sequence_policy(policy: Union[SequencePolicy, PolicyFactory], name: str = "") -> None:
    _REGISTRY.register(policy, name)


__all__ = [
    "DEFAULT_POLICY_NAME",
    "POLICY_ALIASES",
    "SequencePolicyRegistry",
    "default_registry",
    "get_sequence_policy",
    "normalize_policy_name",
    "register_sequence_policy",
]
