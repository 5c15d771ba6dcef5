"""Key-to-action table used by the app's key dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ActionHandler = Callable[[], bool | None]


@dataclass(frozen=True)
class ActionBinding:
    """One named action and the key tokens that trigger it."""

    action: str
    keys: tuple[str, ...]
    handler: ActionHandler


class ActionRegistry:
    """Maps key tokens to named actions; a later binding takes over a shared key."""

    def __init__(self) -> None:
        self._by_key: dict[str, ActionBinding] = {}

    def bind(self, binding: ActionBinding) -> ActionRegistry:
        for key in binding.keys:
            previous = self._by_key.get(key)
            if previous is not None and previous.action != binding.action:
                logger.debug("key %s moves from %s to %s", key, previous.action, binding.action)
            self._by_key[key] = binding
        return self

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def action_for(self, key: str) -> str | None:
        binding = self._by_key.get(key)
        return binding.action if binding is not None else None

    def keys_for(self, action: str) -> tuple[str, ...]:
        return tuple(key for key, binding in self._by_key.items() if binding.action == action)

    def dispatch(self, key: str) -> bool | None:
        """Run the action bound to ``key``; ``None`` when nothing is bound."""
        binding = self._by_key.get(key)
        if binding is None:
            return None
        logger.debug("key %s -> %s", key, binding.action)
        return binding.handler()


__all__ = ["ActionBinding", "ActionRegistry", "ActionHandler"]
