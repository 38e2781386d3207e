"""Resolve typed key prefixes against a per-mode prefix tree of bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Literal, Mapping, Optional, Sequence

from modal_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry

Status = Literal["match", "pending", "miss"]


@dataclass(slots=True)
class _Node:
    here: list[Binding] = field(default_factory=list)
    next: Dict[str, "_Node"] = field(default_factory=dict)

    def insert(self, binding: Binding) -> None:
        node = self
        for token in binding.sequence.tokens:
            node = node.next.setdefault(token, _Node())
        node.here.append(binding)

    def find(self, tokens: Sequence[str]) -> Optional["_Node"]:
        node = self
        for token in tokens:
            child = node.next.get(token)
            if child is None:
                return None
            node = child
        return node

    def below(self) -> Iterator[Binding]:
        """Bindings strictly deeper than this node."""

        for child in self.next.values():
            yield from child.here
            yield from child.below()


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """What a token prefix resolves to.

    ``pending`` means the prefix starts at least one longer binding that the
    flag context allows; ``timeout_ms`` is then the shortest of their
    timeouts and ``next_expected`` lists the tokens that may follow.
    """

    status: Status
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None


class KeymapResolver:
    """Caches one tree per mode, rebuilt whenever the registry revision moves."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, tuple[int, _Node]] = {}

    def resolve(
        self,
        mode: str,
        tokens: Sequence[str],
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        keys = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": " ".join(keys)},
        ) as handle:
            result = self._lookup(mode, keys, context or {})
            handle.add_metadata("status", result.status)
            if result.match:
                handle.add_metadata("binding_id", result.match.binding.id)
            return result

    def reset(self, mode: Optional[str] = None) -> None:
        if mode:
            self._cache.pop(mode, None)
        else:
            self._cache.clear()

    def _lookup(
        self, mode: str, keys: tuple[str, ...], flags: Mapping[str, bool]
    ) -> ResolutionResult:
        node = self._tree(mode).find(keys)
        if node is None:
            return ResolutionResult(status="miss")

        live = [b for b in node.here if b.allows(flags)]
        if live:
            best = min(live, key=lambda b: (-b.priority, b.id))
            return ResolutionResult(
                status="match",
                match=ResolutionMatch(best, self._registry.get_action(best.action_id)),
                consumed=len(keys),
            )

        longer = [b for b in node.below() if b.allows(flags)]
        if not longer:
            return ResolutionResult(status="miss", consumed=len(keys))
        return ResolutionResult(
            status="pending",
            consumed=len(keys),
            next_expected=tuple(sorted(node.next)),
            timeout_ms=min(b.sequence.timeout_ms for b in longer),
        )

    def _tree(self, mode: str) -> _Node:
        revision = self._registry.revision()
        cached = self._cache.get(mode)
        if cached is not None and cached[0] == revision:
            return cached[1]
        root = _Node()
        for binding in self._registry.iter_bindings(mode):
            root.insert(binding)
        self._cache[mode] = (revision, root)
        return root


__all__ = [
    "KeymapResolver",
    "ResolutionMatch",
    "ResolutionResult",
]
