"""Node kind tags and the central kind registry.

Every concrete Component subclass declares a ``kind`` class attribute.
Defining the class records that kind here, so the set of node kinds is
enumerated in one place and visitors can be checked against it.
"""

from enum import Enum
from typing import Dict, FrozenSet, Type, Union


class NodeKind(str, Enum):
    """Built-in node kinds."""
    LEAF = "leaf"
    COMPOSITE = "composite"
    ANY = "*"  # Explicit fallback key for visitor handlers, never a node kind


KindLike = Union[NodeKind, str]

_KIND_REGISTRY: Dict[str, Type] = {}


def kind_key(kind: KindLike) -> str:
    """Normalize a kind (enum member or string) to its plain string key.

    str-mixin enums hash by member name, so enum members and their values
    must never be mixed as dict keys.
    """
    if isinstance(kind, Enum):
        return str(kind.value)
    return str(kind)


def register_kind(kind: KindLike, node_class: Type) -> str:
    """Record ``node_class`` as the implementation of ``kind``.

    Re-registering the same kind is allowed for subclasses of the current
    owner and for a redefinition of the same class (same module and
    qualified name).

    Raises:
        ValueError: If ``kind`` is empty or the ANY wildcard
        TypeError: If ``kind`` already belongs to an unrelated class
    """
    key = kind_key(kind)
    if not key or key == NodeKind.ANY.value:
        raise ValueError(f"Invalid node kind: {key!r}")

    existing = _KIND_REGISTRY.get(key)
    if existing is not None and existing is not node_class:
        redefined = (existing.__module__ == node_class.__module__ and
                     existing.__qualname__ == node_class.__qualname__)
        if redefined:
            _KIND_REGISTRY[key] = node_class
        elif not issubclass(node_class, existing):
            raise TypeError(
                f"Node kind {key!r} is already registered to "
                f"{existing.__qualname__}"
            )
        return key

    _KIND_REGISTRY[key] = node_class
    return key


def unregister_kind(kind: KindLike) -> None:
    """Forget a registered kind. Unknown kinds are ignored."""
    _KIND_REGISTRY.pop(kind_key(kind), None)


def registered_kinds() -> FrozenSet[str]:
    """Return the keys of every registered node kind."""
    return frozenset(_KIND_REGISTRY)


def kind_class(kind: KindLike) -> Type:
    """Return the class registered for ``kind``.

    Raises:
        KeyError: If the kind is unknown
    """
    return _KIND_REGISTRY[kind_key(kind)]
