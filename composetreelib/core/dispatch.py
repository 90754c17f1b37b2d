"""Visitor double dispatch for ComposeTreeLib.

Operations over a tree live in Visitor classes, not in the node classes.
Which operation runs for a node is decided by two tags: the visitor's
``visitor_kind`` and the node's ``kind``. The DispatchRegistry maps that
pair to a handler with a single dict lookup, so adding an operation never
touches the node classes and no handler is ever picked by type tests.

Example:
    class AreaVisitor(Visitor):
        def __init__(self):
            super().__init__()
            self.area = 0

        @handles(NodeKind.LEAF)
        def visit_leaf(self, node):
            self.area += node.measure()

        @handles(NodeKind.COMPOSITE)
        def visit_composite(self, node):
            pass

    total = AreaVisitor().run(tree).area
"""

import logging
import weakref
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Set, Tuple

from ..exceptions import UnsupportedOperationError
from .kinds import KindLike, NodeKind, kind_key, registered_kinds

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any], Any]

_HANDLES_ATTR = "_composetree_handles"


class VisitResult(Enum):
    """Signal returned by a visitor handler to steer ``accept``."""
    CONTINUE = "continue"            # Visit the children as usual
    SKIP_CHILDREN = "skip_children"  # Do not descend into this node
    STOP = "stop"                    # Abort the whole traversal

    @classmethod
    def coerce(cls, value: Any) -> 'VisitResult':
        """Map a handler's return value to a VisitResult.

        Anything that is not a VisitResult (usually None) means CONTINUE.
        """
        if isinstance(value, cls):
            return value
        return cls.CONTINUE


class DispatchRegistry:
    """Table of handlers keyed by ``(visitor_kind, node_kind)``."""

    def __init__(self):
        self._table: Dict[Tuple[str, str], Handler] = {}
        self._by_visitor: Dict[str, Set[str]] = {}
        self._owners: Dict[str, weakref.ref] = {}

    def register(self, visitor_kind: str, node_kind: KindLike,
                 handler: Handler) -> None:
        """Register ``handler(visitor, node)`` for the pair.

        A later registration for the same pair replaces the earlier one.
        """
        key = kind_key(node_kind)
        self._table[(visitor_kind, key)] = handler
        self._by_visitor.setdefault(visitor_kind, set()).add(key)

    def unregister(self, visitor_kind: str,
                   node_kind: Optional[KindLike] = None) -> None:
        """Remove one handler, or every handler of a visitor kind."""
        kinds = self._by_visitor.get(visitor_kind)
        if not kinds:
            return
        targets = list(kinds) if node_kind is None else [kind_key(node_kind)]
        for key in targets:
            self._table.pop((visitor_kind, key), None)
            kinds.discard(key)
        if not kinds:
            del self._by_visitor[visitor_kind]

    def lookup(self, visitor_kind: str, node_kind: KindLike) -> Optional[Handler]:
        """Return the handler for the pair, or None.

        An exact match wins; a handler registered for NodeKind.ANY is the
        only fallback.
        """
        handler = self._table.get((visitor_kind, kind_key(node_kind)))
        if handler is None:
            handler = self._table.get((visitor_kind, NodeKind.ANY.value))
        return handler

    def resolve(self, visitor_kind: str, node_kind: KindLike) -> Handler:
        """Return the handler for the pair.

        Raises:
            UnsupportedOperationError: If no handler is registered
        """
        handler = self.lookup(visitor_kind, node_kind)
        if handler is None:
            raise UnsupportedOperationError(kind_key(node_kind), visitor_kind=visitor_kind)
        return handler

    def kinds_for(self, visitor_kind: str) -> Set[str]:
        """Node kinds that have a handler for ``visitor_kind``."""
        return set(self._by_visitor.get(visitor_kind, ()))

    def __contains__(self, pair: Tuple[str, KindLike]) -> bool:
        visitor_kind, node_kind = pair
        return (visitor_kind, kind_key(node_kind)) in self._table

    def owner_of(self, visitor_kind: str) -> Optional[type]:
        """Return the live Visitor class holding ``visitor_kind``, or None."""
        ref = self._owners.get(visitor_kind)
        return ref() if ref is not None else None

    def claim(self, visitor_kind: str, owner: type) -> None:
        """Reserve ``visitor_kind`` for ``owner`` and clear its handlers.

        A key whose previous owner has been garbage collected is free again.

        Raises:
            TypeError: If another live class holds ``visitor_kind``
        """
        current = self.owner_of(visitor_kind)
        if current is not None and current is not owner:
            raise TypeError(
                f"Visitor kind {visitor_kind!r} is already registered to "
                f"{current.__qualname__}"
            )
        self.unregister(visitor_kind)
        self._owners[visitor_kind] = weakref.ref(owner)

    def free_kind(self, base: str) -> str:
        """Return ``base``, or ``base#N`` if ``base`` is held by a live class."""
        candidate = base
        suffix = 2
        while self.owner_of(candidate) is not None:
            candidate = f"{base}#{suffix}"
            suffix += 1
        return candidate


default_registry = DispatchRegistry()


def handles(*node_kinds: KindLike) -> Callable[[Callable], Callable]:
    """Mark a Visitor method as the handler for one or more node kinds."""
    if not node_kinds:
        raise TypeError("handles() needs at least one node kind")

    def decorator(func: Callable) -> Callable:
        setattr(func, _HANDLES_ATTR, tuple(kind_key(k) for k in node_kinds))
        return func

    return decorator


class Visitor:
    """Base class for operations dispatched per node kind.

    Subclasses declare their handlers with ``@handles``. When a subclass is
    defined, its handlers (inherited ones included, overrides winning) are
    registered in ``registry`` under ``visitor_kind``, which defaults to the
    class's module-qualified name. Each class owns its key: a second live
    class with the same qualified name gets a ``#N`` suffix, and an explicit
    ``visitor_kind`` already held by another live class raises TypeError.

    Accumulated state belongs on the visitor instance. ``depth`` is kept
    current by ``Composite.accept``: 0 at the node ``accept`` was called on,
    one more for each level below it.
    """

    visitor_kind: Optional[str] = None
    registry: DispatchRegistry = default_registry
    depth: int = 0

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "visitor_kind" not in cls.__dict__:
            # Same qualified name from a factory or a redefinition gets its own key
            cls.visitor_kind = cls.registry.free_kind(
                f"{cls.__module__}.{cls.__qualname__}"
            )

        handler_names: Dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                for key in getattr(attr, _HANDLES_ATTR, ()):
                    handler_names[key] = name

        cls.registry.claim(cls.visitor_kind, cls)
        for key, name in handler_names.items():
            cls.registry.register(cls.visitor_kind, key, getattr(cls, name))

    def __init__(self):
        self.depth = 0

    def dispatch(self, node) -> VisitResult:
        """Run the handler registered for ``node``'s kind on ``node``.

        Raises:
            UnsupportedOperationError: If this visitor has no handler for
                the node's kind and no NodeKind.ANY fallback
        """
        node_kind = kind_key(node.kind)
        handler = self.registry.lookup(self.visitor_kind, node_kind)
        if handler is None:
            logger.debug("No handler for (%s, %s) at node %s",
                         self.visitor_kind, node_kind, node.id)
            raise UnsupportedOperationError(
                node_kind, visitor_kind=self.visitor_kind, node=node
            )
        return VisitResult.coerce(handler(self, node))

    def run(self, root) -> 'Visitor':
        """Visit ``root`` and its subtree; return this visitor."""
        self.depth = 0
        root.accept(self)
        return self

    def handled_kinds(self) -> Set[str]:
        """Node kinds this visitor has an explicit handler for."""
        return self.registry.kinds_for(self.visitor_kind)

    def missing_kinds(self) -> Set[str]:
        """Registered node kinds this visitor cannot handle."""
        handled = self.handled_kinds()
        if NodeKind.ANY.value in handled:
            return set()
        return set(registered_kinds()) - handled

    def check_complete(self) -> 'Visitor':
        """Fail early if some registered node kind has no handler.

        Raises:
            UnsupportedOperationError: Listing the missing kinds
        """
        missing = self.missing_kinds()
        if missing:
            kinds = ", ".join(sorted(missing))
            raise UnsupportedOperationError(
                kinds,
                visitor_kind=self.visitor_kind,
                message=f"Visitor {self.visitor_kind!r} has no handler for "
                        f"node kinds: {kinds}",
            )
        return self


class FunctionVisitor(Visitor):
    """Visitor assembled from plain callables.

    Allows ad-hoc operations without subclassing. Each callable receives
    the node and may return a VisitResult.

    Example:
        names = []
        FunctionVisitor({
            NodeKind.LEAF: lambda node: names.append(node.id),
            NodeKind.COMPOSITE: lambda node: None,
        }).run(tree)
    """

    def __init__(self, handlers: Mapping[KindLike, Callable[[Any], Any]],
                 visitor_kind: str = "function"):
        super().__init__()
        self.visitor_kind = visitor_kind
        self.registry = DispatchRegistry()
        for node_kind, func in handlers.items():
            self.registry.register(visitor_kind, node_kind, _drop_visitor(func))


def _drop_visitor(func: Callable[[Any], Any]) -> Handler:
    def handler(visitor, node):
        return func(node)
    return handler
