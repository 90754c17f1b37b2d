"""Component, Leaf and Composite for ComposeTreeLib.

A tree is built from two kinds of node sharing one capability:

- Leaf: a terminal node holding an opaque payload.
- Composite: a node owning an ordered list of child Components.

A Composite owns its children exclusively. A node has at most one parent,
so adopting a node that still has a parent fails instead of silently
re-parenting it, and a composite can never contain itself. Children hold
only a weak reference to their parent, so parent/child links never form a
strong reference cycle. Keep a reference to the root for as long as the
tree is in use: once an unreferenced composite is garbage collected, its
former children report ``parent`` as None.

Every structural mutation bumps ``structure_version`` on the mutated
composite and on each of its ancestors. Iterators compare that counter to
detect mutation under a live traversal.
"""

import logging
import numbers
import uuid
import weakref
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from ..config import DescribeConfig, TraversalConfig, TraversalStrategy
from ..exceptions import (
    AlreadyOwnedError,
    ConcurrentModificationError,
    CycleDetectedError,
    NodeNotFoundError,
    UnsupportedOperationError,
)
from .dispatch import VisitResult
from .iterator import TreeIterator, create_iterator
from .kinds import NodeKind, kind_key, register_kind

logger = logging.getLogger(__name__)

_DEFAULT_DESCRIBE = DescribeConfig()


class Component(ABC):
    """Capability shared by every node in a tree.

    Concrete subclasses set the ``kind`` class attribute; defining such a
    class registers the kind centrally (see ``kinds.register_kind``). The
    kind is what visitors dispatch on and is not meant for control flow
    anywhere else.

    Nodes compare by identity. Two nodes with equal ids are still two
    different nodes.
    """

    kind: str = ""

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("kind"):
            register_kind(cls.kind, cls)

    def __init__(self, node_id: Optional[str] = None):
        """Initialize the node.

        Args:
            node_id: Stable identifier; generated when omitted
        """
        if node_id is None:
            node_id = f"{kind_key(self.kind)}-{uuid.uuid4().hex[:12]}"
        self._id = node_id
        self._parent_ref: Optional[weakref.ref] = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent(self) -> Optional['Composite']:
        """Owning composite, or None for a root or detached node."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, parent: Optional['Composite']) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    # Capability

    @abstractmethod
    def is_leaf(self) -> bool:
        """True if this node can never have children."""
        pass

    @abstractmethod
    def measure(self) -> Union[int, float]:
        """Return this node's measure (see Leaf and Composite)."""
        pass

    def accept(self, visitor) -> VisitResult:
        """Dispatch ``visitor`` to this node.

        Returns:
            VisitResult.STOP if the visitor aborted the traversal,
            VisitResult.CONTINUE otherwise

        Raises:
            UnsupportedOperationError: If the visitor has no handler for
                this node's kind
        """
        if visitor.dispatch(self) is VisitResult.STOP:
            return VisitResult.STOP
        return VisitResult.CONTINUE

    def describe(self, depth: int = 0,
                 config: Optional[DescribeConfig] = None) -> str:
        """Return a human-readable, indented description of the subtree."""
        return "\n".join(self.describe_lines(depth, config))

    def describe_lines(self, depth: int = 0,
                       config: Optional[DescribeConfig] = None) -> Iterator[str]:
        yield self.describe_line(depth, config)

    def describe_line(self, depth: int = 0,
                      config: Optional[DescribeConfig] = None) -> str:
        """Return the single line describing this node at ``depth``."""
        config = config or _DEFAULT_DESCRIBE
        line = f"{config.indent * depth}{self._label()}"
        if config.show_measure:
            line += f" = {self.measure()}"
        return line

    def _label(self) -> str:
        return f"{kind_key(self.kind)} {self.id}"

    def create_iterator(self,
                        strategy: Union[TraversalStrategy, str, None] = None,
                        config: Optional[TraversalConfig] = None) -> TreeIterator:
        """Create a fail-fast iterator over this subtree (pre-order by default)."""
        return create_iterator(self, strategy, config)

    def __iter__(self) -> TreeIterator:
        return self.create_iterator()

    # Structure

    @property
    def children(self) -> Tuple['Component', ...]:
        return ()

    def add_child(self, node: 'Component', index: Optional[int] = None) -> 'Component':
        """Adopt ``node``; only composites support this.

        The cycle check still runs first, so offering an ancestor reports
        the cycle rather than the unsupported operation.
        """
        self._check_cycle(node)
        raise UnsupportedOperationError(
            kind_key(self.kind), node=self, operation="add_child"
        )

    def remove_child(self, node: 'Component') -> 'Component':
        raise NodeNotFoundError(self, node)

    def move_child(self, node: 'Component', new_index: int) -> None:
        raise NodeNotFoundError(self, node)

    def detach(self) -> 'Component':
        """Remove this node from its parent, if it has one."""
        parent = self.parent
        if parent is not None:
            parent.remove_child(self)
        return self

    def dispose(self) -> None:
        """Detach this node and release whatever it owns."""
        self.detach()

    def _check_cycle(self, node: 'Component') -> None:
        if not isinstance(node, Component):
            raise TypeError(
                f"Children must be Component instances, got {type(node).__name__}"
            )
        # Walk up from self; reaching ``node`` means adopting it closes a loop
        current: Optional[Component] = self
        while current is not None:
            if current is node:
                raise CycleDetectedError(self, node)
            current = current.parent

    def _check_adoptable(self, node: 'Component') -> None:
        self._check_cycle(node)
        owner = node.parent
        if owner is not None:
            raise AlreadyOwnedError(node, owner)

    def find(self, node_id: str) -> Optional['Component']:
        """Return the first node in pre-order with ``node_id``, or None."""
        for node in self.create_iterator():
            if node.id == node_id:
                return node
        return None

    # Navigation

    @property
    def root(self) -> 'Component':
        current = self
        while current.parent is not None:
            current = current.parent
        return current

    @property
    def depth(self) -> int:
        """Distance to the root (root = 0)."""
        return sum(1 for _ in self.ancestors())

    def ancestors(self) -> Iterator['Composite']:
        """Yield the parent, grandparent and so on up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def is_ancestor_of(self, node: 'Component') -> bool:
        return any(ancestor is self for ancestor in node.ancestors())

    def path(self) -> List[str]:
        """Ids from the root down to this node."""
        ids = [self.id]
        ids.extend(ancestor.id for ancestor in self.ancestors())
        ids.reverse()
        return ids

    def siblings(self) -> Iterator['Component']:
        """Yield the other children of this node's parent."""
        parent = self.parent
        if parent is None:
            return
        for child in parent.children:
            if child is not self:
                yield child

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r})"


class Leaf(Component):
    """Terminal node holding intrinsic data.

    The measure of a leaf is, in order of preference:

    - ``weight`` when it is a number,
    - ``weight(payload)`` when it is a callable,
    - the payload itself when it is a real number.
    """

    kind = NodeKind.LEAF.value

    def __init__(self, payload: Any = None, node_id: Optional[str] = None,
                 weight: Union[int, float, Callable[[Any], Any], None] = None):
        """Initialize the leaf.

        Args:
            payload: Opaque, application-defined data
            node_id: Stable identifier; generated when omitted
            weight: Explicit measure, or a function of the payload
        """
        super().__init__(node_id)
        self.payload = payload
        self.weight = weight

    def is_leaf(self) -> bool:
        return True

    def measure(self) -> Union[int, float]:
        """Return the leaf's intrinsic value.

        Raises:
            TypeError: If there is no weight and the payload is not a number
        """
        if self.weight is not None:
            if callable(self.weight):
                return self.weight(self.payload)
            return self.weight
        if isinstance(self.payload, numbers.Real) and not isinstance(self.payload, bool):
            return self.payload
        raise TypeError(
            f"Leaf {self.id!r} has no weight and a non-numeric payload "
            f"({type(self.payload).__name__})"
        )

    def _label(self) -> str:
        return f"- {self.id}: {self.payload!r}"

    def __repr__(self) -> str:
        return f"Leaf(id={self.id!r}, payload={self.payload!r})"


class Composite(Component):
    """Node owning an ordered sequence of child Components.

    ``node in composite`` tests direct children only. Iterating a composite
    walks the whole subtree, so use ``composite.is_ancestor_of(node)`` for
    subtree membership.
    """

    kind = NodeKind.COMPOSITE.value

    def __init__(self, node_id: Optional[str] = None,
                 children: Optional[List[Component]] = None):
        """Initialize the composite.

        Args:
            node_id: Stable identifier; generated when omitted
            children: Nodes to adopt, in order (same rules as add_child)

        Raises:
            AlreadyOwnedError: If a child has a parent or is listed twice;
                no child is adopted in that case
            TypeError: If a child is not a Component
        """
        super().__init__(node_id)
        self._children: List[Component] = []
        self._structure_version = 0

        children = list(children or ())
        for index, child in enumerate(children):
            self._check_adoptable(child)
            if any(child is earlier for earlier in children[:index]):
                raise AlreadyOwnedError(child, self)
        for child in children:
            self.add_child(child)

    @property
    def structure_version(self) -> int:
        """Modification counter covering this composite's whole subtree."""
        return self._structure_version

    @property
    def children(self) -> Tuple[Component, ...]:
        return tuple(self._children)

    @property
    def child_count(self) -> int:
        return len(self._children)

    def is_leaf(self) -> bool:
        return False

    def measure(self) -> Union[int, float]:
        """Sum of the children's measures, recomputed on every call."""
        return sum(child.measure() for child in self._children)

    def accept(self, visitor) -> VisitResult:
        """Dispatch ``visitor`` to this node, then to each child in order.

        The children are skipped when the handler returns SKIP_CHILDREN.
        STOP from any handler in the subtree ends the whole traversal.

        Raises:
            UnsupportedOperationError: At the first node whose kind the
                visitor cannot handle
            ConcurrentModificationError: If a handler mutates this subtree
        """
        result = visitor.dispatch(self)
        if result is VisitResult.STOP:
            return VisitResult.STOP
        if result is VisitResult.SKIP_CHILDREN or not self._children:
            return VisitResult.CONTINUE

        expected = self._structure_version
        visitor.depth += 1
        try:
            for child in tuple(self._children):
                if child.accept(visitor) is VisitResult.STOP:
                    return VisitResult.STOP
                if self._structure_version != expected:
                    raise ConcurrentModificationError(
                        self, expected, self._structure_version
                    )
        finally:
            visitor.depth -= 1
        return VisitResult.CONTINUE

    def describe_lines(self, depth: int = 0,
                       config: Optional[DescribeConfig] = None) -> Iterator[str]:
        yield self.describe_line(depth, config)
        for child in self._children:
            yield from child.describe_lines(depth + 1, config)

    def _label(self) -> str:
        return f"+ {self.id} [{len(self._children)}]"

    # Mutation

    def add_child(self, node: Component, index: Optional[int] = None) -> Component:
        """Insert ``node`` at ``index`` (default: at the end).

        Negative indices count from the end, as with ``list.insert``.

        Returns:
            The adopted node

        Raises:
            CycleDetectedError: If ``node`` is this composite or an ancestor
            AlreadyOwnedError: If ``node`` already has a parent
            IndexError: If ``index`` is outside the child sequence
            TypeError: If ``node`` is not a Component
        """
        self._check_adoptable(node)
        size = len(self._children)
        if index is None:
            index = size
        elif not -size <= index <= size:
            raise IndexError(
                f"Insert index {index} out of range for {self.id!r} "
                f"with {size} children"
            )
        elif index < 0:
            index += size

        self._children.insert(index, node)
        node._set_parent(self)
        self._touch()
        logger.debug("Added %s to %s at %d", node.id, self.id, index)
        return node

    def remove_child(self, node: Component) -> Component:
        """Remove ``node`` and hand it back to the caller, parentless.

        Raises:
            NodeNotFoundError: If ``node`` is not a direct child
        """
        index = self.index_of(node)
        del self._children[index]
        node._set_parent(None)
        self._touch()
        logger.debug("Removed %s from %s", node.id, self.id)
        return node

    def move_child(self, node: Component, new_index: int) -> None:
        """Move a direct child so that it ends up at ``new_index``.

        Raises:
            NodeNotFoundError: If ``node`` is not a direct child
            IndexError: If ``new_index`` is outside the child sequence
        """
        old_index = self.index_of(node)
        size = len(self._children)
        if not -size <= new_index < size:
            raise IndexError(
                f"Move index {new_index} out of range for {self.id!r} "
                f"with {size} children"
            )
        if new_index < 0:
            new_index += size

        del self._children[old_index]
        self._children.insert(new_index, node)
        self._touch()
        logger.debug("Moved %s in %s from %d to %d",
                     node.id, self.id, old_index, new_index)

    def index_of(self, node: Component) -> int:
        """Position of a direct child, compared by identity.

        Raises:
            NodeNotFoundError: If ``node`` is not a direct child
        """
        for index, child in enumerate(self._children):
            if child is node:
                return index
        raise NodeNotFoundError(self, node)

    def dispose(self) -> None:
        """Detach this composite and dispose every owned descendant.

        Children end up parentless and this composite ends up empty.
        """
        super().dispose()
        while self._children:
            child = self._children.pop()
            child._set_parent(None)
            child.dispose()
        self._touch()
        logger.debug("Disposed %s", self.id)

    def __contains__(self, node: object) -> bool:
        return any(child is node for child in self._children)

    def _touch(self) -> None:
        current: Optional[Composite] = self
        while current is not None:
            current._structure_version += 1
            current = current.parent

    def __repr__(self) -> str:
        return f"Composite(id={self.id!r}, children={len(self._children)})"
