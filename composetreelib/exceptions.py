"""Exception taxonomy for ComposeTreeLib.

Every error raised by the library derives from TreeError. Each concrete
error also derives from the closest builtin exception, so callers that
already catch ValueError, LookupError and friends keep working.

None of these errors are retried internally. Retrying (for example,
re-creating an iterator after a ConcurrentModificationError) is left to
the caller.
"""

from typing import Any, Optional


class TreeError(Exception):
    """Base exception for all ComposeTreeLib errors."""
    pass


class CycleDetectedError(TreeError, ValueError):
    """Raised when a mutation would make a Composite contain itself."""

    def __init__(self, parent: Any, node: Any):
        """Initialize the exception.

        Args:
            parent: The composite that was asked to adopt ``node``
            node: The node that is ``parent`` itself or one of its ancestors
        """
        self.parent = parent
        self.node = node
        if parent is node:
            reason = "a composite cannot contain itself"
        else:
            reason = "node is an ancestor of the target composite"
        super().__init__(
            f"Cannot add {node.id!r} to {parent.id!r}: {reason}"
        )


class AlreadyOwnedError(TreeError, ValueError):
    """Raised when adding a node that still belongs to another composite."""

    def __init__(self, node: Any, owner: Any):
        """Initialize the exception.

        Args:
            node: The node that was offered as a child
            owner: The composite currently owning ``node``
        """
        self.node = node
        self.owner = owner
        super().__init__(
            f"Node {node.id!r} is already owned by {owner.id!r}; "
            f"detach it first"
        )


class NodeNotFoundError(TreeError, LookupError):
    """Raised when a node is not a direct child of the composite."""

    def __init__(self, parent: Any, node: Any):
        self.parent = parent
        self.node = node
        node_id = getattr(node, "id", node)
        super().__init__(
            f"Node {node_id!r} is not a child of {parent.id!r}"
        )


class UnsupportedOperationError(TreeError, TypeError):
    """Raised when a visitor has no handler for a node kind.

    This is a programming error in the visitor catalog, not a runtime
    condition to recover from.
    """

    def __init__(self, node_kind: str, visitor_kind: Optional[str] = None,
                 node: Optional[Any] = None, operation: Optional[str] = None,
                 message: Optional[str] = None):
        """Initialize the exception.

        Args:
            node_kind: Kind tag of the node that could not be handled
            visitor_kind: Kind tag of the visitor doing the dispatch, if any
            node: The offending node, when one was reached
            operation: Name of a node operation the kind does not support
            message: Override for the default message
        """
        self.node_kind = node_kind
        self.visitor_kind = visitor_kind
        self.node = node
        self.operation = operation
        if message is None:
            if visitor_kind is not None:
                message = (
                    f"Visitor {visitor_kind!r} has no handler for node kind "
                    f"{node_kind!r}"
                )
            else:
                message = (
                    f"Operation {operation!r} is not supported by node kind "
                    f"{node_kind!r}"
                )
            if node is not None:
                message += f" (node {node.id!r})"
        super().__init__(message)


class ConcurrentModificationError(TreeError, RuntimeError):
    """Raised when a tree changes structurally under a live iterator."""

    def __init__(self, root: Any, expected_version: int, actual_version: int):
        self.root = root
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Tree rooted at {root.id!r} was modified during traversal "
            f"(version {expected_version} -> {actual_version})"
        )


class TraversalExhaustedError(TreeError, StopIteration):
    """Raised by next() once an iterator has produced its last node.

    Subclasses StopIteration so iterators terminate ``for`` loops cleanly.
    """

    def __init__(self, message: str = "Traversal is exhausted"):
        super().__init__(message)


class ConfigurationError(TreeError, ValueError):
    """Raised when a TraversalConfig fails validation."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__(
            f"Invalid configuration: {'; '.join(self.problems)}"
        )
