"""
Exceptions raised by the mind-map engine.

Only user-rule violations are exceptions. Stale references (an id that no
longer exists) are treated as no-ops by the mutation functions.
"""


class MindMapError(Exception):
    """Base class for all mind-map engine errors."""


class UserRuleViolation(MindMapError):
    """An operation the user asked for is not allowed. Nothing was changed."""

    title = "Not allowed"


class RootDeletionError(UserRuleViolation):
    """Raised when deleting the root node."""

    title = "Cannot delete root"

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__("The root node cannot be deleted")


class SelfConnectionError(UserRuleViolation):
    """Raised when connecting a node to itself."""

    title = "Invalid connection"

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__("A node cannot be connected to itself")
