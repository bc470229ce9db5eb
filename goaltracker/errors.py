"""Domain errors raised by the goal services."""


class GoalNotFoundError(ValueError):
    """Goal record is missing, belongs to another user, or has a bad id."""


class GoalLimitError(ValueError):
    """Creating the goal would exceed a configured limit."""


class PersistenceError(RuntimeError):
    """A write matched no document, so none of its fields were applied."""
