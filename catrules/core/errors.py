"""Error taxonomy for the category rule engine."""


class CategoryRulesError(Exception):
    """Base class for errors raised by the rule engine."""


class NotFoundError(CategoryRulesError):
    """A content, rule or category identifier does not resolve."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} {identifier} not found")


class PersistenceError(CategoryRulesError):
    """Reading from or writing to storage failed."""


class DeadlineExceeded(CategoryRulesError):
    """A rule run did not finish within its time budget."""
