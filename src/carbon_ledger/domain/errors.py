"""Ledger error taxonomy."""


class LedgerError(Exception):
    """Base error for ledger operations."""


class PersistenceError(LedgerError):
    """A read or write against the persistence adapter failed."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Persistence failed during {operation}")


class LoadError(LedgerError):
    """Part of the initial bulk load failed and fell back to defaults."""

    def __init__(self, part: str) -> None:
        self.part = part
        super().__init__(f"Failed to load {part}; using defaults")
