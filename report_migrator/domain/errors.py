"""Error taxonomy for the migration pipeline.

Validation problems are not exceptions: transformers return ``None`` and the
orchestrator skips the record. Everything below is raised across a layer
boundary.
"""
from __future__ import annotations

from typing import Any


class MigrationError(Exception):
    """Base class for all migrator errors."""


class ConfigurationError(MigrationError):
    """Settings could not be resolved from the environment or CLI."""


class ExtractError(MigrationError):
    """An extract or intermediate artifact is missing or unparseable."""


class CrmError(MigrationError):
    def __init__(self, message: str, status: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is None:
            return base
        return f"{base} (status={self.status})"


class CrmLookupError(CrmError):
    pass


class CrmCreateError(CrmError):
    pass


class CrmArchiveError(CrmError):
    pass


class PersistenceError(MigrationError):
    """A relational store write or lookup failed."""


class MigrationAborted(MigrationError):
    """Raised by the orchestrator under the abort policy."""

    def __init__(self, outcome: Any) -> None:
        super().__init__(f"Migration aborted at {outcome.reference}: {outcome.error}")
        self.outcome = outcome
