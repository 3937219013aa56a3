"""
Errors raised to callers of the recommendation engine.

Only fatal configuration problems raise. Missing user data, failing upstream
sources and malformed catalog conditions are absorbed and surface as lower
completeness, lower confidence and warnings instead.
"""

from __future__ import annotations


class RecommendationConfigError(ValueError):
    """Base class for configuration errors that prevent any result."""


class EmptyCatalogError(RecommendationConfigError):
    """Raised when scoring is requested against an empty catalog."""

    def __init__(self) -> None:
        super().__init__(
            "Supplement catalog is empty; nothing can be scored. "
            "Check data.catalog_file in config/default.toml."
        )


class MissingSnapshotError(RecommendationConfigError):
    """Raised when scoring is requested without a user snapshot.

    Attributes:
        user_id: User the missing snapshot belongs to.
    """

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No aggregated snapshot supplied for user '{user_id}'.")


class CatalogValidationError(RecommendationConfigError):
    """Raised when a catalog file cannot be turned into candidate definitions.

    Attributes:
        path:   Catalog file that failed.
        errors: ``(index, message)`` pairs for every rejected entry.
    """

    def __init__(self, path: str, errors: list[tuple[int, str]]) -> None:
        self.path = path
        self.errors = errors
        preview = "; ".join(f"#{i}: {msg}" for i, msg in errors[:3])
        more = f" (+{len(errors) - 3} more)" if len(errors) > 3 else ""
        super().__init__(
            f"Catalog '{path}' has {len(errors)} invalid entr"
            f"{'y' if len(errors) == 1 else 'ies'}: {preview}{more}"
        )
