"""
Error taxonomy for the learning core.

- ValidationError: malformed input, nothing is mutated
- AccessDenied: the lesson is still locked behind its prerequisites
- PersistenceFailure: the local store could not be read or written
- CatalogError: the compiled-in lesson catalog is inconsistent
- ConfigError: settings could not be read or validated
"""


class JourneyError(Exception):
    """Base class for all learning-core errors."""


class ValidationError(JourneyError, ValueError):
    """Input was rejected before any state changed."""


class AccessDenied(JourneyError):
    """A locked lesson was submitted for completion."""

    def __init__(self, lesson_id: str, missing: list[str]):
        self.lesson_id = lesson_id
        self.missing = missing
        super().__init__(
            f"Lesson '{lesson_id}' is locked. Complete first: {', '.join(missing)}"
        )


class PersistenceFailure(JourneyError):
    """Reading or writing the stored profile failed."""


class CatalogError(JourneyError):
    """The lesson catalog references unknown lessons or contains a cycle."""


class ConfigError(JourneyError):
    """Settings file or environment overrides could not be used."""
