"""Custom exceptions for Schema Diff.

This module defines exception classes for the error conditions that can
occur while reading host schema metadata and comparing field definitions.
"""


class SchemaDiffError(Exception):
    """Base exception for all Schema Diff errors."""

    pass


class NotFoundError(SchemaDiffError):
    """Raised when an entity type or field definition cannot be found.

    A field that exists in only one of the two definition sources is
    reported this way too: it is an absence, not a diffable mismatch.
    """

    def __init__(
        self,
        message: str,
        entity_type_id: str | None = None,
        field_name: str | None = None,
    ):
        """Initialize not found error.

        Args:
            message: Error message
            entity_type_id: Entity type that was looked up
            field_name: Field that was looked up, if any
        """
        self.message = message
        self.entity_type_id = entity_type_id
        self.field_name = field_name
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with the lookup target."""
        if self.entity_type_id and self.field_name:
            return f"{self.message} ({self.entity_type_id}.{self.field_name})"
        if self.entity_type_id:
            return f"{self.message} ({self.entity_type_id})"
        return self.message


class DefinitionError(SchemaDiffError):
    """Raised when a definition has a shape the comparison cannot handle."""

    pass


class SnapshotError(SchemaDiffError):
    """Raised when a schema snapshot file is missing or malformed."""

    pass


class ConfigurationError(SchemaDiffError):
    """Raised when configuration is invalid or missing."""

    pass
