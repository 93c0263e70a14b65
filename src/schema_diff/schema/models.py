"""Data models for field schema comparison results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from schema_diff.host.definitions import EntityTypeDefinition, FieldStorageDefinition
from schema_diff.host.interfaces import TableMapping


@dataclass(frozen=True)
class FieldSchemaRecord:
    """Normalized schema of one field on one side of a comparison.

    The attribute order is the order in which a record is serialized, and
    both sides of a comparison are always built with every attribute, so
    their serialized forms line up key for key.
    """

    has_custom_storage: bool
    schema: dict[str, Any]
    is_revisionable: bool
    allows_shared_table_storage: bool
    requires_dedicated_table_storage: bool
    installed_schema: dict[str, Any]

    LABELS: ClassVar[dict[str, str]] = {
        "has_custom_storage": "Has custom storage",
        "schema": "Schema",
        "is_revisionable": "Is revisionable",
        "allows_shared_table_storage": "Allows shared table storage",
        "requires_dedicated_table_storage": "Requires dedicated table storage",
        "installed_schema": "Installed schema",
    }

    def to_dict(self) -> dict[str, Any]:
        """Convert to an ordered {label: value} mapping for display."""
        return {label: getattr(self, attribute) for attribute, label in self.LABELS.items()}


@dataclass(frozen=True)
class ComparisonPair:
    """The two generations of one field storage definition."""

    installed: FieldStorageDefinition
    defined: FieldStorageDefinition


@dataclass
class EntityContext:
    """Everything loaded for an entity type before comparing its fields.

    Attributes:
        entity_type: Active entity type definition
        table_mapping: Table mapping of the entity type
        field_storage_definitions: Active field storage definitions by name
    """

    entity_type: EntityTypeDefinition
    table_mapping: TableMapping
    field_storage_definitions: dict[str, FieldStorageDefinition] = field(default_factory=dict)


class DiffOp(Enum):
    """Classification of a diff row."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


@dataclass(frozen=True)
class DiffRow:
    """One line, or one pair of lines, of a line diff.

    ``before`` is None for added lines and ``after`` is None for removed
    lines; unchanged and changed rows carry both.
    """

    op: DiffOp
    before: str | None = None
    after: str | None = None


@dataclass
class TableCell:
    """One cell of a rendered diff table.

    Attributes:
        data: Cell text
        classes: CSS classes of the cell
        colspan: Number of columns the cell spans
        highlights: (start, end) character spans that changed within the line
    """

    data: str = ""
    classes: list[str] = field(default_factory=list)
    colspan: int = 1
    highlights: list[tuple[int, int]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"data": self.data}
        if self.classes:
            result["class"] = " ".join(self.classes)
        if self.colspan != 1:
            result["colspan"] = self.colspan
        if self.highlights:
            result["highlights"] = [list(span) for span in self.highlights]
        return result


@dataclass
class DiffTable:
    """Side-by-side diff table: installed on the left, defined on the right."""

    header: list[TableCell]
    rows: list[list[TableCell]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "header": [cell.to_dict() for cell in self.header],
            "rows": [[cell.to_dict() for cell in row] for row in self.rows],
        }


@dataclass
class FieldDiffPage:
    """Render-ready result of comparing one field.

    Attributes:
        title: Page title
        attached: Display assets the page needs
        table: Diff table, ending with the raw serialized texts
        before_text: Serialized installed record
        after_text: Serialized defined record
        rows: Line diff the table was built from
    """

    title: str
    table: DiffTable
    before_text: str
    after_text: str
    attached: list[str] = field(default_factory=list)
    rows: list[DiffRow] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Check if the two sides differ at all."""
        return any(row.op is not DiffOp.UNCHANGED for row in self.rows)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "attached": list(self.attached),
            "has_changes": self.has_changes,
            "table": self.table.to_dict(),
            "before": self.before_text,
            "after": self.after_text,
        }


class ChangeType(Enum):
    """Kinds of pending definition changes."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


CHANGE_ACTIONS = {
    ChangeType.CREATED: "needs to be installed",
    ChangeType.UPDATED: "needs to be updated",
    ChangeType.DELETED: "needs to be uninstalled",
}


class RequirementSeverity(Enum):
    """Severity of a requirements report entry."""

    OK = 0
    WARNING = 1
    ERROR = 2


@dataclass
class FieldChange:
    """A field whose installed and defined storage disagree."""

    entity_type_id: str
    field_name: str
    change_type: ChangeType
    link: str | None = None

    @property
    def summary(self) -> str:
        """Human-readable one-line description."""
        return f"The {self.field_name} field {CHANGE_ACTIONS[self.change_type]}."


@dataclass
class EntityTypeChanges:
    """Pending definition changes of one entity type."""

    entity_type_id: str
    label: str
    entity_type_change: ChangeType | None = None
    field_changes: list[FieldChange] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return self.entity_type_change is not None or bool(self.field_changes)

    @property
    def summary(self) -> list[str]:
        """Human-readable lines, entity type change first."""
        lines = []
        if self.entity_type_change is not None:
            action = CHANGE_ACTIONS[self.entity_type_change]
            lines.append(f"The {self.label} entity type {action}.")
        lines.extend(change.summary for change in self.field_changes)
        return lines


@dataclass
class RequirementReport:
    """Requirements entry summarizing pending definition changes."""

    title: str
    severity: RequirementSeverity
    value: str
    changes: list[EntityTypeChanges] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "severity": self.severity.name,
            "value": self.value,
            "entity_types": [
                {
                    "entity_type_id": changes.entity_type_id,
                    "label": changes.label,
                    "entity_type_change": (
                        changes.entity_type_change.value if changes.entity_type_change else None
                    ),
                    "fields": [
                        {
                            "field_name": change.field_name,
                            "change": change.change_type.value,
                            "summary": change.summary,
                            "link": change.link,
                        }
                        for change in changes.field_changes
                    ],
                }
                for changes in self.changes
            ],
        }
