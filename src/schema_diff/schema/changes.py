"""Detection of pending entity and field definition changes.

Walks every entity type the host knows about and lists what differs
between the last-installed definitions and the ones declared in code.
Updated fields link to their field schema diff.
"""

from urllib.parse import quote

from schema_diff.host.interfaces import HostServices
from schema_diff.schema.extractor import SchemaExtractor
from schema_diff.schema.models import (
    ChangeType,
    EntityTypeChanges,
    FieldChange,
    RequirementReport,
    RequirementSeverity,
)
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ROUTE_PREFIX = "/admin/reports/schema-diff"

REQUIREMENT_TITLE = "Entity/field definitions"


def field_diff_path(
    entity_type_id: str, field_name: str, route_prefix: str = DEFAULT_ROUTE_PREFIX
) -> str:
    """Build the link to the schema diff of one field.

    Args:
        entity_type_id: Entity type ID
        field_name: Field name
        route_prefix: Path the field diff operation is routed under

    Returns:
        Path such as /admin/reports/schema-diff/node/title
    """
    return "/".join(
        [route_prefix.rstrip("/"), quote(entity_type_id, safe=""), quote(field_name, safe="")]
    )


class ChangeScanner:
    """Compute the change list and requirements entry for a host.

    Args:
        host: Host services to read definitions from
        route_prefix: Path the field diff operation is routed under
    """

    def __init__(self, host: HostServices, route_prefix: str = DEFAULT_ROUTE_PREFIX):
        self.host = host
        self.route_prefix = route_prefix
        self.extractor = SchemaExtractor(host)

    def get_change_list(self) -> list[EntityTypeChanges]:
        """List every entity type with pending definition changes.

        Returns:
            EntityTypeChanges for each entity type that differs, in host order
        """
        change_list = []

        for entity_type_id in self.host.entity_types.get_entity_type_ids():
            changes = self.get_entity_type_changes(entity_type_id)
            if changes.has_changes:
                change_list.append(changes)

        logger.info(
            "change_list_computed",
            entity_types_with_changes=len(change_list),
            field_changes=sum(len(c.field_changes) for c in change_list),
        )

        return change_list

    def get_entity_type_changes(self, entity_type_id: str) -> EntityTypeChanges:
        """Compare both generations of one entity type and its fields.

        Fields are only compared when the entity type itself exists on both
        sides; a new or removed entity type is reported as a whole.

        Args:
            entity_type_id: Entity type ID

        Returns:
            EntityTypeChanges, possibly without any change
        """
        installed_type = self.host.installed_schema.get_last_installed_definition(entity_type_id)
        defined_type = self.host.entity_types.get_definition(entity_type_id)
        label = (defined_type or installed_type).label or entity_type_id

        changes = EntityTypeChanges(entity_type_id=entity_type_id, label=label)

        if installed_type is None:
            changes.entity_type_change = ChangeType.CREATED
            return changes
        if defined_type is None:
            changes.entity_type_change = ChangeType.DELETED
            return changes
        if installed_type != defined_type:
            changes.entity_type_change = ChangeType.UPDATED

        defined = self.host.field_definitions.get_field_storage_definitions(entity_type_id)
        installed = self.host.installed_schema.get_last_installed_field_storage_definitions(
            entity_type_id
        )

        for field_name, definition in defined.items():
            if field_name not in installed:
                changes.field_changes.append(
                    FieldChange(entity_type_id, field_name, ChangeType.CREATED)
                )
            elif self._field_needs_update(entity_type_id, field_name):
                changes.field_changes.append(
                    FieldChange(
                        entity_type_id,
                        field_name,
                        ChangeType.UPDATED,
                        link=field_diff_path(entity_type_id, field_name, self.route_prefix),
                    )
                )

        for field_name in installed:
            if field_name not in defined:
                changes.field_changes.append(
                    FieldChange(entity_type_id, field_name, ChangeType.DELETED)
                )

        return changes

    def _field_needs_update(self, entity_type_id: str, field_name: str) -> bool:
        pair = self.extractor.get_comparison_pair(entity_type_id, field_name)
        if pair.installed != pair.defined:
            return True
        before, after = self.extractor.compare(entity_type_id, field_name)
        return before != after

    def requirements(self) -> RequirementReport:
        """Build the requirements entry for pending definition changes.

        Returns:
            RequirementReport with severity OK when everything is installed,
            ERROR otherwise
        """
        change_list = self.get_change_list()

        if not change_list:
            return RequirementReport(
                title=REQUIREMENT_TITLE,
                severity=RequirementSeverity.OK,
                value="Up to date",
            )

        logger.info(
            "definition_mismatch_detected",
            entity_types=[changes.entity_type_id for changes in change_list],
        )

        return RequirementReport(
            title=REQUIREMENT_TITLE,
            severity=RequirementSeverity.ERROR,
            value="Mismatched entity and/or field definitions",
            changes=change_list,
        )
