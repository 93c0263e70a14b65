"""Entry points a host calls into: the field diff page and the requirements hook."""

from schema_diff.config import DiffConfig
from schema_diff.host.interfaces import HostServices
from schema_diff.reporting.diff_report import DifferenceRenderer
from schema_diff.schema.changes import ChangeScanner
from schema_diff.schema.extractor import SchemaExtractor
from schema_diff.schema.models import FieldDiffPage, RequirementReport
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)


class SchemaDiffController:
    """Show the installed versus defined schema of entity fields.

    Args:
        host: Host services to read definitions and schemas from
        config: Diff display settings
    """

    def __init__(self, host: HostServices, config: DiffConfig | None = None):
        self.config = config or DiffConfig()
        self.extractor = SchemaExtractor(host)
        self.renderer = DifferenceRenderer(self.config)
        self.scanner = ChangeScanner(host, route_prefix=self.config.route_prefix)

    def field_schema_diff(self, entity_type_id: str, field_name: str) -> FieldDiffPage:
        """Build the schema diff page of one field.

        Args:
            entity_type_id: Entity type ID
            field_name: Field name

        Returns:
            FieldDiffPage

        Raises:
            NotFoundError: If the entity type is unknown or the field is
                missing from either definition source
        """
        logger.debug(
            "field_schema_diff_requested",
            entity_type_id=entity_type_id,
            field_name=field_name,
        )

        before, after = self.extractor.compare(entity_type_id, field_name)
        return self.renderer.build_field_difference(before, after)

    def requirements(self) -> RequirementReport:
        """Report every pending entity and field definition change."""
        return self.scanner.requirements()
