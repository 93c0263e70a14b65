"""
CLI context for Schema Diff.

This module provides the context object that is passed to all CLI commands,
containing configuration and the host services.
"""

from dataclasses import dataclass, field
from pathlib import Path

from schema_diff.config import LoggingConfig, SchemaDiffConfig, load_config_from_yaml
from schema_diff.controller import SchemaDiffController
from schema_diff.host.exceptions import ConfigurationError
from schema_diff.host.snapshot import SnapshotHost
from schema_diff.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


@dataclass
class SchemaDiffContext:
    """
    Context object for CLI commands.

    Attributes:
        config_path: Path to configuration file
        snapshot_path: Snapshot file overriding the configured one
        log_level: Console log level given on the command line
        log_file: Log file given on the command line
    """

    config_path: Path | None = None
    snapshot_path: Path | None = None
    log_level: str | None = None
    log_file: Path | None = None

    # Lazy-loaded attributes
    _config: SchemaDiffConfig | None = field(default=None, init=False, repr=False)
    _host: SnapshotHost | None = field(default=None, init=False, repr=False)
    _controller: SchemaDiffController | None = field(default=None, init=False, repr=False)

    @property
    def config(self) -> SchemaDiffConfig:
        """Get or load configuration; defaults and environment without a file."""
        if self._config is None:
            try:
                if self.config_path is None:
                    logger.debug("Using default configuration")
                    self._config = SchemaDiffConfig()
                else:
                    logger.debug("Loading configuration", config_path=str(self.config_path))
                    self._config = load_config_from_yaml(self.config_path)
                    logger.debug("Configuration loaded successfully")
            except (FileNotFoundError, ValueError) as e:
                # pydantic's ValidationError is a ValueError
                raise ConfigurationError(str(e)) from e

            self._apply_logging_config(self._config.logging)

        return self._config

    def _apply_logging_config(self, logging_config: LoggingConfig) -> None:
        """Reconfigure logging from the loaded settings; CLI options win."""
        log_file = self.log_file or logging_config.file
        configure_logging(
            level=self.log_level or logging_config.level,
            log_format=logging_config.format,
            log_file=str(log_file) if log_file else None,
            file_level=logging_config.file_level,
        )

    @property
    def effective_snapshot_path(self) -> Path:
        if self.snapshot_path is not None:
            return self.snapshot_path
        return Path(self.config.paths.snapshot_file)

    @property
    def host(self) -> SnapshotHost:
        """Get or load the snapshot host."""
        if self._host is None:
            logger.debug("Loading snapshot", snapshot=str(self.effective_snapshot_path))
            self._host = SnapshotHost.from_file(self.effective_snapshot_path)

        return self._host

    @property
    def controller(self) -> SchemaDiffController:
        """Get or create the schema diff controller."""
        if self._controller is None:
            diff_config = self.config.diff
            self._controller = SchemaDiffController(self.host.services(), diff_config)

        return self._controller
