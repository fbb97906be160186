"""Headlines configuration loader with validation."""

import hashlib
from enum import Enum
from pathlib import Path
from typing import NoReturn

import structlog
import yaml
from pydantic import ValidationError

from src.config.schemas.headlines import HeadlinesConfig


logger = structlog.get_logger()


class ConfigState(str, Enum):
    """Lifecycle of a configuration load.

    UNLOADED -> LOADING -> READY, or LOADING -> FAILED.
    """

    UNLOADED = "UNLOADED"
    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class ConfigLoader:
    """Loads and validates the headlines configuration file.

    A missing path means "use the built-in defaults". The loaded
    configuration is immutable once READY.
    """

    def __init__(self, run_id: str) -> None:
        """Initialize the loader.

        Args:
            run_id: Unique identifier for the current run.
        """
        self._run_id = run_id
        self._state = ConfigState.UNLOADED
        self._config: HeadlinesConfig | None = None
        self._checksum: str | None = None
        self._validation_errors: list[dict[str, str]] = []
        self._log = logger.bind(component="config", run_id=run_id)

    @property
    def state(self) -> ConfigState:
        """Get the current loader state."""
        return self._state

    @property
    def checksum(self) -> str | None:
        """SHA-256 of the loaded file, or None when defaults were used."""
        return self._checksum

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors if any."""
        return self._validation_errors.copy()

    def load(self, config_path: Path | None = None) -> HeadlinesConfig:
        """Load and validate the configuration.

        Args:
            config_path: Path to headlines.yaml, or None for defaults.

        Returns:
            Validated HeadlinesConfig.

        Raises:
            ConfigValidationError: If the file is missing or unreadable,
                is not UTF-8 YAML, or fails schema validation.
        """
        self._state = ConfigState.LOADING

        if config_path is None:
            self._config = HeadlinesConfig()
            self._state = ConfigState.READY
            self._log.info("config_defaults_loaded")
            return self._config

        self._log.info("loading_config_file", file_path=str(config_path))

        try:
            content_bytes = config_path.read_bytes()
        except FileNotFoundError as exc:
            self._fail(
                [{"loc": "", "msg": f"File not found: {exc}", "type": "file_not_found"}],
                config_path,
            )
        except OSError as exc:
            self._fail(
                [{"loc": "", "msg": f"Cannot read file: {exc}", "type": "file_read_error"}],
                config_path,
            )

        self._checksum = hashlib.sha256(content_bytes).hexdigest()

        try:
            text = content_bytes.decode("utf-8")
        except UnicodeDecodeError as exc:
            self._fail(
                [{"loc": "", "msg": f"Not valid UTF-8: {exc}", "type": "encoding_error"}],
                config_path,
            )

        try:
            parsed = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            self._fail(
                [{"loc": "", "msg": str(exc), "type": "yaml_parse_error"}],
                config_path,
            )

        try:
            self._config = HeadlinesConfig.model_validate(parsed)
        except ValidationError as exc:
            self._fail(
                [
                    {
                        "loc": ".".join(str(loc) for loc in err["loc"]),
                        "msg": err["msg"],
                        "type": err["type"],
                    }
                    for err in exc.errors()
                ],
                config_path,
            )

        self._state = ConfigState.READY
        self._log.info(
            "config_file_loaded",
            file_path=str(config_path),
            file_sha256=self._checksum,
            credibility_sources=len(self._config.source_credibility),
            macro_keywords=len(self._config.macro_keywords),
            topic_rules=len(self._config.topic_rules),
        )
        return self._config

    def _fail(self, errors: list[dict[str, str]], config_path: Path) -> NoReturn:
        self._state = ConfigState.FAILED
        self._validation_errors.extend(errors)
        self._log.error(
            "config_validation_failed",
            file_path=str(config_path),
            validation_error_count=len(errors),
            errors=errors,
        )
        raise ConfigValidationError(errors, str(config_path))
