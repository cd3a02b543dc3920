"""
Enterprise Fee Summary Configuration Schema.

Controls report presentation: currency label, display precision, and which
grouping levels receive summary rows.  Loadable from a dict or a YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

import yaml

from hub_kernel.exceptions import ConfigurationError
from hub_kernel.logging_config import get_logger
from hub_reports.enterprise_fee_summary.models import SUMMARY_LEVEL_ORDER, SummaryLevel

logger = get_logger("reports.enterprise_fee_summary.config")

# Top-level key used when the YAML file holds several report sections
_YAML_SECTION = "enterprise_fee_summary"


@dataclass
class EnterpriseFeeReportConfig:
    """
    Configuration schema for the enterprise fee summary report.

    ``summary_levels`` lists the grouping levels that get a totals row after
    their group; the default summarises every level.
    """

    # Entity name shown on reports
    entity_name: str = "Marketplace"

    # Currency the adjustment amounts are recorded in
    currency: str = "USD"

    # Rounding precision for display
    display_precision: int = 2

    # Whether summary rows are emitted at all
    include_summary_rows: bool = True

    summary_levels: tuple[SummaryLevel, ...] = SUMMARY_LEVEL_ORDER

    def __post_init__(self):
        if self.display_precision < 0:
            raise ConfigurationError(
                "display_precision", "cannot be negative",
            )
        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ConfigurationError(
                "currency", "must be a 3-letter ISO 4217 code",
            )
        self.currency = self.currency.upper()
        levels = self.summary_levels
        if isinstance(levels, str):
            levels = (levels,)
        try:
            self.summary_levels = tuple(SummaryLevel(level) for level in levels)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("summary_levels", str(exc)) from exc

    @property
    def active_summary_levels(self) -> tuple[SummaryLevel, ...]:
        """Summary levels in effect, honouring include_summary_rows."""
        if not self.include_summary_rows:
            return ()
        return self.summary_levels

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("fee_report_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        unknown = sorted(set(data) - set(cls.__dataclass_fields__))
        if unknown:
            raise ConfigurationError(
                ", ".join(unknown), "unknown setting",
            )
        logger.info(
            "fee_report_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """
        Create config from a YAML file.

        The file may either hold the settings at top level or under an
        ``enterprise_fee_summary`` section.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            ConfigurationError: If the document is not a mapping or a
                setting is invalid.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as fh:
            document = yaml.safe_load(fh) or {}
        if not isinstance(document, dict):
            raise ConfigurationError(str(path), "expected a mapping")
        section = document.get(_YAML_SECTION, document)
        if not isinstance(section, dict):
            raise ConfigurationError(_YAML_SECTION, "expected a mapping")
        logger.info("fee_report_config_loading_from_yaml", extra={"path": str(path)})
        return cls.from_dict(section)
