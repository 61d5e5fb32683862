"""Configuration manager for margin offset matching system."""

import json
from pathlib import Path
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict


class MarginMatchingConfig(BaseModel):
    """Configuration for the margin matching engine.

    Contains rule ordering, the standalone valuation multiplier and display
    limits used by the matchers and reporters.
    """

    model_config = ConfigDict(
        frozen=True,
        validate_assignment=True,  # Immutable configuration
    )

    # Rule 1 pairs combinations, Rule 2 values the residual positions
    processing_order: list[int] = Field(
        default=[1, 2],
        description="Order in which rules should be processed",
    )

    rule_names: dict[int, str] = Field(
        default={
            1: "Combination Pairing",
            2: "Standalone Residual",
        },
        description="Display name for each rule",
    )

    # Standalone margin per lot = settlement price * multiplier
    standalone_price_multiplier: Decimal = Field(
        default=Decimal("2"),
        gt=0,
        description="Multiplier applied to the settlement price of a residual lot",
    )

    legs_per_pair_display: int = Field(
        default=2,
        ge=1,
        description="Legs assumed per pair when reporting total contracts paired",
    )

    max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads used to match accounts in parallel",
    )

    detail_row_limit: int = Field(
        default=50,
        ge=1,
        description="Maximum number of detail rows shown per table",
    )


class MarginConfigManager:
    """Manages configuration for the margin matching system.

    Loads loader settings from a JSON file and provides a unified interface
    for accessing file formats, rule ordering and valuation settings.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        matching_config: Optional[MarginMatchingConfig] = None,
    ):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config directory. Defaults to this module's dir.
            matching_config: Optional matching config. Creates default if None.
        """
        if config_path is None:
            config_path = Path(__file__).parent

        self.config_path = config_path
        self.loader_config_path = config_path / "loader_config.json"

        self._load_loader_config()
        self.matching_config = matching_config or MarginMatchingConfig()

    def _load_loader_config(self) -> None:
        """Load loader configuration from JSON file."""
        try:
            with open(self.loader_config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("Loader config must be a dictionary")
                for section in ("catalog", "positions"):
                    if not isinstance(data.get(section), dict):
                        raise ValueError(f"Loader config missing '{section}' section")
                self.loader_config: dict[str, dict[str, Any]] = data
        except FileNotFoundError as e:
            raise FileNotFoundError(
                f"Loader config not found at {self.loader_config_path}"
            ) from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in loader config: {e}") from e

    def get_catalog_settings(self) -> dict[str, Any]:
        """Get combination catalog file settings.

        Returns:
            dict with delimiter_pattern, header_rows, min_fields, leg_separator,
            sell_prefix, thousands_separator and encoding
        """
        return dict(self.loader_config["catalog"])

    def get_position_settings(self) -> dict[str, Any]:
        """Get position file settings.

        Returns:
            dict with delimiter, header_rows, min_fields, buy_token and encoding
        """
        return dict(self.loader_config["positions"])

    def get_buy_token(self) -> str:
        """Get the direction token that marks a buy position."""
        return str(self.loader_config["positions"]["buy_token"])

    def get_processing_order(self) -> list[int]:
        """Get the order in which rules should be processed.

        Returns:
            List of rule numbers in processing order
        """
        return list(self.matching_config.processing_order)

    def get_rule_name(self, rule_number: int) -> str:
        """Get display name for a rule.

        Raises:
            ValueError: If rule number is not configured
        """
        name = self.matching_config.rule_names.get(rule_number)
        if name is None:
            raise ValueError(f"No name configured for rule {rule_number}")
        return name

    def get_standalone_multiplier(self) -> Decimal:
        return self.matching_config.standalone_price_multiplier

    def get_legs_per_pair(self) -> int:
        return self.matching_config.legs_per_pair_display

    def get_max_workers(self) -> int:
        return self.matching_config.max_workers

    def with_max_workers(self, max_workers: int) -> "MarginConfigManager":
        """Return a config manager sharing this loader config with a new worker count.

        MarginMatchingConfig is immutable, so a copy is created.
        """
        updated = self.matching_config.model_copy(update={"max_workers": max_workers})
        return MarginConfigManager(self.config_path, MarginMatchingConfig(**updated.model_dump()))

    def reload_config(self) -> None:
        """Reload configuration from files.

        Useful for development and testing when config files change.
        """
        self._load_loader_config()
        self.matching_config = MarginMatchingConfig()
