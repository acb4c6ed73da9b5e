"""Configuration management for ledger-report."""

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from ledger_report.engine.policy import (
    DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS,
    DEFAULT_EXCLUDED_DESCRIPTIONS,
    DEFAULT_TOLERANCE,
    ReportPolicies,
)
from ledger_report.exceptions import ConfigurationError


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "ledger"
    user: str = "postgres"
    password: str = "postgres"
    schema: str = "dbo"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class LedgerReportConfig:
    """Main configuration for ledger-report."""

    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    policies: ReportPolicies = field(default_factory=ReportPolicies)
    json_ledger_path: Path | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LedgerReportConfig":
        """Create config from environment variables."""
        import os

        try:
            port = int(os.getenv("POSTGRES_PORT", "5432"))
        except ValueError as e:
            raise ConfigurationError(f"POSTGRES_PORT must be an integer: {e}") from e

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=port,
            database=os.getenv("POSTGRES_DB", "ledger"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            schema=os.getenv("POSTGRES_SCHEMA", "dbo"),
        )

        policies = ReportPolicies.uniform(
            tolerance=_parse_tolerance(os.getenv("DEDUP_TOLERANCE_MINUTES")),
            excluded_descriptions=_parse_descriptions(
                "EXCLUDED_DESCRIPTIONS", os.getenv("EXCLUDED_DESCRIPTIONS"), DEFAULT_EXCLUDED_DESCRIPTIONS
            ),
            category_excluded_descriptions=_parse_descriptions(
                "CATEGORY_EXCLUDED_DESCRIPTIONS",
                os.getenv("CATEGORY_EXCLUDED_DESCRIPTIONS"),
                DEFAULT_CATEGORY_EXCLUDED_DESCRIPTIONS,
            ),
        )

        ledger_path = os.getenv("LEDGER_JSON_PATH")

        return cls(
            postgres=postgres,
            policies=policies,
            json_ledger_path=Path(ledger_path) if ledger_path else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _parse_tolerance(value: str | None) -> timedelta | None:
    """Minutes as a timedelta; ``off`` or ``none`` disables pairing."""
    if value is None or value.strip() == "":
        return DEFAULT_TOLERANCE
    if value.strip().lower() in ("off", "none"):
        return None
    try:
        minutes = float(value)
    except ValueError as e:
        raise ConfigurationError(f"DEDUP_TOLERANCE_MINUTES must be a number or 'off', got {value!r}") from e
    if minutes < 0:
        raise ConfigurationError(f"DEDUP_TOLERANCE_MINUTES must be non-negative, got {value!r}")
    return timedelta(minutes=minutes)


def _parse_descriptions(name: str, value: str | None, default: frozenset[str]) -> frozenset[str]:
    """JSON list of description literals."""
    import json

    if not value:
        return default
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{name} must be a JSON list of strings: {e}") from e
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        raise ConfigurationError(f"{name} must be a JSON list of strings")
    return frozenset(parsed)
