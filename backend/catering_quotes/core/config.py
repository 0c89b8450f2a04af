from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Annotated, Any
import json
from pathlib import Path
import os

from ..schemas.catering import AppetiteLevel, RuleConfiguration


_DEFAULT_MULTIPLIERS = {
    AppetiteLevel.NORMAL.value: 1.0,
    AppetiteLevel.PRETTY_HUNGRY.value: 1.25,
    AppetiteLevel.REALLY_HUNGRY.value: 1.5,
}


class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"

    LOG_LEVEL: str = "INFO"

    # Currency the catalog's base prices are listed in
    DEFAULT_CURRENCY: str = "usd"

    # Tenant rule defaults, used when a quote request carries no configuration
    DEFAULT_DELIVERY_RADIUS_MILES: float = 25.0
    DEFAULT_FEE_PER_MILE_CENTS: int = 150
    DEFAULT_TAX_RATE: float = 0.08
    DEFAULT_DEPOSIT_RATE: float = 0.30
    # NoDecode so the validator below sees raw "key=value" strings from env
    DEFAULT_APPETITE_MULTIPLIERS: Annotated[dict[str, float], NoDecode] = dict(_DEFAULT_MULTIPLIERS)
    DEFAULT_MINIMUM_ORDER_CENTS: int = 5000
    MINIMUM_PER_GUEST_CENTS: int = 1000

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("DEFAULT_APPETITE_MULTIPLIERS", mode="before")
    def parse_multipliers(cls, v: Any) -> Any:
        """Accept a JSON object or ``normal=1,prettyHungry=1.25`` from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, dict):
                    return parsed
            except json.JSONDecodeError:
                pass
            out: dict[str, str] = {}
            for pair in v.split(","):
                if "=" not in pair:
                    continue
                key, value = pair.split("=", 1)
                if key.strip():
                    out[key.strip()] = value.strip()
            return out
        return v

    @field_validator("DEFAULT_CURRENCY", "LOG_LEVEL", mode="before")
    def strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode="after")
    def normalize_currency(self) -> "Settings":
        self.DEFAULT_CURRENCY = (self.DEFAULT_CURRENCY or "usd").lower()
        return self


def _env_file() -> str:
    return os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env"))


def load_settings() -> "Settings":
    return Settings(_env_file=_env_file())


settings = load_settings()


def default_rule_configuration(source: "Settings | None" = None) -> RuleConfiguration:
    """Build the tenant rule set from settings.

    Values are passed through unchecked; the pricing validator decides
    whether they are usable.
    """
    cfg = source or settings
    return RuleConfiguration(
        appetite_multipliers=dict(cfg.DEFAULT_APPETITE_MULTIPLIERS),
        tax_rate=cfg.DEFAULT_TAX_RATE,
        deposit_rate=cfg.DEFAULT_DEPOSIT_RATE,
        delivery_radius_miles=cfg.DEFAULT_DELIVERY_RADIUS_MILES,
        fee_per_mile=cfg.DEFAULT_FEE_PER_MILE_CENTS,
        minimum_order_minor_units=cfg.DEFAULT_MINIMUM_ORDER_CENTS,
        minimum_per_guest_minor_units=cfg.MINIMUM_PER_GUEST_CENTS,
        base_currency=cfg.DEFAULT_CURRENCY,
    )
