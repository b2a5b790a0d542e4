from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from jsonschema import validate

from app.config import get_settings
from app.logging_config import get_logger

from ..domain.models import CashbackSettings, TierConfig
from ..schemas.cashback_settings_v1 import CashbackSettingsV1, TierOptionsV1

logger = get_logger("cashback.loader")


# =============================================================================
# Paths
# =============================================================================


def vertical_root() -> Path:
    # .../app/verticals/cashback/storage/loader.py -> parents[1] = .../app/verticals/cashback
    return Path(__file__).resolve().parents[1]


def schema_path() -> Path:
    return vertical_root() / "schemas" / "cashback_settings.schema.json"


def example_settings_path() -> Path:
    return vertical_root() / "rules" / "cashback_settings.example.yaml"


# =============================================================================
# Defaults (app config)
# =============================================================================


def default_tier_config() -> TierConfig:
    return TierOptionsV1.from_flat_options().to_domain()


def default_cashback_settings() -> CashbackSettings:
    s = get_settings()
    return CashbackSettingsV1(
        use_brands_logic=s.CASHBACK_USE_BRANDS_LOGIC,
        brand_taxonomy=s.CASHBACK_BRAND_TAXONOMY,
    ).to_domain()


# =============================================================================
# Loading
# =============================================================================


@dataclass(frozen=True)
class LoadedCashbackConfig:
    settings: CashbackSettings
    tiers: TierConfig


def _load_schema() -> Dict[str, Any]:
    with schema_path().open("r", encoding="utf-8") as f:
        return json.load(f)


def parse_settings_document(doc: Optional[Dict[str, Any]]) -> LoadedCashbackConfig:
    """
    Validate a raw settings document against the JSON schema and build the
    domain objects. Missing sections fall back to app config defaults.
    """
    doc = doc or {}
    validate(instance=doc, schema=_load_schema())

    if "tiers" in doc:
        tiers = TierOptionsV1(tiers=doc["tiers"]).to_domain()
    else:
        tiers = default_tier_config()

    if "settings" in doc:
        raw = dict(doc["settings"] or {})
        raw.setdefault("use_brands_logic", get_settings().CASHBACK_USE_BRANDS_LOGIC)
        raw.setdefault("brand_taxonomy", get_settings().CASHBACK_BRAND_TAXONOMY)
        settings = CashbackSettingsV1.model_validate(raw).to_domain()
    else:
        settings = default_cashback_settings()

    return LoadedCashbackConfig(settings=settings, tiers=tiers)


def load_settings_file(path: str | Path) -> LoadedCashbackConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Cashback settings file not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        doc = yaml.safe_load(f) or {}

    loaded = parse_settings_document(doc)
    logger.info(
        f"cashback settings loaded | path={p} tiers={len(loaded.tiers)} "
        f"rules={len(loaded.settings.rules)} brands_logic={loaded.settings.use_brand_rules}"
    )
    return loaded
