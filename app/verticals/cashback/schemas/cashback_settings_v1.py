# app/verticals/cashback/schemas/cashback_settings_v1.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import get_settings

from ..domain.models import CashbackSettings, Rule, RuleType, Tier, TierConfig, normalize_ids
from ..domain.money import non_negative


def _lenient_number(v: Any) -> Decimal:
    # settings store levert strings; onleesbaar of negatief => 0
    return non_negative(v)


class TierOptionV1(BaseModel):
    model_config = ConfigDict(extra="ignore")

    threshold: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")

    @field_validator("threshold", "percentage", mode="before")
    @classmethod
    def _coerce(cls, v: Any) -> Decimal:
        return _lenient_number(v)

    def to_domain(self) -> Tier:
        return Tier(threshold=self.threshold, percentage=self.percentage)


class TierOptionsV1(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tiers: List[TierOptionV1] = Field(default_factory=list, min_length=1)

    @classmethod
    def from_flat_options(cls, options: Optional[Dict[str, Any]] = None) -> "TierOptionsV1":
        """
        Flat option keys (tier_1_threshold, tier_1_percentage, ...) as the
        settings store keeps them. Missing keys fall back to app config.
        """
        options = options or {}
        defaults = get_settings().tier_rows()
        tiers = []
        for n, (d_threshold, d_pct) in enumerate(defaults, start=1):
            tiers.append(
                {
                    "threshold": options.get(f"tier_{n}_threshold", d_threshold),
                    "percentage": options.get(f"tier_{n}_percentage", d_pct),
                }
            )
        return cls(tiers=tiers)

    def to_domain(self) -> TierConfig:
        return TierConfig(tiers=tuple(t.to_domain() for t in self.tiers))


class BrandRuleV1(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["product", "brand"]
    ids: List[str] = Field(default_factory=list)
    percentage: Decimal = Decimal("0")

    @field_validator("ids", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> List[str]:
        return sorted(normalize_ids(v))

    @field_validator("percentage", mode="before")
    @classmethod
    def _pct(cls, v: Any) -> Decimal:
        return _lenient_number(v)

    def to_domain(self) -> Rule:
        return Rule(type=RuleType(self.type), ids=frozenset(self.ids), percentage=self.percentage)


class CashbackSettingsV1(BaseModel):
    """
    Raw settings-document zoals de admin het opslaat.
    Alleen use_brands_logic == "yes" (of True) zet brand mode aan.
    """

    model_config = ConfigDict(extra="ignore")

    use_brands_logic: bool = False
    brand_taxonomy: str = "product_brand"
    brand_rules: List[BrandRuleV1] = Field(default_factory=list)

    @field_validator("use_brands_logic", mode="before")
    @classmethod
    def _yes(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return v == "yes"

    @field_validator("brand_taxonomy", mode="before")
    @classmethod
    def _taxonomy(cls, v: Any) -> str:
        s = str(v).strip() if v is not None else ""
        return s or "product_brand"

    def to_domain(self) -> CashbackSettings:
        return CashbackSettings(
            use_brand_rules=self.use_brands_logic,
            rules=tuple(r.to_domain() for r in self.brand_rules),
            brand_taxonomy=self.brand_taxonomy,
        )
