import json
from datetime import datetime
from typing import Literal, Optional, Union

from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import PatchModel, UtcDatetime


class ActiveToggle(BaseModel):
    active: bool


# ─── categories master ───────────────────────────────────────────
class CategoryMasterCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    type: str = "segment"
    active: bool = True


class CategoryMasterUpdate(PatchModel):
    nullable_fields = frozenset({"description"})

    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    active: Optional[bool] = None


class CategoryMasterOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    type: str
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ─── region categories ───────────────────────────────────────────
class RegionCategoryCreate(BaseModel):
    region: str = Field(min_length=1)
    category: str = Field(min_length=1)
    subcategory: Optional[str] = None
    level: Optional[str] = None
    active: bool = True


class RegionCategoryUpdate(PatchModel):
    nullable_fields = frozenset({"subcategory", "level"})

    region: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    level: Optional[str] = None
    active: Optional[bool] = None


class RegionCategoryOut(BaseModel):
    id: UUID
    region: str
    category: str
    subcategory: Optional[str] = None
    level: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ─── prize templates ─────────────────────────────────────────────
PrizeRule = Union[dict, str]


def decode_prize_rule(raw: Optional[str], kind: Optional[str] = None):
    """Stored rules are text; structured ones come back as dicts.

    Rows written without a kind are sniffed: a JSON object reads as structured.
    """
    if raw is None:
        return None, None
    if kind == "text":
        return raw, "text"
    if kind == "structured":
        return json.loads(raw), "structured"
    try:
        parsed = json.loads(raw)
    except ValueError:
        return raw, "text"
    if isinstance(parsed, dict):
        return parsed, "structured"
    return raw, "text"


def encode_prize_rule(rule: Optional[PrizeRule]) -> tuple[Optional[str], Optional[str]]:
    if rule is None:
        return None, None
    if isinstance(rule, dict):
        return json.dumps(rule), "structured"
    return rule, "text"


class PrizeTemplateCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    prize_rule: Optional[PrizeRule] = None
    size: Optional[str] = None
    valid_from: Optional[UtcDatetime] = None
    valid_to: Optional[UtcDatetime] = None
    type: Literal["recurring", "grand"] = "recurring"
    active: bool = True


class PrizeTemplateUpdate(PatchModel):
    nullable_fields = frozenset({"description", "image_url", "prize_rule", "size", "valid_from", "valid_to"})

    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    prize_rule: Optional[PrizeRule] = None
    size: Optional[str] = None
    valid_from: Optional[UtcDatetime] = None
    valid_to: Optional[UtcDatetime] = None
    type: Optional[Literal["recurring", "grand"]] = None
    active: Optional[bool] = None


class PrizeTemplateOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    prize_rule: Optional[PrizeRule] = None
    prize_rule_kind: Optional[Literal["structured", "text"]] = None
    size: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    type: str
    active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, template):
        rule, kind = decode_prize_rule(template.prize_rule, template.prize_rule_kind)
        return cls(
            id=template.id,
            name=template.name,
            description=template.description,
            image_url=template.image_url,
            prize_rule=rule,
            prize_rule_kind=kind,
            size=template.size,
            valid_from=template.valid_from,
            valid_to=template.valid_to,
            type=template.type,
            active=template.active,
            created_at=template.created_at,
        )


# ─── product types ───────────────────────────────────────────────
class ProductTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: Literal["software", "hardware", "equipment"] = "software"
    active: bool = True


class ProductTypeUpdate(PatchModel):
    nullable_fields = frozenset({"description"})

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[Literal["software", "hardware", "equipment"]] = None
    active: Optional[bool] = None


class ProductTypeOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    category: str
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
