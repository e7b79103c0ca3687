"""
Pydantic models for outfit generation.

Models cover:
- Provenance enums (source, privacy, match reason)
- Resolved products and the assembled outfit
- Generation options and the request/response envelope
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class ProductSource(str, Enum):
    """Which store a product came from."""
    GENERAL = "general"   # Public catalog
    USER = "user"         # Private per-user store


class Privacy(str, Enum):
    """Visibility class of a product, mirrors ProductSource."""
    PUBLIC = "public"
    PRIVATE = "private"


class MatchReason(str, Enum):
    """Why a product is part of an outfit."""
    INPUT = "input"                   # Supplied by the caller
    ESSENTIAL = "essential"           # Fills a mandatory body area (not produced yet)
    LAYERING = "layering"             # Completes a layer (not produced yet)
    COMPLEMENTARY = "complementary"   # Randomly sampled filler


class OutfitSource(str, Enum):
    """Overall provenance of an outfit."""
    GENERAL = "general"
    MIXED = "mixed"


# =============================================================================
# Products
# =============================================================================

class Product(BaseModel):
    """
    A resolved product record with provenance tags.

    Any additional store columns are kept as extra fields.
    """
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    product_id: str
    title: Optional[str] = None
    category: Optional[str] = None
    body_area: Optional[str] = None
    layer: Optional[str] = None
    price: Optional[float] = None
    color: Optional[str] = None
    brand: Optional[str] = None

    source: ProductSource
    privacy: Privacy
    match_reason: MatchReason

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v):
        if v is None:
            return v
        return str(v)

    # Display columns come straight from store rows; values that don't fit become None
    @field_validator("title", "category", "body_area", "layer", "color", "brand", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if isinstance(v, bool):
            return None
        if isinstance(v, (int, float, Decimal)):
            return str(v)
        return v if isinstance(v, str) else None

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        *,
        source: ProductSource,
        match_reason: MatchReason,
    ) -> "Product":
        """Build a product from a raw store row, stamping provenance."""
        data = dict(record)
        data["product_id"] = data.get("product_id") or data.get("id")
        data["source"] = source
        data["privacy"] = Privacy.PRIVATE if source == ProductSource.USER else Privacy.PUBLIC
        data["match_reason"] = match_reason
        return cls(**data)


# =============================================================================
# Generation Options
# =============================================================================

class GenerationOptions(BaseModel):
    """Caller-supplied generation configuration."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model: Optional[str] = Field(default=None, description="Generation model id (default: random)")
    max_pieces: Optional[int] = Field(
        default=None,
        alias="maxPieces",
        ge=0,
        description="Upper bound on piece count, clamped to 15",
    )


class GenerateOutfitRequest(BaseModel):
    """Request body for outfit generation."""
    model_config = ConfigDict(populate_by_name=True)

    products: Optional[List[str]] = Field(default=None, description="Product IDs to build around")
    user_id: Optional[str] = Field(default=None, alias="userId", description="Owner of private products")
    options: GenerationOptions = Field(default_factory=GenerationOptions)


# =============================================================================
# Outfit
# =============================================================================

class DataSourceCounts(BaseModel):
    """Per-source product counts."""
    general: int = 0
    user: int = 0


class OutfitMetadata(BaseModel):
    """Summary metadata stamped on a generated outfit."""
    model_config = ConfigDict(protected_namespaces=())

    total_pieces: int
    generation_model: str
    model_version: str
    data_sources: DataSourceCounts


class Outfit(BaseModel):
    """An assembled outfit. Built once per request and never mutated."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    products: List[Product]
    metadata: OutfitMetadata
    source: OutfitSource
    created_at: str


class GenerationResult(BaseModel):
    """Success/failure envelope returned by the assembler."""
    success: bool
    outfit: Optional[Outfit] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, outfit: Outfit) -> "GenerationResult":
        return cls(success=True, outfit=outfit)

    @classmethod
    def failure(cls, message: str) -> "GenerationResult":
        return cls(success=False, error=message, outfit=None)

    def to_response(self) -> Dict[str, Any]:
        """Serialize to the wire envelope."""
        if self.success:
            return {"success": True, "outfit": self.outfit.model_dump(mode="json")}
        return {"success": False, "error": self.error, "outfit": None}
