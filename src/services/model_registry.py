"""
Registry of outfit generation models.

The registry is an immutable lookup table built once at import. Only the
baseline random strategy is implemented; the rest are announced as
coming soon so clients can render them.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from services.errors import InvalidModelError, ModelNotImplementedError


class GenerationModel(str, Enum):
    RANDOM = "random"
    AI_MODEL_1 = "ai_model_1"
    AI_MODEL_2 = "ai_model_2"
    AI_MODEL_3 = "ai_model_3"
    COMMUNITY = "community"
    STYLIST = "stylist"


DEFAULT_MODEL = GenerationModel.RANDOM


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str
    version: str
    status: str
    description: str

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_DESCRIPTIONS = {
    GenerationModel.RANDOM: "Random outfit generation with style coherence",
    GenerationModel.AI_MODEL_1: "AI-powered style matching (coming soon)",
    GenerationModel.AI_MODEL_2: "Advanced AI with preferences (coming soon)",
    GenerationModel.AI_MODEL_3: "Trend-aware AI (coming soon)",
    GenerationModel.COMMUNITY: "Community recommendations (coming soon)",
    GenerationModel.STYLIST: "Professional curation (coming soon)",
}


def format_model_name(key: str) -> str:
    """AI_MODEL_1 -> 'Ai Model 1'."""
    return " ".join(word.capitalize() for word in key.split("_"))


def _build_registry() -> Mapping[str, ModelInfo]:
    entries = {}
    for model in GenerationModel:
        active = model == DEFAULT_MODEL
        entries[model.value] = ModelInfo(
            id=model.value,
            name=format_model_name(model.name),
            version="1.0.0" if active else "0.0.0",
            status="active" if active else "coming_soon",
            description=_DESCRIPTIONS.get(model, "Model description not available"),
        )
    return MappingProxyType(entries)


MODEL_REGISTRY: Mapping[str, ModelInfo] = _build_registry()


def list_models() -> List[Dict[str, Any]]:
    """All models in declaration order, as API dicts."""
    return [info.to_dict() for info in MODEL_REGISTRY.values()]


def resolve_model(model_id: Optional[str]) -> ModelInfo:
    """
    Validate a requested model id and return its registry entry.

    An empty id selects the default model.

    Raises:
        InvalidModelError: id is not in the registry
        ModelNotImplementedError: id is known but not active
    """
    requested = model_id or DEFAULT_MODEL.value
    info = MODEL_REGISTRY.get(requested)
    if info is None:
        raise InvalidModelError(requested)
    if not info.is_active:
        raise ModelNotImplementedError(requested, DEFAULT_MODEL.value)
    return info
