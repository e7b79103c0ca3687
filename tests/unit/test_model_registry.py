"""Unit tests for the generation model registry."""

import pytest

from services.errors import InvalidModelError, ModelNotImplementedError
from services.model_registry import (
    DEFAULT_MODEL,
    MODEL_REGISTRY,
    format_model_name,
    list_models,
    resolve_model,
)


class TestRegistry:

    def test_declared_models(self):
        assert list(MODEL_REGISTRY) == [
            "random", "ai_model_1", "ai_model_2", "ai_model_3", "community", "stylist",
        ]

    def test_only_random_is_active(self):
        active = [m.id for m in MODEL_REGISTRY.values() if m.is_active]
        assert active == ["random"]
        assert DEFAULT_MODEL.value == "random"

    def test_random_entry(self):
        info = MODEL_REGISTRY["random"]
        assert info.name == "Random"
        assert info.version == "1.0.0"
        assert info.status == "active"

    def test_coming_soon_entries(self):
        info = MODEL_REGISTRY["ai_model_2"]
        assert info.name == "Ai Model 2"
        assert info.version == "0.0.0"
        assert info.status == "coming_soon"

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            MODEL_REGISTRY["custom"] = MODEL_REGISTRY["random"]

    def test_list_models_shape(self):
        models = list_models()
        assert len(models) == 6
        assert set(models[0]) == {"id", "name", "version", "status", "description"}

    @pytest.mark.parametrize("key,expected", [
        ("RANDOM", "Random"),
        ("AI_MODEL_1", "Ai Model 1"),
        ("STYLIST", "Stylist"),
    ])
    def test_format_model_name(self, key, expected):
        assert format_model_name(key) == expected


class TestResolveModel:

    @pytest.mark.parametrize("model_id", [None, "", "random"])
    def test_default_and_random(self, model_id):
        assert resolve_model(model_id).id == "random"

    def test_unknown_model(self):
        with pytest.raises(InvalidModelError) as exc_info:
            resolve_model("gpt_stylist")
        assert exc_info.value.message == "Invalid model: gpt_stylist"

    def test_ids_are_case_sensitive(self):
        with pytest.raises(InvalidModelError):
            resolve_model("RANDOM")

    @pytest.mark.parametrize("model_id", ["ai_model_1", "ai_model_3", "community", "stylist"])
    def test_known_but_inactive(self, model_id):
        with pytest.raises(ModelNotImplementedError) as exc_info:
            resolve_model(model_id)
        assert exc_info.value.message == f"{model_id} not yet implemented. Use 'random'"
