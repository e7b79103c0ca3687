"""
Services module for business logic.

Provides the outfit assembly pipeline: product resolution, complementary
sampling, body-area constraints and the orchestrating assembler.
"""

from services.outfit_assembler import OutfitAssembler, get_outfit_assembler

__all__ = [
    "OutfitAssembler",
    "get_outfit_assembler",
]
