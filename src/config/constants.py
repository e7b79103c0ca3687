"""
Application constants and algorithm configuration.

These are values that don't change based on environment but may need
to be tuned or referenced across the codebase.
"""

from dataclasses import dataclass


# =============================================================================
# Outfit Assembly Configuration
# =============================================================================

@dataclass(frozen=True)
class OutfitConfig:
    """Global bounds for an assembled outfit."""

    # Piece bounds
    MIN_PIECES: int = 3
    MAX_PIECES: int = 15

    # Outfit identifier: outfit_<epoch-ms>_<suffix>
    ID_PREFIX: str = "outfit"
    ID_SUFFIX_LENGTH: int = 9


# Default outfit config instance
DEFAULT_OUTFIT_CONFIG = OutfitConfig()


# =============================================================================
# HTTP Boundary Messages
# =============================================================================

PRODUCTS_REQUIRED_MESSAGE = "Products array required with at least one product ID"
ENDPOINT_NOT_FOUND_MESSAGE = "Endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"
DATA_ACCESS_FAILURE_MESSAGE = "Failed to load product details"
EMPTY_OUTFIT_MESSAGE = "No products available to build an outfit"
