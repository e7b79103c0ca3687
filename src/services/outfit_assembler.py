"""
Outfit Assembler
================

Drives one outfit generation request:

  1. validate the generation model (no data access before this)
  2. resolve the caller's product references
  3. size the outfit: at least MIN_PIECES, at most min(maxPieces, MAX_PIECES)
  4. fill the shortfall with random complementary products
  5. cut down to the target size
  6. stamp the outfit artifact

Step 5 is a plain prefix cut by default. With ``enforce_constraints`` the
combined set is trimmed with the body-area caps from outfit_constraints and
topped up again for whatever the trim removed.

Failure policy: catalog errors during resolution fail the request, catalog
errors during sampling only leave the outfit short.
"""

import random
import string
import threading
import time
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from config.constants import (
    DATA_ACCESS_FAILURE_MESSAGE,
    DEFAULT_OUTFIT_CONFIG,
    EMPTY_OUTFIT_MESSAGE,
    PRODUCTS_REQUIRED_MESSAGE,
    OutfitConfig,
)
from core.logging import get_logger
from services.complementary_sampler import ComplementarySampler
from services.errors import DataAccessError, OutfitGenerationError, OutfitValidationError
from services.model_registry import ModelInfo, resolve_model
from services.models import (
    DataSourceCounts,
    GenerationOptions,
    GenerationResult,
    Outfit,
    OutfitMetadata,
    OutfitSource,
    Product,
    ProductSource,
)
from services.outfit_constraints import find_violation, trim_to_constraints
from services.product_resolver import ProductResolver

logger = get_logger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_outfit_id(config: OutfitConfig = DEFAULT_OUTFIT_CONFIG) -> str:
    """outfit_<epoch-ms>_<random base36>. Not checked for collisions."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=config.ID_SUFFIX_LENGTH))
    return f"{config.ID_PREFIX}_{int(time.time() * 1000)}_{suffix}"


def target_piece_count(
    resolved_count: int,
    max_pieces: Optional[int] = None,
    config: OutfitConfig = DEFAULT_OUTFIT_CONFIG,
) -> int:
    """Never below MIN_PIECES, never above the caller cap or MAX_PIECES.

    A missing or zero cap means MAX_PIECES. The caller cap wins over the
    floor, so maxPieces=2 yields two pieces.
    """
    upper = min(max_pieces or config.MAX_PIECES, config.MAX_PIECES)
    return min(max(resolved_count, config.MIN_PIECES), upper)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OutfitAssembler:
    """
    Orchestrates resolver, sampler and constraints for one request at a time.

    Holds no per-request state, so one instance serves every request.
    """

    def __init__(
        self,
        resolver: ProductResolver,
        sampler: ComplementarySampler,
        *,
        enforce_constraints: bool = False,
        refill_rounds: int = 2,
        config: OutfitConfig = DEFAULT_OUTFIT_CONFIG,
    ):
        self.resolver = resolver
        self.sampler = sampler
        self.enforce_constraints = enforce_constraints
        self.refill_rounds = refill_rounds
        self.config = config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assemble(
        self,
        references: Sequence[str],
        owner_id: Optional[str] = None,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult:
        """Generate an outfit. Expected failures come back as a failure result."""
        options = options or GenerationOptions()
        try:
            outfit = self._generate(references, owner_id, options)
        except DataAccessError as e:
            logger.error("Outfit generation failed", error=e.message, error_type=type(e).__name__)
            return GenerationResult.failure(DATA_ACCESS_FAILURE_MESSAGE)
        except OutfitGenerationError as e:
            logger.warning("Outfit generation rejected", error=e.message, error_type=type(e).__name__)
            return GenerationResult.failure(e.message)

        logger.info(
            "Outfit generated",
            outfit_id=outfit.id,
            total_pieces=outfit.metadata.total_pieces,
            general=outfit.metadata.data_sources.general,
            user=outfit.metadata.data_sources.user,
        )
        return GenerationResult.ok(outfit)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _generate(
        self,
        references: Sequence[str],
        owner_id: Optional[str],
        options: GenerationOptions,
    ) -> Outfit:
        if not references:
            raise OutfitValidationError(PRODUCTS_REQUIRED_MESSAGE)
        if any(not isinstance(ref, str) or not ref.strip() for ref in references):
            raise OutfitValidationError("Product IDs must be non-empty strings")

        model = resolve_model(options.model)

        resolved = self.resolver.resolve(references, owner_id)
        target = target_piece_count(len(resolved), options.max_pieces, self.config)

        if self.enforce_constraints:
            products = self._fill_within_constraints(resolved, target)
        else:
            products = self._fill(resolved, target)

        if not products:
            raise OutfitGenerationError(EMPTY_OUTFIT_MESSAGE)

        violation = find_violation(
            products,
            min_pieces=min(self.config.MIN_PIECES, target),
            max_pieces=target,
        )
        if violation is not None:
            logger.warning(
                "Outfit breaks a constraint",
                kind=violation.kind.value,
                detail=violation.message,
                product_ids=list(violation.product_ids),
            )

        return self._build_outfit(products, model, owner_id)

    def _fill(self, resolved: List[Product], target: int) -> List[Product]:
        products = list(resolved)
        if len(products) < target:
            products.extend(self.sampler.sample(target - len(products)))
        return products[:target]

    def _fill_within_constraints(self, resolved: List[Product], target: int) -> List[Product]:
        products = trim_to_constraints(resolved, target)
        for _ in range(self.refill_rounds + 1):
            shortfall = target - len(products)
            if shortfall <= 0:
                break
            sampled = self.sampler.sample(shortfall)
            if not sampled:
                break
            products = trim_to_constraints(products + sampled, target)
        return products

    def _build_outfit(
        self,
        products: List[Product],
        model: ModelInfo,
        owner_id: Optional[str],
    ) -> Outfit:
        counts = Counter(product.source for product in products)
        return Outfit(
            id=generate_outfit_id(self.config),
            products=products,
            metadata=OutfitMetadata(
                total_pieces=len(products),
                generation_model=model.id,
                model_version=model.version,
                data_sources=DataSourceCounts(
                    general=counts[ProductSource.GENERAL.value],
                    user=counts[ProductSource.USER.value],
                ),
            ),
            source=OutfitSource.MIXED if owner_id else OutfitSource.GENERAL,
            created_at=_utc_timestamp(),
        )


# =============================================================================
# SINGLETON
# =============================================================================

_assembler: Optional[OutfitAssembler] = None
_assembler_lock = threading.Lock()


def get_outfit_assembler() -> OutfitAssembler:
    """Get or create OutfitAssembler singleton wired to the configured stores (thread-safe)."""
    global _assembler
    if _assembler is None:
        with _assembler_lock:
            if _assembler is None:
                from config.database import catalog_connection, get_supabase_client_optional
                from config.settings import get_settings
                from services.catalog import PublicCatalog
                from services.private_store import PrivateProductStore

                settings = get_settings()
                catalog = PublicCatalog(catalog_connection, table=settings.catalog_table)
                private_store = PrivateProductStore(
                    get_supabase_client_optional(),
                    table=settings.private_products_table,
                )
                _assembler = OutfitAssembler(
                    ProductResolver(catalog, private_store),
                    ComplementarySampler(catalog),
                    enforce_constraints=settings.enforce_outfit_constraints,
                    refill_rounds=settings.constraint_refill_rounds,
                )
    return _assembler
