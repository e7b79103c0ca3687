"""Random filler products drawn from the public catalog."""

from typing import List

from pydantic import ValidationError

from core.logging import get_logger
from services.catalog import PublicCatalog
from services.errors import DataAccessError
from services.models import MatchReason, Product, ProductSource

logger = get_logger(__name__)


class ComplementarySampler:
    def __init__(self, catalog: PublicCatalog):
        self.catalog = catalog

    def sample(self, count: int) -> List[Product]:
        """
        Draw up to `count` titled products at random.

        Never raises on catalog failure: the outfit just stays short.
        Rows that cannot be turned into a product are skipped.
        Draws are independent of the caller's products, so a sampled item
        may duplicate one that was already resolved.
        """
        if count <= 0:
            return []

        try:
            with self.catalog.session() as catalog:
                records = catalog.sample_titled(count)
        except DataAccessError as e:
            logger.warning("Complementary sampling failed", requested=count, error=str(e))
            return []

        products = []
        for record in records:
            try:
                products.append(Product.from_record(
                    record,
                    source=ProductSource.GENERAL,
                    match_reason=MatchReason.COMPLEMENTARY,
                ))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed complementary product",
                    product_id=record.get("product_id"),
                    error=str(e),
                )
        if len(products) < count:
            logger.info("Catalog returned fewer complementary products", requested=count, returned=len(products))
        return products
