"""
Resolve caller product references to concrete product records.

Private products win when the caller's identity owns them; everything else
falls back to the public catalog. Unresolvable references are dropped.
"""

from typing import List, Optional, Sequence

from core.logging import get_logger
from services.catalog import PublicCatalog
from services.models import MatchReason, Product, ProductSource
from services.private_store import PrivateProductStore

logger = get_logger(__name__)


class ProductResolver:
    def __init__(self, catalog: PublicCatalog, private_store: PrivateProductStore):
        self.catalog = catalog
        self.private_store = private_store

    def resolve(
        self,
        references: Sequence[str],
        owner_id: Optional[str] = None,
    ) -> List[Product]:
        """
        Resolve references in input order.

        One catalog connection is held for the whole pass. Catalog failures
        raise DataAccessError and abort the pass; private store failures only
        skip the private lookup for that reference.
        """
        products: List[Product] = []
        dropped = 0

        with self.catalog.session() as catalog:
            for ref in references:
                if owner_id:
                    record = self.private_store.get_owned_product(ref, owner_id)
                    if record is not None:
                        products.append(Product.from_record(
                            record,
                            source=ProductSource.USER,
                            match_reason=MatchReason.INPUT,
                        ))
                        continue

                record = catalog.get_product(ref)
                if record is not None:
                    products.append(Product.from_record(
                        record,
                        source=ProductSource.GENERAL,
                        match_reason=MatchReason.INPUT,
                    ))
                else:
                    dropped += 1

        logger.info(
            "Resolved input products",
            requested=len(references),
            resolved=len(products),
            dropped=dropped,
            with_owner=bool(owner_id),
        )
        return products
