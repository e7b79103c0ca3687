"""
Private per-user product store backed by Supabase.

Records carry a `user_id` owner field. A record is only handed out when
the owner matches the requesting identity exactly.
"""

from typing import Any, Dict, Optional

from supabase import Client

from core.logging import get_logger

logger = get_logger(__name__)

OWNER_FIELD = "user_id"


class PrivateProductStore:
    """
    Point lookups against the private products table.

    A missing client (store not configured) behaves like an empty store.
    """

    def __init__(self, client: Optional[Client], table: str = "user_products"):
        self.client = client
        self.table = table

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a record by id regardless of owner. Errors count as not found."""
        if self.client is None:
            logger.warning("Private store not configured", product_id=product_id)
            return None
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .eq("product_id", product_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(
                "Private store lookup failed",
                product_id=product_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        return result.data[0] if result.data else None

    def get_owned_product(self, product_id: str, owner_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a record only if it belongs to `owner_id`."""
        record = self.get_product(product_id)
        if record is None:
            return None
        if record.get(OWNER_FIELD) != owner_id:
            logger.debug("Private product owned by another user", product_id=product_id)
            return None
        return record
