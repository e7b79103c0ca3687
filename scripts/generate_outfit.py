#!/usr/bin/env python3
"""
Generate one outfit against the configured stores and print the envelope.

Usage:
    python scripts/generate_outfit.py p1 p2
    python scripts/generate_outfit.py p1 --user-id u1 --max-pieces 5
    python scripts/generate_outfit.py p1 --enforce-constraints --json-logs
"""

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from dotenv import load_dotenv

load_dotenv()

from config.database import catalog_connection, get_supabase_client_optional
from config.settings import get_settings
from core.logging import configure_logging
from services.catalog import PublicCatalog
from services.complementary_sampler import ComplementarySampler
from services.model_registry import list_models
from services.models import GenerationOptions
from services.outfit_assembler import OutfitAssembler
from services.private_store import PrivateProductStore
from services.product_resolver import ProductResolver


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate an outfit from product IDs")
    parser.add_argument("products", nargs="*", help="Product IDs to build the outfit around")
    parser.add_argument("--user-id", default=None, help="Owner of private products")
    parser.add_argument("--model", default=None, help="Generation model id (default: random)")
    parser.add_argument("--max-pieces", type=int, default=None, help="Upper bound on pieces (max 15)")
    parser.add_argument("--enforce-constraints", action="store_true",
                        help="Trim with body-area caps instead of a prefix cut")
    parser.add_argument("--list-models", action="store_true", help="Print available models and exit")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    args = parser.parse_args()

    configure_logging(json_logs=args.json_logs, log_level="INFO")

    if args.list_models:
        print(json.dumps(list_models(), indent=2))
        return 0

    if not args.products:
        parser.error("at least one product ID is required")

    settings = get_settings()
    catalog = PublicCatalog(catalog_connection, table=settings.catalog_table)
    private_store = PrivateProductStore(
        get_supabase_client_optional(),
        table=settings.private_products_table,
    )
    assembler = OutfitAssembler(
        ProductResolver(catalog, private_store),
        ComplementarySampler(catalog),
        enforce_constraints=args.enforce_constraints or settings.enforce_outfit_constraints,
        refill_rounds=settings.constraint_refill_rounds,
    )

    result = assembler.assemble(
        args.products,
        args.user_id,
        GenerationOptions(model=args.model, max_pieces=args.max_pieces),
    )
    print(json.dumps(result.to_response(), indent=2, default=str))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
