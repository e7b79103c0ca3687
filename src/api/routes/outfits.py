"""
Outfit Generation Routes.

- POST /generate (alias POST /outfit_generator): assemble an outfit
- GET /models: list generation models

NOTE: Routes use `def` (not `async def`) because psycopg2 and the Supabase
client are synchronous. FastAPI runs sync handlers in a thread pool.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config.constants import PRODUCTS_REQUIRED_MESSAGE
from core.logging import bind_context, get_logger
from services.model_registry import list_models
from services.models import GenerateOutfitRequest, GenerationResult
from services.outfit_assembler import OutfitAssembler, get_outfit_assembler

logger = get_logger(__name__)

router = APIRouter(tags=["Outfits"])


def error_envelope(message: str) -> Dict[str, Any]:
    return GenerationResult.failure(message).to_response()


@router.get("/models", summary="List outfit generation models")
def get_models() -> Dict[str, Any]:
    return {"success": True, "models": list_models()}


@router.post("/generate", summary="Generate a complete outfit")
@router.post("/outfit_generator", include_in_schema=False)
def generate_outfit(
    request: GenerateOutfitRequest,
    assembler: OutfitAssembler = Depends(get_outfit_assembler),
) -> JSONResponse:
    """
    Build an outfit around the given product IDs.

    Private products are used when `userId` owns them. The outfit is padded
    with random public products up to at least 3 pieces and capped at
    `options.maxPieces` (max 15).
    """
    if not request.products:
        return JSONResponse(status_code=400, content=error_envelope(PRODUCTS_REQUIRED_MESSAGE))

    if request.user_id:
        bind_context(user_id=request.user_id)

    result = assembler.assemble(request.products, request.user_id, request.options)
    return JSONResponse(
        status_code=200 if result.success else 400,
        content=result.to_response(),
    )
