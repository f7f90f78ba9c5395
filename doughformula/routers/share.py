"""
Router for shareable recipe links.
"""

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse

from ..schemas import ShareDecodeResponse, ShareEncodeRequest, ShareEncodeResponse, ShareTextRequest
from ..services.dough_calculator import calculate
from ..services.presets import get_style_by_id
from ..services.share_recipe import (
    decode_recipe,
    encode_query,
    encode_recipe,
    generate_recipe_text,
    resolve_shared_recipe,
)

router = APIRouter()


@router.post("/encode", response_model=ShareEncodeResponse)
def encode_link(req: ShareEncodeRequest):
    return ShareEncodeResponse(
        url=encode_recipe(req.parameters, style=req.style, flour_type=req.flour_type),
        query=encode_query(req.parameters, style=req.style, flour_type=req.flour_type),
    )


@router.get("/decode", response_model=ShareDecodeResponse)
def decode_link(link: str = Query(..., description="Share URL or query string")):
    """Decode a link and overlay it on the link style's defaults."""
    shared = decode_recipe(link)
    if shared is None:
        raise HTTPException(status_code=400, detail="Not a recipe link or query string")
    return ShareDecodeResponse(recipe=shared, parameters=resolve_shared_recipe(shared))


@router.post("/text", response_class=PlainTextResponse)
def recipe_text(req: ShareTextRequest):
    style = get_style_by_id(req.style) if req.style else None
    recipe = calculate(req.parameters)
    return generate_recipe_text(recipe, style.name if style else "Pizza")
