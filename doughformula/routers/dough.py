"""
Router for the dough calculator.
"""

import logging

from fastapi import APIRouter

from ..schemas import CalculatedRecipe, RecipeParameters, ResolveRequest, ResolveResponse
from ..services.dough_calculator import calculate
from ..services.presets import CUSTOM_STYLE_ID, get_style_by_id, resolve_parameters

logger = logging.getLogger("doughformula.dough")

router = APIRouter()


@router.post("/calculate", response_model=CalculatedRecipe)
def calculate_recipe(params: RecipeParameters):
    """
    Calculate ingredient weights. InvalidParameters is turned into a 422
    by the app-level exception handler.
    """
    return calculate(params)


@router.post("/resolve", response_model=ResolveResponse)
def resolve_recipe(req: ResolveRequest):
    """Merge a style's defaults with user overrides and calculate the result."""
    style_id = req.style if req.style and get_style_by_id(req.style) else CUSTOM_STYLE_ID
    if req.style and style_id != req.style:
        logger.info(f"Unknown style '{req.style}', using {CUSTOM_STYLE_ID} defaults")

    params = resolve_parameters(style_id, req.overrides)
    return ResolveResponse(style=style_id, parameters=params, recipe=calculate(params))
