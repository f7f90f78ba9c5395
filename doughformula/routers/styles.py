"""
Router for the style and timer preset catalogs.
"""

from fastapi import APIRouter, HTTPException

from ..schemas import RecipeParameters, StylePreset, TimerPreset
from ..services.presets import TIMER_PRESETS, get_all_styles, get_style_by_id, get_style_defaults

router = APIRouter()


@router.get("/styles", response_model=list[StylePreset])
def list_styles():
    return get_all_styles()


@router.get("/styles/{style_id}", response_model=StylePreset)
def get_style(style_id: str):
    style = get_style_by_id(style_id)
    if style is None:
        raise HTTPException(status_code=404, detail=f"Style '{style_id}' not found")
    return style


@router.get("/styles/{style_id}/defaults", response_model=RecipeParameters)
def get_defaults(style_id: str):
    """Default parameters. Unknown styles get the custom defaults, not a 404."""
    return get_style_defaults(style_id)


@router.get("/timer/presets", response_model=list[TimerPreset])
def list_timer_presets():
    return list(TIMER_PRESETS.values())
