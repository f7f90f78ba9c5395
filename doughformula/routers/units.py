"""
Router for weight and volume conversion.
"""

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_store
from ..infra.kv_store import KeyValueStore
from ..schemas import (
    VolumeConvertRequest,
    VolumeConvertResponse,
    VolumeIngredientOut,
    WeightConvertRequest,
    WeightConvertResponse,
)
from ..services.unit_conversion import convert_weight, format_weight, format_weight_precise, get_stored_unit
from ..services.volume_conversion import get_all_ingredients, get_ingredient_by_id, parse_fraction, volume_to_grams

router = APIRouter()


@router.post("/weight", response_model=WeightConvertResponse)
def convert_weight_endpoint(req: WeightConvertRequest, store: KeyValueStore = Depends(get_store)):
    """Convert grams for display. Without a unit, the stored preference is used."""
    unit = req.unit or get_stored_unit(store)
    return WeightConvertResponse(
        grams=req.grams,
        unit=unit,
        value=convert_weight(req.grams, unit),
        formatted=format_weight(req.grams, unit),
        formatted_precise=format_weight_precise(req.grams, unit),
    )


@router.get("/volume/ingredients", response_model=list[VolumeIngredientOut])
def list_volume_ingredients():
    return [ingredient.to_dict() for ingredient in get_all_ingredients()]


@router.post("/volume/convert", response_model=VolumeConvertResponse)
def convert_volume(req: VolumeConvertRequest):
    if get_ingredient_by_id(req.ingredient_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown ingredient: {req.ingredient_id}")

    amount = req.amount if isinstance(req.amount, (int, float)) else parse_fraction(req.amount)
    if amount is None or amount < 0:
        raise HTTPException(status_code=400, detail=f"Invalid amount: {req.amount}")

    grams = volume_to_grams(amount, req.measure, req.ingredient_id)
    if grams is None:
        raise HTTPException(
            status_code=400,
            detail=f"No {req.measure} measurement for {req.ingredient_id}",
        )

    return VolumeConvertResponse(ingredient_id=req.ingredient_id, amount=amount, measure=req.measure, grams=grams)
