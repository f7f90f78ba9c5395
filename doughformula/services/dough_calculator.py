"""
Dough calculator.

Derives ingredient weights from baker's percentages. Every ingredient is a
fraction of the flour weight, so the flour weight falls out of the total:

    flour = total_dough_weight / (1 + hydration + salt + yeast + oil + sugar)
"""

import logging
import math

from ..core.numbers import round_half_up
from ..errors import InvalidParameters
from ..schemas import (
    FinalDough,
    FinalDoughIngredients,
    IngredientWeights,
    Percentages,
    PreFerment,
    PreFermentIngredients,
    RecipeParameters,
    SingleStageRecipe,
    TwoStageRecipe,
)

logger = logging.getLogger("doughformula.calculator")

# Humid kitchens: flour absorbs moisture from the air, so hold back some water
HUMIDITY_HYDRATION_REDUCTION = 0.025

# Poolish is always a 1:1 flour/water batter
POOLISH_HYDRATION = 1.0


def total_dough_weight(params: RecipeParameters) -> float:
    return params.num_balls * params.ball_weight


def effective_hydration(params: RecipeParameters) -> float:
    if params.humidity_adjust:
        return params.hydration - HUMIDITY_HYDRATION_REDUCTION
    return params.hydration


def pre_ferment_hydration(params: RecipeParameters) -> float:
    if params.pre_ferment_type == "poolish":
        return POOLISH_HYDRATION
    return params.biga_hydration


def _validate(params: RecipeParameters) -> float:
    """Check inputs and return the flour denominator."""
    numeric = {
        "ball_weight": params.ball_weight,
        "hydration": params.hydration,
        "salt": params.salt,
        "yeast": params.yeast,
        "oil": params.oil,
        "sugar": params.sugar,
        "pre_ferment_flour_percent": params.pre_ferment_flour_percent,
        "biga_hydration": params.biga_hydration,
    }
    for name, value in numeric.items():
        if not math.isfinite(value):
            raise InvalidParameters(f"{name} must be a finite number", field=name)

    if params.num_balls < 1:
        raise InvalidParameters("num_balls must be at least 1", field="num_balls")
    if params.ball_weight <= 0:
        raise InvalidParameters("ball_weight must be greater than 0", field="ball_weight")

    # Humidity adjustment can push a low hydration below zero
    fractions = {
        "hydration": effective_hydration(params),
        "salt": params.salt,
        "yeast": params.yeast,
        "oil": params.oil,
        "sugar": params.sugar,
    }
    for name, value in fractions.items():
        if value < 0:
            raise InvalidParameters(f"{name} cannot be negative (got {value:g})", field=name)

    denominator = 1 + sum(fractions.values())

    if params.use_pre_ferment:
        if not 0 <= params.pre_ferment_flour_percent <= 1:
            raise InvalidParameters(
                "pre_ferment_flour_percent must be between 0 and 1",
                field="pre_ferment_flour_percent",
            )
        if params.pre_ferment_type == "biga" and params.biga_hydration < 0:
            raise InvalidParameters("biga_hydration cannot be negative", field="biga_hydration")

    return denominator


def _percentages(params: RecipeParameters) -> Percentages:
    # round away float noise (0.003 * 100 = 0.30000000000000004)
    return Percentages(
        hydration=round(effective_hydration(params) * 100, 4),
        salt=round(params.salt * 100, 4),
        yeast=round(params.yeast * 100, 4),
        oil=round(params.oil * 100, 4),
        sugar=round(params.sugar * 100, 4),
    )


def calculate(params: RecipeParameters) -> SingleStageRecipe | TwoStageRecipe:
    """
    Calculate ingredient weights for a recipe.

    Flour, water, oil and sugar are rounded to whole grams. Salt and yeast
    are rounded to 0.1 g since they are weighed on finer scales.

    Raises:
        InvalidParameters: non-positive ball count/weight, non-finite inputs,
            a negative (effective) percentage or an impossible pre-ferment.
    """
    denominator = _validate(params)
    total = total_dough_weight(params)
    hydration = effective_hydration(params)

    flour = total / denominator
    totals = IngredientWeights(
        flour=round_half_up(flour),
        water=round_half_up(flour * hydration),
        salt=round_half_up(flour * params.salt, 1),
        yeast=round_half_up(flour * params.yeast, 1),
        oil=round_half_up(flour * params.oil),
        sugar=round_half_up(flour * params.sugar),
    )
    percentages = _percentages(params)

    if not params.use_pre_ferment:
        return SingleStageRecipe(
            ingredients=totals,
            total_weight=round_half_up(total),
            percentages=percentages,
        )

    return _calculate_two_stage(params, totals, round_half_up(total), percentages)


def _calculate_two_stage(
    params: RecipeParameters,
    totals: IngredientWeights,
    total_weight: float,
    percentages: Percentages,
) -> TwoStageRecipe:
    """
    Split a batch into pre-ferment and final dough.

    Traditional method: all of the yeast goes into the pre-ferment. The
    12-16 hour ferment multiplies it, so the final dough gets none.

    The split works on the rounded batch totals so that pre-ferment plus
    final dough adds up to exactly the batch flour and water.
    """
    pf_hydration = pre_ferment_hydration(params)
    pf_flour_raw = totals.flour * params.pre_ferment_flour_percent
    pf_flour = round_half_up(pf_flour_raw)
    pf_water = round_half_up(pf_flour_raw * pf_hydration)

    if pf_water > totals.water:
        raise InvalidParameters(
            f"{params.pre_ferment_type} needs {pf_water:g}g water but the recipe only has {totals.water:g}g",
            field="pre_ferment_flour_percent",
        )

    logger.debug(
        f"Two-stage split: {params.pre_ferment_type} {pf_flour:g}g flour / {pf_water:g}g water "
        f"of {totals.flour:g}g / {totals.water:g}g"
    )

    return TwoStageRecipe(
        pre_ferment=PreFerment(
            type=params.pre_ferment_type,
            ingredients=PreFermentIngredients(
                flour=pf_flour,
                water=pf_water,
                yeast=totals.yeast,
            ),
            hydration=round(pf_hydration * 100, 4),
            flour_percent=round(params.pre_ferment_flour_percent * 100, 4),
        ),
        final_dough=FinalDough(
            ingredients=FinalDoughIngredients(
                flour=totals.flour - pf_flour,
                water=totals.water - pf_water,
                salt=totals.salt,
                yeast=0,
                oil=totals.oil,
                sugar=totals.sugar,
            )
        ),
        totals=totals,
        total_weight=total_weight,
        percentages=percentages,
    )
