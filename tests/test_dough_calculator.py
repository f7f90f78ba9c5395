"""
Tests for the dough calculator.
"""

import math

import pytest

from doughformula.errors import InvalidParameters
from doughformula.schemas import RecipeParameters
from doughformula.services.dough_calculator import calculate, effective_hydration, total_dough_weight
from doughformula.services.presets import get_style_defaults, get_style_ids


def _sum_single(recipe):
    ing = recipe.ingredients
    return ing.flour + ing.water + ing.salt + ing.yeast + ing.oil + ing.sugar


def test_single_stage_reference_recipe():
    # 4 x 250g = 1000g, denominator 1.673 -> flour 597.7g
    params = RecipeParameters(num_balls=4, ball_weight=250, hydration=0.65, salt=0.02, yeast=0.003)
    recipe = calculate(params)

    assert recipe.stage == "single"
    assert recipe.ingredients.flour == 598
    assert recipe.ingredients.water == 389
    assert recipe.ingredients.salt == 12.0
    assert recipe.ingredients.yeast == 1.8
    assert recipe.ingredients.oil == 0
    assert recipe.ingredients.sugar == 0
    assert recipe.total_weight == 1000


def test_percentages_echoed_back():
    params = RecipeParameters(hydration=0.65, salt=0.02, yeast=0.003, oil=0.03, sugar=0.02)
    pct = calculate(params).percentages

    assert pct.hydration == 65
    assert pct.salt == 2
    assert pct.yeast == 0.3
    assert pct.oil == 3
    assert pct.sugar == 2


def test_salt_and_yeast_keep_one_decimal():
    params = RecipeParameters(num_balls=1, ball_weight=333, hydration=0.7, salt=0.028, yeast=0.0015)
    ing = calculate(params).ingredients

    # whole grams for bulk ingredients
    assert ing.flour == int(ing.flour)
    assert ing.water == int(ing.water)
    # tenths for salt and yeast
    assert round(ing.salt * 10) == pytest.approx(ing.salt * 10)
    assert round(ing.yeast * 10) == pytest.approx(ing.yeast * 10)
    assert ing.yeast == 0.3


def test_halves_round_up():
    # all fractions zero -> flour = 148.5 exactly; banker's rounding would give 148
    params = RecipeParameters(num_balls=1, ball_weight=148.5, hydration=0, salt=0, yeast=0)
    assert calculate(params).ingredients.flour == 149


@pytest.mark.parametrize("style_id", get_style_ids())
def test_weights_add_up_to_total(style_id):
    params = get_style_defaults(style_id).model_copy(update={"use_pre_ferment": False, "num_balls": 6})
    recipe = calculate(params)

    assert abs(_sum_single(recipe) - total_dough_weight(params)) <= 2.5


def test_humidity_adjust_reduces_hydration_by_exactly_2_5_points():
    base = RecipeParameters(hydration=0.68)
    humid = base.model_copy(update={"humidity_adjust": True})

    assert effective_hydration(base) - effective_hydration(humid) == pytest.approx(0.025)
    assert calculate(humid).percentages.hydration == pytest.approx(65.5)
    assert calculate(base).percentages.hydration == pytest.approx(68)


def test_humidity_adjust_changes_weights():
    params = RecipeParameters(humidity_adjust=True)
    recipe = calculate(params)

    # denominator 1 + 0.625 + 0.023 = 1.648 -> flour 606.8g
    assert recipe.ingredients.flour == 607
    assert recipe.ingredients.water == 379


def test_poolish_two_stage():
    params = RecipeParameters(use_pre_ferment=True, pre_ferment_flour_percent=0.25)
    recipe = calculate(params)

    assert recipe.stage == "two-stage"
    pf = recipe.pre_ferment
    assert pf.type == "poolish"
    assert pf.ingredients.flour == 150
    # Poolish is always 100% hydration, regardless of the 65% dough
    assert pf.hydration == 100
    assert pf.ingredients.water == 150
    assert pf.flour_percent == 25

    final = recipe.final_dough.ingredients
    assert final.yeast == 0
    assert final.pre_ferment == "all"
    assert final.salt == 12.0


def test_all_yeast_goes_into_pre_ferment():
    params = RecipeParameters(yeast=0.004, use_pre_ferment=True)
    recipe = calculate(params)

    assert recipe.pre_ferment.ingredients.yeast == recipe.totals.yeast
    assert recipe.final_dough.ingredients.yeast == 0


@pytest.mark.parametrize("pf_type", ["poolish", "biga"])
@pytest.mark.parametrize("percent", [0.1, 0.2, 0.25, 0.33, 0.5])
def test_two_stage_conserves_flour_and_water(pf_type, percent):
    params = RecipeParameters(
        num_balls=5,
        ball_weight=265,
        hydration=0.7,
        use_pre_ferment=True,
        pre_ferment_type=pf_type,
        pre_ferment_flour_percent=percent,
    )
    recipe = calculate(params)
    single = calculate(params.model_copy(update={"use_pre_ferment": False}))

    pf = recipe.pre_ferment.ingredients
    final = recipe.final_dough.ingredients
    assert pf.flour + final.flour == single.ingredients.flour
    assert pf.water + final.water == single.ingredients.water


def test_biga_uses_configured_hydration():
    params = RecipeParameters(
        use_pre_ferment=True, pre_ferment_type="biga", pre_ferment_flour_percent=0.25, biga_hydration=0.5
    )
    recipe = calculate(params)

    assert recipe.pre_ferment.type == "biga"
    assert recipe.pre_ferment.hydration == 50
    # 598 * 0.25 = 149.5g flour, half of that in water
    assert recipe.pre_ferment.ingredients.water == 75
    assert recipe.final_dough.ingredients.water == 389 - 75


def test_pre_ferment_settings_ignored_when_disabled():
    params = RecipeParameters(pre_ferment_type="biga", pre_ferment_flour_percent=0.9)
    assert calculate(params).stage == "single"


@pytest.mark.parametrize(
    "overrides",
    [
        {"num_balls": 0},
        {"num_balls": -2},
        {"ball_weight": 0},
        {"ball_weight": -250},
        {"hydration": -1.5},
        {"salt": math.inf},
        {"ball_weight": math.nan},
        {"hydration": 0.02, "humidity_adjust": True},
        {"salt": -0.05},
        {"yeast": -0.001},
        {"oil": -0.01},
        {"sugar": -0.02},
    ],
)
def test_invalid_parameters(overrides):
    with pytest.raises(InvalidParameters):
        calculate(RecipeParameters(**overrides))


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"hydration": 0.02, "humidity_adjust": True}, "hydration"),
        ({"salt": -0.05}, "salt"),
        ({"sugar": -0.02}, "sugar"),
    ],
)
def test_negative_percentages_are_rejected(overrides, field):
    # would otherwise come out as negative gram weights
    with pytest.raises(InvalidParameters) as exc:
        calculate(RecipeParameters(**overrides))
    assert exc.value.field == field


def test_humidity_adjust_down_to_zero_hydration_is_allowed():
    params = RecipeParameters(hydration=0.025, humidity_adjust=True)
    assert calculate(params).ingredients.water == 0


def test_invalid_parameters_reports_field():
    with pytest.raises(InvalidParameters) as exc:
        calculate(RecipeParameters(num_balls=0))
    assert exc.value.field == "num_balls"


def test_pre_ferment_cannot_need_more_water_than_the_dough():
    # 100% of the flour as poolish needs 100% hydration, dough only has 65%
    params = RecipeParameters(use_pre_ferment=True, pre_ferment_flour_percent=1.0)
    with pytest.raises(InvalidParameters):
        calculate(params)


def test_pre_ferment_percent_out_of_range():
    with pytest.raises(InvalidParameters):
        calculate(RecipeParameters(use_pre_ferment=True, pre_ferment_flour_percent=1.5))


def test_recalculates_on_every_call():
    params = RecipeParameters()
    first = calculate(params)
    second = calculate(params.model_copy(update={"num_balls": 8}))

    assert second.total_weight == 2 * first.total_weight
    assert calculate(params) == first
