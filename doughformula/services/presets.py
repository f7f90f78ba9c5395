"""
Pizza style presets.

Default calculator values and descriptive metadata for each style, plus the
fermentation timer presets. Catalog entries are literal data and are never
mutated at runtime.
"""

from typing import Optional

from ..schemas import RecipeOverrides, RecipeParameters, StylePreset, TimerPreset

CUSTOM_STYLE_ID = "custom"

_STYLES = [
    StylePreset(
        id="neapolitan",
        name="Neapolitan",
        icon="neapolitan",
        description="Soft, pillowy, with charred leopard spots",
        equipment="Wood-fired or Ooni-style oven",
        defaults=RecipeOverrides(ball_weight=250, hydration=0.62, salt=0.025, yeast=0.003, oil=0, sugar=0),
        flour_recommendation="00 Flour (Caputo Pizzeria, Antimo Caputo)",
        flour_protein="11-12.5%",
        water_temp="55-60°F / 13-16°C (cold)",
        bake_temp="450-500°C / 850-900°F",
        bake_time="60-90 seconds",
        ferment_type="cold",
        ferment_instructions=(
            "Bulk ferment 1-2 hours at room temp, then cold ferment 24-72 hours. "
            "Remove from fridge 2 hours before balling. Proof balls 2-4 hours before stretching."
        ),
        tips=(
            "Use 00 flour for authentic texture",
            "High heat is essential for leopard spotting",
            "Cold ferment 24-72 hours for best flavor",
            "Stretch by hand, never use a rolling pin",
        ),
    ),
    StylePreset(
        id="newYork",
        name="New York",
        icon="newYork",
        description="Foldable slices with the perfect chew",
        equipment="Pizza steel or stone",
        defaults=RecipeOverrides(ball_weight=280, hydration=0.65, salt=0.02, yeast=0.004, oil=0.03, sugar=0.02),
        flour_recommendation="High-gluten bread flour (King Arthur, All Trumps)",
        flour_protein="13-14%",
        water_temp="55-60°F / 13-16°C (cold)",
        bake_temp="260-290°C / 500-550°F",
        bake_time="8-12 minutes",
        ferment_type="cold",
        ferment_instructions=(
            "Bulk ferment 1-2 hours at room temp, then cold ferment 24-48 hours. "
            "Remove from fridge 2 hours before balling. Proof balls 2-4 hours before stretching."
        ),
        tips=(
            "Oil and sugar help with browning at lower temps",
            "Use high-gluten flour for that NY chew",
            "Preheat your steel/stone for at least 1 hour",
            "Par-bake for crispier results",
        ),
    ),
    StylePreset(
        id="detroit",
        name="Detroit",
        icon="detroit",
        description="Airy pan pizza with crispy frico edges",
        equipment="Detroit-style steel pan",
        defaults=RecipeOverrides(ball_weight=400, hydration=0.72, salt=0.02, yeast=0.005, oil=0.04, sugar=0.01),
        flour_recommendation="Bread flour or all-purpose",
        flour_protein="11-13%",
        water_temp="75-80°F / 24-27°C (room temp)",
        bake_temp="230-260°C / 450-500°F",
        bake_time="12-15 minutes",
        ferment_type="room",
        ferment_instructions=(
            "Use stretch-and-fold technique during 3-4 hour room temp rise. Oil pan generously, "
            "press dough to edges, let rest 30 min, press again. Ready when doubled."
        ),
        tips=(
            "Generously oil the pan for crispy bottom",
            "Press dough to edges, let rest, press again",
            "Cheese goes all the way to the edges for frico",
            "Sauce goes on TOP of the cheese, in racing stripes",
        ),
    ),
    StylePreset(
        id="thinCrispy",
        name="Thin & Crispy",
        icon="thinCrispy",
        description="Tavern-style cracker crust, party cut",
        equipment="Pizza screen or sheet pan",
        defaults=RecipeOverrides(ball_weight=180, hydration=0.55, salt=0.02, yeast=0.004, oil=0.02, sugar=0),
        flour_recommendation="All-purpose flour",
        flour_protein="10-12%",
        water_temp="65-70°F / 18-21°C (cool)",
        bake_temp="230-260°C / 450-500°F",
        bake_time="8-10 minutes",
        ferment_type="room",
        ferment_instructions=(
            "Mix dough and let rest 1-2 hours at room temperature. Roll out thin with a rolling pin. "
            "Dock with fork to prevent bubbles. Can also cold ferment overnight for more flavor."
        ),
        tips=(
            "Low hydration = easier to roll thin",
            "Use a rolling pin for even thickness",
            "Dock the dough with a fork to prevent bubbles",
            "Cut into squares, not triangles (party style)",
        ),
    ),
    StylePreset(
        id="poolishBiga",
        name="Poolish/Biga",
        icon="poolishBiga",
        description="Rich, complex flavor from pre-ferment",
        equipment="Any oven works",
        defaults=RecipeOverrides(
            ball_weight=260,
            hydration=0.65,
            salt=0.025,
            yeast=0.002,
            oil=0,
            sugar=0,
            use_pre_ferment=True,
            pre_ferment_type="poolish",
            pre_ferment_flour_percent=0.25,
        ),
        flour_recommendation="00 or bread flour",
        flour_protein="11-13%",
        water_temp="65-70°F / 18-21°C (cool)",
        bake_temp="260-300°C / 500-575°F",
        bake_time="5-8 minutes",
        ferment_type="preferment",
        ferment_instructions=(
            "Day 1: Mix pre-ferment (flour + water + pinch of yeast), cover, ferment 12-16 hours "
            "at room temp until bubbly and domed. Day 2: Mix final dough with pre-ferment. "
            "Bulk ferment 2-3 hours. Ball and proof 2-4 hours before stretching."
        ),
        tips=(
            "Poolish (liquid) = more open crumb, mild flavor",
            "Biga (stiff) = more complex flavor, tighter crumb",
            "Start pre-ferment 12-16 hours before final dough",
            "Pre-ferment should be bubbly and slightly domed when ready",
        ),
    ),
    StylePreset(
        id="emergency",
        name="Emergency (2hr)",
        icon="emergency",
        description="Ready in 2 hours. Pizza night rescued!",
        equipment="Any oven",
        # higher yeast for the quick rise
        defaults=RecipeOverrides(ball_weight=250, hydration=0.60, salt=0.02, yeast=0.01, oil=0.02, sugar=0.01),
        flour_recommendation="All-purpose or bread flour",
        flour_protein="10-13%",
        water_temp="100-110°F / 38-43°C (warm)",
        bake_temp="230-260°C / 450-500°F",
        bake_time="8-12 minutes",
        ferment_type="quick",
        ferment_instructions=(
            "Use warm water to activate yeast quickly. Mix all ingredients until smooth. Cover and "
            "let rise at room temperature for 2 hours until doubled in size. Shape immediately and "
            "bake. No cold ferment needed for this quick dough."
        ),
        tips=(
            "Use warm water (100-110°F) to speed up yeast",
            "Higher yeast = faster rise, but less complex flavor",
            "Let dough rest at least 2 hours before shaping",
            "Best for when you need pizza TODAY",
        ),
        show_timer=True,
    ),
    StylePreset(
        id=CUSTOM_STYLE_ID,
        name="Custom",
        icon="custom",
        description="Your recipe, your rules",
        equipment="Your choice",
        defaults=RecipeOverrides(ball_weight=250, hydration=0.65, salt=0.02, yeast=0.003, oil=0, sugar=0),
        flour_recommendation="Your choice",
        flour_protein="Varies by flour type",
        water_temp="Varies by fermentation method",
        bake_temp="Varies",
        bake_time="Varies",
        ferment_type="custom",
        ferment_instructions=(
            "Adjust fermentation based on your yeast amount: Low yeast (0.1-0.3%) = cold ferment "
            "24-72 hours. Medium yeast (0.3-0.5%) = room temp 4-8 hours or cold 12-24 hours. "
            "High yeast (0.5-1%) = room temp 2-4 hours."
        ),
        tips=(
            "Experiment with hydration: 55-75% covers most styles",
            "Salt typically 2-3% of flour weight",
            "Yeast: 0.1-0.5% for cold ferment, 0.5-2% for same-day",
            "Oil adds tenderness, sugar aids browning",
        ),
    ),
]

PIZZA_STYLES: dict[str, StylePreset] = {style.id: style for style in _STYLES}

HOUR_MS = 60 * 60 * 1000

TIMER_PRESETS: dict[str, TimerPreset] = {
    "emergency": TimerPreset(
        id="emergency", name="Emergency Dough", duration=2 * HOUR_MS, description="Quick same-day dough"
    ),
    "roomTemp": TimerPreset(
        id="roomTemp",
        name="Room Temp Rise",
        duration=4 * HOUR_MS,
        description="Standard room temperature bulk ferment",
    ),
    "poolish": TimerPreset(
        id="poolish", name="Poolish/Biga", duration=12 * HOUR_MS, description="Overnight pre-ferment"
    ),
    "ballRest": TimerPreset(
        id="ballRest", name="Ball Rest", duration=2 * HOUR_MS, description="Final ball proof before shaping"
    ),
}


def get_style_ids() -> list[str]:
    return list(PIZZA_STYLES.keys())


def get_style_by_id(style_id: str) -> Optional[StylePreset]:
    return PIZZA_STYLES.get(style_id)


def get_all_styles() -> list[StylePreset]:
    return list(PIZZA_STYLES.values())


def get_style_defaults(style_id: Optional[str]) -> RecipeParameters:
    """Default parameters for a style. Unknown ids fall back to the custom style."""
    style = PIZZA_STYLES.get(style_id) if style_id else None
    if style is None:
        style = PIZZA_STYLES[CUSTOM_STYLE_ID]
    return RecipeParameters(**style.defaults.set_fields())


def resolve_parameters(style_id: Optional[str], overrides: Optional[RecipeOverrides] = None) -> RecipeParameters:
    """Overlay the set fields of ``overrides`` onto a style's defaults."""
    base = get_style_defaults(style_id)
    if overrides is None:
        return base
    return base.model_copy(update=overrides.set_fields())
