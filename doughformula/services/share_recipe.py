"""
Shareable recipe links.

Recipes are encoded as short query parameters so links stay compact:

    https://thepizzadoughformula.com/?s=neapolitan&n=4&w=250&h=62&sa=25&y=3

Percent-like values are stored as scaled integers to keep float noise out
of the URL (hydration x100, salt/yeast x1000, oil/sugar/pre-ferment x100).
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from ..core.numbers import round_int
from ..schemas import RecipeParameters, SharedRecipe, SingleStageRecipe, TwoStageRecipe
from ..settings import settings
from .presets import resolve_parameters

logger = logging.getLogger("doughformula.share")

PARAM_MAP = {
    "style": "s",
    "num_balls": "n",
    "ball_weight": "w",
    "hydration": "h",
    "salt": "sa",
    "yeast": "y",
    "oil": "o",
    "sugar": "su",
    "use_pre_ferment": "pf",
    "pre_ferment_type": "pft",
    "pre_ferment_flour_percent": "pfp",
    "humidity_adjust": "ha",
    "flour_type": "ft",
}

# field -> integer scale used in the link
SCALES = {
    "hydration": 100,
    "salt": 1000,
    "yeast": 1000,
    "oil": 100,
    "sugar": 100,
    "pre_ferment_flour_percent": 100,
}

PRE_FERMENT_TYPES = ("poolish", "biga")

# parseInt-style: leading integer, trailing junk ignored ("65abc" -> 65)
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def encode_query(
    params: RecipeParameters,
    style: Optional[str] = None,
    flour_type: Optional[str] = None,
) -> str:
    """Encode parameters as a query string (without the leading "?")."""
    pairs: list[tuple[str, str]] = []

    if style:
        pairs.append((PARAM_MAP["style"], style))

    pairs.append((PARAM_MAP["num_balls"], str(params.num_balls)))
    pairs.append((PARAM_MAP["ball_weight"], str(round_int(params.ball_weight))))
    for field in ("hydration", "salt", "yeast"):
        pairs.append((PARAM_MAP[field], str(round_int(getattr(params, field) * SCALES[field]))))

    # Oil and sugar only when used
    for field in ("oil", "sugar"):
        value = getattr(params, field)
        if value > 0:
            pairs.append((PARAM_MAP[field], str(round_int(value * SCALES[field]))))

    if params.use_pre_ferment:
        pairs.append((PARAM_MAP["use_pre_ferment"], "1"))
        pairs.append((PARAM_MAP["pre_ferment_type"], params.pre_ferment_type))
        pairs.append((
            PARAM_MAP["pre_ferment_flour_percent"],
            str(round_int(params.pre_ferment_flour_percent * SCALES["pre_ferment_flour_percent"])),
        ))

    if params.humidity_adjust:
        pairs.append((PARAM_MAP["humidity_adjust"], "1"))

    if flour_type:
        pairs.append((PARAM_MAP["flour_type"], flour_type))

    return urlencode(pairs)


def encode_recipe(
    params: RecipeParameters,
    style: Optional[str] = None,
    flour_type: Optional[str] = None,
    base_url: Optional[str] = None,
) -> str:
    """Build a full share link for ``params``."""
    base = (base_url or settings.share_base_url).rstrip("/")
    return f"{base}/?{encode_query(params, style=style, flour_type=flour_type)}"


def _query_params(source: Any) -> Optional[dict[str, str]]:
    """Turn a URL, query string or mapping into {key: first value}."""
    if isinstance(source, Mapping):
        params = {}
        for key, value in source.items():
            if isinstance(value, (list, tuple)):
                if not value:
                    continue
                value = value[0]
            params[str(key)] = str(value)
        return params

    if not isinstance(source, str):
        return None

    text = source.strip()
    query = None
    try:
        parts = urlsplit(text)
        if parts.scheme and parts.netloc:
            query = parts.query
    except ValueError:
        logger.debug(f"Not a URL, treating as query string: {text[:80]}")

    if query is None:
        query = text.split("#", 1)[0]
        if "?" in query:
            query = query.split("?", 1)[1]

    params: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        # first occurrence wins
        params.setdefault(key, value)
    return params


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    match = _INT_PREFIX.match(raw)
    if not match:
        return None
    return int(match.group(1))


def decode_recipe(source: Any) -> Optional[SharedRecipe]:
    """
    Decode a share link into a partial recipe.

    Accepts a full URL, a query string (with or without "?") or a mapping of
    query parameters. Unknown keys and unparseable values are skipped; fields
    without a key stay None so the caller can overlay them on style defaults.
    Returns None only when ``source`` is neither a string nor a mapping.
    """
    params = _query_params(source)
    if params is None:
        return None

    decoded: dict[str, Any] = {}

    style = params.get(PARAM_MAP["style"])
    if style:
        decoded["style"] = style

    for field in ("num_balls", "ball_weight"):
        value = _parse_int(params.get(PARAM_MAP[field]))
        if value is not None:
            decoded[field] = value

    for field in ("hydration", "salt", "yeast", "oil", "sugar"):
        value = _parse_int(params.get(PARAM_MAP[field]))
        if value is not None:
            decoded[field] = value / SCALES[field]

    if params.get(PARAM_MAP["use_pre_ferment"]) == "1":
        decoded["use_pre_ferment"] = True
        pf_type = params.get(PARAM_MAP["pre_ferment_type"])
        decoded["pre_ferment_type"] = pf_type if pf_type in PRE_FERMENT_TYPES else "poolish"

        pfp = _parse_int(params.get(PARAM_MAP["pre_ferment_flour_percent"]))
        if pfp is not None:
            decoded["pre_ferment_flour_percent"] = pfp / SCALES["pre_ferment_flour_percent"]

    if params.get(PARAM_MAP["humidity_adjust"]) == "1":
        decoded["humidity_adjust"] = True

    flour_type = params.get(PARAM_MAP["flour_type"])
    if flour_type:
        decoded["flour_type"] = flour_type

    return SharedRecipe(**decoded)


def has_recipe_params(source: Any) -> bool:
    """True when a link carries a recipe (ball count or style)."""
    params = _query_params(source)
    if not params:
        return False
    return PARAM_MAP["num_balls"] in params or PARAM_MAP["style"] in params


def resolve_shared_recipe(shared: SharedRecipe) -> RecipeParameters:
    """Overlay decoded values onto the defaults of the link's style."""
    return resolve_parameters(shared.style, shared)


# --- Plain text export ---

RULE = "───────────────────────────────────"


def _n(value: float) -> str:
    return f"{value:g}"


def generate_recipe_text(recipe: SingleStageRecipe | TwoStageRecipe, style_name: str = "Pizza") -> str:
    """Render a calculated recipe as a copy/paste friendly text card."""
    lines = [
        f"{style_name} Dough Recipe",
        "Generated by The Pizza Dough Formula",
        "━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━",
        "",
    ]

    if recipe.stage == "single":
        ing = recipe.ingredients
        pct = recipe.percentages
        lines.append("INGREDIENTS")
        lines.append(RULE)
        lines.append(f"Flour: {_n(ing.flour)}g (100%)")
        lines.append(f"Water: {_n(ing.water)}g ({_n(pct.hydration)}%)")
        lines.append(f"Salt: {_n(ing.salt)}g ({_n(pct.salt)}%)")
        lines.append(f"Instant Yeast: {_n(ing.yeast)}g ({_n(pct.yeast)}%)")
        if ing.oil > 0:
            lines.append(f"Olive Oil: {_n(ing.oil)}g ({_n(pct.oil)}%)")
        if ing.sugar > 0:
            lines.append(f"Sugar: {_n(ing.sugar)}g ({_n(pct.sugar)}%)")
    else:
        pf = recipe.pre_ferment.ingredients
        final = recipe.final_dough.ingredients
        lines.append("STAGE 1: PRE-FERMENT (Night Before)")
        lines.append(RULE)
        lines.append(f"Flour: {_n(pf.flour)}g")
        lines.append(f"Water: {_n(pf.water)}g")
        lines.append(f"Instant Yeast: {_n(pf.yeast)}g")
        lines.append("")
        lines.append("Mix, cover loosely, ferment 12-16h at room temp.")
        lines.append("")
        lines.append("STAGE 2: FINAL DOUGH (Next Day)")
        lines.append(RULE)
        lines.append("Pre-ferment: All of it")
        lines.append(f"Flour: {_n(final.flour)}g")
        lines.append(f"Water: {_n(final.water)}g")
        lines.append(f"Salt: {_n(final.salt)}g")
        lines.append(f"Instant Yeast: {_n(final.yeast)}g")
        if final.oil > 0:
            lines.append(f"Olive Oil: {_n(final.oil)}g")
        if final.sugar > 0:
            lines.append(f"Sugar: {_n(final.sugar)}g")

    lines.append("")
    lines.append(f"Total dough: {_n(recipe.total_weight)}g")
    lines.append("")
    lines.append(RULE)
    lines.append(settings.share_base_url)

    return "\n".join(lines)
