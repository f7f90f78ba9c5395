"""Pydantic schemas for Dough Formula.

Value types shared by the calculator, share-link codec and timer, plus the
request/response models of the HTTP API.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

PreFermentType = Literal["poolish", "biga"]
WeightUnit = Literal["grams", "ounces"]
VolumeMeasure = Literal["cup", "tbsp", "tsp"]


# --- Recipe inputs ---

class RecipeParameters(BaseModel):
    """Calculator input. Percent-like fields are fractions of flour (0.65 = 65%)."""

    model_config = ConfigDict(frozen=True)

    num_balls: int = 4
    ball_weight: float = 250
    hydration: float = 0.65
    salt: float = 0.02
    yeast: float = 0.003
    oil: float = 0.0
    sugar: float = 0.0
    humidity_adjust: bool = False
    use_pre_ferment: bool = False
    pre_ferment_type: PreFermentType = "poolish"
    pre_ferment_flour_percent: float = 0.25
    biga_hydration: float = 0.55


class RecipeOverrides(BaseModel):
    """Partial RecipeParameters. ``None`` means "not set, keep the default"."""

    num_balls: Optional[int] = None
    ball_weight: Optional[float] = None
    hydration: Optional[float] = None
    salt: Optional[float] = None
    yeast: Optional[float] = None
    oil: Optional[float] = None
    sugar: Optional[float] = None
    humidity_adjust: Optional[bool] = None
    use_pre_ferment: Optional[bool] = None
    pre_ferment_type: Optional[PreFermentType] = None
    pre_ferment_flour_percent: Optional[float] = None
    biga_hydration: Optional[float] = None

    def set_fields(self) -> dict:
        return self.model_dump(include=set(RecipeOverrides.model_fields), exclude_none=True)


class SharedRecipe(RecipeOverrides):
    """Decoded share link: partial parameters plus style and flour type."""

    style: Optional[str] = None
    flour_type: Optional[str] = None


# --- Calculated recipe ---

class Percentages(BaseModel):
    """Baker's percentages actually used, as percent values (62.5, not 0.625)."""

    hydration: float
    salt: float
    yeast: float
    oil: float
    sugar: float


class IngredientWeights(BaseModel):
    flour: float
    water: float
    salt: float
    yeast: float
    oil: float
    sugar: float


class SingleStageRecipe(BaseModel):
    stage: Literal["single"] = "single"
    ingredients: IngredientWeights
    total_weight: float
    percentages: Percentages


class PreFermentIngredients(BaseModel):
    flour: float
    water: float
    yeast: float


class PreFerment(BaseModel):
    type: PreFermentType
    ingredients: PreFermentIngredients
    hydration: float  # percent
    flour_percent: float  # percent of total flour


class FinalDoughIngredients(BaseModel):
    pre_ferment: Literal["all"] = "all"
    flour: float
    water: float
    salt: float
    yeast: float = 0
    oil: float
    sugar: float


class FinalDough(BaseModel):
    ingredients: FinalDoughIngredients


class TwoStageRecipe(BaseModel):
    stage: Literal["two-stage"] = "two-stage"
    pre_ferment: PreFerment
    final_dough: FinalDough
    totals: IngredientWeights
    total_weight: float
    percentages: Percentages


CalculatedRecipe = Annotated[Union[SingleStageRecipe, TwoStageRecipe], Field(discriminator="stage")]


# --- Style presets ---

class StylePreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    description: str
    equipment: str
    defaults: RecipeOverrides
    flour_recommendation: str
    flour_protein: str
    water_temp: str
    bake_temp: str
    bake_time: str
    ferment_type: str
    ferment_instructions: str
    tips: tuple[str, ...] = ()
    show_timer: bool = False


class TimerPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    duration: int  # ms
    description: str


# --- Timer ---

class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class TimerSnapshot(BaseModel):
    """Persisted timer record. Field names on the wire are camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    remaining: int
    is_running: bool = Field(alias="isRunning")
    saved_at: int = Field(alias="savedAt")
    duration: Optional[int] = None


class TimerStateOut(BaseModel):
    status: TimerStatus
    is_running: bool
    duration: int
    remaining: int
    started_at: Optional[int] = None
    progress: int
    formatted_time: str


class TimerAddTimeRequest(BaseModel):
    ms: int


class TimerDurationRequest(BaseModel):
    ms: int = Field(..., gt=0)


# --- Dough API ---

class ResolveRequest(BaseModel):
    style: Optional[str] = None
    overrides: RecipeOverrides = Field(default_factory=RecipeOverrides)


class ResolveResponse(BaseModel):
    style: str
    parameters: RecipeParameters
    recipe: CalculatedRecipe


# --- Share API ---

class ShareEncodeRequest(BaseModel):
    parameters: RecipeParameters
    style: Optional[str] = None
    flour_type: Optional[str] = None


class ShareEncodeResponse(BaseModel):
    url: str
    query: str


class ShareDecodeResponse(BaseModel):
    recipe: SharedRecipe
    parameters: RecipeParameters


class ShareTextRequest(BaseModel):
    parameters: RecipeParameters
    style: Optional[str] = None


# --- Units API ---

class WeightConvertRequest(BaseModel):
    grams: float = Field(..., ge=0)
    unit: Optional[WeightUnit] = None  # falls back to the stored preference


class WeightConvertResponse(BaseModel):
    grams: float
    unit: WeightUnit
    value: float
    formatted: str
    formatted_precise: str


class VolumeIngredientOut(BaseModel):
    id: str
    name: str
    grams_per_cup: Optional[float] = None
    grams_per_tbsp: Optional[float] = None
    grams_per_tsp: Optional[float] = None
    common_measures: dict[str, float] = {}


class VolumeConvertRequest(BaseModel):
    ingredient_id: str
    amount: Union[float, str]  # 1.5 or "1 1/2"
    measure: VolumeMeasure = "cup"


class VolumeConvertResponse(BaseModel):
    ingredient_id: str
    amount: float
    measure: VolumeMeasure
    grams: float


class UnitPrefs(BaseModel):
    unit: WeightUnit = "grams"
