"""Pydantic schemas for Cooklog API.

Request/response models for:
- Auth / user profile / settings
- Recipes (with nested ingredients and steps) and recipe extraction
- Fridge items and the ingredient catalog
- Cooking logs and the dashboard
"""

import re
from datetime import datetime, date
from typing import Generic, Optional, Literal, TypeVar

from pydantic import BaseModel, Field, StrictBool, ValidationInfo, field_validator

from .models import COOKING_STATUSES

T = TypeVar("T")

Difficulty = Literal["Easy", "Medium", "Hard"]

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _required_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ValueError(message)
    return value.strip()


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _limit(value: Optional[str], field: str, max_length: int) -> Optional[str]:
    if value is not None and len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters.")
    return value


def _parse_date_string(value):
    if value is None:
        return None
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError("must be a date in YYYY-MM-DD format.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError("must be a date in YYYY-MM-DD format.")


# --- Envelopes ---

class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class MessageDataResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T


# --- Auth / User ---

class SocialSignInRequest(BaseModel):
    access_token: str

    @field_validator("access_token")
    @classmethod
    def _token(cls, v: str) -> str:
        return _required_text(v, "access_token is required.")


class SignupRequest(BaseModel):
    nickname: str
    terms_agreements: StrictBool

    @field_validator("nickname")
    @classmethod
    def _nickname(cls, v: str) -> str:
        v = _required_text(v, "nickname is required.")
        if len(v) > 50:
            raise ValueError("nickname must be at most 50 characters.")
        return v


class SessionUserOut(BaseModel):
    user_id: int
    nickname: Optional[str] = None
    email: Optional[str] = None
    is_complete: bool


class UserSettingsOut(BaseModel):
    alert_timer: bool = True
    alert_expiry: bool = True
    auto_export_enabled: bool = False
    external_link: Optional[str] = None

    class Config:
        from_attributes = True


class UserProfileOut(BaseModel):
    user_id: int
    nickname: str
    email: Optional[str]
    profile_image: Optional[str]
    social_provider: str
    terms_agreements: bool
    terms_agreed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    settings: UserSettingsOut = Field(default_factory=UserSettingsOut)

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    nickname: Optional[str] = None
    profile_image: Optional[str] = None

    @field_validator("nickname")
    @classmethod
    def _nickname(cls, v: Optional[str]) -> str:
        v = _required_text(v, "nickname must not be empty.")
        if len(v) > 50:
            raise ValueError("nickname must be at most 50 characters.")
        return v

    @field_validator("profile_image")
    @classmethod
    def _image(cls, v: Optional[str]) -> Optional[str]:
        return _limit(_optional_text(v), "profile_image", 500)


class SettingsUpdate(ProfileUpdate):
    alert_timer: Optional[StrictBool] = None
    alert_expiry: Optional[StrictBool] = None
    auto_export_enabled: Optional[StrictBool] = None
    external_link: Optional[str] = None

    @field_validator("external_link")
    @classmethod
    def _link(cls, v: Optional[str]) -> Optional[str]:
        return _limit(_optional_text(v), "external_link", 500)


# --- Recipe ingredients / steps ---

class RecipeIngredientIn(BaseModel):
    name: str
    amount: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _limit(_required_text(v, "name is required."), "name", 200)

    @field_validator("unit")
    @classmethod
    def _unit(cls, v: Optional[str]) -> Optional[str]:
        return _limit(_optional_text(v), "unit", 30)


class RecipeStepIn(BaseModel):
    step_order: int = Field(..., ge=0)
    instruction: str
    timer_seconds: int = Field(0, ge=0)
    step_image_url: Optional[str] = None

    @field_validator("instruction")
    @classmethod
    def _instruction(cls, v: str) -> str:
        return _required_text(v, "instruction is required.")

    @field_validator("step_image_url")
    @classmethod
    def _image(cls, v: Optional[str]) -> Optional[str]:
        return _limit(_optional_text(v), "step_image_url", 1000)


class RecipeStepOut(BaseModel):
    step_id: int
    step_order: int
    instruction: str
    timer_seconds: int
    step_image_url: Optional[str] = None

    class Config:
        from_attributes = True


class CookingStepOut(BaseModel):
    """Cooking-mode projection (no images)."""
    step_id: int
    step_order: int
    instruction: str
    timer_seconds: int

    class Config:
        from_attributes = True


# --- Recipe ---

class RecipeCreate(BaseModel):
    title: str
    servings: int = Field(1, ge=1)
    difficulty: Optional[Difficulty] = None
    source_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    ingredients: list[RecipeIngredientIn]
    steps: list[RecipeStepIn]

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        v = _required_text(v, "title is required.")
        if len(v) > 200:
            raise ValueError("title must be at most 200 characters.")
        return v

    @field_validator("ingredients")
    @classmethod
    def _ingredients(cls, v: list[RecipeIngredientIn]) -> list[RecipeIngredientIn]:
        if not v:
            raise ValueError("at least one ingredient is required.")
        return v

    @field_validator("steps")
    @classmethod
    def _steps(cls, v: list[RecipeStepIn]) -> list[RecipeStepIn]:
        if not v:
            raise ValueError("at least one step is required.")
        return v

    @field_validator("source_url", "thumbnail_url")
    @classmethod
    def _urls(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _limit(_optional_text(v), info.field_name, 1000)


class RecipeCreatedOut(BaseModel):
    recipe_id: int
    title: str

    class Config:
        from_attributes = True


class LatestLogOut(BaseModel):
    log_id: int
    status: str
    lesson_note: Optional[str]
    companion: Optional[str] = None
    cooked_at: datetime

    class Config:
        from_attributes = True


class RecipeListItemOut(BaseModel):
    recipe_id: int
    title: str
    thumbnail_url: Optional[str]
    difficulty: Optional[str]
    servings: Optional[int]
    created_at: Optional[datetime]
    latest_log: Optional[LatestLogOut] = None


class RecipeStatsOut(BaseModel):
    total_cooking_count: int
    overall_success_rate: Optional[int]


class RecipeListResponse(BaseModel):
    success: bool = True
    stats: RecipeStatsOut
    data: list[RecipeListItemOut]


class ScaledIngredientOut(BaseModel):
    ri_id: int
    name: str
    amount: Optional[float]
    unit: Optional[str]


class RecipeDetailOut(BaseModel):
    recipe_id: int
    title: str
    source_url: Optional[str]
    thumbnail_url: Optional[str]
    difficulty: Optional[str]
    base_servings: int
    requested_servings: int
    created_at: Optional[datetime]
    latest_log: Optional[LatestLogOut]
    ingredients: list[ScaledIngredientOut]
    steps: list[RecipeStepOut]


# --- Recipe extraction ---

class ExtractedIngredient(BaseModel):
    name: str = Field(description="Ingredient name, e.g. onion, pork belly.")
    amount: Optional[float] = Field(
        description="Numeric quantity only (1, 0.5, 200). null when not expressible as a number."
    )
    unit: str = Field(description="Unit such as g, ml, tbsp, pcs. Empty string when there is none.")


class ExtractedStep(BaseModel):
    step_order: int = Field(description="1-based step number.")
    instruction: str = Field(description="Clear and concise instruction for this step.")
    timer_seconds: int = Field(
        description="Seconds to wait or cook in this step (simmer 10 min -> 600). 0 when no wait is implied."
    )


class ExtractedRecipe(BaseModel):
    """Language-model output schema. A missing or null title falls back to the page title."""
    title: Optional[str] = Field(None, description="Title of the dish or recipe. Invent a fitting one if unclear.")
    difficulty: Difficulty = Field(description="Overall difficulty judged from steps and ingredients.")
    servings: int = Field(description="How many servings the recipe makes. 1 when unknown.")
    ingredients: list[ExtractedIngredient]
    steps: list[ExtractedStep]


class ExtractedRecipeOut(ExtractedRecipe):
    title: str
    source_url: str
    thumbnail_url: Optional[str] = None


# --- Ingredient catalog ---

class IngredientMasterOut(BaseModel):
    master_id: int
    name: str
    category: Optional[str]
    icon_url: Optional[str]
    default_unit: Optional[str]

    class Config:
        from_attributes = True


# --- Fridge ---

class FridgeItemCreate(BaseModel):
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    expiry_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = _required_text(v, "name is required.")
        if len(v) > 100:
            raise ValueError("name must be at most 100 characters.")
        return v

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("quantity must be greater than 0.")
        return v

    @field_validator("unit")
    @classmethod
    def _unit(cls, v: Optional[str]) -> Optional[str]:
        return _limit(_optional_text(v), "unit", 30)

    @field_validator("expiry_date", mode="before")
    @classmethod
    def _expiry_format(cls, v):
        return _parse_date_string(v)

    @field_validator("expiry_date")
    @classmethod
    def _expiry_not_past(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v < date.today():
            raise ValueError("expiry_date must be today or later.")
        return v


class FridgeItemUpdate(BaseModel):
    """Partial update. Only fields present in the body are applied; expiry_date null or "" clears it."""
    quantity: Optional[float] = None
    unit: Optional[str] = None
    expiry_date: Optional[date] = None

    @field_validator("quantity")
    @classmethod
    def _quantity(cls, v: Optional[float]) -> float:
        if v is None or v <= 0:
            raise ValueError("quantity must be greater than 0.")
        return v

    @field_validator("unit")
    @classmethod
    def _unit(cls, v: Optional[str]) -> Optional[str]:
        return _limit(_optional_text(v), "unit", 30)

    @field_validator("expiry_date", mode="before")
    @classmethod
    def _expiry_format(cls, v):
        if v == "":
            return None
        return _parse_date_string(v)


class FridgeItemOut(BaseModel):
    item_id: int
    name: str
    icon_url: Optional[str]
    quantity: Optional[float]
    unit: Optional[str]
    expiry_date: Optional[date]
    d_day: Optional[int]


class FridgeItemCreatedOut(BaseModel):
    item_id: int
    master_id: Optional[int]
    custom_name: Optional[str]
    quantity: Optional[float]
    unit: Optional[str]
    expiry_date: Optional[date]

    class Config:
        from_attributes = True


# --- Cooking logs ---

def _check_status(v: Optional[str]) -> str:
    if v not in COOKING_STATUSES:
        raise ValueError("status must be one of SUCCESS, REGRET, FAIL.")
    return v


def _check_companion(v: Optional[str]) -> Optional[str]:
    v = _optional_text(v)
    if v is not None and len(v) > 50:
        raise ValueError("companion must be at most 50 characters.")
    return v


class CookingLogCreate(BaseModel):
    status: str
    recipe_id: int
    lesson_note: str
    companion: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        return _check_status(v)

    @field_validator("recipe_id")
    @classmethod
    def _recipe_id(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("recipe_id must be a positive integer.")
        return v

    @field_validator("lesson_note")
    @classmethod
    def _note(cls, v: str) -> str:
        return _required_text(v, "lesson_note is required.")

    @field_validator("companion")
    @classmethod
    def _companion(cls, v: Optional[str]) -> Optional[str]:
        return _check_companion(v)


class CookingLogUpdate(BaseModel):
    status: Optional[str] = None
    lesson_note: Optional[str] = None
    companion: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _status(cls, v: Optional[str]) -> str:
        return _check_status(v)

    @field_validator("lesson_note")
    @classmethod
    def _note(cls, v: Optional[str]) -> str:
        return _required_text(v, "lesson_note must not be empty.")

    @field_validator("companion")
    @classmethod
    def _companion(cls, v: Optional[str]) -> Optional[str]:
        return _check_companion(v)


class CookingLogOut(BaseModel):
    log_id: int
    recipe_id: int
    status: str
    lesson_note: Optional[str]
    companion: Optional[str]
    cooked_at: datetime

    class Config:
        from_attributes = True


class CookingLogListItemOut(CookingLogOut):
    recipe_title: Optional[str] = None


class RecipeLogOut(BaseModel):
    log_id: int
    status: str
    lesson_note: Optional[str]
    companion: Optional[str]
    cooked_at: datetime

    class Config:
        from_attributes = True


# --- Dashboard ---

class ExpiringItemOut(BaseModel):
    item_id: int
    name: str
    icon_url: Optional[str]
    expiry_date: Optional[date]
    d_day: Optional[int]


class LatestLessonOut(BaseModel):
    log_id: int
    recipe_title: Optional[str]
    lesson_note: Optional[str]
    cooked_at: datetime


class DashboardOut(BaseModel):
    monthly_cooking_count: int
    prev_month_cooking_count: int
    monthly_success_rate: Optional[int]
    expiring_items: list[ExpiringItemOut]
    latest_lesson: Optional[LatestLessonOut]
