"""SQLAlchemy ORM models for Cooklog.

Tables:
- users / user_settings: social-login identities and their preferences
- recipes: recipe header owned by a user
- recipe_ingredients / recipe_steps: nested recipe content
- cooking_logs: cooking diary entries (SUCCESS / REGRET / FAIL)
- fridge_items: personal ingredient inventory with expiry dates
- ingredients_master: shared ingredient catalog (autocomplete + shelf life)
"""

from __future__ import annotations

from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Date,
    Text,
    Integer,
    Boolean,
    Numeric,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .db import Base


SOCIAL_PROVIDERS = ("google", "kakao", "naver")
DIFFICULTY_LEVELS = ("Easy", "Medium", "Hard")
COOKING_STATUSES = ("SUCCESS", "REGRET", "FAIL")


class User(Base):
    """Social-login identity.

    Created on first sign-in with terms_agreements=False ("incomplete");
    POST /api/auth/signup completes the profile.
    """
    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    social_provider: Mapped[str] = mapped_column(String(20), nullable=False)
    social_id: Mapped[str] = mapped_column(String(191), unique=True, nullable=False)
    nickname: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    terms_agreements: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    terms_agreed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships (withdrawal cascades to everything the user owns)
    settings: Mapped[Optional["UserSettings"]] = relationship(
        "UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    recipes: Mapped[list["Recipe"]] = relationship(
        "Recipe", back_populates="user", cascade="all, delete-orphan"
    )
    cooking_logs: Mapped[list["CookingLog"]] = relationship(
        "CookingLog", back_populates="user", cascade="all, delete-orphan"
    )
    fridge_items: Mapped[list["FridgeItem"]] = relationship(
        "FridgeItem", back_populates="user", cascade="all, delete-orphan"
    )


class UserSettings(Base):
    __tablename__ = "user_settings"

    settings_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False
    )
    alert_timer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    alert_expiry: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    auto_export_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    external_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="settings")


class Recipe(Base):
    """Recipe header. Ingredients and steps are created in the same transaction."""
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_user_id", "user_id"),
    )

    recipe_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    servings: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    difficulty: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    source_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="recipes")
    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeIngredient.ri_id"
    )
    steps: Mapped[list["RecipeStep"]] = relationship(
        "RecipeStep", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeStep.step_order"
    )
    cooking_logs: Mapped[list["CookingLog"]] = relationship(
        "CookingLog", back_populates="recipe", cascade="all, delete-orphan"
    )


class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        Index("ix_recipe_ingredients_recipe_id", "recipe_id"),
    )

    ri_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")


class RecipeStep(Base):
    """Ordered cooking step. timer_seconds == 0 means no timer."""
    __tablename__ = "recipe_steps"
    __table_args__ = (
        Index("ix_recipe_steps_recipe_id", "recipe_id"),
    )

    step_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False
    )
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    instruction: Mapped[str] = mapped_column(Text, nullable=False)
    timer_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    step_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="steps")


class CookingLog(Base):
    __tablename__ = "cooking_logs"
    __table_args__ = (
        Index("ix_cooking_logs_user_cooked_at", "user_id", "cooked_at"),
        Index("ix_cooking_logs_recipe_id", "recipe_id"),
    )

    log_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(10), nullable=False)  # SUCCESS | REGRET | FAIL
    lesson_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    companion: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    # Local wall-clock time; dashboard month windows are computed in local time too
    cooked_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)

    user: Mapped["User"] = relationship("User", back_populates="cooking_logs")
    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="cooking_logs")


class IngredientMaster(Base):
    """Shared ingredient catalog. Not owned by any user."""
    __tablename__ = "ingredients_master"

    master_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    icon_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    default_unit: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    base_shelf_life: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # days


class FridgeItem(Base):
    """Inventory row. Linked to a catalog entry (master_id) or free-text (custom_name)."""
    __tablename__ = "fridge_items"
    __table_args__ = (
        Index("ix_fridge_items_user_expiry", "user_id", "expiry_date"),
    )

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    master_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("ingredients_master.master_id", ondelete="SET NULL"), nullable=True
    )
    custom_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    quantity: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True, default=1)
    unit: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="fridge_items")
    master: Mapped[Optional["IngredientMaster"]] = relationship("IngredientMaster")

    @property
    def display_name(self) -> str:
        if self.master is not None:
            return self.master.name
        return self.custom_name or "Unknown ingredient"

    @property
    def icon_url(self) -> Optional[str]:
        return self.master.icon_url if self.master is not None else None
