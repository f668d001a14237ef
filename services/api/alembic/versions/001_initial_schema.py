"""Initial schema: users, settings, recipes, ingredients, steps, cooking logs, fridge, ingredient catalog

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("social_provider", sa.String(20), nullable=False),
        sa.Column("social_id", sa.String(191), unique=True, nullable=False),
        sa.Column("nickname", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("terms_agreements", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("terms_agreed_at", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # User settings (1:1)
    op.create_table(
        "user_settings",
        sa.Column("settings_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("alert_timer", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("alert_expiry", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("auto_export_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("external_link", sa.String(500), nullable=True),
    )

    # Recipes table
    op.create_table(
        "recipes",
        sa.Column("recipe_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("servings", sa.Integer, nullable=False, server_default="1"),
        sa.Column("difficulty", sa.String(10), nullable=True),
        sa.Column("source_url", sa.String(1000), nullable=True),
        sa.Column("thumbnail_url", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_recipes_user_id", "recipes", ["user_id"])

    # Recipe ingredients
    op.create_table(
        "recipe_ingredients",
        sa.Column("ri_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("unit", sa.String(30), nullable=True),
    )
    op.create_index("ix_recipe_ingredients_recipe_id", "recipe_ingredients", ["recipe_id"])

    # Recipe steps
    op.create_table(
        "recipe_steps",
        sa.Column("step_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False),
        sa.Column("step_order", sa.Integer, nullable=False),
        sa.Column("instruction", sa.Text, nullable=False),
        sa.Column("timer_seconds", sa.Integer, nullable=False, server_default="0"),
        sa.Column("step_image_url", sa.String(1000), nullable=True),
    )
    op.create_index("ix_recipe_steps_recipe_id", "recipe_steps", ["recipe_id"])

    # Cooking logs
    op.create_table(
        "cooking_logs",
        sa.Column("log_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.recipe_id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("lesson_note", sa.Text, nullable=True),
        sa.Column("companion", sa.String(50), nullable=True),
        sa.Column("cooked_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_cooking_logs_user_cooked_at", "cooking_logs", ["user_id", "cooked_at"])
    op.create_index("ix_cooking_logs_recipe_id", "cooking_logs", ["recipe_id"])

    # Ingredient catalog
    op.create_table(
        "ingredients_master",
        sa.Column("master_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("icon_url", sa.String(500), nullable=True),
        sa.Column("default_unit", sa.String(30), nullable=True),
        sa.Column("base_shelf_life", sa.Integer, nullable=True),
    )

    # Fridge items
    op.create_table(
        "fridge_items",
        sa.Column("item_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("master_id", sa.Integer, sa.ForeignKey("ingredients_master.master_id", ondelete="SET NULL"), nullable=True),
        sa.Column("custom_name", sa.String(100), nullable=True),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=True, server_default="1"),
        sa.Column("unit", sa.String(30), nullable=True),
        sa.Column("expiry_date", sa.Date, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_fridge_items_user_expiry", "fridge_items", ["user_id", "expiry_date"])


def downgrade() -> None:
    op.drop_table("fridge_items")
    op.drop_table("ingredients_master")
    op.drop_table("cooking_logs")
    op.drop_table("recipe_steps")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("user_settings")
    op.drop_table("users")
