import sys
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# Add api path to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../"))

from app.models import IngredientMaster
from app.settings import settings

# (name, category, default_unit, base_shelf_life days)
INGREDIENTS = [
    ("대파", "채소", "대", 7),
    ("양파", "채소", "개", 30),
    ("마늘", "채소", "쪽", 30),
    ("감자", "채소", "개", 30),
    ("당근", "채소", "개", 21),
    ("애호박", "채소", "개", 7),
    ("두부", "가공식품", "모", 5),
    ("계란", "유제품/달걀", "개", 21),
    ("우유", "유제품/달걀", "ml", 7),
    ("돼지고기", "육류", "g", 3),
    ("소고기", "육류", "g", 3),
    ("닭가슴살", "육류", "g", 2),
    ("김치", "가공식품", "g", 60),
    ("고추장", "양념", "큰술", 365),
    ("간장", "양념", "큰술", 365),
]


def seed_ingredient_master(session: Session) -> int:
    """Insert missing catalog rows. Existing names are left untouched. Returns rows added."""
    existing = {name for (name,) in session.query(IngredientMaster.name).all()}
    added = 0
    for name, category, unit, shelf_life in INGREDIENTS:
        if name in existing:
            continue
        session.add(IngredientMaster(
            name=name,
            category=category,
            default_unit=unit,
            base_shelf_life=shelf_life,
        ))
        added += 1
    session.commit()
    return added


def main():
    print(f"Connecting to {settings.database_url}...")
    engine = create_engine(settings.database_url)
    session = sessionmaker(bind=engine)()

    try:
        added = seed_ingredient_master(session)
        print(f"Seed complete. Added {added} ingredients.")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
