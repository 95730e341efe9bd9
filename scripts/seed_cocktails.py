#!/usr/bin/env python3
"""
Cocktail Seed Script

Loads a list of cocktails into the database.

USAGE:
    python scripts/seed_cocktails.py
    python scripts/seed_cocktails.py --file data/cocktails.json
    python scripts/seed_cocktails.py --reset

Cocktails are matched by name: a name that already exists is left as it
is (never overwritten). --reset deletes every cocktail, and their ratings,
before seeding. The JSON file must hold an array of objects with name,
instructions, ingredients and alcoholic.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from cocktail_api.database import SessionLocal, create_tables
from cocktail_api.exceptions import ConflictError
from cocktail_api.models import Cocktail, CocktailRating
from cocktail_api.services import catalog

SAMPLE_COCKTAILS = [
    {
        "name": "Mojito",
        "instructions": "Muddle mint leaves with sugar and lime juice. Add rum, fill with ice and top with soda water.",
        "ingredients": ["white rum", "lime", "mint", "sugar", "soda water"],
        "alcoholic": True,
    },
    {
        "name": "Negroni",
        "instructions": "Stir gin, Campari and sweet vermouth with ice. Strain over a large cube and garnish with orange peel.",
        "ingredients": ["gin", "campari", "sweet vermouth", "orange peel"],
        "alcoholic": True,
    },
    {
        "name": "Margarita",
        "instructions": "Shake tequila, triple sec and lime juice with ice. Strain into a salt-rimmed glass.",
        "ingredients": ["tequila", "triple sec", "lime", "salt"],
        "alcoholic": True,
    },
    {
        "name": "Old Fashioned",
        "instructions": "Stir sugar, bitters and a splash of water until dissolved. Add whiskey and ice, garnish with orange peel.",
        "ingredients": ["bourbon", "sugar", "angostura bitters", "orange peel"],
        "alcoholic": True,
    },
    {
        "name": "Virgin Colada",
        "instructions": "Blend pineapple juice and coconut cream with crushed ice until smooth.",
        "ingredients": ["pineapple juice", "coconut cream", "ice"],
        "alcoholic": False,
    },
    {
        "name": "Shirley Temple",
        "instructions": "Fill a glass with ice, pour ginger ale and a splash of grenadine. Garnish with a cherry.",
        "ingredients": ["ginger ale", "grenadine", "maraschino cherry"],
        "alcoholic": False,
    },
]


def load_cocktails(path: Path | None) -> list[dict]:
    if path is None:
        return SAMPLE_COCKTAILS

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    return data


def clear_cocktails(db: Session) -> None:
    print("Deleting all cocktails and their ratings...")
    db.execute(delete(CocktailRating))
    db.execute(delete(Cocktail))
    db.commit()


def seed_cocktails(db: Session, cocktails: list[dict]) -> int:
    """Insert cocktails whose name is not taken yet. Returns how many were inserted."""
    inserted = 0
    for data in cocktails:
        try:
            catalog.create_cocktail(
                db,
                name=data.get("name"),
                instructions=data.get("instructions"),
                alcoholic=bool(data.get("alcoholic", False)),
                ingredients=data.get("ingredients") or [],
            )
        except ConflictError:
            print(f"  - {data.get('name')}: already exists, skipped")
            continue
        inserted += 1
        print(f"  + {data.get('name')}")
    return inserted


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the cocktail catalog")
    parser.add_argument("--file", type=Path, help="JSON file with an array of cocktails")
    parser.add_argument("--reset", action="store_true", help="Delete all cocktails first")
    args = parser.parse_args()

    cocktails = load_cocktails(args.file)

    print("=" * 60)
    print("Starting cocktail seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if args.reset:
            clear_cocktails(db)

        inserted = seed_cocktails(db, cocktails)

        print("=" * 60)
        print(f"Seeding done. Inserted: {inserted}, attempted: {len(cocktails)}")
        print("=" * 60)
    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
