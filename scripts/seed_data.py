#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalog with sample authors, books and a demo user.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py            # clear and seed
    python scripts/seed_data.py --keep     # seed on top of existing data

This script:
1. Connects to the database using app settings
2. Clears existing data (unless --keep)
3. Adds books through the catalog service, so authors are created
   the same way the addBook mutation creates them
4. Sets birth years and creates a demo user
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from library_api.config import get_settings
from library_api.database import SessionLocal, create_tables
from library_api.models import Author, Book, User
from library_api.schemas import BookCreate, UserCreate
from library_api.services import catalog

BIRTH_YEARS = {
    "Robert Martin": 1952,
    "Martin Fowler": 1963,
    "Fyodor Dostoevsky": 1821,
}

BOOKS = [
    {
        "title": "Clean Code",
        "published": 2008,
        "author": "Robert Martin",
        "genres": ["refactoring"],
    },
    {
        "title": "Agile software development",
        "published": 2002,
        "author": "Robert Martin",
        "genres": ["agile", "patterns", "design"],
    },
    {
        "title": "Refactoring, edition 2",
        "published": 2018,
        "author": "Martin Fowler",
        "genres": ["refactoring"],
    },
    {
        "title": "Refactoring to patterns",
        "published": 2008,
        "author": "Joshua Kerievsky",
        "genres": ["refactoring", "patterns"],
    },
    {
        "title": "Practical Object-Oriented Design, An Agile Primer Using Ruby",
        "published": 2012,
        "author": "Sandi Metz",
        "genres": ["refactoring", "design"],
    },
    {
        "title": "Crime and punishment",
        "published": 1866,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "crime"],
    },
    {
        "title": "The Demon",
        "published": 1872,
        "author": "Fyodor Dostoevsky",
        "genres": ["classic", "revolution"],
    },
]


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_books(db: Session) -> int:
    """Add the sample books, creating their authors on the way."""
    print("Creating books...")
    for data in BOOKS:
        catalog.add_book(db, BookCreate(**data))

    for name, born in BIRTH_YEARS.items():
        catalog.set_author_born(db, name, born)

    print(f"Created {len(BOOKS)} books.")
    return len(BOOKS)


def create_demo_user(db: Session) -> User:
    """Create a demo user that logs in with the default password."""
    user = catalog.get_user_by_username(db, "demo")
    if user is None:
        user = catalog.create_user(
            db,
            UserCreate(username="demo", favorite_genre="refactoring"),
            get_settings().default_user_password,
        )
    print(f"Demo user: {user.username}")
    return user


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        books = create_books(db)
        create_demo_user(db)

        settings = get_settings()
        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {catalog.count_authors(db)}")
        print(f"  - Books added: {books}")
        print(f"\nGraphQL endpoint at http://localhost:{settings.port}/graphql")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the catalog database")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing data instead of clearing it first",
    )
    args = parser.parse_args()
    seed_database(clear_existing=not args.keep)


if __name__ == "__main__":
    main()
