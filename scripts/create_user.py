#!/usr/bin/env python3
"""Script to create chat users in the database."""

import sys
from pathlib import Path

# Add parent directory to path so we can import chatapp modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatapp.core.database import SessionLocal
from chatapp.core.security import get_password_hash
from chatapp.models.user import User


def create_user(full_name: str, email: str, password: str) -> User:
    """Create a new user in the database."""
    db = SessionLocal()
    try:
        email = email.lower()
        if db.query(User).filter(User.email == email).first():
            print(f"❌ User with email '{email}' already exists!")
            sys.exit(1)

        if len(password) < 6:
            print("❌ Password must be at least 6 characters")
            sys.exit(1)

        user = User(
            full_name=full_name,
            email=email,
            password_hash=get_password_hash(password),
            created_by="script",
        )

        db.add(user)
        db.commit()
        db.refresh(user)

        print("✅ User created successfully!")
        print(f"   Id: {user.id}")
        print(f"   Name: {user.full_name}")
        print(f"   Email: {user.email}")

        return user
    except Exception as e:
        db.rollback()
        print(f"❌ Error creating user: {e}")
        sys.exit(1)
    finally:
        db.close()


def main():
    """Main entry point for the script."""
    if len(sys.argv) < 4:
        print('Usage: python create_user.py "<full name>" <email> <password>')
        print("\nExample:")
        print('  python create_user.py "Ada Lovelace" ada@example.com secret123')
        sys.exit(1)

    create_user(full_name=sys.argv[1], email=sys.argv[2], password=sys.argv[3])


if __name__ == "__main__":
    main()
