#!/usr/bin/env python3
"""
Script to create (or reset) the admin account
Run this inside the container: docker-compose exec backend python create_admin.py [email] [password]
"""
import sys
import os

# Add the app directory to the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.core.database import SessionLocal
from app.core.security import hash_password, password_change_timestamp
from app.models.user import User


def create_admin(email: str = "admin@restaurant.com", password: str = "admin123"):
    email = email.strip().lower()
    db = SessionLocal()
    try:
        existing_user = db.query(User).filter(User.email == email).first()

        if existing_user:
            existing_user.role = "admin"
            existing_user.active = True
            existing_user.hashed_password = hash_password(password)
            existing_user.password_changed_at = password_change_timestamp()
            db.commit()
            print(f"\n✓ User '{email}' updated to admin role")
        else:
            admin = User(
                name="Admin",
                email=email,
                hashed_password=hash_password(password),
                role="admin",
            )
            db.add(admin)
            db.commit()
            print(f"\n✓ Admin user created successfully!")

        print(f"\n{'='*50}")
        print("CREDENTIALS:")
        print(f"{'='*50}")
        print(f"Email: {email}")
        print(f"Password: {password}")
        print(f"{'='*50}")

    except Exception as e:
        db.rollback()
        print(f"\n✗ Error creating admin user: {e}")
        raise
    finally:
        db.close()


if __name__ == '__main__':
    create_admin(*sys.argv[1:3])
