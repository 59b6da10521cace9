"""
Script to recreate database with the current schema
"""
from app.core.database import SessionLocal, engine
from app.models import Base
from app.services.seed import DEMO_PASSWORD, DEMO_USERS, seed_demo


def recreate_db():
    print("Recreating database...")

    # Drop all tables
    print("Dropping existing tables...")
    Base.metadata.drop_all(bind=engine)

    # Create all tables with new schema
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)

    # Seed demo data
    print("Seeding demo data...")
    db = SessionLocal()
    try:
        seed_demo(db)
    except Exception as e:
        print(f"Error seeding data: {e}")
        db.rollback()
    finally:
        db.close()

    print("Database recreated successfully!")
    print("\nLogin credentials:")
    for _, email, role in DEMO_USERS:
        print(f"   {role:<9} {email} / {DEMO_PASSWORD}")


if __name__ == "__main__":
    recreate_db()
