"""
Database initialization script
Creates all tables; pass --seed to add a demo owner, business and catalog
"""
from datetime import date
import argparse
import logging

from passlib.context import CryptContext

from app.database import engine, Base, SessionLocal
from app.models import User, Business, Employee, Customer
from app.services.catalog_service import load_default_catalog, select_default_categories
from app.services.shift_service import default_permissions

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], default="argon2", deprecated="auto")


def init_db():
    """Initialize database with all tables"""
    try:
        logger.info("Creating all database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("✓ Database tables created successfully!")
        logger.info("You can now start the FastAPI server.")
    except Exception as e:
        logger.error(f"✗ Error initializing database: {str(e)}")
        raise


def seed_demo_data():
    """Owner demo@example.com / demo-password with one business, the default catalog, an admin and a customer"""
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == "demo@example.com").first():
            logger.info("Demo data already present, skipping")
            return

        owner = User(
            email="demo@example.com",
            username="demo",
            hashed_password=pwd_context.hash("demo-password"),
            full_name="Demo Owner",
        )
        db.add(owner)
        db.flush()

        business = Business(name="Sparkle Dry Cleaners", phone_number="5551234567", user_id=owner.id)
        db.add(business)
        db.flush()

        load_default_catalog(db, business.id, select_default_categories())

        db.add(Employee(
            first_name="Alex",
            last_name="Admin",
            phone_number="5559876543",
            role="ADMIN",
            hire_date=date.today(),
            pin_code="1234",
            permissions=default_permissions("ADMIN"),
            business_id=business.id,
        ))
        db.add(Customer(
            first_name="Jamie",
            last_name="Walker",
            phone_number="5552223333",
            join_date=date.today(),
            business_id=business.id,
            user_id=owner.id,
        ))
        db.commit()
        logger.info(f"✓ Demo business created (ID: {business.id})")
    except Exception as e:
        db.rollback()
        logger.error(f"✗ Error seeding demo data: {str(e)}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create database tables")
    parser.add_argument("--seed", action="store_true", help="Add demo data after creating tables")
    args = parser.parse_args()

    init_db()
    if args.seed:
        seed_demo_data()
