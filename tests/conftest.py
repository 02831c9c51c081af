"""
Pytest fixtures shared by the service and API tests.

Every test gets a fresh in-memory SQLite database, a fake GCS bucket and
bearer tokens minted directly (no password hashing on the hot path).
"""
import os

# Must be set before anything under app/ is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TAX_RATE"] = "0.08"
os.environ.pop("SMTP_USER", None)
os.environ.pop("SMTP_PASSWORD", None)
os.environ.pop("GCS_CREDENTIALS_PATH", None)
os.environ.pop("GCS_BUCKET_NAME", None)

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.models import User, Business, Category, Item, Customer, Employee
from app.core.security import create_access_token
from app.services.shift_service import default_permissions
from app.services.storage_service import StorageService, get_storage_service
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name
        self.metadata = None

    def upload_from_string(self, data, content_type=None):
        self.bucket.objects[self.name] = {
            "data": data,
            "content_type": content_type,
            "metadata": self.metadata,
        }

    def generate_signed_url(self, version=None, expiration=None, method="GET"):
        return f"https://storage.example.com/{self.bucket.name}/{self.name}?expires={int(expiration.total_seconds())}"

    def exists(self):
        return self.name in self.bucket.objects

    def delete(self):
        del self.bucket.objects[self.name]


class FakeBucket:
    """Just enough of google.cloud.storage.Bucket for StorageService"""

    def __init__(self, name="test-bucket"):
        self.name = name
        self.objects = {}

    def blob(self, name):
        return FakeBlob(self, name)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_bucket():
    return FakeBucket()


@pytest.fixture
def storage(fake_bucket):
    return StorageService(bucket=fake_bucket)


@pytest.fixture
def client(db_session, storage):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db, email, username):
    user = User(email=email, username=username, hashed_password="unused", full_name=username.title())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _headers_for(user):
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner(db_session):
    return _make_user(db_session, "owner@example.com", "owner")


@pytest.fixture
def auth_headers(owner):
    return _headers_for(owner)


@pytest.fixture
def other_headers(db_session):
    """A second account that owns nothing the tests create"""
    return _headers_for(_make_user(db_session, "stranger@example.com", "stranger"))


@pytest.fixture
def business(db_session, owner):
    business = Business(name="Sparkle Dry Cleaners", phone_number="5551234567", user_id=owner.id)
    db_session.add(business)
    db_session.commit()
    db_session.refresh(business)
    return business


@pytest.fixture
def category(db_session, business):
    category = Category(name="Laundry", business_id=business.id)
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def shirt(db_session, business, category):
    item = Item(name="Shirt - Wash & Press", price=3.99, business_id=business.id, category_id=category.id)
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


@pytest.fixture
def suit(db_session, business, category):
    item = Item(name="Suit - 2 Piece", price=14.99, business_id=business.id, category_id=category.id)
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


@pytest.fixture
def customer(db_session, business, owner):
    customer = Customer(
        first_name="Jamie",
        last_name="Walker",
        phone_number="5552223333",
        email="jamie@example.com",
        join_date=date.today(),
        business_id=business.id,
        user_id=owner.id,
    )
    db_session.add(customer)
    db_session.commit()
    db_session.refresh(customer)
    return customer


@pytest.fixture
def employee(db_session, business):
    employee = Employee(
        first_name="Sam",
        last_name="Lee",
        phone_number="5559876543",
        role="STAFF",
        status="ACTIVE",
        hire_date=date.today(),
        pin_code="4321",
        permissions=default_permissions("STAFF"),
        business_id=business.id,
    )
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee
