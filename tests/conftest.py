import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from school_directory.core.config import Settings
from school_directory.core.database import Base, build_engine
from school_directory.models.school import School
from school_directory.utils import deps as deps_utils
from tests.helpers.fakes import FakeImageStorage
import main

test_db_url = os.getenv("TEST_DATABASE_URL") or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def app_settings():
    return Settings(
        DATABASE_URL=test_db_url,
        S3_BUCKET_NAME="test-bucket",
        AWS_REGION="ap-south-1",
        LOG_DIR=None,
    )

@pytest.fixture(scope="session")
def database_engine(app_settings):
    engine = build_engine(app_settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    db.query(School).delete()
    db.commit()
    try:
        yield db
    finally:
        db.rollback()
        db.query(School).delete()
        db.commit()
        db.close()

@pytest.fixture(scope="function")
def image_storage():
    return FakeImageStorage()

@pytest.fixture(scope="function")
def client(db_session, app_settings, image_storage):
    app = main.create_app(app_settings, image_storage=image_storage)
    app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client

@pytest.fixture
def school_form():
    return {
        "name": "St. Xavier's High School",
        "address": "5 Mahapalika Marg, Fort, Mumbai",
        "city": "Mumbai",
        "state": "Maharashtra",
        "contact": "9876543210",
        "email": "office@stxaviers.edu.in",
    }
