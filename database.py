# database.py
import logging
import os
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
from pathlib import Path
from paths import data_file

logger = logging.getLogger(__name__)

# Load environment variables from .env
load_dotenv()

# Database URL from .env, falling back to a SQLite file under Data/
database_url = os.getenv('DATABASE_URL', f"sqlite:///{data_file('dealership.db')}")
environment = os.getenv('ENVIRONMENT', 'development')


def create_db_engine(url: str = database_url):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # Sessions are shared across request threads
    return create_engine(url, connect_args=connect_args)


engine = create_db_engine()
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def init_db(bind=engine):
    from Models import Base
    if bind.url.get_backend_name() == "sqlite" and bind.url.database:
        Path(bind.url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database initialized at: {bind.url.render_as_string(hide_password=True)} ({environment})")


def build_inventory_store(session_factory: sessionmaker = SessionLocal):
    from Models import Car
    from Services.blob_store import BlobStore
    from Services.collection import DocumentCollection
    from Services.inventory_store import InventoryStore
    return InventoryStore(
        cars=DocumentCollection(session_factory, Car),
        images=BlobStore(session_factory)
    )


# Dependency for FastAPI
def get_inventory(request: Request):
    return request.app.state.inventory
