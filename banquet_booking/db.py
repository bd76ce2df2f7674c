import os
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from banquet_booking.config import settings


SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL
connect_args = (
    {"check_same_thread": False}
    if SQLALCHEMY_DATABASE_URL.startswith("sqlite")
    else {}
)
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_database():
    if SQLALCHEMY_DATABASE_URL.startswith("sqlite:///./"):
        data_dir = os.path.dirname(SQLALCHEMY_DATABASE_URL[len("sqlite:///"):])
        if data_dir and not os.path.exists(data_dir):
            os.makedirs(data_dir)
    # Tables are registered on Base by importing the models
    from banquet_booking.models import booking, hall, notification, user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
