# salonhub/db.py

from sqlmodel import SQLModel, create_engine, Session

from .config import DATABASE_URL


def make_engine(url: str = DATABASE_URL):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(url, echo=False, connect_args=connect_args)


# Engine = connection to the database
engine = make_engine()


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
