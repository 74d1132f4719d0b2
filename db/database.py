from sqlmodel import SQLModel, create_engine

# tables must be registered on SQLModel.metadata before create_all
from db import models  # noqa: F401

SQLITE_DATABASE_NAME = "medetech.db"
SQLITE_DATABASE_URL = f"sqlite:///{SQLITE_DATABASE_NAME}"


def make_engine(database_url: str | None = None, **kwargs):
    database_url = database_url or SQLITE_DATABASE_URL
    connect_args = kwargs.pop("connect_args", {})
    if database_url.startswith("sqlite"):
        # stores run their queries on the threadpool
        connect_args.setdefault("check_same_thread", False)
    return create_engine(database_url, connect_args=connect_args, **kwargs)


# Function to create tables
def init_db(engine):
    SQLModel.metadata.create_all(bind=engine)
