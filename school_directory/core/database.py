from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from school_directory.core.config import Settings

Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    elif settings.DATABASE_SSL_CA:
        connect_args["sslmode"] = "verify-full"
        connect_args["sslrootcert"] = settings.DATABASE_SSL_CA
    return create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
