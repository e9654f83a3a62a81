from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from src.utils.config_fgc import ConfigFGC

Base = declarative_base()


def criar_engine(url: str = ConfigFGC.DATABASE_URL):
    """Cria o engine do banco. SQLite precisa aceitar conexões de várias threads."""
    if url.startswith('sqlite'):
        return create_engine(url, connect_args={'check_same_thread': False, 'timeout': 30})
    return create_engine(url, pool_pre_ping=True)


engine = criar_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=True, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
