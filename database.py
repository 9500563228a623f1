import os
from sqlalchemy import create_engine, Column, Integer, BigInteger, String, Float, Date
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database Setup
# Default to local SQLite, any SQLAlchemy URL works (e.g. Postgres)
DB_URL = os.getenv("DATABASE_URL", "sqlite:///finance_tracker.db")

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(url: str):
    if url in IN_MEMORY_URLS:
        # One shared connection, otherwise every session sees an empty database
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url, connect_args={"check_same_thread": False} if "sqlite" in url else {})


def build_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = build_engine(DB_URL)
SessionLocal = build_session_factory(engine)
Base = declarative_base()

# --- Models ---

class TransactionRecord(Base):
    __tablename__ = "transactions"

    # Surrogate key doubles as insertion order
    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    kind = Column(String, nullable=False)  # 'EXPENSE' or 'INCOME'
    date = Column(Date, nullable=False)
    created_at = Column(BigInteger, default=0)  # epoch milliseconds

class Setting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String)

# --- Init DB ---
def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
