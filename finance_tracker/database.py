from loguru import logger
from sqlalchemy import create_engine, func, Column, Integer, String, Numeric, DateTime, Date
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime, timezone
import os
from dotenv import load_dotenv

load_dotenv()

Base = declarative_base()

_engine = None
_Session = None


def _utcnow():
    return datetime.now(timezone.utc)


class Transaction(Base):
    __tablename__ = 'transactions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(String(255), nullable=False, default='', server_default='')
    category = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow)


def get_engine():
    """Return the process-wide engine, creating it from DATABASE_URL on first use."""
    global _engine
    if _engine is None:
        database_url = os.getenv('DATABASE_URL', 'sqlite:///transactions.db')
        connect_args = {'check_same_thread': False} if database_url.startswith('sqlite') else {}
        _engine = create_engine(database_url, connect_args=connect_args)
        logger.debug(f"Created database engine for {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def reset_engine():
    """Dispose of the cached engine so the next call re-reads DATABASE_URL."""
    global _engine, _Session
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _Session = None


def init_db():
    """Initialize the database and create tables."""
    engine = get_engine()
    Base.metadata.create_all(engine)
    return engine


def get_session():
    """Create a new database session."""
    global _Session
    if _Session is None:
        _Session = sessionmaker(bind=get_engine(), autoflush=False)
    return _Session()


def get_db():
    """Request-scoped session for FastAPI dependencies."""
    session = get_session()
    try:
        yield session
    finally:
        session.close()


def add_transaction(session, **kwargs):
    """Add a new transaction to the database and return it with generated fields loaded."""
    transaction = Transaction(**kwargs)
    session.add(transaction)
    try:
        session.commit()
    except Exception:
        session.rollback()
        raise
    session.refresh(transaction)
    return transaction


def list_transactions(session, start_date=None, end_date=None):
    """Get transactions within optional inclusive date bounds, newest first."""
    query = session.query(Transaction)
    if start_date is not None:
        query = query.filter(Transaction.date >= start_date)
    if end_date is not None:
        query = query.filter(Transaction.date <= end_date)
    return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def get_balances(session):
    """Sum amounts per category over all transactions."""
    rows = session.query(
        Transaction.category,
        func.sum(Transaction.amount).label('total')
    ).group_by(Transaction.category).all()
    return {category: _to_float(total) for category, total in rows}
