"""SQLAlchemy models for wallit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    Index,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session


def _utc_now() -> datetime:
    return datetime.now(UTC)


Base = declarative_base()


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    bank_name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    last_four_digits = Column(String, nullable=False)
    currency = Column(String, nullable=False, default="CLP")
    initial_balance = Column(Integer, nullable=False, default=0)
    color = Column(String, nullable=True)
    emoji = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    # Relationships
    movements = relationship("Movement", back_populates="account", passive_deletes=True)


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    emoji = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    # Relationships
    movements = relationship("Movement", back_populates="category", passive_deletes=True)


class Movement(Base):
    """Movement model: one income or expense row."""

    __tablename__ = "movements"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    account_id = Column(String, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=True)
    amount = Column(Integer, nullable=False)
    amount_usd = Column(Integer, nullable=True)
    exchange_rate = Column(Integer, nullable=True)
    currency = Column(String, nullable=False, default="CLP")
    type = Column(String, nullable=False)
    needs_review = Column(Boolean, nullable=False, default=False)
    receivable = Column(Boolean, nullable=False, default=False)
    received = Column(Boolean, nullable=False, default=False)
    receivable_id = Column(String, ForeignKey("movements.id", ondelete="SET NULL"), nullable=True)
    transfer_id = Column(String, nullable=True, index=True)
    transfer_pair_id = Column(String, nullable=True)
    original_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    __table_args__ = (
        Index("idx_movements_user_date", "user_id", "date"),
        Index("idx_movements_account", "account_id"),
        Index("idx_movements_category", "category_id"),
        Index("idx_movements_receivable", "receivable_id"),
    )

    # Relationships
    account = relationship("Account", back_populates="movements")
    category = relationship("Category", back_populates="movements")


class ExchangeRate(Base):
    """Cached exchange rate. Rows are append-only."""

    __tablename__ = "exchange_rates"

    id = Column(String, primary_key=True)
    from_currency = Column(String, nullable=False)
    to_currency = Column(String, nullable=False)
    rate = Column(Integer, nullable=False)
    source = Column(String, nullable=False)
    fetched_at = Column(DateTime, default=_utc_now, nullable=False)

    __table_args__ = (
        Index("idx_exchange_rates_pair", "from_currency", "to_currency", "fetched_at"),
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, echo=False, isolation_level="SERIALIZABLE")
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
