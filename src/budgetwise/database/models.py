"""SQLAlchemy models for budgetwise database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    initial_balance = Column(Numeric(12, 2), default=0, nullable=False)
    balance_start_date = Column(Date, default=lambda: datetime.now(UTC).date(), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    color = Column(String, nullable=True)
    icon_url = Column(String, nullable=True)

    # Dependents are removed explicitly before the account (see delete_account)
    transactions = relationship("Transaction", back_populates="account")
    balance_snapshots = relationship("BalanceSnapshot", back_populates="account")


class Transaction(Base):
    """Transaction model.

    The category is stored by name; renaming a category rewrites this column.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, default="", nullable=False)
    category = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_transactions_account_date", "account_id", "date"),)

    # Relationships
    account = relationship("Account", back_populates="transactions")


class BalanceSnapshot(Base):
    """Balance snapshot model.

    One snapshot per (account, day) is enforced by the balance service, not
    by a unique constraint.
    """

    __tablename__ = "balance_snapshots"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    date = Column(Date, nullable=False)
    balance = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (Index("ix_balance_snapshots_account_date", "account_id", "date"),)

    # Relationships
    account = relationship("Account", back_populates="balance_snapshots")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
