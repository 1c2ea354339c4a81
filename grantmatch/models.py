"""
SQLAlchemy ORM models.

Tables
------
users      -- callers identified by their external auth subject id
companies  -- one company profile per user; description drives matching
grants     -- funding opportunities (seed data, CSV import, BDNS ingestion)
matches    -- scored company <-> grant pairs, unique per pair
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class User(Base):
    __tablename__ = "users"

    id = Column(String(128), primary_key=True)  # auth subject id
    email = Column(String(320), nullable=True)  # unverified, from request headers
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    companies = relationship("Company", back_populates="user")


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    cnae = Column(Text, nullable=True)  # activity code
    location = Column(Text, nullable=True)
    size = Column(String(16), nullable=True)  # micro | small | medium | large
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=func.now())

    user = relationship("User", back_populates="companies")
    matches = relationship("Match", back_populates="company")


# ---------------------------------------------------------------------------
# Grants
# ---------------------------------------------------------------------------

class Grant(Base):
    __tablename__ = "grants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bdns_id = Column(String(64), nullable=True, unique=True)
    title = Column(Text, nullable=False)
    organismo = Column(Text, nullable=False)  # issuing body
    scope = Column(String(32), nullable=False, index=True)  # Nacional | Autonomico | Local | Europeo
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    budget = Column(Float, nullable=True)
    raw_text = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)  # ["Digitalizacion", "PYMES", ...]
    created_at = Column(DateTime, default=func.now())

    matches = relationship("Match", back_populates="grant")


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------

class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    grant_id = Column(Integer, ForeignKey("grants.id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)  # 0-100
    status = Column(String(16), nullable=False, default="new")
    ai_analysis = Column(JSON, nullable=True)  # {summary, expenses, requirements}
    created_at = Column(DateTime, default=func.now())

    company = relationship("Company", back_populates="matches")
    grant = relationship("Grant", back_populates="matches")

    __table_args__ = (
        UniqueConstraint("company_id", "grant_id", name="uq_matches_company_grant"),
    )
