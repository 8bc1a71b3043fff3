"""Connectivity-test record model.

One row is written per /test-mysql call. The table has no relationships
and is created on first use.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from biz.stores.database import Base


class TestRecord(Base):
    """Row written by the MySQL round-trip test."""

    __tablename__ = "test_records"
    __test__ = False  # not a pytest class

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    message: Mapped[str] = mapped_column(String(255))
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<TestRecord {self.id}>"
