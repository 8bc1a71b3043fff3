"""SQLAlchemy ORM models.

Models represent database tables:
- test_records: rows written by the MySQL connectivity test
"""

from biz.models.record import TestRecord

__all__ = ["TestRecord"]
