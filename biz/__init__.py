"""biz - Redis and MySQL connectivity service."""

__version__ = "0.1.0"
