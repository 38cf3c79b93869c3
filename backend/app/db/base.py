"""
Declarative base shared by all ORM models and Alembic.
"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
