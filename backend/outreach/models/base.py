# outreach/models/base.py
from sqlalchemy.orm import declarative_base

# Base class for the ORM models
Base = declarative_base()
