# src/ADMS/db/__init__.py
# Don't import session on package import; models and migrations only need Base
from .base import Base  # noqa: F401
