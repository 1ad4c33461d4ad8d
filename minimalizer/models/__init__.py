"""
Model helpers for SQLAlchemy declarative models
"""
from minimalizer.models.base import ModelName, ResourceCollection, ResourceMixin  # noqa: F401
from minimalizer.models.errors import DEFAULT_MESSAGES, Errors  # noqa: F401
