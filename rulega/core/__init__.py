"""Core data model: rules and labeled examples."""

from .dataset import DataItem, DataSet  # noqa: F401
from .rule import PLACEHOLDER, Rule  # noqa: F401

__all__ = [
    'Rule',
    'PLACEHOLDER',
    'DataItem',
    'DataSet',
]
