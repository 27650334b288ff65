"""
Policy model for admxgen.

This package provides the pre-parsed policy definition model:
- Pydantic models for policies and their element items
- Registry payload primitives and the delete-sentinel
- File-backed PolicyModel implementations
"""

from .models import (
    DELETE, BooleanElementItem, Char, DecimalElementItem, DeleteValue,
    EnumerationElementItem, EnumerationItem, ListElementItem,
    LongDecimalElementItem, MultiTextElementItem, Policy, PolicyClass,
    PolicyDocument, Single, TextElementItem, UInt32, UInt64,
)
from .source import PolicyContent, PolicyDirectory, PolicyModel, open_policy_model

__all__ = [
    "DELETE", "BooleanElementItem", "Char", "DecimalElementItem", "DeleteValue",
    "EnumerationElementItem", "EnumerationItem", "ListElementItem",
    "LongDecimalElementItem", "MultiTextElementItem", "Policy", "PolicyClass",
    "PolicyDocument", "Single", "TextElementItem", "UInt32", "UInt64",
    "PolicyContent", "PolicyDirectory", "PolicyModel", "open_policy_model",
]
