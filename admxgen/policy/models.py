"""
Policy Model (Pydantic models for pre-parsed policy definitions).

This module defines the in-memory shape of administrative policy
definitions as they arrive from the definition parser: policies, their
typed element items, and the registry payload primitives the code
generator turns into C# literals.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import (
    AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, model_validator,
)


class PolicyClass(str, Enum):
    """Registry hive a policy applies to. Names mirror the generated C# enum."""
    Machine = "Machine"
    User = "User"
    Both = "Both"


# ===== Registry payload primitives =====

class _Unsigned(int):
    """Range-checked unsigned integer; subclasses set MAX."""
    MAX = 0

    def __new__(cls, value: Any = 0):
        obj = super().__new__(cls, value)
        if not 0 <= obj <= cls.MAX:
            raise ValueError(f"{int(obj)} is outside the {cls.__name__} range")
        return obj

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({int(self)})"


class UInt32(_Unsigned):
    """Unsigned 32-bit registry value (REG_DWORD)."""
    MAX = 0xFFFFFFFF


class UInt64(_Unsigned):
    """Unsigned 64-bit registry value (REG_QWORD)."""
    MAX = 0xFFFFFFFFFFFFFFFF


class Char(str):
    """A single UTF-16 code unit."""

    def __new__(cls, value: str):
        obj = super().__new__(cls, value)
        if len(obj) != 1:
            raise ValueError(f"Char requires exactly one character, got {len(obj)}")
        if ord(obj) > 0xFFFF:
            raise ValueError("Char must fit in a single UTF-16 code unit")
        return obj


class Single(float):
    """Single precision floating point number."""


class DeleteValue:
    """
    The delete-sentinel: "remove this registry value" rather than a payload.

    Use the module-level DELETE instance.
    """
    _instance: Optional["DeleteValue"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE"


DELETE = DeleteValue()

_PAYLOAD_TYPES = (bool, _Unsigned, Char, Single, float, Decimal, str, Enum, DeleteValue)

_VALUE_KEYS = {
    "decimal": UInt32,
    "longDecimal": UInt64,
    "long_decimal": UInt64,
    "string": str,
}


def coerce_registry_value(raw: Any) -> Any:
    """
    Convert an ADMX-shaped registry value into its payload primitive.

    Accepts ``{"decimal": n}``, ``{"longDecimal": n}``, ``{"string": s}``,
    ``{"delete": true}``, a bare int or str, or an already typed payload.
    """
    if raw is None or isinstance(raw, _PAYLOAD_TYPES):
        return raw
    if isinstance(raw, int):
        return UInt32(raw) if raw <= UInt32.MAX else UInt64(raw)
    if isinstance(raw, dict) and len(raw) == 1:
        key, value = next(iter(raw.items()))
        if key == "delete":
            if value not in (True, None, {}):
                raise ValueError("delete value does not carry a payload")
            return DELETE
        factory = _VALUE_KEYS.get(key)
        if factory is not None:
            return factory(value)
    raise ValueError(f"Unrecognized registry value: {raw!r}")


RegistryValue = Annotated[Any, BeforeValidator(coerce_registry_value)]
UInt32Field = Annotated[int, Field(ge=0, le=UInt32.MAX), AfterValidator(UInt32)]
UInt64Field = Annotated[int, Field(ge=0, le=UInt64.MAX), AfterValidator(UInt64)]


# ===== Element items =====

class ElementItemBase(BaseModel):
    """Fields shared by every element kind."""
    id: str = Field(min_length=1, description="Element identifier within its policy")
    registry_key: Optional[str] = Field(default=None, description="Overrides the policy registry key")
    value_name: Optional[str] = Field(default=None, description="Registry value name")


class BooleanElementItem(ElementItemBase):
    kind: Literal["boolean"] = "boolean"
    true_value: RegistryValue = Field(default=None, description="Value written when checked")
    false_value: RegistryValue = Field(default=None, description="Value written when unchecked")


class DecimalElementItem(ElementItemBase):
    kind: Literal["decimal"] = "decimal"
    required: bool = False
    min_value: UInt32Field = UInt32(0)
    max_value: UInt32Field = UInt32(9999)
    store_as_text: bool = False
    soft: bool = False


class LongDecimalElementItem(ElementItemBase):
    kind: Literal["longDecimal"] = "longDecimal"
    required: bool = False
    min_value: UInt64Field = UInt64(0)
    max_value: UInt64Field = UInt64(9999)
    store_as_text: bool = False
    soft: bool = False


class EnumerationItem(BaseModel):
    """One selectable option of an enumeration element."""
    display_name: str = Field(min_length=1)
    display_name_ref: str = ""
    value: RegistryValue = None


class EnumerationElementItem(ElementItemBase):
    kind: Literal["enum"] = "enum"
    required: bool = False
    items: List[EnumerationItem] = Field(default_factory=list)


class ListElementItem(ElementItemBase):
    kind: Literal["list"] = "list"
    value_prefix: Optional[str] = None
    additive: bool = False
    explicit_value: bool = False
    expandable: bool = False


class MultiTextElementItem(ElementItemBase):
    kind: Literal["multiText"] = "multiText"
    required: bool = False
    max_length: int = Field(default=1023, ge=1)
    max_strings: int = Field(default=0, ge=0, description="0 means unlimited")


class TextElementItem(ElementItemBase):
    kind: Literal["text"] = "text"
    required: bool = False
    max_length: int = Field(default=1023, ge=1)
    expandable: bool = False


ElementItem = Annotated[
    Union[
        BooleanElementItem,
        DecimalElementItem,
        LongDecimalElementItem,
        EnumerationElementItem,
        ListElementItem,
        MultiTextElementItem,
        TextElementItem,
    ],
    Field(discriminator="kind"),
]


# ===== Policies =====

class Policy(BaseModel):
    """One policy setting and its configurable elements."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, description="Policy identifier")
    display_name: str = Field(default="", description="Resolved display name")
    display_name_ref: str = Field(default="", description="Raw $(string.Key) reference")
    explain_text: str = Field(default="", description="Resolved explanation text")
    namespace: str = Field(default="", description="Dotted category/namespace path")
    policy_class: PolicyClass = Field(default=PolicyClass.Both, alias="class")
    registry_key: str = Field(default="", description="Registry key under the policy hive")
    registry_value_name: Optional[str] = None
    enabled_value: RegistryValue = None
    disabled_value: RegistryValue = None
    supported_on: str = Field(default="", description="Supported-on constraint expression")
    elements: List[ElementItem] = Field(default_factory=list)


class PolicyDocument(BaseModel):
    """A single pre-parsed definition file."""
    namespace: str = Field(default="", description="Default namespace for the contained policies")
    policies: List[Policy] = Field(default_factory=list)

    @model_validator(mode="after")
    def _inherit_namespace(self) -> "PolicyDocument":
        for policy in self.policies:
            if not policy.namespace:
                policy.namespace = self.namespace
        return self
