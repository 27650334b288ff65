"""
Escaping and literal formatting helpers for generated C# source.

Every helper turns an arbitrary value from the policy model into a
fragment that parses as exactly one identifier, namespace path, type name,
documentation comment or literal. The same functions are exposed to the
templates through HELPERS.
"""

import html
import math
import re
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from ..policy.models import (
    BooleanElementItem, Char, DecimalElementItem, DeleteValue,
    EnumerationElementItem, ListElementItem, LongDecimalElementItem,
    MultiTextElementItem, Single, TextElementItem, UInt32, UInt64,
)

CSHARP_KEYWORDS = frozenset("""
    abstract as base bool break byte case catch char checked class const
    continue decimal default delegate do double else enum event explicit
    extern false finally fixed float for foreach goto if implicit in int
    interface internal is lock long namespace new null object operator out
    override params private protected public readonly ref return sbyte
    sealed short sizeof stackalloc static string struct switch this throw
    true try typeof uint ulong unchecked unsafe ushort using virtual void
    volatile while
""".split())

_REF_PATTERN = re.compile(r"\$\((?P<type>[^.]+)\.(?P<key>[^)]+)\)", re.IGNORECASE)
_XML_INVALID = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_TYPE_CHARS = _ASCII_LETTERS | frozenset("0123456789")
_IDENTIFIER_CHARS = _TYPE_CHARS | {"_"}


def _escape_name(s: Optional[str], allowed: frozenset) -> str:
    if s is None:
        return ""
    s = s.strip()
    if not s:
        return ""

    s = "".join(c for c in s if c in allowed)
    if not s or not (s[0] in _ASCII_LETTERS or (s[0] == "_" and "_" in allowed)):
        s = "_" + s
    if s in CSHARP_KEYWORDS:
        s = "@" + s
    return s


def escape_type(s: Optional[str]) -> str:
    """Type name: letters and digits only, never starting with a digit."""
    return _escape_name(s, _TYPE_CHARS)


def escape_identifier(s: Optional[str]) -> str:
    """Member identifier: like escape_type but underscores survive."""
    return _escape_name(s, _IDENTIFIER_CHARS)


def escape_namespace(s: Optional[str]) -> str:
    if s is None:
        return ""
    return ".".join(escape_type(part) for part in s.split(".") if part.strip())


def escape_xmldoc(s: Optional[str]) -> str:
    """Render text as `///` comment lines with markup characters encoded."""
    lines = (s or "").splitlines() or [""]
    return "\n".join(f"/// {html.escape(_XML_INVALID.sub('', line))}" for line in lines)


def _float_literal(value: float, type_name: str, suffix: str) -> str:
    if math.isnan(value):
        return f"{type_name}.NaN"
    if math.isinf(value):
        return f"{type_name}.{'PositiveInfinity' if value > 0 else 'NegativeInfinity'}"
    return repr(float(value)) + suffix


def literal(value: Any) -> str:
    """
    Format a payload value as a C# literal.

    Raises:
        TypeError: If the value has no literal form.
    """
    if value is None or isinstance(value, DeleteValue):
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    if isinstance(value, Char):
        if value.isalnum():
            return f"'{value}'"
        return "'\\u{:04x}'".format(ord(value))
    if isinstance(value, UInt32):
        return f"{int(value)}u"
    if isinstance(value, UInt64):
        return f"{int(value)}uL"
    if isinstance(value, Single):
        return _float_literal(value, "float", "f")
    if isinstance(value, float):
        return _float_literal(value, "double", "d")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"{value} has no decimal literal form")
        return format(value, "f") + "m"
    if isinstance(value, str):
        return '@"' + value.replace('"', '""') + '"'
    if isinstance(value, int):
        return str(value)
    raise TypeError(f"No C# literal form for {type(value).__name__}: {value!r}")


def is_delval(value: Any) -> bool:
    return isinstance(value, DeleteValue)


def ref_id(s: Optional[str]) -> str:
    """Resource key of a `$(type.key)` reference, or "" for plain text."""
    match = _REF_PATTERN.search(s or "")
    if not match:
        return ""
    return match.group("key")


# ===== Element item variant tests and casts =====

def _cast(kind: type) -> Callable[[Any], Any]:
    def cast(item: Any) -> Any:
        if not isinstance(item, kind):
            raise TypeError(f"Expected {kind.__name__}, got {type(item).__name__}")
        return item
    cast.__name__ = f"to_{kind.__name__}"
    return cast


def is_bei(item: Any) -> bool:
    return isinstance(item, BooleanElementItem)


def is_dei(item: Any) -> bool:
    return isinstance(item, DecimalElementItem)


def is_ldei(item: Any) -> bool:
    return isinstance(item, LongDecimalElementItem)


def is_eei(item: Any) -> bool:
    return isinstance(item, EnumerationElementItem)


def is_lei(item: Any) -> bool:
    return isinstance(item, ListElementItem)


def is_mtei(item: Any) -> bool:
    return isinstance(item, MultiTextElementItem)


def is_tei(item: Any) -> bool:
    return isinstance(item, TextElementItem)


to_bei = _cast(BooleanElementItem)
to_dei = _cast(DecimalElementItem)
to_ldei = _cast(LongDecimalElementItem)
to_eei = _cast(EnumerationElementItem)
to_lei = _cast(ListElementItem)
to_mtei = _cast(MultiTextElementItem)
to_tei = _cast(TextElementItem)


HELPERS: Mapping[str, Callable[..., Any]] = MappingProxyType({
    "escape_type": escape_type,
    "escape_identifier": escape_identifier,
    "escape_namespace": escape_namespace,
    "escape_xmldoc": escape_xmldoc,
    "literal": literal,
    "is_delval": is_delval,
    "ref_id": ref_id,
    "is_bei": is_bei,
    "is_dei": is_dei,
    "is_ldei": is_ldei,
    "is_eei": is_eei,
    "is_lei": is_lei,
    "is_mtei": is_mtei,
    "is_tei": is_tei,
    "to_bei": to_bei,
    "to_dei": to_dei,
    "to_ldei": to_ldei,
    "to_eei": to_eei,
    "to_lei": to_lei,
    "to_mtei": to_mtei,
    "to_tei": to_tei,
})
