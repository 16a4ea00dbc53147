"""
Component definitions: a named symbol plus its catalogue metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from ..symbols import Symbol


class DefinitionOrigin(Enum):
    """Where a definition came from."""

    BUILTIN = "Built-in"
    USER = "User"
    LCSC = "LCSC"
    KICAD = "KiCad"

    @classmethod
    def from_string(cls, value: Optional[str]) -> DefinitionOrigin:
        for member in cls:
            if value and member.value.lower() == str(value).lower():
                return member
        return cls.USER


@dataclass
class ComponentDefinition:
    """
    A registered component.

    The symbol is shared by every instance created from the definition and
    must not be modified.
    """

    name: str
    symbol: Symbol
    description: str = ""
    category: str = "Custom"
    keywords: List[str] = field(default_factory=list)
    default_reference: str = "U?"
    default_value: str = ""
    default_properties: Dict[str, str] = field(default_factory=dict)
    origin: DefinitionOrigin = DefinitionOrigin.USER
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_builtin(self) -> bool:
        return self.origin == DefinitionOrigin.BUILTIN

    def copy(self) -> ComponentDefinition:
        """Copy with its own keyword, property and metadata containers; the symbol is shared."""
        return replace(
            self,
            keywords=list(self.keywords),
            default_properties=dict(self.default_properties),
            metadata=dict(self.metadata),
        )

    @property
    def reference_prefix(self) -> str:
        """Reference designator without the trailing '?' (e.g. "R" for "R?")."""
        return self.default_reference.rstrip("?")

    def matches(self, query: str) -> bool:
        """Case-insensitive match on name, description or any keyword."""
        q = query.lower()
        if q in self.name.lower() or q in self.description.lower():
            return True
        return any(q in keyword.lower() for keyword in self.keywords)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON layout used by registry export."""
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "keywords": list(self.keywords),
            "defaultReference": self.default_reference,
            "defaultValue": self.default_value,
            "origin": self.origin.value,
            "symbol": self.symbol.to_dict(),
        }
        if self.default_properties:
            data["defaultProperties"] = dict(self.default_properties)
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ComponentDefinition:
        """
        Create from the export layout.

        Raises:
            ValueError, KeyError, TypeError: If the data is malformed
        """
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise ValueError("Component definition needs a name")
        symbol_data = data.get("symbol")
        if not isinstance(symbol_data, dict):
            raise ValueError(f"Component {name!r} has no symbol")
        return cls(
            name=name,
            symbol=Symbol.from_dict(symbol_data),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or "Custom"),
            keywords=[str(k) for k in data.get("keywords") or []],
            default_reference=str(data.get("defaultReference") or "U?"),
            default_value=str(data.get("defaultValue") or ""),
            default_properties={
                str(k): str(v) for k, v in (data.get("defaultProperties") or {}).items()
            },
            origin=DefinitionOrigin.from_string(data.get("origin")),
            metadata=dict(data.get("metadata") or {}),
        )
