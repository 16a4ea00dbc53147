"""
Component registry: named definitions and instance creation.

The registry owns every definition it holds. Symbols are shared with the
instances it creates and are never copied. Nothing here is a module-level
singleton; create one registry per library you want to keep.

Example::

    registry = ComponentRegistry()
    r1 = registry.instantiate("Resistor", x=10, y=20, rotation=90)
    r1.pin_position("1")
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..config import EasyEDAConfig, KiCadConfig
from ..easyeda import convert_easyeda_symbol, extract_datastr
from ..exceptions import ComponentError
from ..kicad import load_kicad_symbol
from ..symbols import Symbol, SymbolSource
from .builtin import BUILTIN_COMPONENTS
from .definition import ComponentDefinition, DefinitionOrigin
from .generic import create_generic_symbol
from .instance import ComponentInstance

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

EXPORT_VERSION = 1


class ComponentRegistry:
    """
    Named component definitions.

    Args:
        include_builtins: Preload the built-in definitions
        kicad_options: Settings for ``add_kicad_symbol``
        easyeda_options: Settings for ``add_lcsc_part``
    """

    def __init__(
        self,
        include_builtins: bool = True,
        kicad_options: Optional[KiCadConfig] = None,
        easyeda_options: Optional[EasyEDAConfig] = None,
    ):
        self._definitions: Dict[str, ComponentDefinition] = {}
        self._categories: Dict[str, List[str]] = {}
        self.kicad_options = kicad_options or KiCadConfig()
        self.easyeda_options = easyeda_options or EasyEDAConfig()
        if include_builtins:
            for definition in BUILTIN_COMPONENTS:
                self.add_definition(definition.copy())

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(self._definitions.values())

    def add_definition(self, definition: ComponentDefinition) -> ComponentDefinition:
        """
        Add or replace a definition.

        Raises:
            ComponentError: If the definition has no name
        """
        if not definition.name:
            raise ComponentError(
                "Component definition must have a name",
                suggestions=["Set ComponentDefinition.name before registering"],
            )
        if definition.name in self._definitions:
            self._unlink_category(self._definitions[definition.name])

        self._definitions[definition.name] = definition
        category = definition.category or UNCATEGORIZED
        self._categories.setdefault(category, []).append(definition.name)
        return definition

    def register(self, name: str, symbol: Symbol, **info: Any) -> ComponentDefinition:
        """
        Register a symbol under ``name``.

        Keyword arguments are passed to ``ComponentDefinition`` (description,
        category, keywords, default_reference, default_value, ...).
        """
        info.setdefault("origin", DefinitionOrigin.USER)
        return self.add_definition(ComponentDefinition(name=name, symbol=symbol, **info))

    def lookup(self, name: str) -> Optional[Symbol]:
        definition = self._definitions.get(name)
        return definition.symbol if definition else None

    def get_definition(self, name: str) -> Optional[ComponentDefinition]:
        return self._definitions.get(name)

    def instantiate(self, name: str, **options: Any) -> Optional[ComponentInstance]:
        """Create an instance of ``name``, or None if it is not registered."""
        definition = self._definitions.get(name)
        if definition is None:
            return None
        return ComponentInstance.create(definition, **options)

    def create_component(self, name: str, **options: Any) -> ComponentInstance:
        """
        Create an instance of ``name``.

        Raises:
            ComponentError: If no definition has that name
        """
        instance = self.instantiate(name, **options)
        if instance is None:
            matches = [d.name for d in self.search(name)][:5]
            raise ComponentError(
                f"Component definition not found: {name}",
                suggestions=[f"Did you mean: {', '.join(matches)}"] if matches else None,
            )
        return instance

    def all_definitions(self) -> List[ComponentDefinition]:
        return list(self._definitions.values())

    def search(self, query: str) -> List[ComponentDefinition]:
        """Definitions whose name, description or keywords contain ``query``."""
        return [d for d in self._definitions.values() if d.matches(query)]

    def by_category(self, category: str) -> List[ComponentDefinition]:
        names = self._categories.get(category, [])
        return [self._definitions[n] for n in names if n in self._definitions]

    def categories(self) -> List[str]:
        return sorted(name for name, members in self._categories.items() if members)

    def remove(self, name: str) -> bool:
        """
        Remove a definition.

        Returns:
            True if removed, False if it was not registered

        Raises:
            ComponentError: For built-in definitions
        """
        definition = self._definitions.get(name)
        if definition is None:
            return False
        if definition.is_builtin:
            raise ComponentError(
                "Cannot remove built-in components",
                context={"component": name},
            )
        del self._definitions[name]
        self._unlink_category(definition)
        return True

    def _unlink_category(self, definition: ComponentDefinition) -> None:
        members = self._categories.get(definition.category or UNCATEGORIZED)
        if members and definition.name in members:
            members.remove(definition.name)

    # Import / export

    def export_json(self, indent: Optional[int] = 2) -> str:
        """Serialize every non-built-in definition."""
        components = [d.to_dict() for d in self._definitions.values() if not d.is_builtin]
        return json.dumps({"version": EXPORT_VERSION, "components": components}, indent=indent)

    def import_json(self, text: str) -> int:
        """
        Add definitions from ``export_json`` output.

        Accepts the export object or a bare list of definitions. Entries that
        fail to load, or that claim to be built-in, are skipped with a warning.

        Returns:
            Number of definitions added
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Component import is not valid JSON: {e}")
            return 0

        entries = data.get("components", []) if isinstance(data, Mapping) else data
        if not isinstance(entries, list):
            logger.warning("Component import has no component list")
            return 0

        count = 0
        for index, entry in enumerate(entries):
            try:
                definition = ComponentDefinition.from_dict(entry)
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping component #{index}: {e}")
                continue
            if definition.is_builtin:
                logger.warning(f"Skipping component {definition.name!r}: built-in definitions are not imported")
                continue
            existing = self._definitions.get(definition.name)
            if existing is not None and existing.is_builtin:
                logger.warning(f"Skipping component {definition.name!r}: name is taken by a built-in")
                continue
            self.add_definition(definition)
            count += 1
        return count

    # Source formats

    def add_kicad_symbol(self, text: str, name: str) -> Optional[ComponentDefinition]:
        """
        Convert ``name`` from KiCad library text and register it.

        Returns:
            The new definition, or None if the symbol could not be converted
        """
        symbol = load_kicad_symbol(text, name, self.kicad_options)
        if symbol is None:
            return None
        properties = dict(symbol.properties)
        reference = properties.get("Reference", "U")
        return self.add_definition(
            ComponentDefinition(
                name=symbol.name or name,
                symbol=symbol,
                description=properties.get("Description", properties.get("ki_description", "")),
                category="KiCad",
                keywords=properties.get("ki_keywords", "").split(),
                default_reference=reference if reference.endswith("?") else f"{reference}?",
                default_value=properties.get("Value", ""),
                default_properties={
                    k: v for k, v in properties.items() if k in ("Footprint", "Datasheet")
                },
                origin=DefinitionOrigin.KICAD,
            )
        )

    def add_lcsc_part(self, lcsc_id: str, metadata: Mapping[str, Any]) -> ComponentDefinition:
        """
        Register an LCSC part from already-fetched metadata.

        The EasyEDA symbol in ``metadata["easyedaSymbolData"]`` is used when it
        converts; otherwise a generic symbol is built from the category and
        package. A cached EasyEDA-backed definition is returned as-is.
        """
        name = f"LCSC_{lcsc_id}"
        cached = self._definitions.get(name)
        if cached is not None and cached.symbol.source == SymbolSource.EASYEDA:
            return cached

        symbol: Optional[Symbol] = None
        symbol_data = metadata.get("easyedaSymbolData")
        if symbol_data:
            symbol = convert_easyeda_symbol(extract_datastr(symbol_data), self.easyeda_options, name=name)
        if symbol is None:
            logger.info(f"No EasyEDA symbol for {lcsc_id}; using a generic symbol")
            symbol = create_generic_symbol(
                metadata.get("category"),
                metadata.get("package"),
                metadata.get("footprintShapes"),
            )

        prefix = metadata.get("prefix") or symbol.properties.get("pre") or "U?"
        extra = {
            key: metadata[key]
            for key in ("mpn", "manufacturer", "package", "datasheet", "stock", "price")
            if metadata.get(key) is not None
        }
        return self.add_definition(
            ComponentDefinition(
                name=name,
                symbol=symbol,
                description=str(metadata.get("description") or ""),
                category=str(metadata.get("category") or "LCSC"),
                keywords=[k for k in (lcsc_id, metadata.get("mpn")) if k],
                default_reference=prefix if prefix.endswith("?") else f"{prefix}?",
                default_value=str(metadata.get("mpn") or ""),
                origin=DefinitionOrigin.LCSC,
                metadata={"supplier_part_numbers": {"LCSC": lcsc_id}, **extra},
            )
        )
