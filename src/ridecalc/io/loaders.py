"""
JSON input/output for component catalogs and bike setups.

Loads a caller-supplied component catalog (list of component objects, or an
object with a ``components`` list) and assembles BikeSetup bundles from it.
Keys are accepted in snake_case or camelCase, matching catalogs exported by
web front ends.

Uses Pydantic for automatic validation and enum coercion.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..enums import ComponentCategory, FreehubType, coerce_enum

logger = logging.getLogger(__name__)


class _CatalogModel(BaseModel):
    """Immutable catalog model accepting camelCase keys."""
    model_config = ConfigDict(
        extra='ignore',
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CassetteSpec(_CatalogModel):
    """Cassette payload."""
    speeds: int = Field(gt=0)
    cogs: Tuple[int, ...]
    freehub_type: FreehubType

    @field_validator('freehub_type', mode='before')
    @classmethod
    def coerce_freehub_type(cls, v):
        return coerce_enum(FreehubType, v)

    @field_validator('cogs')
    @classmethod
    def check_cogs(cls, v):
        if any(cog <= 0 for cog in v):
            raise ValueError(f"Cog sizes must be positive, got {v}")
        return v


class ChainringSpec(_CatalogModel):
    """Single chainring payload."""
    teeth: int = Field(gt=0)
    bcd: Optional[float] = None  # Bolt circle diameter, mm
    offset_mm: Optional[float] = None


class CranksetSpec(_CatalogModel):
    """Crankset payload (one or more rings)."""
    chainrings: Tuple[int, ...] = Field(min_length=1)
    bcd: Optional[float] = None
    spindle_type: Optional[str] = None  # e.g. "DUB", "Hollowtech II"
    offset_mm: Optional[float] = None

    @field_validator('chainrings')
    @classmethod
    def check_chainrings(cls, v):
        if any(teeth <= 0 for teeth in v):
            raise ValueError(f"Chainring sizes must be positive, got {v}")
        return v


class ChainSpec(_CatalogModel):
    """Chain payload."""
    speeds: int = Field(gt=0)
    links: Optional[int] = None


class WheelSpec(_CatalogModel):
    """Wheel payload."""
    diameter_in: float = Field(gt=0)
    width_mm: Optional[float] = None  # Internal rim width


class TireSpec(_CatalogModel):
    """Tire payload."""
    width_mm: float = Field(gt=0)
    diameter_in: float = Field(gt=0)


class DerailleurSpec(_CatalogModel):
    """Rear derailleur payload."""
    speeds: int = Field(gt=0)
    max_cog: Optional[int] = None
    capacity: Optional[int] = None  # Total tooth spread the cage can wrap
    cage_length: Optional[str] = None  # "short" | "medium" | "long"


class HubSpec(_CatalogModel):
    """Rear hub payload."""
    freehub_types: Tuple[FreehubType, ...] = Field(min_length=1)
    axle_type: Optional[str] = None
    axle_width_mm: Optional[float] = None

    @field_validator('freehub_types', mode='before')
    @classmethod
    def coerce_freehub_types(cls, v):
        if isinstance(v, (str, FreehubType)):
            v = [v]
        return tuple(coerce_enum(FreehubType, item) for item in v)


# Payload field name -> category it implies. Setup slots use the same names.
PAYLOAD_CATEGORIES: Dict[str, ComponentCategory] = {
    'cassette': ComponentCategory.CASSETTE,
    'chainring': ComponentCategory.CHAINRING,
    'crankset': ComponentCategory.CRANKSET,
    'chain': ComponentCategory.CHAIN,
    'wheel': ComponentCategory.WHEEL,
    'tire': ComponentCategory.TIRE,
    'derailleur': ComponentCategory.DERAILLEUR,
    'hub': ComponentCategory.HUB,
}


class Component(_CatalogModel):
    """A catalog item with at most one category-specific payload.

    Categories listed in PAYLOAD_CATEGORIES must carry their payload; the
    rest (brakes, forks, frames, ...) carry none.
    """
    id: str
    manufacturer: str
    model: str
    year: Optional[int] = None
    weight_grams: Optional[float] = Field(default=None, ge=0)
    msrp: Optional[float] = Field(default=None, ge=0)
    category: ComponentCategory

    cassette: Optional[CassetteSpec] = None
    chainring: Optional[ChainringSpec] = None
    crankset: Optional[CranksetSpec] = None
    chain: Optional[ChainSpec] = None
    wheel: Optional[WheelSpec] = None
    tire: Optional[TireSpec] = None
    derailleur: Optional[DerailleurSpec] = None
    hub: Optional[HubSpec] = None

    @field_validator('category', mode='before')
    @classmethod
    def coerce_category(cls, v):
        return coerce_enum(ComponentCategory, v)

    @model_validator(mode='after')
    def check_payload(self):
        populated = [name for name in PAYLOAD_CATEGORIES if getattr(self, name) is not None]
        if len(populated) > 1:
            raise ValueError(
                f"Component {self.id} has multiple payloads: {', '.join(populated)}"
            )
        if populated and PAYLOAD_CATEGORIES[populated[0]] != self.category:
            raise ValueError(
                f"Component {self.id} is a {self.category.value} "
                f"but carries a {populated[0]} payload"
            )
        if not populated and self.category.value in PAYLOAD_CATEGORIES:
            raise ValueError(
                f"Component {self.id} is a {self.category.value} "
                f"but has no {self.category.value} payload"
            )
        return self

    @property
    def name(self) -> str:
        return f"{self.manufacturer} {self.model}"


class BikeSetup(_CatalogModel):
    """Optional-slot bundle of drivetrain and rolling components."""
    cassette: Optional[Component] = None
    chainring: Optional[Component] = None
    crankset: Optional[Component] = None
    chain: Optional[Component] = None
    wheel: Optional[Component] = None
    tire: Optional[Component] = None
    derailleur: Optional[Component] = None
    hub: Optional[Component] = None

    @model_validator(mode='after')
    def check_slot_categories(self):
        for slot, category in PAYLOAD_CATEGORIES.items():
            component = getattr(self, slot)
            if component is not None and component.category != category:
                raise ValueError(
                    f"Slot '{slot}' needs a {category.value}, "
                    f"got {component.category.value} ({component.id})"
                )
        return self

    @property
    def drive(self) -> Optional[Component]:
        """Chainring if present, else crankset."""
        return self.chainring if self.chainring is not None else self.crankset

    @property
    def is_comparison_ready(self) -> bool:
        return self.cassette is not None and self.drive is not None

    def components(self) -> Iterable[Component]:
        """Populated slots in declaration order."""
        for slot in PAYLOAD_CATEGORIES:
            component = getattr(self, slot)
            if component is not None:
                yield component


def load_catalog_json(filepath: Union[str, Path]) -> Dict[str, Component]:
    """
    Load a component catalog from JSON.

    Args:
        filepath: Path to a JSON list of components, or an object with a
            ``components`` list

    Returns:
        Components keyed by id, in file order

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the JSON has no component list or repeats an id
        ValidationError: If a component is malformed
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Catalog file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('components')
    if not isinstance(data, list):
        raise ValueError(
            "Invalid catalog JSON - expected a list of components or a 'components' list"
        )

    catalog: Dict[str, Component] = {}
    for entry in data:
        component = Component.model_validate(entry)
        if component.id in catalog:
            raise ValueError(f"Duplicate component id in catalog: {component.id}")
        catalog[component.id] = component

    logger.debug(f"Loaded {len(catalog)} components from {filepath}")
    return catalog


def build_setup(catalog: Dict[str, Component], component_ids: Iterable[str]) -> BikeSetup:
    """
    Assemble a BikeSetup from catalog ids.

    Each component lands in the slot named after its category.

    Raises:
        KeyError: If an id is not in the catalog
        ValueError: If a component has no setup slot or a slot is filled twice
    """
    slots: Dict[str, Component] = {}
    for component_id in component_ids:
        component_id = component_id.strip()
        if not component_id:
            continue
        if component_id not in catalog:
            raise KeyError(f"Unknown component id: {component_id}")
        component = catalog[component_id]
        slot = component.category.value
        if slot not in PAYLOAD_CATEGORIES:
            raise ValueError(
                f"Component {component_id} ({slot}) has no slot in a bike setup"
            )
        if slot in slots:
            raise ValueError(
                f"Slot '{slot}' given twice: {slots[slot].id} and {component_id}"
            )
        slots[slot] = component
    return BikeSetup(**slots)


def save_result_json(result: BaseModel, filepath: Union[str, Path]) -> None:
    """
    Save a calculation result to JSON.

    Args:
        result: Any result model returned by the calculators
        filepath: Output path
    """
    filepath = Path(filepath)
    with open(filepath, 'w') as f:
        json.dump(result.model_dump(mode='json'), f, indent=2)
