"""
Ship designs and the design library.

A ShipDesign is an immutable record produced by the design editor: a hull,
a tech level and a list of component installations. Combat setup looks
designs up by id in a DesignLibrary, which merges the built-in designs from
the catalog with the player's own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .catalog import (
    MAX_TECH_LEVEL,
    MIN_TECH_LEVEL,
    Catalog,
    ComponentCategory,
    ComponentSpec,
    default_catalog,
    parse_category,
)


NUM_ARCS = 8


@dataclass(frozen=True)
class ComponentInstallation:
    """
    One line of a design's component list.

    Attributes:
        category: Component category.
        id: Catalog id within the category.
        count: Number of copies installed.
        arcs: Firing arcs 1-8 (weapons only).
    """
    category: ComponentCategory
    id: str
    count: int = 1
    arcs: Optional[tuple[int, ...]] = None

    @classmethod
    def from_dict(cls, data: dict) -> ComponentInstallation:
        arcs = data.get("arcs")
        return cls(
            category=parse_category(data["category"]),
            id=data["id"],
            count=int(data.get("count", 1)),
            arcs=tuple(int(a) for a in arcs if 1 <= int(a) <= NUM_ARCS) if arcs else None,
        )

    def to_dict(self) -> dict:
        data = {"category": self.category.value, "id": self.id, "count": self.count}
        if self.arcs:
            data["arcs"] = list(self.arcs)
        return data


@dataclass(frozen=True)
class ShipDesign:
    """
    A ship design.

    Attributes:
        id: Unique design id.
        name: Display name.
        hull: Hull id.
        tech_level: Technology level 1-6 (scales tech-sector space).
        components: Installed components.
        description: Free-text description.
        shields: Starting shield value per arc, if the design sets them.
    """
    id: str
    name: str
    hull: str
    tech_level: int = 1
    components: tuple[ComponentInstallation, ...] = ()
    description: str = ""
    shields: Optional[tuple[float, ...]] = None

    def __post_init__(self) -> None:
        if not MIN_TECH_LEVEL <= self.tech_level <= MAX_TECH_LEVEL:
            raise ValueError(
                f"tech_level must be {MIN_TECH_LEVEL}-{MAX_TECH_LEVEL}, got {self.tech_level}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> ShipDesign:
        shields = data.get("shields")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            hull=data["hull"],
            tech_level=int(data.get("tech_level", data.get("techLevel", 1))),
            components=tuple(ComponentInstallation.from_dict(c) for c in data.get("components", [])),
            description=data.get("description", ""),
            shields=tuple(shields) if shields else None,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "hull": self.hull,
            "tech_level": self.tech_level,
            "components": [c.to_dict() for c in self.components],
            "description": self.description,
        }
        if self.shields is not None:
            data["shields"] = list(self.shields)
        return data


# =============================================================================
# SPACE ACCOUNTING
# =============================================================================

def resolved_components(
    design: ShipDesign,
    catalog: Catalog,
) -> Iterator[tuple[ComponentInstallation, ComponentSpec]]:
    """Yield (installation, spec) pairs, skipping ids missing from the catalog."""
    for installation in design.components:
        spec = catalog.find_component(installation.category, installation.id)
        if spec is not None:
            yield installation, spec


def installed_count(design: ShipDesign, category: ComponentCategory, catalog: Catalog) -> int:
    """Number of installed copies of catalog components in ``category``."""
    return sum(
        installation.count
        for installation, _ in resolved_components(design, catalog)
        if installation.category is category
    )


def space_used(design: ShipDesign, catalog: Catalog) -> float:
    """Total space taken by the design's installed components."""
    return sum(
        spec.space_for(installation.count, installation.arcs, design.tech_level)
        for installation, spec in resolved_components(design, catalog)
    )


# =============================================================================
# DESIGN LIBRARY
# =============================================================================

class DesignLibrary:
    """
    Lookup of ship designs by id.

    Built-in designs come first; player designs with the same id replace them.
    """

    def __init__(self, designs: Iterable[ShipDesign] = (), include_defaults: bool = True,
                 catalog: Optional[Catalog] = None) -> None:
        self._designs: dict[str, ShipDesign] = {}
        if include_defaults:
            for data in (catalog or default_catalog()).default_designs:
                self.add(ShipDesign.from_dict(data))
        for design in designs:
            self.add(design)

    def add(self, design: ShipDesign) -> None:
        self._designs[design.id] = design

    def get(self, design_id: str) -> Optional[ShipDesign]:
        return self._designs.get(design_id)

    def __contains__(self, design_id: object) -> bool:
        return design_id in self._designs

    def __iter__(self) -> Iterator[ShipDesign]:
        return iter(self._designs.values())

    def __len__(self) -> int:
        return len(self._designs)
