"""
Defines the aggregate design built by the in-memory database.

Holds the design-level metadata and every collection received through
the DEF callbacks, in arrival order.
"""

from dataclasses import dataclass, field
from typing import TextIO

from .records import (
    Box,
    Component,
    GCellGrid,
    Group,
    Net,
    Pin,
    Region,
    Row,
    SpecialNet,
    Track,
    ViaType,
    _WritableMixin,
)

__all__ = ["Blockage", "Design"]


@dataclass(slots=True)
class Blockage:
    """
    Placement or routing blockage.

    :param boxes: Blocked rectangles.
    :param layer: Blocked layer for a routing blockage, None for placement.
    """

    boxes: list[Box] = field(default_factory=list)
    layer: str | None = None

    @property
    def is_placement(self) -> bool:
        return self.layer is None


@dataclass(slots=True)
class Design(_WritableMixin):
    """
    Complete in-memory DEF design.

    :param name: Design name.
    :param version: DEF version string.
    :param dividerchar: Hierarchy divider character.
    :param busbitchars: Bus bit delimiter pair.
    :param unit: Database units per micron.
    :param diearea: Die box as [xl, yl, xh, yh], empty when not given.
    :param diearea_polygon: Die outline points for non-rectangular dies.
    """

    name: str = ""
    version: str = ""
    dividerchar: str = ""
    busbitchars: str = ""
    unit: int = 0
    diearea: Box = field(default_factory=list)
    diearea_polygon: list[tuple[int, int]] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    components: list[Component] = field(default_factory=list)
    pins: list[Pin] = field(default_factory=list)
    nets: list[Net] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    gcellgrids: list[GCellGrid] = field(default_factory=list)
    snets: list[SpecialNet] = field(default_factory=list)
    vias: list[ViaType] = field(default_factory=list)
    blockages: list[Blockage] = field(default_factory=list)
    regions: list[Region] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)

    @property
    def placement_blockages(self) -> list[Blockage]:
        return [b for b in self.blockages if b.is_placement]

    @property
    def route_blockages(self) -> list[Blockage]:
        return [b for b in self.blockages if not b.is_placement]

    def component(self, name: str) -> Component | None:
        """
        Looks up a component by instance name.

        :param name: Instance name.
        :return: The first matching component or None.
        """
        return next((c for c in self.components if c.comp_name == name), None)

    def pin(self, name: str) -> Pin | None:
        return next((p for p in self.pins if p.pin_name == name), None)

    def net(self, name: str) -> Net | None:
        return next((n for n in self.nets if n.net_name == name), None)

    def write(self, stream: TextIO, indent: int = 0):
        header = (
            f"Design: {self.name}\n"
            f"Version: {self.version}\n"
            f"Divider: {self.dividerchar} Bus bits: {self.busbitchars}\n"
            f"Units: {self.unit}\n"
            f"Die area: {' '.join(str(c) for c in self.diearea)}\n"
        )
        for line in header.splitlines(keepends=True):
            stream.write(self._format_with_indent(indent=indent, value=line))
        for title in ("rows", "components", "pins", "nets", "tracks", "gcellgrids", "snets", "vias", "regions", "groups"):
            items = getattr(self, title)
            stream.write(self._format_with_indent(indent=indent, value=f"{title.capitalize()} ({len(items)}):\n"))
            for item in items:
                item.write(stream=stream, indent=indent + 1)
        stream.write(
            self._format_with_indent(
                indent=indent,
                value=f"Blockages: {len(self.placement_blockages)} placement, {len(self.route_blockages)} routing\n",
            )
        )
