"""
In-memory DEF database.

Implements every DEF callback and assembles the received records into a
Design. Size announcements reserve list slots up front; the slots are
filled in arrival order.
"""

import logging
from dataclasses import replace
from typing import Generic, Iterator, Sequence, TypeVar

from defio.ingestor.database import DefDataBase
from defio.models.design import Blockage, Design
from defio.models.records import Box, Component, GCellGrid, Group, Net, Pin, Region, Row, SpecialNet, Track, ViaType

__all__ = ["DesignDataBase"]

log = logging.getLogger(__name__)

T = TypeVar("T")


class _Reserved(Generic[T]):
    """List that can reserve slots ahead of appends."""

    __slots__ = ("_items", "_size")

    def __init__(self):
        self._items: list[T | None] = []
        self._size = 0

    def reserve(self, count: int) -> None:
        if count > len(self._items):
            self._items.extend([None] * (count - len(self._items)))

    @property
    def capacity(self) -> int:
        return len(self._items)

    def append(self, item: T) -> None:
        if self._size < len(self._items):
            self._items[self._size] = item
        else:
            self._items.append(item)
        self._size += 1

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        return iter(self._items[: self._size])

    def to_list(self) -> list[T]:
        return self._items[: self._size]


class DesignDataBase(DefDataBase):
    """
    DEF database keeping everything in memory.

    Records are cloned on arrival, so the producer may reuse them.
    """

    def __init__(self):
        self._design = Design()
        self._components: _Reserved[Component] = _Reserved()
        self._pins: _Reserved[Pin] = _Reserved()
        self._nets: _Reserved[Net] = _Reserved()
        self._blockages: _Reserved[Blockage] = _Reserved()
        self._regions: _Reserved[Region] = _Reserved()
        self._groups: _Reserved[Group] = _Reserved()
        self.finished = False

    @property
    def design(self) -> Design:
        """
        Snapshot of the design assembled so far.

        Every read returns a new Design whose lists are copies; the
        records in them are shared with the database.

        :return: Design holding every record received.
        """
        design = self._design
        return replace(
            design,
            diearea=list(design.diearea),
            diearea_polygon=list(design.diearea_polygon),
            rows=list(design.rows),
            components=self._components.to_list(),
            pins=self._pins.to_list(),
            nets=self._nets.to_list(),
            tracks=list(design.tracks),
            gcellgrids=list(design.gcellgrids),
            snets=list(design.snets),
            vias=list(design.vias),
            blockages=self._blockages.to_list(),
            regions=self._regions.to_list(),
            groups=self._groups.to_list(),
        )

    def capacity(self, collection: str) -> int:
        """
        Number of reserved slots of a collection.

        :param collection: Collection name, e.g. "components".
        :return: Reserved slot count.
        """
        return getattr(self, f"_{collection}").capacity

    def set_dividerchar(self, dividerchar: str) -> None:
        self._design.dividerchar = dividerchar

    def set_busbitchars(self, busbitchars: str) -> None:
        self._design.busbitchars = busbitchars

    def set_version(self, version: str) -> None:
        self._design.version = version

    def set_design(self, name: str) -> None:
        self._design.name = name

    def set_unit(self, unit: int) -> None:
        self._design.unit = unit

    def set_diearea(self, xl: int, yl: int, xh: int, yh: int) -> None:
        self._design.diearea = [xl, yl, xh, yh]

    def set_diearea_polygon(self, xs: Sequence[int], ys: Sequence[int]) -> None:
        points = list(zip(xs, ys))
        self._design.diearea_polygon = points
        if points:
            px = [x for x, _ in points]
            py = [y for _, y in points]
            self._design.diearea = [min(px), min(py), max(px), max(py)]

    def add_row(self, row: Row) -> None:
        self._design.rows.append(row.clone())

    def resize_component(self, count: int) -> None:
        self._components.reserve(count)

    def add_component(self, component: Component) -> None:
        self._components.append(component.clone())

    def resize_pin(self, count: int) -> None:
        self._pins.reserve(count)

    def add_pin(self, pin: Pin) -> None:
        self._pins.append(pin.clone())

    def resize_net(self, count: int) -> None:
        self._nets.reserve(count)

    def add_net(self, net: Net) -> None:
        self._nets.append(net.clone())

    def add_track(self, track: Track) -> None:
        self._design.tracks.append(track.clone())

    def add_gcellgrid(self, gcellgrid: GCellGrid) -> None:
        self._design.gcellgrids.append(gcellgrid.clone())

    def add_snet(self, snet: SpecialNet) -> None:
        self._design.snets.append(snet.clone())

    def add_via(self, via: ViaType) -> None:
        self._design.vias.append(via.clone())

    def resize_blockage(self, count: int) -> None:
        self._blockages.reserve(count)

    def add_placement_blockage(self, boxes: list[Box]) -> None:
        self._blockages.append(Blockage(boxes=[list(box) for box in boxes]))

    def add_route_blockage(self, boxes: list[Box], layer: str) -> None:
        self._blockages.append(Blockage(boxes=[list(box) for box in boxes], layer=layer))

    def resize_region(self, count: int) -> None:
        self._regions.reserve(count)

    def add_region(self, region: Region) -> None:
        self._regions.append(region.clone())

    def resize_group(self, count: int) -> None:
        self._groups.reserve(count)

    def add_group(self, group: Group) -> None:
        self._groups.append(group.clone())

    def end_of_design(self) -> None:
        self.finished = True
        log.info(
            "design %s: %d components, %d pins, %d nets",
            self._design.name,
            len(self._components),
            len(self._pins),
            len(self._nets),
        )
