"""
Drives a DEF database from the producer side.

The dispatcher owns one staging record per record type. A producer resets
and fills the staging record inside :meth:`Dispatcher.stage`, and the
record is handed to the matching ``add_*`` callback when the block ends.
"""

from __future__ import annotations

import contextlib
import logging
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Sequence, TypeVar

from defio.ingestor.database import DefDataBase
from defio.models.records import (
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
    _Record,
)

__all__ = ["Collection", "Dispatcher"]

log = logging.getLogger(__name__)

R = TypeVar("R", bound=_Record)

_ADD_CALLBACKS: dict[type[_Record], str] = {
    Row: "add_row",
    Component: "add_component",
    Pin: "add_pin",
    Net: "add_net",
    Track: "add_track",
    GCellGrid: "add_gcellgrid",
    SpecialNet: "add_snet",
    ViaType: "add_via",
    Region: "add_region",
    Group: "add_group",
}


class Collection(Enum):
    """
    Collections whose size can be announced ahead of their adds.

    The value is the suffix of the matching ``resize_*`` callback.
    """

    COMPONENT = "component"
    PIN = "pin"
    NET = "net"
    BLOCKAGE = "blockage"
    REGION = "region"
    GROUP = "group"


class Dispatcher:
    """
    Forwards DEF constructs to a database in the order they are discovered.

    One dispatcher serves one database for one design.
    """

    def __init__(self, database: DefDataBase):
        """
        Initializes the dispatcher.

        :param database: Consumer receiving the callbacks.
        """
        self.database = database
        self._staging: dict[type[_Record], _Record] = {}

    @property
    def staged_records(self) -> Mapping[type[_Record], _Record]:
        """Current staging record per record type."""
        return MappingProxyType(self._staging)

    def dividerchar(self, value: str) -> None:
        self.database.set_dividerchar(value)

    def busbitchars(self, value: str) -> None:
        self.database.set_busbitchars(value)

    def version(self, value: str) -> None:
        self.database.set_version(value)

    def design(self, name: str) -> None:
        self.database.set_design(name)

    def unit(self, value: int) -> None:
        self.database.set_unit(value)

    def diearea(self, xl: int, yl: int, xh: int, yh: int) -> None:
        self.database.set_diearea(xl, yl, xh, yh)

    def diearea_polygon(self, xs: Sequence[int], ys: Sequence[int]) -> None:
        self.database.set_diearea_polygon(xs, ys)

    def resize(self, collection: Collection, count: int) -> None:
        """
        Announces the exact number of adds that follow for a collection.

        :param collection: Collection being announced.
        :param count: Number of adds to follow.
        """
        log.debug("resize %s to %d", collection.value, count)
        getattr(self.database, f"resize_{collection.value}")(count)

    @contextlib.contextmanager
    def stage(self, record_type: type[R]) -> Iterator[R]:
        """
        Yields the reset staging record and hands it off on exit.

        If the block raises, the record is not handed off.

        :param record_type: Record type to stage, e.g. Component.
        :return: Context manager yielding the staging record.
        :raises TypeError: If the record type has no add callback.
        """
        callback = self._add_callback(record_type)
        record = self._staging.get(record_type)
        if record is None:
            record = self._staging[record_type] = record_type()
        else:
            record.reset()
        yield record
        callback(record)

    def add(self, record: _Record) -> None:
        """
        Hands an already populated record to the matching add callback.

        :param record: Record to hand off.
        :raises TypeError: If the record type has no add callback.
        """
        self._add_callback(type(record))(record)

    def placement_blockage(self, boxes: list[Box]) -> None:
        self.database.add_placement_blockage(boxes)

    def route_blockage(self, boxes: list[Box], layer: str) -> None:
        self.database.add_route_blockage(boxes, layer)

    def end_of_design(self) -> None:
        log.debug("end of design")
        self.database.end_of_design()

    def _add_callback(self, record_type: type[_Record]):
        try:
            name = _ADD_CALLBACKS[record_type]
        except KeyError:
            raise TypeError(f"No DEF add callback for record type {record_type.__name__}") from None
        return getattr(self.database, name)
