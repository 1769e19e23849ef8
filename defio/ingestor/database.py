"""
Defines the callback interface between the DEF dispatch layer and a database.

The interface is split in two. RequiredDefCallbacks lists the constructs
present in virtually every design; a consumer missing any of them cannot
be instantiated. OptionalDefCallbacks provides a default for every other
construct that logs a reminder and otherwise does nothing, so a consumer
only overrides what it cares about.
"""

import abc
import logging
from typing import Sequence

from defio.models.records import Box, Component, GCellGrid, Group, Net, Pin, Region, Row, SpecialNet, Track, ViaType

__all__ = [
    "REMINDER_PREFIX",
    "REQUIRED_CALLBACKS",
    "OPTIONAL_CALLBACKS",
    "RequiredDefCallbacks",
    "OptionalDefCallbacks",
    "DefDataBase",
]

log = logging.getLogger(__name__)

REMINDER_PREFIX = "please implement optional DEF callback: "

REQUIRED_CALLBACKS = (
    "set_dividerchar",
    "set_busbitchars",
    "set_version",
    "set_design",
    "set_unit",
    "set_diearea",
    "add_row",
    "resize_component",
    "add_component",
    "resize_pin",
    "add_pin",
    "resize_net",
    "add_net",
)

OPTIONAL_CALLBACKS = (
    "set_diearea_polygon",
    "add_track",
    "add_gcellgrid",
    "add_snet",
    "add_via",
    "resize_blockage",
    "add_placement_blockage",
    "add_route_blockage",
    "resize_region",
    "add_region",
    "resize_group",
    "add_group",
    "end_of_design",
)


class RequiredDefCallbacks(abc.ABC):
    """
    Callbacks every DEF database must implement.

    ``resize_*(n)`` announces that exactly ``n`` matching ``add_*`` calls
    follow. It is called at most once per collection and before any add
    into that collection. Consumers may treat it as a capacity hint or
    ignore it.
    """

    @abc.abstractmethod
    def set_dividerchar(self, dividerchar: str) -> None:
        """
        Sets the hierarchy divider character.

        :param dividerchar: Divider, usually "/".
        """

    @abc.abstractmethod
    def set_busbitchars(self, busbitchars: str) -> None:
        """
        Sets the bus bit delimiters.

        :param busbitchars: Opening and closing delimiter, e.g. "[]".
        """

    @abc.abstractmethod
    def set_version(self, version: str) -> None:
        """
        Sets the DEF version.

        :param version: Version string, e.g. "5.8".
        """

    @abc.abstractmethod
    def set_design(self, name: str) -> None:
        """
        Sets the design name.

        :param name: Design name.
        """

    @abc.abstractmethod
    def set_unit(self, unit: int) -> None:
        """
        Sets the database units per micron.

        :param unit: Distance unit, e.g. 1000.
        """

    @abc.abstractmethod
    def set_diearea(self, xl: int, yl: int, xh: int, yh: int) -> None:
        """Sets a rectangular die area."""

    @abc.abstractmethod
    def add_row(self, row: Row) -> None:
        """
        Adds a placement row.

        :param row: Transient row record; copy what must be kept.
        """

    @abc.abstractmethod
    def resize_component(self, count: int) -> None:
        """
        Announces the number of components.

        :param count: Exact number of add_component calls to follow.
        """

    @abc.abstractmethod
    def add_component(self, component: Component) -> None:
        """
        Adds a placed cell instance.

        :param component: Transient component record.
        """

    @abc.abstractmethod
    def resize_pin(self, count: int) -> None:
        """
        Announces the number of IO pins.

        :param count: Exact number of add_pin calls to follow.
        """

    @abc.abstractmethod
    def add_pin(self, pin: Pin) -> None:
        """
        Adds an IO pin.

        :param pin: Transient pin record, ports included.
        """

    @abc.abstractmethod
    def resize_net(self, count: int) -> None:
        """
        Announces the number of nets.

        :param count: Exact number of add_net calls to follow.
        """

    @abc.abstractmethod
    def add_net(self, net: Net) -> None:
        """
        Adds a logical net.

        :param net: Transient net record.
        """


class OptionalDefCallbacks:
    """
    Callbacks with a default that only reminds the user to implement them.

    Each default logs one warning per call and leaves the database
    untouched. Use :meth:`implemented_callbacks` or :meth:`supports` to
    find out which callbacks a database actually overrides.
    """

    def set_diearea_polygon(self, xs: Sequence[int], ys: Sequence[int]) -> None:
        """
        Sets a non-rectangular die area.

        :param xs: x coordinates of the outline points.
        :param ys: y coordinates of the outline points.
        """
        self._user_cbk_reminder("set_diearea_polygon")

    def add_track(self, track: Track) -> None:
        self._user_cbk_reminder("add_track")

    def add_gcellgrid(self, gcellgrid: GCellGrid) -> None:
        self._user_cbk_reminder("add_gcellgrid")

    def add_snet(self, snet: SpecialNet) -> None:
        """
        Adds a special net.

        :param snet: Transient special net record, vias included.
        """
        self._user_cbk_reminder("add_snet")

    def add_via(self, via: ViaType) -> None:
        """
        Adds a via definition from the VIAS section.

        :param via: Transient via template record.
        """
        self._user_cbk_reminder("add_via")

    def resize_blockage(self, count: int) -> None:
        self._user_cbk_reminder("resize_blockage")

    def add_placement_blockage(self, boxes: list[Box]) -> None:
        """
        Adds a placement blockage.

        :param boxes: Blocked rectangles.
        """
        self._user_cbk_reminder("add_placement_blockage")

    def add_route_blockage(self, boxes: list[Box], layer: str) -> None:
        """
        Adds a routing blockage.

        :param boxes: Blocked rectangles.
        :param layer: Layer the rectangles block.
        """
        self._user_cbk_reminder("add_route_blockage")

    def resize_region(self, count: int) -> None:
        self._user_cbk_reminder("resize_region")

    def add_region(self, region: Region) -> None:
        self._user_cbk_reminder("add_region")

    def resize_group(self, count: int) -> None:
        self._user_cbk_reminder("resize_group")

    def add_group(self, group: Group) -> None:
        self._user_cbk_reminder("add_group")

    def end_of_design(self) -> None:
        """Marks the end of the design; no further callbacks follow."""
        self._user_cbk_reminder("end_of_design")

    def _user_cbk_reminder(self, callback: str) -> None:
        """
        Reminds the user that an optional callback reached its default.

        :param callback: Name of the callback.
        """
        log.warning("%s%s", REMINDER_PREFIX, callback)

    @classmethod
    def implemented_callbacks(cls) -> frozenset[str]:
        """
        Names of the optional callbacks overridden by ``cls``.

        :return: Subset of OPTIONAL_CALLBACKS.
        """
        return frozenset(
            name for name in OPTIONAL_CALLBACKS if getattr(cls, name) is not getattr(OptionalDefCallbacks, name)
        )

    def supports(self, callback: str) -> bool:
        """
        Checks whether a callback reaches consumer code.

        Required callbacks are always supported.

        :param callback: Callback name.
        :return: True if the callback is required or overridden.
        :raises ValueError: If the name is not a DEF callback.
        """
        if callback in REQUIRED_CALLBACKS:
            return True
        if callback not in OPTIONAL_CALLBACKS:
            raise ValueError(f"Unknown DEF callback: {callback}")
        return callback in self.implemented_callbacks()


class DefDataBase(RequiredDefCallbacks, OptionalDefCallbacks):
    """
    Base class for DEF databases.

    Subclass it, implement every required callback and override the
    optional callbacks for the constructs you want to keep.
    """
