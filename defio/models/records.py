"""Defines the records handed from the DEF dispatch layer to a database.

Each record describes one construct of a DEF file (row, component, pin, net,
special net, via, track, gcell grid, region, group). Records are plain data:
they can be reset to a canonical empty state for reuse, rendered for
diagnostics, and converted to and from plain dictionaries.
"""

import abc
import copy
import io
import itertools
from dataclasses import MISSING, asdict, dataclass, field, fields
from typing import Any, ClassVar, TextIO

__all__ = [
    "Box",
    "Row",
    "Component",
    "PinPort",
    "Pin",
    "Net",
    "ViaType",
    "Via",
    "SpecialNet",
    "Region",
    "Group",
    "Track",
    "GCellGrid",
]

Box = list[int]
"""Rectangle as ``[xl, yl, xh, yh]`` in database units."""


class _WritableMixin(abc.ABC):
    @abc.abstractmethod
    def write(self, stream: TextIO, indent: int = 0):
        """write the content of self in a meaningful way"""

    @staticmethod
    def _format_with_indent(indent: int, value: str):
        return f"{' '*indent*4}{value}"


@dataclass(slots=True)
class _Record(_WritableMixin):
    """
    Base class for all DEF records.

    Every field of a record carries a default, so a freshly constructed
    record is also the canonical state restored by :meth:`reset`.
    """

    # field name -> record type for lists of nested records
    _nested: ClassVar[dict[str, type["_Record"]]] = {}

    def reset(self) -> None:
        """Restores every field to its default, rebuilding nested lists."""
        for f in fields(self):
            if f.default_factory is not MISSING:
                setattr(self, f.name, f.default_factory())
            else:
                setattr(self, f.name, f.default)

    def clone(self):
        """
        Deep copy of the record.

        Consumers call this to take ownership of a transient record.
        """
        return copy.deepcopy(self)

    def as_dict(self) -> dict[str, Any]:
        """
        Converts the record to plain, JSON-compatible data.

        :return: Field name to value mapping, nested records as dicts.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """
        Rebuilds a record from the output of :meth:`as_dict`.

        :param data: Field name to value mapping.
        :return: New record of type ``cls``.
        """
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            if f.name in cls._nested:
                value = [cls._nested[f.name].from_dict(item) for item in value]
            elif isinstance(value, (list, tuple)):
                value = [list(item) if isinstance(item, (list, tuple)) else item for item in value]
            kwargs[f.name] = value
        return cls(**kwargs)

    def write(self, stream: TextIO, indent: int = 0):
        stream.write(self._format_with_indent(indent=indent, value=f"{self.__class__.__name__}:\n"))
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in self._nested:
                for item in value:
                    item.write(stream=stream, indent=indent + 1)
            else:
                stream.write(self._format_with_indent(indent=indent + 1, value=f"{f.name} = {_format_value(value)}\n"))

    def __str__(self) -> str:
        stream = io.StringIO()
        self.write(stream)
        return stream.getvalue()


def _format_value(value: Any) -> str:
    # scalar lists render flat ("10 20"), nested boxes and pairs as "(xl, yl, xh, yh)"
    if isinstance(value, list):
        return " ".join(_format_item(item) for item in value)
    return _format_item(value)


def _format_item(item: Any) -> str:
    if isinstance(item, (list, tuple)):
        return f"({', '.join(str(c) for c in item)})"
    return str(item)


def _write_fields(record: _Record, names: tuple[str, ...], stream: TextIO, indent: int):
    for name in names:
        value = f"{name} = {_format_value(getattr(record, name))}\n"
        stream.write(record._format_with_indent(indent=indent, value=value))


def _write_layer_boxes(record: "PinPort | Pin", stream: TextIO, indent: int):
    for layer, bbox in itertools.zip_longest(record.layers, record.bboxes):
        coords = "<no bbox>" if bbox is None else " ".join(str(c) for c in bbox)
        value = f"layer {'<no layer>' if layer is None else layer} {coords}\n"
        stream.write(record._format_with_indent(indent=indent, value=value))


@dataclass(slots=True)
class Row(_Record):
    """
    Placement row.

    :param row_name: Row name.
    :param macro_name: Site (template) name of the row.
    :param origin: x, y of origin.
    :param orient: Orientation token (N, S, E, W, FN, FS, FE, FW).
    :param repeat: DO x BY y counts, -1 while unset.
    :param step: x, y step, -1 while unset.
    """

    row_name: str = ""
    macro_name: str = ""
    origin: list[int] = field(default_factory=lambda: [-1, -1])
    orient: str = ""
    repeat: list[int] = field(default_factory=lambda: [-1, -1])
    step: list[int] = field(default_factory=lambda: [-1, -1])


@dataclass(slots=True)
class Component(_Record):
    """
    Placed cell instance.

    :param comp_name: Instance name.
    :param macro_name: Standard cell (macro) name.
    :param status: Placement status (PLACED, FIXED, COVER, UNPLACED).
    :param origin: x, y of origin.
    :param orient: Orientation token.
    """

    comp_name: str = ""
    macro_name: str = ""
    status: str = ""
    origin: list[int] = field(default_factory=lambda: [-1, -1])
    orient: str = ""


@dataclass(slots=True)
class PinPort(_Record):
    """
    One port of a pin.

    ``layers[i]`` and ``bboxes[i]`` describe the same shape.
    """

    status: str = ""
    origin: list[int] = field(default_factory=lambda: [-1, -1])
    orient: str = ""
    layers: list[str] = field(default_factory=list)
    bboxes: list[Box] = field(default_factory=list)

    def write(self, stream: TextIO, indent: int = 0):
        stream.write(self._format_with_indent(indent=indent, value="PinPort:\n"))
        _write_fields(self, ("status", "origin", "orient"), stream, indent + 1)
        _write_layer_boxes(self, stream, indent + 1)


@dataclass(slots=True)
class Pin(_Record):
    """
    Top-level IO pin.

    :param pin_name: Pin name.
    :param net_name: Connected net, empty for an unconnected pin.
    :param direct: Direction (INPUT, OUTPUT, INOUT, FEEDTHRU).
    :param status: Placement status.
    :param origin: Offset to the pin origin.
    :param orient: Orientation token.
    :param layers: Layers of the pin shapes, parallel to ``bboxes``.
    :param bboxes: Bounding box on each layer.
    :param use: USE token (SIGNAL, POWER, GROUND, CLOCK, ...).
    :param ports: Ports of a multi-port pin.
    """

    _nested: ClassVar[dict[str, type[_Record]]] = {"ports": PinPort}

    pin_name: str = ""
    net_name: str = ""
    direct: str = ""
    status: str = ""
    origin: list[int] = field(default_factory=lambda: [-1, -1])
    orient: str = ""
    layers: list[str] = field(default_factory=list)
    bboxes: list[Box] = field(default_factory=list)
    use: str = ""
    ports: list[PinPort] = field(default_factory=list)

    def write(self, stream: TextIO, indent: int = 0):
        stream.write(self._format_with_indent(indent=indent, value=f"Pin: {self.pin_name}\n"))
        _write_fields(self, ("net_name", "direct", "status", "origin", "orient"), stream, indent + 1)
        _write_layer_boxes(self, stream, indent + 1)
        stream.write(self._format_with_indent(indent=indent + 1, value=f"use = {self.use}\n"))
        for port in self.ports:
            port.write(stream=stream, indent=indent + 1)


@dataclass(slots=True)
class Net(_Record):
    """
    Logical net.

    :param net_name: Net name.
    :param net_weight: Net weight.
    :param net_pins: (instance, pin) pairs, instance is "PIN" for IO pins.
    :param wirelength: Wirelength filled in by the producer when known.
    """

    net_name: str = ""
    net_weight: int = 1
    net_pins: list[tuple[str, str]] = field(default_factory=list)
    wirelength: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        net = super(Net, cls).from_dict(data)
        net.net_pins = [tuple(pair) for pair in net.net_pins]
        return net


@dataclass(slots=True)
class _ViaItem(_Record):
    viatype_name: str = ""
    x: int = 0
    y: int = 0


@dataclass(slots=True)
class ViaType(_ViaItem):
    """Via template defined in the VIAS section."""


@dataclass(slots=True)
class Via(_ViaItem):
    """Via placed inside a special net wire."""


@dataclass(slots=True)
class SpecialNet(_Record):
    """
    Special (power/ground) net with its routed shapes.

    Only rectangular shapes are kept.
    """

    _nested: ClassVar[dict[str, type[_Record]]] = {"vias": Via}

    net_name: str = ""
    type: str = ""
    shapes: list[Box] = field(default_factory=list)
    vias: list[Via] = field(default_factory=list)


@dataclass(slots=True)
class Region(_Record):
    """
    Placement region such as a fence or guide.

    ``property_names``, ``property_values`` and ``property_types`` are
    parallel arrays.
    """

    region_name: str = ""
    region_type: str = ""
    rectangles: list[Box] = field(default_factory=list)
    property_names: list[str] = field(default_factory=list)
    property_values: list[str] = field(default_factory=list)
    property_types: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Group(_Record):
    """
    Group of components bound to a region.

    :param group_name: Group name.
    :param members: Component names or patterns in the group.
    :param region_name: Region the group belongs to.
    :param perim: MAXHALFPERIMETER soft constraint.
    :param maxx: MAXX soft constraint.
    :param maxy: MAXY soft constraint.
    """

    group_name: str = ""
    members: list[str] = field(default_factory=list)
    region_name: str = ""
    perim: int = 0
    maxx: int = 0
    maxy: int = 0
    rectangles: list[Box] = field(default_factory=list)
    property_names: list[str] = field(default_factory=list)
    property_values: list[str] = field(default_factory=list)
    property_types: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Track(_Record):
    """Routing tracks along one axis."""

    track_name: str = ""
    layer_names: list[str] = field(default_factory=list)
    start: int = 0
    step: int = 0
    num: int = 0
    first_track_mask: int = 0
    same_mask: int = 0


@dataclass(slots=True)
class GCellGrid(_Record):
    gcellgrid_name: str = ""
    start: int = 0
    step: int = 0
    num: int = 0
