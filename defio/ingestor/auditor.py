"""
Checks a DEF event stream against the producer contract.

The auditor is itself a DEF database: it forwards every callback to the
database it wraps and records the contract violations it observes on the
way. It never changes the records it forwards.
"""

import logging
from typing import Sequence

from defio.ingestor.database import DefDataBase
from defio.models.auditing import AuditResult, ProtocolError, ProtocolViolation, ViolationType
from defio.models.records import (
    Box,
    Component,
    GCellGrid,
    Group,
    Net,
    Pin,
    PinPort,
    Region,
    Row,
    SpecialNet,
    Track,
    ViaType,
)

__all__ = ["ProtocolAuditor"]

log = logging.getLogger(__name__)


class ProtocolAuditor(DefDataBase):
    """
    Forwarding database that audits resize/add ordering and counts.

    :param database: Database receiving the forwarded callbacks.
    :param strict: Raise ProtocolError at the first violation.
    :param check_records: Also check parallel arrays inside records.
    """

    def __init__(self, database: DefDataBase, strict: bool = False, check_records: bool = True):
        self.database = database
        self.strict = strict
        self.check_records = check_records
        self.result = AuditResult()
        self._ended = False
        self._structure_seen = False

    def implemented_callbacks(self) -> frozenset[str]:
        """
        Optional callbacks implemented by the wrapped database.

        The auditor forwards every callback, so its own overrides say
        nothing about what the consumer handles.
        """
        return self.database.implemented_callbacks()

    def supports(self, callback: str) -> bool:
        return self.database.supports(callback)

    def set_dividerchar(self, dividerchar: str) -> None:
        self._enter("set_dividerchar")
        self.database.set_dividerchar(dividerchar)

    def set_busbitchars(self, busbitchars: str) -> None:
        self._enter("set_busbitchars")
        self.database.set_busbitchars(busbitchars)

    def set_version(self, version: str) -> None:
        self._enter("set_version")
        self.database.set_version(version)

    def set_design(self, name: str) -> None:
        self._enter("set_design")
        self.database.set_design(name)

    def set_unit(self, unit: int) -> None:
        self._enter("set_unit")
        if self._structure_seen:
            self._violation(
                ViolationType.METADATA_AFTER_STRUCTURE,
                "Distance unit set after coordinate-bearing constructs were added",
                "set_unit",
            )
        self.database.set_unit(unit)

    def set_diearea(self, xl: int, yl: int, xh: int, yh: int) -> None:
        self._enter("set_diearea")
        self.database.set_diearea(xl, yl, xh, yh)

    def set_diearea_polygon(self, xs: Sequence[int], ys: Sequence[int]) -> None:
        self._enter("set_diearea_polygon")
        if self.check_records and len(xs) != len(ys):
            self._invariant(f"Die area polygon has {len(xs)} x and {len(ys)} y coordinates", "set_diearea_polygon")
        self.database.set_diearea_polygon(xs, ys)

    def add_row(self, row: Row) -> None:
        self._add(None, "add_row")
        self.database.add_row(row)

    def resize_component(self, count: int) -> None:
        self._resize("component", count)
        self.database.resize_component(count)

    def add_component(self, component: Component) -> None:
        self._add("component", "add_component")
        self.database.add_component(component)

    def resize_pin(self, count: int) -> None:
        self._resize("pin", count)
        self.database.resize_pin(count)

    def add_pin(self, pin: Pin) -> None:
        self._add("pin", "add_pin")
        self._check_layer_boxes(pin, f"pin {pin.pin_name}", "add_pin")
        for index, port in enumerate(pin.ports):
            self._check_layer_boxes(port, f"port {index} of pin {pin.pin_name}", "add_pin")
        self.database.add_pin(pin)

    def resize_net(self, count: int) -> None:
        self._resize("net", count)
        self.database.resize_net(count)

    def add_net(self, net: Net) -> None:
        self._add("net", "add_net")
        self.database.add_net(net)

    def add_track(self, track: Track) -> None:
        self._add(None, "add_track")
        self.database.add_track(track)

    def add_gcellgrid(self, gcellgrid: GCellGrid) -> None:
        self._add(None, "add_gcellgrid")
        self.database.add_gcellgrid(gcellgrid)

    def add_snet(self, snet: SpecialNet) -> None:
        self._add(None, "add_snet")
        self.database.add_snet(snet)

    def add_via(self, via: ViaType) -> None:
        self._add(None, "add_via")
        self.database.add_via(via)

    def resize_blockage(self, count: int) -> None:
        self._resize("blockage", count)
        self.database.resize_blockage(count)

    def add_placement_blockage(self, boxes: list[Box]) -> None:
        self._add("blockage", "add_placement_blockage")
        self.database.add_placement_blockage(boxes)

    def add_route_blockage(self, boxes: list[Box], layer: str) -> None:
        self._add("blockage", "add_route_blockage")
        self.database.add_route_blockage(boxes, layer)

    def resize_region(self, count: int) -> None:
        self._resize("region", count)
        self.database.resize_region(count)

    def add_region(self, region: Region) -> None:
        self._add("region", "add_region")
        self._check_properties(region, f"region {region.region_name}", "add_region")
        self.database.add_region(region)

    def resize_group(self, count: int) -> None:
        self._resize("group", count)
        self.database.resize_group(count)

    def add_group(self, group: Group) -> None:
        self._add("group", "add_group")
        self._check_properties(group, f"group {group.group_name}", "add_group")
        self.database.add_group(group)

    def end_of_design(self) -> None:
        self._enter("end_of_design")
        self._ended = True
        for collection, expected in self.result.resizes.items():
            actual = self.result.adds.get(collection, 0)
            if actual != expected:
                self._violation(
                    ViolationType.COUNT_MISMATCH,
                    f"Announced {expected} {collection} adds but received {actual}",
                    "end_of_design",
                )
        self.database.end_of_design()

    def _enter(self, callback: str) -> None:
        if self._ended:
            self._violation(ViolationType.CALL_AFTER_END, f"{callback} called after end_of_design", callback)

    def _resize(self, collection: str, count: int) -> None:
        callback = f"resize_{collection}"
        self._enter(callback)
        if collection in self.result.resizes:
            self._violation(ViolationType.DUPLICATE_RESIZE, f"{callback} called more than once", callback)
        elif self.result.adds.get(collection, 0):
            self._violation(
                ViolationType.RESIZE_AFTER_ADD,
                f"{callback} called after {self.result.adds[collection]} adds",
                callback,
            )
        self.result.resizes.setdefault(collection, count)

    def _add(self, collection: str | None, callback: str) -> None:
        self._enter(callback)
        self._structure_seen = True
        if collection is not None:
            self.result.adds[collection] = self.result.adds.get(collection, 0) + 1

    def _check_layer_boxes(self, record: Pin | PinPort, label: str, callback: str) -> None:
        if self.check_records and len(record.layers) != len(record.bboxes):
            self._invariant(f"{label} has {len(record.layers)} layers and {len(record.bboxes)} boxes", callback)

    def _check_properties(self, record: Region | Group, label: str, callback: str) -> None:
        if not self.check_records:
            return
        lengths = {len(record.property_names), len(record.property_values), len(record.property_types)}
        if len(lengths) > 1:
            self._invariant(f"{label} has property arrays of unequal length", callback)

    def _invariant(self, message: str, callback: str) -> None:
        self._violation(ViolationType.RECORD_INVARIANT, message, callback)

    def _violation(self, violation_type: ViolationType, message: str, callback: str) -> None:
        violation = ProtocolViolation(violation_type=violation_type, message=message, callback=callback)
        if self.strict:
            raise ProtocolError(violation)
        log.debug("protocol violation: %s", message)
        self.result.violations.append(violation)
