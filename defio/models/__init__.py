from .auditing import AuditResult, ProtocolError, ProtocolViolation, ViolationType
from .design import Blockage, Design
from .records import (
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
    Via,
    ViaType,
)
