"""
defio: Event-driven DEF design database ingestion.

Provides the records and the callback interface through which a DEF
parser hands rows, components, pins, nets and the other constructs of a
physical design to a database, plus an in-memory database and tools to
drive, replay and audit the callback stream.
"""

from defio.ingestor.database import DefDataBase, OptionalDefCallbacks, RequiredDefCallbacks
from defio.ingestor.dispatcher import Collection, Dispatcher
from defio.ingestor.events import DefEvent, replay
from defio.ingestor.factory import get_database, get_design, get_dispatcher
from defio.ingestor.memory import DesignDataBase
from defio.models import (
    AuditResult,
    Blockage,
    Box,
    Component,
    Design,
    GCellGrid,
    Group,
    Net,
    Pin,
    PinPort,
    ProtocolError,
    ProtocolViolation,
    Region,
    Row,
    SpecialNet,
    Track,
    Via,
    ViaType,
    ViolationType,
)
