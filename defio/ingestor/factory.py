"""
Factory functions for assembling DEF designs.

Wires an event stream, the optional protocol auditor and the in-memory
database together.
"""

import logging
from typing import Iterable

from defio.ingestor.auditor import ProtocolAuditor
from defio.ingestor.database import DefDataBase
from defio.ingestor.dispatcher import Dispatcher
from defio.ingestor.events import DefEvent, replay
from defio.ingestor.memory import DesignDataBase
from defio.models.design import Design

__all__ = ["get_database", "get_dispatcher", "get_design"]

log = logging.getLogger(__name__)


def get_database(audit: bool = False, strict: bool = False) -> DefDataBase:
    """
    Creates an in-memory database, optionally behind an auditor.

    :param audit: Wrap the database in a ProtocolAuditor.
    :param strict: Make the auditor raise on the first violation.
    :return: The database to feed.
    """
    database = DesignDataBase()
    if audit or strict:
        return ProtocolAuditor(database, strict=strict)
    return database


def get_dispatcher(audit: bool = False, strict: bool = False) -> Dispatcher:
    """
    Creates a dispatcher feeding a fresh in-memory database.

    :param audit: Wrap the database in a ProtocolAuditor.
    :param strict: Make the auditor raise on the first violation.
    :return: Configured Dispatcher.
    """
    return Dispatcher(get_database(audit=audit, strict=strict))


def get_design(events: Iterable[DefEvent], audit: bool = False, strict: bool = False) -> Design:
    """
    Replay DEF events into a fresh in-memory database.

    :param events: Events in document order.
    :param audit: Check the stream against the producer contract and log violations.
    :param strict: Raise ProtocolError at the first violation.
    :return: Assembled design.
    :raises ValueError: If an event names an unknown callback.
    """
    database = get_database(audit=audit, strict=strict)
    count = replay(events, database)
    log.debug("replayed %d events", count)

    if isinstance(database, ProtocolAuditor):
        for violation in database.result.violations:
            log.warning("%s: %s", violation.violation_type.name, violation.message)
        database = database.database
    return database.design
