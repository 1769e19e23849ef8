import copy
import logging

import pytest

from defio.ingestor.database import (
    OPTIONAL_CALLBACKS,
    REMINDER_PREFIX,
    REQUIRED_CALLBACKS,
    DefDataBase,
    OptionalDefCallbacks,
)
from defio.models.records import GCellGrid, Group, Region, SpecialNet, Track, ViaType

LOGGER = "defio.ingestor.database"


def _reminders(caplog):
    return [r for r in caplog.records if r.name == LOGGER and r.getMessage().startswith(REMINDER_PREFIX)]


def test_missing_required_callback_cannot_be_instantiated(minimal_database):
    namespace = {name: getattr(type(minimal_database), name) for name in REQUIRED_CALLBACKS if name != "add_net"}
    Partial = type("Partial", (DefDataBase,), namespace)
    with pytest.raises(TypeError, match="add_net"):
        Partial()
    assert isinstance(minimal_database, DefDataBase)


def test_bare_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        DefDataBase()


def test_required_and_optional_sets_are_disjoint():
    assert not set(REQUIRED_CALLBACKS) & set(OPTIONAL_CALLBACKS)
    for name in OPTIONAL_CALLBACKS:
        assert callable(getattr(OptionalDefCallbacks, name))


@pytest.mark.parametrize(
    "callback, args",
    [
        ("set_diearea_polygon", ([0, 10, 10], [0, 0, 10])),
        ("add_track", (Track(),)),
        ("add_gcellgrid", (GCellGrid(),)),
        ("add_snet", (SpecialNet(),)),
        ("add_via", (ViaType(),)),
        ("resize_blockage", (2,)),
        ("add_placement_blockage", ([[0, 0, 1, 1]],)),
        ("add_route_blockage", ([[0, 0, 1, 1]], "M1")),
        ("resize_region", (1,)),
        ("add_region", (Region(),)),
        ("resize_group", (1,)),
        ("add_group", (Group(),)),
        ("end_of_design", ()),
    ],
)
def test_unimplemented_optional_callback_reminds_once(minimal_database, caplog, callback, args):
    assert callback in OPTIONAL_CALLBACKS
    before = copy.deepcopy(vars(minimal_database))
    with caplog.at_level(logging.WARNING, logger=LOGGER):
        getattr(minimal_database, callback)(*args)
    reminders = _reminders(caplog)
    assert len(reminders) == 1
    assert reminders[0].getMessage() == REMINDER_PREFIX + callback
    assert reminders[0].levelno == logging.WARNING
    assert vars(minimal_database) == before


def test_reminders_are_not_deduplicated(minimal_database, caplog):
    with caplog.at_level(logging.WARNING, logger=LOGGER):
        minimal_database.add_track(Track(track_name="X"))
        minimal_database.add_track(Track(track_name="Y"))
    assert [r.getMessage() for r in _reminders(caplog)] == [REMINDER_PREFIX + "add_track"] * 2


def test_required_callbacks_never_remind(minimal_database, caplog):
    with caplog.at_level(logging.WARNING, logger=LOGGER):
        minimal_database.set_version("5.8")
        minimal_database.resize_component(0)
    assert _reminders(caplog) == []


def test_overridden_optional_callback_does_not_remind(minimal_database, caplog):
    received = []

    class WithTracks(type(minimal_database)):
        def add_track(self, track):
            received.append(track.track_name)

    database = WithTracks()
    with caplog.at_level(logging.WARNING, logger=LOGGER):
        database.add_track(Track(track_name="X"))
    assert received == ["X"]
    assert _reminders(caplog) == []


def test_capability_query(minimal_database, design_database):
    assert type(minimal_database).implemented_callbacks() == frozenset()
    assert type(design_database).implemented_callbacks() == frozenset(OPTIONAL_CALLBACKS)
    assert minimal_database.supports("add_component")
    assert not minimal_database.supports("add_region")
    assert design_database.supports("add_region")
    with pytest.raises(ValueError, match="Unknown DEF callback"):
        minimal_database.supports("add_wire")
