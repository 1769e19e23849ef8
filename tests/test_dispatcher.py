import pytest

from defio.ingestor.dispatcher import Collection, Dispatcher
from defio.models.records import Component, Pin, PinPort, Row, SpecialNet, Via


def test_stage_hands_off_and_reuses_staging_record(dispatcher, design_database):
    with dispatcher.stage(Component) as comp:
        comp.comp_name = "U1"
        comp.macro_name = "INVX1"
        comp.origin = [10, 20]
    staged = dispatcher.staged_records[Component]
    with dispatcher.stage(Component) as comp:
        assert comp is staged
        assert comp == Component()
        comp.comp_name = "U2"
        comp.macro_name = "NAND2X1"

    names = [c.comp_name for c in design_database.design.components]
    assert names == ["U1", "U2"]
    assert design_database.design.components[0].origin == [10, 20]
    assert design_database.design.components[1].origin == [-1, -1]


def test_stage_clears_stale_pin_ports(dispatcher, design_database):
    with dispatcher.stage(Pin) as pin:
        pin.pin_name = "a"
        pin.ports.extend([PinPort(layers=["M1"], bboxes=[[0, 0, 1, 1]]), PinPort()])
    with dispatcher.stage(Pin) as pin:
        pin.pin_name = "b"
        pin.ports.append(PinPort(layers=["M2"], bboxes=[[0, 0, 2, 2]]))

    pins = design_database.design.pins
    assert [len(p.ports) for p in pins] == [2, 1]
    assert pins[1].ports[0].layers == ["M2"]


def test_failed_stage_is_not_handed_off(dispatcher, design_database):
    with pytest.raises(RuntimeError):
        with dispatcher.stage(Row) as row:
            row.row_name = "row0"
            raise RuntimeError("tokenizer failure")
    assert design_database.design.rows == []


def test_add_dispatches_by_record_type(dispatcher, design_database):
    dispatcher.add(SpecialNet(net_name="VDD", type="POWER", vias=[Via("via12", 1, 2)]))
    dispatcher.add(Row(row_name="row0", macro_name="core"))
    assert design_database.design.snets[0].vias == [Via("via12", 1, 2)]
    assert design_database.design.rows[0].row_name == "row0"


def test_add_rejects_records_without_callback(dispatcher):
    with pytest.raises(TypeError, match="PinPort"):
        dispatcher.add(PinPort())
    with pytest.raises(TypeError, match="Via"):
        with dispatcher.stage(Via):
            pass


def test_resize_maps_to_collection_callback(minimal_database):
    dispatcher = Dispatcher(minimal_database)
    dispatcher.resize(Collection.COMPONENT, 3)
    dispatcher.resize(Collection.PIN, 0)
    dispatcher.resize(Collection.NET, 7)
    assert minimal_database.resizes == [("component", 3), ("pin", 0), ("net", 7)]


def test_scalars_forwarded(minimal_database):
    dispatcher = Dispatcher(minimal_database)
    dispatcher.dividerchar("/")
    dispatcher.busbitchars("[]")
    dispatcher.version("5.8")
    dispatcher.design("TOP")
    dispatcher.unit(2000)
    dispatcher.diearea(0, 0, 500, 800)
    assert minimal_database.metadata == {
        "dividerchar": "/",
        "busbitchars": "[]",
        "version": "5.8",
        "design": "TOP",
        "unit": 2000,
        "diearea": (0, 0, 500, 800),
    }


def test_blockages_and_end(dispatcher, design_database):
    dispatcher.resize(Collection.BLOCKAGE, 2)
    dispatcher.placement_blockage([[0, 0, 10, 10]])
    dispatcher.route_blockage([[5, 5, 6, 6], [7, 7, 8, 8]], "M2")
    dispatcher.end_of_design()
    design = design_database.design
    assert [b.boxes for b in design.placement_blockages] == [[[0, 0, 10, 10]]]
    assert design.route_blockages[0].layer == "M2"
    assert design_database.finished
