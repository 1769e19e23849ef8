import pytest

from defio.graph_analysis import DesignGraph
from defio.models.design import Design
from defio.models.records import Component, Net, Pin


@pytest.fixture
def design():
    return Design(
        name="TOP",
        components=[
            Component(comp_name="U1", macro_name="INVX1"),
            Component(comp_name="U2", macro_name="INVX1"),
            Component(comp_name="U3", macro_name="NAND2X1"),
            Component(comp_name="U4", macro_name="BUFX2"),
        ],
        pins=[Pin(pin_name="in", direct="INPUT")],
        nets=[
            Net(net_name="n_in", net_pins=[("PIN", "in"), ("U1", "A")]),
            Net(net_name="n1", net_pins=[("U1", "Y"), ("U2", "A"), ("U3", "A")]),
            Net(net_name="floating"),
        ],
    )


def test_fanout(design):
    graph = DesignGraph.from_design(design)
    assert graph.fanout() == {"n_in": 2, "n1": 3, "floating": 0}


def test_summary(design):
    stats = DesignGraph.from_design(design).summary()
    assert stats["nets"] == 3
    assert stats["max_fanout_net"] == "n1"
    assert stats["max_fanout"] == 3
    assert stats["average_fanout"] == pytest.approx(5 / 3)


def test_empty_summary():
    assert DesignGraph.from_design(Design()).summary()["nets"] == 0


def test_connected_components(design):
    clusters = DesignGraph.from_design(design).connected_components()
    assert clusters[0] == {"PIN:in", "U1", "U2", "U3"}
    assert {"U4"} in clusters


def test_node_attributes(design):
    graph = DesignGraph.from_design(design).build()
    assert graph.nodes[("inst", "U3")]["model"] == "NAND2X1"
    assert graph.nodes[("inst", "PIN:in")]["direction"] == "INPUT"
    assert graph.nodes[("net", "n1")]["type"] == "net"
    assert graph.edges[("net", "n1"), ("inst", "U2")]["pin"] == "A"
