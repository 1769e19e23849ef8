import logging
from typing import TYPE_CHECKING, Any, Dict, List, Set

import networkx as nx

if TYPE_CHECKING:
    from defio.models.design import Design

log = logging.getLogger(__name__)

# instance name used by DEF nets for top-level IO pins
IO_PIN_INSTANCE = "PIN"


class DesignGraph:
    def __init__(self):
        self.nets: Dict[str, List[tuple[str, str]]] = {}
        self.instance_metadata: Dict[str, Dict[str, str]] = {}

    @classmethod
    def from_design(cls, design: "Design") -> "DesignGraph":
        graph = cls()
        graph._populate_from_design(design)
        return graph

    def _populate_from_design(self, design: "Design") -> None:
        for component in design.components:
            self.instance_metadata[component.comp_name] = {"model": component.macro_name or "Unknown"}
        for pin in design.pins:
            self.instance_metadata[self._io_pin_node(pin.pin_name)] = {"model": "IO", "direction": pin.direct}
        for net in design.nets:
            self.nets.setdefault(net.net_name, [])
            for instance, pin in net.net_pins:
                self.add_connection(net.net_name, instance, pin)

    @staticmethod
    def _io_pin_node(pin_name: str) -> str:
        return f"{IO_PIN_INSTANCE}:{pin_name}"

    def add_connection(self, net_name: str, instance: str, pin: str) -> None:
        self.nets.setdefault(net_name, []).append((instance, pin))

    def build(self) -> nx.Graph:
        """
        Builds the bipartite instance/net graph.

        Net nodes are keyed ``("net", name)`` and instance nodes
        ``("inst", name)``; IO pins appear as instances named ``PIN:<pin>``.
        """
        graph = nx.Graph()
        processed_instances: Set[str] = set()
        for net_name, endpoints in self.nets.items():
            graph.add_node(("net", net_name), type="net")
            for instance, pin in endpoints:
                node = self._io_pin_node(pin) if instance == IO_PIN_INSTANCE else instance
                if node not in processed_instances:
                    graph.add_node(("inst", node), type="instance", **self.instance_metadata.get(node, {}))
                    processed_instances.add(node)
                graph.add_edge(("net", net_name), ("inst", node), pin=pin)
        for node, metadata in self.instance_metadata.items():
            if node not in processed_instances:
                graph.add_node(("inst", node), type="instance", **metadata)
        return graph

    def fanout(self) -> Dict[str, int]:
        graph = self.build()
        return {name: graph.degree(("net", name)) for name in self.nets}

    def summary(self) -> Dict[str, Any]:
        degrees = self.fanout()
        if not degrees:
            log.info("Graph is empty.")
            return {"nets": 0, "average_fanout": 0.0, "max_fanout_net": None, "max_fanout": 0}
        max_net = max(degrees, key=degrees.get)
        stats = {
            "nets": len(degrees),
            "average_fanout": sum(degrees.values()) / len(degrees),
            "max_fanout_net": max_net,
            "max_fanout": degrees[max_net],
        }
        log.info(
            "Total Nets: %d, Average Fanout: %.2f, Highest Fanout Net: %s (%d connections)",
            stats["nets"],
            stats["average_fanout"],
            max_net,
            stats["max_fanout"],
        )
        return stats

    def connected_components(self) -> List[Set[str]]:
        """Instance names grouped by connectivity, largest group first."""
        graph = self.build()
        clusters = []
        for nodes in nx.connected_components(graph):
            instances = {name for kind, name in nodes if kind == "inst"}
            if instances:
                clusters.append(instances)
        return sorted(clusters, key=len, reverse=True)
