"""Graph views of assembled designs."""

from .design_graph import DesignGraph
