"""Test configuration and fixtures for defio."""
import pytest

from defio import DefDataBase, DesignDataBase
from defio.ingestor.dispatcher import Dispatcher


class MinimalDataBase(DefDataBase):
    """Implements only the required callbacks, keeping what it receives."""

    def __init__(self):
        self.metadata = {}
        self.rows = []
        self.components = []
        self.pins = []
        self.nets = []
        self.resizes = []

    def set_dividerchar(self, dividerchar):
        self.metadata["dividerchar"] = dividerchar

    def set_busbitchars(self, busbitchars):
        self.metadata["busbitchars"] = busbitchars

    def set_version(self, version):
        self.metadata["version"] = version

    def set_design(self, name):
        self.metadata["design"] = name

    def set_unit(self, unit):
        self.metadata["unit"] = unit

    def set_diearea(self, xl, yl, xh, yh):
        self.metadata["diearea"] = (xl, yl, xh, yh)

    def add_row(self, row):
        self.rows.append(row.clone())

    def resize_component(self, count):
        self.resizes.append(("component", count))

    def add_component(self, component):
        self.components.append(component.clone())

    def resize_pin(self, count):
        self.resizes.append(("pin", count))

    def add_pin(self, pin):
        self.pins.append(pin.clone())

    def resize_net(self, count):
        self.resizes.append(("net", count))

    def add_net(self, net):
        self.nets.append(net.clone())


@pytest.fixture
def minimal_database():
    return MinimalDataBase()


@pytest.fixture
def design_database():
    return DesignDataBase()


@pytest.fixture
def dispatcher(design_database):
    return Dispatcher(design_database)
