"""
Shared fixtures for the tinyasm test suite.
"""

import pytest

from tinyasm.assembler import MemoryImage, SymbolTable
from tinyasm.machine import M256_N8, M1024_N16


@pytest.fixture
def split_image() -> MemoryImage:
    """Fresh 256 x 8-bit image with split opcode/operand words."""
    return MemoryImage(M256_N8)


@pytest.fixture
def packed_image() -> MemoryImage:
    """Fresh 1024 x 16-bit image with packed 6+10 bit words."""
    return MemoryImage(M1024_N16)


@pytest.fixture(params=[M256_N8, M1024_N16], ids=lambda m: m.name)
def machine(request):
    """Each built-in machine preset in turn."""
    return request.param


@pytest.fixture
def image(machine) -> MemoryImage:
    return MemoryImage(machine)


@pytest.fixture
def symbols(image) -> SymbolTable:
    return SymbolTable(image)
