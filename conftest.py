"""Shared test fixtures."""

import pytest

ETHANOL_BLOCK = """ethanol
  RDKit          2D

  3  2  0  0  0  0  0  0  0  0999 V2000
    0.0000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    1.2990    0.7500    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    2.5981   -0.0000    0.0000 O   0  0  0  0  0  0  0  0  0  0  0  0
  1  2  1  0
  2  3  1  0
M  END
"""

# Carbon with five bonds, fails sanitization
PENTAVALENT_BLOCK = """bad carbon
  RDKit          2D

  6  5  0  0  0  0  0  0  0  0999 V2000
    0.0000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    1.5000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
   -1.5000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    0.0000    1.5000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    0.0000   -1.5000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    1.0000    1.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
  1  2  1  0
  1  3  1  0
  1  4  1  0
  1  5  1  0
  1  6  1  0
M  END
"""


class FakeStructure:
    """Structure handle whose methods fail when listed in `failing`."""

    def __init__(self, block, failing=()):
        self.block = block
        self.failing = set(failing)

    def _make(self, method, prefix):
        if method in self.failing:
            raise ValueError(f"{method} failed")
        return f"{prefix}:{self.block.splitlines()[0]}"

    def to_smiles(self):
        return self._make("to_smiles", "smi")

    def to_isomeric_smiles(self):
        return self._make("to_isomeric_smiles", "iso")

    def to_kekule_smiles(self):
        return self._make("to_kekule_smiles", "kek")

    def to_smarts(self):
        return self._make("to_smarts", "sma")


class FakeEngine:
    """Engine that rejects blocks containing `BAD` and otherwise returns FakeStructures."""

    def __init__(self, failing=()):
        self.failing = failing
        self.calls = []

    def parse_structure(self, block):
        self.calls.append(block)
        if "BAD" in block:
            raise ValueError("cannot read BAD block")
        return FakeStructure(block, self.failing)


@pytest.fixture
def two_record_sdf() -> str:
    return (
        "mol A\n...\nM END\n> <ID>\n1\n\n$$$$\n"
        "mol B\n...\nM END\n> <NOTE>\nhello\n\n$$$$\n"
    )


@pytest.fixture
def mixed_sdf() -> str:
    """Three blocks: a valid record, a block without terminator and a record with a multi-line tag."""
    return (
        "first\n  header\n\nM  END\n> <ID>\nA-1\n\n> <Comment>\nsays \"hi\", twice\n\n$$$$\n"
        "no terminator here\n> <ID>\nlost\n\n$$$$\n"
        "third\n  header\n\nM  END\n> <ID>\nA-3\n\n> <Remark>\nline one\nline two\n\n$$$$\n"
    )


@pytest.fixture
def ethanol_block() -> str:
    return ETHANOL_BLOCK


@pytest.fixture
def pentavalent_block() -> str:
    return PENTAVALENT_BLOCK


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_engine():
    """Factory for FakeEngines with failing SMILES methods."""
    return FakeEngine
