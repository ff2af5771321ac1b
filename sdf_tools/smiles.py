#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SMILES generation from mol blocks.

The conversion is done by an engine object, which is acquired once per batch
with `acquire_engine()` and then passed to the functions that need it.
An engine provides `parse_structure(mol_block)`, which returns a structure handle
or raises `StructureParseError`. The handle provides `to_smiles()` and, optionally,
the fallback methods `to_isomeric_smiles()`, `to_kekule_smiles()` and `to_smarts()`.
The default engine uses the RDKit.
"""

from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

OK = "OK"
OK_ISOMERIC = "OK_ISOMERIC"
OK_KEKULE = "OK_KEKULE"
OK_SMARTS = "OK_SMARTS"
PARSE_FAILED = "PARSE_FAILED"
SMILES_FAILED = "SMILES_FAILED"
ENGINE_UNAVAILABLE = "ENGINE_UNAVAILABLE"

SUCCESS_STATUSES = {OK, OK_ISOMERIC, OK_KEKULE, OK_SMARTS}

# (method name on the structure handle, status on success), tried in this order
SMILES_METHODS = [
    ("to_smiles", OK),
    ("to_isomeric_smiles", OK_ISOMERIC),
    ("to_kekule_smiles", OK_KEKULE),
    ("to_smarts", OK_SMARTS),
]


class StructureParseError(ValueError):
    """The engine could not read the mol block."""


class SmilesResult(NamedTuple):
    smiles: str
    status: str
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES


class RDKitStructure:
    """Structure handle wrapping an RDKit molecule."""

    def __init__(self, mol, chem):
        self.mol = mol
        self._chem = chem

    def to_smiles(self) -> str:
        return self._chem.MolToSmiles(self.mol)

    def to_isomeric_smiles(self) -> str:
        return self._chem.MolToSmiles(self.mol, isomericSmiles=True, canonical=False)

    def to_kekule_smiles(self) -> str:
        Chem = self._chem
        mol = Chem.Mol(self.mol)
        Chem.Kekulize(mol, clearAromaticFlags=True)
        return Chem.MolToSmiles(mol, kekuleSmiles=True, canonical=False)

    def to_smarts(self) -> str:
        return self._chem.MolToSmarts(self.mol)


class RDKitEngine:
    """SMILES engine backed by the RDKit.
    The RDKit log is silenced, failure reasons are reported through the results."""

    def __init__(self):
        from rdkit import Chem, RDLogger

        self._chem = Chem
        RDLogger.logger().setLevel(RDLogger.CRITICAL)

    def parse_structure(self, mol_block: str) -> RDKitStructure:
        Chem = self._chem
        mol = Chem.MolFromMolBlock(mol_block)
        if mol is not None:
            return RDKitStructure(mol, Chem)
        # Parse again without sanitization to find out what went wrong.
        raw = Chem.MolFromMolBlock(mol_block, sanitize=False)
        if raw is None:
            raise StructureParseError("Invalid mol block")
        try:
            Chem.SanitizeMol(raw)
        except Exception as e:
            raise StructureParseError(f"Sanitization failed: {e}") from e
        raise StructureParseError("Mol block rejected by the RDKit")


def load_rdkit() -> RDKitEngine:
    """Loader for the RDKit engine. Raises ImportError when the RDKit is not installed."""
    return RDKitEngine()


DEFAULT_LOADERS: List[Callable] = [load_rdkit]


def acquire_engine(loaders: Optional[Sequence[Callable]] = None) -> Tuple[object, List[str]]:
    """Try the engine loaders in order, the first one that succeeds wins.

    Parameters:
    ===========
    loaders: list of callables without arguments that return an engine.
        They signal an unavailable engine by raising ImportError or RuntimeError.
        Default: `DEFAULT_LOADERS` (RDKit only).

    Returns:
    ========
    A tuple of the engine (None when no loader succeeded)
    and the list of reasons of the loaders that failed.
    """
    if loaders is None:
        loaders = DEFAULT_LOADERS
    reasons = []
    for loader in loaders:
        loader_name = getattr(loader, "__name__", repr(loader))
        try:
            engine = loader()
        except (ImportError, RuntimeError) as e:
            reasons.append(f"{loader_name}: {e}")
            continue
        if engine is None:
            reasons.append(f"{loader_name}: no engine returned")
            continue
        return engine, reasons
    return None, reasons


def mol_block_to_smiles(mol_block: str, engine) -> SmilesResult:
    """Generate the Smiles for a mol block.

    When the primary method fails, the fallback methods of the structure handle are tried
    in the order isomeric, kekulized, SMARTS. The status of the result tells
    which method succeeded. An empty string counts as failure.
    Errors are never raised, they are returned as status:
    `ENGINE_UNAVAILABLE` (engine is None), `PARSE_FAILED` or `SMILES_FAILED`."""
    if engine is None:
        return SmilesResult("", ENGINE_UNAVAILABLE)
    try:
        structure = engine.parse_structure(mol_block)
    except Exception as e:
        return SmilesResult("", PARSE_FAILED, str(e) or type(e).__name__)
    if structure is None:
        return SmilesResult("", PARSE_FAILED, "No structure returned")

    reason = "No SMILES method available"
    for method_name, status in SMILES_METHODS:
        method = getattr(structure, method_name, None)
        if method is None:
            continue
        try:
            smi = method()
        except Exception as e:
            reason = f"{method_name}: {str(e) or type(e).__name__}"
            continue
        if smi:
            return SmilesResult(smi, status)
        reason = f"{method_name}: empty result"
    return SmilesResult("", SMILES_FAILED, reason)
