#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Conversion of SD files into CSV tables.

One row per molecule record, with the columns
`RecordIndex, MoleculeName, SMILES, SMILES_Status`, followed by all data tags
found in the file (sorted). Tags missing in a record are left empty.

Only problems with the whole file raise an exception (subclasses of `ConversionError`).
Problems with single records end up in the `SMILES_Status` column
and are counted in the `Diagnostics`.

Example:
========

>>> from sdf_tools import convert
>>> result = convert.convert_file("chembl_sample.sdf.gz", allow_without_engine=True)
>>> print(result.diagnostics.status_line())
"""

import os.path as op
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from . import sdf, table
from .smiles import acquire_engine
from .utils import EngineUnavailableError, NoRecordsError, Results, read_input

INTERACTIVE = False
MAX_FAILURE_REASONS = 5
# Default for an engine argument that was not given (`None` means "no engine")
AUTO = object()


@dataclass
class Diagnostics:
    """Counts collected during one conversion."""

    num_lines: int = 0
    num_blocks: int = 0
    num_records: int = 0
    num_smiles: int = 0
    engine_available: bool = False
    engine_reasons: List[str] = field(default_factory=list)
    failures: Counter = field(default_factory=Counter)

    @property
    def num_dropped(self) -> int:
        """Blocks without `M  END` line, which did not become records."""
        return self.num_blocks - self.num_records

    @property
    def num_failed(self) -> int:
        return self.num_records - self.num_smiles

    def top_failures(self, n: int = MAX_FAILURE_REASONS):
        """The most frequent failure reasons as list of (reason, count)."""
        return self.failures.most_common(n)

    def status_line(self) -> str:
        if not self.engine_available:
            return f"Parsed {self.num_records} record(s). Exported without SMILES (fallback mode)."
        return (
            f"Parsed {self.num_records} record(s). "
            f"SMILES generated: {self.num_smiles}. Failed: {self.num_failed}."
        )

    def report(self) -> Results:
        res = Results(headers=["Diagnostics", "Count"])
        res.add(
            "Input",
            ("Lines", self.num_lines),
            ("Blocks", self.num_blocks),
            ("Records", self.num_records),
            ("Dropped blocks (no M  END)", self.num_dropped),
            "SMILES",
            ("Engine available", "yes" if self.engine_available else "no"),
            ("Generated", self.num_smiles),
            ("Failed", self.num_failed),
        )
        top = self.top_failures()
        if top:
            res.add("Top failure reasons")
            res.add(*top)
        return res


@dataclass
class ConversionResult:
    columns: List[str]
    rows: List[Dict[str, str]]
    diagnostics: Diagnostics

    def to_csv(self) -> str:
        return table.encode_csv(self.rows, self.columns)

    def to_dataframe(self) -> pd.DataFrame:
        return table.to_dataframe(self.rows, self.columns)

    def preview(self, n: int = table.PREVIEW_ROWS) -> pd.DataFrame:
        return table.preview(self.rows, self.columns, n)


def check_engine(engine, allow_without_engine: bool):
    if engine is None and not allow_without_engine:
        raise EngineUnavailableError(
            "SMILES engine unavailable. Allow the export without SMILES to get a metadata-only CSV."
        )


def convert_text(
    text: str, engine=None, allow_without_engine: bool = False
) -> ConversionResult:
    """Convert the text of an SD file into a table.

    Parameters:
    ===========
    text: the (decompressed) content of the SD file
    engine: the SMILES engine (see `smiles.acquire_engine()`), None if not available
    allow_without_engine: when no engine is available, export the table with empty SMILES
        (status `ENGINE_UNAVAILABLE`) instead of refusing the conversion.

    Returns:
    ========
    A ConversionResult with the columns, the rows and the diagnostics.
    """
    check_engine(engine, allow_without_engine)
    diag = Diagnostics(engine_available=engine is not None)
    diag.num_lines = sdf.count_lines(text)
    chunks = sdf.split_blocks(text)
    diag.num_blocks = len(chunks)
    records = sdf.parse_blocks(chunks)
    diag.num_records = len(records)
    if diag.num_records == 0:
        raise NoRecordsError("No valid molecule records found.")

    columns = table.build_columns(records)
    rows = table.project_rows(records, columns, engine, failures=diag.failures)
    diag.num_smiles = sum(1 for r in rows if r["SMILES"])
    if INTERACTIVE:
        print(f"{'convert_text':25s}: [ {len(rows):7d} / {len(columns):3d} ] {diag.status_line()}")
    return ConversionResult(columns=columns, rows=rows, diagnostics=diag)


def output_name(fn: str) -> str:
    """The CSV file name for an input file: `mols.sdf.gz` -> `mols.csv`."""
    base = str(fn)
    if base.lower().endswith(".gz"):
        base = base[:-3]
    base = op.splitext(base)[0]
    return f"{base}.csv"


def convert_file(
    fn: str,
    out_fn: Optional[str] = None,
    allow_without_engine: bool = False,
    engine=AUTO,
    loaders: Optional[Sequence[Callable]] = None,
    write_output: bool = True,
) -> ConversionResult:
    """Convert an SD file (optionally gzipped) into a CSV file.

    Parameters:
    ===========
    fn: the input file
    out_fn: the output file, default: the input name with the extension `.csv`
    allow_without_engine: see `convert_text()`
    engine: the SMILES engine to use. When not given, it is acquired with `loaders`.
    loaders: the engine loaders, default: RDKit
    write_output: write the CSV file (default: True)

    Returns:
    ========
    The ConversionResult. The engine loader failures are stored in `diagnostics.engine_reasons`.
    """
    reasons = []
    if engine is AUTO:
        engine, reasons = acquire_engine(loaders)
    # Refuse before the file is even read
    check_engine(engine, allow_without_engine)
    text = read_input(fn)
    result = convert_text(text, engine, allow_without_engine)
    result.diagnostics.engine_reasons = reasons
    if write_output:
        if out_fn is None:
            out_fn = output_name(fn)
        table.write_csv(result.rows, result.columns, out_fn)
    return result
