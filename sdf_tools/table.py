#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Projection of parsed SD records into a rectangular table and CSV output.
"""

import locale
from collections import Counter
from typing import Dict, Iterable, List, Optional

import pandas as pd
from tqdm import tqdm

from .sdf import Record
from .smiles import mol_block_to_smiles

FIXED_COLUMNS = ["RecordIndex", "MoleculeName", "SMILES", "SMILES_Status"]
MIN_NUM_RECS_PROGRESS = 500
PREVIEW_ROWS = 100


def unify_tags(records: Iterable[Record]) -> List[str]:
    """Return the union of the tag names of all records, sorted with the locale's collation.
    Case is ignored for the primary order (`alpha, MW, Zeta`), also under the "C" locale.
    The raw string breaks ties, so the order does not depend on the order of the records."""
    tag_set = set()
    for rec in records:
        tag_set.update(rec.tags.keys())
    return sorted(tag_set, key=lambda x: (locale.strxfrm(x.casefold()), x))


def column_map(tags: List[str]) -> Dict[str, str]:
    """Map the tag names to column names.
    Tags that clash with a fixed column get a `prop_` prefix,
    which is repeated until the name is not used by another tag or column."""
    taken = set(FIXED_COLUMNS) | set(tags)
    result = {}
    for tag in tags:
        col = tag
        if tag in FIXED_COLUMNS:
            col = f"prop_{tag}"
            while col in taken:
                col = f"prop_{col}"
            taken.add(col)
        result[tag] = col
    return result


def build_columns(records: Iterable[Record]) -> List[str]:
    """The fixed columns, followed by the columns of the sorted tag names."""
    return FIXED_COLUMNS + list(column_map(unify_tags(records)).values())


def project_rows(
    records: List[Record],
    columns: List[str],
    engine,
    failures: Optional[Counter] = None,
) -> List[Dict[str, str]]:
    """Create one row per record, with a value for every column.

    Parameters:
    ===========
    records: the parsed records, in file order
    columns: the column set from `build_columns()`
    engine: the SMILES engine, None when unavailable
    failures: optional Counter, which is updated with the reasons of failed conversions

    Returns:
    ========
    A list of dicts (column name -> str). Tags missing in a record are empty strings.
    """
    col_tags = {col: tag for tag, col in column_map(unify_tags(records)).items()}
    tag_columns = [(col, col_tags.get(col, col)) for col in columns[len(FIXED_COLUMNS) :]]
    rows = []
    show_progress = len(records) > MIN_NUM_RECS_PROGRESS
    for idx, rec in enumerate(
        tqdm(records, disable=not show_progress, desc="SMILES"), 1
    ):
        result = mol_block_to_smiles(rec.mol_block, engine)
        if failures is not None and engine is not None and not result.ok:
            failures[f"{result.status}: {result.reason}"] += 1
        row = {
            "RecordIndex": str(idx),
            "MoleculeName": rec.name,
            "SMILES": result.smiles,
            "SMILES_Status": result.status,
        }
        for col, tag in tag_columns:
            row[col] = rec.tags.get(tag, "")
        rows.append(row)
    return rows


def to_dataframe(rows: List[Dict[str, str]], columns: List[str]) -> pd.DataFrame:
    """The rows as Pandas DataFrame, all values are strings."""
    return pd.DataFrame(rows, columns=columns, dtype=str)


def encode_csv(rows: List[Dict[str, str]], columns: List[str]) -> str:
    """Encode the rows as CSV text with a header line and a trailing newline.
    Fields are only quoted when they contain a comma, a quote or a newline."""
    return to_dataframe(rows, columns).to_csv(index=False, lineterminator="\n")


def write_csv(rows: List[Dict[str, str]], columns: List[str], fn: str):
    """Write the rows as UTF-8 encoded CSV file."""
    to_dataframe(rows, columns).to_csv(fn, index=False, lineterminator="\n", encoding="utf-8")


def preview(
    rows: List[Dict[str, str]], columns: List[str], n: int = PREVIEW_ROWS
) -> pd.DataFrame:
    """DataFrame of the first `n` rows."""
    return to_dataframe(rows[:n], columns)
