#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
#########################
Convert SD Files into CSV
#########################

Convert SD files (optionally gzipped) into CSV files with one row per molecule,
the generated Smiles and one column for every data field found in the file."""

import sys
import locale
import argparse

from sdf_tools import convert
from sdf_tools.smiles import acquire_engine
from sdf_tools.table import PREVIEW_ROWS
from sdf_tools.utils import ConversionError, NoRecordsError, MeasureRuntime, check_extension


def process(
    in_files: str,  # comma separated list of files
    out_file: str,
    no_smiles_ok: bool,
    preview: int,
    diag: bool,
    verbose: bool,
) -> int:
    fns = in_files.split(",")
    if out_file and len(fns) > 1:
        print("ERROR: `--out_file` can only be used with a single input file.")
        return 1
    timer = MeasureRuntime()
    # The engine is acquired once for all files.
    engine, reasons = acquire_engine()
    if engine is None:
        print("SMILES engine unavailable.")
        if verbose:
            for reason in reasons:
                print(f"  - {reason}")
        if not no_smiles_ok:
            print("Use `--no_smiles_ok` to export the data fields without Smiles.")
            return 1

    num_errors = 0
    for fn in fns:
        if not check_extension(fn):
            print(f"NOTE: `{fn}` does not have an SD file extension (.sdf, .sd, .sdf.gz, .sd.gz).")
        out_fn = out_file if out_file else convert.output_name(fn)
        try:
            result = convert.convert_file(
                fn, out_fn, allow_without_engine=no_smiles_ok, engine=engine
            )
        except NoRecordsError:
            print(f"({fn}) No valid molecule records found.")
            num_errors += 1
            continue
        except ConversionError as e:
            print(f"({fn}) ERROR: {e}")
            num_errors += 1
            continue
        result.diagnostics.engine_reasons = reasons
        print(f"({fn}) {result.diagnostics.status_line()}  -> {out_fn}")
        if diag:
            print(result.diagnostics.report())
            print("")
        if preview > 0:
            print(result.preview(preview).to_string(index=False))
            print("")
    if verbose:
        timer.elapsed()
    return 1 if num_errors > 0 else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="""
Convert SD files into CSV files. The input files may be gzipped
(detected by the `.gz` suffix or by the file content).
The output has one row per molecule record and the columns
`RecordIndex, MoleculeName, SMILES, SMILES_Status`, followed by all data fields
of the file in sorted order. Records without a `M  END` line are skipped.
Records whose structure can not be converted are kept, the reason is given in `SMILES_Status`.

Example:
    $ ./sdf_to_csv.py chembl_sample.sdf.gz --diag
            """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "in_file",
        help="The optionally gzipped SD file. Can also be a comma-separated list of file names.",
    )
    parser.add_argument(
        "-o",
        "--out_file",
        type=str,
        default="",
        help="The output file (default: input name with `.csv` extension). Only for a single input file.",
    )
    parser.add_argument(
        "--no_smiles_ok",
        action="store_true",
        help="Export the data fields without Smiles when no SMILES engine (RDKit) is available.",
    )
    parser.add_argument(
        "--preview",
        type=int,
        nargs="?",
        const=PREVIEW_ROWS,
        default=0,
        help=f"Show the first N rows (default when given without N: {PREVIEW_ROWS}).",
    )
    parser.add_argument(
        "--diag",
        action="store_true",
        help="Show the diagnostics (counts and most frequent failure reasons).",
    )
    parser.add_argument(
        "-v",
        action="store_true",
        help="Turn on verbose status output.",
    )
    args = parser.parse_args()
    print(args)
    # sort the tag columns with the user's collation
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        print(f"NOTE: using the default collation ({e}).")
    sys.exit(
        process(
            args.in_file,
            args.out_file,
            args.no_smiles_ok,
            args.preview,
            args.diag,
            args.v,
        )
    )
