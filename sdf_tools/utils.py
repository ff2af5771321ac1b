#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utilities for reading the input files and reporting results.
"""

import gzip
import re
import time
import zlib
from pathlib import Path
from typing import List, Tuple, Union

SD_EXTENSIONS = (".sdf", ".sd", ".sdf.gz", ".sd.gz")
GZIP_MAGIC = b"\x1f\x8b"
# Compressions that are recognized, but not supported: (magic bytes pattern, suffix)
OTHER_COMPRESSIONS = {
    "bzip2": (re.compile(rb"BZh[1-9]"), ".bz2"),
    "xz": (re.compile(rb"\xfd7zXZ\x00"), ".xz"),
    "zip": (re.compile(rb"PK\x03\x04"), ".zip"),
}


class ConversionError(Exception):
    """A problem with the whole file, which stops the conversion."""


class InputFileError(ConversionError):
    """The input file could not be read or decompressed."""


class UnsupportedCompressionError(ConversionError):
    """The input file uses a compression that can not be decoded."""


class EngineUnavailableError(ConversionError):
    """No SMILES engine is available and the export without SMILES was not allowed."""


class NoRecordsError(ConversionError):
    """The input did not contain any valid molecule record."""


def check_extension(fn: str) -> bool:
    """Whether the file name has one of the SD file extensions (optionally gzipped)."""
    return str(fn).lower().endswith(SD_EXTENSIONS)


def is_gzip(data: bytes, fn: str = "") -> bool:
    """Gzip is detected by the `.gz` suffix or by the magic bytes."""
    return str(fn).lower().endswith(".gz") or data[:2] == GZIP_MAGIC


def detect_other_compression(data: bytes, fn: str = "") -> str:
    """Return the name of an unsupported compression, or an empty string."""
    fn = str(fn).lower()
    for name, (magic, suffix) in OTHER_COMPRESSIONS.items():
        if magic.match(data) or fn.endswith(suffix):
            return name
    return ""


def decode_input(data: bytes, fn: str = "") -> str:
    """Decompress (gzip) and decode the raw content of an input file to text.

    Parameters:
    ===========
    data: the raw bytes of the file
    fn: the file name, only used for detecting the compression

    Returns:
    ========
    The text content. Invalid UTF-8 sequences are replaced.
    """
    if is_gzip(data, fn):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise InputFileError(f"Could not decompress gzipped input `{fn}`: {e}") from e
    else:
        compression = detect_other_compression(data, fn)
        if compression:
            raise UnsupportedCompressionError(
                f"Unsupported compression ({compression}) for `{fn}`. Only gzip is supported."
            )
    return data.decode("utf-8-sig", errors="replace")


def read_input(fn: Union[str, Path]) -> str:
    """Read an SD file (optionally gzipped) and return its text."""
    try:
        data = Path(fn).read_bytes()
    except OSError as e:
        raise InputFileError(f"Could not read `{fn}`: {e}") from e
    return decode_input(data, str(fn))


class MeasureRuntime:
    """Measure the elapsed time between two points in the code."""

    def __init__(self):
        self.start = time.time()

    def elapsed(self, show=True, msg="Runtime"):
        """Print (show=True) or return (show=False, in seconds) the runtime since start."""
        run_time = time.time() - self.start
        if not show:
            return run_time
        time_unit = "s"
        if run_time > 120:
            run_time /= 60
            time_unit = "min"
        print(f"{msg}: {run_time:.1f} {time_unit}")


class Results:
    """
    Collects result entries for display as a two-column text table.

    Entries are (name, value) tuples. A plain string starts a new section.
    Floats are shown with three decimals.
    """

    def __init__(self, headers=("Result", "Value")):
        self.headers = headers
        self.list: List[Tuple[str, str]] = []

    def add(self, *res):
        for r in res:
            if isinstance(r, str):
                if len(self.list) > 0:
                    self.list.append((" ", " "))
                self.list.append((r, " "))
                continue
            name, value = r
            if isinstance(value, float):
                value = f"{value:.3f}"
            self.list.append(("• " + str(name), str(value)))

    def show(self) -> str:
        col0_max = max([len(x[0]) for x in self.list] + [len(self.headers[0])])
        col1_max = max([len(x[1]) for x in self.list] + [len(self.headers[1])])
        out = [f"{self.headers[0]:{col0_max}s}  {self.headers[1]:>{col1_max}s}"]
        out.append("―" * (col0_max + col1_max + 2))
        for name, value in self.list:
            out.append(f"{name:{col0_max}s}  {value:>{col1_max}s}")
        return "\n".join(out)

    def __str__(self):
        return self.show()

    def __repr__(self):
        return self.show()
