#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Parsing of multi-record SD files into molecule records.

The parser works on plain text and does not need the RDKit.
Each record keeps its verbatim mol block, so that the structure can be
handed to a SMILES engine later, and the SD data tags as a dict.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

RECORD_DELIMITER = "$$$$"

# `M  END`, case-insensitive, any amount of whitespace between the tokens
M_END = re.compile(r"^M\s+END$", re.IGNORECASE)
TAG_HEADER = re.compile(r"^>\s*<([^>]+)>")


@dataclass
class Record:
    """One molecule entry of an SD file."""

    name: str
    mol_block: str
    tags: Dict[str, str] = field(default_factory=dict)


def normalize_newlines(text: str) -> str:
    """Reduce all line terminators to `\\n`."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_blocks(text: str) -> List[str]:
    """Split the text of an SD file into the raw record chunks.

    A record ends at a line that contains only `$$$$` (surrounding whitespace is ignored).
    A missing delimiter after the last record is tolerated.
    Chunks that contain only whitespace are dropped.
    Trailing whitespace is removed from each chunk, leading lines are kept,
    because the first line of the mol block (the name) may be empty.
    """
    chunks = []
    buffer = []
    for line in normalize_newlines(text).split("\n"):
        if line.strip() == RECORD_DELIMITER:
            chunk = "\n".join(buffer).rstrip()
            if chunk.strip():
                chunks.append(chunk)
            buffer = []
            continue
        buffer.append(line)
    chunk = "\n".join(buffer).rstrip()
    if chunk.strip():
        chunks.append(chunk)
    return chunks


def extract_tags(lines: List[str]) -> Dict[str, str]:
    """Parse the data block of a record into a dict of tag name -> value.

    A value ends at a blank line (which is consumed), at the next line starting with `>`
    (which is not consumed) or at the end of the input.
    Multi-line values keep their internal line breaks.
    Tags with an empty value are omitted, a repeated tag overwrites the earlier value.
    Lines outside of a tag are ignored."""
    tags = {}
    num_lines = len(lines)
    i = 0
    while i < num_lines:
        match = TAG_HEADER.match(lines[i])
        i += 1
        if match is None:
            continue
        key = match.group(1).strip()
        value_lines = []
        while i < num_lines:
            line = lines[i]
            if line.startswith(">"):
                break
            i += 1
            if len(line.strip()) == 0:
                break
            value_lines.append(line)
        value = "\n".join(value_lines).strip()
        if value:
            tags[key] = value
    return tags


def parse_record(chunk: str) -> Optional[Record]:
    """Create a Record from a raw chunk.
    Returns None when the chunk has no `M  END` line."""
    lines = chunk.split("\n")
    m_end_idx = -1
    for idx, line in enumerate(lines):
        if M_END.match(line.strip()):
            m_end_idx = idx
            break
    if m_end_idx < 0:
        return None
    mol_lines = lines[: m_end_idx + 1]
    mol_block = "\n".join(mol_lines) + "\n"
    name = mol_lines[0].strip()
    tags = extract_tags(lines[m_end_idx + 1 :])
    return Record(name=name, mol_block=mol_block, tags=tags)


def count_lines(text: str) -> int:
    """Number of lines, for any line terminator. A final terminator does not start a new line."""
    num_lines = text.count("\n") + text.count("\r") - text.count("\r\n")
    if text and not text.endswith(("\n", "\r")):
        num_lines += 1
    return num_lines


def parse_blocks(chunks: List[str]) -> List[Record]:
    """Parse the chunks from `split_blocks()` into Records (in file order).
    Chunks without a mol block terminator are silently skipped."""
    records = []
    for chunk in chunks:
        rec = parse_record(chunk)
        if rec is None:
            continue
        records.append(rec)
    return records


def parse_sdf(text: str) -> List[Record]:
    """Parse the text of an SD file into a list of Records."""
    return parse_blocks(split_blocks(text))
