"""Readers for training-set files and command line vectors."""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from ..core.errors import ParseError
from ..core.types import Instance

_FIELD_SEP = re.compile(r"\s*,\s*|\s+")
_EMPTY_FIELD = re.compile(r"^,|,\s*,|,$")
# a dash directly after a digit or dot separates values; any other dash is a sign
_VECTOR_SEP = re.compile(r"[,;\s]+|(?<=[\d.])-")


def _normalise_lines(
    text: str, width: int, source: str
) -> tuple[str, List[tuple[int, str]]]:
    rows: List[str] = []
    kept: List[tuple[int, str]] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if _EMPTY_FIELD.search(line):
            raise ParseError(f"{source}:{number}: empty field in {raw!r}")
        fields = _FIELD_SEP.split(line)
        if len(fields) != width:
            raise ParseError(
                f"{source}:{number}: expected {width} values, found {len(fields)}"
            )
        rows.append(" ".join(fields))
        kept.append((number, line))
    return "\n".join(rows), kept


def read_training_set(
    path: str | Path, input_size: int, output_size: int
) -> List[Instance]:
    """Load ``path`` as a list of :class:`Instance`.

    Every non-blank line holds ``input_size + output_size`` numbers separated
    by commas and/or whitespace; the first ``input_size`` are the input.
    """

    path = Path(path)
    width = input_size + output_size
    text, kept = _normalise_lines(path.read_text(), width, str(path))
    if not kept:
        return []

    df = pd.read_csv(io.StringIO(text), sep=r"\s+", header=None, dtype=str)
    values = df.apply(pd.to_numeric, errors="coerce")
    bad_rows = np.flatnonzero(values.isna().to_numpy().any(axis=1))
    if bad_rows.size:
        number, line = kept[int(bad_rows[0])]
        raise ParseError(f"{path}:{number}: non-numeric value in {line!r}")

    matrix = values.to_numpy(dtype=np.float64)
    return [
        Instance(inputs=row[:input_size].copy(), outputs=row[input_size:].copy())
        for row in matrix
    ]


def parse_vector(text: str, dtype=np.float64) -> np.ndarray:
    """Parse ``"1-2-3"``, ``"0.5,-0.2"`` or ``"0.5 0.3"`` into a vector."""

    tokens = [token for token in _VECTOR_SEP.split(text.strip()) if token]
    if not tokens:
        raise ParseError(f"no values in vector {text!r}")
    try:
        if np.issubdtype(np.dtype(dtype), np.integer):
            values = [int(token) for token in tokens]
        else:
            values = [float(token) for token in tokens]
    except ValueError as exc:
        raise ParseError(f"cannot parse vector {text!r}: {exc}") from exc
    return np.asarray(values, dtype=dtype)


__all__ = ["parse_vector", "read_training_set"]
