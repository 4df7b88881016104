import io
import re
from typing import List, Mapping, Union

import numpy as np
import pandas as pd

from .core.traces import Trace

DELIMITERS = [",", ";", "\t"]
SAMPLE_LINES = 5


class ImportFormatError(ValueError):
    """Raised when an uploaded table holds no usable numeric rows."""


def to_numeric_safe(series: pd.Series):
    return pd.to_numeric(series, errors="coerce")


def detect_delimiter(lines: List[str]) -> str:
    """Most frequent candidate delimiter in the first few lines."""
    sample = lines[:SAMPLE_LINES]
    counts = [sum(ln.count(d) for ln in sample) for d in DELIMITERS]
    return DELIMITERS[counts.index(max(counts))]


def _is_number(text: str) -> bool:
    try:
        return bool(np.isfinite(float(re.sub(r"\s+", "", text))))
    except ValueError:
        return False


def parse_xy_text(text: str) -> pd.DataFrame:
    """Parse two numeric columns from delimited text.

    The delimiter (comma, semicolon or tab) is detected from the first
    lines; a non-numeric first row is taken as a header. Rows with fewer
    than two fields or non-finite values are dropped.
    """
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if not lines:
        raise ImportFormatError("No data found in file.")
    delim = detect_delimiter(lines)

    first = [p.strip() for p in lines[0].split(delim)]
    start = 0
    if len(first) >= 2 and not (_is_number(first[0]) and _is_number(first[1])):
        start = 1

    rows = []
    for ln in lines[start:]:
        parts = ln.split(delim)
        if len(parts) < 2:
            continue
        rows.append([re.sub(r"\s+", "", p) for p in parts[:2]])

    df = pd.DataFrame(rows, columns=["x", "y"])
    for c in df.columns:
        df[c] = to_numeric_safe(df[c])
    df = df.replace([np.inf, -np.inf], np.nan).dropna(how="any")
    if df.empty:
        raise ImportFormatError(
            "No numeric data found. Check the (x,y) format and the separator."
        )
    return df.astype(float).reset_index(drop=True)


def read_xy_upload(uploaded_file) -> pd.DataFrame:
    if isinstance(uploaded_file, str):
        return parse_xy_text(uploaded_file)
    if isinstance(uploaded_file, bytes):
        raw_bytes = uploaded_file
    else:
        # Streamlit UploadedFile persists across reruns
        if hasattr(uploaded_file, "seek"):
            uploaded_file.seek(0)
        raw_bytes = (
            uploaded_file.getvalue()
            if hasattr(uploaded_file, "getvalue")
            else uploaded_file.read()
        )
    if isinstance(raw_bytes, bytes):
        content = raw_bytes.decode("utf-8-sig", errors="ignore")
    else:
        content = str(raw_bytes)
    return parse_xy_text(content.lstrip("\ufeff"))


def trace_to_csv(data: Union[Trace, Mapping[str, list]]) -> str:
    if isinstance(data, Trace):
        data = data.data()
    out = io.StringIO()
    out.write("x,y\n")
    for x, y in zip(data["x"], data["y"]):
        out.write(f"{float(x)!r},{float(y)!r}\n")
    return out.getvalue()


__all__ = [
    "ImportFormatError",
    "to_numeric_safe",
    "detect_delimiter",
    "parse_xy_text",
    "read_xy_upload",
    "trace_to_csv",
]
