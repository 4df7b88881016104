import pytest

from curvelab.core.traces import Trace, TraceKind
from curvelab.utils import (
    ImportFormatError,
    detect_delimiter,
    parse_xy_text,
    read_xy_upload,
    trace_to_csv,
)


@pytest.mark.parametrize("text, delim", [
    ("1,2\n3,4", ","),
    ("1;2\n3;4", ";"),
    ("1\t2\n3\t4", "\t"),
    ("1;2,5\n3;4", ";"),
])
def test_detect_delimiter(text, delim):
    assert detect_delimiter(text.splitlines()) == delim


def test_parse_skips_header_and_bad_rows():
    text = "x,y\n1,2\n\n3,abc\n4\n5 ,6\n7,inf\n"
    df = parse_xy_text(text)
    assert list(df.columns) == ["x", "y"]
    assert df["x"].tolist() == [1.0, 5.0]
    assert df["y"].tolist() == [2.0, 6.0]


def test_parse_semicolon_with_decimal_points():
    df = parse_xy_text("tempo;valor\n0.5;1.25\n1.5;2.75\n")
    assert df.values.tolist() == [[0.5, 1.25], [1.5, 2.75]]


def test_parse_numeric_first_row_is_kept():
    df = parse_xy_text("1\t10\n2\t20\n")
    assert len(df) == 2


@pytest.mark.parametrize("text", ["", "\n\n", "x,y\n", "a,b\nc,d\n"])
def test_parse_without_numbers_fails(text):
    with pytest.raises(ImportFormatError):
        parse_xy_text(text)


def test_read_upload_from_bytes_with_bom():
    df = read_xy_upload("\ufeffx,y\n1,2\n".encode("utf-8"))
    assert df.values.tolist() == [[1.0, 2.0]]


def test_read_upload_from_file_like():
    import io

    buf = io.BytesIO(b"1,2\n3,4\n")
    buf.read()
    df = read_xy_upload(buf)
    assert len(df) == 2


def test_trace_to_csv():
    assert trace_to_csv({"x": [1, 2.5], "y": [3, -4]}) == "x,y\n1.0,3.0\n2.5,-4.0\n"
    tr = Trace("t", TraceKind.POINTS, (0.0,), (1.0,), "#000")
    assert trace_to_csv(tr) == "x,y\n0.0,1.0\n"
