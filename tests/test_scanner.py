import io

import pytest

from postpress.scanner import (
    MAX_HEADER_SIZE,
    MissingBlockError,
    MissingSeparatorError,
    ScanError,
    scan,
    scan_body,
    scan_header,
)

VALID = (
    b"---\n"
    b"title: Hello\n"
    b"\n"
    b"published: 2024-01-01\n"
    b"---\n"
    b"# Heading\n"
    b"\n"
    b"    indented code\n"
    b"\n"
    b"last line  \n"
    b"end\n"
)


def test_scan_splits_header_and_body():
    result = scan(VALID)
    assert result.header == b"title: Hello\npublished: 2024-01-01"
    assert result.body == b"# Heading\n\n    indented code\n\nlast line  \nend"


def test_scan_functions_work_on_streams():
    assert scan_header(io.BytesIO(VALID)).startswith(b"title: Hello")
    assert scan_body(io.BytesIO(VALID)).endswith(b"end")


def test_scan_handles_crlf_line_endings():
    result = scan(b"---\r\ntitle: a\r\n---\r\nline one\r\n\r\nline two\r\n")
    assert result.header == b"title: a"
    assert result.body == b"line one\n\nline two"


def test_scan_allows_blank_lines_before_header_and_longer_separators():
    result = scan(b"\n\n----\ntitle: a\n-----\nbody")
    assert result.header == b"title: a"
    assert result.body == b"body"


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"title: a\nbody\n",
        b"---\ntitle: a\nbody\n",
        b"---\ntitle: a\n---\nbody\n---\nmore body\n",
        b"title: a\n---\n---\nbody\n",
    ],
    ids=["empty", "no-separator", "one-separator", "three-separators", "text-first"],
)
def test_wrong_separator_count_fails(data):
    with pytest.raises(MissingSeparatorError) as exc:
        scan(data)
    assert str(exc.value) == "missing separator lines"


def test_missing_header():
    with pytest.raises(MissingBlockError) as exc:
        scan(b"---\n\n   \n---\nbody\n")
    assert exc.value.block == "header"
    assert str(exc.value) == "missing header"


def test_missing_body():
    with pytest.raises(MissingBlockError) as exc:
        scan(b"---\ntitle: a\n---\n\n  \n")
    assert exc.value.block == "body"
    assert str(exc.value) == "missing body"


def test_header_scan_is_bounded():
    oversized = b"---\ndescription: " + b"a" * (MAX_HEADER_SIZE * 2) + b"\n---\nbody\n"
    with pytest.raises(MissingSeparatorError):
        scan_header(io.BytesIO(oversized))
    # The body scan has a larger ceiling and still finds both separators.
    assert scan_body(io.BytesIO(oversized)) == b"body"


def test_scan_errors_share_a_base_class():
    assert issubclass(MissingSeparatorError, ScanError)
    assert issubclass(MissingBlockError, ScanError)
    assert issubclass(ScanError, ValueError)
