import io

import pytest

from specialresource.yamlscan import YAMLScanError, YAMLScanner, split_documents

TWO_DOCS = b"a: 1\n---\nb: 2\n"


def test_splits_on_separator():
    assert split_documents(TWO_DOCS) == [b"a: 1\n", b"b: 2\n"]


def test_empty_input_has_no_documents():
    assert split_documents(b"") == []


def test_crlf_is_normalised():
    assert split_documents(b"a: 1\r\n---\r\nb: 2\r\n") == split_documents(TWO_DOCS)


def test_missing_final_newline_is_added():
    assert split_documents(b"a: 1\n---\nb: 2") == split_documents(TWO_DOCS)


def test_separator_with_trailing_spaces():
    assert split_documents(b"a: 1\n---   \nb: 2\n") == split_documents(TWO_DOCS)


def test_separator_followed_by_text_is_content():
    data = b"a: 1\n--- # note\nb: 2\n"
    assert split_documents(data) == [data]


def test_leading_separator_stays_in_document():
    data = b"---\na: 1\n"
    assert split_documents(data) == [data]


def test_consecutive_separators():
    assert split_documents(b"a: 1\n---\n---\nb: 2\n") == [b"a: 1\n", b"---\nb: 2\n"]


def test_documents_join_back_without_separators():
    data = b"kind: A\nname: x\n---\nkind: B\n---\nkind: C\n"
    docs = split_documents(data)
    assert len(docs) == 3
    assert b"---\n".join(docs) == data
    assert all(doc.endswith(b"\n") for doc in docs)


def test_text_input_matches_bytes():
    assert split_documents(TWO_DOCS.decode()) == split_documents(TWO_DOCS)


def test_stream_input():
    assert split_documents(io.BytesIO(TWO_DOCS)) == split_documents(TWO_DOCS)


def test_scanner_can_be_iterated_twice():
    scanner = YAMLScanner(TWO_DOCS)
    first = list(scanner)
    second = list(scanner)
    assert len(first) == 2
    assert first == second
    assert first == split_documents(TWO_DOCS)


def test_unsupported_input_raises():
    with pytest.raises(YAMLScanError):
        YAMLScanner(123)


def test_failing_stream_raises():
    class _Broken:
        def read(self):
            raise OSError("disk gone")

    with pytest.raises(YAMLScanError, match="disk gone"):
        YAMLScanner(_Broken())