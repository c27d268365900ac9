import pytest
from unittest.mock import MagicMock

from studydocs.core.exceptions import ExtractionError, StorageError
from studydocs.search.extractor import ContentExtractor
from studydocs.search.mapper import IndexDocumentMapper
from studydocs.search.record import CONTENT_LIMIT


@pytest.fixture
def storage():
    return MagicMock()


@pytest.fixture
def parser():
    return MagicMock()


class TestContentExtractor:
    def test_empty_key_skips_storage(self, storage, parser):
        extractor = ContentExtractor(storage, parser)
        assert extractor.extract_text(None) is None
        assert extractor.extract_text("") is None
        storage.download_bytes.assert_not_called()

    def test_returns_stripped_text(self, storage, parser):
        storage.download_bytes.return_value = b"data"
        parser.extract_text.return_value = "  Nội dung tài liệu \n"

        extractor = ContentExtractor(storage, parser, max_length=500)
        assert extractor.extract_text("documents/a.pdf", "a.pdf") == "Nội dung tài liệu"
        parser.extract_text.assert_called_once_with(b"data", 500, "a.pdf")

    def test_missing_object_returns_none(self, storage, parser):
        storage.download_bytes.return_value = None
        assert ContentExtractor(storage, parser).extract_text("documents/gone.pdf") is None
        parser.extract_text.assert_not_called()

    def test_whitespace_only_returns_none(self, storage, parser):
        storage.download_bytes.return_value = b"data"
        parser.extract_text.return_value = " \n\t "
        assert ContentExtractor(storage, parser).extract_text("documents/blank.txt") is None

    @pytest.mark.parametrize("error", [
        ExtractionError("corrupt"),
        StorageError("denied"),
        RuntimeError("unexpected"),
    ])
    def test_failures_become_none(self, storage, parser, error):
        storage.download_bytes.return_value = b"data"
        parser.extract_text.side_effect = error
        assert ContentExtractor(storage, parser).extract_text("documents/a.pdf") is None

    def test_storage_failure_becomes_none(self, storage, parser):
        storage.download_bytes.side_effect = StorageError("unreachable")
        assert ContentExtractor(storage, parser).extract_text("documents/a.pdf") is None

    def test_real_parser_caps_length(self, storage):
        storage.download_bytes.return_value = ("a" * 20_000).encode()
        text = ContentExtractor(storage, max_length=10_000).extract_text("documents/big.txt", "big.txt")
        assert len(text) == 10_000

    def test_surrounding_whitespace_does_not_shorten_capped_text(self, storage):
        storage.download_bytes.return_value = ("\n\n   " + "a" * 20_000 + "\n").encode()
        text = ContentExtractor(storage, max_length=10_000).extract_text("documents/big.txt", "big.txt")
        assert text == "a" * 10_000

    def test_whitespace_at_cut_keeps_full_length(self, storage):
        storage.download_bytes.return_value = ("a" * 9_999 + "   " + "b" * 5_000).encode()
        text = ContentExtractor(storage, max_length=10_000).extract_text("documents/big.txt", "big.txt")
        assert len(text) == 10_000
        assert text.startswith("a")

    def test_indexing_twice_keeps_exact_content_limit(self, storage, make_snapshot):
        storage.download_bytes.return_value = ("\n\n   " + "a" * 20_000).encode()
        snapshot = make_snapshot(file_name="notes.txt", object_name="documents/1/notes.txt")
        mapper = IndexDocumentMapper(ContentExtractor(storage))
        first = mapper.to_search_record(snapshot)
        second = mapper.to_search_record(snapshot)

        assert len(first.content) == CONTENT_LIMIT
        assert second.content == first.content
