import pytest

from docshield.scan.chunker import chunk_text


class TestChunkText:
    def test_short_text_yields_single_chunk(self) -> None:
        chunks = chunk_text("hello world", 6000, 500)
        assert len(chunks) == 1
        assert chunks[0].text == "hello world"
        assert chunks[0].offset == 0
        assert chunks[0].index == 0

    def test_text_exactly_chunk_size_yields_single_chunk(self) -> None:
        chunks = chunk_text("x" * 100, 100, 10)
        assert len(chunks) == 1

    def test_empty_text_yields_no_chunks(self) -> None:
        assert chunk_text("", 100, 10) == []

    def test_windows_advance_by_size_minus_overlap(self) -> None:
        text = "".join(chr(ord("a") + i % 26) for i in range(250))
        chunks = chunk_text(text, 100, 20)
        assert [c.offset for c in chunks] == [0, 80, 160]
        assert [len(c.text) for c in chunks] == [100, 100, 90]

    def test_consecutive_chunks_overlap_exactly(self) -> None:
        text = "".join(str(i % 10) for i in range(1000))
        chunks = chunk_text(text, 120, 30)
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.text[-30:] == nxt.text[:30]

    def test_chunks_cover_whole_text(self) -> None:
        text = "The quick brown fox jumps over the lazy dog. " * 40
        chunks = chunk_text(text, 97, 13)
        rebuilt = chunks[0].text
        for chunk in chunks[1:]:
            rebuilt += chunk.text[13:]
        assert rebuilt == text
        assert chunks[-1].offset + len(chunks[-1].text) == len(text)

    def test_indices_are_sequential(self) -> None:
        chunks = chunk_text("y" * 500, 100, 0)
        assert [c.index for c in chunks] == [0, 1, 2, 3, 4]

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError, match="chunk_size"):
            chunk_text("abc", 0, 0)

    def test_rejects_overlap_not_smaller_than_size(self) -> None:
        with pytest.raises(ValueError, match="overlap"):
            chunk_text("abc", 10, 10)

    def test_rejects_negative_overlap(self) -> None:
        with pytest.raises(ValueError, match="overlap"):
            chunk_text("abc", 10, -1)
