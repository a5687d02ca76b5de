"""Tests for the line stores: sink durability, checkpoint loading, word reading."""

from __future__ import annotations

from pathlib import Path

import pytest

from eswil.errors import StoreFormatError
from eswil.models import DefinitionRecord, WordRecord
from eswil.store.checkpoint import load_processed_ids, split_pending
from eswil.store.sink import OutputSink, truncate_torn_tail
from eswil.store.words import read_words


# ---------------------------------------------------------------------------
# OutputSink
# ---------------------------------------------------------------------------

class TestOutputSink:
    def test_writes_tab_separated_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "words"
        with OutputSink(path, append=False) as sink:
            sink.write(WordRecord(1, "ABAK").to_fields())
            sink.write(WordRecord(2, "ABECADŁO").to_fields())
        assert path.read_text(encoding="utf-8") == "1\tABAK\n2\tABECADŁO\n"
        assert sink.written == 2

    def test_failure_marker_written_in_place_of_body(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        with OutputSink(path) as sink:
            sink.write(DefinitionRecord(3, "ABAK", None).to_fields())
        assert path.read_text(encoding="utf-8") == "3\tABAK\t#FETCH-FAILED#\n"

    def test_append_keeps_existing_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        path.write_text("2\tb\tx\n", encoding="utf-8")
        with OutputSink(path, append=True) as sink:
            sink.write(("3", "c", "y"))
        assert path.read_text(encoding="utf-8") == "2\tb\tx\n3\tc\ty\n"

    def test_overwrite_mode_truncates(self, tmp_path: Path) -> None:
        path = tmp_path / "words"
        path.write_text("9\told\n", encoding="utf-8")
        with OutputSink(path, append=False) as sink:
            sink.write(("1", "new"))
        assert path.read_text(encoding="utf-8") == "1\tnew\n"

    def test_syncs_every_n_records(self, tmp_path: Path, monkeypatch) -> None:
        synced = []
        monkeypatch.setattr("eswil.store.sink.os.fsync", lambda fd: synced.append(fd))
        with OutputSink(tmp_path / "out", sync_every=3) as sink:
            for i in range(7):
                sink.write((str(i), "w"))
            assert len(synced) == 2
        # close() syncs the remainder
        assert len(synced) == 3

    def test_synced_records_are_on_disk_before_close(self, tmp_path: Path) -> None:
        path = tmp_path / "out"
        sink = OutputSink(path, sync_every=2).open()
        try:
            for i in range(3):
                sink.write((str(i), "w", "d"))
            # Simulates a kill right after the first sync: only the synced
            # records are visible, and no torn line.
            on_disk = path.read_text(encoding="utf-8")
            assert on_disk == "0\tw\td\n1\tw\td\n"
        finally:
            sink.close()
        assert path.read_text(encoding="utf-8").count("\n") == 3

    def test_write_before_open_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError):
            OutputSink(tmp_path / "out").write(("1",))

    def test_rejects_non_positive_batch(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            OutputSink(tmp_path / "out", sync_every=0)

    def test_append_repairs_torn_tail(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        path.write_text("1\ta\tx\n2\tb\tpartial defin", encoding="utf-8")
        with OutputSink(path, append=True) as sink:
            sink.write(("2", "b", "full"))
        assert path.read_text(encoding="utf-8") == "1\ta\tx\n2\tb\tfull\n"


class TestTruncateTornTail:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert truncate_torn_tail(tmp_path / "nope") == 0

    def test_clean_file_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "f"
        path.write_bytes(b"a\nb\n")
        assert truncate_torn_tail(path) == 0
        assert path.read_bytes() == b"a\nb\n"

    def test_single_torn_line_removed_entirely(self, tmp_path: Path) -> None:
        path = tmp_path / "f"
        path.write_bytes(b"torn")
        assert truncate_torn_tail(path) == 4
        assert path.read_bytes() == b""

    def test_long_torn_tail(self, tmp_path: Path) -> None:
        path = tmp_path / "f"
        path.write_bytes(b"ok\n" + b"x" * 10000)
        assert truncate_torn_tail(path) == 10000
        assert path.read_bytes() == b"ok\n"


# ---------------------------------------------------------------------------
# Checkpoint
# ---------------------------------------------------------------------------

class TestLoadProcessedIds:
    def test_missing_store_is_empty(self, tmp_path: Path) -> None:
        assert load_processed_ids(tmp_path / "output") == frozenset()

    def test_reads_id_column(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        path.write_text("1\ta\tx\n\n2\tb\t#FETCH-FAILED#\n", encoding="utf-8")
        assert load_processed_ids(path) == frozenset({1, 2})

    def test_ignores_unterminated_trailing_line(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        path.write_text("1\ta\tx\n2\tb\tpar", encoding="utf-8")
        assert load_processed_ids(path) == frozenset({1})

    def test_ignores_lines_without_id(self, tmp_path: Path) -> None:
        path = tmp_path / "output"
        path.write_text("garbage\n5\te\tz\n", encoding="utf-8")
        assert load_processed_ids(path) == frozenset({5})

    def test_split_pending(self) -> None:
        words = [WordRecord(1, "a"), WordRecord(2, "b"), WordRecord(3, "c")]
        pending, done = split_pending(words, frozenset({2}))
        assert [w.id for w in pending] == [1, 3]
        assert [w.id for w in done] == [2]


# ---------------------------------------------------------------------------
# Word store
# ---------------------------------------------------------------------------

class TestReadWords:
    def test_reads_records(self, tmp_path: Path) -> None:
        path = tmp_path / "words"
        path.write_text("101\tABAK\n\n102\tABECADŁO  \n", encoding="utf-8")
        assert read_words(path) == [WordRecord(101, "ABAK"), WordRecord(102, "ABECADŁO")]

    def test_malformed_line_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "words"
        path.write_text("101\tABAK\nnot-a-record\n", encoding="utf-8")
        with pytest.raises(StoreFormatError) as info:
            read_words(path)
        assert info.value.line_no == 2

    def test_missing_store_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_words(tmp_path / "words")
