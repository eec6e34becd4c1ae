"""Tests for the pass/fail ledger."""

import threading

from parsediff.execution import FileSink, Ledger, MemorySink
from parsediff.execution.ledger import FAILING_FILE, PASSING_FILE


class TestFileSink:
    def test_append_creates_file(self, tmp_path):
        sink = FileSink(tmp_path / "out" / "failing.txt")
        sink.append("a.txt")
        sink.append("b/c.txt")
        assert (tmp_path / "out" / "failing.txt").read_text() == "a.txt\nb/c.txt\n"

    def test_reset_deletes_file(self, tmp_path):
        path = tmp_path / "failing.txt"
        path.write_text("old.txt\n")
        FileSink(path).reset()
        assert not path.exists()

    def test_reset_without_file(self, tmp_path):
        FileSink(tmp_path / "missing.txt").reset()

    def test_multibyte_paths(self, tmp_path):
        sink = FileSink(tmp_path / "failing.txt")
        sink.append("unicode/🗻.txt")
        assert (tmp_path / "failing.txt").read_text(encoding="utf-8") == "unicode/🗻.txt\n"


class TestLedger:
    def test_in_directory(self, tmp_path):
        ledger = Ledger.in_directory(tmp_path)
        ledger.record_failing("a.txt")
        ledger.record_passing("b.txt")
        assert (tmp_path / FAILING_FILE).read_text() == "a.txt\n"
        assert (tmp_path / PASSING_FILE).read_text() == "b.txt\n"

    def test_reset_clears_both(self, tmp_path):
        (tmp_path / FAILING_FILE).write_text("x\n")
        (tmp_path / PASSING_FILE).write_text("y\n")
        Ledger.in_directory(tmp_path).reset()
        assert not (tmp_path / FAILING_FILE).exists()
        assert not (tmp_path / PASSING_FILE).exists()

    def test_in_memory(self):
        ledger = Ledger.in_memory()
        ledger.record_failing("a.txt")
        ledger.reset()
        ledger.record_passing("b.txt")
        assert isinstance(ledger.failing, MemorySink)
        assert ledger.failing.lines == []
        assert ledger.passing.lines == ["b.txt"]

    def test_concurrent_appends_are_not_lost(self, tmp_path):
        ledger = Ledger.in_directory(tmp_path)

        def write(worker):
            for i in range(50):
                ledger.record_failing(f"{worker}/{i}.txt")

        threads = [threading.Thread(target=write, args=(w,)) for w in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = (tmp_path / FAILING_FILE).read_text().splitlines()
        assert len(lines) == 400
        assert len(set(lines)) == 400
