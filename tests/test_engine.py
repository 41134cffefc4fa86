import os
import time

import pytest

from propsort.core.engine import SortEngine

UNSORTED_TS = "interface A {\n  b: string;\n  a: string;\n}\n"
SORTED_TS = "interface A {\n  a: string;\n  b: string;\n}\n"


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "a.ts").write_text(UNSORTED_TS, encoding="utf-8")
    (tmp_path / "ok.json").write_text('{"a": 1, "b": 2}\n', encoding="utf-8")
    (tmp_path / "notes.txt").write_text("b\na\n", encoding="utf-8")
    deep = tmp_path / "one" / "two"
    deep.mkdir(parents=True)
    (deep / "deep.css").write_text(".x { z-index: 1; color: red; }\n", encoding="utf-8")
    return tmp_path


def test_dry_run_previews_without_writing(workspace):
    """
    DRY RUN TEST: The sorted text is returned but the file is untouched.
    """
    engine = SortEngine(str(workspace))
    report = engine.sort_file("a.ts", dry_run=True)

    assert report["status"] == "PREVIEW"
    assert report["modified"] is True
    assert report["sorted_content"] == SORTED_TS
    assert (workspace / "a.ts").read_text(encoding="utf-8") == UNSORTED_TS


def test_write_creates_backup(workspace):
    """WRITE TEST: Sorting in place keeps a backup of the original."""
    engine = SortEngine(str(workspace))
    report = engine.sort_file("a.ts", dry_run=False)

    assert report["status"] == "SORTED"
    assert report["written"] is True
    assert report["backup_created"] == "a.ts.propsort.backup"
    assert (workspace / "a.ts").read_text(encoding="utf-8") == SORTED_TS
    assert (workspace / "a.ts.propsort.backup").read_text(encoding="utf-8") == UNSORTED_TS

    # A second run has nothing to do
    again = engine.sort_file("a.ts", dry_run=False)
    assert again["status"] == "UNCHANGED"
    assert again["backup_created"] is None


def test_backups_never_overwrite_each_other(workspace):
    engine = SortEngine(str(workspace))
    engine.sort_file("a.ts", dry_run=False)
    (workspace / "a.ts").write_text(UNSORTED_TS, encoding="utf-8")
    report = engine.sort_file("a.ts", dry_run=False)
    assert report["backup_created"] == "a.ts-1.propsort.backup"


def test_crlf_files_keep_their_line_endings(workspace):
    (workspace / "b.json").write_bytes(b'{\r\n  "b": 1,\r\n  "a": 2\r\n}\r\n')
    SortEngine(str(workspace)).sort_file("b.json", dry_run=False)
    assert (workspace / "b.json").read_bytes() == b'{\r\n  "a": 2,\r\n  "b": 1\r\n}\r\n'


def test_file_errors(workspace):
    engine = SortEngine(str(workspace))
    missing = engine.sort_file("missing.ts")
    assert missing["status"] == "FILE_NOT_FOUND"
    assert missing["success"] is False

    unsupported = engine.sort_file("notes.txt")
    assert unsupported["status"] == "UNSUPPORTED"


def test_engine_options_apply_to_every_file(workspace):
    engine = SortEngine(str(workspace), {"sortOrder": "desc"})
    report = engine.sort_file("ok.json")
    assert report["sorted_content"] == '{"b": 2, "a": 1}\n'
    assert report["file_type"] == "json"


def test_missing_workspace_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        SortEngine(str(tmp_path / "nowhere"))


def test_scan_directory_with_progress_and_depth(workspace):
    """
    SCAN TEST: Only supported files are visited, the depth gate applies,
    and progress is reported once per file.
    """
    engine = SortEngine(str(workspace))
    calls = []
    reports = engine.scan_directory(progress_callback=lambda done, total: calls.append((done, total)))

    assert sorted(r["file_path"] for r in reports) == ["a.ts", "ok.json", os.path.join("one", "two", "deep.css")]
    assert calls == [(1, 3), (2, 3), (3, 3)]

    shallow = engine.scan_directory(max_depth=1)
    assert sorted(r["file_path"] for r in shallow) == ["a.ts", "ok.json"]

    only_ts = engine.scan_directory(extensions=["ts"])
    assert [r["file_path"] for r in only_ts] == ["a.ts"]


def test_summary_counts(workspace):
    engine = SortEngine(str(workspace))
    summary = engine.generate_summary(engine.scan_directory(dry_run=True))

    assert summary["total_files"] == 3
    assert summary["successful"] == 3
    assert summary["success_rate"] == 1.0
    # ok.json is already sorted
    assert summary["unsorted"] == 2
    assert summary["written_to_disk"] == 0
    assert engine.generate_summary([])["total_files"] == 0


def test_cleanup_removes_only_old_backups(workspace):
    engine = SortEngine(str(workspace))
    engine.sort_file("a.ts", dry_run=False)
    backup = workspace / "a.ts.propsort.backup"

    assert engine.cleanup_backups(max_age_hours=1) == 0
    old = time.time() - 10 * 3600
    os.utime(backup, (old, old))
    assert engine.cleanup_backups(max_age_hours=1) == 1
    assert not backup.exists()


if __name__ == "__main__":
    pytest.main([__file__])
