import pytest

from propsort.cli.main import PropSortCLI

UNSORTED_TS = "interface A {\n  b: string;\n  a: string;\n}\n"


def test_check_flags_unsorted_file(tmp_path):
    """
    CHECK TEST: 'check' reports an unsorted file with exit code 1 and
    never writes.
    """
    target = tmp_path / "a.ts"
    target.write_text(UNSORTED_TS, encoding="utf-8")

    assert PropSortCLI().run(["check", str(target)]) == 1
    assert target.read_text(encoding="utf-8") == UNSORTED_TS


def test_sort_writes_file(tmp_path):
    target = tmp_path / "a.ts"
    target.write_text(UNSORTED_TS, encoding="utf-8")

    assert PropSortCLI().run(["sort", "-y", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == "interface A {\n  a: string;\n  b: string;\n}\n"
    assert PropSortCLI().run(["check", str(target)]) == 0


def test_sort_dry_run_leaves_directory_alone(tmp_path):
    (tmp_path / "a.ts").write_text(UNSORTED_TS, encoding="utf-8")
    (tmp_path / "b.json").write_text('{"b": 1, "a": 2}', encoding="utf-8")

    assert PropSortCLI().run(["sort", "--dry-run", "--diff", str(tmp_path)]) == 0
    assert (tmp_path / "b.json").read_text(encoding="utf-8") == '{"b": 1, "a": 2}'
    assert not list(tmp_path.glob("*.propsort.backup"))


def test_flags_and_config_build_options(tmp_path):
    config = tmp_path / "propsort.yaml"
    config.write_text("sortOrder: desc\nnaturalSort: true\n", encoding="utf-8")
    cli = PropSortCLI()
    args = cli.parser.parse_args([
        "check", str(tmp_path), "--config", str(config), "--order", "asc",
        "--custom-order", "id, name", "--go-strategy", "by-size",
    ])
    options = cli.build_options(args)

    assert options["sort_order"] == "asc"
    assert options["naturalSort"] is True
    assert options["custom_order"] == ["id", "name"]
    assert options["sort_struct_fields"] == "by-size"
    assert "case_sensitive" not in options


def test_missing_path_and_bad_config(tmp_path):
    cli = PropSortCLI()
    assert cli.run(["check", str(tmp_path / "missing")]) == 2

    bad = tmp_path / "bad.yaml"
    bad.write_text("- a\n", encoding="utf-8")
    assert cli.run(["check", str(tmp_path), "--config", str(bad)]) == 2


def test_ext_filter_limits_targets(tmp_path):
    (tmp_path / "a.ts").write_text(UNSORTED_TS, encoding="utf-8")
    (tmp_path / "b.json").write_text('{"a": 1}', encoding="utf-8")
    assert PropSortCLI().run(["check", "--ext", "json", str(tmp_path)]) == 0


if __name__ == "__main__":
    pytest.main([__file__])
