"""
Tests for the datacache-admin command line tool.
"""

import pytest

from datacache.scripts.cache_admin import build_parser, main


@pytest.fixture
def db_args(tmp_path):
    return ["--db", str(tmp_path / "cache.db")]


def test_set_get_count_remove(db_args, capsys):
    """Test a full round of commands against one database file."""
    assert main(db_args + ["set", "user:42", '{"name": "Ann"}']) == 0

    assert main(db_args + ["get", "user:42"]) == 0
    assert capsys.readouterr().out == '{"name": "Ann"}\n'

    assert main(db_args + ["count"]) == 0
    assert capsys.readouterr().out == "1\n"

    assert main(db_args + ["keys"]) == 0
    assert capsys.readouterr().out == "user:42\n"

    assert main(db_args + ["remove", "user:42"]) == 0
    assert main(db_args + ["remove", "user:42"]) == 1


def test_get_miss_exits_with_error(db_args, capsys):
    assert main(db_args + ["get", "missing"]) == 1
    assert capsys.readouterr().out == ""


def test_set_with_zero_ttl_is_stale(db_args):
    assert main(db_args + ["set", "a", "x", "--ttl", "0"]) == 0
    assert main(db_args + ["get", "a"]) == 1


def test_clear(db_args, capsys):
    main(db_args + ["set", "a", "x"])
    main(db_args + ["set", "b", "y"])

    assert main(db_args + ["clear"]) == 0
    main(db_args + ["count"])
    assert capsys.readouterr().out == "0\n"


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
