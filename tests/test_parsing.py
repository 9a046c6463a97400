import pytest

from penetra.parsing import SimplestParsing


def test_find_moves_past_match():
    p = SimplestParsing("header: value tail")
    assert p.find("value")
    assert p().read() == " tail"


def test_find_handles_partial_prefix():
    p = SimplestParsing("aab rest")
    assert p.find("ab")
    assert p().read() == " rest"


def test_find_missing_goes_to_end():
    p = SimplestParsing("nothing here")
    assert not p.find("absent")
    assert p().read() == ""


def test_find_successive_occurrences():
    p = SimplestParsing("x=1 x=2")
    assert p.find("x=")
    assert p.find("x=")
    assert p().read() == "2"
    assert not p.find("x=")


def test_jump_separators():
    p = SimplestParsing(" \t\r\n  word")
    assert p.jump_separators()
    assert p().read() == "word"


def test_jump_separators_at_end():
    p = SimplestParsing("   \n\t")
    assert not p.jump_separators()
    assert p().read() == ""


def test_jump_separators_without_whitespace_stays():
    p = SimplestParsing("abc")
    assert p.jump_separators()
    assert p().read() == "abc"


def test_check_if_next_string_match():
    p = SimplestParsing("begin block")
    assert p.check_if_next_string("begin")
    assert p().read() == " block"


def test_check_if_next_string_mismatch_restores_position():
    p = SimplestParsing("begin block")
    assert not p.check_if_next_string("block")
    assert not p.check_if_next_string("begin block and more")
    assert p().read() == "begin block"


def test_load_file(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("vertices 3\n1 2 3\n", encoding="utf-8")
    p = SimplestParsing()
    p.load(str(path))
    assert p.find("vertices")
    assert p.jump_separators()
    assert p.check_if_next_string("3")
    assert p().read() == "\n1 2 3\n"


def test_load_appends_and_keeps_position(tmp_path):
    path = tmp_path / "more.txt"
    path.write_text(" second", encoding="utf-8")
    p = SimplestParsing("first")
    assert p.check_if_next_string("fi")
    p.load(path)
    assert p().read() == "rst second"


def test_load_missing_file_raises(tmp_path):
    p = SimplestParsing()
    with pytest.raises(ValueError, match="Unable to open"):
        p.load(str(tmp_path / "missing.txt"))