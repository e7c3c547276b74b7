"""Tests for the Section document tree."""

import pytest

from zpl_core import Section, decode
from zpl_core.errors import NotFoundError, ZplTypeError


def make_section():
    sec = Section()
    sec.add_value("verbose", "1")
    sec.add_value("iothreads", "4")
    sec.add_value("ratio", "0.25")
    sec.add_value("name", "queue")
    sec.add_value("bind", "tcp://eth0:5556")
    sec.add_value("bind", "inproc://device")
    return sec


class TestBuilding:
    def test_add_value_accumulates(self):
        sec = make_section()
        assert sec.properties["bind"] == ["tcp://eth0:5556", "inproc://device"]

    def test_section_created_once(self):
        sec = Section()
        child = sec.section("main")
        assert sec.section("main") is child
        assert sec.sections == {"main": child}


class TestGetters:
    def test_get_bool(self):
        assert make_section().get_bool("verbose") is True

    def test_get_int(self):
        assert make_section().get_int("iothreads") == 4

    def test_get_float(self):
        assert make_section().get_float("ratio") == 0.25

    def test_get_string(self):
        assert make_section().get_string("name") == "queue"

    def test_get_values(self):
        assert make_section().get_values("bind") == ["tcp://eth0:5556", "inproc://device"]

    def test_missing(self):
        with pytest.raises(NotFoundError):
            make_section().get_int("nope")

    def test_missing_is_key_error(self):
        with pytest.raises(KeyError):
            make_section().get_values("nope")

    def test_more_than_one_value(self):
        with pytest.raises(ZplTypeError, match="single value"):
            make_section().get_string("bind")

    def test_unparsable(self):
        with pytest.raises(ZplTypeError) as exc:
            make_section().get_int("name")
        assert exc.value.expected == "Int32"
        assert exc.value.value == "queue"

    def test_get_int_is_32_bit(self):
        sec = Section()
        sec.add_value("big", "2147483648")
        sec.add_value("low", "-2147483648")
        assert sec.get_int("low") == -2**31
        with pytest.raises(ZplTypeError, match="Int32"):
            sec.get_int("big")

    def test_get_float_is_32_bit(self):
        sec = Section()
        sec.add_value("huge", "1e39")
        with pytest.raises(ZplTypeError, match="Float32"):
            sec.get_float("huge")


class TestDecodeIntoSection:
    def test_tree(self):
        data = b"version = 1\nmain\n    frontend\n        bind = a\n    backend\n        bind = b\n"
        root = decode(data, Section())
        assert root.get_int("version") == 1
        main = root.sections["main"]
        assert main.sections["frontend"].get_string("bind") == "a"
        assert main.sections["backend"].get_string("bind") == "b"

    def test_reopened_section_merges(self):
        data = b"main\n    a = 1\nother = x\nmain\n    a = 2\n    b = 3\n"
        root = decode(data, Section())
        main = root.sections["main"]
        assert main.get_values("a") == ["1", "2"]
        assert main.get_int("b") == 3
