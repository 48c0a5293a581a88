import logging

import pytest

from services.methods import METHOD_SOURCES, method_info, normalize_method_key


@pytest.mark.parametrize(
    "label",
    ["navy", "NAVY", "  us_navy ", "us-navy", "U.S. Navy", "usnavy"],
)
def test_navy_aliases(label):
    assert normalize_method_key(label) == "navy"


@pytest.mark.parametrize("label", ["deurenberg", "Deurenberg1991", " d1991 "])
def test_deurenberg_aliases(label):
    assert normalize_method_key(label) == "deurenberg"


@pytest.mark.parametrize("label", ["", None, "bogus", "   ", "jackson-pollock"])
def test_unknown_or_empty_defaults_to_deurenberg(label, caplog):
    with caplog.at_level(logging.WARNING, logger="services.methods"):
        assert normalize_method_key(label) == "deurenberg"
    assert caplog.records, "a warning should be logged"


def test_known_alias_logs_nothing(caplog):
    with caplog.at_level(logging.WARNING, logger="services.methods"):
        normalize_method_key("us-navy")
    assert not caplog.records


@pytest.mark.parametrize("label", ["navy", "U.S. Navy", "d1991", "bogus", ""])
def test_idempotent(label):
    once = normalize_method_key(label)
    assert normalize_method_key(once) == once


def test_non_string_input_does_not_raise():
    assert normalize_method_key(42) == "deurenberg"


def test_method_info_resolves_aliases():
    info = method_info("US_NAVY")

    assert info["key"] == "navy"
    assert info["name"] == METHOD_SOURCES["navy"]["name"]
    assert info["note"]


def test_method_info_unknown_falls_back():
    assert method_info("whatever")["name"] == "Deurenberg (1991)"
