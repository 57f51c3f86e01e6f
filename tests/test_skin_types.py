"""Tests for skin-type normalization"""
import pytest

from skinhub.utils.skin_types import VALID_SKIN_TYPES, normalize, validate_and_normalize


def test_normalize_string():
    """Comma-separated input is split, trimmed and lowercased"""
    assert normalize(" Oily,DRY , ,oily ") == {"oily", "dry"}


def test_normalize_list():
    assert normalize(["Sensitive", "  ", "Combination, Normal"]) == {"sensitive", "combination", "normal"}


@pytest.mark.parametrize("value", ["", [], None, " , ,"])
def test_normalize_empty(value):
    assert normalize(value) == frozenset()


def test_normalize_skips_non_strings():
    assert normalize(["oily", 3, None]) == {"oily"}


def test_validate_and_normalize_drops_unknown_tags():
    assert validate_and_normalize(["Oily, Dry", "UNKNOWN", "sensitive", "oily"]) == {"oily", "dry", "sensitive"}


def test_validate_and_normalize_only_canonical():
    result = validate_and_normalize("normal, acne-prone, combination")

    assert result == {"combination"}
    assert result <= VALID_SKIN_TYPES


@pytest.mark.parametrize("value", [5, 3.5, True, object()])
def test_normalize_non_iterable_input(value):
    """Values that are neither strings nor iterables yield no tags"""
    assert normalize(value) == frozenset()
    assert validate_and_normalize(value) == frozenset()
