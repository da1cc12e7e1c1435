"""
Unit tests for title comparison keys.
"""

import pytest

from referrals.api.services.title_keys import normalize_title


def test_case_folding_equates_titles() -> None:
    assert normalize_title("Foo") == normalize_title("fOO")
    assert normalize_title("Straße") == normalize_title("STRASSE")


def test_secondary_strength_keeps_accents() -> None:
    assert normalize_title("Café") != normalize_title("cafe")


def test_primary_strength_drops_accents() -> None:
    assert normalize_title("Café", strength=1) == normalize_title("CAFE", strength=1)
    assert normalize_title("Ångström", strength=1) == "angstrom"


def test_composed_and_decomposed_forms_match() -> None:
    assert normalize_title("Café") == normalize_title("Café")


def test_whitespace_is_significant() -> None:
    assert normalize_title("foo ") != normalize_title("foo")


def test_unknown_strength_is_rejected() -> None:
    with pytest.raises(ValueError):
        normalize_title("x", strength=3)
