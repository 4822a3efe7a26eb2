"""Tests for provider name resolution"""
from makerset.cart.providers import resolve_provider_name


def test_platform_provider():
    assert resolve_provider_name(None, "CODE", "Company", "Name") == "MakerSet Platform"


def test_code_first():
    assert resolve_provider_name(5, "CODE", "Company", "Name") == "CODE"


def test_company_when_no_code():
    assert resolve_provider_name(5, "", "Company", "Name") == "Company"


def test_name_when_no_code_or_company():
    assert resolve_provider_name(5, None, None, "Name") == "Name"


def test_unknown_provider():
    assert resolve_provider_name(5) == "Unknown Provider"
