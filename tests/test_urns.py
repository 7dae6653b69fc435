from __future__ import annotations

import pytest

from app.utils.urns import normalize_number, tel_urn_for_country


@pytest.mark.parametrize(
    "number, country, expected",
    [
        ("385916242493", "NG", "tel:+385916242493"),
        ("+385916242493", "NG", "tel:+385916242493"),
        ("08067886565", "NG", "tel:+2348067886565"),
        ("0806 788 6565", "ng", "tel:+2348067886565"),
        ("(202) 456-1111", "US", "tel:+12024561111"),
        ("2.50788383383E+11", "RW", "tel:+250788383383"),
        ("2020", "NG", "tel:2020"),
        ("MTN", "NG", "tel:mtn"),
    ],
)
def test_tel_urn_for_country(number: str, country: str, expected: str) -> None:
    assert tel_urn_for_country(number, country) == expected


def test_normalize_without_country_keeps_unparseable() -> None:
    assert normalize_number("12345", "") == "12345"
