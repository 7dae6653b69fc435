"""Contact address normalization.

Turns raw sender numbers from gateways into `tel:` URNs. Numbers are
interpreted in the channel's country so local formats (e.g. `08067886565`
on a Nigerian channel) end up in E.164 form.
"""

from __future__ import annotations

import re

import phonenumbers

TEL_SCHEME = "tel"

_NON_TEL_CHARS = re.compile(r"[^0-9a-z+]")


def normalize_number(number: str, country: str = "") -> str:
    """Return `number` in E.164 form when it is a valid phone number.

    Short codes, alphanumeric sender ids, and anything phonenumbers cannot
    validate are returned cleaned but otherwise unchanged.
    """
    number = number.strip().lower()

    # spreadsheet exports sometimes mangle numbers into floats: 2.50788E+11
    if number.endswith(("e+11", "e+12")):
        number = number[:-4].replace(".", "")

    number = _NON_TEL_CHARS.sub("", number)

    region = None if number.startswith("+") else (country.upper() or None)
    for candidate, candidate_region in ((number, region), ("+" + number.lstrip("+"), None)):
        try:
            parsed = phonenumbers.parse(candidate, candidate_region)
        except phonenumbers.NumberParseException:
            continue
        if phonenumbers.is_valid_number(parsed):
            return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)

    return number


def tel_urn_for_country(number: str, country: str = "") -> str:
    """Build a `tel:` URN for `number` scoped to the ISO country code `country`.

    >>> tel_urn_for_country("385916242493", "NG")
    'tel:+385916242493'
    >>> tel_urn_for_country("08067886565", "NG")
    'tel:+2348067886565'
    """
    return f"{TEL_SCHEME}:{normalize_number(number, country)}"
