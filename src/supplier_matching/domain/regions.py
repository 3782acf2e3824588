"""Department to administrative region lookup for location scoring.

Usage example:
    from supplier_matching.domain.regions import region_of, same_region

    assert region_of("75") == "ile-de-france"
    assert same_region("75", "92")
    assert not same_region("75", "13")
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

REGION_LABELS = MappingProxyType(
    {
        "ile-de-france": "Île-de-France",
        "auvergne-rhone-alpes": "Auvergne-Rhône-Alpes",
        "provence-alpes-cote-d-azur": "Provence-Alpes-Côte d'Azur",
        "occitanie": "Occitanie",
        "nouvelle-aquitaine": "Nouvelle-Aquitaine",
        "hauts-de-france": "Hauts-de-France",
        "grand-est": "Grand Est",
        "normandie": "Normandie",
        "pays-de-la-loire": "Pays de la Loire",
        "bretagne": "Bretagne",
        "centre-val-de-loire": "Centre-Val de Loire",
        "bourgogne-franche-comte": "Bourgogne-Franche-Comté",
        "corse": "Corse",
        "guadeloupe": "Guadeloupe",
        "martinique": "Martinique",
        "guyane": "Guyane",
        "la-reunion": "La Réunion",
        "mayotte": "Mayotte",
    }
)

_DEPARTMENTS_BY_REGION: dict[str, tuple[str, ...]] = {
    "ile-de-france": ("75", "77", "78", "91", "92", "93", "94", "95"),
    "auvergne-rhone-alpes": (
        "01",
        "03",
        "07",
        "15",
        "26",
        "38",
        "42",
        "43",
        "63",
        "69",
        "73",
        "74",
    ),
    "provence-alpes-cote-d-azur": ("04", "05", "06", "13", "83", "84"),
    "occitanie": (
        "09",
        "11",
        "12",
        "30",
        "31",
        "32",
        "34",
        "46",
        "48",
        "65",
        "66",
        "81",
        "82",
    ),
    "nouvelle-aquitaine": (
        "16",
        "17",
        "19",
        "23",
        "24",
        "33",
        "40",
        "47",
        "64",
        "79",
        "86",
        "87",
    ),
    "hauts-de-france": ("02", "59", "60", "62", "80"),
    "grand-est": ("08", "10", "51", "52", "54", "55", "57", "67", "68", "88"),
    "normandie": ("14", "27", "50", "61", "76"),
    "pays-de-la-loire": ("44", "49", "53", "72", "85"),
    "bretagne": ("22", "29", "35", "56"),
    "centre-val-de-loire": ("18", "28", "36", "37", "41", "45"),
    "bourgogne-franche-comte": ("21", "25", "39", "58", "70", "71", "89", "90"),
    "corse": ("2A", "2B"),
    "guadeloupe": ("971",),
    "martinique": ("972",),
    "guyane": ("973",),
    "la-reunion": ("974",),
    "mayotte": ("976",),
}

# Built once at import; read-only afterwards.
DEPARTMENT_TO_REGION = MappingProxyType(
    {
        department: region
        for region, departments in _DEPARTMENTS_BY_REGION.items()
        for department in departments
    }
)


def normalise_code(code: str) -> str:
    """Normalise a department or region code (``"2a"`` -> ``"2A"``, ``"1"`` -> ``"01"``)."""
    text = code.strip()
    if text.lower() in REGION_LABELS:
        return text.lower()
    upper = text.upper()
    if upper.isdigit() and len(upper) == 1:
        return f"0{upper}"
    return upper


def region_of(code: str | None) -> str | None:
    """Return the region containing a department code, or the region code itself."""
    if not code:
        return None
    normalised = normalise_code(code)
    if normalised in REGION_LABELS:
        return normalised
    return DEPARTMENT_TO_REGION.get(normalised)


def same_region(code: str | None, other: str | None) -> bool:
    region = region_of(code)
    return region is not None and region == region_of(other)


def any_in_region(region_code: str | None, codes: Iterable[str]) -> bool:
    """Return True when any of ``codes`` falls in the same region as ``region_code``."""
    return any(same_region(region_code, code) for code in codes)
