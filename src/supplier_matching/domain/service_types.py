"""Service category normalisation onto the canonical catalogue.

Usage example:
    from supplier_matching.domain.service_types import (
        is_known_service_type,
        normalise_service_type,
    )

    assert normalise_service_type(" Photographie ") == "photographe"
    assert normalise_service_type("Wedding Planner") == "wedding_planner"
    assert not is_known_service_type("astronaute")
"""

from __future__ import annotations

from types import MappingProxyType

SERVICE_TYPES: tuple[str, ...] = (
    "photographe",
    "videaste",
    "traiteur",
    "patissier",
    "dj",
    "animation",
    "coiffure_maquillage",
    "robe_mariee",
    "bijoutier",
    "fleuriste",
    "salle",
    "location_materiel",
    "location_vehicules",
    "neggafa",
    "zaffa",
    "henna_artiste",
    "calligraphe",
    "musicien_traditionnel",
    "danseuse_orientale",
    "couturier_traditionnel",
    "decorateur_maghrebin",
    "organisateur_ceremonie",
    "wedding_planner",
    "faire_part",
    "officiant",
    "autre",
)

# Insertion order is the substring-matching order.
SERVICE_TYPE_ALIASES = MappingProxyType(
    {
        "papetier": "faire_part",
        "papeterie": "faire_part",
        "faire-part": "faire_part",
        "faire part": "faire_part",
        "invitations": "faire_part",
        "invitation": "faire_part",
        "photographe": "photographe",
        "photographie": "photographe",
        "photo": "photographe",
        "vidéaste": "videaste",
        "videaste": "videaste",
        "video": "videaste",
        "vidéo": "videaste",
        "traiteur": "traiteur",
        "catering": "traiteur",
        "dj": "dj",
        "musicien": "dj",
        "musique": "dj",
        "wedding planner": "wedding_planner",
        "wedding_planner": "wedding_planner",
        "planner": "wedding_planner",
        "organisateur": "wedding_planner",
        "fleuriste": "fleuriste",
        "décorateur": "fleuriste",
        "decorateur": "fleuriste",
        "decoration": "fleuriste",
        "coiffeur": "coiffure_maquillage",
        "maquilleur": "coiffure_maquillage",
        "coiffure": "coiffure_maquillage",
        "maquillage": "coiffure_maquillage",
        "robe": "robe_mariee",
        "costume": "robe_mariee",
        "pâtissier": "patissier",
        "patissier": "patissier",
        "cake": "patissier",
        "salle": "salle",
        "lieu": "salle",
    }
)

_KNOWN = frozenset(SERVICE_TYPES)


def normalise_service_type(value: str | None) -> str:
    """Map a free-text service category onto a canonical catalogue entry.

    Exact aliases and canonical names win, then substring containment in
    either direction. Unknown values come back lower-cased and stripped.
    """
    if not value:
        return ""
    text = value.strip().lower()
    if not text:
        return ""

    if text in SERVICE_TYPE_ALIASES:
        return SERVICE_TYPE_ALIASES[text]
    if text in _KNOWN:
        return text

    for alias, canonical in SERVICE_TYPE_ALIASES.items():
        if alias in text or text in alias:
            return canonical
    return text


def is_known_service_type(value: str) -> bool:
    return value in _KNOWN
