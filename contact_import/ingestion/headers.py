"""Mapping of human-authored CSV headers onto canonical contact fields."""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence

from ..errors import ImportInputError
from ..models import HeaderMap

LOGGER = logging.getLogger(__name__)

# Exports from mailing tools prefix required columns with "*" and append the
# field's internal number ("*Score 7"); both forms are listed.
_FIELD_SYNONYMS: Mapping[str, Sequence[str]] = {
    "email": ("email", "email address", "e-mail", "email_address", "primary email"),
    "name": ("name", "full name", "contact name"),
    "first_name": ("first name", "firstname", "first_name", "first"),
    "last_name": ("last name", "lastname", "last_name", "last"),
    "phone": ("phone", "phone number", "phone_number", "mobile"),
    "tags": ("tags", "tag"),
    "score": ("score", "score 7", "lead score"),
    "daw": ("daw", "what daw do you use?"),
    "type_of_music": ("type of music", "what type of music do you make?"),
    "goals": ("goals", "goal"),
    "music_alias": ("music alias", "artist name", "producer name"),
    "student_level": ("student level", "level"),
    "how_long_producing": ("how long producing", "how long have you been producing?"),
    "why_signed_up": ("why signed up", "why did you sign up?"),
    "genre_specialty": ("genre specialty", "genre"),
    "city": ("city",),
    "state": ("state",),
    "state_code": ("state code", "statecode"),
    "zip_code": ("zip", "zip code", "zipcode", "postal code"),
    "country": ("country",),
    "country_code": ("country code", "countrycode"),
    "opens_email": ("opens email", "opens emails"),
    "clicks_links": ("clicks links", "clicks link"),
    "last_open_date": ("last open date", "last opened", "last open"),
    "active_campaign_id": ("id",),
    "customer_type": ("type", "customer type"),
    "source": ("source",),
}


def _build_alias_lookup() -> Dict[str, str]:
    lookup: Dict[str, str] = {}
    for canonical, aliases in _FIELD_SYNONYMS.items():
        for alias in aliases:
            lookup[normalize_header(alias)] = canonical
    return lookup


def normalize_header(header: str) -> str:
    """Lower-case, trim, and strip a leading ``*`` and byte-order mark from a header token."""

    token = (header or "").strip().lstrip("\ufeff").strip()
    return token.lstrip("*").strip().lower()


def alias_table() -> Dict[str, str]:
    """Return a copy of the normalized-alias to canonical-field table."""

    return dict(_ALIASES)


def build_header_map(headers: Sequence[str]) -> HeaderMap:
    """Resolve a header row into a positional column map.

    Unknown columns are dropped rather than rejected so exports from varied
    tools import without editing. A header row without any tokens, or where
    no token is recognised, raises :class:`ImportInputError`.
    """

    raw_headers = tuple(str(header) for header in headers)
    if not any(header.strip() for header in raw_headers):
        raise ImportInputError("The header row has no columns")

    columns: Dict[int, str] = {}
    unmapped: List[str] = []
    for index, header in enumerate(raw_headers):
        canonical = _ALIASES.get(normalize_header(header))
        if canonical is None:
            if header.strip():
                unmapped.append(header.strip())
            continue
        columns[index] = canonical

    if not columns:
        raise ImportInputError(
            "None of the header columns are recognised: " + ", ".join(unmapped)
        )

    if unmapped:
        LOGGER.debug("Ignoring unmapped columns: %s", unmapped)

    return HeaderMap(columns=columns, raw_headers=raw_headers, unmapped=tuple(unmapped))


_ALIASES = _build_alias_lookup()


__all__ = ["alias_table", "build_header_map", "normalize_header"]
