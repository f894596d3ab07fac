"""Location string parsing and Turkish-character normalization."""

from dataclasses import dataclass

# Normalized spelling → canonical name as stored in regional_defaults
CITY_ALIASES: dict[str, str] = {
    "istanbul": "İstanbul",
    "izmir": "İzmir",
    "ankara": "Ankara",
    "antalya": "Antalya",
    "bursa": "Bursa",
    "karsiyaka": "Karşıyaka",
    "kadikoy": "Kadıköy",
    "besiktas": "Beşiktaş",
    "cankaya": "Çankaya",
    "ornekkoy": "Örnekköy",
    "ornekoy": "Örnekköy",
}

_TURKISH_FOLD = str.maketrans({
    "ı": "i",
    "ğ": "g",
    "ü": "u",
    "ş": "s",
    "ö": "o",
    "ç": "c",
})


@dataclass(frozen=True)
class ParsedLocation:
    city: str
    district: str | None = None
    neighborhood: str | None = None


def normalize_location(text: str) -> str:
    """Lowercase and fold Turkish characters to ASCII for matching."""
    # "İ".lower() yields "i" followed by a combining dot above
    return text.strip().lower().replace("\u0307", "").translate(_TURKISH_FOLD)


def _canonical(part: str | None) -> str | None:
    if not part:
        return None
    return CITY_ALIASES.get(normalize_location(part), part)


def parse_location_string(location: str) -> ParsedLocation:
    """Split "City, District, Neighborhood" into components, applying aliases."""
    parts = [p.strip() for p in location.split(",")]
    city = parts[0] if parts else ""
    district = parts[1] if len(parts) > 1 else None
    neighborhood = parts[2] if len(parts) > 2 else None

    return ParsedLocation(
        city=_canonical(city) or "",
        district=_canonical(district),
        neighborhood=_canonical(neighborhood),
    )
