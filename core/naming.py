"""Display names and slugs for ``"<ordinal>.<text>"`` category and area values.

Raw values stay the canonical filter keys; everything here is cosmetic and
must stay a pure function of the raw string.
"""

CATEGORY_FALLBACK = "Other"
LOCATION_FALLBACK = "Unknown"
OTHER_CATEGORY = "other.other"


def _label_part(raw: str) -> str:
    _, dot, rest = raw.partition(".")
    return rest.strip() if dot else raw.strip()


def _title_words(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def display_name(raw: str | None, fallback: str = CATEGORY_FALLBACK) -> str:
    if not raw:
        return fallback
    label = _label_part(raw)
    if not label:
        return fallback
    return _title_words(label)


def category_display_name(raw: str | None) -> str:
    return display_name(raw, CATEGORY_FALLBACK)


def location_display_name(raw: str | None) -> str:
    return display_name(raw, LOCATION_FALLBACK)


def slug(raw: str | None) -> str:
    if not raw:
        return "other"
    label = _label_part(raw) or "other"
    return "-".join(label.lower().split())


def filter_value(raw: str | None) -> str:
    return raw or ""


def raw_from_display_name(
    display: str | None,
    candidates: list[str],
    fallback: str = CATEGORY_FALLBACK,
) -> str:
    """Return the first candidate whose display name equals ``display``.

    Comparison is case-insensitive. Two raw values that render to the same
    display name cannot be told apart, so the earliest candidate wins and the
    result depends on the order of ``candidates``.
    """
    if not display:
        return ""
    wanted = display.strip().lower()
    for candidate in candidates:
        if display_name(candidate, fallback).lower() == wanted:
            return candidate
    return ""
