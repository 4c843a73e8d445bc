from dataclasses import dataclass, field
from typing import Any

FALLBACK_IMAGES = {
    "hotel": "https://images.unsplash.com/photo-1566073771259-6a8506099945?w=600&q=80",
    "restaurant": "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4?w=600&q=80",
    "shortlet": "https://images.unsplash.com/photo-1522708323590-d24dbb6b0267?w=600&q=80",
    "tourist": "https://images.unsplash.com/photo-1469474968028-56623f02e42e?w=600&q=80",
    "cafe": "https://images.unsplash.com/photo-1554118811-1e0d58224f24?w=600&q=80",
    "bar": "https://images.unsplash.com/photo-1572116469696-31de0f17cc34?w=600&q=80",
    "services": "https://images.unsplash.com/photo-1581291518857-4e27b48ff24e?w=600&q=80",
    "event": "https://images.unsplash.com/photo-1511795409834-ef04bbd61622?w=600&q=80",
    "default": "https://images.unsplash.com/photo-1566073771259-6a8506099945?w=600&q=80",
}

# Checked in order; first match wins.
IMAGE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("hotel",), "hotel"),
    (("restaurant",), "restaurant"),
    (("shortlet",), "shortlet"),
    (("tourist",), "tourist"),
    (("cafe",), "cafe"),
    (("bar", "lounge"), "bar"),
    (("services",), "services"),
    (("event",), "event"),
    (("hall", "weekend"), "event"),
]

KNOWN_FIELDS = {"name", "category", "area", "price_from", "rating", "image url"}


@dataclass
class Listing:
    name: str = ""
    category: str = ""
    area: str = ""
    price_from: str = ""
    rating: str = ""
    image_url: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        return self.extra.get(key, default)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_listing(row: dict[str, Any]) -> Listing:
    return Listing(
        name=_text(row.get("name")),
        category=_text(row.get("category")),
        area=_text(row.get("area")),
        price_from=_text(row.get("price_from")),
        rating=_text(row.get("rating")),
        image_url=_text(row.get("image url")),
        extra={k: _text(v) for k, v in row.items() if k not in KNOWN_FIELDS},
    )


def normalize_listings(rows: list[dict[str, Any]]) -> list[Listing]:
    return [normalize_listing(r) for r in rows if isinstance(r, dict)]


def distinct_categories(listings: list[Listing]) -> list[str]:
    return list(dict.fromkeys(item.category for item in listings if item.category))


def distinct_locations(listings: list[Listing]) -> list[str]:
    return sorted({item.area for item in listings if item.area})


def card_images(listing: Listing) -> list[str]:
    urls = [u.strip() for u in listing.image_url.split(",")]
    urls = [u for u in urls if u.startswith("http")]
    if urls:
        return urls

    category = listing.category.lower()
    for keywords, image_key in IMAGE_KEYWORDS:
        if any(keyword in category for keyword in keywords):
            return [FALLBACK_IMAGES[image_key]]
    return [FALLBACK_IMAGES["default"]]
