"""
Property listings as stored in the Airtable "Properties" table.

The table is edited by hand, so every column is optional and the image column
has drifted between names over time. Both concerns are handled here so the
renderer never sees a raw Airtable row.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Area codes used in postback data ("area=kuta") -> label stored in the "area" column
AREA_LABELS: Dict[str, str] = {
    "uluwatu": "Uluwatu",
    "nusadua": "Nusa Dua",
    "kuta": "Kuta",
    "seminyak": "Seminyak",
    "legian": "Legian",
    "canggu": "Canggu",
    "other": "Other",
}

# Japanese display names for the area selection buttons, in menu order
AREA_DISPLAY_NAMES: Dict[str, str] = {
    "uluwatu": "ウルワツ",
    "nusadua": "ヌサドゥア",
    "kuta": "クタ",
    "seminyak": "スミニャック",
    "legian": "レギャン",
    "canggu": "チャングー",
    "other": "その他",
}

AREA_COLUMN = "area"

# Tried in order; the first field holding a usable URL wins
IMAGE_FIELD_CANDIDATES = ("Image", "image", "Images")


def area_label(area_code: str) -> str:
    """Map an area code to its stored label. Unknown codes pass through unchanged."""
    return AREA_LABELS.get(area_code, area_code)


def area_display_name(area_code: str) -> str:
    return AREA_DISPLAY_NAMES.get(area_code, area_label(area_code))


def _usable_image_url(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    # Airtable attachment fields are lists of {"url": ..., "thumbnails": {...}}
    if isinstance(value, (list, tuple)):
        for entry in value:
            url = _usable_image_url(entry)
            if url:
                return url
        return None
    if isinstance(value, dict):
        url = value.get("url")
        if isinstance(url, str) and url.strip():
            return url.strip()
    return None


def resolve_image_url(fields: Dict[str, Any]) -> Optional[str]:
    """
    Find the listing image in a raw Airtable row.

    Args:
        fields: The row's "fields" object

    Returns:
        The first usable URL found under IMAGE_FIELD_CANDIDATES, or None
    """
    for name in IMAGE_FIELD_CANDIDATES:
        url = _usable_image_url(fields.get(name))
        if url:
            return url
    return None


@dataclass(frozen=True)
class PropertyRecord:
    """
    One property listing.

    is_placeholder marks sample listings substituted while Airtable is
    unreachable for authorization reasons; they must never be presented as
    real inventory.
    """

    name: Optional[Any] = None
    area: Optional[Any] = None
    land_size: Optional[Any] = None
    building_size: Optional[Any] = None
    rooms: Optional[Any] = None
    price: Optional[Any] = None
    living_room: Optional[Any] = None
    facilities: Optional[Any] = None
    actual_yield: Optional[Any] = None
    description: Optional[Any] = None
    image_url: Optional[str] = None
    record_id: Optional[str] = None
    is_placeholder: bool = False

    @classmethod
    def from_fields(cls, fields: Dict[str, Any], record_id: Optional[str] = None) -> "PropertyRecord":
        """Build a record from an Airtable row's "fields" object."""
        return cls(
            name=fields.get("Name"),
            area=fields.get(AREA_COLUMN),
            land_size=fields.get("Land size"),
            building_size=fields.get("Building size"),
            rooms=fields.get("Number of rooms"),
            price=fields.get("Selling price"),
            living_room=fields.get("Living room"),
            facilities=fields.get("Facilities"),
            actual_yield=fields.get("Actual yield"),
            description=fields.get("Description"),
            image_url=resolve_image_url(fields),
            record_id=record_id,
        )


def placeholder_records(area_code: str) -> List[PropertyRecord]:
    """Sample listings for degraded mode, flagged with is_placeholder=True."""
    label = area_label(area_code)
    return [
        PropertyRecord(
            name=f"{label} Villa A (サンプル)",
            area=label,
            land_size="300㎡",
            building_size="180㎡",
            rooms=3,
            price="IDR 5,500,000,000",
            living_room="あり",
            facilities=("プール", "駐車場"),
            actual_yield="8%",
            description="サンプルデータです。実際の物件情報はお問い合わせください。",
            is_placeholder=True,
        ),
        PropertyRecord(
            name=f"{label} Villa B (サンプル)",
            area=label,
            land_size="450㎡",
            building_size="260㎡",
            rooms=4,
            price="IDR 8,200,000,000",
            living_room="あり",
            facilities=("プール", "ガーデン", "駐車場"),
            actual_yield="7.5%",
            description="サンプルデータです。実際の物件情報はお問い合わせください。",
            is_placeholder=True,
        ),
    ]
