"""
Flex Message templates and helper functions.

Every builder is a pure function of its arguments: no I/O and no clock reads,
so building the same card twice yields equal payloads. Static image URLs are
qualified through CardContext, which also carries the optional cache-busting
version supplied by configuration.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from app.domain.actions import ACTION_INSPECTION_BOOKING, ACTION_PROPERTY_LIST
from app.domain.messages import (
    Bubble,
    Box,
    Button,
    Carousel,
    FlexMessage,
    MAX_CAROUSEL_BUBBLES,
    Image,
    PostbackAction,
    ReplyMessage,
    Separator,
    Text,
    TextMessage,
    UriAction,
)
from app.domain.property import PropertyRecord, area_display_name

# Shown wherever a listing field is empty
UNSPECIFIED = "未設定"

BRAND_COLOR = "#1DB446"
MUTED_COLOR = "#666666"
LABEL_COLOR = "#aaaaaa"


@dataclass(frozen=True)
class CardContext:
    """Deployment-specific values the cards need, injected at startup."""

    base_url: str
    booking_form_url: str = "https://forms.google.com"
    placeholder_image_url: str = "https://via.placeholder.com/600x390?text=No+Image"
    image_version: str = ""

    def static_image(self, filename: str) -> str:
        url = f"{self.base_url.rstrip('/')}/images/{filename}"
        if self.image_version:
            url = f"{url}?v={self.image_version}"
        return url


def display_value(value: Any) -> str:
    """Render a listing field for display, falling back to UNSPECIFIED."""
    if value is None:
        return UNSPECIFIED
    if isinstance(value, bool):
        return "あり" if value else "なし"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, (list, tuple)):
        parts = [str(item).strip() for item in value if item is not None and str(item).strip()]
        return "、".join(parts) if parts else UNSPECIFIED
    text = str(value).strip()
    return text or UNSPECIFIED


# ============================================================================
# Generic builders
# ============================================================================

def build_button(action: Dict[str, Any]) -> Button:
    """
    Create a button component from an action descriptor.

    Args:
        action: {"label", "data", "display_text"?, "style"?} for a postback
            button, or {"type": "uri", "label", "uri", "style"?} for a link

    Returns:
        Button component (small, primary style unless overridden)
    """
    if action.get("type") == "uri":
        button_action = UriAction(label=action["label"], uri=action["uri"])
    else:
        button_action = PostbackAction(
            label=action["label"],
            data=action["data"],
            display_text=action.get("display_text")
        )
    return Button(action=button_action, style=action.get("style", "primary"), height="sm")


def build_bubble_message(title: str, body: str, actions: Sequence[Dict[str, Any]] = ()) -> FlexMessage:
    """Create a single-bubble message with a title header, body text and optional buttons."""
    header = None
    if title:
        header = Box(contents=[Text(title, weight="bold", size="xl", wrap=True)])

    footer = None
    if actions:
        footer = Box(contents=[build_button(action) for action in actions], spacing="sm")

    return FlexMessage(
        alt_text=title or "Flex Message",
        contents=Bubble(
            header=header,
            body=Box(contents=[Text(body, wrap=True)]),
            footer=footer
        )
    )


def build_carousel_message(alt_text: str, bubbles: Sequence[Bubble]) -> FlexMessage:
    """
    Create a carousel message.

    Raises:
        ValueError: If bubbles is empty or exceeds the carousel limit
    """
    return FlexMessage(alt_text=alt_text or "Carousel", contents=Carousel(bubbles=tuple(bubbles)))


def _label_value_row(label: str, value: str, label_flex: int = 1, value_flex: int = 5) -> Box:
    return Box(
        layout="baseline",
        spacing="sm",
        contents=[
            Text(label, color=LABEL_COLOR, size="sm", flex=label_flex),
            Text(value, wrap=True, color=MUTED_COLOR, size="sm", flex=value_flex),
        ]
    )


def build_product_card(product: Dict[str, Any]) -> Bubble:
    """
    Create a product card bubble.

    Args:
        product: {"name", "price", "description"?, "image_url"?, "actions"?}
    """
    rows = [_label_value_row("Price", product["price"])]
    if product.get("description"):
        rows.append(_label_value_row("Description", product["description"]))

    hero = Image(url=product["image_url"]) if product.get("image_url") else None

    return Bubble(
        hero=hero,
        body=Box(contents=[
            Text(product["name"], weight="bold", size="xl", wrap=True),
            Box(contents=rows, margin="lg", spacing="sm"),
        ]),
        footer=Box(
            contents=[build_button(action) for action in product.get("actions", ())],
            spacing="sm"
        )
    )


def build_confirmation_message(
    title: str,
    message: str,
    confirm_action: Dict[str, Any],
    cancel_action: Dict[str, Any]
) -> FlexMessage:
    """Create a yes/no confirmation bubble; cancel sits left of confirm."""
    cancel = PostbackAction(
        label=cancel_action.get("label") or "Cancel",
        data=cancel_action["data"],
        display_text=cancel_action.get("display_text")
    )
    confirm = PostbackAction(
        label=confirm_action.get("label") or "Confirm",
        data=confirm_action["data"],
        display_text=confirm_action.get("display_text")
    )
    return FlexMessage(
        alt_text=title or "Confirmation",
        contents=Bubble(
            body=Box(spacing="md", contents=[
                Text(title, weight="bold", size="lg", wrap=True),
                Text(message, wrap=True, color=MUTED_COLOR),
            ]),
            footer=Box(layout="horizontal", spacing="sm", contents=[
                Button(action=cancel, style="secondary", height="sm"),
                Button(action=confirm, style="primary", height="sm"),
            ])
        )
    )


def build_receipt_message(receipt: Dict[str, Any]) -> FlexMessage:
    """
    Create a receipt bubble.

    Args:
        receipt: {"store_name", "order_number", "items": [{"name", "price"}], "total"}
    """
    items = [
        Box(layout="horizontal", contents=[
            Text(item["name"], size="sm", color="#555555", flex=3),
            Text(item["price"], size="sm", color="#111111", align="end", flex=1),
        ])
        for item in receipt["items"]
    ]

    return FlexMessage(
        alt_text="Receipt",
        contents=Bubble(body=Box(contents=[
            Text("RECEIPT", weight="bold", color=BRAND_COLOR, size="sm"),
            Text(receipt["store_name"], weight="bold", size="xxl", margin="md"),
            Text(receipt["order_number"], size="xs", color=LABEL_COLOR, wrap=True),
            Separator(margin="xxl"),
            Box(contents=items, margin="xxl", spacing="sm"),
            Separator(margin="xxl"),
            Box(layout="horizontal", margin="xxl", contents=[
                Text("TOTAL", size="sm", color="#555555"),
                Text(receipt["total"], size="sm", color="#111111", align="end"),
            ]),
        ]))
    )


def build_info_bubble(
    title: str,
    sections: Sequence[Sequence[str]] = (),
    subtitle: Optional[str] = None,
    lead: Optional[str] = None,
    footnote: Optional[str] = None,
    hero_url: Optional[str] = None,
    title_size: str = "xl",
    footer: Optional[Box] = None
) -> Bubble:
    """
    Create an informational bubble: a coloured title, an optional subtitle and
    lead paragraph, then (heading, text) sections and an italic footnote.
    """
    contents: List[Any] = [Text(title, weight="bold", size=title_size, color=BRAND_COLOR)]
    if subtitle:
        contents.append(Text(subtitle, margin="md", size="md", color=MUTED_COLOR, wrap=True))
    contents.append(Separator(margin="md"))
    if lead:
        contents.append(Text(lead, wrap=True, margin="md", size="sm"))

    for heading, text in sections:
        if heading:
            contents.append(Text(heading, weight="bold", margin="md", size="md"))
        if text:
            contents.append(Text(text, wrap=True, margin="sm", size="sm"))

    if footnote:
        contents.append(Separator(margin="md"))
        contents.append(Text(footnote, wrap=True, margin="sm", size="xs", color=MUTED_COLOR, style="italic"))

    return Bubble(
        hero=Image(url=hero_url) if hero_url else None,
        body=Box(contents=contents),
        footer=footer
    )


# ============================================================================
# Property listings
# ============================================================================

PROPERTY_FIELDS = (
    ("土地面積", "land_size"),
    ("建物面積", "building_size"),
    ("部屋数", "rooms"),
    ("販売価格", "price"),
    ("リビング", "living_room"),
    ("設備", "facilities"),
    ("実質利回り", "actual_yield"),
)


def build_property_bubble(record: PropertyRecord, ctx: CardContext) -> Bubble:
    """Render one listing. Used for both the single-card and carousel layouts."""
    contents: List[Any] = [
        Text(display_value(record.name), weight="bold", size="xl", wrap=True, color=BRAND_COLOR),
        Text(display_value(record.area), size="sm", color=MUTED_COLOR, margin="sm"),
        Separator(margin="md"),
        Box(
            margin="md",
            spacing="sm",
            contents=[
                _label_value_row(label, display_value(getattr(record, attr)), label_flex=2, value_flex=4)
                for label, attr in PROPERTY_FIELDS
            ]
        ),
        Separator(margin="md"),
        Text(display_value(record.description), wrap=True, margin="md", size="sm"),
    ]

    if record.is_placeholder:
        contents.append(Text(
            "※サンプルデータです（物件データベースに接続できません）",
            wrap=True, margin="md", size="xs", color="#ff5551"
        ))

    return Bubble(
        hero=Image(url=record.image_url or ctx.placeholder_image_url),
        body=Box(contents=contents),
        footer=Box(spacing="sm", contents=[
            build_button({"label": "視察を予約する", "data": ACTION_INSPECTION_BOOKING}),
            build_button({"label": "他のエリアを見る", "data": ACTION_PROPERTY_LIST, "style": "secondary"}),
        ])
    )


def create_property_detail_message(
    records: Sequence[PropertyRecord],
    area_code: str,
    ctx: CardContext
) -> ReplyMessage:
    """
    Render lookup results for an area.

    0 records -> "not found" text, 1 -> single bubble, 2+ -> carousel.
    Records beyond the carousel limit are dropped.
    """
    area_name = area_display_name(area_code)

    if not records:
        return TextMessage(
            f"{area_name}エリアの物件が見つかりませんでした。\n"
            "別のエリアをお試しいただくか、しばらくしてから再度お試しください。"
        )

    bubbles = [build_property_bubble(record, ctx) for record in records[:MAX_CAROUSEL_BUBBLES]]
    alt_text = f"{area_name}エリアの物件情報"

    if len(bubbles) == 1:
        return FlexMessage(alt_text=alt_text, contents=bubbles[0])

    return build_carousel_message(alt_text, bubbles)
