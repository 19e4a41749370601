"""
Reply payloads - immutable message trees sent back through the LINE reply API.

A reply is either a plain TextMessage or a FlexMessage whose contents are a
Bubble or a Carousel of Bubbles. Every node is a frozen dataclass; child
sequences are stored as tuples so a payload cannot change after it is built.

to_dict() produces the LINE Messaging API JSON shape. Optional styling keys
that are not set are omitted rather than sent as null.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple, Union

# LINE rejects flex carousels with more than 12 bubbles
MAX_CAROUSEL_BUBBLES = 12


def _styling(node: Any, skip: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """Collect the non-None scalar attributes of a node, in declaration order."""
    result = {}
    for f in fields(node):
        if f.name in skip:
            continue
        value = getattr(node, f.name)
        if value is not None:
            result[_camel(f.name)] = value
    return result


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# ============================================================================
# Button actions
# ============================================================================

@dataclass(frozen=True)
class PostbackAction:
    """Button action that posts `data` back to the webhook when tapped."""

    label: str
    data: str
    display_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "postback", **_styling(self)}


@dataclass(frozen=True)
class UriAction:
    """Button action that opens an external URL."""

    label: str
    uri: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "uri", **_styling(self)}


Action = Union[PostbackAction, UriAction]


# ============================================================================
# Flex components
# ============================================================================

@dataclass(frozen=True)
class Text:
    text: str
    weight: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    margin: Optional[str] = None
    wrap: Optional[bool] = None
    style: Optional[str] = None
    align: Optional[str] = None
    flex: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", **_styling(self)}


@dataclass(frozen=True)
class Image:
    url: str
    size: Optional[str] = "full"
    aspect_ratio: Optional[str] = "20:13"
    aspect_mode: Optional[str] = "cover"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "image", **_styling(self)}


@dataclass(frozen=True)
class Separator:
    margin: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "separator", **_styling(self)}


@dataclass(frozen=True)
class Button:
    action: Action
    style: Optional[str] = "primary"
    height: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "button",
            **_styling(self, skip=("action",)),
            "action": self.action.to_dict(),
        }


@dataclass(frozen=True)
class Box:
    """
    Container component.

    `layout` and `spacing`/`margin` are opaque styling; only the order of
    `contents` carries meaning.
    """

    contents: Tuple["Component", ...]
    layout: str = "vertical"
    spacing: Optional[str] = None
    margin: Optional[str] = None

    def __post_init__(self):
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "contents", tuple(self.contents))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "box",
            "layout": self.layout,
            **_styling(self, skip=("contents", "layout")),
            "contents": [child.to_dict() for child in self.contents],
        }


Component = Union[Text, Image, Separator, Button, Box]


# ============================================================================
# Containers
# ============================================================================

@dataclass(frozen=True)
class Bubble:
    """A single card."""

    body: Optional[Box] = None
    hero: Optional[Image] = None
    header: Optional[Box] = None
    footer: Optional[Box] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "bubble"}
        for name in ("header", "hero", "body", "footer"):
            part = getattr(self, name)
            if part is not None:
                result[name] = part.to_dict()
        return result


@dataclass(frozen=True)
class Carousel:
    """
    Horizontally scrollable group of bubbles.

    Raises:
        ValueError: If built with no bubbles or more than MAX_CAROUSEL_BUBBLES
    """

    bubbles: Tuple[Bubble, ...]

    def __post_init__(self):
        bubbles = tuple(self.bubbles)
        if not bubbles:
            raise ValueError("Carousel requires at least one bubble")
        if len(bubbles) > MAX_CAROUSEL_BUBBLES:
            raise ValueError(
                f"Carousel supports at most {MAX_CAROUSEL_BUBBLES} bubbles "
                f"(got {len(bubbles)})"
            )
        object.__setattr__(self, "bubbles", bubbles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "carousel",
            "contents": [bubble.to_dict() for bubble in self.bubbles],
        }


# ============================================================================
# Messages
# ============================================================================

@dataclass(frozen=True)
class TextMessage:
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class FlexMessage:
    alt_text: str
    contents: Union[Bubble, Carousel]

    def __post_init__(self):
        if not self.alt_text:
            raise ValueError("FlexMessage requires alt_text")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "flex",
            "altText": self.alt_text,
            "contents": self.contents.to_dict(),
        }


ReplyMessage = Union[TextMessage, FlexMessage]
