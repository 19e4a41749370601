"""
Auto-reply rules for the store demo bot.

A small English command set that exercises the generic templates: help and
menu bubbles, a product carousel, confirmations and a receipt. Input is
lower-cased before matching. Buttons post back "action=<name>[&product=<id>]".
"""
from types import MappingProxyType
from typing import Dict

from app.domain.messages import FlexMessage, ReplyMessage, TextMessage
from app.rules.rule_table import BotProfile, ExactMatch, ReplyContext, Rule, RuleTable, SubstringAnyOf
from app.templates.flex import (
    CardContext,
    build_bubble_message,
    build_carousel_message,
    build_confirmation_message,
    build_product_card,
    build_receipt_message,
)

PRODUCTS = (
    {"id": "a", "name": "Product A", "price": "$29.99", "description": "High quality product"},
    {"id": "b", "name": "Product B", "price": "$39.99", "description": "Premium product"},
    {"id": "c", "name": "Product C", "price": "$19.99", "description": "Budget friendly option"},
)


def create_help_message(ctx: CardContext) -> FlexMessage:
    return build_bubble_message(
        "Help Menu",
        "Here are the available commands:\n\n"
        "• help - Show this help menu\n"
        "• menu - Show main menu\n"
        "• product - Show product catalog\n"
        "• receipt - Show sample receipt",
        [
            {"label": "Main Menu", "data": "action=menu", "display_text": "menu"},
            {"label": "Products", "data": "action=products", "display_text": "product"},
        ]
    )


def create_menu_message(ctx: CardContext) -> FlexMessage:
    return build_bubble_message(
        "Main Menu",
        "What would you like to do today?",
        [
            {"label": "View Products", "data": "action=products"},
            {"label": "Check Order", "data": "action=order_status"},
            {"label": "Contact Support", "data": "action=support", "style": "secondary"},
        ]
    )


def create_products_message(ctx: CardContext) -> FlexMessage:
    bubbles = [
        build_product_card({
            "name": product["name"],
            "price": product["price"],
            "description": product["description"],
            "image_url": ctx.placeholder_image_url,
            "actions": [
                {"label": "Buy Now", "data": f"action=buy&product={product['id']}"},
                {"label": "Details", "data": f"action=detail&product={product['id']}", "style": "secondary"},
            ],
        })
        for product in PRODUCTS
    ]
    return build_carousel_message("Product Catalog", bubbles)


def create_sample_receipt(ctx: CardContext) -> FlexMessage:
    return build_receipt_message({
        "store_name": "LINE Bot Store",
        "order_number": "Order #123456",
        "items": [
            {"name": "Product A", "price": "$29.99"},
            {"name": "Product B", "price": "$39.99"},
            {"name": "Shipping", "price": "$5.00"},
        ],
        "total": "$74.98",
    })


TEXT_RULES = RuleTable([
    Rule("help", ExactMatch("help", "ヘルプ"), create_help_message),
    Rule("menu", ExactMatch("menu", "メニュー"), create_menu_message),
    Rule("products", SubstringAnyOf("product", "商品"), create_products_message),
    Rule("receipt", ExactMatch("receipt", "レシート"), create_sample_receipt),
], normalize=str.lower)

# The store bot's buttons all use key=value data, so there are no bare labels
ACTION_RULES = RuleTable([])


async def store_action_route(action: str, params: Dict[str, str], context: ReplyContext) -> ReplyMessage:
    """Answer "action=<name>" postbacks from the store cards."""
    product = params.get("product", "").upper()

    if action == "menu":
        return create_menu_message(context.cards)
    if action == "products":
        return create_products_message(context.cards)
    if action == "buy":
        return build_confirmation_message(
            "Confirm Purchase",
            f"Are you sure you want to buy Product {product}?",
            {
                "label": "Yes, Buy Now",
                "data": f"action=confirm_buy&product={params.get('product', '')}",
                "display_text": "Confirm purchase",
            },
            {"label": "Cancel", "data": "action=cancel", "display_text": "Cancel"}
        )
    if action == "confirm_buy":
        return TextMessage(f"Thank you for your purchase! Product {product} has been ordered.")
    if action == "detail":
        return TextMessage(f"Showing details for Product {product}...")
    if action == "order_status":
        return TextMessage("Your order #123456 is being processed and will be shipped soon!")
    if action == "support":
        return TextMessage("Our support team is available 24/7. Please describe your issue and we will help you!")
    if action == "cancel":
        return TextMessage("Action cancelled.")

    return TextMessage("Unknown action. Please try again.")


STORE_PROFILE = BotProfile(
    name="store",
    text_rules=TEXT_RULES,
    action_rules=ACTION_RULES,
    postback_routes=MappingProxyType({"action": store_action_route}),
    echo_prefix="You said: ",
    welcome_text="Thank you for adding me! I am your LINE Bot assistant. How can I help you today?",
    unknown_postback_text="Unknown action. Please try again.",
    failure_text="Sorry, something went wrong. Please try again later.",
)
