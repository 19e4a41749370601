"""
Auto-reply rules for the Bali real-estate bot.

This module contains the business logic for deciding which card answers a
message. Rules are declared here, in priority order, and can be edited
without touching the webhook or dispatcher.

Text rules match on substrings (a user typing "バリ島について" gets the Bali
introduction). Rich menu buttons post their label back verbatim and are
matched exactly. Area buttons post "area=<code>" and go to the Airtable lookup.
"""
import logging
from types import MappingProxyType
from typing import Dict

from app.domain.actions import (
    ACTION_BALI_INFO,
    ACTION_COMPANY_INFO,
    ACTION_INSPECTION_BOOKING,
    ACTION_INVESTMENT,
    ACTION_PARTNER_COMPANIES,
    ACTION_PROPERTY_LIST,
    AREA_POSTBACK_KEY,
)
from app.domain.messages import ReplyMessage
from app.rules.rule_table import BotProfile, ExactMatch, ReplyContext, Rule, RuleTable, SubstringAnyOf
from app.templates.bali_cards import (
    create_bali_info_message,
    create_company_info_message,
    create_inspection_booking_message,
    create_investment_message,
    create_partner_companies_message,
    create_property_area_message,
)
from app.templates.flex import create_property_detail_message

logger = logging.getLogger(__name__)


# Order matters: the first matching rule wins.
TEXT_RULES = RuleTable([
    Rule("bali_info", SubstringAnyOf("バリ島", "パリ島"), create_bali_info_message),
    Rule("property_list", SubstringAnyOf("不動産"), create_property_area_message),
    Rule("investment", SubstringAnyOf("投資"), create_investment_message),
    Rule("inspection_booking", SubstringAnyOf("視察", "予約"), create_inspection_booking_message),
    Rule("partner_companies", SubstringAnyOf("提携", "企業"), create_partner_companies_message),
    Rule("company_info", SubstringAnyOf("会社", "概要"), create_company_info_message),
])

ACTION_RULES = RuleTable([
    Rule("bali_info", ExactMatch(ACTION_BALI_INFO), create_bali_info_message),
    Rule("property_list", ExactMatch(ACTION_PROPERTY_LIST), create_property_area_message),
    Rule("investment", ExactMatch(ACTION_INVESTMENT), create_investment_message),
    Rule("inspection_booking", ExactMatch(ACTION_INSPECTION_BOOKING), create_inspection_booking_message),
    Rule("partner_companies", ExactMatch(ACTION_PARTNER_COMPANIES), create_partner_companies_message),
    Rule("company_info", ExactMatch(ACTION_COMPANY_INFO), create_company_info_message),
])


async def property_area_route(area_code: str, params: Dict[str, str], context: ReplyContext) -> ReplyMessage:
    """
    Answer "area=<code>" with the listings for that area.

    Args:
        area_code: Value of the area parameter, e.g. "canggu"
        params: All postback parameters (unused)
        context: Reply collaborators; property_lookup may be None when
            Airtable is not configured

    Returns:
        Text, single bubble or carousel depending on how many listings exist
    """
    if context.property_lookup is None:
        logger.warning("⚠️ Property lookup not configured (AIRTABLE_API_KEY / AIRTABLE_BASE_ID missing)")
        records = []
    else:
        records = await context.property_lookup.lookup(area_code)

    return create_property_detail_message(records, area_code, context.cards)


BALI_PROFILE = BotProfile(
    name="bali",
    text_rules=TEXT_RULES,
    action_rules=ACTION_RULES,
    postback_routes=MappingProxyType({AREA_POSTBACK_KEY: property_area_route}),
    echo_prefix="メッセージを受信しました: ",
    welcome_text=(
        "友だち追加ありがとうございます！\n"
        "バリ島の不動産・投資情報をお届けします。下のメニューからお選びください。"
    ),
    unknown_postback_text="申し訳ございません。リクエストを処理できませんでした。",
    failure_text="申し訳ございません。エラーが発生しました。しばらくしてから再度お試しください。",
)
