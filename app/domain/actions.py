"""
Rich menu action labels.

The rich menu and several card buttons post these strings back verbatim as
postback data; the dispatcher matches them exactly.
"""

ACTION_BALI_INFO = "バリ島紹介"
ACTION_PROPERTY_LIST = "不動産一覧"
ACTION_INVESTMENT = "投資案件"
ACTION_INSPECTION_BOOKING = "視察予約"
ACTION_PARTNER_COMPANIES = "提携先企業"
ACTION_COMPANY_INFO = "会社概要"

# Postback key whose value is an area code, e.g. "area=canggu"
AREA_POSTBACK_KEY = "area"
