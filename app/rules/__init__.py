"""Reply rules and bot profiles"""
from app.rules.reply_rules import BALI_PROFILE
from app.rules.rule_table import BotProfile
from app.rules.store_rules import STORE_PROFILE

PROFILES = {
    BALI_PROFILE.name: BALI_PROFILE,
    STORE_PROFILE.name: STORE_PROFILE,
}


def get_profile(name: str) -> BotProfile:
    """Look up a profile by name (BOT_PROFILE setting)."""
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown bot profile '{name}'. Choose one of: {', '.join(PROFILES)}") from None


__all__ = ["BotProfile", "BALI_PROFILE", "STORE_PROFILE", "PROFILES", "get_profile"]
