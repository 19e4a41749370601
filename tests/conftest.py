"""
Pytest configuration and shared fixtures.
"""
import os

# Tests always run against development settings, before app.config is imported
os.environ["ENVIRONMENT"] = "development"

import pytest

from app.templates.flex import CardContext


@pytest.fixture
def card_context():
    """Card context pointing at a fake public host"""
    return CardContext(
        base_url="https://bot.example.com",
        booking_form_url="https://forms.example.com/inspection",
        placeholder_image_url="https://img.example.com/placeholder.png",
    )
