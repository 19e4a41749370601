"""LINE and Airtable API clients"""
from app.clients.line_client import LineClient, LineAPIError
from app.clients.airtable_client import (
    AirtableClient,
    AirtableAPIError,
    AirtableAuthorizationError,
    AirtableNotFoundError,
)

__all__ = [
    "LineClient",
    "LineAPIError",
    "AirtableClient",
    "AirtableAPIError",
    "AirtableAuthorizationError",
    "AirtableNotFoundError",
]
