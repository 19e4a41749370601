"""
Services package for business logic.
"""
from app.services.dispatcher import Dispatcher
from app.services.property_lookup import PropertyLookupService

__all__ = ['Dispatcher', 'PropertyLookupService']
