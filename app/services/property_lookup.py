"""
Property lookup service - area code in, listings out.

Wraps AirtableClient with the behaviour the conversation needs:
- area codes are mapped to the label stored in the "area" column
- a missing primary table falls back to a secondary table name
- an empty result optionally triggers an unfiltered diagnostic query whose
  area values are logged (never returned)
- an authorization failure can substitute flagged sample listings when demo
  fallback is enabled
- every other failure yields an empty list so the user sees "not found"
"""
import logging
from typing import Any, Dict, List, Optional

from app.clients.airtable_client import (
    AirtableAPIError,
    AirtableAuthorizationError,
    AirtableClient,
    AirtableNotFoundError,
    equals_formula,
)
from app.domain.property import AREA_COLUMN, PropertyRecord, area_label, placeholder_records

logger = logging.getLogger(__name__)


class PropertyLookupService:
    """
    Service for finding listings by area.

    Stateless per call: holds only configuration and the injected client.

    Usage:
        service = PropertyLookupService(airtable_client, table_name="Properties")
        records = await service.lookup("kuta")
    """

    def __init__(
        self,
        airtable_client: AirtableClient,
        table_name: str,
        fallback_table_name: Optional[str] = None,
        max_records: int = 10,
        diagnostics_enabled: bool = True,
        demo_fallback_enabled: bool = False
    ):
        """
        Initialize the lookup service.

        Args:
            airtable_client: Client used for all queries
            table_name: Primary listings table
            fallback_table_name: Table tried when the primary one is not found
            max_records: Upper bound on rows per query
            diagnostics_enabled: Run an unfiltered query on empty results and
                log the area values actually present
            demo_fallback_enabled: Return flagged sample listings when
                Airtable rejects our credentials
        """
        self.airtable_client = airtable_client
        self.table_name = table_name
        self.fallback_table_name = fallback_table_name
        self.max_records = max_records
        self.diagnostics_enabled = diagnostics_enabled
        self.demo_fallback_enabled = demo_fallback_enabled

    async def lookup(self, area_code: str) -> List[PropertyRecord]:
        """
        Find listings for an area.

        Args:
            area_code: Normalized area code from postback data, e.g. "kuta"

        Returns:
            Listings in the order Airtable returned them. Empty on any failure
            except an authorization failure with demo fallback enabled, which
            returns sample listings marked is_placeholder=True.
        """
        label = area_label(area_code)
        formula = equals_formula(AREA_COLUMN, label)

        logger.info(f"🔍 Looking up properties - area_code: {area_code}, label: {label}")

        try:
            rows, table = await self._query_with_fallback(formula)
        except AirtableAuthorizationError as e:
            if self.demo_fallback_enabled:
                logger.warning(
                    f"⚠️ Airtable authorization failed (status: {e.status_code}) - "
                    f"serving SAMPLE listings for area {label}. Fix AIRTABLE_API_KEY before production use."
                )
                return placeholder_records(area_code)
            logger.error(f"❌ Airtable authorization failed (status: {e.status_code}) - returning no listings")
            return []
        except AirtableAPIError as e:
            logger.error(f"❌ Property lookup failed for area {label}: {e.message}")
            return []

        records = [self._to_record(row) for row in rows if isinstance(row, dict)]
        logger.info(f"✅ Found {len(records)} property record(s) for area {label}")

        if not records and self.diagnostics_enabled:
            await self._log_available_areas(table, label)

        return records

    async def _query_with_fallback(self, formula: str):
        """Query the primary table, then the fallback table if the primary does not exist."""
        try:
            rows = await self.airtable_client.list_records(
                self.table_name, filter_formula=formula, max_records=self.max_records
            )
            return rows, self.table_name
        except AirtableNotFoundError:
            if not self.fallback_table_name or self.fallback_table_name == self.table_name:
                raise
            logger.warning(
                f"⚠️ Table '{self.table_name}' not found, retrying with '{self.fallback_table_name}'"
            )

        rows = await self.airtable_client.list_records(
            self.fallback_table_name, filter_formula=formula, max_records=self.max_records
        )
        return rows, self.fallback_table_name

    async def _log_available_areas(self, table: str, label: str) -> None:
        """Log which area values exist so a label mismatch is easy to spot."""
        try:
            rows = await self.airtable_client.list_records(table, max_records=self.max_records)
        except AirtableAPIError as e:
            logger.warning(f"⚠️ Diagnostic query failed: {e.message}")
            return

        observed = sorted({
            str(_row_fields(row).get(AREA_COLUMN))
            for row in rows
            if isinstance(row, dict)
        })
        logger.info(
            f"ℹ️ No rows with {AREA_COLUMN} = '{label}' in '{table}'. "
            f"Observed {AREA_COLUMN} values in first {len(rows)} row(s): {observed}"
        )

    @staticmethod
    def _to_record(row: Dict[str, Any]) -> PropertyRecord:
        return PropertyRecord.from_fields(_row_fields(row), record_id=row.get("id"))


def _row_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    """A row's "fields" object; anything else counts as an empty row."""
    fields = row.get("fields")
    return fields if isinstance(fields, dict) else {}
