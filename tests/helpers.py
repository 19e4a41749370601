"""
Test doubles and payload helpers shared across test modules.
"""
from typing import Any, Callable, Dict, List, Optional

from app.domain.property import PropertyRecord


class FakeAirtableClient:
    """
    Stand-in for AirtableClient.

    The handler receives (table, filter_formula) and returns a list of rows
    or an exception instance to raise.
    """

    def __init__(self, handler: Callable[[str, Optional[str]], Any]):
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    async def list_records(self, table, filter_formula=None, max_records=10):
        self.calls.append({"table": table, "filter_formula": filter_formula, "max_records": max_records})
        result = self.handler(table, filter_formula)
        if isinstance(result, Exception):
            raise result
        return result


class FakePropertyLookup:
    """Records the area codes it was asked for and returns canned listings"""

    def __init__(self, records: Optional[List[PropertyRecord]] = None, error: Optional[Exception] = None):
        self.records = records or []
        self.error = error
        self.area_codes: List[str] = []

    async def lookup(self, area_code):
        self.area_codes.append(area_code)
        if self.error:
            raise self.error
        return list(self.records)


def airtable_row(record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": record_id, "createdTime": "2024-05-01T00:00:00.000Z", "fields": fields}


def collect_texts(node: Any) -> List[str]:
    """Every "text" value in a serialized payload, depth first"""
    texts: List[str] = []
    if isinstance(node, dict):
        if node.get("type") == "text" and isinstance(node.get("text"), str):
            texts.append(node["text"])
        for value in node.values():
            texts.extend(collect_texts(value))
    elif isinstance(node, list):
        for item in node:
            texts.extend(collect_texts(item))
    return texts


def collect_actions(node: Any) -> List[Dict[str, Any]]:
    """Every button action in a serialized payload, in order"""
    actions: List[Dict[str, Any]] = []
    if isinstance(node, dict):
        if node.get("type") == "button":
            actions.append(node["action"])
            return actions
        for value in node.values():
            actions.extend(collect_actions(value))
    elif isinstance(node, list):
        for item in node:
            actions.extend(collect_actions(item))
    return actions
