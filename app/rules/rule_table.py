"""
Ordered keyword rules.

A RuleTable is evaluated top to bottom and the FIRST rule whose trigger
matches wins, even when a later rule would also match. Reordering rules
changes behaviour.

Two trigger kinds:
- SubstringAnyOf: the input contains any one of the configured substrings
- ExactMatch: the input equals one of the configured values

Matching is case-sensitive. A table may pass input through an explicit
`normalize` function first (e.g. str.lower for an English command set).
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

from app.domain.messages import ReplyMessage
from app.templates.flex import CardContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, init=False)
class ExactMatch:
    values: Tuple[str, ...]

    def __init__(self, *values: str):
        if not values:
            raise ValueError("ExactMatch needs at least one value")
        object.__setattr__(self, "values", tuple(values))

    def matches(self, text: str) -> bool:
        return text in self.values


@dataclass(frozen=True, init=False)
class SubstringAnyOf:
    values: Tuple[str, ...]

    def __init__(self, *values: str):
        if not values or not all(values):
            raise ValueError("SubstringAnyOf needs at least one non-empty substring")
        object.__setattr__(self, "values", tuple(values))

    def matches(self, text: str) -> bool:
        return any(value in text for value in self.values)


Trigger = Union[ExactMatch, SubstringAnyOf]


@dataclass(frozen=True)
class Rule:
    """A named trigger and the card builder it fires."""

    name: str
    trigger: Trigger
    produce: Callable[[CardContext], ReplyMessage]


class RuleTable:
    """Immutable, ordered collection of rules with first-match-wins lookup."""

    def __init__(self, rules: Sequence[Rule], normalize: Optional[Callable[[str], str]] = None):
        self._rules: Tuple[Rule, ...] = tuple(rules)
        self._normalize = normalize

        names = [rule.name for rule in self._rules]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate rule names in table: {names}")

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def first_match(self, text: str) -> Optional[Rule]:
        """
        Find the first rule whose trigger matches.

        Args:
            text: Raw user text or postback data

        Returns:
            The earliest matching rule in declaration order, or None
        """
        candidate = self._normalize(text) if self._normalize else text
        for rule in self._rules:
            if rule.trigger.matches(candidate):
                logger.info(f"🎯 Rule '{rule.name}' matched")
                return rule
        return None


@dataclass(frozen=True)
class ReplyContext:
    """Collaborators available to postback routes, injected by the dispatcher."""

    cards: CardContext
    property_lookup: Optional[Any] = None


# (value, all postback params, context) -> reply
PostbackRoute = Callable[[str, Dict[str, str], ReplyContext], Awaitable[ReplyMessage]]


@dataclass(frozen=True)
class BotProfile:
    """
    Everything that makes one bot persona: its rules, its postback routes and
    its fixed replies.

    text_rules answer free text; action_rules answer postback data that is an
    exact action label; postback_routes answer "key=value" postback data and
    are chosen by the first key.
    """

    name: str
    text_rules: RuleTable
    action_rules: RuleTable
    postback_routes: Mapping[str, PostbackRoute]
    echo_prefix: str
    welcome_text: str
    unknown_postback_text: str
    failure_text: str
