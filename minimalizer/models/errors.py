"""
Validation error collection keyed by attribute
"""
import re
from typing import Any, Dict, Iterator, List, Optional

DEFAULT_MESSAGES = {
    "blank": "can't be blank",
    "present": "must be blank",
    "taken": "has already been taken",
    "invalid": "is invalid",
    "inclusion": "is not included in the list",
    "exclusion": "is reserved",
    "too_short": "is too short (minimum is %{count} characters)",
    "too_long": "is too long (maximum is %{count} characters)",
    "wrong_length": "is the wrong length (should be %{count} characters)",
    "not_a_number": "is not a number",
    "greater_than": "must be greater than %{count}",
    "less_than": "must be less than %{count}",
    "confirmation": "doesn't match %{attribute}",
    "accepted": "must be accepted",
    "restrict_dependent_destroy": "cannot be deleted because dependent %{record} exist",
}

_PLACEHOLDER = re.compile(r"%\{(\w+)\}")

BASE = "base"


def default_message(error: str, **options) -> str:
    template = DEFAULT_MESSAGES.get(error, error.replace("_", " "))
    return _PLACEHOLDER.sub(
        lambda m: str(options.get(m.group(1), m.group(0))),
        template,
    )


def humanize(attribute: str) -> str:
    if attribute.endswith("_id"):
        attribute = attribute[:-3]
    return attribute.replace("_", " ").capitalize()


class Errors:
    """Field-keyed validation failures with structured details"""

    def __init__(self):
        self._messages: Dict[str, List[str]] = {}
        self._details: Dict[str, List[Dict[str, Any]]] = {}

    def add(self, attribute: str, error: str = "invalid", message: Optional[str] = None, **options):
        """Record a failure; details keep the code and any options"""
        detail = {"error": error}
        detail.update(options)
        self._details.setdefault(attribute, []).append(detail)
        self._messages.setdefault(attribute, []).append(
            message if message is not None else default_message(error, **options)
        )

    def __getitem__(self, attribute: str) -> List[str]:
        return list(self._messages.get(attribute, []))

    @property
    def details(self) -> Dict[str, List[Dict[str, Any]]]:
        """Details for every attribute; missing attributes read as empty"""
        return _DetailsView(self._details)

    @property
    def messages(self) -> Dict[str, List[str]]:
        return {attribute: list(messages) for attribute, messages in self._messages.items()}

    def added(self, attribute: str, error: str = "invalid", **options) -> bool:
        detail = {"error": error}
        detail.update(options)
        return detail in self._details.get(attribute, [])

    def of_kind(self, attribute: str, error: str = "invalid") -> bool:
        return any(d["error"] == error for d in self._details.get(attribute, []))

    def include(self, attribute: str) -> bool:
        return bool(self._messages.get(attribute))

    def __contains__(self, attribute: str) -> bool:
        return self.include(attribute)

    def full_messages_for(self, attribute: str) -> List[str]:
        if attribute == BASE:
            return self[attribute]
        return [f"{humanize(attribute)} {message}" for message in self[attribute]]

    def full_messages(self) -> List[str]:
        messages = []
        for attribute in self._messages:
            messages.extend(self.full_messages_for(attribute))
        return messages

    def clear(self):
        self._messages.clear()
        self._details.clear()

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return len(self) > 0

    def to_dict(self) -> Dict[str, List[str]]:
        return self.messages

    def __repr__(self):
        return f"<Errors {self.messages!r}>"


class _DetailsView(dict):
    """dict whose missing keys read as an empty list"""

    def __missing__(self, key):
        return []
