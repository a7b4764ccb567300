from dataclasses import dataclass
from enum import Enum


class FieldKind(str, Enum):
    """Interactive form control kinds that carry a user-entered value."""

    TEXT = "text"
    CHECKBOX = "checkbox"
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"
    RADIO = "radio"


FieldValue = str | bool | list[str] | None


@dataclass(frozen=True)
class FormField:
    """Raw value of one named form field as read from the document."""

    name: str
    kind: FieldKind
    value: FieldValue = None
