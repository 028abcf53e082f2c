"""
StayPlaces API: Request Validator
==================================

What:  Declarative field rules applied to a place body before any mutation.
How:   Each FieldRule names a dotted key path, a label used in messages, the
       expected kind, and whether the field is required. `validate()` walks
       the rules in order and collects one message per failing field.
Who:   PlaceService, for both create and update.

Check order per field (first failure wins):
    1. exists     → "<Label> is required"      (required fields only)
    2. type       → "<Label> must be a <kind>"
    3. non-empty  → "<Label> cannot be empty"  (strings, objects)
"""

from typing import Any, Dict, List, Optional, Sequence

from stayplaces.exceptions import ValidationError

_MISSING = object()


class FieldRule:
    """A single presence/non-empty/type rule for one field of a body."""

    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"

    def __init__(self, path: str, label: str, kind: str = STRING, required: bool = True):
        self.path = path
        self.label = label
        self.kind = kind
        self.required = required

    def lookup(self, body: Dict[str, Any]) -> Any:
        """Resolve the dotted path in body, or _MISSING if any hop is absent."""
        value: Any = body
        for key in self.path.split("."):
            if not isinstance(value, dict) or key not in value:
                return _MISSING
            value = value[key]
        return value

    def check(self, body: Dict[str, Any]) -> Optional[str]:
        """Return the first failed-check message for this field, or None."""
        value = self.lookup(body)

        if value is _MISSING or value is None:
            return f"{self.label} is required" if self.required else None

        if self.kind == self.STRING:
            if not isinstance(value, str):
                return f"{self.label} must be a string"
            if not value.strip():
                return f"{self.label} cannot be empty"
        elif self.kind == self.NUMBER:
            # bool is an int subclass; true/false are not coordinates or prices
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return f"{self.label} must be a number"
        elif self.kind == self.OBJECT:
            if not isinstance(value, dict):
                return f"{self.label} must be an object"
            if not value:
                return f"{self.label} cannot be empty"

        return None


# ── Place Rule Set ────────────────────────────────────────────────────────
# One rule set for create and update; update validates the merged record.
PLACE_RULES: List[FieldRule] = [
    FieldRule("title", "Title"),
    FieldRule("description", "Description"),
    FieldRule("price", "Price", FieldRule.NUMBER, required=False),
    FieldRule("address", "Address", FieldRule.OBJECT),
    FieldRule("address.street", "Street"),
    FieldRule("address.city", "City"),
    FieldRule("address.zipcode", "Zip code"),
    FieldRule("address.country", "Country"),
    FieldRule("address.latitude", "Latitude", FieldRule.NUMBER),
    FieldRule("address.longitude", "Longitude", FieldRule.NUMBER),
]


def validate(body: Any, rules: Sequence[FieldRule] = PLACE_RULES) -> List[Dict[str, str]]:
    """
    Apply rules to body.

    Returns:
        An empty list when every rule passes, otherwise one
        `{"field": path, "message": text}` entry per failing field, in rule
        order. Sub-field rules are skipped when their parent object is
        already reported, so a missing address yields one message, not seven.
    """
    if not isinstance(body, dict):
        return [{"field": "body", "message": "Body must be a JSON object"}]

    errors: List[Dict[str, str]] = []
    failed_paths: List[str] = []
    for rule in rules:
        if any(rule.path.startswith(parent + ".") for parent in failed_paths):
            continue
        message = rule.check(body)
        if message:
            errors.append({"field": rule.path, "message": message})
            failed_paths.append(rule.path)
    return errors


def ensure_valid(body: Any, rules: Sequence[FieldRule] = PLACE_RULES) -> None:
    """Raise ValidationError carrying every field error, if there are any."""
    errors = validate(body, rules)
    if errors:
        raise ValidationError(message="Place validation failed", errors=errors)
