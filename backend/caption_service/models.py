"""
Request model for caption generation.

A CaptionRequest is built from the inbound JSON body, validated once, and
never mutated afterwards.
"""

from dataclasses import dataclass
from typing import Any, Dict

from backend.caption_service.errors import ValidationError

DEFAULT_VARIANTS = 2
REQUIRED_FIELDS = ("platform", "language", "tone", "description")


@dataclass(frozen=True)
class CaptionRequest:
    platform: str
    language: str
    tone: str
    description: str
    variants: int = DEFAULT_VARIANTS

    @classmethod
    def from_json(cls, data: Any) -> "CaptionRequest":
        """
        Validate a decoded JSON body and build a CaptionRequest.

        Args:
            data: The decoded request body.

        Returns:
            CaptionRequest: With variants defaulted to 2 when absent or <= 0.

        Raises:
            ValidationError: If the body is not an object, a required field is
                missing, empty or not a string, or variants is not an integer.
        """
        if not isinstance(data, dict):
            raise ValidationError("request body must be a JSON object")

        missing = [name for name in REQUIRED_FIELDS if not _present(data, name)]
        if missing:
            raise ValidationError(f"missing required field(s): {', '.join(missing)}")

        for name in REQUIRED_FIELDS:
            if not isinstance(data[name], str):
                raise ValidationError(f"field '{name}' must be a string")

        return cls(
            platform=data["platform"],
            language=data["language"],
            tone=data["tone"],
            description=data["description"],
            variants=_effective_variants(data.get("variants")),
        )


def _present(data: Dict[str, Any], name: str) -> bool:
    value = data.get(name)
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def _effective_variants(raw: Any) -> int:
    if raw is None:
        return DEFAULT_VARIANTS
    # bool is an int subclass; reject it explicitly
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValidationError("field 'variants' must be an integer")
    if raw <= 0:
        return DEFAULT_VARIANTS
    return raw
