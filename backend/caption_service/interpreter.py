"""
Defensive parsing of chat-completion response envelopes.

Providers routed through OpenRouter disagree on where a choice keeps its
text: standard completions use message.content, streaming dialects use
delta.content, and some flatten it to a top-level content field. Each
location gets one extractor; they are tried in order and the first
non-empty result wins.
"""

from typing import Any, Callable, Dict, List, Tuple

ChoiceExtractor = Callable[[Dict[str, Any]], str]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _nested_content(choice: Dict[str, Any], key: str) -> str:
    inner = choice.get(key)
    if not isinstance(inner, dict):
        return ""
    return _text(inner.get("content"))


def message_content(choice: Dict[str, Any]) -> str:
    return _nested_content(choice, "message")


def delta_content(choice: Dict[str, Any]) -> str:
    return _nested_content(choice, "delta")


def flat_content(choice: Dict[str, Any]) -> str:
    return _text(choice.get("content"))


CHOICE_TEXT_EXTRACTORS: Tuple[ChoiceExtractor, ...] = (
    message_content,
    delta_content,
    flat_content,
)


def extract_choice_text(choice: Any) -> str:
    """
    Return the generated text of a single choice entry.

    Args:
        choice: One element of the envelope's "choices" list.

    Returns:
        str: The first non-empty candidate, or "" when none is populated.
    """
    if not isinstance(choice, dict):
        return ""
    for extractor in CHOICE_TEXT_EXTRACTORS:
        text = extractor(choice)
        if text:
            return text
    return ""


def envelope_choices(envelope: Any) -> List[Any]:
    """
    Return the "choices" list of a decoded envelope, or [] when it has none.

    A top-level JSON array has no choices. Entries are returned as they are,
    null included; extract_choice_text copes with non-object entries.
    """
    if not isinstance(envelope, dict):
        return []
    choices = envelope.get("choices")
    if not isinstance(choices, list):
        return []
    return choices
