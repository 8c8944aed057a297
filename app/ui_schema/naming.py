"""Naming and formatting helpers for entity ids, titles, and field labels."""
import json
import re
from typing import Any, List

_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")


def split_words(name: str) -> List[str]:
    """Split camelCase, PascalCase, snake_case and kebab-case names into words."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1 \2', name)
    s2 = re.sub('([a-z0-9])([A-Z])', r'\1 \2', s1)
    return [w for w in _WORD_SPLIT.split(s2) if w]


def capitalize(word: str) -> str:
    if not word:
        return ""
    return word[0].upper() + word[1:]


def to_pascal_case(name: str) -> str:
    """Convert any delimited or camelCase name to PascalCase."""
    return "".join(capitalize(w) for w in split_words(name))


def singularize(word: str) -> str:
    """Very basic plural-to-singular for English resource names."""
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + ("Y" if word[-3:].isupper() else "y")
    if lower.endswith("ss") or lower.endswith("us"):
        return word
    if lower.endswith("sses") or lower.endswith("xes") or lower.endswith("ches") or lower.endswith("shes"):
        return word[:-2]
    if lower.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def humanize(name: str) -> str:
    """Human label for a field or entity name, e.g. createdAt -> Created At."""
    words = []
    for word in split_words(name):
        if word.lower() == "id":
            words.append("ID")
        else:
            words.append(capitalize(word))
    return " ".join(words) or name


def stringify_enum_value(value: Any) -> str:
    """Render a raw enum value the way it is spelled in JSON."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, type(None))):
        return json.dumps(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)
