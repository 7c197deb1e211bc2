"""Document selector evaluation.

A selector is a JSON document of nested key/value equality predicates, e.g.
``{"selector": {"docType": "enterprise", "state": "BLACKLISTED"}}``. The outer
``selector`` envelope is optional. A mapping predicate matches a nested
mapping field recursively; any other predicate value must equal the field.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Union

SelectorLike = Union[str, bytes, Mapping[str, Any]]


def parse_selector(selector: SelectorLike) -> Dict[str, Any]:
    """Normalize a selector to its predicate mapping.

    Raises:
        ValueError: The selector is not a JSON object
    """
    if isinstance(selector, (str, bytes)):
        selector = json.loads(selector)
    if not isinstance(selector, Mapping):
        raise ValueError("selector must be a JSON object")
    if "selector" in selector:
        inner = selector["selector"]
        if not isinstance(inner, Mapping):
            raise ValueError("'selector' must be a JSON object")
        return dict(inner)
    return dict(selector)


def matches(document: Mapping[str, Any], predicates: Mapping[str, Any]) -> bool:
    for key, expected in predicates.items():
        if key not in document:
            return False
        actual = document[key]
        if isinstance(expected, Mapping):
            if not isinstance(actual, Mapping) or not matches(actual, expected):
                return False
        elif actual != expected:
            return False
    return True


def selector_json(predicates: Mapping[str, Any]) -> str:
    return json.dumps({"selector": dict(predicates)}, sort_keys=True)


__all__ = ["SelectorLike", "parse_selector", "matches", "selector_json"]
