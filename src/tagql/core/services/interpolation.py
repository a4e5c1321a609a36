"""Placeholder substitution for compiled templates."""

import re
from collections.abc import Sequence
from typing import Any

from tagql.core.entities.operation import Operation
from tagql.core.entities.template import PLACEHOLDER_PATTERN


def render(
    text: str,
    variables: dict[str, Any] | None,
    values: Sequence[Any],
) -> str:
    """Substitute every placeholder marker in ``text``.

    Each marker resolves to ``values[index]``. Callables are invoked with
    the call-time ``variables`` first, which lets factories, operation
    templates and plain functions be interpolated. Fragment operations are
    spread as ``...Name`` on a spread marker and only registered on a plain
    marker; their bodies are appended once, after the rendered text.
    ``None`` renders as an empty string and everything else through
    ``str()``.

    Args:
        text: Compiled template text.
        variables: Variables passed to the operation.
        values: Interpolated values, indexed by the markers.

    Returns:
        The query text with no markers left.
    """
    fragments: list[str] = []

    def substitute(match: re.Match[str]) -> str:
        spread = bool(match.group(1))
        value = values[int(match.group(2))]

        if callable(value):
            value = value(variables)

        if isinstance(value, Operation) and value.is_fragment:
            if value.query not in fragments:
                fragments.append(value.query)
            if spread and value.operation_name:
                return f"...{value.operation_name}"
            return ""

        if value is None:
            return ""
        if spread:
            return f"...{value}"
        return str(value)

    rendered = PLACEHOLDER_PATTERN.sub(substitute, text)
    return _append_fragments(rendered, fragments)


def _append_fragments(rendered: str, fragments: list[str]) -> str:
    # Skip bodies already present, e.g. nested inside another fragment
    tail: list[str] = []
    for fragment in fragments:
        body = fragment.strip()
        if body in rendered or any(body in other for other in tail):
            continue
        tail = [other for other in tail if other not in body]
        tail.append(body)

    if not tail:
        return rendered
    return " ".join([rendered, *tail])
