"""Template compiler - turns literal segments into operation factories."""

import logging
import re
from collections.abc import Hashable, Iterator, Sequence
from typing import Any

from cachetools import LRUCache  # type: ignore[import-untyped]

from tagql.core.entities.config import CompilerConfig
from tagql.core.entities.operation import Operation, OperationType
from tagql.core.entities.template import (
    CompiledTemplate,
    SubOperation,
    make_placeholder,
)
from tagql.core.services.interpolation import render

logger = logging.getLogger(__name__)

_NAME = r"[_A-Za-z][_0-9A-Za-z]*"
_MARKER = r"\x00\.?(\d+)\x01"

# keyword, optional name (literal or interpolated), optional variables or
# type condition, directives, "{"
_DEFINITION_PATTERN = re.compile(
    r"\b(query|mutation|subscription|fragment)\b\s*"
    rf"(?:({_NAME})|{_MARKER})?\s*"
    r"(?:\([^)]*\))?\s*"
    rf"(?:\bon\s+(?:{_NAME}|\x00\.?\d+\x01))?\s*"
    r"(?:@[^{]*)?"
    r"\{"
)

_SPREAD_PATTERN = re.compile(rf"\.\.\.\s*({_NAME})")

_SPREAD_OPERATOR = "..."


class TemplateError(ValueError):
    """Raised when template segments and values do not line up."""

    pass


class OperationTemplate:
    """Callable producing Operations for one definition of a template."""

    def __init__(
        self,
        template: CompiledTemplate,
        kind: OperationType,
        name: str | None,
        raw_query: str,
    ) -> None:
        self._template = template
        self._kind = kind
        self._name = name
        self._raw_query = raw_query

    def __call__(self, variables: dict[str, Any] | None = None) -> Operation:
        """Render the operation for a set of variables.

        Args:
            variables: Operation variables. Also passed to every callable
                interpolated into the template.

        Returns:
            A new Operation namespaced by the compiled template.
        """
        if variables is None:
            variables = {}
        return Operation(
            query=render(self._raw_query, variables, self._template.values),
            variables=variables,
            operation_name=self._name,
            type=self._kind,
            key=self._template,
        )

    @property
    def kind(self) -> OperationType:
        return self._kind

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def raw_query(self) -> str:
        return self._raw_query

    def __repr__(self) -> str:
        return f"OperationTemplate({self._kind.value} {self._name or '<anonymous>'})"


class OperationFactory:
    """Operations compiled from one template.

    Calling the factory renders the whole template as a single operation.
    Named operations and fragments are looked up by name::

        factory = gql(("query GetUser($id: ID!) { user(id: $id) { name } }",))
        factory["GetUser"]({"id": "1"})
    """

    def __init__(
        self,
        template: CompiledTemplate,
        descriptors: Sequence[SubOperation],
    ) -> None:
        self._template = template
        self._descriptors = tuple(descriptors)

        first = self._descriptors[0] if self._descriptors else None
        self._default = OperationTemplate(
            template,
            kind=first.kind if first else OperationType.QUERY,
            name=first.name if first else None,
            raw_query=template.text,
        )

        self._members: dict[str, OperationTemplate] = {}
        for descriptor in self._descriptors:
            if descriptor.name and descriptor.name not in self._members:
                self._members[descriptor.name] = OperationTemplate(
                    template,
                    kind=descriptor.kind,
                    name=descriptor.name,
                    raw_query=descriptor.raw_query,
                )

    def __call__(self, variables: dict[str, Any] | None = None) -> Operation:
        return self._default(variables)

    def __getitem__(self, name: str) -> OperationTemplate:
        return self._members[name]

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def get(self, name: str) -> OperationTemplate | None:
        return self._members.get(name)

    @property
    def template(self) -> CompiledTemplate:
        return self._template

    @property
    def descriptors(self) -> tuple[SubOperation, ...]:
        return self._descriptors

    @property
    def names(self) -> list[str]:
        return list(self._members)

    @property
    def operations(self) -> list[str]:
        """Names of the query, mutation and subscription definitions."""
        return [
            name for name, member in self._members.items()
            if member.kind is not OperationType.FRAGMENT
        ]

    @property
    def fragments(self) -> list[str]:
        """Names of the fragment definitions."""
        return [
            name for name, member in self._members.items()
            if member.kind is OperationType.FRAGMENT
        ]

    def __repr__(self) -> str:
        return f"OperationFactory({', '.join(self._members) or '<anonymous>'})"


class TemplateCompiler:
    """Compiles template segments into memoized operation factories.

    Factories are memoized on the identity of the segments sequence: the
    same sequence object always yields the same factory, while an equal but
    separately built sequence compiles anew. Values are captured on first
    compile. Plain strings have no meaningful identity and are memoized by
    value.
    """

    def __init__(self, config: CompilerConfig | None = None) -> None:
        """Initialize the compiler.

        Args:
            config: Optional compiler configuration.
        """
        self._config = config or CompilerConfig()
        # Entries keep the segments object alive so its id cannot be reused
        self._factories: LRUCache[Hashable, tuple[Any, OperationFactory]] = (
            LRUCache(maxsize=self._config.maxsize)
        )

    @property
    def config(self) -> CompilerConfig:
        return self._config

    def compile(
        self,
        strings: Any,
        values: Sequence[Any] = (),
    ) -> OperationFactory:
        """Compile template segments into an operation factory.

        Args:
            strings: Literal segments (tuple or list), a plain string, or an
                object exposing ``strings`` and ``values`` attributes.
            values: Interpolated values; one fewer than the segments.

        Returns:
            The memoized OperationFactory for these segments.

        Raises:
            TemplateError: If the number of values does not match the
                segments.
        """
        if hasattr(strings, "strings") and hasattr(strings, "values"):
            strings, values = strings.strings, tuple(strings.values)

        by_value = isinstance(strings, str)
        memo_key: Hashable = strings if by_value else id(strings)
        cached = self._factories.get(memo_key)
        if cached is not None and (by_value or cached[0] is strings):
            return cached[1]

        segments = (strings,) if isinstance(strings, str) else tuple(strings)
        values = tuple(values)
        if len(segments) != len(values) + 1:
            raise TemplateError(
                f"Expected {len(values) + 1} segments for {len(values)} "
                f"values, got {len(segments)}"
            )

        template = CompiledTemplate(text=self._join(segments), values=values)
        factory = OperationFactory(
            template, self._scan(template.text, template.values)
        )
        self._factories[memo_key] = (strings, factory)

        logger.debug("Compiled template %r with members %s", template, factory.names)
        return factory

    def clear(self) -> None:
        """Forget every memoized factory."""
        self._factories.clear()

    def __len__(self) -> int:
        return len(self._factories)

    @staticmethod
    def _join(segments: Sequence[str]) -> str:
        parts: list[str] = []
        for index, segment in enumerate(segments[:-1]):
            spread = segment.endswith(_SPREAD_OPERATOR)
            if spread:
                segment = segment[: -len(_SPREAD_OPERATOR)]
            parts.append(segment)
            parts.append(make_placeholder(index, spread))
        parts.append(segments[-1])
        return "".join(parts)

    @staticmethod
    def _scan(text: str, values: Sequence[Any] = ()) -> list[SubOperation]:
        """Split compiled text into top-level definitions.

        A name interpolated as a plain string is read from ``values``; any
        other interpolated name leaves the definition anonymous but keeps
        its kind.
        """
        matches = [
            match for match in _DEFINITION_PATTERN.finditer(text)
            if _depth(text, match.start()) == 0
        ]

        slices: list[tuple[OperationType, str | None, str, int]] = []
        for index, match in enumerate(matches):
            start = 0 if index == 0 else match.start()
            end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
            kind = OperationType(match.group(1))
            slices.append((kind, _definition_name(match, values), text[start:end], end))

        fragments = {
            name: raw
            for kind, name, raw, _ in slices
            if kind is OperationType.FRAGMENT and name
        }

        descriptors = []
        for kind, name, raw, end in slices:
            own_name = name if kind is OperationType.FRAGMENT else None
            descriptors.append(
                SubOperation(
                    kind=kind,
                    name=name,
                    raw_query=_inline_fragments(raw, fragments, own_name),
                    end_index=end,
                )
            )
        return descriptors


def _definition_name(match: re.Match[str], values: Sequence[Any]) -> str | None:
    if match.group(2):
        return match.group(2)
    if match.group(3) is None:
        return None
    value = values[int(match.group(3))]
    if isinstance(value, str) and re.fullmatch(_NAME, value):
        return value
    return None


def _depth(text: str, position: int) -> int:
    head = text[:position]
    return head.count("{") - head.count("}")


def _inline_fragments(
    raw: str,
    fragments: dict[str, str],
    own_name: str | None,
) -> str:
    """Append the fragments spread in ``raw`` until none is missing."""
    included = {own_name} if own_name else set()
    result = raw
    while True:
        missing = [
            name for name in dict.fromkeys(_SPREAD_PATTERN.findall(result))
            if name in fragments and name not in included
        ]
        if not missing:
            return result
        for name in missing:
            included.add(name)
            result = f"{result.rstrip()}\n{fragments[name]}"
