"""Pattern Compiler - Route pattern parsing.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Grammar, one entry per slash-delimited part:

    literal            users
    {name}             any non-empty segment, bound to ``name``
    {name}<regex>      segment fully matching ``regex``, bound to ``name``

    /users/{id}<\\d+>/posts
        │      │        │
        ▼      ▼        ▼
    Segment("", "users")  Segment("id", /\\d+/)  Segment("", "posts")
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Pattern, Tuple, Union

from roadrouter_core.errors import CompileError

logger = logging.getLogger(__name__)

DEFAULT_CONSTRAINT = ".+"

_CAPTURE = re.compile(r"^\{(?P<key>\w+)\}(?:<(?P<constraint>.+)>)?$")

# Word chars, escapes, anchors, groups, classes, quantifiers, punctuation
_SAFE_CONSTRAINT = re.compile(r"^[\w\\^$()\[\]{}+*?.,;:!=<>|%&£-]+$")


def split_path(path: str) -> List[str]:
    """Split a path or pattern into its slash-delimited parts.

    Leading and trailing slashes are ignored, so "" and "/" both
    yield no parts.
    """
    trimmed = path.strip("/")
    if not trimmed:
        return []
    return trimmed.split("/")


@dataclass(frozen=True)
class Segment:
    """One compiled unit of a route pattern."""

    key: str
    matcher: Union[str, Pattern[str]]
    is_capture: bool = False

    def matches(self, value: str) -> bool:
        """Check if a path segment satisfies this segment."""
        if self.is_capture:
            return self.matcher.fullmatch(value) is not None
        return self.matcher == value

    @property
    def constraint(self) -> str:
        """Source of the capture constraint, or the literal text."""
        if self.is_capture:
            return self.matcher.pattern
        return self.matcher


class PatternCompiler:
    """Compiles route patterns into ordered segment tuples.

    Results are cached per pattern; segments are immutable so the
    same tuple can be shared by every route using that pattern.
    """

    def __init__(self):
        self._cache: Dict[str, Tuple[Segment, ...]] = {}

    def compile(self, pattern: str) -> Tuple[Segment, ...]:
        """Compile pattern to segments."""
        if pattern in self._cache:
            return self._cache[pattern]

        segments = []
        seen = set()

        for part in split_path(pattern):
            segment = self._compile_part(pattern, part)
            if segment.is_capture:
                if segment.key in seen:
                    raise CompileError(
                        f'Duplicate variable "{segment.key}" in pattern "{pattern}"'
                    )
                seen.add(segment.key)
            segments.append(segment)

        compiled = tuple(segments)
        self._cache[pattern] = compiled
        logger.debug(f"Compiled {pattern!r} into {len(compiled)} segment(s)")
        return compiled

    def _compile_part(self, pattern: str, part: str) -> Segment:
        """Compile a single slash-delimited part."""
        match = _CAPTURE.match(part)

        if not match:
            if part.startswith("{"):
                raise CompileError(f'Malformed capture "{part}" in pattern "{pattern}"')
            return Segment(key="", matcher=part, is_capture=False)

        constraint = match.group("constraint")
        if constraint is None:
            constraint = DEFAULT_CONSTRAINT
        elif not _SAFE_CONSTRAINT.match(constraint):
            raise CompileError(
                f'Unsupported characters in constraint "{constraint}" of pattern "{pattern}"'
            )

        try:
            regex = re.compile(constraint)
        except re.error as e:
            raise CompileError(
                f'Invalid constraint "{constraint}" in pattern "{pattern}": {e}'
            ) from e

        return Segment(key=match.group("key"), matcher=regex, is_capture=True)


_default_compiler = PatternCompiler()


def compile_pattern(pattern: str) -> Tuple[Segment, ...]:
    """Compile pattern with the shared compiler."""
    return _default_compiler.compile(pattern)


__all__ = [
    "DEFAULT_CONSTRAINT",
    "Segment",
    "PatternCompiler",
    "compile_pattern",
    "split_path",
]
