"""
Rule tree models.

A rule is a tagged variant: exactly one of ``contains``, ``phrase``, ``all``,
``any`` is populated, or none at all (``EMPTY``, matches everything).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from ..utils.error_handling import RuleConfigurationError

logger = logging.getLogger(__name__)


class RuleKind(Enum):
    """Variant tag of a rule node."""

    CONTAINS = "contains"
    PHRASE = "phrase"
    ALL = "all"
    ANY = "any"
    EMPTY = "empty"
    UNKNOWN = "unknown"


# Precedence when a config mapping carries several recognised keys.
RULE_KEY_PRECEDENCE = (RuleKind.CONTAINS, RuleKind.PHRASE, RuleKind.ALL, RuleKind.ANY)


@dataclass(frozen=True)
class Rule:
    """A node of a boolean rule tree."""

    kind: RuleKind
    needle: Optional[str] = None
    children: Tuple["Rule", ...] = ()
    unknown_keys: Tuple[str, ...] = field(default=())

    @classmethod
    def contains(cls, needle: str) -> "Rule":
        return cls(RuleKind.CONTAINS, needle=needle)

    @classmethod
    def phrase(cls, needle: str) -> "Rule":
        return cls(RuleKind.PHRASE, needle=needle)

    @classmethod
    def all_of(cls, *children: "Rule") -> "Rule":
        return cls(RuleKind.ALL, children=tuple(children))

    @classmethod
    def any_of(cls, *children: "Rule") -> "Rule":
        return cls(RuleKind.ANY, children=tuple(children))

    @classmethod
    def empty(cls) -> "Rule":
        return cls(RuleKind.EMPTY)

    def validate(self) -> bool:
        """Validate that each node of the tree carries exactly its variant's payload."""
        if not isinstance(self.kind, RuleKind):
            raise ValueError("kind must be a RuleKind enum")

        if self.kind in (RuleKind.CONTAINS, RuleKind.PHRASE):
            if not isinstance(self.needle, str):
                raise ValueError(f"{self.kind.value} rule requires a string needle")
            if self.children or self.unknown_keys:
                raise ValueError(f"{self.kind.value} rule cannot have children")

        elif self.kind in (RuleKind.ALL, RuleKind.ANY):
            if self.needle is not None or self.unknown_keys:
                raise ValueError(f"{self.kind.value} rule cannot have a needle")
            for child in self.children:
                if not isinstance(child, Rule):
                    raise ValueError(f"{self.kind.value} children must be rules")
                child.validate()

        elif self.kind == RuleKind.EMPTY:
            if self.needle is not None or self.children or self.unknown_keys:
                raise ValueError("empty rule cannot carry a payload")

        elif self.kind == RuleKind.UNKNOWN:
            if self.needle is not None or self.children:
                raise ValueError("unknown rule cannot carry a payload")

        return True

    @classmethod
    def from_config(cls, raw: Any) -> "Rule":
        """
        Build a rule tree from its configuration form.

        ``None`` and ``{}`` give an EMPTY rule. Several recognised keys in one
        mapping resolve by RULE_KEY_PRECEDENCE, and a mapping with no
        recognised key gives an UNKNOWN rule, which never matches.

        Raises:
            RuleConfigurationError: If the value has the wrong shape or is
                nested too deeply to evaluate.
        """
        try:
            return cls._parse(raw, "match")
        except RecursionError:
            raise RuleConfigurationError("Rule tree is nested too deeply") from None

    @classmethod
    def _parse(cls, raw: Any, path: str) -> "Rule":
        if raw is None:
            return cls.empty()

        if not isinstance(raw, dict):
            raise RuleConfigurationError(
                f"Rule at '{path}' must be a mapping, got {type(raw).__name__}"
            )

        if not raw:
            return cls.empty()

        recognised = [kind for kind in RULE_KEY_PRECEDENCE if kind.value in raw]
        if not recognised:
            keys = tuple(sorted(str(key) for key in raw))
            logger.warning(f"Unrecognised rule at '{path}' with keys {list(keys)}; it will never match")
            return cls(RuleKind.UNKNOWN, unknown_keys=keys)

        kind = recognised[0]
        ignored = [key for key in raw if key != kind.value]
        if ignored:
            logger.warning(
                f"Rule at '{path}' uses '{kind.value}'; ignoring other keys {ignored}"
            )

        value = raw[kind.value]
        if kind in (RuleKind.CONTAINS, RuleKind.PHRASE):
            if not isinstance(value, str):
                raise RuleConfigurationError(
                    f"'{kind.value}' at '{path}' must be a string"
                )
            return cls(kind, needle=value)

        if not isinstance(value, list):
            raise RuleConfigurationError(f"'{kind.value}' at '{path}' must be a list")

        children = tuple(
            cls._parse(child, f"{path}.{kind.value}[{index}]")
            for index, child in enumerate(value)
        )
        return cls(kind, children=children)
