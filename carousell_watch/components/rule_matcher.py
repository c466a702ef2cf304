"""Rule matcher for evaluating boolean rule trees against listing text."""

import logging
from typing import Optional

from ..models.rule import Rule, RuleKind
from ..utils.error_handling import RuleConfigurationError
from .text_normalizer import normalize, normalize_whitespace

logger = logging.getLogger(__name__)


class RuleMatcher:
    """Evaluates a rule tree against text.

    Matching is case-insensitive. ``phrase`` additionally ignores differences
    in whitespace; ``contains`` compares the raw lower-cased strings.
    """

    def matches(self, text: Optional[str], rule: Optional[Rule]) -> bool:
        """Return True if the text satisfies the rule.

        A missing rule matches everything.

        Raises:
            RuleConfigurationError: If the tree is too deep to evaluate.
        """
        try:
            return self._evaluate(text, rule)
        except RecursionError:
            raise RuleConfigurationError(
                "Rule tree is nested too deeply to evaluate"
            ) from None

    def _evaluate(self, text: Optional[str], rule: Optional[Rule]) -> bool:
        if rule is None or rule.kind == RuleKind.EMPTY:
            return True

        if rule.kind == RuleKind.CONTAINS:
            return normalize(rule.needle) in normalize(text)

        if rule.kind == RuleKind.PHRASE:
            return normalize_whitespace(rule.needle) in normalize_whitespace(text)

        if rule.kind == RuleKind.ALL:
            return all(self._evaluate(text, child) for child in rule.children)

        if rule.kind == RuleKind.ANY:
            return any(self._evaluate(text, child) for child in rule.children)

        # already warned about at parse time
        logger.debug(
            f"Unrecognised rule {rule.kind.value} {list(rule.unknown_keys)} treated as no match"
        )
        return False
