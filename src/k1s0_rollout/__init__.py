"""k1s0 rollout strategy library."""

from .apply import ApplyFeature
from .context import ClientContext, EvaluationContext
from .exceptions import RolloutError, RolloutErrorCodes
from .matchers import (
    AttributeMatcher,
    BooleanMatcher,
    DateMatcher,
    DateTimeMatcher,
    IpAddressMatcher,
    NumberMatcher,
    SemanticVersionMatcher,
    StringMatcher,
)
from .models import (
    FoundValue,
    RolloutStrategy,
    RolloutStrategyAttribute,
    StrategyAttributeCondition,
    StrategyAttributeType,
    parse_strategies,
)
from .percentage import MAX_PERCENTAGE, Murmur3PercentageCalculator, PercentageCalculator
from .registry import MatcherRegistry, MatcherRepository

__all__ = [
    "ApplyFeature",
    "AttributeMatcher",
    "BooleanMatcher",
    "ClientContext",
    "DateMatcher",
    "DateTimeMatcher",
    "EvaluationContext",
    "FoundValue",
    "IpAddressMatcher",
    "MAX_PERCENTAGE",
    "MatcherRegistry",
    "MatcherRepository",
    "Murmur3PercentageCalculator",
    "NumberMatcher",
    "PercentageCalculator",
    "RolloutError",
    "RolloutErrorCodes",
    "RolloutStrategy",
    "RolloutStrategyAttribute",
    "SemanticVersionMatcher",
    "StrategyAttributeCondition",
    "StrategyAttributeType",
    "StringMatcher",
    "parse_strategies",
]
