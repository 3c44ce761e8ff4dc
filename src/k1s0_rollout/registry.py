"""属性型からマッチャーを引くレジストリ"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

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
from .models import StrategyAttributeType


class MatcherRepository(Protocol):
    """属性型に対応するマッチャーを返すプロトコル。"""

    def find_matcher(self, attribute_type: StrategyAttributeType | str | None) -> AttributeMatcher: ...


def default_matchers() -> dict[StrategyAttributeType, AttributeMatcher]:
    """全ての属性型に対応するマッチャーを返す。"""
    return {
        StrategyAttributeType.STRING: StringMatcher(),
        StrategyAttributeType.NUMBER: NumberMatcher(),
        StrategyAttributeType.DATE: DateMatcher(),
        StrategyAttributeType.DATETIME: DateTimeMatcher(),
        StrategyAttributeType.SEMANTIC_VERSION: SemanticVersionMatcher(),
        StrategyAttributeType.IP_ADDRESS: IpAddressMatcher(),
        StrategyAttributeType.BOOLEAN: BooleanMatcher(),
    }


class MatcherRegistry:
    """属性型とマッチャーの 1 対 1 の対応表。構築後は変更しない。"""

    def __init__(
        self, matchers: Mapping[StrategyAttributeType, AttributeMatcher] | None = None
    ) -> None:
        self._matchers = dict(default_matchers() if matchers is None else matchers)

    def find_matcher(self, attribute_type: StrategyAttributeType | str | None) -> AttributeMatcher:
        """属性型に対応するマッチャーを返す。

        Raises:
            RolloutError: 未登録の型の場合 (UNKNOWN_ATTRIBUTE_TYPE)
        """
        try:
            key = StrategyAttributeType(attribute_type)
        except ValueError as e:
            raise RolloutError(
                code=RolloutErrorCodes.UNKNOWN_ATTRIBUTE_TYPE,
                message=f"Unknown attribute type: {attribute_type}",
                cause=e,
            ) from e
        matcher = self._matchers.get(key)
        if matcher is None:
            raise RolloutError(
                code=RolloutErrorCodes.UNKNOWN_ATTRIBUTE_TYPE,
                message=f"No matcher registered for attribute type: {key.value}",
            )
        return matcher
