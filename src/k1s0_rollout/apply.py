"""ロールアウト戦略の適用"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from .context import EvaluationContext
from .exceptions import RolloutError
from .models import NOT_FOUND, FoundValue, RolloutStrategy
from .percentage import Murmur3PercentageCalculator, PercentageCalculator
from .registry import MatcherRegistry, MatcherRepository

logger = structlog.stdlib.get_logger(__name__)

PERCENTAGE_KEY_DELIMITER = "$"
MISSING_PERCENTAGE_ATTRIBUTE = "<none>"


class ApplyFeature:
    """順序付きの戦略リストを評価し、最初に一致した戦略の値を返す。

    状態を持たないため、複数スレッドから同時に呼び出せる。
    """

    def __init__(
        self,
        percentage_calculator: PercentageCalculator | None = None,
        matcher_repository: MatcherRepository | None = None,
    ) -> None:
        self._percentage_calculator = percentage_calculator or Murmur3PercentageCalculator()
        self._matcher_repository = matcher_repository or MatcherRegistry()

    def apply(
        self,
        strategies: Sequence[RolloutStrategy] | None,
        feature_key: str,
        feature_id: str,
        context: EvaluationContext | None,
    ) -> FoundValue:
        """戦略を順に評価する。

        Args:
            strategies: 評価する戦略。None は空として扱う
            feature_key: フィーチャー名 (ログ用)
            feature_id: フィーチャー ID (パーセンテージ計算に使用)
            context: 評価コンテキスト

        Returns:
            最初に属性条件とパーセンテージ条件の両方を満たした戦略の値。
            一致しなければ matched=False。
        """
        if context is None or not strategies:
            return NOT_FOUND

        for index, strategy in enumerate(strategies):
            attr_match = True
            if strategy.has_attributes():
                attr_match = self.match_attributes(context, strategy)

            pct_match = True
            if strategy.has_percentage():
                pct_match = self.match_percentage(context, strategy, feature_id)

            if attr_match and pct_match:
                logger.debug(
                    "rollout strategy matched",
                    feature_key=feature_key,
                    strategy_index=index,
                )
                return FoundValue(matched=True, value=strategy.value)

        return NOT_FOUND

    def match_attributes(self, context: EvaluationContext, strategy: RolloutStrategy) -> bool:
        for attribute in strategy.attributes:
            if attribute.field_name is None:
                return False
            supplied = context.get_attr(attribute.field_name)
            if supplied is None:
                return False
            try:
                matcher = self._matcher_repository.find_matcher(attribute.type)
            except RolloutError as e:
                logger.warning(
                    "rollout attribute skipped",
                    field_name=attribute.field_name,
                    attribute_type=str(attribute.type),
                    error=str(e),
                )
                return False
            if not matcher.match(supplied, attribute):
                return False
        return True

    def match_percentage(
        self, context: EvaluationContext, strategy: RolloutStrategy, feature_id: str
    ) -> bool:
        percentage_key = self.determine_percentage_key(context, strategy)
        if percentage_key is None:
            return False
        client_percentage = self._percentage_calculator.determine_client_percentage(
            percentage_key, feature_id
        )
        return client_percentage < strategy.percentage

    @staticmethod
    def determine_percentage_key(
        context: EvaluationContext, strategy: RolloutStrategy
    ) -> str | None:
        """パーセンテージ計算に使うバケッティングキーを決める。

        percentage_attributes がなければコンテキストの既定キー、あれば各属性値
        (なければ "<none>") を "$" で連結した文字列。
        """
        if not strategy.has_percentage_attributes():
            return context.default_percentage_key()
        return PERCENTAGE_KEY_DELIMITER.join(
            str(context.get_attr(name, MISSING_PERCENTAGE_ATTRIBUTE))
            for name in strategy.percentage_attributes
        )
