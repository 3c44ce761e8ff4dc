"""ロールアウト戦略のデータモデル"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import RolloutError, RolloutErrorCodes


class StrategyAttributeType(str, Enum):
    """属性値の型。"""

    STRING = "STRING"
    NUMBER = "NUMBER"
    DATE = "DATE"
    DATETIME = "DATETIME"
    SEMANTIC_VERSION = "SEMANTIC_VERSION"
    IP_ADDRESS = "IP_ADDRESS"
    BOOLEAN = "BOOLEAN"


class StrategyAttributeCondition(str, Enum):
    """属性の比較演算子。"""

    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    INCLUDES = "INCLUDES"
    EXCLUDES = "EXCLUDES"
    GREATER = "GREATER"
    GREATER_EQUALS = "GREATER_EQUALS"
    LESS = "LESS"
    LESS_EQUALS = "LESS_EQUALS"
    REGEX = "REGEX"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"


class RolloutStrategyAttribute(BaseModel):
    """戦略の属性条件。

    type / conditional はサーバー側で追加された未知の値も文字列のまま保持する。
    欠けたフィールドは None となり、その属性だけが不一致になる。
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_name: str | None = Field(default=None, alias="fieldName")
    conditional: StrategyAttributeCondition | str | None = Field(default=None, union_mode="left_to_right")
    values: tuple[str, ...] = ()
    type: StrategyAttributeType | str | None = Field(default=None, union_mode="left_to_right")


class RolloutStrategy(BaseModel):
    """ロールアウト戦略。percentage は MAX_PERCENTAGE スケール。"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: Any = None
    percentage: int | None = None
    percentage_attributes: tuple[str, ...] | None = Field(
        default=None, alias="percentageAttributes"
    )
    attributes: tuple[RolloutStrategyAttribute, ...] = ()

    def has_percentage(self) -> bool:
        return self.percentage is not None

    def has_percentage_attributes(self) -> bool:
        return bool(self.percentage_attributes)

    def has_attributes(self) -> bool:
        return bool(self.attributes)


@dataclass(frozen=True)
class FoundValue:
    """戦略評価結果。matched が False の場合 value は常に None。"""

    matched: bool
    value: Any = None


NOT_FOUND = FoundValue(matched=False)


def parse_strategies(
    records: Sequence[Mapping[str, Any]] | None,
) -> tuple[RolloutStrategy, ...]:
    """設定レコード列から RolloutStrategy のタプルを構築する。

    records: camelCase キーのレコード列。None は空として扱う。

    Raises:
        RolloutError: レコードの検証に失敗した場合 (INVALID_STRATEGY)
    """
    if records is None:
        return ()
    strategies: list[RolloutStrategy] = []
    for index, record in enumerate(records):
        try:
            strategies.append(RolloutStrategy.model_validate(record))
        except ValidationError as e:
            raise RolloutError(
                code=RolloutErrorCodes.INVALID_STRATEGY,
                message=f"Invalid rollout strategy at index {index}: {e}",
                cause=e,
            ) from e
    return tuple(strategies)
