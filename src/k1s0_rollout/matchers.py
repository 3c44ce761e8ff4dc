"""属性型ごとのマッチャー実装"""

from __future__ import annotations

import ipaddress
import operator
import re
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, Callable, Protocol

import semver
import structlog

from .models import RolloutStrategyAttribute
from .models import StrategyAttributeCondition as Condition

logger = structlog.stdlib.get_logger(__name__)

_POSITIVE = (Condition.EQUALS, Condition.INCLUDES)
_NEGATIVE = (Condition.NOT_EQUALS, Condition.EXCLUDES)
_ORDINAL: dict[Any, Callable[[Any, Any], bool]] = {
    Condition.GREATER: operator.gt,
    Condition.GREATER_EQUALS: operator.ge,
    Condition.LESS: operator.lt,
    Condition.LESS_EQUALS: operator.le,
}


class AttributeMatcher(Protocol):
    """コンテキストの値を属性条件と比較するプロトコル。"""

    def match(self, actual: Any, attribute: RolloutStrategyAttribute) -> bool: ...


class ParsedValueMatcher(ABC):
    """値を型固有の表現に変換してから比較するマッチャーの基底クラス。

    解析できないルール値は無視し、解析できる値が 1 つもなければ不一致とする。
    """

    ordered: bool = True

    @abstractmethod
    def parse(self, raw: Any) -> Any:
        """値を変換する。変換できなければ ValueError, TypeError, OverflowError のいずれかを送出する。"""

    def match(self, actual: Any, attribute: RolloutStrategyAttribute) -> bool:
        try:
            value = self.parse(actual)
        except (ValueError, TypeError, OverflowError):
            logger.debug(
                "unparseable context value",
                field_name=attribute.field_name,
                attribute_type=str(attribute.type),
            )
            return False
        operands = self._parse_operands(attribute)
        if not operands:
            return False
        return self.compare(value, operands, attribute.conditional)

    def compare(self, value: Any, operands: list[Any], conditional: Condition | str | None) -> bool:
        if conditional in _POSITIVE:
            return any(value == operand for operand in operands)
        if conditional in _NEGATIVE:
            return not any(value == operand for operand in operands)
        compare = _ORDINAL.get(conditional)
        if compare is not None and self.ordered:
            return any(compare(value, operand) for operand in operands)
        return False

    def _parse_operands(self, attribute: RolloutStrategyAttribute) -> list[Any]:
        operands = []
        for raw in attribute.values:
            try:
                operands.append(self.parse(raw))
            except (ValueError, TypeError, OverflowError):
                logger.debug(
                    "unparseable rule value",
                    field_name=attribute.field_name,
                    attribute_type=str(attribute.type),
                    value=raw,
                )
        return operands


class StringMatcher(ParsedValueMatcher):
    ordered = False

    def parse(self, raw: Any) -> str:
        return raw if isinstance(raw, str) else str(raw)

    def compare(self, value: str, operands: list[Any], conditional: Condition | str | None) -> bool:
        if conditional == Condition.STARTS_WITH:
            return any(value.startswith(operand) for operand in operands)
        if conditional == Condition.ENDS_WITH:
            return any(value.endswith(operand) for operand in operands)
        if conditional == Condition.REGEX:
            try:
                return re.search(operands[0], value) is not None
            except re.error:
                logger.debug("invalid regex", pattern=operands[0])
                return False
        return super().compare(value, operands, conditional)


class NumberMatcher(ParsedValueMatcher):
    def parse(self, raw: Any) -> float:
        return float(raw)


class DateMatcher(ParsedValueMatcher):
    def parse(self, raw: Any) -> date:
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        return date.fromisoformat(str(raw))


class DateTimeMatcher(ParsedValueMatcher):
    def parse(self, raw: Any) -> datetime:
        if isinstance(raw, datetime):
            parsed = raw
        else:
            text = str(raw)
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        # naive は UTC とみなす
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


class SemanticVersionMatcher(ParsedValueMatcher):
    def parse(self, raw: Any) -> semver.Version:
        if isinstance(raw, semver.Version):
            return raw
        return semver.Version.parse(str(raw), optional_minor_and_patch=True)


class IpAddressMatcher(ParsedValueMatcher):
    """ルール値はアドレスまたは CIDR 表記のネットワーク。"""

    ordered = False

    def parse(self, raw: Any) -> Any:
        return ipaddress.ip_network(str(raw), strict=False)

    def match(self, actual: Any, attribute: RolloutStrategyAttribute) -> bool:
        try:
            address = ipaddress.ip_address(str(actual))
        except ValueError:
            logger.debug(
                "unparseable context value",
                field_name=attribute.field_name,
                attribute_type=str(attribute.type),
            )
            return False
        networks = self._parse_operands(attribute)
        if not networks:
            return False
        return self.compare(address, networks, attribute.conditional)

    def compare(self, value: Any, operands: list[Any], conditional: Condition | str | None) -> bool:
        if conditional in _POSITIVE:
            return any(value in network for network in operands)
        if conditional in _NEGATIVE:
            return not any(value in network for network in operands)
        return False


class BooleanMatcher(ParsedValueMatcher):
    ordered = False

    def parse(self, raw: Any) -> bool:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
        raise ValueError(f"not a boolean: {raw!r}")

    def compare(self, value: bool, operands: list[Any], conditional: Condition | str | None) -> bool:
        # 真偽値は先頭のルール値とだけ比較する
        if conditional == Condition.EQUALS:
            return value == operands[0]
        if conditional == Condition.NOT_EQUALS:
            return value != operands[0]
        return False
