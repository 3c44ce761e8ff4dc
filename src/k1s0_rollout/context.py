"""評価コンテキスト"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

USER_KEY = "userkey"
SESSION_KEY = "session"
COUNTRY = "country"
DEVICE = "device"
PLATFORM = "platform"
VERSION = "version"


class EvaluationContext(Protocol):
    """戦略評価に使う呼び出し元属性のプロトコル。"""

    def get_attr(self, name: str, default: Any = None) -> Any: ...

    def default_percentage_key(self) -> str | None: ...


@dataclass
class ClientContext:
    """インメモリの評価コンテキスト。

    属性値はリストでも保持でき、その場合 get_attr は先頭要素を返す。
    """

    attributes: dict[str, Any] = field(default_factory=dict)

    def get_attr(self, name: str, default: Any = None) -> Any:
        value = self.attributes.get(name)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        return default if value is None else value

    def default_percentage_key(self) -> str | None:
        """セッションキー、なければユーザーキーを返す。"""
        session = self.get_attr(SESSION_KEY)
        if session is not None:
            return str(session)
        user = self.get_attr(USER_KEY)
        return None if user is None else str(user)

    def attribute_value(self, name: str, value: Any) -> ClientContext:
        self.attributes[name] = value
        return self

    def user_key(self, value: str) -> ClientContext:
        return self.attribute_value(USER_KEY, value)

    def session_key(self, value: str) -> ClientContext:
        return self.attribute_value(SESSION_KEY, value)

    def country(self, value: str) -> ClientContext:
        return self.attribute_value(COUNTRY, value)

    def device(self, value: str) -> ClientContext:
        return self.attribute_value(DEVICE, value)

    def platform(self, value: str) -> ClientContext:
        return self.attribute_value(PLATFORM, value)

    def version(self, value: str) -> ClientContext:
        return self.attribute_value(VERSION, value)

    def clear(self) -> ClientContext:
        self.attributes.clear()
        return self
