"""
ID生成器 - 会话级唯一ID

格式：<前缀>-<会话随机段>-<单调计数>
同一毫秒内批量生成（月份套页一次37页）也不会冲突。
"""

from __future__ import annotations

import itertools
import threading
import uuid


class IdGenerator:
    """单调计数 + UUID 会话段"""

    def __init__(self, session_tag: str | None = None):
        self._tag = session_tag or uuid.uuid4().hex[:8]
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __call__(self, prefix: str = "id") -> str:
        return self.new_id(prefix)

    def new_id(self, prefix: str = "id") -> str:
        with self._lock:
            n = next(self._counter)
        return f"{prefix}-{self._tag}-{n}"
