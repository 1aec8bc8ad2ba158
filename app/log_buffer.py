from __future__ import annotations
from collections import deque
from typing import Deque, List

# Bounded event log for the host UI (load/save/export/spawn lines).
_MAX = 400
_buf: Deque[str] = deque(maxlen=_MAX)

def push(line: str) -> None:
    _buf.append(str(line))

def event(kind: str, message: str) -> None:
    push(f"[{kind}] {message}")

def tail(n: int = 200) -> List[str]:
    if n <= 0:
        return []
    return list(_buf)[-n:]

def clear() -> None:
    _buf.clear()
