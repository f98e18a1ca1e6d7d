"""
工具函数模块
"""
import uuid

# Prometheus 风格的时长单位，从大到小
_DURATION_UNITS = (
    ("y", 365 * 24 * 60 * 60 * 1000),
    ("w", 7 * 24 * 60 * 60 * 1000),
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
    ("ms", 1),
)


def humanize_duration(seconds: int) -> str:
    """
    将秒数格式化为 Prometheus 风格的时长字符串

    例如 10 -> "10s"，60 -> "1m"，90 -> "1m30s"，3600 -> "1h"，0 -> "0s"
    年、周只在能整除时输出，否则折算为天：8 天 -> "8d"，400 天 -> "400d"
    """
    ms = int(seconds * 1000)
    if ms == 0:
        return "0s"
    parts = []
    for unit, size in _DURATION_UNITS:
        if unit in ("y", "w") and ms % size != 0:
            continue
        if ms >= size:
            count, ms = divmod(ms, size)
            parts.append(f"{count}{unit}")
    return "".join(parts)


def truncate(name: str, length: int) -> str:
    """按最大长度截断字符串"""
    if length <= 0:
        return ""
    if len(name) > length:
        return name[:length]
    return name


def generate_short_uid() -> str:
    """生成短 UID（14 位，首字符为字母）"""
    return "a" + uuid.uuid4().hex[:13]
