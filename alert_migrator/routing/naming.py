"""
规则组命名与评估间隔
"""
from ..core.utils import humanize_duration, truncate

DEFAULT_BASE_INTERVAL_SECONDS = 10
DEFAULT_MAX_RULE_GROUP_NAME_LENGTH = 190


def adjust_interval(frequency: int, base: int = DEFAULT_BASE_INTERVAL_SECONDS) -> int:
    """
    将旧版评估频率向下取整到调度器基础粒度的整数倍，不足基础粒度时取基础粒度
    """
    if frequency <= base:
        return base
    return frequency - (frequency % base)


def group_name(interval: int, dashboard_title: str, max_len: int = DEFAULT_MAX_RULE_GROUP_NAME_LENGTH) -> str:
    """
    由 dashboard 标题与间隔构造规则组名

    后缀 " - <时长>" 不截断，超长部分全部从 dashboard 标题截掉。

    Args:
        interval: 评估间隔（秒）
        dashboard_title: dashboard 标题
        max_len: 规则组名最大长度

    Returns:
        str: 规则组名

    Raises:
        ValueError: max_len 放不下后缀
    """
    panel_suffix = f" - {humanize_duration(interval)}"
    if max_len <= len(panel_suffix):
        raise ValueError(f"规则组名长度上限 {max_len} 放不下后缀 {panel_suffix!r}")
    truncated_dashboard = truncate(dashboard_title, max_len - len(panel_suffix))
    return f"{truncated_dashboard}{panel_suffix}"
