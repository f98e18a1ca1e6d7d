"""
配置加载模块（只负责读配置，不初始化日志；日志由 app 在启动时显式初始化）
"""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .models import NotificationChannel

# 规则组名长度上限的最小值，需容纳 " - <时长>" 后缀并至少保留一个标题字符
MIN_RULE_GROUP_NAME_LENGTH = 32


@dataclass
class MigrationSettings:
    """迁移参数（长度上限与宿主系统保持一致）"""
    max_title_length: int = 190
    max_rule_group_name_length: int = 190
    base_interval_seconds: int = 10
    silence_duration_days: int = 365
    silence_created_by: str = "Grafana Migration"
    case_insensitive_titles: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationSettings":
        """从配置字典构建，忽略未知字段"""
        known = {f.name for f in fields(cls)}
        settings = cls(**{k: v for k, v in (data or {}).items() if k in known})
        for name in ("max_title_length", "max_rule_group_name_length",
                     "base_interval_seconds", "silence_duration_days"):
            value = getattr(settings, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"config.yaml 中 migration.{name} 必须为正整数，当前值: {value!r}")
        if settings.max_rule_group_name_length < MIN_RULE_GROUP_NAME_LENGTH:
            raise ValueError(
                f"config.yaml 中 migration.max_rule_group_name_length 不能小于 {MIN_RULE_GROUP_NAME_LENGTH}，"
                f"当前值: {settings.max_rule_group_name_length}"
            )
        return settings


def _config_path() -> Path:
    """解析 config.yaml 路径：优先环境变量 CONFIG_FILE，否则为项目根目录下的 config.yaml"""
    env_path = os.environ.get("CONFIG_FILE")
    if env_path and os.path.isfile(env_path):
        return Path(env_path)
    # 项目根：alert_migrator/core/config.py -> 上两级目录
    root = Path(__file__).resolve().parent.parent.parent
    return root / "config.yaml"


def _validate_logging_config(raw: Dict) -> None:
    """
    校验 logging 配置必须存在且字段完整，不在代码里兜底默认值。
    """
    logging_cfg = raw.get("logging")
    if not isinstance(logging_cfg, dict):
        raise ValueError("config.yaml 中必须配置 logging 节点")

    required_fields = ["log_dir", "log_file", "level", "max_bytes", "backup_count"]
    missing = [field for field in required_fields if field not in logging_cfg]
    if missing:
        raise ValueError(f"config.yaml 中 logging 缺少必要字段: {', '.join(missing)}")


def _load_channels(raw_channels: Any) -> List[NotificationChannel]:
    """解析 channels 节点（旧版通知渠道快照）"""
    if raw_channels is None:
        return []
    if not isinstance(raw_channels, list):
        raise ValueError("config.yaml 中 channels 必须为列表")

    channels = []
    for item in raw_channels:
        if not isinstance(item, dict) or not item.get("name"):
            raise ValueError(f"config.yaml 中 channels 条目缺少 name: {item!r}")
        channels.append(NotificationChannel(
            id=int(item.get("id", 0)),
            uid=str(item.get("uid", "")),
            name=str(item["name"]),
            type=str(item.get("type", "")),
            settings=dict(item.get("settings") or {}),
        ))
    return channels


def load_config() -> Tuple[Dict, MigrationSettings, List[NotificationChannel]]:
    """
    加载配置文件

    Returns:
        Tuple[Dict, MigrationSettings, List[NotificationChannel]]: (配置字典, 迁移参数, 渠道列表)
    """
    path = _config_path()
    if not path.is_file():
        raise FileNotFoundError(f"配置文件不存在: {path}，可设置环境变量 CONFIG_FILE 指定路径")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raw = {}
    _validate_logging_config(raw)

    migration_cfg = raw.get("migration", {}) or {}
    if not isinstance(migration_cfg, dict):
        raise ValueError("config.yaml 中 migration 必须为字典")

    return raw, MigrationSettings.from_dict(migration_cfg), _load_channels(raw.get("channels"))
