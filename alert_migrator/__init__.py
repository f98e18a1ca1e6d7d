"""
Alert Migrator 核心模块

将旧版 dashboard 告警迁移为统一告警规则
"""
# 核心模块
from .core import (
    DashboardUpgradeInfo,
    LegacyAlert,
    MigratedAlertRule,
    MigrationError,
    MigrationSettings,
    get_logger,
    load_config,
    setup_logging,
)

# 适配器
from .adapters import migrate_alert_rule_queries, translate_exec_err, translate_no_data

# 命名与路由
from .routing import (
    TitleDeduplicator,
    adjust_interval,
    build_labels_and_annotations,
    group_name,
)

# 模板渲染
from .templates import migrate_message

# 服务层
from .services import (
    AlertMigrationService,
    ChannelCache,
    MigrationResult,
    PrecomputedConditionTranslator,
    SilenceService,
)

__all__ = [
    # 核心模块
    "DashboardUpgradeInfo",
    "LegacyAlert",
    "MigratedAlertRule",
    "MigrationError",
    "MigrationSettings",
    "get_logger",
    "load_config",
    "setup_logging",
    # 适配器
    "migrate_alert_rule_queries",
    "translate_exec_err",
    "translate_no_data",
    # 命名与路由
    "TitleDeduplicator",
    "adjust_interval",
    "build_labels_and_annotations",
    "group_name",
    # 模板渲染
    "migrate_message",
    # 服务层
    "AlertMigrationService",
    "ChannelCache",
    "MigrationResult",
    "PrecomputedConditionTranslator",
    "SilenceService",
]
