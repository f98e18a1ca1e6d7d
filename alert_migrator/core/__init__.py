"""
核心功能模块
"""
from .config import MigrationSettings, load_config
from .errors import (
    ConditionTranslationError,
    MigrationError,
    QueryModelError,
    SettingsError,
    TitleDeduplicationError,
)
from .logging_config import get_logger, setup_logging
from .models import (
    AlertQuery,
    DashAlertSettings,
    DashboardUpgradeInfo,
    ExecErrState,
    ExecutionErrorOption,
    LegacyAlert,
    Matcher,
    MigratedAlertRule,
    NoDataOption,
    NoDataState,
    NotificationChannel,
    NotificationRef,
    SilenceKind,
    SilenceRequest,
    TranslatedCondition,
)
from .utils import generate_short_uid, humanize_duration, truncate

__all__ = [
    "MigrationSettings",
    "load_config",
    "MigrationError",
    "SettingsError",
    "ConditionTranslationError",
    "QueryModelError",
    "TitleDeduplicationError",
    "setup_logging",
    "get_logger",
    "AlertQuery",
    "DashAlertSettings",
    "DashboardUpgradeInfo",
    "ExecErrState",
    "ExecutionErrorOption",
    "LegacyAlert",
    "Matcher",
    "MigratedAlertRule",
    "NoDataOption",
    "NoDataState",
    "NotificationChannel",
    "NotificationRef",
    "SilenceKind",
    "SilenceRequest",
    "TranslatedCondition",
    "generate_short_uid",
    "humanize_duration",
    "truncate",
]
