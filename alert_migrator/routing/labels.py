"""
迁移规则的 labels 与 annotations

labels 用于沿用旧版渠道路由和静默匹配，annotations 记录迁移来源。
"""
from typing import Callable, Dict, List, Optional, Tuple

from ..core.logging_config import LOGGER_NAME, get_logger
from ..core.models import DashAlertSettings, DashboardUpgradeInfo, LegacyAlert, NotificationChannel

logger = get_logger(LOGGER_NAME)

MIGRATED_LABEL_PREFIX = "__legacy_"
MIGRATED_USE_LEGACY_CHANNELS_LABEL = MIGRATED_LABEL_PREFIX + "use_channels__"
MIGRATED_CONTACT_LABEL_PREFIX = MIGRATED_LABEL_PREFIX + "c_"

# 静默匹配使用的规则标识 label
SILENCE_MATCH_LABEL = "rule_uid"

DASHBOARD_UID_ANNOTATION = "__dashboardUid__"
PANEL_ID_ANNOTATION = "__panelId__"
MIGRATED_ALERT_ID_ANNOTATION = "__alertId__"
MIGRATED_MESSAGE_ANNOTATION = "message"

MessageRenderer = Callable[[str, Dict, Optional[List[str]]], str]


def contact_label(name: str) -> str:
    """渠道名对应的路由 label 名"""
    return f"{MIGRATED_CONTACT_LABEL_PREFIX}{name}__"


def label_for_silence_matching(rule_uid: str) -> Tuple[str, str]:
    """规则专属的静默匹配 label"""
    return SILENCE_MATCH_LABEL, rule_uid


def build_template_context(alert: LegacyAlert, info: DashboardUpgradeInfo, tags: Dict[str, str]) -> Dict:
    """构建 message 模板渲染上下文"""
    return {
        "alert": {
            "id": alert.id,
            "name": alert.name,
            "panel_id": alert.panel_id,
            "org_id": alert.org_id,
        },
        "dashboard": {
            "uid": info.dashboard_uid,
            "name": info.dashboard_name,
        },
        "tags": dict(tags),
    }


def build_labels_and_annotations(
    alert: LegacyAlert,
    settings: DashAlertSettings,
    info: DashboardUpgradeInfo,
    channels: List[NotificationChannel],
    render_message: MessageRenderer,
    warnings: Optional[List[str]] = None,
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    构建 labels 与 annotations

    Args:
        alert: 旧版告警
        settings: 解析后的 settings（提供 alertRuleTags）
        info: 迁移目标信息
        channels: 已解析到的通知渠道
        render_message: message 模板渲染函数，失败时由其自行回退
        warnings: 可选，记录降级

    Returns:
        (labels, annotations)
    """
    tags = settings.alert_rule_tags
    labels: Dict[str, str] = dict(tags)

    # 路由用 label
    labels[MIGRATED_USE_LEGACY_CHANNELS_LABEL] = "true"
    for channel in channels:
        labels[contact_label(channel.name)] = "true"

    ctx = build_template_context(alert, info, tags)
    annotations = {
        DASHBOARD_UID_ANNOTATION: info.dashboard_uid,
        PANEL_ID_ANNOTATION: str(alert.panel_id),
        MIGRATED_ALERT_ID_ANNOTATION: str(alert.id),
        MIGRATED_MESSAGE_ANNOTATION: render_message(alert.message, ctx, warnings),
    }
    return labels, annotations
