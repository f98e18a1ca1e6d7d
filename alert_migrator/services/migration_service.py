"""
告警迁移服务层

把单条旧版 dashboard 告警组装为统一告警规则：解析 settings、调用外部条件转换、
修复查询、解析渠道、生成 labels/annotations、标题去重，最后按需创建补偿静默。

硬失败抛出 MigrationError（带失败阶段），软失败记入 MigrationResult.degraded 并写日志。
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..core.logging_config import LOGGER_NAME, get_logger
from ..adapters.query_repairer import migrate_alert_rule_queries
from ..adapters.state_translator import translate_exec_err, translate_no_data
from ..core.config import MigrationSettings
from ..core.errors import ConditionTranslationError, MigrationError
from ..core.models import (
    DashAlertSettings,
    DashboardUpgradeInfo,
    LegacyAlert,
    MigratedAlertRule,
    NotificationChannel,
    SilenceRequest,
    TranslatedCondition,
)
from ..core.utils import generate_short_uid
from ..routing.labels import build_labels_and_annotations, label_for_silence_matching
from ..routing.naming import adjust_interval, group_name
from ..routing.title_dedup import TitleDeduplicatorRegistry
from ..templates.template_renderer import migrate_message
from .channel_cache import ChannelCache
from .silence_service import SilenceService

logger = get_logger(LOGGER_NAME)

ConditionTranslator = Callable[[DashAlertSettings, int], TranslatedCondition]


@dataclass
class MigrationResult:
    """单条告警迁移结果"""
    rule: MigratedAlertRule
    silences: List[SilenceRequest] = field(default_factory=list)
    degraded: List[str] = field(default_factory=list)

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded)


class PrecomputedConditionTranslator:
    """直接返回调用方已经转换好的条件"""

    def __init__(self, condition: TranslatedCondition):
        self.condition = condition

    def __call__(self, settings: DashAlertSettings, org_id: int) -> TranslatedCondition:
        return self.condition


class AlertMigrationService:
    """告警迁移服务，一个实例对应一次迁移运行"""

    def __init__(
        self,
        settings: MigrationSettings,
        channel_cache: ChannelCache,
        condition_translator: Optional[ConditionTranslator] = None,
        silence_service: Optional[SilenceService] = None,
        message_renderer=migrate_message,
    ):
        """
        初始化迁移服务

        Args:
            settings: 迁移参数
            channel_cache: 渠道缓存
            condition_translator: 外部条件转换器，可在 migrate_alert 时按次指定
            silence_service: 补偿静默服务，默认只生成请求不持久化
            message_renderer: message 模板渲染函数
        """
        self.settings = settings
        self.channel_cache = channel_cache
        self.condition_translator = condition_translator
        self.silence_service = silence_service or SilenceService(
            duration_days=settings.silence_duration_days,
            created_by=settings.silence_created_by,
        )
        self.message_renderer = message_renderer
        self.title_deduplicators = TitleDeduplicatorRegistry(
            settings.max_title_length,
            case_insensitive=settings.case_insensitive_titles,
        )

    def extract_channels(self, settings: DashAlertSettings, warnings: List[str]) -> List[NotificationChannel]:
        """
        解析通知渠道引用（id 优先，其次 uid），找不到的跳过
        """
        channels = []
        for key in settings.notifications:
            if key.id > 0:
                channel = self.channel_cache.get_channel_by_id(key.id)
                if channel:
                    channels.append(channel)
                    continue

            if key.uid:
                channel = self.channel_cache.get_channel_by_uid(key.uid)
                if channel:
                    channels.append(channel)
                    continue

            logger.warning(f"找不到告警通知渠道，跳过 (notificationKey: id={key.id}, uid={key.uid!r})")
            warnings.append(f"notification channel not found: id={key.id}, uid={key.uid!r}")
        return channels

    def _translate_condition(
        self,
        settings: DashAlertSettings,
        org_id: int,
        translator: Optional[ConditionTranslator],
    ) -> TranslatedCondition:
        translator = translator or self.condition_translator
        if translator is None:
            raise ConditionTranslationError("transform conditions: no condition translator configured")
        try:
            return translator(settings, org_id)
        except MigrationError:
            raise
        except Exception as e:
            raise ConditionTranslationError(f"transform conditions: {e}") from e

    def migrate_alert(
        self,
        alert: LegacyAlert,
        info: DashboardUpgradeInfo,
        condition_translator: Optional[ConditionTranslator] = None,
    ) -> MigrationResult:
        """
        迁移单条旧版告警

        Args:
            alert: 旧版告警
            info: 迁移目标（folder / dashboard）
            condition_translator: 可选，覆盖实例上的条件转换器

        Returns:
            MigrationResult

        Raises:
            MigrationError: settings / condition / queries / naming 任一阶段硬失败
        """
        logger.debug(f"开始迁移告警规则: {alert.name} (alert_id: {alert.id}, dashboard: {info.dashboard_uid})")
        warnings: List[str] = []

        parsed_settings = DashAlertSettings.parse(alert.settings)
        cond = self._translate_condition(parsed_settings, alert.org_id, condition_translator)

        channels = self.extract_channels(parsed_settings, warnings)
        labels, annotations = build_labels_and_annotations(
            alert, parsed_settings, info, channels, self.message_renderer, warnings,
        )

        data = migrate_alert_rule_queries(cond.data, warnings)

        is_paused = alert.state == "paused"

        # 标题在 folder 内唯一；去重状态只在前面的可失败步骤全部通过后才修改
        title_deduplicator = self.title_deduplicators.for_folder(info.new_folder_uid)
        name = title_deduplicator.deduplicate(alert.name)
        if name != alert.name:
            logger.info(
                f"规则标题已调整为 folder 内唯一且不超过 {self.settings.max_title_length} 个字符 "
                f"(old: {alert.name!r}, new: {name!r})"
            )

        interval = adjust_interval(alert.frequency, self.settings.base_interval_seconds)
        rule = MigratedAlertRule(
            org_id=alert.org_id,
            uid=generate_short_uid(),
            title=name,
            condition=cond.condition,
            data=data,
            interval_seconds=interval,
            namespace_uid=info.new_folder_uid,
            dashboard_uid=info.dashboard_uid,
            panel_id=alert.panel_id,
            rule_group=group_name(interval, info.dashboard_name, self.settings.max_rule_group_name_length),
            for_duration=alert.for_duration,
            updated=datetime.now(timezone.utc),
            labels=labels,
            annotations=annotations,
            is_paused=is_paused,
            no_data_state=translate_no_data(parsed_settings.no_data_state, warnings),
            exec_err_state=translate_exec_err(parsed_settings.execution_error_state, warnings),
            version=1,
            rule_group_index=1,  # 每条规则独占一个规则组
        )

        # 路由与静默匹配用 label
        label_name, label_value = label_for_silence_matching(rule.uid)
        rule.labels[label_name] = label_value

        silences, failures = self.silence_service.synthesize(rule, parsed_settings)
        warnings.extend(failures)

        logger.info(
            f"告警 {alert.name} 迁移完成 -> 规则 {rule.title} (uid: {rule.uid}, group: {rule.rule_group}, "
            f"静默: {len(silences)}, 降级: {len(warnings)})"
        )
        return MigrationResult(rule=rule, silences=silences, degraded=warnings)
