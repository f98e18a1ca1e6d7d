"""
补偿静默服务

旧版 "keep last state" 在统一告警中没有直接对应，规则会改为发出 DatasourceError /
DatasourceNoData 告警。这里为每条规则生成只匹配自身 rule_uid 的静默，压制这类告警。
静默属于尽力而为的补偿，创建失败只记日志，不影响规则迁移。
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from ..core.logging_config import LOGGER_NAME, get_logger
from ..core.models import (
    DashAlertSettings,
    ExecutionErrorOption,
    Matcher,
    MigratedAlertRule,
    NoDataOption,
    SilenceKind,
    SilenceRequest,
)
from ..routing.labels import label_for_silence_matching

logger = get_logger(LOGGER_NAME)

ERROR_ALERT_NAME = "DatasourceError"
NO_DATA_ALERT_NAME = "DatasourceNoData"

SilenceSink = Callable[[SilenceRequest], None]

_COMMENTS = {
    SilenceKind.ERROR: "Created during migration to unified alerting to silence Error state "
                       "when the option 'Keep Last State' was selected for Error state",
    SilenceKind.NO_DATA: "Created during migration to unified alerting to silence NoData state "
                         "when the option 'Keep Last State' was selected for NoData state",
}


class SilenceService:
    """补偿静默生成"""

    def __init__(
        self,
        sink: Optional[SilenceSink] = None,
        duration_days: int = 365,
        created_by: str = "Grafana Migration",
    ):
        """
        Args:
            sink: 静默持久化回调（外部提供），为空时只生成请求
            duration_days: 静默有效期（天）
            created_by: 静默创建者
        """
        self.sink = sink
        self.duration_days = duration_days
        self.created_by = created_by

    def _build(self, rule: MigratedAlertRule, kind: SilenceKind, alert_name: str) -> SilenceRequest:
        label_name, label_value = label_for_silence_matching(rule.uid)
        now = datetime.now(timezone.utc)
        return SilenceRequest(
            kind=kind,
            rule_uid=rule.uid,
            matchers=[
                Matcher(name="alertname", value=alert_name),
                Matcher(name=label_name, value=label_value),
            ],
            starts_at=now,
            ends_at=now + timedelta(days=self.duration_days),
            created_by=self.created_by,
            comment=_COMMENTS[kind],
        )

    def _create(self, request: SilenceRequest) -> SilenceRequest:
        if self.sink is not None:
            self.sink(request)
        return request

    def add_error_silence(self, rule: MigratedAlertRule) -> SilenceRequest:
        """创建执行错误静默，sink 的异常向上抛出"""
        return self._create(self._build(rule, SilenceKind.ERROR, ERROR_ALERT_NAME))

    def add_no_data_silence(self, rule: MigratedAlertRule) -> SilenceRequest:
        """创建 NoData 静默，sink 的异常向上抛出"""
        return self._create(self._build(rule, SilenceKind.NO_DATA, NO_DATA_ALERT_NAME))

    def synthesize(
        self,
        rule: MigratedAlertRule,
        settings: DashAlertSettings,
    ) -> Tuple[List[SilenceRequest], List[str]]:
        """
        按旧版选项生成 0~2 个静默

        Returns:
            (成功创建的静默, 失败说明)
        """
        created: List[SilenceRequest] = []
        failures: List[str] = []

        plans = []
        if settings.execution_error_state == ExecutionErrorOption.KEEP_STATE.value:
            plans.append((SilenceKind.ERROR, self.add_error_silence))
        if settings.no_data_state == NoDataOption.KEEP_STATE.value:
            plans.append((SilenceKind.NO_DATA, self.add_no_data_silence))

        for kind, create in plans:
            try:
                created.append(create(rule))
            except Exception as e:
                logger.error(f"告警迁移错误：为规则 {rule.title} 创建 {kind.value} 静默失败: {e}", exc_info=True)
                failures.append(f"failed to create {kind.value} silence: {e}")
            else:
                logger.debug(f"已为规则 {rule.title} 创建 {kind.value} 静默 (rule_uid: {rule.uid})")
        return created, failures
