"""
数据模型定义

旧版 dashboard 告警、统一告警规则以及迁移过程中用到的中间结构。
"""
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import SettingsError


class NoDataOption(str, Enum):
    """旧版告警的 no-data 选项"""
    OK = "ok"
    NO_DATA = "no_data"
    ALERTING = "alerting"
    KEEP_STATE = "keep_state"


class ExecutionErrorOption(str, Enum):
    """旧版告警的执行错误选项"""
    ALERTING = "alerting"
    KEEP_STATE = "keep_state"
    OK = "ok"


class NoDataState(str, Enum):
    """统一告警的 no-data 状态"""
    OK = "OK"
    NO_DATA = "NoData"
    ALERTING = "Alerting"


class ExecErrState(str, Enum):
    """统一告警的执行错误状态"""
    OK = "OK"
    ERROR = "Error"
    ALERTING = "Alerting"


class SilenceKind(str, Enum):
    ERROR = "error"
    NO_DATA = "no-data"


@dataclass(frozen=True)
class DashboardUpgradeInfo:
    """迁移目标：新 folder 与所属 dashboard"""
    new_folder_uid: str
    dashboard_uid: str
    dashboard_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardUpgradeInfo":
        return cls(
            new_folder_uid=str(data.get("newFolderUid", "")),
            dashboard_uid=str(data.get("dashboardUid", "")),
            dashboard_name=str(data.get("dashboardName", "")),
        )


@dataclass
class NotificationRef:
    """settings.notifications 中的渠道引用，id 与 uid 二选一"""
    id: int = 0
    uid: str = ""


@dataclass
class NotificationChannel:
    """旧版通知渠道"""
    id: int
    uid: str
    name: str
    type: str = ""
    settings: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LegacyAlert:
    """旧版 dashboard 告警定义"""
    org_id: int
    id: int
    panel_id: int
    name: str
    message: str = ""
    frequency: int = 60
    for_duration: int = 0
    state: str = ""
    settings: Union[Dict[str, Any], str, bytes, None] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LegacyAlert":
        return cls(
            org_id=int(data.get("orgId", 0)),
            id=int(data.get("id", 0)),
            panel_id=int(data.get("panelId", 0)),
            name=str(data.get("name", "")),
            message=str(data.get("message") or ""),
            frequency=int(data.get("frequency", 60)),
            for_duration=int(data.get("for", 0)),
            state=str(data.get("state") or ""),
            settings=data.get("settings"),
        )


@dataclass
class DashAlertSettings:
    """解析后的旧版告警 settings"""
    conditions: List[Any] = field(default_factory=list)
    notifications: List[NotificationRef] = field(default_factory=list)
    no_data_state: str = ""
    execution_error_state: str = ""
    alert_rule_tags: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def parse(cls, settings: Union[Dict[str, Any], str, bytes, None]) -> "DashAlertSettings":
        """
        解析 settings 文档

        Args:
            settings: dict 或原始 JSON 字符串

        Returns:
            DashAlertSettings

        Raises:
            SettingsError: JSON 非法或字段类型不符
        """
        if settings is None:
            raw: Any = {}
        elif isinstance(settings, (str, bytes, bytearray)):
            try:
                raw = json.loads(settings)
            except ValueError as e:
                raise SettingsError(f"parse settings: invalid JSON ({e.__class__.__name__})") from e
        else:
            raw = settings
        if not isinstance(raw, dict):
            raise SettingsError(f"parse settings: expected object, got {type(raw).__name__}")

        conditions = raw.get("conditions") or []
        if not isinstance(conditions, list):
            raise SettingsError("parse settings: conditions must be a list")

        notifications = []
        for item in raw.get("notifications") or []:
            if not isinstance(item, dict):
                raise SettingsError(f"parse settings: invalid notification reference {item!r}")
            ref_id = item.get("id", 0)
            ref_uid = item.get("uid", "")
            if ref_id is None:
                ref_id = 0
            if ref_uid is None:
                ref_uid = ""
            if isinstance(ref_id, bool) or not isinstance(ref_id, int) or not isinstance(ref_uid, str):
                raise SettingsError(f"parse settings: invalid notification reference {item!r}")
            notifications.append(NotificationRef(id=ref_id, uid=ref_uid))

        states = {}
        for key in ("noDataState", "executionErrorState"):
            value = raw.get(key)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise SettingsError(f"parse settings: {key} must be a string")
            states[key] = value

        tags = raw.get("alertRuleTags") or {}
        if not isinstance(tags, dict):
            raise SettingsError("parse settings: alertRuleTags must be an object")

        return cls(
            conditions=conditions,
            notifications=notifications,
            no_data_state=states["noDataState"],
            execution_error_state=states["executionErrorState"],
            alert_rule_tags={str(k): v if isinstance(v, str) else json.dumps(v) for k, v in tags.items()},
            raw=raw,
        )


@dataclass
class AlertQuery:
    """统一告警规则中的一个查询节点，model 保持原始字段顺序"""
    ref_id: str
    datasource_uid: str
    model: Union[Dict[str, Any], str, bytes]
    query_type: str = ""
    relative_time_range: Dict[str, int] = field(default_factory=lambda: {"from": 600, "to": 0})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlertQuery":
        return cls(
            ref_id=str(data.get("refId", "")),
            datasource_uid=str(data.get("datasourceUid", "")),
            model=data.get("model", {}),
            query_type=str(data.get("queryType") or ""),
            relative_time_range=dict(data.get("relativeTimeRange") or {"from": 600, "to": 0}),
        )

    def to_dict(self) -> Dict[str, Any]:
        model = self.model
        if isinstance(model, (str, bytes, bytearray)):
            model = json.loads(model)
        return {
            "refId": self.ref_id,
            "queryType": self.query_type,
            "relativeTimeRange": dict(self.relative_time_range),
            "datasourceUid": self.datasource_uid,
            "model": model,
        }


@dataclass
class TranslatedCondition:
    """条件转换器的输出"""
    condition: str
    data: List[AlertQuery] = field(default_factory=list)


@dataclass
class MigratedAlertRule:
    """迁移后的统一告警规则"""
    org_id: int
    uid: str
    title: str
    condition: str
    data: List[AlertQuery]
    interval_seconds: int
    namespace_uid: str
    dashboard_uid: Optional[str]
    panel_id: Optional[int]
    rule_group: str
    for_duration: int
    updated: datetime
    labels: Dict[str, str]
    annotations: Dict[str, str]
    is_paused: bool
    no_data_state: NoDataState
    exec_err_state: ExecErrState
    version: int = 1
    rule_group_index: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orgId": self.org_id,
            "uid": self.uid,
            "title": self.title,
            "condition": self.condition,
            "data": [q.to_dict() for q in self.data],
            "intervalSeconds": self.interval_seconds,
            "version": self.version,
            "namespaceUid": self.namespace_uid,
            "dashboardUid": self.dashboard_uid,
            "panelId": self.panel_id,
            "ruleGroup": self.rule_group,
            "ruleGroupIndex": self.rule_group_index,
            "for": self.for_duration,
            "updated": self.updated.isoformat(),
            "labels": dict(self.labels),
            "annotations": dict(self.annotations),
            "isPaused": self.is_paused,
            "noDataState": self.no_data_state.value,
            "execErrState": self.exec_err_state.value,
        }


@dataclass
class Matcher:
    """静默匹配器"""
    name: str
    value: str
    is_regex: bool = False
    is_equal: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "isRegex": self.is_regex, "isEqual": self.is_equal}


@dataclass
class SilenceRequest:
    """针对单条规则的静默创建请求"""
    kind: SilenceKind
    rule_uid: str
    matchers: List[Matcher]
    starts_at: datetime
    ends_at: datetime
    created_by: str
    comment: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "ruleUid": self.rule_uid,
            "matchers": [m.to_dict() for m in self.matchers],
            "startsAt": self.starts_at.isoformat(),
            "endsAt": self.ends_at.isoformat(),
            "createdBy": self.created_by,
            "comment": self.comment,
        }
