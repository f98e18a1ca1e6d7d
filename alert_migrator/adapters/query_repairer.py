"""
告警查询修复适配器

部分数据源的旧版查询无法直接在统一告警中执行，这里逐条修复查询 model：
- 去掉面板上的 hide 标记
- Graphite：用展开后的 targetFull 覆盖 target（统一告警不会展开被引用的子查询）
- Prometheus：'Both' 类型查询（instant 与 range 同时为 true）转换为 range 查询

model 按通用有序 JSON 文档处理，只改动上述字段，其余字段原样保留。
"""
import json
from typing import Any, Dict, List, Optional, Tuple

from ..core.logging_config import LOGGER_NAME, get_logger
from ..core.errors import QueryModelError
from ..core.models import AlertQuery

logger = get_logger(LOGGER_NAME)

# 表达式节点使用的保留数据源 UID
EXPRESSION_DATASOURCE_UID = "__expr__"

GRAPHITE_TARGET_FIELD = "target"
GRAPHITE_TARGET_FULL_FIELD = "targetFull"

DS_PROMETHEUS = "prometheus"


def _load_model(query: AlertQuery) -> Dict[str, Any]:
    """把 model 解析为 dict 副本，非 JSON 对象时抛出 QueryModelError"""
    model = query.model
    if isinstance(model, (str, bytes, bytearray)):
        try:
            model = json.loads(model)
        except ValueError as e:
            raise QueryModelError(f"query {query.ref_id!r}: model is not valid JSON") from e
    if not isinstance(model, dict):
        raise QueryModelError(f"query {query.ref_id!r}: model must be a JSON object, got {type(model).__name__}")
    return dict(model)


def fix_graphite_referenced_sub_queries(query_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Graphite 的 targetFull 是 target 展开引用子查询后的完整版本，统一告警不支持引用，直接拷贝展开版本
    """
    if GRAPHITE_TARGET_FULL_FIELD in query_data:
        full_query = query_data.pop(GRAPHITE_TARGET_FULL_FIELD)
        query_data[GRAPHITE_TARGET_FIELD] = full_query
    return query_data


def is_prometheus_query(query_data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    判断查询是否属于 Prometheus

    Returns:
        (是否 Prometheus, 无法判断时的错误说明)
    """
    if "datasource" not in query_data:
        return False, "missing datasource field"
    datasource = query_data["datasource"]
    if datasource is None:
        datasource = {}
    if not isinstance(datasource, dict):
        return False, f"parse datasource {datasource!r}: expected object"
    ds_type = datasource.get("type")
    if ds_type is None:
        ds_type = ""
    if not isinstance(ds_type, str):
        return False, f"parse datasource {datasource!r}: type must be a string"
    if ds_type == "":
        return False, f"missing type field {datasource!r}"
    return ds_type == DS_PROMETHEUS, None


def _parse_flag(query_data: Dict[str, Any], key: str) -> Tuple[bool, bool]:
    """解析布尔字段，返回 (值, 是否解析成功)；null 视为 false"""
    value = query_data.get(key)
    if value is None:
        return False, True
    if isinstance(value, bool):
        return value, True
    return False, False


def fix_prometheus_both_type_query(query_data: Dict[str, Any], warnings: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    将 Prometheus 'Both' 类型查询转换为 range 查询

    也可以拆成 instant 与 range 两个查询、条件用 OR 组合，但旧版里依赖 'Both' 查询大多是无意为之，
    且经典条件没有足够的运算符优先级支持，因此统一转为 range 并记录 warning。
    """
    flags = {}
    for key in ("instant", "range"):
        value, ok = _parse_flag(query_data, key)
        if not ok:
            # 无法解析，原样返回；只有能确认是 Prometheus 时才记日志
            is_prometheus, _ = is_prometheus_query(query_data)
            if is_prometheus:
                logger.info(f"Prometheus 查询的 {key} 字段无法解析 ({key}: {query_data[key]!r})")
            return query_data
        flags[key] = value

    if not flags["instant"] or not flags["range"]:
        return query_data

    is_prometheus, err = is_prometheus_query(query_data)
    if err:
        logger.info(f"疑似 Prometheus 'Both' 类型查询，无法转换为 range 查询: {err}")
        return query_data
    if not is_prometheus:
        return query_data

    logger.warning("统一告警不支持 Prometheus 'Both' 类型查询，已转换为 range 查询")
    if warnings is not None:
        warnings.append("Prometheus 'Both' type query converted to range query")
    query_data["instant"] = False
    return query_data


def migrate_alert_rule_queries(queries: List[AlertQuery], warnings: Optional[List[str]] = None) -> List[AlertQuery]:
    """
    修复查询使其可在统一告警中执行

    Args:
        queries: 条件转换器输出的有序查询列表
        warnings: 可选，记录近似转换

    Returns:
        等长、同序的新查询列表

    Raises:
        QueryModelError: 任一查询 model 不是合法 JSON 对象
    """
    result: List[AlertQuery] = []
    for query in queries:
        # 表达式节点不涉及数据源，跳过
        if query.datasource_uid == EXPRESSION_DATASOURCE_UID:
            result.append(query)
            continue

        fixed_data = _load_model(query)
        fixed_data.pop("hide", None)
        fixed_data = fix_graphite_referenced_sub_queries(fixed_data)
        fixed_data = fix_prometheus_both_type_query(fixed_data, warnings)

        model: Any = fixed_data
        if isinstance(query.model, (str, bytes, bytearray)):
            model = json.dumps(fixed_data, separators=(",", ":"), ensure_ascii=False)
        result.append(AlertQuery(
            ref_id=query.ref_id,
            datasource_uid=query.datasource_uid,
            model=model,
            query_type=query.query_type,
            relative_time_range=dict(query.relative_time_range),
        ))
    return result
