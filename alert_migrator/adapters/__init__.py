"""
旧版告警到统一告警的格式适配
"""
from .query_repairer import (
    EXPRESSION_DATASOURCE_UID,
    fix_graphite_referenced_sub_queries,
    fix_prometheus_both_type_query,
    is_prometheus_query,
    migrate_alert_rule_queries,
)
from .state_translator import translate_exec_err, translate_no_data

__all__ = [
    "EXPRESSION_DATASOURCE_UID",
    "fix_graphite_referenced_sub_queries",
    "fix_prometheus_both_type_query",
    "is_prometheus_query",
    "migrate_alert_rule_queries",
    "translate_exec_err",
    "translate_no_data",
]
