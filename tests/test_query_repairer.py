"""查询修复测试。"""
from __future__ import annotations

import json
import unittest

from alert_migrator.adapters.query_repairer import (
    EXPRESSION_DATASOURCE_UID,
    fix_prometheus_both_type_query,
    is_prometheus_query,
    migrate_alert_rule_queries,
)
from alert_migrator.core.errors import QueryModelError
from alert_migrator.core.models import AlertQuery


def _query(model, ref_id: str = "A", datasource_uid: str = "ds-1") -> AlertQuery:
    return AlertQuery(ref_id=ref_id, datasource_uid=datasource_uid, model=model)


class PrometheusBothTypeTests(unittest.TestCase):
    def test_both_query_converted_to_range(self) -> None:
        warnings: list[str] = []
        model = {"instant": True, "range": True, "datasource": {"type": "prometheus"}, "expr": "up"}
        with self.assertLogs("alert-migrator", level="WARNING"):
            fixed = fix_prometheus_both_type_query(dict(model), warnings)
        self.assertIs(fixed["instant"], False)
        self.assertIs(fixed["range"], True)
        self.assertEqual(fixed["expr"], "up")
        self.assertEqual(len(warnings), 1)

    def test_both_query_other_datasource_untouched(self) -> None:
        model = {"instant": True, "range": True, "datasource": {"type": "graphite"}}
        fixed = fix_prometheus_both_type_query(dict(model))
        self.assertEqual(fixed, model)

    def test_single_mode_untouched(self) -> None:
        model = {"instant": False, "range": True, "datasource": {"type": "prometheus"}}
        self.assertEqual(fix_prometheus_both_type_query(dict(model)), model)

    def test_missing_datasource_skipped(self) -> None:
        model = {"instant": True, "range": True}
        with self.assertLogs("alert-migrator", level="INFO") as logs:
            fixed = fix_prometheus_both_type_query(dict(model))
        self.assertEqual(fixed, model)
        self.assertIn("missing datasource field", logs.output[0])

    def test_unparsable_flag_left_untouched(self) -> None:
        model = {"instant": "true", "range": True, "datasource": {"type": "prometheus"}}
        with self.assertLogs("alert-migrator", level="INFO"):
            fixed = fix_prometheus_both_type_query(dict(model))
        self.assertEqual(fixed, model)

    def test_null_flag_counts_as_false(self) -> None:
        model = {"instant": None, "range": True, "datasource": {"type": "prometheus"}}
        self.assertEqual(fix_prometheus_both_type_query(dict(model)), model)


class IsPrometheusQueryTests(unittest.TestCase):
    def test_detection(self) -> None:
        self.assertEqual(is_prometheus_query({"datasource": {"type": "prometheus"}}), (True, None))
        self.assertEqual(is_prometheus_query({"datasource": {"type": "loki"}}), (False, None))

    def test_errors(self) -> None:
        for model in ({}, {"datasource": "uid-1"}, {"datasource": {"uid": "x"}}, {"datasource": None}):
            with self.subTest(model=model):
                is_prom, err = is_prometheus_query(model)
                self.assertFalse(is_prom)
                self.assertIsNotNone(err)


class MigrateAlertRuleQueriesTests(unittest.TestCase):
    def test_order_and_length_preserved(self) -> None:
        queries = [
            _query({"refId": "A", "expr": "up"}, ref_id="A"),
            _query({"type": "reduce"}, ref_id="B", datasource_uid=EXPRESSION_DATASOURCE_UID),
            _query({"refId": "C", "target": "a.b"}, ref_id="C"),
        ]
        result = migrate_alert_rule_queries(queries)
        self.assertEqual([q.ref_id for q in result], ["A", "B", "C"])

    def test_expression_passes_through(self) -> None:
        expr = _query({"hide": True, "type": "math"}, datasource_uid=EXPRESSION_DATASOURCE_UID)
        result = migrate_alert_rule_queries([expr])
        self.assertIs(result[0], expr)
        self.assertIn("hide", result[0].model)

    def test_hide_removed(self) -> None:
        result = migrate_alert_rule_queries([_query({"hide": False, "expr": "up"})])
        self.assertEqual(result[0].model, {"expr": "up"})

    def test_graphite_target_full_promoted(self) -> None:
        model = {"refId": "A", "target": "sumSeries(#B)", "targetFull": "sumSeries(a.b.c)"}
        result = migrate_alert_rule_queries([_query(model)])
        self.assertEqual(result[0].model, {"refId": "A", "target": "sumSeries(a.b.c)"})

    def test_input_not_mutated(self) -> None:
        model = {"hide": True, "target": "x", "targetFull": "y"}
        migrate_alert_rule_queries([_query(model)])
        self.assertEqual(model, {"hide": True, "target": "x", "targetFull": "y"})

    def test_string_model_round_trip(self) -> None:
        raw = json.dumps({"refId": "A", "expr": "up", "range": True, "datasource": {"type": "prometheus", "uid": "p"}})
        result = migrate_alert_rule_queries([_query(raw)])
        self.assertIsInstance(result[0].model, str)
        self.assertEqual(json.loads(result[0].model), json.loads(raw))

    def test_both_query_string_model(self) -> None:
        raw = json.dumps({"instant": True, "range": True, "datasource": {"type": "prometheus"}})
        warnings: list[str] = []
        with self.assertLogs("alert-migrator", level="WARNING"):
            result = migrate_alert_rule_queries([_query(raw)], warnings)
        self.assertEqual(
            json.loads(result[0].model),
            {"instant": False, "range": True, "datasource": {"type": "prometheus"}},
        )
        self.assertEqual(len(warnings), 1)

    def test_invalid_json_raises(self) -> None:
        with self.assertRaises(QueryModelError) as ctx:
            migrate_alert_rule_queries([_query("{not json")])
        self.assertEqual(ctx.exception.stage, "queries")

    def test_non_object_json_raises(self) -> None:
        with self.assertRaises(QueryModelError):
            migrate_alert_rule_queries([_query("[1, 2]")])


if __name__ == "__main__":
    unittest.main()
