"""no-data / 执行错误选项映射测试。"""
from __future__ import annotations

import unittest

from alert_migrator.adapters.state_translator import translate_exec_err, translate_no_data
from alert_migrator.core.models import ExecErrState, NoDataState


class NoDataTranslationTests(unittest.TestCase):
    def test_known_options(self) -> None:
        cases = {
            "ok": NoDataState.OK,
            "": NoDataState.NO_DATA,
            "no_data": NoDataState.NO_DATA,
            "alerting": NoDataState.ALERTING,
            "keep_state": NoDataState.NO_DATA,
        }
        for option, expected in cases.items():
            with self.subTest(option=option):
                self.assertEqual(translate_no_data(option), expected)

    def test_unknown_option_falls_back_with_warning(self) -> None:
        warnings: list[str] = []
        with self.assertLogs("alert-migrator", level="WARNING") as logs:
            state = translate_no_data("pending", warnings)
        self.assertEqual(state, NoDataState.NO_DATA)
        self.assertEqual(len(warnings), 1)
        self.assertIn("pending", logs.output[0])

    def test_non_string_option_is_unknown(self) -> None:
        with self.assertLogs("alert-migrator", level="WARNING"):
            self.assertEqual(translate_no_data(None), NoDataState.NO_DATA)

    def test_known_option_does_not_add_warning(self) -> None:
        warnings: list[str] = []
        translate_no_data("keep_state", warnings)
        self.assertEqual(warnings, [])


class ExecErrTranslationTests(unittest.TestCase):
    def test_known_options(self) -> None:
        cases = {
            "": ExecErrState.ALERTING,
            "alerting": ExecErrState.ALERTING,
            "keep_state": ExecErrState.ERROR,
            "ok": ExecErrState.OK,
        }
        for option, expected in cases.items():
            with self.subTest(option=option):
                self.assertEqual(translate_exec_err(option), expected)

    def test_unknown_option_falls_back_with_warning(self) -> None:
        warnings: list[str] = []
        with self.assertLogs("alert-migrator", level="WARNING"):
            state = translate_exec_err("no_data", warnings)
        self.assertEqual(state, ExecErrState.ERROR)
        self.assertEqual(len(warnings), 1)

    def test_enum_values_match_unified_alerting(self) -> None:
        self.assertEqual(ExecErrState.ERROR.value, "Error")
        self.assertEqual(NoDataState.NO_DATA.value, "NoData")


if __name__ == "__main__":
    unittest.main()
