"""labels / annotations 与 message 模板迁移测试。"""
from __future__ import annotations

import unittest

from alert_migrator.core.models import (
    DashAlertSettings,
    DashboardUpgradeInfo,
    LegacyAlert,
    NotificationChannel,
)
from alert_migrator.routing.labels import (
    DASHBOARD_UID_ANNOTATION,
    MIGRATED_ALERT_ID_ANNOTATION,
    MIGRATED_MESSAGE_ANNOTATION,
    MIGRATED_USE_LEGACY_CHANNELS_LABEL,
    PANEL_ID_ANNOTATION,
    build_labels_and_annotations,
    contact_label,
    label_for_silence_matching,
)
from alert_migrator.templates.template_renderer import convert_legacy_placeholders, migrate_message

INFO = DashboardUpgradeInfo(new_folder_uid="folder-1", dashboard_uid="dash-1", dashboard_name="Servers")


def _alert(message: str = "") -> LegacyAlert:
    return LegacyAlert(org_id=1, id=42, panel_id=7, name="CPU High", message=message)


class LabelTests(unittest.TestCase):
    def test_contact_label(self) -> None:
        self.assertEqual(contact_label("ops"), "__legacy_c_ops__")

    def test_silence_label(self) -> None:
        self.assertEqual(label_for_silence_matching("abc"), ("rule_uid", "abc"))

    def test_labels_include_tags_and_channels(self) -> None:
        settings = DashAlertSettings.parse({"alertRuleTags": {"team": "infra", "severity": "high"}})
        channels = [NotificationChannel(id=1, uid="a", name="ops"), NotificationChannel(id=2, uid="b", name="pager")]
        labels, _ = build_labels_and_annotations(_alert(), settings, INFO, channels, migrate_message)
        self.assertEqual(labels, {
            "team": "infra",
            "severity": "high",
            MIGRATED_USE_LEGACY_CHANNELS_LABEL: "true",
            "__legacy_c_ops__": "true",
            "__legacy_c_pager__": "true",
        })

    def test_annotations_always_have_four_keys(self) -> None:
        info = DashboardUpgradeInfo(new_folder_uid="f", dashboard_uid="", dashboard_name="")
        _, annotations = build_labels_and_annotations(
            _alert(), DashAlertSettings.parse({}), info, [], migrate_message,
        )
        self.assertEqual(annotations, {
            DASHBOARD_UID_ANNOTATION: "",
            PANEL_ID_ANNOTATION: "7",
            MIGRATED_ALERT_ID_ANNOTATION: "42",
            MIGRATED_MESSAGE_ANNOTATION: "",
        })

    def test_message_rendered_with_context(self) -> None:
        settings = DashAlertSettings.parse({"alertRuleTags": {"team": "infra"}})
        _, annotations = build_labels_and_annotations(
            _alert("{{ alert.name }} on {{ dashboard.name }} ({{ tags.team }})"),
            settings, INFO, [], migrate_message,
        )
        self.assertEqual(annotations[MIGRATED_MESSAGE_ANNOTATION], "CPU High on Servers (infra)")


class MigrateMessageTests(unittest.TestCase):
    def test_plain_message_unchanged(self) -> None:
        self.assertEqual(migrate_message("Disk is almost full", {}), "Disk is almost full")

    def test_legacy_placeholders_converted(self) -> None:
        self.assertEqual(
            migrate_message("${instance} is down", {}),
            "{{ $labels.instance }} is down",
        )

    def test_non_identifier_placeholder(self) -> None:
        self.assertEqual(
            convert_legacy_placeholders("${my-label}"),
            '{{ index $labels "my-label" }}',
        )

    def test_undefined_variable_falls_back(self) -> None:
        warnings: list[str] = []
        message = "value is {{ missing }}"
        with self.assertLogs("alert-migrator", level="WARNING"):
            result = migrate_message(message, {"alert": {"name": "CPU High"}}, warnings)
        self.assertEqual(result, message)
        self.assertEqual(len(warnings), 1)

    def test_syntax_error_falls_back(self) -> None:
        message = "{% if %} broken"
        with self.assertLogs("alert-migrator", level="WARNING"):
            self.assertEqual(migrate_message(message, {}), message)

    def test_runtime_error_falls_back(self) -> None:
        warnings: list[str] = []
        message = "ratio {{ 1 / 0 }} on ${instance}"
        with self.assertLogs("alert-migrator", level="WARNING"):
            result = migrate_message(message, {}, warnings)
        self.assertEqual(result, "ratio {{ 1 / 0 }} on {{ $labels.instance }}")
        self.assertEqual(warnings, ["message template could not be rendered, kept original: ZeroDivisionError"])

    def test_fallback_still_converts_placeholders(self) -> None:
        message = "{# note #} {% broken ${instance}"
        with self.assertLogs("alert-migrator", level="WARNING"):
            result = migrate_message(message, {})
        self.assertEqual(result, "{# note #} {% broken {{ $labels.instance }}")

    def test_internal_attributes_are_blocked(self) -> None:
        warnings: list[str] = []
        message = "{{ alert.__class__.__mro__[1].__subclasses__() | length }}"
        with self.assertLogs("alert-migrator", level="WARNING"):
            result = migrate_message(message, {"alert": {"name": "CPU High"}}, warnings)
        self.assertEqual(result, message)
        self.assertEqual(len(warnings), 1)

    def test_safe_attributes_still_render(self) -> None:
        ctx = {"alert": {"name": "CPU High"}, "tags": {"team": "infra"}}
        self.assertEqual(migrate_message("{{ alert.name }} / {{ tags.team }}", ctx), "CPU High / infra")


if __name__ == "__main__":
    unittest.main()
