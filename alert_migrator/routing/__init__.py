"""
路由 label、命名与去重模块
"""
from .labels import (
    build_labels_and_annotations,
    contact_label,
    label_for_silence_matching,
)
from .naming import adjust_interval, group_name
from .title_dedup import TitleDeduplicator, TitleDeduplicatorRegistry

__all__ = [
    "build_labels_and_annotations",
    "contact_label",
    "label_for_silence_matching",
    "adjust_interval",
    "group_name",
    "TitleDeduplicator",
    "TitleDeduplicatorRegistry",
]
