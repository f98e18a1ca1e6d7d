"""
模板渲染模块
"""
from .template_renderer import convert_legacy_placeholders, migrate_message, render

__all__ = [
    "convert_legacy_placeholders",
    "migrate_message",
    "render",
]
