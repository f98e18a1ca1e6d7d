"""
模板渲染模块

旧版告警 message 先按 Jinja2 模板用迁移上下文渲染，再把旧版 ${var} 占位符改写为统一告警的
{{ $labels.var }} 写法。message 来自请求体，只在沙箱环境中渲染。
渲染失败时记录 warning 并保留旧 message（仍做占位符改写），不中断迁移。
"""
import re
from typing import Any, Dict, List, Optional

from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment

from ..core.logging_config import LOGGER_NAME, get_logger

logger = get_logger(LOGGER_NAME)

env = SandboxedEnvironment(
    undefined=StrictUndefined,  # 未定义变量视为渲染失败，走回退
    keep_trailing_newline=True,
    autoescape=False,
)

_LEGACY_VAR_PATTERN = re.compile(r"\$\{([^{}]+)\}")
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _replace_legacy_var(match: "re.Match") -> str:
    name = match.group(1).strip()
    if _IDENTIFIER_PATTERN.match(name):
        return "{{ $labels.%s }}" % name
    return '{{ index $labels "%s" }}' % name.replace('"', '\\"')


def convert_legacy_placeholders(text: str) -> str:
    """将 ${var} 改写为统一告警模板写法"""
    return _LEGACY_VAR_PATTERN.sub(_replace_legacy_var, text)


def render(template: str, ctx: Dict[str, Any]) -> str:
    """
    在沙箱中渲染模板

    Args:
        template: 模板文本
        ctx: 模板上下文

    Returns:
        str: 渲染后的文本

    Raises:
        TemplateError: 模板语法错误、引用了未定义变量或访问了沙箱禁止的属性
    """
    return env.from_string(template).render(**ctx)


def migrate_message(message: str, ctx: Dict[str, Any], warnings: Optional[List[str]] = None) -> str:
    """
    迁移告警 message，渲染失败时回退为原 message

    Args:
        message: 旧版 message 模板
        ctx: 渲染上下文（alert / dashboard / tags）
        warnings: 可选，记录回退

    Returns:
        str: 迁移后的 message
    """
    if not message:
        return ""
    try:
        rendered = render(message, ctx)
    except Exception as e:
        # 模板运行期错误（如除零）同样回退，不能中断迁移
        alert_name = (ctx.get("alert") or {}).get("name", "Unknown")
        logger.warning(f"告警 {alert_name} 的 message 模板渲染失败，保留原 message: {e}", exc_info=True)
        if warnings is not None:
            warnings.append(f"message template could not be rendered, kept original: {e.__class__.__name__}")
        rendered = message
    return convert_legacy_placeholders(rendered)
