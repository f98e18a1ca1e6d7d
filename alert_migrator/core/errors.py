"""
迁移异常定义

硬失败（中止单条告警迁移）统一抛出 MigrationError 的子类，stage 标明失败阶段；
软失败只记日志，不走异常。
"""


class MigrationError(Exception):
    """单条告警迁移失败"""

    stage = "migration"

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage
        self.message = message

    def __str__(self) -> str:
        return f"{self.stage}: {self.message}"


class SettingsError(MigrationError):
    """告警 settings 无法解析"""
    stage = "settings"


class ConditionTranslationError(MigrationError):
    """条件转换失败"""
    stage = "condition"


class QueryModelError(MigrationError):
    """查询 model 不是合法的 JSON 对象"""
    stage = "queries"


class TitleDeduplicationError(MigrationError):
    """无法在长度限制内生成唯一标题"""
    stage = "naming"
