"""
业务服务层模块
"""
from .channel_cache import ChannelCache
from .migration_service import (
    AlertMigrationService,
    MigrationResult,
    PrecomputedConditionTranslator,
)
from .silence_service import SilenceService

__all__ = [
    "AlertMigrationService",
    "ChannelCache",
    "MigrationResult",
    "PrecomputedConditionTranslator",
    "SilenceService",
]
