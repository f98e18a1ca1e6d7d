"""
告警规则标题去重

统一告警要求同一 folder 内规则标题唯一。去重状态归属于一次迁移运行，每个 folder 一个实例，
对同一 folder 的去重决定依赖此前所有决定，因此修改操作加锁串行化。
"""
from threading import RLock
from typing import Dict, Iterable, Set

from ..core.logging_config import LOGGER_NAME, get_logger
from ..core.errors import TitleDeduplicationError
from ..core.utils import generate_short_uid, truncate

logger = get_logger(LOGGER_NAME)

# 序号后缀的最大尝试次数，超过后改用短 UID 后缀
MAX_SEQUENCE_ATTEMPTS = 10


class TitleDeduplicator:
    """单个 folder 的标题去重器"""

    def __init__(self, max_len: int, case_insensitive: bool = False, existing: Iterable[str] = ()):
        """
        Args:
            max_len: 标题最大长度
            case_insensitive: 是否忽略大小写判重
            existing: folder 中已存在的标题
        """
        self.max_len = max_len
        self.case_insensitive = case_insensitive
        self._used: Set[str] = set()
        self._lock = RLock()
        for title in existing:
            self._add(title)

    def _key(self, title: str) -> str:
        return title.lower() if self.case_insensitive else title

    def _add(self, title: str) -> None:
        self._used.add(self._key(title))

    def contains(self, title: str) -> bool:
        with self._lock:
            return self._key(title) in self._used

    def deduplicate(self, name: str) -> str:
        """
        返回 folder 内唯一且不超过最大长度的标题，并记录为已使用

        Raises:
            TitleDeduplicationError: 长度限制内无法生成唯一标题
        """
        with self._lock:
            truncated = truncate(name, self.max_len)
            if not self.contains(truncated):
                self._add(truncated)
                return truncated

            for seq in range(2, MAX_SEQUENCE_ATTEMPTS + 2):
                suffix = f" #{seq}"
                if len(suffix) > self.max_len:
                    break
                candidate = truncate(name, self.max_len - len(suffix)) + suffix
                if not self.contains(candidate):
                    self._add(candidate)
                    return candidate

            suffix = f"_{generate_short_uid()}"
            if len(suffix) <= self.max_len:
                candidate = truncate(name, self.max_len - len(suffix)) + suffix
                if not self.contains(candidate):
                    self._add(candidate)
                    return candidate

            raise TitleDeduplicationError(
                f"failed to deduplicate title {name!r} within maximum length {self.max_len}"
            )


class TitleDeduplicatorRegistry:
    """一次迁移运行内按 folder 维护的去重器集合，folder 之间互不共享"""

    def __init__(self, max_len: int, case_insensitive: bool = False):
        self.max_len = max_len
        self.case_insensitive = case_insensitive
        self._deduplicators: Dict[str, TitleDeduplicator] = {}
        self._lock = RLock()

    def for_folder(self, folder_uid: str, existing: Iterable[str] = ()) -> TitleDeduplicator:
        """获取（必要时创建）folder 对应的去重器；existing 仅在首次创建时生效"""
        with self._lock:
            deduplicator = self._deduplicators.get(folder_uid)
            if deduplicator is None:
                deduplicator = TitleDeduplicator(self.max_len, self.case_insensitive, existing)
                self._deduplicators[folder_uid] = deduplicator
                logger.debug(f"创建 folder 标题去重器: {folder_uid}")
            return deduplicator
