"""
旧版通知渠道缓存

迁移时按 id 或 uid 查找渠道；渠道来源可以是 config.yaml 中的快照，也可以从 Grafana
旧版 API（/api/alert-notifications）一次性拉取。
"""
from typing import Dict, Iterable, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..core.logging_config import LOGGER_NAME, get_logger
from ..core.models import NotificationChannel

logger = get_logger(LOGGER_NAME)

DEFAULT_TIMEOUT = 10


def _build_session() -> requests.Session:
    """创建带重试的 HTTP 会话"""
    session = requests.Session()
    retry_strategy = Retry(
        total=3,
        backoff_factor=0.3,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"]
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class ChannelCache:
    """按 id / uid 索引的渠道缓存"""

    def __init__(self, channels: Iterable[NotificationChannel] = ()):
        self._by_id: Dict[int, NotificationChannel] = {}
        self._by_uid: Dict[str, NotificationChannel] = {}
        for channel in channels:
            self.add(channel)

    def add(self, channel: NotificationChannel) -> None:
        if channel.id > 0:
            self._by_id[channel.id] = channel
        if channel.uid:
            self._by_uid[channel.uid] = channel

    def __len__(self) -> int:
        return len({id(c) for c in list(self._by_id.values()) + list(self._by_uid.values())})

    def get_channel_by_id(self, channel_id: int) -> Optional[NotificationChannel]:
        return self._by_id.get(channel_id)

    def get_channel_by_uid(self, uid: str) -> Optional[NotificationChannel]:
        return self._by_uid.get(uid)

    @classmethod
    def from_config(cls, channels: List[NotificationChannel]) -> "ChannelCache":
        """由 config.yaml 中的 channels 快照构建"""
        cache = cls(channels)
        logger.info(f"从配置加载通知渠道 {len(cache)} 个")
        return cache

    @classmethod
    def load_from_grafana(
        cls,
        base_url: str,
        api_key: str,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> "ChannelCache":
        """
        从 Grafana 旧版告警 API 拉取全部通知渠道

        Args:
            base_url: Grafana 地址，如 http://grafana:3000
            api_key: API Key / Service Account Token
            timeout: 请求超时（秒）
            session: 可选，复用已有会话

        Returns:
            ChannelCache

        Raises:
            requests.RequestException: 请求失败或返回非 2xx
        """
        session = session or _build_session()
        url = f"{base_url.rstrip('/')}/api/alert-notifications"
        resp = session.get(
            url,
            headers={"Authorization": f"Bearer {api_key}", "Accept": "application/json"},
            timeout=timeout,
        )
        resp.raise_for_status()

        channels = []
        for item in resp.json() or []:
            channels.append(NotificationChannel(
                id=int(item.get("id", 0)),
                uid=str(item.get("uid", "")),
                name=str(item.get("name", "")),
                type=str(item.get("type", "")),
                settings=dict(item.get("settings") or {}),
            ))
        cache = cls(channels)
        logger.info(f"从 Grafana 拉取通知渠道 {len(cache)} 个: {url}")
        return cache
