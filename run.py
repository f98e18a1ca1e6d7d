"""
应用启动入口
从 config.yaml 读取配置并启动 uvicorn 服务器
"""
import os

import uvicorn

from alert_migrator.core.config import load_config

if __name__ == "__main__":
    CONFIG, _, _ = load_config()

    # 从配置读取服务器设置（必须配置）
    server_config = CONFIG.get("server", {})
    if not server_config:
        raise ValueError("config.yaml 中必须配置 server 节点")

    host = server_config.get("host")
    port = server_config.get("port")

    if host is None:
        raise ValueError("config.yaml 中必须配置 server.host")
    if port is None:
        raise ValueError("config.yaml 中必须配置 server.port")

    timeout = int(os.getenv("TIMEOUT", 30))

    # 标题去重状态在进程内，只能单 worker
    uvicorn.run(
        "app:app",
        host=host,
        port=port,
        workers=1,
        timeout_keep_alive=timeout,
        log_level="info",
        access_log=True,
    )
