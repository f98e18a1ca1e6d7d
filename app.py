"""
FastAPI 应用主入口

进程内持有一次迁移运行（标题去重状态按 folder 保存在 AlertMigrationService 中），
因此只能单 worker 部署。
"""
import json
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from alert_migrator.core.config import load_config
from alert_migrator.core.errors import MigrationError
from alert_migrator.core.logging_config import LOGGER_NAME, get_logger, setup_logging
from alert_migrator.core.models import AlertQuery, DashboardUpgradeInfo, LegacyAlert, TranslatedCondition
from alert_migrator.services.channel_cache import ChannelCache
from alert_migrator.services.migration_service import AlertMigrationService, PrecomputedConditionTranslator

# 加载配置（config 只读配置，不初始化日志）
CONFIG, SETTINGS, CHANNELS = load_config()
setup_logging(**CONFIG["logging"])
logger = get_logger(LOGGER_NAME)
logger.info(f"配置加载完成，共 {len(CHANNELS)} 个通知渠道")


def _build_channel_cache() -> ChannelCache:
    """优先从 Grafana 拉取渠道，未配置时使用 config.yaml 中的快照"""
    grafana_cfg = CONFIG.get("grafana", {}) or {}
    if grafana_cfg.get("url"):
        return ChannelCache.load_from_grafana(
            grafana_cfg["url"],
            grafana_cfg.get("api_key", ""),
            timeout=int(grafana_cfg.get("timeout_seconds", 10)),
        )
    return ChannelCache.from_config(CHANNELS)


CHANNEL_CACHE = _build_channel_cache()


# 条件由调用方预先转换好随请求传入，每个请求单独指定转换器
SERVICE = AlertMigrationService(SETTINGS, CHANNEL_CACHE)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    应用生命周期管理
    """
    logger.info("=" * 60)
    logger.info("Alert Migrator 服务启动")
    server_config = CONFIG.get("server", {})
    logger.info(f"监听地址: {server_config.get('host')}:{server_config.get('port')}")
    logger.info(
        f"标题长度上限: {SETTINGS.max_title_length}, 规则组名长度上限: {SETTINGS.max_rule_group_name_length}, "
        f"基础间隔: {SETTINGS.base_interval_seconds}s"
    )
    logger.info("=" * 60)

    yield

    logger.info("=" * 60)
    logger.info("Alert Migrator 服务已关闭")
    logger.info("=" * 60)


app = FastAPI(lifespan=lifespan, redirect_slashes=False)


def _parse_condition(payload: dict) -> TranslatedCondition:
    condition = payload.get("condition") or {}
    return TranslatedCondition(
        condition=str(condition.get("condition", "")),
        data=[AlertQuery.from_dict(q) for q in condition.get("data") or []],
    )


def _handle_migrate(payload: dict) -> dict:
    """处理单条告警迁移"""
    alert = LegacyAlert.from_dict(payload["alert"])
    info = DashboardUpgradeInfo.from_dict(payload["dashboard"])
    translator = PrecomputedConditionTranslator(_parse_condition(payload))
    result = SERVICE.migrate_alert(alert, info, condition_translator=translator)
    return {
        "ok": True,
        "rule": result.rule.to_dict(),
        "silences": [s.to_dict() for s in result.silences],
        "degraded": result.degraded,
    }


@app.get("/health")
async def health():
    return {"ok": True}


@app.post("/migrate")
async def migrate(req: Request):
    """迁移单条旧版 dashboard 告警（请使用 /migrate 无尾斜杠，避免 307）"""
    request_id = str(uuid.uuid4())[:8]
    try:
        payload = await req.json()
    except json.JSONDecodeError as e:
        logger.warning(f"[{request_id}] 请求体不是合法 JSON: {e}")
        return JSONResponse(status_code=400, content={"ok": False, "error": "请求体不是合法 JSON"})

    if not isinstance(payload, dict) or "alert" not in payload or "dashboard" not in payload:
        return JSONResponse(status_code=400, content={"ok": False, "error": "请求体必须包含 alert 与 dashboard"})

    try:
        result = _handle_migrate(payload)
    except MigrationError as e:
        logger.warning(f"[{request_id}] 告警迁移失败 (stage={e.stage}): {e.message}")
        return JSONResponse(status_code=422, content={"ok": False, "stage": e.stage, "error": e.message})
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"[{request_id}] 请求字段不合法: {e}")
        return JSONResponse(status_code=400, content={"ok": False, "error": f"请求字段不合法: {e}"})

    logger.info(f"[{request_id}] 告警迁移完成: {result['rule']['title']} (uid: {result['rule']['uid']})")
    return result
