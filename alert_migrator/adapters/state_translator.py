"""
旧版 no-data / 执行错误选项到统一告警状态的映射

两个函数都是全函数：未知取值记 warning 并回落到默认值，避免存量脏数据静默漂移。
"""
from typing import Any, List, Optional

from ..core.logging_config import LOGGER_NAME, get_logger
from ..core.models import ExecErrState, ExecutionErrorOption, NoDataOption, NoDataState

logger = get_logger(LOGGER_NAME)

_NO_DATA_MAP = {
    NoDataOption.OK.value: NoDataState.OK,
    "": NoDataState.NO_DATA,
    NoDataOption.NO_DATA.value: NoDataState.NO_DATA,
    NoDataOption.ALERTING.value: NoDataState.ALERTING,
    # 统一告警在无数据时会单独发出 DatasourceNoData 告警，keep_state 近似为 NoData
    NoDataOption.KEEP_STATE.value: NoDataState.NO_DATA,
}

_EXEC_ERR_MAP = {
    "": ExecErrState.ALERTING,
    ExecutionErrorOption.ALERTING.value: ExecErrState.ALERTING,
    # 统一告警在执行出错时会单独发出 DatasourceError 告警
    ExecutionErrorOption.KEEP_STATE.value: ExecErrState.ERROR,
    ExecutionErrorOption.OK.value: ExecErrState.OK,
}


def translate_no_data(option: Any, warnings: Optional[List[str]] = None) -> NoDataState:
    """
    转换 no-data 选项

    Args:
        option: 旧版 settings.noDataState
        warnings: 可选，回落到默认值时追加说明

    Returns:
        NoDataState
    """
    state = _NO_DATA_MAP.get(option) if isinstance(option, str) else None
    if state is not None:
        return state

    default = NoDataState.NO_DATA
    logger.warning(f"无法转换 NoData 状态，使用默认值 (old: {option!r}, new: {default.value})")
    if warnings is not None:
        warnings.append(f"unknown no-data option {option!r}, using {default.value}")
    return default


def translate_exec_err(option: Any, warnings: Optional[List[str]] = None) -> ExecErrState:
    """
    转换执行错误选项

    Args:
        option: 旧版 settings.executionErrorState
        warnings: 可选，回落到默认值时追加说明

    Returns:
        ExecErrState
    """
    state = _EXEC_ERR_MAP.get(option) if isinstance(option, str) else None
    if state is not None:
        return state

    default = ExecErrState.ERROR
    logger.warning(f"无法转换 Error 状态，使用默认值 (old: {option!r}, new: {default.value})")
    if warnings is not None:
        warnings.append(f"unknown execution error option {option!r}, using {default.value}")
    return default
