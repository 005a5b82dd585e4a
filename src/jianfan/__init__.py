"""jianfan 包：简繁中文字形检测与转换。

公开 API:
    detect(text) -> bool                      True 表示繁体
    convert(text, to_traditional) -> str      出错时返回原文，不抛异常
    toggle_label(current_state) -> str        下一次切换方向的按钮文字
    ReadingSession(adapter)                   持有单个文档简繁状态的会话

检测先比较 s2t / t2s 两个方向的转换差异，引擎不可用或结果无法判定时
回退到基于标记字表的启发式检测。可通过 set_engine_factory() 注入自定义引擎。
"""
from .adapter import PageAdapter, StaticAdapter, TextFileAdapter, normalize_text
from .config import load_config
from .converter import (
    ConversionEngine,
    ConversionFailed,
    EngineResult,
    EngineUnavailable,
    JianfanError,
    ScriptConverter,
    configure_engine,
    convert,
    get_converter,
    load_engine,
    reset_engine,
    set_engine_factory,
)
from .detector import DetectionReport, DetectorSettings, ScriptDetector, analyze, detect, detect_heuristic, text_difference
from .session import ReadingSession, ScriptState, SessionNotLoaded, state_message, toggle_label, toggle_target

__all__ = [
    "PageAdapter",
    "StaticAdapter",
    "TextFileAdapter",
    "normalize_text",
    "load_config",
    "ConversionEngine",
    "ConversionFailed",
    "EngineResult",
    "EngineUnavailable",
    "JianfanError",
    "ScriptConverter",
    "configure_engine",
    "convert",
    "get_converter",
    "load_engine",
    "reset_engine",
    "set_engine_factory",
    "DetectionReport",
    "DetectorSettings",
    "ScriptDetector",
    "analyze",
    "detect",
    "detect_heuristic",
    "text_difference",
    "ReadingSession",
    "ScriptState",
    "SessionNotLoaded",
    "state_message",
    "toggle_label",
    "toggle_target",
]
