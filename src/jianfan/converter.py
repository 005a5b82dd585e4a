"""简繁转换器

底层使用 OpenCC (opencc-python-reimplemented)。引擎在第一次使用时构建，
构建结果（成功或失败）被缓存，之后所有调用共享同一结果，不会重复构建。

convert() 永远不会抛出异常：引擎不可用或转换出错时返回原文本。
需要显式感知失败的调用方使用 convert_strict() 或 load_engine()。
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from loguru import logger

try:
    from opencc import OpenCC  # type: ignore
except Exception:  # noqa: BLE001
    OpenCC = None  # type: ignore


class JianfanError(Exception):
    """jianfan 异常基类"""


class EngineUnavailable(JianfanError):
    """转换引擎无法构建（未安装或初始化失败）"""


class ConversionFailed(JianfanError):
    """引擎可用，但某次转换调用失败"""


@dataclass(frozen=True)
class ConversionEngine:
    s2t: Callable[[str], str]
    t2s: Callable[[str], str]


@dataclass(frozen=True)
class EngineResult:
    """引擎加载结果：engine 与 error 二者有且仅有一个"""

    engine: Optional[ConversionEngine] = None
    error: Optional[EngineUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.engine is not None


EngineFactory = Callable[[], ConversionEngine]


def opencc_factory(s2t_profile: str = "s2tw", t2s_profile: str = "tw2s") -> ConversionEngine:
    """基于 OpenCC 构建双向转换引擎"""
    if OpenCC is None:
        raise EngineUnavailable("OpenCC 库未加载，请安装 opencc-python-reimplemented")
    try:
        s2t = OpenCC(s2t_profile)
        t2s = OpenCC(t2s_profile)
    except Exception as e:  # noqa: BLE001
        raise EngineUnavailable(f"OpenCC 初始化失败 ({s2t_profile}/{t2s_profile}): {e}") from e
    return ConversionEngine(s2t=s2t.convert, t2s=t2s.convert)


class ScriptConverter:
    """懒加载、单次初始化的简繁转换器"""

    def __init__(self, factory: Optional[EngineFactory] = None):
        self._factory: EngineFactory = factory or opencc_factory
        self._result: Optional[EngineResult] = None
        self._lock = threading.Lock()

    def set_factory(self, factory: Optional[EngineFactory]) -> None:
        """替换引擎工厂并清除已缓存的结果；None 恢复默认 OpenCC 工厂"""
        with self._lock:
            self._factory = factory or opencc_factory
            self._result = None

    def reset(self) -> None:
        with self._lock:
            self._result = None

    def load_engine(self) -> EngineResult:
        result = self._result
        if result is not None:
            return result
        with self._lock:
            # 其它调用方可能已在等待锁期间完成构建
            if self._result is None:
                self._result = self._build()
            return self._result

    def _build(self) -> EngineResult:
        try:
            engine = self._factory()
        except EngineUnavailable as e:
            logger.warning(f"简繁转换器初始化失败: {e}")
            return EngineResult(error=e)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"简繁转换器初始化失败: {e}")
            return EngineResult(error=EngineUnavailable(str(e)))
        logger.info("简繁转换器初始化成功")
        return EngineResult(engine=engine)

    def get_engine(self) -> ConversionEngine:
        """返回引擎，不可用时抛出 EngineUnavailable"""
        result = self.load_engine()
        if not result.ok:
            raise result.error
        return result.engine

    def convert_strict(self, text: str, to_traditional: bool) -> str:
        if not text:
            return text
        engine = self.get_engine()
        try:
            return engine.s2t(text) if to_traditional else engine.t2s(text)
        except Exception as e:  # noqa: BLE001
            direction = "s2t" if to_traditional else "t2s"
            raise ConversionFailed(f"{direction} 转换失败: {e}") from e

    def convert(self, text: str, to_traditional: bool) -> str:
        if not text:
            return text
        try:
            return self.convert_strict(text, to_traditional)
        except JianfanError as e:
            logger.warning(f"简繁转换失败，返回原文: {e}")
            return text


_default_converter = ScriptConverter()


def get_converter() -> ScriptConverter:
    return _default_converter


def set_engine_factory(factory: Optional[EngineFactory]) -> None:
    _default_converter.set_factory(factory)


def configure_engine(s2t_profile: str, t2s_profile: str) -> None:
    """使用指定的 OpenCC 配置名重建默认引擎"""
    _default_converter.set_factory(partial(opencc_factory, s2t_profile, t2s_profile))


def reset_engine() -> None:
    _default_converter.reset()


def load_engine() -> EngineResult:
    return _default_converter.load_engine()


def get_engine() -> ConversionEngine:
    return _default_converter.get_engine()


def convert(text: str, to_traditional: bool) -> str:
    return _default_converter.convert(text, to_traditional)


def convert_strict(text: str, to_traditional: bool) -> str:
    return _default_converter.convert_strict(text, to_traditional)
