"""阅读会话：持有单个文档的简繁状态，负责检测与切换转换。

状态只在 load()/refresh()/toggle() 中改变，且在所有转换完成后一次性赋值，
界面标签始终由 toggle_label(state) 推导。
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from loguru import logger

from .adapter import DEFAULT_TITLE, PageAdapter
from .converter import JianfanError, ScriptConverter, get_converter
from .detector import ScriptDetector, get_detector

LABEL_TO_SIMPLIFIED = "繁体→简体"
LABEL_TO_TRADITIONAL = "简体→繁体"

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]')


class ScriptState(Enum):
    UNKNOWN = "unknown"
    SIMPLIFIED = "simplified"
    TRADITIONAL = "traditional"

    @classmethod
    def from_bool(cls, traditional: Optional[bool]) -> "ScriptState":
        if traditional is None:
            return cls.UNKNOWN
        return cls.TRADITIONAL if traditional else cls.SIMPLIFIED


class SessionNotLoaded(JianfanError):
    """会话尚未完成首次检测"""


def toggle_target(current_state: bool) -> bool:
    """切换时传给 convert() 的 to_traditional 参数"""
    return not current_state


def toggle_label(current_state: bool) -> str:
    """按钮文字：描述下一次切换将执行的方向"""
    return LABEL_TO_TRADITIONAL if toggle_target(current_state) else LABEL_TO_SIMPLIFIED


def state_message(state: bool) -> str:
    return "已转换为繁体中文" if state else "已转换为简体中文"


def safe_filename(title: str) -> str:
    name = _UNSAFE_FILENAME_RE.sub("_", title.strip()) or DEFAULT_TITLE
    return f"{name}.txt"


class ReadingSession:
    def __init__(
        self,
        adapter: PageAdapter,
        detector: Optional[ScriptDetector] = None,
        converter: Optional[ScriptConverter] = None,
    ):
        self.adapter = adapter
        self._detector = detector
        self._converter = converter
        self._state: Optional[bool] = None
        self.title: str = ""
        self.sections: List[str] = []

    @property
    def detector(self) -> ScriptDetector:
        return self._detector or get_detector()

    @property
    def converter(self) -> ScriptConverter:
        return self._converter or get_converter()

    @property
    def state(self) -> Optional[bool]:
        return self._state

    @property
    def script_state(self) -> ScriptState:
        return ScriptState.from_bool(self._state)

    @property
    def loaded(self) -> bool:
        return self._state is not None

    @property
    def body(self) -> str:
        return "".join(self.sections)

    @property
    def label(self) -> str:
        self._require_loaded()
        return toggle_label(self._state)

    def _require_loaded(self) -> None:
        if self._state is None:
            raise SessionNotLoaded("会话尚未加载，请先调用 load()")

    @staticmethod
    def _split_sections(text: Optional[str]) -> List[str]:
        return text.splitlines(keepends=True) if text else []

    def load(self) -> bool:
        """提取内容并检测简繁，返回检测到的状态"""
        text = self.adapter.extract_text()
        title = self.adapter.extract_title()
        self.title = title
        if not text:
            logger.warning("未找到正文内容，默认按繁体处理")
            self.sections = []
            self._state = True
            return True

        self.sections = self._split_sections(text)
        self._state = self.detector.detect(text)
        logger.info(f"检测到内容为: {'繁体中文' if self._state else '简体中文'}")
        return self._state

    def refresh(self) -> bool:
        """重新提取内容，并转换为当前状态对应的字形。没有内容时保持原样并返回 False"""
        self._require_loaded()
        text = self.adapter.extract_text()
        if not text:
            logger.warning("重新提取失败：未找到正文内容")
            return False
        title = self.adapter.extract_title()
        state = self._state
        new_title = self.converter.convert(title, state)
        new_sections = [self.converter.convert(s, state) for s in self._split_sections(text)]
        self.title, self.sections = new_title, new_sections
        logger.info("内容已重新提取")
        return True

    def toggle(self) -> bool:
        """切换到另一种字形，返回新状态"""
        self._require_loaded()
        return self.convert_to(toggle_target(self._state))

    def convert_to(self, target: bool) -> bool:
        """把当前显示的标题与正文按文档顺序逐段转换为目标字形"""
        self._require_loaded()
        logger.debug(f"转换显示内容，目标: {'繁体' if target else '简体'}")
        new_title = self.converter.convert(self.title, target)
        new_sections = []
        for section in self.sections:
            new_sections.append(self.converter.convert(section, target))
        self.title, self.sections, self._state = new_title, new_sections, target
        logger.info(state_message(target))
        return target

    def export_text(self) -> str:
        if not self.title:
            return self.body
        return f"{self.title}\n\n{self.body}"

    def export_filename(self) -> str:
        return safe_filename(self.title)
