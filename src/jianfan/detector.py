from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from .config import CJK_RE, DEFAULT_CONFIG, SIMPLIFIED_MARKERS, TRADITIONAL_MARKERS
from .converter import JianfanError, ScriptConverter, get_converter

_DETECTION_DEFAULTS = DEFAULT_CONFIG["detection"]


@dataclass(frozen=True)
class DetectorSettings:
    threshold: float = _DETECTION_DEFAULTS["threshold"]
    sample_size: int = _DETECTION_DEFAULTS["sample_size"]
    min_stat_length: int = _DETECTION_DEFAULTS["min_stat_length"]
    min_heuristic_length: int = _DETECTION_DEFAULTS["min_heuristic_length"]
    marker_ratio: float = _DETECTION_DEFAULTS["marker_ratio"]
    traditional_markers: Tuple[str, ...] = TRADITIONAL_MARKERS
    simplified_markers: Tuple[str, ...] = SIMPLIFIED_MARKERS

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectorSettings":
        detection = {**_DETECTION_DEFAULTS, **(config.get("detection") or {})}
        markers = config.get("markers") or {}
        return cls(
            threshold=float(detection["threshold"]),
            sample_size=max(1, int(detection["sample_size"])),
            min_stat_length=max(0, int(detection["min_stat_length"])),
            min_heuristic_length=max(0, int(detection["min_heuristic_length"])),
            marker_ratio=float(detection["marker_ratio"]),
            traditional_markers=tuple(markers.get("traditional") or TRADITIONAL_MARKERS),
            simplified_markers=tuple(markers.get("simplified") or SIMPLIFIED_MARKERS),
        )


@dataclass
class DetectionReport:
    """一次检测的完整结果，供日志与命令行展示"""

    traditional: bool
    method: str                     # statistical | heuristic
    reason: str = ""                # 回退到启发式的原因
    s2t_diff: Optional[float] = None
    t2s_diff: Optional[float] = None
    traditional_count: int = 0
    simplified_count: int = 0
    sample_length: int = 0

    @property
    def script(self) -> str:
        return "traditional" if self.traditional else "simplified"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["script"] = self.script
        return data


def text_difference(text1: str, text2: str) -> float:
    """逐位置比较两段文本的差异率

    长度不同时直接视为完全不同 (1.0)。
    """
    if len(text1) != len(text2):
        return 1.0
    if not text1:
        return 0.0
    diff_count = sum(1 for a, b in zip(text1, text2) if a != b)
    return diff_count / len(text1)


class ScriptDetector:
    """简繁检测：先用转换差异统计，失败或无法判定时回退到标记字启发式。"""

    def __init__(self, settings: Optional[DetectorSettings] = None, converter: Optional[ScriptConverter] = None):
        self.settings = settings or DetectorSettings()
        self._converter = converter
        self._trad_set = frozenset(self.settings.traditional_markers)
        self._simp_set = frozenset(self.settings.simplified_markers)

    @property
    def converter(self) -> ScriptConverter:
        # 未显式指定时每次取默认单例，便于宿主替换引擎工厂
        return self._converter or get_converter()

    def detect(self, text: Optional[str]) -> bool:
        """返回 True 表示繁体"""
        return self.analyze(text).traditional

    def analyze(self, text: Optional[str]) -> DetectionReport:
        s = self.settings
        if not text or len(text) < s.min_stat_length:
            logger.debug("文本太短，使用启发式检测")
            return self.heuristic_report(text, reason="short_text")

        result = self.converter.load_engine()
        if not result.ok:
            logger.warning(f"转换引擎不可用，使用启发式检测: {result.error}")
            return self.heuristic_report(text, reason="engine_unavailable")

        sample = text[:s.sample_size]
        try:
            s2t_result = self.converter.convert_strict(sample, True)
            t2s_result = self.converter.convert_strict(sample, False)
        except JianfanError as e:
            logger.warning(f"简繁检测失败，使用启发式检测: {e}")
            return self.heuristic_report(text, reason="conversion_failed")

        s2t_diff = text_difference(sample, s2t_result)
        t2s_diff = text_difference(sample, t2s_result)
        logger.debug(f"简繁检测结果: s2t差异={s2t_diff:.3f}, t2s差异={t2s_diff:.3f}")

        if abs(s2t_diff - t2s_diff) < s.threshold:
            logger.debug("差异太小，使用启发式检测")
            report = self.heuristic_report(sample, reason="ambiguous")
            report.s2t_diff = s2t_diff
            report.t2s_diff = t2s_diff
            return report

        return DetectionReport(
            traditional=t2s_diff > s2t_diff,
            method="statistical",
            s2t_diff=s2t_diff,
            t2s_diff=t2s_diff,
            sample_length=len(sample),
        )

    def count_markers(self, text: str) -> Tuple[int, int]:
        traditional_count = sum(1 for ch in text if ch in self._trad_set)
        simplified_count = sum(1 for ch in text if ch in self._simp_set)
        return traditional_count, simplified_count

    def detect_heuristic(self, text: Optional[str]) -> bool:
        return self.heuristic_report(text).traditional

    def heuristic_report(self, text: Optional[str], reason: str = "") -> DetectionReport:
        s = self.settings
        length = len(text) if text else 0
        if length < s.min_heuristic_length:
            # 信息太少，固定判为繁体
            return DetectionReport(traditional=True, method="heuristic", reason=reason, sample_length=length)

        trad, simp = self.count_markers(text)
        logger.debug(f"启发式检测: 繁体字符数={trad}, 简体字符数={simp}")

        if trad > simp * s.marker_ratio:
            traditional = True
        elif simp > trad * s.marker_ratio:
            traditional = False
        else:
            traditional = CJK_RE.search(text) is not None

        return DetectionReport(
            traditional=traditional,
            method="heuristic",
            reason=reason,
            traditional_count=trad,
            simplified_count=simp,
            sample_length=length,
        )


_default_detector = ScriptDetector()


def get_detector() -> ScriptDetector:
    return _default_detector


def detect(text: Optional[str]) -> bool:
    return _default_detector.detect(text)


def analyze(text: Optional[str]) -> DetectionReport:
    return _default_detector.analyze(text)


def detect_heuristic(text: Optional[str]) -> bool:
    return _default_detector.detect_heuristic(text)
