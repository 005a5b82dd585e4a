"""配置模块：检测阈值、简繁标记字表与 OpenCC 转换配置"""

import copy
import json
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

# 简繁标记字对照表（按位置一一对应）
# 前 11 对为常见的简繁对照字，其余为高频且简繁互不通用的字
TRADITIONAL_MARKERS = (
    "麼", "裡", "後", "麵", "發", "鬱", "龜", "體", "國", "學", "會",
    "這", "個", "們", "說", "時", "來", "為", "過", "對", "還",
    "讓", "點", "開", "問", "間", "話", "見", "長", "經", "樣",
)
SIMPLIFIED_MARKERS = (
    "么", "里", "后", "面", "发", "郁", "龟", "体", "国", "学", "会",
    "这", "个", "们", "说", "时", "来", "为", "过", "对", "还",
    "让", "点", "开", "问", "间", "话", "见", "长", "经", "样",
)

# 中日韩统一表意文字基本区
CJK_RE = re.compile(r"[\u4e00-\u9fff]")

DEFAULT_CONFIG: Dict[str, Any] = {
    "detection": {
        "threshold": 0.05,           # 两个方向差异率之差低于此值视为无法判定
        "sample_size": 200,          # 统计检测取样的最大字符数
        "min_stat_length": 10,       # 少于此长度直接使用启发式检测
        "min_heuristic_length": 5,   # 少于此长度不扫描，直接判为繁体
        "marker_ratio": 1.5,         # 标记字计数的优势倍数
    },
    "engine": {
        "s2t": "s2tw",
        "t2s": "tw2s",
    },
    "markers": {
        "traditional": list(TRADITIONAL_MARKERS),
        "simplified": list(SIMPLIFIED_MARKERS),
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate_markers(config: Dict[str, Any]) -> Dict[str, Any]:
    """标记字表必须等长，否则回退默认表"""
    markers = config.get("markers") or {}
    trad = markers.get("traditional") or []
    simp = markers.get("simplified") or []
    if len(trad) != len(simp):
        logger.error(f"简繁标记字表长度不一致: 繁体 {len(trad)} / 简体 {len(simp)}，使用默认字表")
        config["markers"] = copy.deepcopy(DEFAULT_CONFIG["markers"])
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """加载配置

    Args:
        path: JSON 配置文件路径，None 时返回默认配置

    Returns:
        Dict[str, Any]: 与默认配置深度合并后的配置
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
    except Exception as e:  # noqa: BLE001
        logger.error(f"加载配置失败 {config_path}: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(user_config, dict):
        logger.error(f"配置文件格式错误 {config_path}: 顶层必须是对象")
        return copy.deepcopy(DEFAULT_CONFIG)

    logger.debug(f"已加载配置文件: {config_path}")
    return _validate_markers(_deep_merge(DEFAULT_CONFIG, user_config))
