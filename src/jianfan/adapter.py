"""页面适配器：为检测/转换核心提供原始正文与标题"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger

DEFAULT_TITLE = "未知标题"

_EDGE_SPACES_RE = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)
_INNER_SPACES_RE = re.compile(r"[ \t]{2,}")


class PageAdapter(Protocol):
    def extract_text(self) -> Optional[str]:
        ...

    def extract_title(self) -> str:
        ...


def normalize_text(text: str) -> str:
    """去掉每行首尾空白，并把连续空格/制表符压缩为一个空格"""
    text = _EDGE_SPACES_RE.sub("", text)
    return _INNER_SPACES_RE.sub(" ", text)


class StaticAdapter:
    """内存中的固定内容"""

    def __init__(self, text: Optional[str], title: str = DEFAULT_TITLE):
        self.text = text
        self.title = title

    def extract_text(self) -> Optional[str]:
        return self.text

    def extract_title(self) -> str:
        return self.title


class TextFileAdapter:
    """从纯文本文件读取：第一行非空文本作为标题，其余作为正文。

    文件只有一行时，标题取文件名，整行作为正文。解析结果按文件的
    修改时间与大小缓存，同一版本的文件只读取一次，标题与正文总是来自同一次读取。
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._cache: Optional[tuple[tuple[int, int], tuple[str, Optional[str]]]] = None

    def _read(self) -> tuple[str, Optional[str]]:
        fallback_title = self.path.stem or DEFAULT_TITLE
        try:
            stat = self.path.stat()
        except OSError as e:
            logger.error(f"读取文件失败 {self.path}: {e}")
            self._cache = None
            return fallback_title, None

        key = (stat.st_mtime_ns, stat.st_size)
        if self._cache is not None and self._cache[0] == key:
            return self._cache[1]

        try:
            raw = self.path.read_text(encoding=self.encoding, errors="replace")
        except OSError as e:
            logger.error(f"读取文件失败 {self.path}: {e}")
            return fallback_title, None

        parsed = self._parse(raw, fallback_title)
        self._cache = (key, parsed)
        return parsed

    @staticmethod
    def _parse(raw: str, fallback_title: str) -> tuple[str, Optional[str]]:
        lines = raw.splitlines(keepends=True)
        for idx, line in enumerate(lines):
            if line.strip():
                rest = "".join(lines[idx + 1:])
                if rest.strip():
                    title, body = line.strip(), rest
                else:
                    title, body = fallback_title, line
                break
        else:
            return fallback_title, None

        body = normalize_text(body).strip("\n")
        return title, body or None

    def extract_text(self) -> Optional[str]:
        return self._read()[1]

    def extract_title(self) -> str:
        return self._read()[0]
