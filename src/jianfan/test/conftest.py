import pytest

from jianfan.config import SIMPLIFIED_MARKERS, TRADITIONAL_MARKERS
from jianfan.converter import ConversionEngine, EngineUnavailable, set_engine_factory

# 简 -> 繁，字数不变，方便断言差异率
S2T_PAIRS = dict(zip(SIMPLIFIED_MARKERS, TRADITIONAL_MARKERS))
S2T_PAIRS.update({"测": "測", "试": "試", "书": "書", "读": "讀", "语": "語"})
T2S_PAIRS = {t: s for s, t in S2T_PAIRS.items()}

_S2T_TABLE = str.maketrans(S2T_PAIRS)
_T2S_TABLE = str.maketrans(T2S_PAIRS)


def make_fake_engine() -> ConversionEngine:
    return ConversionEngine(
        s2t=lambda text: text.translate(_S2T_TABLE),
        t2s=lambda text: text.translate(_T2S_TABLE),
    )


@pytest.fixture
def fake_engine():
    set_engine_factory(make_fake_engine)
    yield
    set_engine_factory(None)


@pytest.fixture
def broken_engine():
    def _factory():
        raise EngineUnavailable("OpenCC 库未加载")

    set_engine_factory(_factory)
    yield
    set_engine_factory(None)


@pytest.fixture
def failing_engine():
    def _boom(text):
        raise RuntimeError("转换器崩溃")

    set_engine_factory(lambda: ConversionEngine(s2t=_boom, t2s=_boom))
    yield
    set_engine_factory(None)
