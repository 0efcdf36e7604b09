# ABOUTME: Shared pytest fixtures for multicite tests.
# ABOUTME: Provides a sample extra field, its converted CSL item, and a fake host with an engine.

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from multicite.config import InMemoryPreferences
from multicite.pipeline import EnrichmentPipeline
from tests.fixtures.host import CONVERT_PATH, ENGINE_PATH, TRANSLATE_PATH, FakeItem, make_host

SAMPLE_EXTRA = """\
Cataloged from the library's Chinese collection.
cne-original-language: zh-CN
cne-title-original: 敦煌遺書修復
cne-title-romanized: Dunhuang yishu xiufu
cne-title-romanizedShort: Dunhuang xiufu
cne-title-english: Restoring the Dunhuang Manuscripts
cne-publisher-original: 北京圖書館出版社
cne-publisher-romanized: Beijing tushuguan chubanshe
cne-creator-0-last-romanized: Du
cne-creator-0-first-romanized: Weisheng
cne-creator-0-last-original: 杜
cne-creator-0-first-original: 偉生
cne-creator-1-last-romanized: Lin
cne-creator-1-first-romanized: Shitian
cne-creator-1-last-original: 林
cne-creator-1-first-original: 世田
tex.shorttitle: Dunhuang"""

SAMPLE_CREATORS: list[tuple[str, str, str | None]] = [
    ("author", "杜", "偉生"),
    ("editor", "林", "世田"),
    ("editor", "Morrison", "Alastair"),
]


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_extra() -> str:
    """An extra field holding a user note, a foreign tag line, and a full parallel-language record."""
    return SAMPLE_EXTRA


@pytest.fixture
def sample_item() -> FakeItem:
    """A host record for a Chinese monograph with an author and two editors."""
    return FakeItem(
        extra=SAMPLE_EXTRA,
        creators=SAMPLE_CREATORS,
        title="敦煌遺書修復",
        language="zh-CN",
    )


@pytest.fixture
def sample_csl_item() -> dict[str, Any]:
    """The CSL-JSON the host produces for sample_item, before enrichment."""
    return {
        "id": "item-1",
        "type": "book",
        "title": "敦煌遺書修復",
        "language": "zh-CN",
        "author": [{"family": "杜", "given": "偉生"}],
        "editor": [
            {"family": "林", "given": "世田"},
            {"family": "Morrison", "given": "Alastair"},
        ],
    }


@pytest.fixture
def host() -> SimpleNamespace:
    """A fresh fake host application."""
    return make_host()


@pytest.fixture
def preferences() -> InMemoryPreferences:
    return InMemoryPreferences()


@pytest.fixture
def pipeline(host: SimpleNamespace, preferences: InMemoryPreferences) -> Iterator[EnrichmentPipeline]:
    """An enrichment pipeline bound to the fake host, removed after the test."""
    pipe = EnrichmentPipeline(
        host,
        CONVERT_PATH,
        ENGINE_PATH,
        preferences,
        additional_convert_paths=[TRANSLATE_PATH],
    )
    yield pipe
    pipe.stop()
