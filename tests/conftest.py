from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from docsearch.config import Settings
from docsearch.engine.core.document import Section
from docsearch.engine.index import IndexStore
from docsearch.engine.reindex import InMemoryDocumentSource
from docsearch.engine.scoring.vectorizer import HashingVectorizer
from docsearch.engine.search import HybridSearchEngine
from docsearch.service import DocumentSearchService

BRAND_DOCUMENT = """# Brand Guidelines

This is an introduction to the brand guidelines document. It covers basic concepts.

## Brand Colors

Our brand uses specific colors including blue #3b82f6 and red #ef4444 for consistency.

## Typography

We use modern fonts like Inter and Roboto for all brand communications and marketing.

### Headings

Headings are set in Inter Bold.
"""


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, reindex_debounce_ms=10)


@pytest.fixture
def sample_sections() -> list[Section]:
    return [
        Section(
            id="section-1",
            slug="introduction",
            title="Introduction",
            content=(
                "This is an introduction to the brand guidelines document. "
                "It covers basic concepts."
            ),
            level=1,
            start_line=1,
            end_line=5,
        ),
        Section(
            id="section-2",
            slug="brand-colors",
            title="Brand Colors",
            content=(
                "Our brand uses specific colors including blue #3b82f6 and red #ef4444 "
                "for consistency."
            ),
            level=2,
            start_line=6,
            end_line=10,
        ),
        Section(
            id="section-3",
            slug="typography",
            title="Typography",
            content=(
                "We use modern fonts like Inter and Roboto for all brand communications "
                "and marketing."
            ),
            level=2,
            start_line=11,
            end_line=15,
        ),
    ]


@pytest.fixture
def vectorizer(test_settings: Settings) -> HashingVectorizer:
    vectorizer = HashingVectorizer(settings=test_settings)
    vectorizer.initialize()
    return vectorizer


@pytest.fixture
def store(vectorizer: HashingVectorizer, sample_sections: list[Section]) -> IndexStore:
    store = IndexStore(vectorizer)
    store.swap(store.build(sample_sections))
    return store


@pytest.fixture
def engine(store: IndexStore, test_settings: Settings) -> HybridSearchEngine:
    return HybridSearchEngine(store, settings=test_settings)


@pytest.fixture
def source() -> InMemoryDocumentSource:
    return InMemoryDocumentSource(BRAND_DOCUMENT)


@pytest_asyncio.fixture
async def service(
    source: InMemoryDocumentSource,
    test_settings: Settings,
) -> AsyncGenerator[DocumentSearchService, None]:
    service = DocumentSearchService(source, settings=test_settings)
    await service.start()
    yield service
    await service.close()
