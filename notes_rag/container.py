import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        self._singletons.pop(interface, None)
        if singleton:
            self._singleton_flags.add(interface)
        else:
            self._singleton_flags.discard(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


def configure_container(settings: Settings) -> Container:
    """Build a container wired from settings.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.models.document import RelevanceBands
    from .core.protocols.document_source import DocumentSourceProtocol
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.generator import AnswerGeneratorProtocol
    from .core.protocols.reranker import RerankerProtocol
    from .core.protocols.vector_store import VectorStoreProtocol
    from .core.services.answer_service import AnswerService
    from .core.services.chunker import TextChunker
    from .core.services.context_builder import ContextBuilder
    from .core.services.ingest_service import IngestService
    from .core.services.keyword_search import KeywordMatcher
    from .core.services.multi_query_service import MultiQuerySearchService
    from .core.services.query_expander import QueryExpander, load_synonyms
    from .core.services.rerank_service import Reranker
    from .core.services.search_service import SearchService
    from .core.strategies.scoring import RelevanceFilter
    from .infrastructure.document_loaders.vault_source import VaultDocumentSource
    from .infrastructure.embeddings.sentence_transformer import (
        SentenceTransformerEmbedder,
    )
    from .infrastructure.llm.ollama_client import OllamaClient
    from .infrastructure.vector_stores.chroma_store import ChromaVectorStore
    from .infrastructure.vector_stores.memory_store import InMemoryVectorStore

    container = Container()

    container.register(Settings, lambda: settings, singleton=True)

    container.register(
        RelevanceBands,
        lambda: RelevanceBands.from_mapping(settings.relevance_bands),
        singleton=True,
    )

    container.register(
        EmbedderProtocol,
        lambda: SentenceTransformerEmbedder(settings.embedding_model),
        singleton=True,
    )

    def make_vector_store() -> VectorStoreProtocol:
        embedder = container.resolve(EmbedderProtocol)
        if settings.vector_backend == "memory":
            return InMemoryVectorStore(embedder)
        return ChromaVectorStore(
            embedder=embedder,
            host=settings.chroma_host,
            port=settings.chroma_port,
            collection_name=settings.chroma_collection,
            timeout=settings.request_timeout,
            batch_size=settings.index_batch_size,
        )

    container.register(VectorStoreProtocol, make_vector_store, singleton=True)

    container.register(
        AnswerGeneratorProtocol,
        lambda: OllamaClient(
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            timeout=settings.request_timeout,
        ),
        singleton=True,
    )

    container.register(
        DocumentSourceProtocol,
        lambda: VaultDocumentSource(
            vault_path=settings.vault_path,
            exclude_dirs=settings.exclude_dirs,
        ),
        singleton=True,
    )

    container.register(
        TextChunker,
        lambda: TextChunker(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        ),
        singleton=True,
    )

    container.register(
        QueryExpander,
        lambda: QueryExpander(load_synonyms(settings.synonyms_path)),
        singleton=True,
    )

    container.register(
        SearchService,
        lambda: SearchService(
            vector_store=container.resolve(VectorStoreProtocol),
            keyword_matcher=KeywordMatcher(container.resolve(RelevanceBands)),
            bands=container.resolve(RelevanceBands),
        ),
        singleton=True,
    )

    container.register(
        MultiQuerySearchService,
        lambda: MultiQuerySearchService(
            search_service=container.resolve(SearchService),
            expander=container.resolve(QueryExpander),
            enable_expansion=settings.enable_query_expansion,
            bands=container.resolve(RelevanceBands),
        ),
        singleton=True,
    )

    container.register(RerankerProtocol, Reranker, singleton=True)

    container.register(
        RelevanceFilter,
        lambda: RelevanceFilter(settings.relevance_threshold),
        singleton=True,
    )

    container.register(ContextBuilder, ContextBuilder, singleton=True)

    container.register(
        IngestService,
        lambda: IngestService(
            document_source=container.resolve(DocumentSourceProtocol),
            chunker=container.resolve(TextChunker),
            vector_store=container.resolve(VectorStoreProtocol),
        ),
        singleton=True,
    )

    container.register(
        AnswerService,
        lambda: AnswerService(
            vector_store=container.resolve(VectorStoreProtocol),
            search_service=container.resolve(MultiQuerySearchService),
            reranker=container.resolve(RerankerProtocol),
            relevance_filter=container.resolve(RelevanceFilter),
            context_builder=container.resolve(ContextBuilder),
            generator=container.resolve(AnswerGeneratorProtocol),
            top_k=settings.search_results_count,
            enable_reranking=settings.enable_reranking,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
