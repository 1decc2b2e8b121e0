import hashlib
import logging
import threading
from typing import Optional, Sequence

import requests

from notes_rag.core.errors import IndexUnavailableError
from notes_rag.core.models.document import Chunk, ChunkMetadata
from notes_rag.core.protocols.embedder import EmbedderProtocol

logger = logging.getLogger(__name__)


def _chunk_id(chunk: Chunk) -> str:
    key = f"{chunk.metadata.source_id}\x00{chunk.text}"
    return hashlib.md5(key.encode()).hexdigest()


class ChromaVectorStore:
    """Vector store using ChromaDB HTTP API."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        host: str = "localhost",
        port: int = 8000,
        collection_name: str = "obsidian_notes",
        tenant: str = "default_tenant",
        database: str = "default_database",
        timeout: float = 30.0,
        batch_size: int = 500,
    ):
        """Initialize ChromaDB client.

        Args:
            embedder: Embedding model for chunks and queries.
            host: ChromaDB host.
            port: ChromaDB port.
            collection_name: Collection name.
            tenant: Tenant name.
            database: Database name.
            timeout: Per-request timeout in seconds.
            batch_size: Chunks per add request.
        """
        self._embedder = embedder
        self._base_url = f"http://{host}:{port}/api/v2"
        self._tenant = tenant
        self._database = database
        self._collection_name = collection_name
        self._timeout = timeout
        self._batch_size = batch_size
        self._collection_id: Optional[str] = None
        self._write_lock = threading.Lock()

    @property
    def _collections_url(self) -> str:
        return f"{self._base_url}/tenants/{self._tenant}/databases/{self._database}/collections"

    def _request(
        self, method: str, url: str, ok_statuses: tuple[int, ...] = (), **kwargs
    ) -> requests.Response:
        """Send a request, mapping transport and HTTP errors to IndexUnavailableError."""
        try:
            resp = requests.request(method, url, timeout=self._timeout, **kwargs)
            if resp.status_code not in ok_statuses:
                resp.raise_for_status()
        except requests.RequestException as e:
            raise IndexUnavailableError(f"ChromaDB {method} {url}: {e}") from e
        return resp

    def _find_collection(self, name: str) -> Optional[str]:
        resp = self._request("GET", self._collections_url)
        for col in resp.json():
            if col["name"] == name:
                return col["id"]
        return None

    def _create_collection(self, name: str) -> str:
        resp = self._request(
            "POST",
            self._collections_url,
            json={
                "name": name,
                "metadata": {"hnsw:space": "cosine"},
                "get_or_create": True,
            },
        )
        return resp.json()["id"]

    def _delete_collection(self, name: str) -> None:
        self._request("DELETE", f"{self._collections_url}/{name}", ok_statuses=(404,))

    def _ensure_collection(self) -> str:
        """Get or create collection, return ID."""
        if self._collection_id:
            return self._collection_id

        self._collection_id = self._find_collection(self._collection_name)
        if self._collection_id is None:
            self._collection_id = self._create_collection(self._collection_name)
            logger.info(f"Created collection: {self._collection_name}")
        return self._collection_id

    def _add(self, col_id: str, chunks: Sequence[Chunk]) -> None:
        unique: dict[str, Chunk] = {}
        for chunk in chunks:
            unique.setdefault(_chunk_id(chunk), chunk)
        items = list(unique.items())

        total_batches = (len(items) + self._batch_size - 1) // self._batch_size
        for n, start in enumerate(range(0, len(items), self._batch_size), 1):
            batch = items[start : start + self._batch_size]
            embeddings = self._embedder.embed_documents([c.text for _, c in batch])
            self._request(
                "POST",
                f"{self._collections_url}/{col_id}/upsert",
                json={
                    "ids": [chunk_id for chunk_id, _ in batch],
                    "embeddings": embeddings.tolist(),
                    "documents": [c.text for _, c in batch],
                    "metadatas": [c.metadata.to_dict() for _, c in batch],
                },
            )
            logger.info(f"Added batch {n} of {total_batches}")

    def upsert(self, chunks: Sequence[Chunk]) -> None:
        """Embed and add chunks to the active collection."""
        if not chunks:
            return
        with self._write_lock:
            self._add(self._ensure_collection(), chunks)

    def similarity_search(self, query: str, k: int = 5) -> list[tuple[Chunk, float]]:
        """Search by query text; similarity is 1 - cosine distance."""
        if k <= 0:
            return []

        col_id = self._ensure_collection()
        query_embedding = self._embedder.embed_query(query).tolist()
        resp = self._request(
            "POST",
            f"{self._collections_url}/{col_id}/query",
            json={
                "query_embeddings": [query_embedding],
                "n_results": k,
                "include": ["documents", "metadatas", "distances"],
            },
        )

        data = resp.json()
        results = []
        if data.get("ids") and data["ids"][0]:
            for i in range(len(data["ids"][0])):
                chunk = Chunk(
                    text=data["documents"][0][i] or "",
                    metadata=ChunkMetadata.from_dict(data["metadatas"][0][i]),
                )
                results.append((chunk, 1.0 - float(data["distances"][0][i])))

        return results

    def all_chunks(self) -> tuple[Chunk, ...]:
        """Fetch every chunk in one request."""
        col_id = self._ensure_collection()
        resp = self._request(
            "POST",
            f"{self._collections_url}/{col_id}/get",
            json={"include": ["documents", "metadatas"]},
        )
        data = resp.json()
        documents = data.get("documents") or []
        metadatas = data.get("metadatas") or [None] * len(documents)
        return tuple(
            Chunk(text=doc or "", metadata=ChunkMetadata.from_dict(meta))
            for doc, meta in zip(documents, metadatas)
        )

    def count(self) -> int:
        """Get chunk count."""
        col_id = self._ensure_collection()
        resp = self._request("GET", f"{self._collections_url}/{col_id}/count")
        return int(resp.json())

    def delete(self) -> None:
        """Drop the collection."""
        with self._write_lock:
            self._delete_collection(self._collection_name)
            self._collection_id = None
            logger.info(f"Deleted collection: {self._collection_name}")

    def rebuild(self, chunks: Sequence[Chunk]) -> None:
        """Index into a staging collection, then swap it in."""
        staging = f"{self._collection_name}_staging"
        with self._write_lock:
            self._delete_collection(staging)
            staging_id = self._create_collection(staging)
            self._add(staging_id, chunks)

            old_id = self._find_collection(self._collection_name)
            self._collection_id = staging_id
            if old_id:
                self._delete_collection(self._collection_name)
            self._request(
                "PUT",
                f"{self._collections_url}/{staging_id}",
                json={"new_name": self._collection_name},
            )
        logger.info(f"Rebuilt collection {self._collection_name} with {len(chunks)} chunks")
