from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    vault_path: str = Field(
        default="./vault",
        validation_alias=AliasChoices("vault_path", "obsidian_vault_path"),
    )
    exclude_dirs: list[str] = [".obsidian", ".git", ".DS_Store", "_templates"]

    vector_backend: Literal["chroma", "memory"] = "chroma"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "obsidian_notes"
    index_batch_size: int = 500

    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    llm_base_url: str = "http://localhost:11434/v1"
    llm_model: str = "llama3"
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.1

    request_timeout: float = 30.0

    search_results_count: int = 8
    relevance_threshold: float = 0.25
    enable_query_expansion: bool = True
    enable_reranking: bool = True
    chunk_size: int = 1200
    chunk_overlap: int = 300

    # JSON object of word -> [synonyms]; built-in table when unset
    synonyms_path: Optional[str] = None
    # origin -> [high, medium]; unset origins keep the built-in bands
    relevance_bands: dict[str, list[float]] = {}

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
