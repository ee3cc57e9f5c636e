from .memory_store import DocumentNotFoundError, InMemoryDocumentStore, JsonFileDocumentStore

__all__ = [
    "DocumentNotFoundError",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
]
