from .document_store_port import DocumentStorePort
from .llm_port import GenerativeModelPort

__all__ = [
    "DocumentStorePort",
    "GenerativeModelPort",
]
