from .todo_document_model import TodoDocumentModel, TodoRecordModel
from .todo_store_file_adapter import TodoStoreFileAdapter

__all__ = [
    "TodoDocumentModel",
    "TodoRecordModel",
    "TodoStoreFileAdapter",
]
