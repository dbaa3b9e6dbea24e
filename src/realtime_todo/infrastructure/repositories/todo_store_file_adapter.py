import json
import os
import tempfile
from pathlib import Path

import structlog

from realtime_todo.core.application.exceptions import TodoStorageError
from realtime_todo.core.application.ports import TodoStorePort
from realtime_todo.core.domain.todo import Todo, TodoCollection
from realtime_todo.infrastructure.repositories.todo_document_model import TodoDocumentModel

logger = structlog.get_logger()


class TodoStoreFileAdapter(TodoStorePort):
    """Single JSON document store. Every save rewrites the whole file."""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)
        self.store_dir = self.file_path.parent

    def load(self) -> TodoCollection:
        if not self.file_path.exists():
            collection = TodoCollection()
            self.save(collection)
            logger.info("Initialized empty todo document", path=str(self.file_path))
            return collection

        try:
            raw = self.file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TodoStorageError(
                f"Failed to read todo document: {e}", context={"path": str(self.file_path)}
            ) from e

        try:
            return TodoDocumentModel.model_validate_json(raw).to_domain()
        except ValueError as e:
            logger.error(
                "Todo document is corrupt",
                path=str(self.file_path),
                error_type=type(e).__name__,
                error_details=str(e),
            )
            raise TodoStorageError(
                "Todo document is not a valid todo collection",
                context={"path": str(self.file_path)},
            ) from e

    def save(self, collection: TodoCollection) -> None:
        """
        Atomic write: write to temp file then rename.
        """
        payload = TodoDocumentModel.from_domain(collection).model_dump(mode="json", by_alias=True)
        tmp_path: str | None = None
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            # Temp file in the same directory so the rename never crosses filesystems
            with tempfile.NamedTemporaryFile(
                "w", dir=self.store_dir, delete=False, encoding="utf-8", suffix=".tmp"
            ) as tmp:
                tmp_path = tmp.name
                json.dump(payload, tmp, indent=2)

            os.replace(tmp_path, self.file_path)

        except OSError as e:
            logger.error(
                "Failed to write todo document",
                path=str(self.file_path),
                error_type=type(e).__name__,
                error_details=str(e),
            )
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise TodoStorageError(
                f"Failed to write todo document: {e}", context={"path": str(self.file_path)}
            ) from e

    def list_sorted(self) -> list[Todo]:
        return self.load().sorted()
