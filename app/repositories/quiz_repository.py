import json
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from app.core.errors import InternalError
from app.models.quiz import QuizDocument

logger = logging.getLogger(__name__)


class QuizDocumentCache:
    """Read-through cache holding the parsed quiz document.

    The lock only guards population and invalidation. Two readers racing on an
    empty cache may both parse the file; the result is the same either way.
    """

    def __init__(self, loader: Callable[[], QuizDocument]):
        self._loader = loader
        self._document: Optional[QuizDocument] = None
        self._lock = threading.Lock()

    def get(self) -> QuizDocument:
        document = self._document
        if document is not None:
            return document
        document = self._loader()
        with self._lock:
            if self._document is None:
                self._document = document
            return self._document

    def invalidate(self) -> None:
        with self._lock:
            self._document = None

    @property
    def is_populated(self) -> bool:
        return self._document is not None


class QuizRepository:
    """Repository for the JSON quiz document"""

    def __init__(self, path):
        self.path = Path(path)
        self.cache = QuizDocumentCache(self.load)

    def load(self) -> QuizDocument:
        """Read and parse the document straight from disk"""
        try:
            raw = self.path.read_text(encoding="utf-8")
            return QuizDocument.model_validate(json.loads(raw))
        except OSError as e:
            raise InternalError(f"Could not read quiz data at {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise InternalError(f"Quiz data at {self.path} is not valid JSON: {e}") from e
        except ValidationError as e:
            raise InternalError(f"Quiz data at {self.path} has an invalid shape: {e}") from e

    def get(self) -> QuizDocument:
        """Get the cached document, loading it on first use"""
        return self.cache.get()

    def save(self, document: QuizDocument) -> None:
        """Overwrite the whole file with the given document"""
        data = document.model_dump(mode="json")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise InternalError(f"Could not write quiz data to {self.path}: {e}") from e
        logger.info(
            f"Saved quiz data to {self.path} "
            f"({len(document.modules)} modules, {len(document.questions)} questions)"
        )

    def invalidate_cache(self) -> None:
        self.cache.invalidate()
