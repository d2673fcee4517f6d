import json
import logging
from typing import Any, Dict, List, Optional

import requests

from app.core.config import settings
from app.core.errors import QuestionValidationError
from app.domain.quiz_domain import QuizDomain
from app.schemas.quiz import GeneratedQuestion, ModuleWithCount

logger = logging.getLogger(__name__)


class QuizApiError(Exception):
    """A quiz API call failed. The message is what the user should see."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class QuizApiClient:
    """Thin requests wrapper over the quiz HTTP API"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.API_TIMEOUT

    def _handle(self, response) -> Dict[str, Any]:
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise QuizApiError(
                message or f"HTTP {response.status_code}", response.status_code
            )
        return response.json()

    def get_modules(self) -> List[ModuleWithCount]:
        try:
            response = requests.get(f"{self.base_url}/modules", timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Error fetching modules: {e}")
            raise QuizApiError(str(e)) from e

        data = self._handle(response)
        return [ModuleWithCount(**module) for module in data["modules"]]

    def get_questions(
        self,
        module_name: str,
        count: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> List[GeneratedQuestion]:
        """Fetch questions for a module, raising QuizApiError on any failure"""
        params: Dict[str, Any] = {"module": module_name}
        if count:
            params["count"] = count
        if difficulty:
            params["difficulty"] = difficulty

        try:
            response = requests.get(
                f"{self.base_url}/questions", params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f'Error fetching questions for module "{module_name}": {e}')
            raise QuizApiError(str(e)) from e

        data = self._handle(response)
        return [GeneratedQuestion(**question) for question in data["questions"]]

    def upload_questions(self, payload) -> Dict[str, Any]:
        """
        Upload questions.

        Accepts either the parsed payload or the raw JSON text pasted in the
        upload form. The payload is checked against the server's rules, minus
        the module lookup, before anything is sent.
        """
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError:
                raise QuizApiError("Invalid JSON text")

        try:
            QuizDomain.validate_upload(payload)
        except QuestionValidationError as e:
            raise QuizApiError(str(e)) from e

        try:
            response = requests.post(
                f"{self.base_url}/upload-questions", json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Error uploading questions: {e}")
            raise QuizApiError(str(e)) from e

        return self._handle(response)
