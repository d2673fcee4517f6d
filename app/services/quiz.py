import logging
import random
from typing import Any, List, Optional

from app.domain.quiz_domain import QuizDomain
from app.repositories.quiz_repository import QuizRepository
from app.schemas.quiz import GeneratedQuestion, ModuleWithCount

logger = logging.getLogger(__name__)


class QuizService:
    def __init__(self, repository: QuizRepository, rng: Optional[random.Random] = None):
        self.repository = repository
        self.rng = rng or random.Random()

    def list_modules(self) -> List[ModuleWithCount]:
        """List every module with the number of questions pointing at it"""
        document = self.repository.get()
        return [
            ModuleWithCount(
                id=module.id,
                name=module.name,
                description=module.description,
                questionCount=len(document.questions_for(module.id)),
            )
            for module in document.modules
        ]

    def get_questions(
        self,
        module_name: str,
        count: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> List[GeneratedQuestion]:
        """
        Get the questions of a module by exact name.

        An unknown module gives an empty list, same as a module with no usable
        questions. With count, a random sample of at most count questions is
        returned; without it, every question in stored order.
        """
        document = self.repository.get()

        module = document.find_module(module_name)
        if module is None:
            logger.warning(f'Module "{module_name}" not found')
            return []

        questions = document.questions_for(module.id)
        if difficulty:
            questions = [q for q in questions if q.difficulty == difficulty]

        generated = QuizDomain.to_generated_questions(questions)
        logger.info(f'Found {len(generated)} questions for module "{module_name}"')

        if count is None:
            return generated
        return QuizDomain.sample(generated, count, self.rng)

    def upload_questions(self, payload: Any) -> int:
        """
        Validate uploaded questions and append them to the quiz document.

        All or nothing: the first invalid entry raises QuestionValidationError
        before anything is written.
        """
        # Always start from what is on disk, not from the read cache
        document = self.repository.load()

        entries = QuizDomain.validate_upload(payload, document)
        new_questions = QuizDomain.build_questions(
            entries, document.next_question_id()
        )

        document.questions.extend(new_questions)
        self.repository.save(document)
        self.repository.invalidate_cache()

        logger.info(f"Uploaded {len(new_questions)} questions")
        return len(new_questions)
