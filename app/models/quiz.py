from typing import List

from pydantic import BaseModel, Field


class Module(BaseModel):
    id: int
    name: str
    description: str = ""

    class Config:
        extra = "allow"


class Answer(BaseModel):
    text: str
    is_correct: bool = False

    class Config:
        extra = "allow"


class Question(BaseModel):
    id: int
    module_id: int
    question_text: str
    question_type: str = "multiple_choice"
    difficulty: str = "medium"
    answers: List[Answer] = Field(default_factory=list)

    class Config:
        extra = "allow"

    def correct_answer_index(self) -> int:
        """Index of the first correct answer, or -1 when there is none"""
        for index, answer in enumerate(self.answers):
            if answer.is_correct:
                return index
        return -1


class QuizDocument(BaseModel):
    """The whole quiz file: every module and every question"""

    modules: List[Module] = Field(default_factory=list)
    questions: List[Question] = Field(default_factory=list)

    class Config:
        extra = "allow"

    def find_module(self, name: str):
        for module in self.modules:
            if module.name == name:
                return module
        return None

    def has_module_id(self, module_id) -> bool:
        return any(module.id == module_id for module in self.modules)

    def questions_for(self, module_id: int) -> List[Question]:
        return [q for q in self.questions if q.module_id == module_id]

    def next_question_id(self) -> int:
        return max([q.id for q in self.questions] + [0]) + 1
