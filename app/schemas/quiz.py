from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.config import settings


class ModuleWithCount(BaseModel):
    id: int = Field(..., description="Module ID")
    name: str = Field(..., description="Module name, used as the lookup key")
    description: str = Field("", description="Module description")
    questionCount: int = Field(..., description="Number of questions in the module", ge=0)

    def default_count(self, preferred: Optional[int] = None) -> int:
        """Question count the module picker starts at"""
        if preferred is None:
            preferred = settings.DEFAULT_QUESTION_COUNT
        return min(preferred, self.questionCount)


class ModulesResponse(BaseModel):
    modules: List[ModuleWithCount]


class GeneratedQuestion(BaseModel):
    id: int = Field(..., description="Question ID")
    question: str = Field(..., description="The question text")
    options: List[str] = Field(..., description="Answer texts in stored order")
    correctAnswer: int = Field(
        ..., description="Index into options of the first correct answer", ge=0
    )


class QuestionsResponse(BaseModel):
    questions: List[GeneratedQuestion]


class UploadResponse(BaseModel):
    message: str
    uploadedCount: int = Field(..., ge=0)


class ErrorResponse(BaseModel):
    error: str
