from pydantic import BaseModel, Field

from config import settings


class QuickAnalyzeRequest(BaseModel):
    cv_text: str = Field(..., max_length=settings.max_text_chars, description="Plain text CV")
    job_text: str = Field(..., max_length=settings.max_text_chars, description="Job description text")
