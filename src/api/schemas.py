from datetime import datetime

from pydantic import BaseModel

from src.domain.entities import PageVisibility


# --- Pages ---
class PageSummary(BaseModel):
    id: int
    title: str
    menu_title: str
    visibility: PageVisibility


# --- Save ---
class SaveContentRequest(BaseModel):
    field: str = "Content"
    value: str = ""


class SanitizerNote(BaseModel):
    code: str
    message: str
    path: str | None = None


class SaveContentResponse(BaseModel):
    page_id: int
    field: str
    content: str
    sanitized: bool
    last_edited: datetime
    notes: list[SanitizerNote] = []
