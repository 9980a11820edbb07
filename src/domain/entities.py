from datetime import datetime
from typing import Any, ClassVar, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
RoleType = Literal["owner", "admin", "editor", "viewer"]
PageVisibility = Literal["public", "logged_in", "restricted"]
FieldDbType = Literal["Varchar", "Text", "HTMLText", "HTMLVarchar", "Int"]
EscapeType = Literal["xml", "raw"]

# Field types whose stored value is HTML
HTML_FIELD_TYPES: frozenset[str] = frozenset(["HTMLText", "HTMLVarchar"])


def escape_type_for_db_type(db_type: str) -> EscapeType:
    return "xml" if db_type in HTML_FIELD_TYPES else "raw"


# --- User & Auth ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    display_name: str
    password_hash: str = ""
    roles: list[RoleType] = Field(default_factory=list)
    status: Literal["active", "disabled"] = "active"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

# --- Files ---

class Folder(BaseModel):
    id: int
    name: str
    parent_id: int | None = None

class File(BaseModel):
    """A stored file managed by the asset store."""

    id: int
    name: str
    title: str = ""
    filename: str  # path relative to the store root, e.g. "Uploads/photo.jpg"
    parent_id: int | None = None
    size_bytes: int = 0
    width: int = 0
    height: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_edited: datetime = Field(default_factory=datetime.utcnow)

    @property
    def extension(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[1].lower()

    def get_title(self) -> str:
        return self.title or self.name

# --- Pages ---

class Page(BaseModel):
    """
    A site tree page.

    Exposes a small record interface (has_field / escape_type_for_field /
    set_field) keyed by the admin form field names.
    """

    id: int
    title: str
    menu_title: str = ""
    content: str = ""
    meta_description: str = ""
    parent_id: int | None = None
    visibility: PageVisibility = "public"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_edited: datetime = Field(default_factory=datetime.utcnow)

    db_fields: ClassVar[dict[str, tuple[str, FieldDbType]]] = {
        "Title": ("title", "Varchar"),
        "MenuTitle": ("menu_title", "Varchar"),
        "Content": ("content", "HTMLText"),
        "MetaDescription": ("meta_description", "Text"),
    }

    def get_menu_title(self) -> str:
        return self.menu_title or self.title

    def has_field(self, name: str) -> bool:
        return name in self.db_fields

    def escape_type_for_field(self, name: str) -> EscapeType:
        _, db_type = self.db_fields[name]
        return escape_type_for_db_type(db_type)

    def set_field(self, name: str, value: Any) -> None:
        attr, _ = self.db_fields[name]
        setattr(self, attr, value)
        self.last_edited = datetime.utcnow()
