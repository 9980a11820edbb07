import sqlite3
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.domain.entities import File, Folder, Page, User


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime:
    return datetime.fromisoformat(s) if s else datetime.min


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteUserRepo(_SQLiteRepo):
    def save(self, user: User) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, display_name, password_hash, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    display_name=excluded.display_name,
                    password_hash=excluded.password_hash,
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.display_name,
                    user.password_hash,
                    user.status,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )

            # Roles are replaced wholesale
            conn.execute("DELETE FROM role_assignments WHERE user_id = ?", (str(user.id),))
            for role in user.roles:
                conn.execute(
                    "INSERT INTO role_assignments (id, user_id, role, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (str(uuid4()), str(user.id), role, datetime.now(UTC).isoformat()),
                )

            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            if not row:
                return None
            return self._map_row_to_user(conn, row)
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            if not row:
                return None
            return self._map_row_to_user(conn, row)
        finally:
            conn.close()

    def _map_row_to_user(self, conn: sqlite3.Connection, row: dict[str, Any]) -> User:
        role_rows = conn.execute(
            "SELECT role FROM role_assignments WHERE user_id = ?", (row["id"],)
        ).fetchall()

        return User(
            id=UUID(row["id"]),
            email=row["email"],
            display_name=row["display_name"],
            password_hash=row["password_hash"],
            roles=[r["role"] for r in role_rows],
            status=row["status"],
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )


class SQLiteFileRepo(_SQLiteRepo):
    def save(self, file: File) -> File:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO files (
                    id, name, title, filename, parent_id, size_bytes,
                    width, height, created_at, last_edited
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    title=excluded.title,
                    filename=excluded.filename,
                    parent_id=excluded.parent_id,
                    size_bytes=excluded.size_bytes,
                    width=excluded.width,
                    height=excluded.height,
                    last_edited=excluded.last_edited
            """,
                (
                    file.id,
                    file.name,
                    file.title,
                    file.filename,
                    file.parent_id,
                    file.size_bytes,
                    file.width,
                    file.height,
                    file.created_at.isoformat(),
                    file.last_edited.isoformat(),
                ),
            )
            conn.commit()
            return file
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def save_folder(self, folder: Folder) -> Folder:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO folders (id, name, parent_id) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    parent_id=excluded.parent_id
            """,
                (folder.id, folder.name, folder.parent_id),
            )
            conn.commit()
            return folder
        finally:
            conn.close()

    def get_by_id(self, file_id: int) -> File | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM files WHERE id = ?", (file_id,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_by_filename(self, filename: str) -> File | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM files WHERE filename = ?", (filename,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_files(
        self,
        *,
        extensions: Sequence[str] | None = None,
        parent_id: int | None = None,
    ) -> list[File]:
        clauses: list[str] = []
        params: list[Any] = []

        if extensions is not None:
            if not extensions:
                return []
            clauses.append("(" + " OR ".join(["lower(name) LIKE ?"] * len(extensions)) + ")")
            params.extend(f"%.{ext.lower()}" for ext in extensions)

        if parent_id:
            clauses.append("parent_id = ?")
            params.append(parent_id)

        query = "SELECT * FROM files"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY name ASC, id ASC"

        conn = self._get_conn()
        try:
            rows = conn.execute(query, params).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def get_folder(self, folder_id: int) -> Folder | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM folders WHERE id = ?", (folder_id,)).fetchone()
            if not row:
                return None
            return Folder(id=row["id"], name=row["name"], parent_id=row["parent_id"])
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> File:
        return File(
            id=row["id"],
            name=row["name"],
            title=row["title"],
            filename=row["filename"],
            parent_id=row["parent_id"],
            size_bytes=row["size_bytes"],
            width=row["width"],
            height=row["height"],
            created_at=parse_dt(row["created_at"]),
            last_edited=parse_dt(row["last_edited"]),
        )


class SQLitePageRepo(_SQLiteRepo):
    def save(self, page: Page) -> Page:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO pages (
                    id, title, menu_title, content, meta_description,
                    parent_id, visibility, created_at, last_edited
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    menu_title=excluded.menu_title,
                    content=excluded.content,
                    meta_description=excluded.meta_description,
                    parent_id=excluded.parent_id,
                    visibility=excluded.visibility,
                    last_edited=excluded.last_edited
            """,
                (
                    page.id,
                    page.title,
                    page.menu_title,
                    page.content,
                    page.meta_description,
                    page.parent_id,
                    page.visibility,
                    page.created_at.isoformat(),
                    page.last_edited.isoformat(),
                ),
            )
            conn.commit()
            return page
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, page_id: int) -> Page | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM pages WHERE id = ?", (page_id,)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def search(self, term: str) -> list[Page]:
        """Partial, case-insensitive match on menu title or title."""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM pages WHERE menu_title LIKE ? ESCAPE '\\' OR title LIKE ? ESCAPE '\\' "
                "ORDER BY title ASC",
                (pattern, pattern),
            ).fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def list_all(self) -> list[Page]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM pages ORDER BY id ASC").fetchall()
            return [self._map_row(row) for row in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Page:
        return Page(
            id=row["id"],
            title=row["title"],
            menu_title=row["menu_title"],
            content=row["content"],
            meta_description=row["meta_description"],
            parent_id=row["parent_id"],
            visibility=row["visibility"],
            created_at=parse_dt(row["created_at"]),
            last_edited=parse_dt(row["last_edited"]),
        )
