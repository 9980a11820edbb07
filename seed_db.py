import io
import logging
import os
import sys
from uuid import uuid4

# Add root to pythonpath
sys.path.append(os.getcwd())

from PIL import Image

from src.adapters.fs.filestore import FileSystemStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteFileRepo, SQLitePageRepo, SQLiteUserRepo
from src.api.auth_utils import create_access_token
from src.domain.entities import File, Folder, Page, User

logger = logging.getLogger("seed_db")


def _sample_png(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (70, 130, 180)).save(buf, format="PNG")
    return buf.getvalue()


def seed() -> None:
    logging.basicConfig(level=logging.INFO)

    data_dir = os.environ.get("EDITOR_DATA_DIR", "./data")
    os.makedirs(data_dir, exist_ok=True)
    db_path = f"{data_dir}/editor.db"
    logger.info("Seeding to %s", db_path)

    SQLiteMigrator(db_path, "migrations").run_migrations()

    users = SQLiteUserRepo(db_path)
    admin = users.get_by_email("admin@example.com")
    if admin is None:
        admin = User(
            id=uuid4(),
            email="admin@example.com",
            display_name="Admin",
            roles=["admin"],
            status="active",
        )
        users.save(admin)
        logger.info("Created admin user")

    store = FileSystemStore(f"{data_dir}/assets")
    files = SQLiteFileRepo(db_path)
    files.save_folder(Folder(id=1, name="Uploads"))

    data = _sample_png(800, 600)
    filename = store.save("Uploads/sample.png", data)
    files.save(
        File(
            id=1,
            name="sample.png",
            title="Sample image",
            filename=filename,
            parent_id=1,
            size_bytes=len(data),
            width=800,
            height=600,
        )
    )

    pages = SQLitePageRepo(db_path)
    pages.save(
        Page(
            id=1,
            title="Home",
            content='<h2 id="welcome">Welcome</h2><p><a name="about">About us</a></p>',
        )
    )
    pages.save(Page(id=2, title="Members", menu_title="Members area", visibility="logged_in"))

    token = create_access_token({"sub": str(admin.id)})
    logger.info("Seed complete. Admin bearer token: %s", token)


if __name__ == "__main__":
    seed()
