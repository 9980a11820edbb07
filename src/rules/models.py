from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RbacRules(BaseModel):
    roles: dict[str, list[str]]
    public_permissions: list[str] = Field(default_factory=list)


class EditorConfigRules(BaseModel):
    """One named client-side editor configuration."""

    valid_elements: str
    extended_valid_elements: str = ""


class EditorRules(BaseModel):
    sanitise_server_side: bool = False
    rows: int = 30
    active_config: str = "cms"
    configs: dict[str, EditorConfigRules]


class MediaRules(BaseModel):
    insert_width: int = 600
    insert_height: int = 360
    media_preview_width: int = 176
    media_preview_height: int = 128
    allowed_extensions: list[str] = Field(
        default_factory=lambda: ["jpg", "gif", "png", "swf", "jpeg"]
    )
    files_page_size: int = 7
    default_media_icon: str = "/static/images/default_media.png"
    icon_base_url: str = "/static/images/app_icons"
    uploads_folder: str = "Uploads"


class EmbedProvider(BaseModel):
    provider: str
    match: str
    endpoint: str


class EmbedsRules(BaseModel):
    allowlist: list[EmbedProvider] = Field(default_factory=list)
    timeout_seconds: float = 5.0
    max_retries: int = 1


class OpsRules(BaseModel):
    data_dir_required: bool = True
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    rbac: RbacRules
    editor: EditorRules
    media: MediaRules = Field(default_factory=MediaRules)
    embeds: EmbedsRules = Field(default_factory=EmbedsRules)
    ops: OpsRules = Field(default_factory=OpsRules)
