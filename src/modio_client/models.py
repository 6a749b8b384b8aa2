"""mod.io リソースのデータモデル"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

NULL_ID = 0


class ResourceType(str, Enum):
    """所有者を問い合わせるリソース種別。"""

    GAMES = "games"
    MODS = "mods"
    FILES = "files"
    TAGS = "tags"
    USERS = "users"


@dataclass
class APIMessage:
    """API のメッセージレスポンス。"""

    code: int = 0
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> APIMessage:
        return cls(code=data.get("code", 0), message=data.get("message", ""))


@dataclass
class UserProfile:
    """ユーザープロフィール。"""

    id: int
    name_id: str = ""
    username: str = ""
    profile_url: str = ""
    date_online: int = 0
    timezone: str = ""
    language: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserProfile:
        return cls(
            id=data["id"],
            name_id=data.get("name_id", ""),
            username=data.get("username", ""),
            profile_url=data.get("profile_url", ""),
            date_online=data.get("date_online", 0),
            timezone=data.get("timezone") or "",
            language=data.get("language") or "",
        )


@dataclass
class GameProfile:
    """ゲームプロフィール。"""

    id: int
    name: str = ""
    name_id: str = ""
    status: int = 0
    summary: str = ""
    profile_url: str = ""
    ugc_name: str = ""
    date_added: int = 0
    date_updated: int = 0
    date_live: int = 0
    submitted_by: UserProfile | None = None
    tag_options: list[ModTagCategory] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameProfile:
        submitted_by = data.get("submitted_by")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            name_id=data.get("name_id", ""),
            status=data.get("status", 0),
            summary=data.get("summary", ""),
            profile_url=data.get("profile_url", ""),
            ugc_name=data.get("ugc_name", ""),
            date_added=data.get("date_added", 0),
            date_updated=data.get("date_updated", 0),
            date_live=data.get("date_live", 0),
            submitted_by=UserProfile.from_dict(submitted_by) if submitted_by else None,
            tag_options=[ModTagCategory.from_dict(t) for t in data.get("tag_options", [])],
        )


@dataclass
class ModTag:
    """Mod に付与されたタグ。"""

    name: str
    date_added: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModTag:
        return cls(name=data["name"], date_added=data.get("date_added", 0))


@dataclass
class ModTagCategory:
    """ゲームで利用可能なタグのカテゴリ。"""

    name: str
    type: str = "checkboxes"
    hidden: bool = False
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModTagCategory:
        return cls(
            name=data["name"],
            type=data.get("type", "checkboxes"),
            hidden=data.get("hidden", False),
            tags=list(data.get("tags", [])),
        )


@dataclass
class MetadataKVP:
    """メタデータのキー/値ペア。"""

    metakey: str
    metavalue: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetadataKVP:
        return cls(metakey=data["metakey"], metavalue=data.get("metavalue", ""))


@dataclass
class ModfileDownload:
    """Modfile のダウンロード情報。"""

    binary_url: str = ""
    date_expires: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModfileDownload:
        return cls(
            binary_url=data.get("binary_url", ""),
            date_expires=data.get("date_expires", 0),
        )


@dataclass
class Modfile:
    """Mod のファイル。"""

    id: int
    mod_id: int = NULL_ID
    date_added: int = 0
    filesize: int = 0
    filename: str = ""
    version: str = ""
    changelog: str = ""
    metadata_blob: str = ""
    download: ModfileDownload | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Modfile:
        download = data.get("download")
        return cls(
            id=data["id"],
            mod_id=data.get("mod_id", NULL_ID),
            date_added=data.get("date_added", 0),
            filesize=data.get("filesize", 0),
            filename=data.get("filename", ""),
            version=data.get("version") or "",
            changelog=data.get("changelog") or "",
            metadata_blob=data.get("metadata_blob") or "",
            download=ModfileDownload.from_dict(download) if download else None,
        )


@dataclass
class ModStatistics:
    """Mod の統計情報。"""

    mod_id: int
    popularity_rank_position: int = 0
    popularity_rank_total_mods: int = 0
    downloads_total: int = 0
    subscribers_total: int = 0
    ratings_positive: int = 0
    ratings_negative: int = 0
    date_expires: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModStatistics:
        return cls(
            mod_id=data["mod_id"],
            popularity_rank_position=data.get("popularity_rank_position", 0),
            popularity_rank_total_mods=data.get("popularity_rank_total_mods", 0),
            downloads_total=data.get("downloads_total", 0),
            subscribers_total=data.get("subscribers_total", 0),
            ratings_positive=data.get("ratings_positive", 0),
            ratings_negative=data.get("ratings_negative", 0),
            date_expires=data.get("date_expires", 0),
        )


@dataclass
class ModProfile:
    """Mod プロフィール。"""

    id: int
    game_id: int = NULL_ID
    status: int = 0
    visible: int = 1
    name: str = ""
    name_id: str = ""
    summary: str = ""
    description: str = ""
    homepage_url: str = ""
    profile_url: str = ""
    date_added: int = 0
    date_updated: int = 0
    date_live: int = 0
    submitted_by: UserProfile | None = None
    modfile: Modfile | None = None
    stats: ModStatistics | None = None
    tags: list[ModTag] = field(default_factory=list)
    metadata_blob: str = ""
    metadata_kvp: list[MetadataKVP] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModProfile:
        submitted_by = data.get("submitted_by")
        modfile = data.get("modfile")
        stats = data.get("stats")
        return cls(
            id=data["id"],
            game_id=data.get("game_id", NULL_ID),
            status=data.get("status", 0),
            visible=data.get("visible", 1),
            name=data.get("name", ""),
            name_id=data.get("name_id", ""),
            summary=data.get("summary", ""),
            description=data.get("description") or "",
            homepage_url=data.get("homepage_url") or "",
            profile_url=data.get("profile_url", ""),
            date_added=data.get("date_added", 0),
            date_updated=data.get("date_updated", 0),
            date_live=data.get("date_live", 0),
            submitted_by=UserProfile.from_dict(submitted_by) if submitted_by else None,
            # mod.io は未アップロードの modfile を空オブジェクトで返す
            modfile=Modfile.from_dict(modfile) if modfile and "id" in modfile else None,
            stats=ModStatistics.from_dict(stats) if stats else None,
            tags=[ModTag.from_dict(t) for t in data.get("tags", [])],
            metadata_blob=data.get("metadata_blob") or "",
            metadata_kvp=[MetadataKVP.from_dict(m) for m in data.get("metadata_kvp", [])],
        )


@dataclass
class ModDependency:
    """Mod の依存関係。"""

    mod_id: int
    date_added: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModDependency:
        return cls(mod_id=data["mod_id"], date_added=data.get("date_added", 0))


@dataclass
class ModTeamMember:
    """Mod のチームメンバー。"""

    id: int
    user: UserProfile | None = None
    level: int = 1
    date_added: int = 0
    position: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModTeamMember:
        user = data.get("user")
        return cls(
            id=data["id"],
            user=UserProfile.from_dict(user) if user else None,
            level=data.get("level", 1),
            date_added=data.get("date_added", 0),
            position=data.get("position", ""),
        )


@dataclass
class ModComment:
    """Mod へのコメント。"""

    id: int
    mod_id: int = NULL_ID
    user: UserProfile | None = None
    date_added: int = 0
    reply_id: int = 0
    thread_position: str = ""
    karma: int = 0
    content: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModComment:
        user = data.get("user")
        return cls(
            id=data["id"],
            mod_id=data.get("mod_id", NULL_ID),
            user=UserProfile.from_dict(user) if user else None,
            date_added=data.get("date_added", 0),
            reply_id=data.get("reply_id", 0),
            thread_position=data.get("thread_position", ""),
            karma=data.get("karma", 0),
            content=data.get("content", ""),
        )


@dataclass
class ModEvent:
    """Mod の更新イベント。"""

    id: int
    mod_id: int = NULL_ID
    user_id: int = NULL_ID
    date_added: int = 0
    event_type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModEvent:
        return cls(
            id=data["id"],
            mod_id=data.get("mod_id", NULL_ID),
            user_id=data.get("user_id", NULL_ID),
            date_added=data.get("date_added", 0),
            event_type=data.get("event_type", ""),
        )


@dataclass
class UserEvent:
    """認証済みユーザーのイベント。"""

    id: int
    game_id: int = NULL_ID
    mod_id: int = NULL_ID
    user_id: int = NULL_ID
    date_added: int = 0
    event_type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserEvent:
        return cls(
            id=data["id"],
            game_id=data.get("game_id", NULL_ID),
            mod_id=data.get("mod_id", NULL_ID),
            user_id=data.get("user_id", NULL_ID),
            date_added=data.get("date_added", 0),
            event_type=data.get("event_type", ""),
        )


@dataclass
class ModRating:
    """ユーザーが投稿した評価。"""

    game_id: int
    mod_id: int
    rating: int = 0
    date_added: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModRating:
        return cls(
            game_id=data["game_id"],
            mod_id=data["mod_id"],
            rating=data.get("rating", 0),
            date_added=data.get("date_added", 0),
        )


@dataclass
class RequestPage(Generic[T]):
    """一覧エンドポイントのページ。"""

    items: list[T]
    size: int = 0
    offset: int = 0
    limit: int = 0
    total: int = 0

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], item_factory: Callable[[dict[str, Any]], T]
    ) -> RequestPage[T]:
        items = [item_factory(d) for d in data.get("data", [])]
        return cls(
            items=items,
            size=data.get("result_count", len(items)),
            offset=data.get("result_offset", 0),
            limit=data.get("result_limit", 0),
            total=data.get("result_total", len(items)),
        )

    @property
    def has_more(self) -> bool:
        return self.offset + self.size < self.total
