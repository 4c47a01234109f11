from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from wikirefs.errors import ConfigError

if TYPE_CHECKING:
    from wikirefs.settings import WikiConfig


@dataclass(frozen=True)
class Attachment:
    parent: str
    file_name: str

    @property
    def name(self) -> str:
        return f"{self.parent}/{self.file_name}"


@dataclass(frozen=True)
class PageInfo:
    name: str
    version: int = 1
    author: str | None = None
    change_note: str | None = None


def split_attachment_name(name: str) -> tuple[str, str] | None:
    """'Page/file.txt' -> ('Page', 'file.txt'); None for plain page names."""
    if "/" not in name:
        return None
    parent, file_name = name.split("/", 1)
    if not parent or not file_name:
        return None
    return parent, file_name


class PageProvider(ABC):
    """
    Storage collaborator: pages (text + metadata) and their attachments.

    Every failure is reported as ProviderError.
    """

    @classmethod
    @abstractmethod
    def from_config(cls, config: "WikiConfig") -> "PageProvider":
        ...

    # ─────────────── pages ───────────────

    @abstractmethod
    def page_exists(self, name: str) -> bool:
        ...

    @abstractmethod
    def list_pages(self) -> list[str]:
        ...

    @abstractmethod
    def get_text(self, name: str) -> str:
        ...

    @abstractmethod
    def put_text(
        self,
        name: str,
        text: str,
        *,
        author: str | None = None,
        change_note: str | None = None,
    ) -> None:
        ...

    @abstractmethod
    def page_info(self, name: str) -> PageInfo | None:
        ...

    @abstractmethod
    def delete_page(self, name: str) -> None:
        ...

    @abstractmethod
    def move_page(self, from_name: str, to_name: str) -> None:
        ...

    # ─────────────── attachments ───────────────

    @abstractmethod
    def list_attachments(self, page: str) -> list[Attachment]:
        ...

    @abstractmethod
    def add_attachment(self, page: str, file_name: str, data: bytes) -> Attachment:
        ...

    @abstractmethod
    def move_attachments(self, from_parent: str, to_parent: str) -> None:
        ...

    def attachment_exists(self, name: str) -> bool:
        parts = split_attachment_name(name)
        if parts is None:
            return False
        parent, file_name = parts
        return any(att.file_name == file_name for att in self.list_attachments(parent))

    def exists(self, name: str) -> bool:
        """Page or attachment."""
        return self.page_exists(name) or self.attachment_exists(name)


PROVIDERS: dict[str, type[PageProvider]] = {}


def register_provider(name: str):
    def deco(cls: type[PageProvider]) -> type[PageProvider]:
        PROVIDERS[name] = cls
        return cls
    return deco


def create_provider(config: "WikiConfig") -> PageProvider:
    try:
        cls = PROVIDERS[config.storage_provider]
    except KeyError:
        known = ", ".join(sorted(PROVIDERS))
        raise ConfigError(
            f"Unknown storage provider {config.storage_provider!r} (known: {known})"
        ) from None
    return cls.from_config(config)
