from __future__ import annotations

import threading

from wikirefs.errors import ProviderError

from .provider import Attachment, PageInfo, PageProvider, register_provider


@register_provider("memory")
class InMemoryPageProvider(PageProvider):
    """Dict-backed provider. Nothing survives the process."""

    def __init__(self) -> None:
        self._texts: dict[str, str] = {}
        self._info: dict[str, PageInfo] = {}
        self._attachments: dict[str, dict[str, bytes]] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config) -> "InMemoryPageProvider":
        return cls()

    def page_exists(self, name: str) -> bool:
        with self._lock:
            return name in self._texts

    def list_pages(self) -> list[str]:
        with self._lock:
            return sorted(self._texts, key=str.lower)

    def get_text(self, name: str) -> str:
        with self._lock:
            try:
                return self._texts[name]
            except KeyError:
                raise ProviderError(f"No such page: {name}") from None

    def put_text(self, name, text, *, author=None, change_note=None) -> None:
        with self._lock:
            prev = self._info.get(name)
            self._texts[name] = text
            self._info[name] = PageInfo(
                name=name,
                version=prev.version + 1 if prev else 1,
                author=author,
                change_note=change_note,
            )

    def page_info(self, name: str) -> PageInfo | None:
        with self._lock:
            return self._info.get(name)

    def delete_page(self, name: str) -> None:
        with self._lock:
            if name not in self._texts:
                raise ProviderError(f"No such page: {name}")
            del self._texts[name]
            del self._info[name]
            self._attachments.pop(name, None)

    def move_page(self, from_name: str, to_name: str) -> None:
        with self._lock:
            if from_name not in self._texts:
                raise ProviderError(f"No such page: {from_name}")
            if to_name in self._texts:
                raise ProviderError(f"Page already exists: {to_name}")
            self._texts[to_name] = self._texts.pop(from_name)
            info = self._info.pop(from_name)
            self._info[to_name] = PageInfo(
                name=to_name,
                version=info.version,
                author=info.author,
                change_note=info.change_note,
            )

    def list_attachments(self, page: str) -> list[Attachment]:
        with self._lock:
            files = self._attachments.get(page, {})
            return [Attachment(page, fn) for fn in sorted(files)]

    def add_attachment(self, page: str, file_name: str, data: bytes) -> Attachment:
        with self._lock:
            if page not in self._texts:
                raise ProviderError(f"No such page: {page}")
            self._attachments.setdefault(page, {})[file_name] = bytes(data)
            return Attachment(page, file_name)

    def get_attachment_data(self, name: str) -> bytes:
        parent, _, file_name = name.partition("/")
        with self._lock:
            try:
                return self._attachments[parent][file_name]
            except KeyError:
                raise ProviderError(f"No such attachment: {name}") from None

    def move_attachments(self, from_parent: str, to_parent: str) -> None:
        with self._lock:
            files = self._attachments.pop(from_parent, None)
            if not files:
                return
            if self._attachments.get(to_parent):
                self._attachments[from_parent] = files
                raise ProviderError(f"Attachments already exist for {to_parent}")
            self._attachments[to_parent] = files
