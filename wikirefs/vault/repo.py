from __future__ import annotations

import json
import threading
from pathlib import Path
from urllib.parse import quote, unquote

from wikirefs.errors import ProviderError

from .filesystem import atomic_write_bytes, atomic_write_text
from .provider import Attachment, PageInfo, PageProvider, register_provider

PAGE_SUFFIX = ".txt"
META_SUFFIX = ".json"
ATTACHMENT_DIR_SUFFIX = "-att"


def mangle_name(name: str) -> str:
    """Page name -> file-system-safe stem (reversible)."""
    return quote(name, safe=" ()&+,=$")


def unmangle_name(stem: str) -> str:
    return unquote(stem)


@register_provider("filesystem")
class FileSystemPageProvider(PageProvider):
    """
    Pages live as plain files inside `vault_dir`:

      <vault>/<name>.txt        page text
      <vault>/<name>.json       author / change note / version
      <vault>/<name>-att/<file> attachments
    """

    def __init__(self, vault_dir: Path):
        self.vault_dir = Path(vault_dir)
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config) -> "FileSystemPageProvider":
        provider = cls(config.vault_dir)
        provider.ensure()
        return provider

    def ensure(self) -> None:
        self.vault_dir.mkdir(parents=True, exist_ok=True)

    # ─────────────── paths ───────────────

    def page_path(self, name: str) -> Path:
        return self.vault_dir / f"{mangle_name(name)}{PAGE_SUFFIX}"

    def meta_path(self, name: str) -> Path:
        return self.vault_dir / f"{mangle_name(name)}{META_SUFFIX}"

    def attachment_dir(self, page: str) -> Path:
        return self.vault_dir / f"{mangle_name(page)}{ATTACHMENT_DIR_SUFFIX}"

    # ─────────────── pages ───────────────

    def page_exists(self, name: str) -> bool:
        if not name:
            return False
        return self.page_path(name).is_file()

    def list_pages(self) -> list[str]:
        return sorted(
            (unmangle_name(p.stem) for p in self.vault_dir.glob(f"*{PAGE_SUFFIX}") if p.is_file()),
            key=str.lower,
        )

    def get_text(self, name: str) -> str:
        path = self.page_path(name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ProviderError(f"No such page: {name}") from None
        except (OSError, UnicodeDecodeError) as exc:
            raise ProviderError(f"Unable to read {path}: {exc}") from exc

    def put_text(self, name, text, *, author=None, change_note=None) -> None:
        with self._lock:
            prev = self.page_info(name)
            info = {
                "version": prev.version + 1 if prev else 1,
                "author": author,
                "change_note": change_note,
            }
            try:
                atomic_write_text(self.page_path(name), text)
                atomic_write_text(self.meta_path(name), json.dumps(info, ensure_ascii=False))
            except OSError as exc:
                raise ProviderError(f"Unable to save {name}: {exc}") from exc

    def page_info(self, name: str) -> PageInfo | None:
        if not self.page_exists(name):
            return None
        try:
            raw = json.loads(self.meta_path(name).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return PageInfo(name=name)
        except (OSError, ValueError) as exc:
            raise ProviderError(f"Broken metadata for {name}: {exc}") from exc
        return PageInfo(
            name=name,
            version=int(raw.get("version") or 1),
            author=raw.get("author"),
            change_note=raw.get("change_note"),
        )

    def delete_page(self, name: str) -> None:
        with self._lock:
            if not self.page_exists(name):
                raise ProviderError(f"No such page: {name}")
            try:
                self.page_path(name).unlink()
                self.meta_path(name).unlink(missing_ok=True)
                att_dir = self.attachment_dir(name)
                if att_dir.is_dir():
                    for f in att_dir.iterdir():
                        f.unlink()
                    att_dir.rmdir()
            except OSError as exc:
                raise ProviderError(f"Unable to delete {name}: {exc}") from exc

    def move_page(self, from_name: str, to_name: str) -> None:
        with self._lock:
            if not self.page_exists(from_name):
                raise ProviderError(f"No such page: {from_name}")
            if self.page_exists(to_name):
                raise ProviderError(f"Page already exists: {to_name}")
            try:
                self.page_path(from_name).rename(self.page_path(to_name))
                meta = self.meta_path(from_name)
                if meta.exists():
                    meta.rename(self.meta_path(to_name))
            except OSError as exc:
                raise ProviderError(f"Unable to move {from_name} to {to_name}: {exc}") from exc

    # ─────────────── attachments ───────────────

    def list_attachments(self, page: str) -> list[Attachment]:
        att_dir = self.attachment_dir(page)
        if not att_dir.is_dir():
            return []
        try:
            files = sorted(p.name for p in att_dir.iterdir() if p.is_file() and not p.name.startswith("."))
        except OSError as exc:
            raise ProviderError(f"Unable to list attachments of {page}: {exc}") from exc
        return [Attachment(page, fn) for fn in files]

    def add_attachment(self, page: str, file_name: str, data: bytes) -> Attachment:
        if not self.page_exists(page):
            raise ProviderError(f"No such page: {page}")
        if not file_name or "/" in file_name or "\\" in file_name or file_name.startswith("."):
            raise ProviderError(f"Illegal attachment name: {file_name!r}")
        try:
            atomic_write_bytes(self.attachment_dir(page) / file_name, data)
        except OSError as exc:
            raise ProviderError(f"Unable to store attachment {page}/{file_name}: {exc}") from exc
        return Attachment(page, file_name)

    def move_attachments(self, from_parent: str, to_parent: str) -> None:
        with self._lock:
            src = self.attachment_dir(from_parent)
            if not src.is_dir():
                return
            dst = self.attachment_dir(to_parent)
            if dst.exists():
                raise ProviderError(f"Attachments already exist for {to_parent}")
            try:
                src.rename(dst)
            except OSError as exc:
                raise ProviderError(
                    f"Unable to move attachments of {from_parent} to {to_parent}: {exc}"
                ) from exc
