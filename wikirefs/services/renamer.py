from __future__ import annotations

import logging
from dataclasses import dataclass, field

from wikirefs.core.links import ReferenceGraph
from wikirefs.core.names import clean_link
from wikirefs.core.rewrite import rewrite
from wikirefs.core.wikilinks import LinkExtractor
from wikirefs.errors import (
    InternalRenameError,
    InvalidArgument,
    NoOpRename,
    PageAlreadyExists,
    PageNotFound,
    ProviderError,
    RewriteFailed,
)
from wikirefs.events import WikiEvents
from wikirefs.settings import APP_NAME
from wikirefs.vault.provider import PageProvider

log = logging.getLogger(f"{APP_NAME}.rename")


def change_note(old_name: str, new_name: str) -> str:
    return f"{old_name} ==> {new_name}"


@dataclass(frozen=True)
class ReferrerUpdate:
    """Outcome of rewriting one referring page."""
    page: str
    changed: bool = False
    error: RewriteFailed | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RenameReport:
    old_name: str
    new_name: str
    referrers: list[ReferrerUpdate] = field(default_factory=list)

    @property
    def changed(self) -> list[str]:
        return [r.page for r in self.referrers if r.ok and r.changed]

    @property
    def failed(self) -> list[str]:
        return [r.page for r in self.referrers if not r.ok]

    def as_dict(self) -> dict:
        return {
            "old_name": self.old_name,
            "new_name": self.new_name,
            "total_referrers": len(self.referrers),
            "changed_pages": self.changed,
            "error_pages": self.failed,
        }


class PageRenamer:
    """
    Renames a page and, optionally, every link pointing at it.

    Holds no state of its own between calls. Graph updates go through the
    graph's own lock; nothing is locked across a whole rename.
    """

    def __init__(
        self,
        *,
        provider: PageProvider,
        graph: ReferenceGraph,
        extractor: LinkExtractor,
        events: WikiEvents | None = None,
        camel_case: bool = False,
        attachments_enabled: bool = True,
        default_author: str = "",
    ):
        self.provider = provider
        self.graph = graph
        self.extractor = extractor
        self.events = events
        self.camel_case = camel_case
        self.attachments_enabled = attachments_enabled
        self.default_author = default_author

    # ───────────────────────── public API ─────────────────────────

    def rename(
        self,
        from_name: str,
        to_name: str,
        change_referrers: bool = True,
        *,
        author: str | None = None,
    ) -> str:
        """
        Rename `from_name` to `to_name`.

        Returns the final (cleaned) new name.
        """
        return self.rename_with_report(
            from_name, to_name, change_referrers, author=author
        ).new_name

    def rename_with_report(
        self,
        from_name: str,
        to_name: str,
        change_referrers: bool = True,
        *,
        author: str | None = None,
    ) -> RenameReport:
        if not from_name:
            raise InvalidArgument("From name may not be empty")
        if not to_name or not to_name.strip():
            raise InvalidArgument("To name may not be empty")

        new_name = clean_link(to_name.strip()) or ""
        if not new_name:
            raise InvalidArgument(f"To name {to_name!r} has no usable characters")
        if new_name == from_name:
            raise NoOpRename("You cannot rename the page to itself")

        if not self.provider.page_exists(from_name):
            raise PageNotFound(f"No such page {from_name}")
        if self.provider.page_exists(new_name):
            raise PageAlreadyExists(f"Page already exists {new_name}")

        author = author if author is not None else self.default_author
        log.info("Rename start: %s -> %s (change_referrers=%s)", from_name, new_name, change_referrers)

        # Must be collected before the move changes identities.
        referrers = self._references_to_change(from_name)

        for att in self._attachments(from_name):
            self.graph.page_removed(att.name)

        self.provider.move_page(from_name, new_name)
        if self.attachments_enabled:
            self.provider.move_attachments(from_name, new_name)

        # Write the text back unchanged so the move shows up as a revision.
        if not self.provider.page_exists(new_name):
            raise InternalRenameError(
                f"Rename of {from_name} to {new_name} seems to have failed - please check logs!"
            )
        try:
            text = self.provider.get_text(new_name)
            self.provider.put_text(
                new_name,
                text,
                author=author,
                change_note=change_note(from_name, new_name),
            )
        except ProviderError as exc:
            log.error("Renamed page %s could not be re-saved", new_name, exc_info=True)
            raise InternalRenameError(
                f"{from_name} was moved to {new_name}, but saving it failed: {exc}"
            ) from exc

        self.graph.page_removed(from_name)
        self.graph.update_references(new_name, self.extractor.scan(new_name, text))

        report = RenameReport(old_name=from_name, new_name=new_name)
        if change_referrers:
            report.referrers = self._update_referrers(from_name, new_name, referrers, author)

        for att in self._attachments(new_name):
            self.graph.update_references(att.name, ())

        if self.events is not None:
            self.events.notify_renamed(from_name, new_name)

        log.info(
            "Rename finished: %s -> %s referrers=%d changed=%d errors=%d",
            from_name, new_name, len(report.referrers), len(report.changed), len(report.failed),
        )
        return report

    # ───────────────────────── internal ─────────────────────────

    def _attachments(self, page: str):
        try:
            return self.provider.list_attachments(page)
        except ProviderError:
            log.error("Provider error while fetching attachments of %s", page, exc_info=True)
            return []

    def _references_to_change(self, from_name: str) -> set[str]:
        referrers = set(self.graph.find_referrers(from_name) or ())
        for att in self._attachments(from_name):
            referrers |= self.graph.find_referrers(att.name) or set()
        return referrers

    def _update_referrers(
        self,
        from_name: str,
        new_name: str,
        referrers: set[str],
        author: str,
    ) -> list[ReferrerUpdate]:
        results: list[ReferrerUpdate] = []

        for page in sorted(referrers, key=str.lower):
            # A self-link: the page has just moved under us.
            if page == from_name:
                page = new_name

            try:
                results.append(self._update_referrer(page, from_name, new_name, author))
            except Exception as exc:
                err = RewriteFailed(page, exc)
                log.error("%s", err, exc_info=True)
                results.append(ReferrerUpdate(page=page, error=err))

        return results

    def _update_referrer(self, page: str, from_name: str, new_name: str, author: str) -> ReferrerUpdate:
        source = self.provider.get_text(page)
        updated = rewrite(source, from_name, new_name, camel_case=self.camel_case)

        if updated == source:
            return ReferrerUpdate(page=page, changed=False)

        self.provider.put_text(
            page,
            updated,
            author=author,
            change_note=change_note(from_name, new_name),
        )
        self.graph.update_references(page, self.extractor.scan(page, updated))
        log.debug("Referrer updated: %s", page)
        return ReferrerUpdate(page=page, changed=True)
