from __future__ import annotations

import logging

from wikirefs.core.links import ReferenceGraph
from wikirefs.core.wikilinks import LinkExtractor, WikiLinkExtractor
from wikirefs.errors import ProviderError
from wikirefs.events import WikiEvents
from wikirefs.services.renamer import PageRenamer, RenameReport
from wikirefs.settings import APP_NAME, WikiConfig
from wikirefs.vault.provider import Attachment, PageProvider, create_provider

log = logging.getLogger(APP_NAME)


class WikiSession:
    """
    Owns one reference graph and the collaborators that keep it current.

    Saving or deleting a page through the session rescans the graph;
    renames go through the PageRenamer.
    """

    def __init__(
        self,
        *,
        provider: PageProvider,
        config: WikiConfig | None = None,
        extractor: LinkExtractor | None = None,
        events: WikiEvents | None = None,
    ):
        self.config = config or WikiConfig()
        self.provider = provider
        self.extractor = extractor or WikiLinkExtractor(camel_case=self.config.camel_case_links)
        self.events = events or WikiEvents()

        self.graph = ReferenceGraph(
            page_exists=provider.exists,
            match_english_plurals=self.config.match_english_plurals,
        )
        self.renamer = PageRenamer(
            provider=provider,
            graph=self.graph,
            extractor=self.extractor,
            events=self.events,
            camel_case=self.config.camel_case_links,
            attachments_enabled=self.config.attachments_enabled,
            default_author=self.config.default_author,
        )

    @classmethod
    def from_config(cls, config: WikiConfig, *, rebuild: bool = True) -> "WikiSession":
        session = cls(provider=create_provider(config), config=config)
        if rebuild:
            session.rebuild_references()
        return session

    # ───────────────────────── pages ─────────────────────────

    def save_page(self, name: str, text: str, *, author: str | None = None) -> None:
        self.provider.put_text(name, text, author=author or self.config.default_author or None)
        self.graph.update_references(name, self.extractor.scan(name, text))
        self.events.notify_saved(name)

    def delete_page(self, name: str) -> None:
        for att in self.provider.list_attachments(name):
            self.graph.page_removed(att.name)
        self.provider.delete_page(name)
        self.graph.page_removed(name)
        self.events.notify_deleted(name)

    def add_attachment(self, page: str, file_name: str, data: bytes) -> Attachment:
        att = self.provider.add_attachment(page, file_name, data)
        self.graph.update_references(att.name, ())
        return att

    def rename_page(
        self,
        from_name: str,
        to_name: str,
        change_referrers: bool = True,
        *,
        author: str | None = None,
    ) -> str:
        return self.renamer.rename(from_name, to_name, change_referrers, author=author)

    def rename_page_with_report(
        self,
        from_name: str,
        to_name: str,
        change_referrers: bool = True,
        *,
        author: str | None = None,
    ) -> RenameReport:
        return self.renamer.rename_with_report(from_name, to_name, change_referrers, author=author)

    def rebuild_references(self) -> int:
        """
        Rescan every page (and register every attachment).

        Pages that cannot be read are logged and left out of the graph.
        """
        def pages():
            for name in self.provider.list_pages():
                try:
                    text = self.provider.get_text(name)
                except ProviderError:
                    log.warning("Skipping unreadable page %s", name, exc_info=True)
                else:
                    yield name, text
                for att in self.provider.list_attachments(name):
                    yield att.name, ""

        return self.graph.rebuild(pages(), self.extractor)

    # ───────────────────────── queries ─────────────────────────

    def find_referrers(self, page: str) -> set[str] | None:
        return self.graph.find_referrers(page)

    def find_referenced_by(self, page: str) -> set[str]:
        return self.graph.find_referenced_by(page)

    def find_unreferenced(self) -> set[str]:
        return self.graph.find_unreferenced()

    def find_uncreated(self) -> set[str]:
        return self.graph.find_uncreated()
