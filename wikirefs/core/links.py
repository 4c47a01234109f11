from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable

from ..settings import APP_NAME
from .names import name_candidates, plural_counterpart, wikify_link
from .wikilinks import LinkExtractor


log = logging.getLogger(f"{APP_NAME}.references")


class ReferenceGraph:
    """
    Bidirectional reference graph between wiki pages.

    refers_to[src]   = {dst1, dst2, ...}
    referred_by[dst] = {src1, src2, ...}

    `dst` may be uncreated (linked to, but no such page exists yet).
    The two maps are exact inverses; `referred_by` never holds empty sets.
    Keys of `refers_to` are the pages that have been scanned.

    Every read and write goes through one lock, so a reader always sees the
    maps as some completed write left them.
    """

    def __init__(
        self,
        *,
        page_exists: Callable[[str], bool],
        match_english_plurals: bool = False,
    ):
        self._page_exists = page_exists
        self.match_english_plurals = match_english_plurals

        self._refers_to: dict[str, set[str]] = {}
        self._referred_by: dict[str, set[str]] = {}
        self._lock = threading.RLock()

    # ───────────────────────── mutations ─────────────────────────

    def clear(self) -> None:
        with self._lock:
            self._refers_to.clear()
            self._referred_by.clear()

    def rebuild(self, pages: Iterable[tuple[str, str]], extractor: LinkExtractor) -> int:
        """
        Full rebuild from (name, text) pairs.
        Expensive, but safe.
        """
        with self._lock:
            self.clear()
            count = 0
            for name, text in pages:
                self.update_references(name, extractor.scan(name, text))
                count += 1
        log.info("Reference scan done: pages=%d uncreated=%d", count, len(self.find_uncreated()))
        return count

    def update_references(self, page: str, targets: Iterable[str]) -> bool:
        """
        Replace the outbound reference set of `page`.

        Returns True if the set actually changed.
        """
        page = self.final_page_name(page)
        targets = list(targets)

        with self._lock:
            new_targets: set[str] = set()
            for target in targets:
                resolved = self.final_page_name(target)
                # Foobars -> [Foobar] must not turn into a self-reference
                # just because only one of the two forms exists.
                if resolved == page and page not in (target, wikify_link(target)):
                    continue
                new_targets.add(resolved)

            old_targets = self._refers_to.get(page)
            self._refers_to[page] = new_targets

            if old_targets is not None and old_targets == new_targets:
                return False

            old_targets = old_targets or set()

            # 1. Remove obsolete incoming links
            for removed in old_targets - new_targets:
                self._discard_referrer(removed, page)

            # 2. Add new incoming links
            for added in new_targets - old_targets:
                self._referred_by.setdefault(added, set()).add(page)

            return True

    def page_removed(self, page: str) -> None:
        """
        Forget everything `page` refers to.

        Pages that still link to `page` keep those links until they are
        rescanned; `page` then shows up as uncreated.
        """
        with self._lock:
            targets = self._refers_to.pop(page, None)
            for target in targets or ():
                self._discard_referrer(target, page)

            if not self._referred_by.get(page):
                self._referred_by.pop(page, None)

        log.debug("Page removed from reference graph: %s", page)

    def clear_page_entries(self, page: str) -> None:
        """Drop a page and every reference pointing at it."""
        page = self.final_page_name(page)
        with self._lock:
            self.page_removed(page)
            for src in self._referred_by.pop(page, set()):
                refs = self._refers_to.get(src)
                if refs is not None:
                    refs.discard(page)

    # ───────────────────────── queries ─────────────────────────

    def find_referrers(self, page: str) -> set[str] | None:
        """
        Pages that refer to `page`, or None if there are none.

        With plural matching on, referrers of the singular/plural form are
        merged in.
        """
        with self._lock:
            refs = self._reference_list(page)
        return refs or None

    def find_referenced_by(self, page: str) -> set[str]:
        """Outbound references of `page` (self references included)."""
        with self._lock:
            return set(self._refers_to.get(self.final_page_name(page), ()))

    find_refers_to = find_referenced_by

    def find_unreferenced(self) -> set[str]:
        with self._lock:
            return {page for page in self._refers_to if not self._reference_list(page)}

    def find_uncreated(self) -> set[str]:
        """Linked-to names with no page behind them in any accepted form."""
        with self._lock:
            names = list(self._referred_by)
        return {name for name in names if not self._page_exists(self.final_page_name(name))}

    def find_created(self) -> set[str]:
        with self._lock:
            return set(self._refers_to)

    def snapshot(self) -> tuple[dict[str, set[str]], dict[str, set[str]]]:
        """Deep copy of (refers_to, referred_by)."""
        with self._lock:
            return (
                {k: set(v) for k, v in self._refers_to.items()},
                {k: set(v) for k, v in self._referred_by.items()},
            )

    def final_page_name(self, name: str) -> str:
        """
        Name of the page `name` resolves to: exact, then singular, then
        plural, then the same for the legacy wikified form. Falls back to
        `name` when no form exists.
        """
        for candidate in name_candidates(name, match_english_plurals=self.match_english_plurals):
            if self._page_exists(candidate):
                return candidate
        return name

    # ───────────────────────── internal ─────────────────────────

    def _discard_referrer(self, target: str, referrer: str) -> None:
        refs = self._referred_by.get(target)
        if refs is None:
            return
        refs.discard(referrer)
        if not refs:
            del self._referred_by[target]

    def _reference_list(self, page: str) -> set[str]:
        refs = set(self._referred_by.get(page, ()))
        if self.match_english_plurals and page:
            refs |= self._referred_by.get(plural_counterpart(page), set())
        return refs
