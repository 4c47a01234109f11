from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Protocol, Union

from .names import clean_link, split_real_link


# {{{ preformatted }}}
# [target]
# [display|target]
# [display|target|attributes]
# [[escaped]   ~[escaped]
SEGMENT_RE = re.compile(
    r"(?P<pre>\{\{\{.*?\}\}\})"
    r"|(?P<esc>[\[~]?)\[(?P<text>[^|\]]*)"
    r"(?:(?P<p1>\|)(?P<link>[^|\]]*))?"
    r"(?:(?P<p2>\|)(?P<attr>[^|\]]*))?\]",
    re.DOTALL,
)

# Candidate word for a bare CamelCase link; is_camel_case() checks the casing.
CAMEL_WORD_RE = re.compile(r"(?<![\w~])[^\W\d_][^\W_]*")

EXTERNAL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
FOOTNOTE_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class Text:
    raw: str


@dataclass(frozen=True)
class Escaped:
    raw: str


@dataclass(frozen=True)
class Preformatted:
    raw: str


@dataclass(frozen=True)
class LinkOccurrence:
    """
    One bracketed link.

    `target` is None for the implicit form `[X]`, where the display text is
    the target as well. `attributes` is None unless a second '|' is present.
    """
    raw: str
    display: str
    target: str | None = None
    attributes: str | None = None

    @property
    def explicit(self) -> bool:
        return self.target is not None

    @property
    def link_target(self) -> str:
        return self.target if self.target is not None else self.display

    def render(self) -> str:
        parts = [self.display]
        if self.target is not None:
            parts.append(self.target)
        if self.attributes is not None:
            parts.append(self.attributes)
        return "[" + "|".join(parts) + "]"


Segment = Union[Text, Escaped, Preformatted, LinkOccurrence]


def tokenize(text: str) -> Iterator[Segment]:
    """
    Split raw page text into typed segments.

    Concatenating `raw` of every segment gives back the input unchanged.
    """
    if not text:
        return

    pos = 0
    for match in SEGMENT_RE.finditer(text):
        start, end = match.span()
        if start > pos:
            yield Text(text[pos:start])
        pos = end

        raw = match.group(0)
        if match.group("pre") is not None:
            yield Preformatted(raw)
            continue

        char_before = text[start - 1] if start > 0 else ""
        if match.group("esc") or char_before in ("~", "["):
            yield Escaped(raw)
            continue

        yield LinkOccurrence(
            raw=raw,
            display=match.group("text"),
            target=match.group("link") if match.group("p1") else None,
            attributes=match.group("attr") if match.group("p2") else None,
        )

    if pos < len(text):
        yield Text(text[pos:])


def is_camel_case(word: str) -> bool:
    """Upper, lower, upper runs (in any script), e.g. FooBar or ÄpfelBaum."""
    pos = 0
    for in_run in (str.isupper, str.islower, str.isupper):
        start = pos
        while pos < len(word) and in_run(word[pos]):
            pos += 1
        if pos == start:
            return False
    return True


def iter_camel_case_words(text: str) -> Iterator[re.Match]:
    """
    CamelCase matches in a plain text segment, skipping words that sit
    after an unclosed '['.
    """
    for match in CAMEL_WORD_RE.finditer(text):
        if not is_camel_case(match.group(0)):
            continue
        last_open = text.rfind("[", 0, match.start())
        last_close = text.rfind("]", 0, match.start())
        if last_close >= last_open:
            yield match


def is_page_target(target: str) -> bool:
    """
    False for targets that never point at a wiki page: plugins, variables,
    local anchors, footnotes, external and interwiki links.
    """
    target = target.strip()
    if not target:
        return False
    if target.startswith(("{", "#")):
        return False
    if FOOTNOTE_RE.match(target):
        return False
    if EXTERNAL_RE.match(target):
        return False
    return True


def reference_name(target: str) -> str | None:
    """
    Page name a link target refers to.

    [Page#Heading]    -> "Page"
    [Page/file.txt]   -> "Page/file.txt"  (attachment)
    """
    if not is_page_target(target):
        return None

    real, suffix = split_real_link(target.strip())
    page = clean_link(real)
    if not page:
        return None

    if suffix.startswith("/"):
        attachment = suffix[1:].split("#", 1)[0].strip()
        if attachment:
            return f"{page}/{attachment}"
    return page


class LinkExtractor(Protocol):
    def scan(self, page_name: str, text: str) -> Iterator[str]:
        ...


class WikiLinkExtractor:
    """
    Collects referenced page names from raw wiki text.

    Names come out in order of first occurrence; duplicates are not removed.
    """

    def __init__(self, *, camel_case: bool = False):
        self.camel_case = camel_case

    def scan(self, page_name: str, text: str) -> Iterator[str]:
        for segment in tokenize(text or ""):
            if isinstance(segment, LinkOccurrence):
                name = reference_name(segment.link_target)
                if name:
                    yield name
            elif isinstance(segment, Text) and self.camel_case:
                for match in iter_camel_case_words(segment.raw):
                    yield match.group(0)


def extract_page_references(text: str, *, camel_case: bool = False) -> set[str]:
    return set(WikiLinkExtractor(camel_case=camel_case).scan("", text))
