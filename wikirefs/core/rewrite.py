from __future__ import annotations

from .names import clean_link, split_real_link, wikify_link
from .wikilinks import LinkOccurrence, Text, is_page_target, iter_camel_case_words, tokenize


def rewrite(
    source_text: str,
    from_name: str,
    to_name: str,
    *,
    camel_case: bool = False,
) -> str:
    """
    Rewrite every link to `from_name` in `source_text` so it points at `to_name`.

    Handles:
      [Old]                 -> [New]
      [Old#Anchor]          -> [New#Anchor]
      [Old/file.txt]        -> [New/file.txt]
      [text|Old|attrs]      -> [text|New|attrs]
      [Old Page]            -> [Old Page|New]
      OldWord (CamelCase)   -> NewWord          (camel_case=True)

    Escaped links, plugins and {{{ preformatted }}} blocks are kept verbatim.
    """
    if not source_text or not from_name or not to_name or from_name == to_name:
        return source_text

    out: list[str] = []
    for segment in tokenize(source_text):
        if isinstance(segment, LinkOccurrence):
            out.append(_rewrite_occurrence(segment, from_name, to_name))
        elif isinstance(segment, Text) and camel_case:
            out.append(_rewrite_camel_case(segment.raw, from_name, to_name))
        else:
            out.append(segment.raw)
    return "".join(out)


def replace_single_link(original: str, from_name: str, to_name: str) -> tuple[str, bool]:
    """
    Rewrite one link target, keeping its anchor or attachment suffix.

    Returns (new_target, matched). When the real link contains whitespace
    the caller must keep the human-readable text; `new_target` is then just
    `to_name + suffix`.
    """
    if not is_page_target(original):
        return original, False

    real, suffix = split_real_link(original)
    cleaned = clean_link(real) or ""
    legacy = wikify_link(real) or ""

    if from_name in (cleaned, original, legacy):
        return f"{to_name}{suffix}", True
    return original, False


def _rewrite_occurrence(occ: LinkOccurrence, from_name: str, to_name: str) -> str:
    if not occ.explicit:
        new_target, matched = replace_single_link(occ.display, from_name, to_name)
        if not matched:
            return occ.raw

        real, _ = split_real_link(occ.display)
        if " " in (clean_link(real) or ""):
            # [My Page] -> [My Page|Renamed]
            return LinkOccurrence(
                raw=occ.raw,
                display=occ.display,
                target=new_target,
                attributes=occ.attributes,
            ).render()
        return LinkOccurrence(raw=occ.raw, display=new_target).render()

    # [text|] has no real link to match.
    new_target, matched = replace_single_link(occ.target or "", from_name, to_name)
    if not matched:
        return occ.raw

    return LinkOccurrence(
        raw=occ.raw,
        display=occ.display.replace(from_name, to_name),
        target=new_target,
        attributes=occ.attributes,
    ).render()


def _rewrite_camel_case(text: str, from_name: str, to_name: str) -> str:
    out: list[str] = []
    pos = 0
    for match in iter_camel_case_words(text):
        if match.group(0) != from_name:
            continue
        out.append(text[pos:match.start()])
        out.append(to_name)
        pos = match.end()
    out.append(text[pos:])
    return "".join(out)
