from __future__ import annotations


# Punctuation allowed inside page names. Everything else is dropped and
# starts a new word.
PUNCTUATION_CHARS_ALLOWED = " ()&+,-=._$"

# Pre-cleanup page names only kept these.
LEGACY_CHARS_ALLOWED = "._"


def clean_string(text: str | None, allowed_chars: str) -> str | None:
    """
    Strip characters that are not allowed in page names.

    - leading/trailing whitespace is trimmed
    - runs of whitespace collapse to the first one
    - letters, digits and `allowed_chars` are kept
    - the first kept char after a dropped one is upper-cased
    """
    if text is None:
        return None

    text = text.strip()
    out: list[str] = []

    is_word = True
    was_space = False
    for ch in text:
        if ch.isspace():
            if was_space:
                continue
            was_space = True
        else:
            was_space = False

        if ch.isalnum() or ch in allowed_chars:
            if is_word:
                ch = ch.upper()
            out.append(ch)
            is_word = False
        else:
            is_word = True

    return "".join(out)


def clean_link(link: str | None) -> str | None:
    """
    Clean a link the same way a page name is cleaned on creation.

    [ This is a link ] -> "This is a link"
    """
    return clean_string(link, PUNCTUATION_CHARS_ALLOWED)


def wikify_link(link: str | None) -> str | None:
    """
    Legacy cleanup, kept to match links written before spaces were allowed.

    [ This is a link ] -> "ThisIsALink"
    """
    return clean_string(link, LEGACY_CHARS_ALLOWED)


def plural_counterpart(name: str) -> str:
    """'Foos' -> 'Foo', 'Foo' -> 'Foos' (English only)."""
    if name.endswith("s"):
        return name[:-1]
    return name + "s"


def name_candidates(name: str, *, match_english_plurals: bool) -> list[str]:
    """
    Lookup order for a page name: exact, then singular, then plural.
    The legacy wikified form (and its plural counterpart) comes last.
    """
    if not name:
        return []

    candidates: list[str] = []
    for form in (name, wikify_link(name)):
        if not form:
            continue
        forms = [form]
        if match_english_plurals and len(form) > 1:
            forms.append(plural_counterpart(form))
        for candidate in forms:
            if candidate not in candidates:
                candidates.append(candidate)
    return candidates


def split_real_link(target: str) -> tuple[str, str]:
    """
    Split a link target into (real link, suffix).

    The suffix starts at the first '#' (anchor) or '/' (attachment path).
    """
    cut = len(target)
    for sep in ("#", "/"):
        idx = target.find(sep)
        if idx != -1 and idx < cut:
            cut = idx
    return target[:cut], target[cut:]
