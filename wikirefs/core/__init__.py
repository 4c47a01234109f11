from .names import clean_link, wikify_link
from .wikilinks import WikiLinkExtractor, extract_page_references, tokenize
from .rewrite import rewrite
from .links import ReferenceGraph

__all__ = ["clean_link",
           "wikify_link",
           "WikiLinkExtractor",
           "extract_page_references",
           "tokenize",
           "rewrite",
           "ReferenceGraph"
           ]
