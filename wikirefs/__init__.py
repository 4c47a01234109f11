from .core.links import ReferenceGraph
from .core.rewrite import rewrite
from .core.wikilinks import WikiLinkExtractor
from .services.renamer import PageRenamer, RenameReport
from .session import WikiSession

__all__ = [
    "ReferenceGraph",
    "rewrite",
    "WikiLinkExtractor",
    "PageRenamer",
    "RenameReport",
    "WikiSession",
]
