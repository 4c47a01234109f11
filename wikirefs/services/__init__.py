from .renamer import PageRenamer, RenameReport, ReferrerUpdate
from .rename_service import RenameService

__all__ = [
    "PageRenamer",
    "RenameReport",
    "ReferrerUpdate",
    "RenameService",
]
