from .rename_worker import RenameWorker

__all__ = [
    "RenameWorker",
]
