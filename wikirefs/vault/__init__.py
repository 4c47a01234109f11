from .provider import PROVIDERS, Attachment, PageInfo, PageProvider, create_provider, register_provider
from .memory import InMemoryPageProvider
from .repo import FileSystemPageProvider

__all__ = [
    "PROVIDERS",
    "Attachment",
    "PageInfo",
    "PageProvider",
    "create_provider",
    "register_provider",
    "InMemoryPageProvider",
    "FileSystemPageProvider",
]
