import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from wikirefs.errors import ConfigError, ProviderError
from wikirefs.session import WikiSession
from wikirefs.settings import WikiConfig
from wikirefs.vault import FileSystemPageProvider, InMemoryPageProvider, create_provider
from wikirefs.vault.provider import split_attachment_name
from wikirefs.vault.repo import mangle_name, unmangle_name


@pytest.fixture
def fs(tmp_path):
    provider = FileSystemPageProvider(tmp_path / "pages")
    provider.ensure()
    return provider


def test_create_provider_from_config(tmp_path):
    provider = create_provider(WikiConfig(storage_provider="filesystem", vault_dir=tmp_path / "v"))
    assert isinstance(provider, FileSystemPageProvider)
    assert (tmp_path / "v").is_dir()

    assert isinstance(create_provider(WikiConfig(storage_provider="memory")), InMemoryPageProvider)


def test_create_provider_unknown():
    with pytest.raises(ConfigError):
        create_provider(WikiConfig(storage_provider="jdbc"))


def test_mangle_round_trip():
    for name in ("Link one", "Foo/bar", "100% Ünïcode", "A:B?"):
        assert unmangle_name(mangle_name(name)) == name
    assert "/" not in mangle_name("Foo/bar")


def test_split_attachment_name():
    assert split_attachment_name("Page/file.txt") == ("Page", "file.txt")
    assert split_attachment_name("Page") is None
    assert split_attachment_name("/file.txt") is None


def test_fs_put_get_and_versions(fs):
    fs.put_text("Link one", "hello", author="bob")
    fs.put_text("Link one", "hello again", change_note="edit")

    assert fs.page_exists("Link one")
    assert fs.get_text("Link one") == "hello again"
    info = fs.page_info("Link one")
    assert info.version == 2
    assert info.author is None
    assert info.change_note == "edit"
    assert fs.list_pages() == ["Link one"]


def test_fs_missing_page(fs):
    assert not fs.page_exists("Nope")
    assert fs.page_info("Nope") is None
    with pytest.raises(ProviderError):
        fs.get_text("Nope")
    with pytest.raises(ProviderError):
        fs.delete_page("Nope")
    with pytest.raises(ProviderError):
        fs.move_page("Nope", "Other")


def test_fs_undecodable_page(fs):
    fs.put_text("Bad", "x")
    fs.page_path("Bad").write_bytes(b"[Good] \xff\xfe")
    with pytest.raises(ProviderError):
        fs.get_text("Bad")


def test_rebuild_skips_unreadable_pages(tmp_path):
    wiki = WikiSession.from_config(WikiConfig(storage_provider="filesystem", vault_dir=tmp_path / "pages"))
    wiki.save_page("Good", "[Other]")
    wiki.save_page("Bad", "[Good]")
    wiki.provider.page_path("Bad").write_bytes(b"\xff[Good]")

    assert wiki.rebuild_references() == 1
    assert wiki.find_referenced_by("Good") == {"Other"}
    assert wiki.find_referrers("Good") is None


def test_fs_move_page_keeps_metadata(fs):
    fs.put_text("Old", "text", author="carol")
    fs.move_page("Old", "New")

    assert not fs.page_exists("Old")
    assert fs.get_text("New") == "text"
    assert fs.page_info("New").author == "carol"

    fs.put_text("Other", "x")
    with pytest.raises(ProviderError):
        fs.move_page("New", "Other")


def test_fs_attachments(fs):
    fs.put_text("Page", "x")
    fs.add_attachment("Page", "b.txt", b"bee")
    fs.add_attachment("Page", "a.txt", b"ay")

    assert [a.name for a in fs.list_attachments("Page")] == ["Page/a.txt", "Page/b.txt"]
    assert fs.exists("Page/a.txt")
    assert not fs.exists("Page/c.txt")

    fs.move_page("Page", "Moved")
    fs.move_attachments("Page", "Moved")
    assert fs.list_attachments("Page") == []
    assert [a.file_name for a in fs.list_attachments("Moved")] == ["a.txt", "b.txt"]


def test_fs_attachment_rules(fs):
    with pytest.raises(ProviderError):
        fs.add_attachment("Missing", "a.txt", b"")

    fs.put_text("Page", "x")
    for bad in ("", "../x", ".hidden"):
        with pytest.raises(ProviderError):
            fs.add_attachment("Page", bad, b"")

    fs.move_attachments("Page", "Elsewhere")
    assert fs.list_attachments("Elsewhere") == []


def test_fs_delete_page_removes_attachments(fs):
    fs.put_text("Page", "x")
    fs.add_attachment("Page", "a.txt", b"ay")

    fs.delete_page("Page")

    assert not fs.page_exists("Page")
    assert fs.list_attachments("Page") == []
    assert fs.list_pages() == []


def test_memory_provider_basics():
    mem = InMemoryPageProvider()
    mem.put_text("B", "b")
    mem.put_text("a", "a")
    assert mem.list_pages() == ["a", "B"]

    mem.add_attachment("B", "f.txt", b"data")
    mem.move_page("B", "C")
    mem.move_attachments("B", "C")
    assert mem.get_attachment_data("C/f.txt") == b"data"
    assert mem.attachment_exists("C/f.txt")

    with pytest.raises(ProviderError):
        mem.get_text("B")
    with pytest.raises(ProviderError):
        mem.get_attachment_data("B/f.txt")
