import sys
import os
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from wikirefs import main as cli
from wikirefs.logging_setup import SESSION_ID, EnsureSessionFilter
from wikirefs.vault.repo import FileSystemPageProvider


@pytest.fixture
def vault(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **kw: logging.LoggerAdapter(logging.getLogger("wikirefs.test"), {}))
    monkeypatch.setattr(cli, "install_global_exception_hooks", lambda log: None)

    provider = FileSystemPageProvider(tmp_path / "pages")
    provider.ensure()
    provider.put_text("TestPage", "foofoo")
    provider.put_text("TestPage2", "[TestPage] [Nowhere]")
    return provider


def run(vault, tmp_path, *args):
    return cli.main(["--config", str(tmp_path / "none.ini"), "--vault", str(vault.vault_dir), *args])


def test_queries(vault, tmp_path, capsys):
    assert run(vault, tmp_path, "referrers", "TestPage") == 0
    assert capsys.readouterr().out.split() == ["TestPage2"]

    assert run(vault, tmp_path, "refers-to", "TestPage2") == 0
    assert capsys.readouterr().out.split() == ["Nowhere", "TestPage"]

    assert run(vault, tmp_path, "uncreated") == 0
    assert capsys.readouterr().out.split() == ["Nowhere"]

    assert run(vault, tmp_path, "unreferenced") == 0
    assert capsys.readouterr().out.split() == ["TestPage2"]


def test_rename(vault, tmp_path, capsys):
    assert run(vault, tmp_path, "rename", "TestPage", "foo test", "--author", "cli") == 0
    assert capsys.readouterr().out.strip() == "Foo test"

    assert vault.get_text("TestPage2") == "[Foo test] [Nowhere]"
    assert vault.page_info("Foo test").author == "cli"


def test_rename_keep_referrers(vault, tmp_path):
    assert run(vault, tmp_path, "rename", "TestPage", "FooTest", "--keep-referrers") == 0
    assert vault.get_text("TestPage2") == "[TestPage] [Nowhere]"


def test_errors_exit_nonzero(vault, tmp_path, capsys):
    assert run(vault, tmp_path, "rename", "Missing", "Other") == 1
    assert "Missing" in capsys.readouterr().err


def test_session_filter_fills_missing_session():
    record = logging.LogRecord("wikirefs", logging.INFO, __file__, 1, "msg", None, None)
    assert EnsureSessionFilter().filter(record)
    assert record.session == SESSION_ID
