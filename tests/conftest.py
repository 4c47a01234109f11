import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from PySide6.QtCore import QCoreApplication

from wikirefs.session import WikiSession
from wikirefs.settings import WikiConfig
from wikirefs.vault.memory import InMemoryPageProvider


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def make_session(**config) -> WikiSession:
    cfg = WikiConfig(storage_provider="memory", **config)
    return WikiSession(provider=InMemoryPageProvider(), config=cfg)


@pytest.fixture
def wiki():
    return make_session()


@pytest.fixture
def plural_wiki():
    """TestPage -> [Foobar]; Foobar -> [Foobar2], [Foobars], [Foobar]"""
    session = make_session(match_english_plurals=True)
    session.save_page("TestPage", "Reference to [Foobar].")
    session.save_page("Foobar", "Reference to [Foobar2], [Foobars], [Foobar]")
    return session


def assert_consistent(graph) -> None:
    refers_to, referred_by = graph.snapshot()
    for src, targets in refers_to.items():
        for dst in targets:
            assert src in referred_by.get(dst, set()), f"{dst} misses referrer {src}"
    for dst, sources in referred_by.items():
        assert sources, f"empty referrer set kept for {dst}"
        for src in sources:
            assert dst in refers_to.get(src, set()), f"{src} does not refer to {dst}"
