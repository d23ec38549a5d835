import pytest

from ccode.reader.parser import ScriptParser
from ccode.selector import NamespaceResolver


# Settings are read from the environment on every call; clear them so a
# developer's shell cannot change test outcomes.
@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch):
    monkeypatch.delenv("CCODE_ARRAY_LIMIT", raising=False)
    monkeypatch.delenv("CCODE_SELECTOR_DEPTH", raising=False)


@pytest.fixture
def parser():
    return ScriptParser()


@pytest.fixture
def resolver():
    return NamespaceResolver()
