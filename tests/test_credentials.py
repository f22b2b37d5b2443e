"""Tests for the expiring API key store."""

import pytest
from PySide6.QtCore import QSettings

from chronos.core.credentials import KEY_API_KEY, CredentialStore

ENV = "CHRONOS_TEST_GEMINI_KEY"


@pytest.fixture
def qsettings(qapp, tmp_path):
    return QSettings(str(tmp_path / "creds.ini"), QSettings.IniFormat)


@pytest.fixture(autouse=True)
def no_env_key(monkeypatch):
    monkeypatch.delenv(ENV, raising=False)


def make_store(qsettings, clock, ttl_s=7200):
    return CredentialStore(settings=qsettings, ttl_s=ttl_s, now=clock, env_var=ENV)


class TestCredentialStore:
    def test_empty(self, qsettings, fake_clock):
        store = make_store(qsettings, fake_clock)
        assert store.get() is None
        assert not store.has_credential()

    def test_set_and_get(self, qsettings, fake_clock):
        store = make_store(qsettings, fake_clock)
        store.set("  abc123  ")
        assert store.get() == "abc123"

    def test_persists_across_instances(self, qsettings, fake_clock):
        make_store(qsettings, fake_clock).set("abc123")
        assert make_store(qsettings, fake_clock).get() == "abc123"

    def test_expires_after_ttl(self, qsettings, fake_clock):
        store = make_store(qsettings, fake_clock, ttl_s=7200)
        store.set("abc123")
        fake_clock.advance(7199)
        assert store.get() == "abc123"
        fake_clock.advance(2)
        assert store.get() is None
        assert not qsettings.contains(KEY_API_KEY)

    def test_set_refreshes_window(self, qsettings, fake_clock):
        store = make_store(qsettings, fake_clock, ttl_s=100)
        store.set("first")
        fake_clock.advance(90)
        store.set("second")
        fake_clock.advance(90)
        assert store.get() == "second"

    def test_empty_key_rejected(self, qsettings, fake_clock):
        store = make_store(qsettings, fake_clock)
        with pytest.raises(ValueError):
            store.set("   ")

    def test_clear(self, qsettings, fake_clock):
        store = make_store(qsettings, fake_clock)
        store.set("abc123")
        store.clear()
        assert store.get() is None

    def test_corrupt_entry_is_discarded(self, qsettings, fake_clock):
        qsettings.setValue(KEY_API_KEY, "not json")
        store = make_store(qsettings, fake_clock)
        assert store.get() is None
        assert not qsettings.contains(KEY_API_KEY)

    def test_env_fallback(self, qsettings, fake_clock, monkeypatch):
        monkeypatch.setenv(ENV, "from-env")
        store = make_store(qsettings, fake_clock)
        assert store.get() == "from-env"
        store.set("stored")
        assert store.get() == "stored"
