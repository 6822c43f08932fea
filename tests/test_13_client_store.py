import os
import threading

import pytest

from oidcreg import HIGHEST_PRECEDENCE
from oidcreg.exception import StoreError
from oidcreg.server.client import RegisteredClient
from oidcreg.storage.client_store import FileClientStore
from oidcreg.storage.client_store import MemoryClientStore

STATIC = {
    "static": {
        "client_secret": "hemligt",
        "name": "Static",
        "service_id": "https://rp.example/cb",
        "scopes": ["openid"],
    }
}


def _client(client_id, service_id="https://rp.example/cb", **kwargs):
    return RegisteredClient(
        client_id=client_id, client_secret="secret", service_id=service_id, **kwargs
    )


class StoreTests(object):
    def create_store(self):
        raise NotImplementedError()

    def test_save_and_get(self):
        _store = self.create_store()
        _stored = _store.save(_client("client_1", name="RP", scopes=["openid", "email"]))
        assert _stored["name"] == "RP"
        _client_info = _store.get("client_1")
        assert _client_info["scopes"] == ["openid", "email"]
        assert "client_1" in _store
        assert _store.get("unknown") is None
        assert list(_store.keys()) == ["client_1"]

    def test_duplicate_client_id(self):
        _store = self.create_store()
        _store.save(_client("client_1"))
        with pytest.raises(StoreError):
            _store.save(_client("client_1", service_id="https://other.example/cb"))
        assert _store.get("client_1")["service_id"] == "https://rp.example/cb"

    def test_missing_service_id(self):
        _store = self.create_store()
        with pytest.raises(StoreError):
            _store.save(RegisteredClient(client_id="client_1"))

    def test_find_by_service_id(self):
        _store = self.create_store()
        _store.load(STATIC)
        _store.save(
            _client("dynamic", dynamically_registered=True, evaluation_order=HIGHEST_PRECEDENCE)
        )
        _store.save(_client("elsewhere", service_id="https://other.example/cb"))

        _match = _store.find_by_service_id("https://rp.example/cb")
        assert _match.client_id == "dynamic"
        assert _match.is_dynamic()
        assert _store.find_by_service_id("https://other.example/cb").client_id == "elsewhere"
        assert _store.find_by_service_id("https://unknown.example/cb") is None

    def test_load_twice(self):
        _store = self.create_store()
        _store.load(STATIC)
        _store.load(STATIC)
        assert list(_store.keys()) == ["static"]
        assert _store.get("static")["evaluation_order"] == 0
        assert not _store.get("static").is_dynamic()

    def test_stored_copy(self):
        _store = self.create_store()
        _client_info = _client("client_1", scopes=["openid"])
        _store.save(_client_info)
        _client_info["scopes"].append("email")
        assert _store.get("client_1")["scopes"] == ["openid"]


class TestMemoryClientStore(StoreTests):
    def create_store(self):
        return MemoryClientStore()

    def test_concurrent_save(self):
        _store = MemoryClientStore()
        errors = []

        def _save():
            try:
                _store.save(_client("same"))
            except StoreError as err:
                errors.append(err)

        threads = [threading.Thread(target=_save) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(errors) == 7
        assert list(_store.keys()) == ["same"]


class TestFileClientStore(StoreTests):
    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        self.fdir = os.path.join(str(tmp_path), "client_db")

    def create_store(self):
        return FileClientStore(fdir=self.fdir)

    def test_persisted(self):
        _store = self.create_store()
        _store.save(_client("client_1", name="RP", sign_id_token=True))

        _other = FileClientStore(fdir=self.fdir)
        _client_info = _other.get("client_1")
        assert isinstance(_client_info, RegisteredClient)
        assert _client_info["name"] == "RP"
        assert _client_info["sign_id_token"] is True
        assert os.path.isfile(os.path.join(self.fdir, "client_1"))

    def test_duplicate_across_instances(self):
        self.create_store().save(_client("client_1"))
        with pytest.raises(StoreError):
            FileClientStore(fdir=self.fdir).save(_client("client_1"))
