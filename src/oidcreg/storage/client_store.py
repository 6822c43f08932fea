"""Stores for registered clients, keyed by client_id and indexed by service_id."""
import logging
import threading
from typing import Optional

from oidcreg.exception import MessageException
from oidcreg.exception import StoreError
from oidcreg.server.client import RegisteredClient
from oidcreg.storage.abfile import AbstractFileSystem

logger = logging.getLogger(__name__)


def _best_match(clients, service_id):
    _match = None
    for client in clients:
        if not client.matches(service_id):
            continue
        if _match is None or client.precedes(_match):
            _match = client
    return _match


class ClientStore(object):
    def save(self, client: RegisteredClient) -> RegisteredClient:
        raise NotImplementedError()

    def get(self, client_id: str, default=None) -> Optional[RegisteredClient]:
        raise NotImplementedError()

    def keys(self):
        raise NotImplementedError()

    def clients(self):
        for client_id in list(self.keys()):
            _client = self.get(client_id)
            if _client is not None:
                yield _client

    def __contains__(self, client_id):
        return self.get(client_id) is not None

    def find_by_service_id(self, service_id: str) -> Optional[RegisteredClient]:
        """
        The client registered for a service_id. If more than one matches the
        one with the lowest evaluation order is returned.
        """
        return _best_match(self.clients(), service_id)

    def load(self, clients: dict):
        """Adds statically configured clients."""
        for client_id, info in clients.items():
            _info = dict(info)
            _info.setdefault("client_id", client_id)
            if _info["client_id"] in self:
                logger.debug("Client %s already stored", _info["client_id"])
                continue
            self.save(RegisteredClient(**_info))

    @staticmethod
    def _check(client):
        try:
            client.verify()
        except MessageException as err:
            raise StoreError("Can not store client: {}".format(err))


class MemoryClientStore(ClientStore):
    def __init__(self, **kwargs):
        self._db = {}
        self._by_service_id = {}
        self._lock = threading.Lock()

    def save(self, client: RegisteredClient) -> RegisteredClient:
        self._check(client)
        _client = client.copy()
        with self._lock:
            if _client.client_id in self._db:
                raise StoreError("client_id '{}' already in use".format(_client.client_id))
            self._db[_client.client_id] = _client
            self._by_service_id.setdefault(_client.service_id, []).append(_client.client_id)
        logger.debug("Stored client %s", _client.client_id)
        return _client.copy()

    def get(self, client_id: str, default=None) -> Optional[RegisteredClient]:
        _client = self._db.get(client_id)
        if _client is None:
            return default
        return _client.copy()

    def keys(self):
        return list(self._db.keys())

    def find_by_service_id(self, service_id: str) -> Optional[RegisteredClient]:
        _ids = self._by_service_id.get(service_id, [])
        _match = _best_match([self._db[i] for i in _ids], service_id)
        if _match is None:
            return None
        return _match.copy()


class FileClientStore(ClientStore):
    def __init__(self, fdir: str = "client_db", **kwargs):
        self._db = AbstractFileSystem(fdir=fdir, value_conv="oidcreg.util.JSON")

    def save(self, client: RegisteredClient) -> RegisteredClient:
        self._check(client)
        try:
            with self._db.lock():
                if client.client_id in self._db:
                    raise StoreError("client_id '{}' already in use".format(client.client_id))
                self._db[client.client_id] = client.to_dict()
        except OSError as err:
            raise StoreError("Could not write client {}: {}".format(client.client_id, err))
        logger.debug("Stored client %s in %s", client.client_id, self._db.fdir)
        return RegisteredClient(**self._db[client.client_id])

    def get(self, client_id: str, default=None) -> Optional[RegisteredClient]:
        _info = self._db.get(client_id)
        if _info is None:
            return default
        return RegisteredClient(**_info)

    def keys(self):
        return list(self._db.keys())
