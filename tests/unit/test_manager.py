"""Tests for replica-aware connection routing."""

import threading
from collections.abc import Sequence
from typing import Any, Optional, TypeVar

import pytest

from sqlmux.connection import AbstractConnection
from sqlmux.exceptions import ImproperConfigurationError, NoSuchMasterError, NoSuchSlaveError
from sqlmux.factory import ConnectionFactory
from sqlmux.manager import ConnectionManager

T = TypeVar("T")


class HostConnection:
    """Stand-in connection that records its parameters."""

    instances = 0

    def __init__(
        self,
        dsn: "dict[str, Any]",
        username: "Optional[str]" = None,
        password: "Optional[str]" = None,
        options: "Optional[dict[str, Any]]" = None,
    ) -> None:
        type(self).instances += 1
        self.dsn = dsn
        self.username = username

    @property
    def host(self) -> str:
        return self.dsn["host"]


class SequenceRandom:
    """Picks pool members by index, cycling through ``indexes``."""

    def __init__(self, *indexes: int) -> None:
        self._indexes = list(indexes)
        self._position = 0
        self.pools: list[list[Any]] = []

    def choice(self, seq: "Sequence[T]") -> T:
        self.pools.append(list(seq))
        index = self._indexes[self._position % len(self._indexes)]
        self._position += 1
        return seq[index]


DEFAULT = {"adapter": "host", "dsn": {"host": "d", "dbname": "app"}, "username": "app"}
MASTERS = {"m1": {}, "m2": {"dsn": {"host": "m2"}}}
SLAVES = {"s1": {}, "s2": {"dsn": {"host": "s2"}, "username": "reader"}}


def make_manager(
    masters: "Optional[dict[str, Any]]" = None,
    slaves: "Optional[dict[str, Any]]" = None,
    random_source: "Optional[Any]" = None,
) -> ConnectionManager:
    factory = ConnectionFactory({"host": HostConnection})
    return ConnectionManager(factory, DEFAULT, masters, slaves, random_source=random_source)


def test_get_default_is_cached() -> None:
    manager = make_manager()
    assert manager.get_default() is manager.get_default()
    assert manager.get_default().host == "d"


def test_get_master_merges_over_default() -> None:
    manager = make_manager(MASTERS)

    assert manager.get_master("m1").host == "d"
    assert manager.get_master("m2").host == "m2"
    assert manager.get_master("m2").dsn == {"host": "m2", "dbname": "app"}
    assert manager.get_master("m2").username == "app"
    assert manager.get_master("m2") is manager.get_master("m2")


def test_get_master_missing() -> None:
    with pytest.raises(NoSuchMasterError):
        make_manager(MASTERS).get_master("missing")


def test_get_slave_merges_over_default() -> None:
    manager = make_manager(MASTERS, SLAVES)

    assert manager.get_slave("s1").host == "d"
    assert manager.get_slave("s2").host == "s2"
    assert manager.get_slave("s2").username == "reader"


def test_get_slave_missing() -> None:
    with pytest.raises(NoSuchSlaveError):
        make_manager(MASTERS, SLAVES).get_slave("m1")


def test_named_connections_are_distinct_from_default() -> None:
    manager = make_manager(MASTERS, SLAVES)
    connections = {id(manager.get_default()), id(manager.get_master("m1")), id(manager.get_slave("s1"))}
    assert len(connections) == 3


def test_read_prefers_slaves() -> None:
    manager = make_manager(MASTERS, SLAVES)
    hosts = {manager.get_read().host for _ in range(1000)}
    assert hosts <= {"d", "s2"}
    assert "m2" not in hosts


def test_write_never_uses_slaves() -> None:
    manager = make_manager(MASTERS, SLAVES)
    hosts = {manager.get_write().host for _ in range(1000)}
    assert hosts <= {"d", "m2"}
    assert "s2" not in hosts


def test_read_falls_back_to_masters() -> None:
    manager = make_manager(MASTERS)
    hosts = {manager.get_read().host for _ in range(1000)}
    assert hosts <= {"d", "m2"}


def test_without_replicas_everything_is_default() -> None:
    manager = make_manager()
    default = manager.get_default()
    for _ in range(50):
        assert manager.get_read() is default
        assert manager.get_write() is default


def test_read_pool_with_deterministic_random() -> None:
    random_source = SequenceRandom(0, 1, 2)
    manager = make_manager(MASTERS, SLAVES, random_source)

    picks = [manager.get_read() for _ in range(3)]

    assert picks == [manager.get_default(), manager.get_slave("s1"), manager.get_slave("s2")]
    assert random_source.pools[0] == [("default", "default"), ("slave", "s1"), ("slave", "s2")]


def test_write_pool_with_deterministic_random() -> None:
    random_source = SequenceRandom(2)
    manager = make_manager(MASTERS, SLAVES, random_source)

    assert manager.get_write() is manager.get_master("m2")
    assert random_source.pools[0] == [("default", "default"), ("master", "m1"), ("master", "m2")]


def test_read_pool_uses_masters_without_slaves() -> None:
    random_source = SequenceRandom(1)
    manager = make_manager(MASTERS, None, random_source)

    assert manager.get_read() is manager.get_master("m1")
    assert random_source.pools[0] == [("default", "default"), ("master", "m1"), ("master", "m2")]


def test_replica_named_default_does_not_collide() -> None:
    manager = make_manager({"default": {"dsn": {"host": "m"}}})
    assert manager.get_master("default").host == "m"
    assert manager.get_default().host == "d"


def test_names() -> None:
    manager = make_manager(MASTERS, SLAVES)
    assert manager.masters == ("m1", "m2")
    assert manager.slaves == ("s1", "s2")


def test_missing_adapter() -> None:
    with pytest.raises(ImproperConfigurationError):
        ConnectionManager(ConnectionFactory(), {"dsn": {"host": "d"}})


def test_from_config() -> None:
    manager = ConnectionManager.from_config(
        {"default": DEFAULT, "masters": MASTERS, "slaves": SLAVES},
        ConnectionFactory({"host": HostConnection}),
    )
    assert manager.get_slave("s2").host == "s2"
    assert manager.masters == ("m1", "m2")


def test_from_config_requires_default() -> None:
    with pytest.raises(ImproperConfigurationError):
        ConnectionManager.from_config({"masters": MASTERS})


def test_from_config_with_builtin_adapters() -> None:
    manager = ConnectionManager.from_config(
        {"default": {"adapter": "sqlite"}, "slaves": {"replica": {"dsn": {"database": "replica.db"}}}}
    )
    assert manager.get_default().get_dsn_string() == "sqlite:database=:memory:"
    assert manager.get_slave("replica").get_dsn_string() == "sqlite:database=replica.db"


def test_concurrent_first_access_builds_one_instance() -> None:
    manager = make_manager(MASTERS, SLAVES)
    before = HostConnection.instances
    barrier = threading.Barrier(8)
    results: list[Any] = []

    def worker() -> None:
        barrier.wait()
        results.append(manager.get_master("m2"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(result is results[0] for result in results)
    assert HostConnection.instances == before + 1


def test_getters_return_connections() -> None:
    manager = ConnectionManager.from_config({"default": {"adapter": "sqlite"}, "masters": {"primary": {}}})
    for connection in (manager.get_default(), manager.get_master("primary"), manager.get_read(), manager.get_write()):
        assert isinstance(connection, AbstractConnection)
