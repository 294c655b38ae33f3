"""In-memory identity cache for networks, buffers, and senders.

The cache mirrors the three dimension tables and resolves get-or-create
queries against them. Entities are loaded once from the store and then
appended to both the cache and the store as new identities appear.
"""

from __future__ import annotations

from typing import cast

from core.logging_config import get_logger
from core.types import Buffer, EntityKind, Network, Sender
from store.protocols import LogStore

_LOGGER = get_logger(__name__)

UNASSIGNED_ID = 0


class IdentityCache:
    """Get-or-create resolution over networks, buffers, and senders.

    Senders are indexed twice: by exact ``(nick, user, host)`` triple, and
    by nick as a creation-ordered list whose last entry is the most recent.
    """

    def __init__(self, store: LogStore) -> None:
        self._store = store
        self._networks_by_name: dict[str, Network] = {}
        self._networks_by_id: dict[int, Network] = {}
        self._buffers_by_key: dict[tuple[int, str], Buffer] = {}
        self._senders_by_key: dict[tuple[str, str, str], Sender] = {}
        self._senders_by_nick: dict[str, list[Sender]] = {}
        self._load()

    @property
    def network_count(self) -> int:
        return len(self._networks_by_id)

    @property
    def buffer_count(self) -> int:
        return len(self._buffers_by_key)

    @property
    def sender_count(self) -> int:
        return len(self._senders_by_key)

    def get_network(self, name: str, create: bool = True) -> Network | None:
        """Return the network with this exact name, creating it when allowed."""
        network = self._networks_by_name.get(name)
        if network is not None or not create:
            return network
        network_id = self._store.insert(Network(id=UNASSIGNED_ID, name=name))
        network = Network(id=network_id, name=name)
        self._remember_network(network)
        return network

    def get_buffer(
        self,
        network_name: str,
        buffer_name: str,
        create: bool = True,
    ) -> Buffer | None:
        """Return the buffer for a ``(network, buffer)`` name pair.

        A missing network is created together with the buffer.

        Args:
            network_name: Case-sensitive network name.
            buffer_name: Channel or query name.
            create: Whether to create missing entities.

        Returns:
            The resolved buffer, or None when absent and ``create`` is False.
        """
        network = self.get_network(network_name, create=create)
        if network is None:
            return None
        buffer = self._buffers_by_key.get((network.id, buffer_name))
        if buffer is not None or not create:
            return buffer
        buffer_id = self._store.insert(
            Buffer(id=UNASSIGNED_ID, network_id=network.id, name=buffer_name)
        )
        buffer = Buffer(id=buffer_id, network_id=network.id, name=buffer_name)
        self._buffers_by_key[buffer.identity_key] = buffer
        return buffer

    def get_sender(
        self,
        nick: str,
        user: str = "",
        host: str = "",
        create: bool = True,
    ) -> Sender | None:
        """Resolve a sender by exact ``(nick, user, host)`` match.

        Args:
            nick: Nickname.
            user: Ident, empty when unknown.
            host: Hostname, empty when unknown.
            create: Whether to register the triple when absent.

        Returns:
            The matching sender, or None when absent and ``create`` is False.
        """
        sender = self._senders_by_key.get((nick, user, host))
        if sender is not None or not create:
            return sender
        return self._register_sender(nick, user, host)

    def guess_sender_by_nick(self, nick: str) -> Sender | None:
        """Return the most recently created sender using ``nick``, if any."""
        candidates = self._senders_by_nick.get(nick)
        if not candidates:
            return None
        return candidates[-1]

    def resolve_nick(self, nick: str) -> Sender:
        """Resolve a bare nick with the recency heuristic.

        Two different people who used the same nick at different times
        resolve to the same, latest, sender.

        Args:
            nick: Nickname with no user or host information.

        Returns:
            The guessed sender, or a new ``(nick, "", "")`` sender.
        """
        sender = self.guess_sender_by_nick(nick)
        if sender is not None:
            return sender
        return self._register_sender(nick, "", "")

    def _load(self) -> None:
        for network in cast(list[Network], self._store.load_all(EntityKind.NETWORK)):
            self._remember_network(network)
        for buffer in cast(list[Buffer], self._store.load_all(EntityKind.BUFFER)):
            self._buffers_by_key.setdefault(buffer.identity_key, buffer)
        for sender in cast(list[Sender], self._store.load_all(EntityKind.SENDER)):
            self._remember_sender(sender)
        _LOGGER.info(
            "identity_cache_loaded",
            networks=self.network_count,
            buffers=self.buffer_count,
            senders=self.sender_count,
        )

    def _register_sender(self, nick: str, user: str, host: str) -> Sender:
        sender_id = self._store.insert(Sender(id=UNASSIGNED_ID, nick=nick, user=user, host=host))
        sender = Sender(id=sender_id, nick=nick, user=user, host=host)
        self._remember_sender(sender)
        return sender

    def _remember_network(self, network: Network) -> None:
        self._networks_by_name.setdefault(network.name, network)
        self._networks_by_id[network.id] = network

    def _remember_sender(self, sender: Sender) -> None:
        self._senders_by_key.setdefault(sender.identity_key, sender)
        self._senders_by_nick.setdefault(sender.nick, []).append(sender)
