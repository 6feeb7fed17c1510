"""User and channel membership lookups used to address notifications."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass
class DirectoryUser:
    id: str
    handle: str
    display_name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class DirectoryChannel:
    id: str
    name: str
    members: List[str] = field(default_factory=list)
    is_direct: bool = False


class UserDirectory(ABC):
    """Resolves handles to users and channels to their members."""

    @abstractmethod
    def resolve(self, handle: str) -> Optional[str]:
        """User ID for ``handle`` (case-insensitive), or None."""

    @abstractmethod
    def channel_members(self, channel_id: str) -> List[str]:
        """User IDs of the channel's members."""

    @abstractmethod
    def display_name(self, user_id: str) -> str:
        """Name shown in notifications; falls back to the user ID."""

    @abstractmethod
    def email_for(self, user_id: str) -> Optional[str]:
        """Email address on file, if any."""

    def channel_name(self, channel_id: str) -> str:
        return channel_id

    def is_direct(self, channel_id: str) -> bool:
        return False


class InMemoryUserDirectory(UserDirectory):
    """Directory backed by dictionaries, for development and tests."""

    def __init__(
        self,
        users: Optional[Iterable[DirectoryUser]] = None,
        channels: Optional[Iterable[DirectoryChannel]] = None,
    ):
        self._lock = threading.Lock()
        self._users: Dict[str, DirectoryUser] = {}
        self._handles: Dict[str, str] = {}
        self._channels: Dict[str, DirectoryChannel] = {}
        for user in users or []:
            self.add_user(user)
        for channel in channels or []:
            self.add_channel(channel)

    def add_user(self, user: DirectoryUser) -> None:
        with self._lock:
            self._users[user.id] = user
            self._handles[user.handle.lower()] = user.id

    def add_channel(self, channel: DirectoryChannel) -> None:
        with self._lock:
            self._channels[channel.id] = channel

    def resolve(self, handle: str) -> Optional[str]:
        with self._lock:
            return self._handles.get(handle.lower())

    def channel_members(self, channel_id: str) -> List[str]:
        with self._lock:
            channel = self._channels.get(channel_id)
            return list(channel.members) if channel else []

    def display_name(self, user_id: str) -> str:
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            return user_id
        return user.display_name or user.handle

    def email_for(self, user_id: str) -> Optional[str]:
        with self._lock:
            user = self._users.get(user_id)
        return user.email if user else None

    def channel_name(self, channel_id: str) -> str:
        with self._lock:
            channel = self._channels.get(channel_id)
        return channel.name if channel else channel_id

    def is_direct(self, channel_id: str) -> bool:
        with self._lock:
            channel = self._channels.get(channel_id)
        return bool(channel and channel.is_direct)
