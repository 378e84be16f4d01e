"""
In-memory Broadcaster Implementation

Single-topic pub/sub used to fan out session changes to every reader
(router, flows, UI code) without polling.
"""

from typing import Generic, TypeVar

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from eventreg.platform.logging.loguru_io import Logger


_T = TypeVar('_T')


class InMemoryBroadcaster(Generic[_T]):
    """
    In-memory pub/sub over anyio memory object streams

    - Each subscriber owns one (send_stream, receive_stream) pair
    - broadcast() never blocks: a full subscriber buffer drops the message
    - Subscribers whose receive side was closed are pruned on the next broadcast
    """

    def __init__(self, *, name: str, max_buffer_size: int = 16) -> None:
        self._name = name
        self._max_buffer_size = max_buffer_size
        self._subscribers: list[tuple[MemoryObjectSendStream[_T], MemoryObjectReceiveStream[_T]]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> MemoryObjectReceiveStream[_T]:
        send_stream, receive_stream = create_memory_object_stream[_T](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.append((send_stream, receive_stream))
        Logger.base.debug(
            f'📡 [{self._name}] Subscribed (total subscribers: {len(self._subscribers)})'
        )
        return receive_stream

    def broadcast(self, message: _T) -> int:
        """
        Send message to every live subscriber

        Returns:
            Number of subscribers the message was delivered to
        """
        delivered = 0
        dropped = 0
        for pair in list(self._subscribers):
            send_stream, _ = pair
            try:
                send_stream.send_nowait(message)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(f'⚠️ [{self._name}] Subscriber buffer full, dropping message')
            except (BrokenResourceError, ClosedResourceError):
                self._subscribers.remove(pair)

        Logger.base.debug(f'📡 [{self._name}] Broadcast: delivered={delivered}, dropped={dropped}')
        return delivered

    def unsubscribe(self, stream: MemoryObjectReceiveStream[_T]) -> None:
        for i, (send_stream, receive_stream) in enumerate(self._subscribers):
            if receive_stream is stream:
                send_stream.close()
                receive_stream.close()
                self._subscribers.pop(i)
                Logger.base.debug(
                    f'📡 [{self._name}] Unsubscribed (remaining: {len(self._subscribers)})'
                )
                return
