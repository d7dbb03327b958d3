"""In-process signals with disconnectable connections."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Connection:
    """Link between a signal and one subscribed handler.

    Parameters
    ----------
    signal : Signal
        Signal the handler is subscribed to.
    handler : Callable[..., Any]
        Handler invoked on every fire while connected.
    """

    def __init__(self, signal: Signal, handler: Callable[..., Any]) -> None:
        self._signal = signal
        self.handler = handler
        self.connected = True

    def disconnect(self) -> None:
        """Stop delivering the signal to the handler. Safe to call twice."""
        if not self.connected:
            return
        self.connected = False
        self._signal._discard(self)

    Disconnect = disconnect

    def __repr__(self) -> str:
        state = "connected" if self.connected else "disconnected"
        return f"<Connection {self._signal.name!r} {state}>"


class Signal:
    """Synchronous signal delivering fired arguments to connected handlers.

    Handlers run in connection order. A handler that raises is logged and
    does not prevent the remaining handlers from running.

    Parameters
    ----------
    name : str
        Diagnostic name used in logs and reprs.
    """

    def __init__(self, name: str = "Signal") -> None:
        self.name = name
        self._connections: list[Connection] = []

    def connect(self, handler: Callable[..., Any]) -> Connection:
        """Subscribe a handler.

        Parameters
        ----------
        handler : Callable[..., Any]
            Callable invoked with the arguments passed to fire()

        Returns
        -------
        Connection
            Handle that unsubscribes the handler when disconnected
        """
        connection = Connection(self, handler)
        self._connections.append(connection)
        return connection

    def fire(self, *args: Any) -> None:
        """Invoke every connected handler with args."""
        for connection in list(self._connections):
            if not connection.connected:
                continue
            try:
                connection.handler(*args)
            except Exception:
                logger.exception("Handler %r for signal %r raised", connection.handler, self.name)

    def disconnect_all(self) -> None:
        """Disconnect every handler."""
        for connection in list(self._connections):
            connection.disconnect()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def _discard(self, connection: Connection) -> None:
        try:
            self._connections.remove(connection)
        except ValueError:
            pass

    def __repr__(self) -> str:
        return f"<Signal {self.name!r} connections={len(self._connections)}>"


def connect_signal(signal: Any, handler: Callable[..., Any]) -> Any:
    """Default signal connector: subscribe through the source's connect method."""
    return signal.connect(handler)
