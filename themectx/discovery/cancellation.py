from __future__ import annotations

import threading


class CancellationToken:
    """Cooperative cancellation flag shared between a query and its file reads.

    A superseded query calls ``cancel()``; scanners check ``cancelled``
    before every file read and abandon the remaining work.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def is_cancelled(token: CancellationToken | None) -> bool:
    return token is not None and token.cancelled
