# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for the propagation worker.

The control thread submits requests and drains replies once per tick;
implementations decide where and when the work runs.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class PropagationWorker(Protocol):
    """Asynchronous executor for PositionsRequest and TrajectoryRequest."""

    def submit(self, message) -> bool:
        """Queue a request without blocking. False if it was refused."""
        ...

    def drain(self) -> list:
        """Return and remove all replies that are ready (never blocks)."""
        ...

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every submitted request has produced its replies."""
        ...

    def close(self) -> None:
        """Stop accepting requests and release resources."""
        ...
