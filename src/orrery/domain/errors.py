# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Exception types shared by the domain, ports and adapters."""


class OrreryError(Exception):
    """Base class for errors raised by orrery."""


class UnknownBodyError(OrreryError, LookupError):
    """A body name did not resolve to a member of the body catalogue."""


class PropagationError(OrreryError, RuntimeError):
    """An element set could not be propagated to the requested time."""
