# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces.

Adapters implement these to provide propagation and worker execution.
"""
from orrery.ports.propagation import Propagator
from orrery.ports.worker import PropagationWorker

__all__ = ["Propagator", "PropagationWorker"]
