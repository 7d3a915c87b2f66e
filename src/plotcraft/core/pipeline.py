"""
Flat Pipeline - Run an ordered stack of module instances.

The stack is folded from the bottom (last instance) to the top, so a
modifier affects every generator listed below it. Each instance draws
from its own random stream keyed on its id, so reordering or toggling
one module never perturbs the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from plotcraft.core.data_types import CanvasSettings, Layer
from plotcraft.core.execution import ExecutionContext
from plotcraft.core.modules import ModuleRegistry
from plotcraft.engine.rng import create_rng

logger = logging.getLogger(__name__)


@dataclass
class ModuleInstance:
    """A module placed in the stack with its own parameter values."""
    instance_id: str
    module_id: str
    params: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True


def hash_string(text: str) -> int:
    """
    Non-negative 32-bit string hash (h * 31 + c over UTF-16 code units).
    """
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)


def run_pipeline(
    modules: list[ModuleInstance],
    canvas: CanvasSettings,
    seed: int,
    registry: ModuleRegistry,
) -> list[Layer]:
    """
    Evaluate a module stack.

    Generators append their layers; modifiers replace the accumulated
    layers with their result. Disabled and unknown modules are skipped,
    and a module that raises is logged and skipped.
    """
    layers: list[Layer] = []

    for instance in reversed(modules):
        if not instance.enabled:
            continue
        module = registry.get(instance.module_id)
        if module is None:
            logger.debug(f"Skipping unknown module: {instance.module_id}")
            continue

        context = ExecutionContext(
            canvas=canvas,
            seed=seed,
            rng=create_rng(seed + hash_string(instance.instance_id)),
        )
        params = module.default_parameters()
        params.update(instance.params)

        try:
            result = module.execute(params, layers, context)
        except Exception:
            logger.exception(f"Error in module {module.name}")
            continue

        if module.is_generator:
            layers = layers + result
        else:
            layers = result

    return layers
