"""Kernel value types – public re-export surface.

Modules:
  result.py – Ok, Err, Result (dispatcher outcomes)
"""

from mp_queue.kernel.types.result import Err, Ok, Result, is_result

__all__ = ["Err", "Ok", "Result", "is_result"]
