"""Type definitions for fluidsim.

All grid fields are stored as 32-bit floats, matching the 4 bytes per
component the device storage is sized for.
"""

import taichi as ti

# Default floating-point type for all fields and computations
# ti.f32: Single precision (32-bit float) - faster on GPU, ~7 significant digits
DTYPE = ti.f32

# Bytes per stored component
DTYPE_BYTES: int = 4
