"""
fluidsim: GPU-accelerated 2D stable-fluids solver using Taichi.

Staged force injection, diffusion, advection and pressure projection over
triple-buffered grid fields.
"""

__version__ = "0.1.0"
