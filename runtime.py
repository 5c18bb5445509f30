"""
Taichi backend initialization for Spherical Blue Noise.

ti.init() resets every compiled kernel, so it must run exactly once per
process and before the first kernel launch. All relaxation kernels run on
the CPU backend in double precision: the convergence tolerance sits well
below f32 resolution on the unit sphere.
"""

import taichi as ti

_initialized = False


def init_taichi(arch=None, verbose=False):
    """
    Initialize Taichi once (idempotent).

    Args:
        arch: Taichi arch (default ti.cpu)
        verbose: print the selected backend

    Returns:
        True if this call performed the initialization
    """
    global _initialized
    if _initialized:
        return False

    ti.init(arch=arch if arch is not None else ti.cpu,
            default_fp=ti.f64, default_ip=ti.i32, fast_math=False,
            log_level=ti.WARN)
    _initialized = True

    if verbose:
        print(f"[Taichi] Initialized with backend: {ti.cfg.arch}")
    return True


def is_initialized():
    return _initialized
