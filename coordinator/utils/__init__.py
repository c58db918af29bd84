from .pre_flight import (
    run_preflight_checks,
    ensure_snarkjs_installed,
    ensure_nodejs_version,
)
from .system import clean_dir, ensure_dir

__all__ = [
    "run_preflight_checks",
    "ensure_snarkjs_installed",
    "ensure_nodejs_version",
    "clean_dir",
    "ensure_dir",
]
