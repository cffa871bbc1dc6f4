"""
Bootstrap of the Terraform remote state bucket and lock table.
"""

from state_backend.bootstrap import (
    BackendStatus,
    StateBackendError,
    bootstrap_state_backend,
    ensure_lock_table,
    ensure_state_bucket,
)

__all__ = [
    "BackendStatus",
    "StateBackendError",
    "bootstrap_state_backend",
    "ensure_lock_table",
    "ensure_state_bucket",
]
