"""
Host-side integration helpers for cardid.

The contract logic runs inside the proof harness; these helpers run on the
host / client that prepares calls for it.
"""

from __future__ import annotations

from .host import build_hash_content, build_identity_descriptor, build_verify_input

__all__: list[str] = [
    "build_hash_content",
    "build_identity_descriptor",
    "build_verify_input",
]
