"""Canonical JSON and fingerprints for diff-stable tool output.

Clients re-render whenever the item list changes. A fingerprint computed
over canonical JSON lets them skip re-rendering when two evaluations of the
same facts produce the same ordered list.

The normalization contract:
1. Key ordering: sorted at every level
2. Lists: order preserved (item order is semantic)
3. NaN/inf: rejected (allow_nan=False)
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

# Fingerprint format version - bump when the hashed payload changes
FINGERPRINT_VERSION = "1"


def canonical_dumps(obj: Any) -> str:
    """Produce canonical JSON string with sorted keys and minimal separators.

    Uses allow_nan=False to fail fast if NaN/inf values slip through
    boundary parsing.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def fingerprint(obj: Any) -> str:
    """SHA-256 of the canonical JSON, prefixed with the fingerprint version."""
    digest = hashlib.sha256(canonical_dumps(obj).encode("utf-8")).hexdigest()
    return f"v{FINGERPRINT_VERSION}:{digest}"
