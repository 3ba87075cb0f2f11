"""rotator: rotate an IAM user's access key into GitHub Actions secrets.

One identity per run. The provider allows two keys; the run may briefly hold both,
never zero.
"""

from __future__ import annotations

__all__ = ["__version__", "MAX_ACCESS_KEYS"]

__version__ = "1.0.0"

# IAM hard limit per user.
MAX_ACCESS_KEYS = 2
