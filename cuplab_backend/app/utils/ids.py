# cuplab_backend/app/utils/ids.py
from __future__ import annotations
import random, string, time

_BASE36 = string.digits + string.ascii_lowercase

# What it does:
# Build a best-effort unique id "<prefix>_<epoch-ms>_<9 base36 chars>".
# Unique enough for one operator editing one configuration; not a UUID.
def new_definition_id(prefix: str) -> str:
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{int(time.time()*1000)}_{suffix}"

def new_custom_id(prefix: str = "custom") -> str:
    return f"{prefix}-{int(time.time()*1000)}"
