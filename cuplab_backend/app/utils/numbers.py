# cuplab_backend/app/utils/numbers.py
from __future__ import annotations

import math
from typing import Union

Number = Union[int, float]

# What it does:
# Render a number the way the grading UI prints it: 55 not 55.0, 9.99 as-is.
def fmt_number(x: Number) -> str:
    f = float(x)
    if f.is_integer():
        return str(int(f))
    return repr(f)

# What it does:
# Round half-up to 2 decimals (defect equivalents, stepped scale values).
def round2(x: Number) -> float:
    return math.floor(float(x) * 100 + 0.5) / 100
