# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information
""" Restoring and non-restoring binary division models.
"""

from aludiv.algorithm import (divide, DivResult, RestoringDivRem,
                              NonRestoringDivRem)
from aludiv.op import DivAlgorithm, DivErrorKind, DivMode, SignRule

__all__ = [
    "divide",
    "DivResult",
    "RestoringDivRem",
    "NonRestoringDivRem",
    "DivAlgorithm",
    "DivErrorKind",
    "DivMode",
    "SignRule",
]
