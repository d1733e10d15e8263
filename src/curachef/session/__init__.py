"""
CuraChef - Session.

Immutable session state, the result reconciler and the controller that
drives generation.
"""

from curachef.session.controller import CurachefSession
from curachef.session.reconciler import EMPTY_RESULT, FeatureResult, reconcile
from curachef.session.state import INITIAL_STATE, SessionState, reduce

__all__ = [
    "CurachefSession",
    "EMPTY_RESULT",
    "FeatureResult",
    "INITIAL_STATE",
    "SessionState",
    "reconcile",
    "reduce",
]
