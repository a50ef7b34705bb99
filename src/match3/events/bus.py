from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored in a variable alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT
# ============================================================================
EVENT_TILE_TAP = "tile_tap"                        # payload: x, y
EVENT_NEW_GAME_REQUEST = "new_game_request"        # payload: -


# ============================================================================
# SESSION STATE
# ============================================================================
EVENT_SESSION_STATE_CHANGED = "session_state_changed"  # payload: state=SessionState, reason=str
EVENT_TILE_SELECTED = "tile_selected"                  # payload: position=Position
EVENT_TILE_DESELECTED = "tile_deselected"              # payload: position=Position, reason=str
EVENT_GAME_OVER = "game_over"                          # payload: score=int, high_score=int


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAP_DO = "tile_swap_do"                # payload: src=Position, dst=Position, tile_ids=(int,int)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=Position, dst=Position
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=Position, dst=Position
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[Position], groups=[[Position]], score_delta=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[Position], tile_ids=set[int]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[Position]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[Position]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score=int


# ============================================================================
# HIGH SCORE
# ============================================================================
EVENT_HIGH_SCORE_LOADED = "high_score_loaded"            # payload: high_score=int
EVENT_HIGH_SCORE_LOAD_FAILED = "high_score_load_failed"  # payload: error=Exception
EVENT_HIGH_SCORE_SAVED = "high_score_saved"              # payload: score=int, new_record=bool
EVENT_HIGH_SCORE_SAVE_FAILED = "high_score_save_failed"  # payload: score=int, error=Exception
