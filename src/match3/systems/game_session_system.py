from __future__ import annotations

import logging
from typing import FrozenSet, Tuple

from esper import World

from match3.components.board import Board
from match3.components.position import Position
from match3.components.scoring_rules import ScoringRules
from match3.components.session_state import SessionState
from match3.constants import BOARD_HEIGHT, BOARD_WIDTH, MAX_CASCADE_DEPTH
from match3.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GAME_OVER,
    EVENT_GRAVITY_APPLIED,
    EVENT_HIGH_SCORE_LOADED,
    EVENT_HIGH_SCORE_SAVED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_NEW_GAME_REQUEST,
    EVENT_REFILL_COMPLETED,
    EVENT_SESSION_STATE_CHANGED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_DO,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_VALID,
    EVENT_TILE_TAP,
)
from match3.systems.board_ops import (
    gravity_moves,
    group_matches,
    new_tile_ids,
    sorted_positions,
    tile_ids_at,
)
from match3.systems.scoring import calculate_score
from match3.utils.color_supplier import ColorSupplier, RandomColorSupplier
from match3.utils.session_state import get_session_state, replace_session_state

logger = logging.getLogger(__name__)


class GameSessionSystem:
    """Drives one endless-mode session: tile selection, swaps, cascades and game over.

    The complete session state lives in a single ``SessionState`` component on
    the world. Each transition stores a new snapshot and announces it with
    ``EVENT_SESSION_STATE_CHANGED``; resolution steps are published in order
    (swap, match, clear, gravity, refill) before the next step starts.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        color_supplier: ColorSupplier | None = None,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
        rules: ScoringRules | None = None,
        board: Board | None = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        self.world = world
        self.event_bus = event_bus
        self.width = width
        self.height = height
        self.rules = rules or ScoringRules()
        self.color_supplier = color_supplier or RandomColorSupplier(getattr(world, "random", None))
        self._resolving = False
        self.event_bus.subscribe(EVENT_TILE_TAP, self.on_tile_tap)
        self.event_bus.subscribe(EVENT_NEW_GAME_REQUEST, self.on_new_game_request)
        self.event_bus.subscribe(EVENT_HIGH_SCORE_LOADED, self.on_high_score_loaded)
        self.event_bus.subscribe(EVENT_HIGH_SCORE_SAVED, self.on_high_score_saved)
        self.new_game(board=board)

    @property
    def state(self) -> SessionState:
        state = get_session_state(self.world)
        if state is None:
            raise RuntimeError("SessionState not found in world")
        return state

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_tile_tap(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        self.tap_tile(Position(x, y))

    def on_new_game_request(self, sender, **kwargs):
        self.new_game()

    def on_high_score_loaded(self, sender, **kwargs):
        value = kwargs.get("high_score", 0)
        state = self.state
        if value > state.high_score:
            self._publish(state.with_high_score(value), "high_score_loaded")

    def on_high_score_saved(self, sender, **kwargs):
        if not kwargs.get("new_record"):
            return
        score = kwargs.get("score", 0)
        state = self.state
        if score > state.high_score:
            self._publish(state.with_high_score(score), "high_score_saved")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def new_game(self, board: Board | None = None) -> bool:
        """Start over on a fresh board, keeping the known high score.

        Matches already present on the new board are cleared without scoring.
        The session may start in game over if the settled board has no moves.
        """
        if self._resolving:
            logger.debug("New game ignored while a resolution is in flight")
            return False
        previous = get_session_state(self.world)
        high_score = previous.high_score if previous is not None else 0
        if board is None:
            board = Board.create_random(self.width, self.height, self.color_supplier)
        self._resolving = True
        try:
            state = self._publish(SessionState(board=board, high_score=high_score, resolving=True), "new_game")
            state, depth = self._resolve_cascade(state, board.find_matches(), scoring=False)
            self._settle(state, depth)
        except Exception:
            self._abort_resolution()
            raise
        finally:
            self._resolving = False
        return True

    def tap_tile(self, position: Position) -> bool:
        """Handle a tap on ``position``; returns False when the tap was ignored."""
        state = self.state
        if self._resolving or not state.accepts_input:
            return False
        if not state.board.is_valid_position(position):
            return False
        selected = state.selected_position
        if selected is None:
            self._select(state, position)
        elif selected == position:
            self._publish(state.with_selection_cleared(), "deselect")
            self.event_bus.emit(EVENT_TILE_DESELECTED, position=position, reason="same_tile")
        elif selected.is_adjacent_to(position):
            self.try_swap(selected, position)
        else:
            self._select(state, position)
        return True

    def try_swap(self, a: Position, b: Position) -> None:
        """Swap two tiles and resolve the result; swaps that match nothing are reverted."""
        state = self.state
        tile_a = state.board.tile_at(a)
        tile_b = state.board.tile_at(b)
        if tile_a is None or tile_b is None:
            self._publish(state.with_selection_cleared(), "swap_missing_tile")
            return
        self._resolving = True
        try:
            state = self._publish(
                state.with_resolving(True).with_in_progress((tile_a.id, tile_b.id)), "swap_start"
            )
            self.event_bus.emit(EVENT_TILE_SWAP_DO, src=a, dst=b, tile_ids=(tile_a.id, tile_b.id))
            swapped = state.board.swap_by_id(tile_a.id, tile_b.id)
            state = self._publish(state.with_board(swapped).with_in_progress(()), "swap")
            matches = swapped.find_matches()
            if not matches:
                self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=a, dst=b)
                reverted = swapped.swap_by_id(tile_a.id, tile_b.id)
                self._publish(state.with_board(reverted).with_resolving(False), "swap_reverted")
                return
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=a, dst=b)
            state, depth = self._resolve_cascade(state, matches, scoring=True)
            self._settle(state, depth)
        except Exception:
            self._abort_resolution()
            raise
        finally:
            self._resolving = False

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def _resolve_cascade(
        self, state: SessionState, matches: FrozenSet[Position], *, scoring: bool
    ) -> Tuple[SessionState, int]:
        """Clear, drop and refill until the board has no matches.

        Returns the last snapshot and the deepest cascade level reached (0 when
        there was nothing to resolve).
        """
        depth = 0
        reason = "swap" if scoring else "initial"
        while matches:
            depth += 1
            if depth > MAX_CASCADE_DEPTH:
                raise RuntimeError(f"Cascade did not settle within {MAX_CASCADE_DEPTH} steps")
            board = state.board
            positions = sorted_positions(matches)
            delta = calculate_score(matches, depth, self.rules) if scoring else 0
            logger.debug("Cascade %s step %d: %d tiles, +%d", reason, depth, len(positions), delta)

            self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions, reason=reason)
            state = self._publish(state.with_in_progress(tile_ids_at(board, matches)), "match")
            self.event_bus.emit(
                EVENT_MATCH_FOUND,
                positions=positions,
                groups=group_matches(board, matches),
                score_delta=delta,
                reason=reason,
            )

            cleared = board.remove_tiles(matches)
            state = self._publish(state.with_board(cleared, delta).with_in_progress(()), "clear")
            self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, tile_ids=tile_ids_at(board, matches))

            settled = cleared.apply_gravity()
            moves = gravity_moves(cleared, settled)
            state = self._publish(
                state.with_board(settled).with_in_progress(m.tile_id for m in moves), "gravity"
            )
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)

            filled = settled.fill_empty_spaces()
            spawned = new_tile_ids(settled, filled)
            state = self._publish(state.with_board(filled).with_in_progress(spawned), "refill")
            self.event_bus.emit(
                EVENT_REFILL_COMPLETED,
                new_tiles=sorted_positions(filled.tile_by_id(i).position for i in spawned),
            )

            matches = filled.find_matches()
        return state, depth

    def _settle(self, state: SessionState, depth: int) -> SessionState:
        final = state.with_in_progress(()).with_resolving(False)
        out_of_moves = not final.board.has_valid_moves()
        if out_of_moves:
            final = final.with_game_over()
        final = self._publish(final, "game_over" if out_of_moves else "settled")
        if depth:
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, score=final.score)
        if out_of_moves:
            logger.info("Game over: score %d, high score %d", final.score, final.high_score)
            self.event_bus.emit(EVENT_GAME_OVER, score=final.score, high_score=final.high_score)
        return final

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _abort_resolution(self) -> None:
        # Leave a snapshot that accepts input again; the board is whatever the last step produced.
        state = get_session_state(self.world)
        if state is None or not state.resolving:
            return
        logger.error("Resolution aborted; releasing input on the last published board")
        self._publish(state.with_in_progress(()).with_resolving(False), "resolution_aborted")

    def _select(self, state: SessionState, position: Position) -> None:
        self._publish(state.with_selected_position(position), "select")
        self.event_bus.emit(EVENT_TILE_SELECTED, position=position)

    def _publish(self, state: SessionState, reason: str) -> SessionState:
        replace_session_state(self.world, state)
        self.event_bus.emit(EVENT_SESSION_STATE_CHANGED, state=state, reason=reason)
        return state

