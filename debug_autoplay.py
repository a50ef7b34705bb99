import sys, os
ROOT = os.path.dirname(__file__)
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)
import logging
import random

from match3.events.bus import EventBus, EVENT_CASCADE_COMPLETE, EVENT_GAME_OVER, EVENT_TILE_TAP
from match3.systems.board_ops import find_valid_swaps
from match3.systems.game_session_system import GameSessionSystem
from match3.systems.high_score_system import HighScoreSystem
from match3.utils.high_score_store import InMemoryHighScoreStore
from match3.world import create_world

# Plays the first available hint swap until the board runs out of moves.
logging.basicConfig(level=logging.DEBUG)
seed = int(sys.argv[1]) if len(sys.argv) > 1 else 7
max_turns = int(sys.argv[2]) if len(sys.argv) > 2 else 200

bus = EventBus()
world = create_world(bus, rng=random.Random(seed))
session = GameSessionSystem(world, bus)
scores = HighScoreSystem(world, bus, InMemoryHighScoreStore())
scores.load()
bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **k: print('cascade depth', k['depth'], 'score', k['score']))
bus.subscribe(EVENT_GAME_OVER, lambda s, **k: print('game over', k))

print(session.state.board.render_text())
turn = -1
for turn in range(max_turns):
    if session.state.game_over:
        break
    swaps = find_valid_swaps(session.state.board)
    if not swaps:
        break
    src, dst = swaps[0]
    bus.emit(EVENT_TILE_TAP, x=src.x, y=src.y)
    bus.emit(EVENT_TILE_TAP, x=dst.x, y=dst.y)
print(session.state.board.render_text())
print('turns', turn + 1, 'score', session.state.score, 'high score', session.state.high_score)
