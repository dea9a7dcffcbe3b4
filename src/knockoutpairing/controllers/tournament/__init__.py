from knockoutpairing.controllers.tournament.bracket_generator import (
    generate_matches,
    pair_sequentially,
    select_bye_player,
)
from knockoutpairing.controllers.tournament.match_updater import (
    apply_command,
    update_match,
)
from knockoutpairing.controllers.tournament.round_manager import (
    advance_round,
    completed_matches,
    create_tournament,
    get_winners,
    is_round_complete,
    running_matches,
)

__all__ = [
    "generate_matches",
    "pair_sequentially",
    "select_bye_player",
    "create_tournament",
    "advance_round",
    "is_round_complete",
    "get_winners",
    "running_matches",
    "completed_matches",
    "update_match",
    "apply_command",
]
