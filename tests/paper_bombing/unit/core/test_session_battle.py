from paper_bombing.game.core.models import AttackOutcome, Phase, PlacementResult, Player, UnitKind
from paper_bombing.game.core.session import GameSession


def test_attack_rejected_before_battle(small_config) -> None:
    session = GameSession(small_config)
    session.start_new_game()
    result = session.attack(0, 0)
    assert result.outcome is AttackOutcome.INVALID
    assert session.turn_count == 0


def test_miss_flips_turn_and_counts(session_in_battle) -> None:
    result = session_in_battle.attack(5, 5)
    assert result.outcome is AttackOutcome.MISS
    assert result.attacker is Player.ONE
    assert result.turn_count == 1
    assert session_in_battle.active_player is Player.TWO
    assert session_in_battle.board(Player.TWO).was_attacked(5, 5)
    assert not session_in_battle.board(Player.ONE).was_attacked(5, 5)


def test_hit_reports_damage_then_destroy(session_in_battle) -> None:
    first = session_in_battle.attack(2, 0)
    assert first.outcome is AttackOutcome.HIT and not first.destroyed
    assert "damaged tank" in first.status
    session_in_battle.attack(5, 5)
    second = session_in_battle.attack(2, 1)
    assert second.destroyed
    assert "destroyed tank" in second.status
    assert session_in_battle.remaining_units(Player.TWO) == 1


def test_repeat_attack_keeps_turn_and_counter(session_in_battle) -> None:
    session_in_battle.attack(4, 4)
    session_in_battle.attack(5, 5)
    repeat = session_in_battle.attack(4, 4)
    assert repeat.outcome is AttackOutcome.ALREADY_ATTACKED
    assert session_in_battle.turn_count == 2
    assert session_in_battle.active_player is Player.ONE
    assert len(session_in_battle.board(Player.TWO).hits) == 1


def test_out_of_grid_attack_is_invalid(session_in_battle) -> None:
    assert session_in_battle.attack(6, 0).outcome is AttackOutcome.INVALID
    assert session_in_battle.turn_count == 0
    assert session_in_battle.active_player is Player.ONE


def test_destroying_last_unit_finishes_game(session_in_battle) -> None:
    session = session_in_battle
    session.attack(0, 0)
    session.attack(5, 5)
    session.attack(2, 0)
    session.attack(5, 4)
    final = session.attack(2, 1)

    assert final.winner is Player.ONE
    assert session.phase is Phase.FINISHED
    assert session.winner is Player.ONE
    assert session.turn_count == 5
    assert session.last_message == "Player 1 wins after 5 attacks."
    assert session.remaining_units(Player.TWO) == 0


def test_finished_game_accepts_no_mutations(session_in_battle) -> None:
    session = session_in_battle
    for row, col in [(0, 0), (5, 5), (2, 0), (5, 4), (2, 1)]:
        session.attack(row, col)
    history_len = len(session.history)

    assert session.attack(3, 3).outcome is AttackOutcome.INVALID
    assert session.place_unit(UnitKind.SOLDIER, 4, 4).result is PlacementResult.INVALID
    assert session.turn_count == 5
    assert not session.board(Player.TWO).was_attacked(3, 3)
    assert len(session.history) == history_len


def test_player_two_can_win(session_in_battle) -> None:
    session = session_in_battle
    for p1_target, p2_target in [((5, 5), (0, 0)), ((5, 4), (2, 0)), ((5, 3), (2, 1))]:
        session.attack(*p1_target)
        session.attack(*p2_target)
    assert session.winner is Player.TWO
    assert session.phase is Phase.FINISHED


def test_new_game_after_finish_returns_to_placement(session_in_battle) -> None:
    session = session_in_battle
    for row, col in [(0, 0), (5, 5), (2, 0), (5, 4), (2, 1)]:
        session.attack(row, col)
    session.start_new_game()
    assert session.phase is Phase.PLACEMENT
    assert session.winner is None
    assert session.turn_count == 0
    assert session.board(Player.TWO).hits == []
