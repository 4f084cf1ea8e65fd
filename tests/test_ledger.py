import pytest

from minerapp.config import GameConstants
from minerapp.entities import MineralType, ToolType
from minerapp.ledger import PlayerDefaults, PlayerLedger


def test_new_player_gets_default_state(ledger):
    player = ledger.get_or_create(42)

    assert player.player_id == "42"
    assert player.balance == 10
    assert player.energy == 100
    assert player.last_mining_at is None
    assert player.inventory == {mineral: 0 for mineral in MineralType}
    assert player.tool_counts == {
        ToolType.PICKAXE: 1,
        ToolType.DRILL: 0,
        ToolType.EXCAVATOR: 0,
    }


def test_get_or_create_is_idempotent(ledger):
    first = ledger.get_or_create("alice")
    first.balance = 77

    second = ledger.get_or_create("alice")

    assert second is first
    assert second.balance == 77
    assert len(ledger) == 1


def test_numeric_and_string_ids_share_a_record(ledger):
    assert ledger.get_or_create(7) is ledger.get_or_create("7")
    assert 7 in ledger
    assert "7" in ledger


def test_get_does_not_create(ledger):
    assert ledger.get("bob") is None
    assert "bob" not in ledger
    assert len(ledger) == 0


def test_players_do_not_share_mutable_state(ledger):
    a = ledger.get_or_create("a")
    b = ledger.get_or_create("b")
    a.inventory[MineralType.GOLD] = 3
    a.tool_counts[ToolType.DRILL] = 1

    assert b.inventory[MineralType.GOLD] == 0
    assert b.tool_counts[ToolType.DRILL] == 0


@pytest.mark.parametrize("bad_id", [None, "", "   "])
def test_blank_player_ids_are_rejected(ledger, bad_id):
    with pytest.raises(ValueError):
        ledger.get_or_create(bad_id)
    assert bad_id not in ledger


def test_lock_is_stable_per_player(ledger):
    assert ledger.lock_for("a") is ledger.lock_for("a")
    assert ledger.lock_for(1) is ledger.lock_for("1")
    assert ledger.lock_for("a") is not ledger.lock_for("b")


def test_player_ids_lists_known_players(ledger):
    ledger.get_or_create("x")
    ledger.get_or_create("y")
    assert sorted(ledger.player_ids()) == ["x", "y"]


def test_defaults_from_constants(tmp_path):
    path = tmp_path / "constants.yaml"
    path.write_text(
        "player:\n"
        "  starting_balance: 500\n"
        "  starting_energy: 250\n"
        "  max_energy: 120\n"
        "  starting_tools:\n"
        "    drill: 2\n"
        "    laser: 1\n",
        encoding="utf-8",
    )
    defaults = PlayerDefaults.from_constants(GameConstants(path=str(path)))
    player = PlayerLedger(defaults).get_or_create("p")

    # starting_tools merges over the built-in pickaxe

    assert player.balance == 500
    assert player.energy == 120
    assert defaults.max_energy == 120
    assert player.tool_counts == {
        ToolType.PICKAXE: 1,
        ToolType.DRILL: 2,
        ToolType.EXCAVATOR: 0,
    }
