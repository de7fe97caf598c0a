from volleyscout.models import ActionType, Lineup, ResultType, TeamConfig, TeamSide
from volleyscout.store import MatchStore

store = MatchStore()

store.start_match(
    TeamConfig(match_name="練習賽 G1", my_name="主場隊伍", op_name="客場隊伍"),
    my_lineup=Lineup.of("1", "2", "3", "4", "5", "6"),
    op_lineup=Lineup.of("11", "12", "13", "14", "15", "16"),
    my_libero="99",
    op_libero="88",
    first_serve=TeamSide.ME,
)


def rally(side, position, action, end, result):
    store.select_player(side, position)
    store.select_action(action)
    store.pointer_down(end)
    store.pointer_up()
    return store.pick_result(result)


# Ace from position 1: service retained
rally(TeamSide.ME, 1, ActionType.SERVE, (14.0, 2.0), ResultType.POINT)

# Opponent side-out with a kill from 4
rally(TeamSide.OP, 4, ActionType.ATTACK, (4.0, 6.0), ResultType.POINT)

# Opponent serve error: serve comes back, my team rotates
rally(TeamSide.OP, 1, ActionType.SERVE, (3.0, 1.0), ResultType.ERROR)

# Libero dig keeps the rally going
rally(TeamSide.ME, "L", ActionType.DIG, (6.0, 4.0), ResultType.NORMAL)

# Manual correction
store.adjust_score(TeamSide.OP, +1)

state = store.state
print(f"Set {state.current_set}: {state.my_score}-{state.op_score}, serving: {state.serving_team.value}")
print("My lineup:", state.me.lineup.to_dict())
print("Op lineup:", state.op.lineup.to_dict())
print("My team stats:", store.stats(TeamSide.ME))
print("Op team stats:", store.stats(TeamSide.OP))

print("\nUndo last action...")
store.undo()
print(f"Score: {store.state.my_score}-{store.state.op_score}")

print("\nRedo...")
store.redo()
print(f"Score: {store.state.my_score}-{store.state.op_score}")

print("\nCSV export:")
print(store.export_csv().decode("utf-8-sig"))
