"""
Example script that plays one day round with AI players.

This script shows how to build a :class:`PlayerManager` from the
environment, seat a few players, deal roles and ask every player for
a speech and a vote.  The seer is also asked for a night action.

Set ``AI_API_KEY`` (and optionally ``AI_PROVIDER`` / ``AI_MODEL``) in
the environment or a ``.env`` file before running.  Without a key the
players answer with their fixed fallback responses.
"""

import asyncio

from rich.console import Console
from rich.table import Table

from werewolf_agent import PlayerManager, load_player_config
from werewolf_agent.models import PlayerContext, PlayerInfo, SeerContext, Speech
from werewolf_agent.telemetry import configure_telemetry

ROLES = {1: "werewolf", 2: "seer", 3: "witch", 4: "villager", 5: "werewolf", 6: "villager"}
WEREWOLVES = [p for p, r in ROLES.items() if r == "werewolf"]


async def main() -> None:
    console = Console()
    configure_telemetry(service_name="werewolf-agent-demo")

    manager = PlayerManager(load_player_config())
    for player_id, role in ROLES.items():
        player = manager.create_player(player_id)
        teammates = [w for w in WEREWOLVES if w != player_id] if role == "werewolf" else []
        await player.start_game("demo-game", role, player_id, teammates)

    context = PlayerContext(round=1, alive_players=[PlayerInfo(id=p) for p in ROLES])
    for player_id in manager.get_player_ids():
        response = await manager.get_player(player_id).speak(context)
        context.all_speeches.setdefault(1, []).append(Speech(player_id=player_id, content=response.speech))
        console.print(f"[bold]Player {player_id}[/bold]: {response.speech}")

    table = Table(title="Votes")
    table.add_column("Voter")
    table.add_column("Target")
    table.add_column("Reason")
    for player_id in manager.get_player_ids():
        vote = await manager.get_player(player_id).vote(context)
        table.add_row(str(player_id), str(vote.target), vote.reason)
    console.print(table)

    seer = manager.get_player(2)
    if seer.has_api_key():
        action = await seer.use_ability(SeerContext(**context.model_dump()))
        console.print(f"Seer investigates player {action.target}: {action.reason}")

    console.print(manager.health_check())


if __name__ == "__main__":
    asyncio.run(main())
