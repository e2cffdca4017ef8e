"""
Prompt templates for AI players.

Every builder takes the asking player (anything exposing ``get_role``,
``get_player_id`` and ``get_teammates``) and the game context it
received, and returns plain text.  The output-format reminders that
name the required JSON fields are appended by
:class:`~werewolf_agent.agents.player.PlayerAgent`, not here.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from werewolf_agent.models.game import (
    PersonalityType,
    PlayerContext,
    Role,
    SeerContext,
    Speech,
    WitchContext,
)

# ============================================================================
# Personalities
# ============================================================================

PERSONALITY_TEMPLATES: Dict[PersonalityType, str] = {
    PersonalityType.AGGRESSIVE: (
        "PERSONALITY: Aggressive.\n"
        "You speak first and speak loudly. You accuse players you find suspicious, "
        "push the table towards a decision and are not afraid to make enemies."
    ),
    PersonalityType.CONSERVATIVE: (
        "PERSONALITY: Conservative.\n"
        "You are careful and measured. You rarely accuse without evidence, prefer to "
        "listen before committing and avoid drawing attention to yourself."
    ),
    PersonalityType.CUNNING: (
        "PERSONALITY: Cunning.\n"
        "You read the table and adapt. You hide your intentions, steer discussion "
        "quietly and choose the moment to strike or to defend."
    ),
}

ROLE_DESCRIPTIONS: Dict[Role, str] = {
    Role.VILLAGER: "You are a Villager. You have no night ability; find and vote out the werewolves.",
    Role.WEREWOLF: "You are a Werewolf. Each night you and your teammates kill one player. Never reveal yourself.",
    Role.SEER: "You are the Seer. Each night you learn whether one player is good or a werewolf.",
    Role.WITCH: "You are the Witch. You own one antidote that saves the night's victim and one poison that kills.",
}


def get_personality(personality: str) -> str:
    """Return the preamble for a personality key.

    Unknown keys produce a short generic preamble naming the key so
    that custom strategies still reach the model.
    """
    try:
        return PERSONALITY_TEMPLATES[PersonalityType(personality)]
    except ValueError:
        return f"PERSONALITY: {personality}."


# ============================================================================
# Context rendering helpers
# ============================================================================

def format_alive_players(context: PlayerContext) -> str:
    alive = [str(p.id) for p in context.alive_players if p.is_alive]
    return ", ".join(alive) if alive else "unknown"


def format_speeches(speeches: Dict[int, List[Speech]], limit_rounds: Optional[int] = None) -> str:
    """Render speech history, most recent rounds last."""
    rounds = sorted(speeches)
    if limit_rounds is not None:
        rounds = rounds[-limit_rounds:]
    lines: List[str] = []
    for round_number in rounds:
        for speech in speeches[round_number]:
            if speech.type == "system":
                lines.append(f"[Round {round_number}] System: {speech.content}")
            else:
                lines.append(f"[Round {round_number}] Player {speech.player_id}: {speech.content}")
    return "\n".join(lines) if lines else "No one has spoken yet."


def format_votes(context: PlayerContext) -> str:
    lines = []
    for round_number in sorted(context.all_votes):
        for vote in context.all_votes[round_number]:
            lines.append(f"[Round {round_number}] Player {vote.voter_id} -> Player {vote.target_id}")
    return "\n".join(lines) if lines else "No votes yet."


def _format_ids(ids: Optional[Iterable[int]]) -> str:
    ids = list(ids or [])
    return ", ".join(str(i) for i in ids) if ids else "none"


def _header(player, context: PlayerContext) -> str:
    role = player.get_role()
    lines = [
        "You are playing Werewolf, a social deduction game.",
        ROLE_DESCRIPTIONS.get(role, f"Your role is {role}."),
        f"You are Player {player.get_player_id()}.",
    ]
    if role == Role.WEREWOLF:
        lines.append(f"Your werewolf teammates: {_format_ids(player.get_teammates())}.")
    lines.append(f"Round {context.round}, phase: {context.current_phase.value}.")
    lines.append(f"Alive players: {format_alive_players(context)}.")
    return "\n".join(lines)


# ============================================================================
# Builders
# ============================================================================

def get_speech(player, context: PlayerContext) -> str:
    """Prompt for a daytime speech."""
    role = player.get_role()
    if role == Role.WEREWOLF:
        goal = "Blend in with the villagers, deflect suspicion from your teammates and sow doubt."
    elif role == Role.SEER:
        goal = "Decide whether to reveal what you know. Guide the good players without getting killed."
    elif role == Role.WITCH:
        goal = "Help the village reason carefully. Keep your potions secret unless revealing them wins the day."
    else:
        goal = "Reason from what others said and voted. Point out contradictions."

    return (
        f"{player.get_personality_prompt()}"
        f"{_header(player, context)}\n\n"
        f"SPEECHES SO FAR:\n{format_speeches(context.all_speeches)}\n\n"
        f"YOUR GOAL: {goal}\n"
        "Speak naturally, like a person at the table. Do not say you are an AI."
    )


def get_voting(player, context: PlayerContext, check_results: Optional[Dict[str, str]] = None) -> str:
    """Prompt for a day vote.

    :param check_results: seer investigation results as ``{"<player>": "good" | "werewolf"}``
    """
    role = player.get_role()
    lines = [
        _header(player, context),
        "",
        f"SPEECHES SO FAR:\n{format_speeches(context.all_speeches)}",
        "",
        f"PREVIOUS VOTES:\n{format_votes(context)}",
        "",
    ]
    if check_results:
        results = ", ".join(f"Player {target}: {result}" for target, result in check_results.items())
        lines.append(f"YOUR INVESTIGATION RESULTS: {results}")
    if role == Role.WEREWOLF:
        lines.append("Vote to eliminate a good player without exposing your teammates.")
    else:
        lines.append("Vote for the player you believe is most likely a werewolf.")
    lines.append("You must vote for an alive player other than yourself.")
    return "\n".join(lines)


def get_night_action(player, context: PlayerContext) -> str:
    """Prompt for the night action of the player's role."""
    role = player.get_role()
    header = _header(player, context)
    history = f"SPEECHES SO FAR:\n{format_speeches(context.all_speeches, limit_rounds=2)}"

    if role == Role.WEREWOLF:
        task = (
            "NIGHT ACTION: Choose a player to kill tonight. Avoid your teammates.\n"
            'Return JSON with action "kill", target (player number) and reason.'
        )
    elif role == Role.SEER:
        checked = ""
        if isinstance(context, SeerContext) and context.investigated_players:
            checked = "Already investigated: " + ", ".join(
                f"Player {i.target} ({'good' if i.is_good else 'werewolf'})"
                for i in context.investigated_players.values()
            ) + "\n"
        task = (
            f"{checked}NIGHT ACTION: Choose a player to investigate. Do not pick yourself.\n"
            'Return JSON with action "investigate", target (player number) and reason.'
        )
    elif role == Role.WITCH:
        killed = "nobody"
        heal_used = poison_used = False
        if isinstance(context, WitchContext):
            if context.killed_tonight:
                killed = f"Player {context.killed_tonight}"
            heal_used = context.potion_used.heal
            poison_used = context.potion_used.poison
        task = (
            f"Tonight the werewolves attacked: {killed}.\n"
            f"Antidote: {'used' if heal_used else 'available'}. Poison: {'used' if poison_used else 'available'}.\n"
            "NIGHT ACTION: Decide whether to save the victim and whether to poison someone.\n"
            'Return JSON with action ("using" or "idle"), heal_target, heal_reason, '
            "poison_target and poison_reason. Use 0 as the target for a potion you do not use."
        )
    else:
        raise ValueError(f"Role {role} has no night action")

    return f"{player.get_personality_prompt()}{header}\n\n{history}\n\n{task}"
