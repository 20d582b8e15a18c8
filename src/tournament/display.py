"""
Display formatting for tournament results.

Provides ASCII-formatted standings and placings for terminal output.
"""

from typing import List, Dict, Any, Sequence, Tuple

from src.blotto.strategy import Strategy
from src.tournament.round_robin import BattleScore
from src.tournament.relegation import RelegationResult, TieBreak


def format_standings(
    ranking: Sequence[Tuple[Strategy, BattleScore]],
    limit: int = 10
) -> str:
    """
    Format round-robin standings as an ASCII table.

    Args:
        ranking: (strategy, score) pairs, best first
        limit: Maximum rows to show

    Returns:
        Formatted string for terminal display
    """
    lines = []
    lines.append("=== ROUND-ROBIN STANDINGS ===")
    lines.append("")

    # Header
    lines.append(f"{'Rank':<6}{'Strategy':<48}{'W-T-L':<14}{'VP':<6}")
    lines.append("-" * 74)

    # Rows
    for i, (strategy, score) in enumerate(ranking[:limit], 1):
        wtl = f"{score.wins}-{score.ties}-{score.losses}"
        lines.append(f"{i:<6}{str(strategy):<48}{wtl:<14}{score.victory_points:<6}")

    if len(ranking) > limit:
        lines.append(f"... {len(ranking) - limit} more")

    return "\n".join(lines)


def format_placings(placings: Sequence[Strategy], limit: int = 10) -> str:
    """
    Format final placings, winner first.

    Args:
        placings: Strategies ordered best first
        limit: Maximum rows to show

    Returns:
        Formatted string for terminal display
    """
    lines = []
    lines.append("=== FINAL PLACINGS ===")
    lines.append("")
    lines.append(f"{'Place':<7}{'Strategy':<48}")
    lines.append("-" * 55)

    for place, strategy in enumerate(placings[:limit], 1):
        lines.append(f"{place:<7}{str(strategy):<48}")

    if len(placings) > limit:
        lines.append(f"... {len(placings) - limit} more")

    return "\n".join(lines)


def format_relegation_round(result: RelegationResult, round_index: int) -> str:
    """Format a single relegation line."""
    record = result.rounds[round_index]
    _, score = next(pair for pair in record.standings if pair[0] is record.eliminated)
    line = (f"Round {record.round_number}: relegated {record.eliminated} "
            f"({score.wins}W-{score.ties}T-{score.losses}L, {score.victory_points} VP)")
    if record.tie_break != TieBreak.NONE:
        line += f" [tie-break: {record.tie_break.value}]"
    return line


def format_tie_break_notice(rounds: Sequence[Any]) -> str:
    """
    Explain that the arbitrary tie-break was used.

    Args:
        rounds: Round numbers where the first-of-two fallback decided, or
            labels naming the instance as well, e.g. "3 (instance 2)"

    Returns:
        Notice string, or an empty string if the fallback was never used
    """
    if not rounds:
        return ""
    round_list = ", ".join(str(r) for r in rounds)
    return (f"Note: {len(rounds)} relegation(s) could not be separated by victory points "
            f"or wins and were decided by population order (rounds {round_list}).")


def format_battle(a: Strategy, b: Strategy, scores: Tuple[float, float]) -> str:
    """Format the outcome of one battle."""
    score_a, score_b = scores
    if score_a > score_b:
        verdict = "A wins"
    elif score_b > score_a:
        verdict = "B wins"
    else:
        verdict = "Tie"
    return (f"A {a}: {score_a:g}\n"
            f"B {b}: {score_b:g}\n"
            f"{verdict}")


def format_tournament_header(
    tournament_id: str,
    mode: str,
    population_size: int,
    instances: int,
    total_battles: int
) -> str:
    """Format tournament header information."""
    lines = []
    lines.append(f"Tournament: {tournament_id}")
    lines.append(f"Mode: {mode}")
    lines.append(f"Population: {population_size}")
    if instances > 1:
        lines.append(f"Independent instances: {instances}")
    lines.append(f"Battles in first round-robin: {total_battles}")
    lines.append("")
    return "\n".join(lines)


def format_tournament_list(tournaments: List[Dict[str, Any]]) -> str:
    """Format stored tournaments as a table."""
    if not tournaments:
        return "No tournaments found."
    lines = []
    lines.append(f"{'Tournament':<28}{'Mode':<12}{'Size':<8}{'Status':<14}{'Created'}")
    lines.append("-" * 90)
    for t in tournaments:
        lines.append(f"{t['tournament_id']:<28}{t['mode']:<12}{t['population_size']:<8}"
                     f"{t['status']:<14}{t['created_at']}")
    return "\n".join(lines)
