"""
Tournament runner that orchestrates Blotto competitions.

Handles population generation, relegation or seeded-bracket execution,
parallel fan-out over independent instances, progress reporting and
persistence of the winners.
"""

import random
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Dict, Optional, Any, Tuple
from dataclasses import dataclass, asdict

from tqdm import tqdm

from src.blotto.generator import random_population
from src.blotto.strategy import Strategy, dedupe_population
from src.utils.constants import RELEGATION, BRACKET, TOURNAMENT_MODES
from src.tournament.bracket import BracketResult, run_seeded_bracket
from src.tournament.relegation import (
    RelegationResult,
    TieBreakPolicy,
    run_relegation_tournament,
)
from src.tournament.round_robin import num_battles
from src.tournament.seeding import is_power_of_two, next_power_of_two_at_least
from src.tournament.storage import TournamentStorage, TournamentResult
from src.tournament.display import (
    format_tournament_header,
    format_placings,
    format_relegation_round,
    format_standings,
    format_tie_break_notice,
)


@dataclass
class TournamentConfig:
    """Configuration for a tournament run."""
    mode: str = RELEGATION
    population_size: int = 64
    instances: int = 1
    workers: int = 1
    keep: int = 1
    seed: Optional[int] = None
    dedupe: bool = False
    tie_policy: str = TieBreakPolicy.FIRST.value
    previous_winners: int = 0
    save_top: int = 10
    scale: int = 1
    save: bool = True
    data_dir: str = "data"

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.mode not in TOURNAMENT_MODES:
            errors.append(f"Invalid mode: {self.mode} (choose from {TOURNAMENT_MODES})")

        if self.population_size < 1:
            errors.append("population_size must be at least 1")

        if self.instances < 1:
            errors.append("instances must be at least 1")

        if self.workers < 1:
            errors.append("workers must be at least 1")

        if not is_power_of_two(self.keep):
            errors.append(f"keep must be a power of two, got {self.keep}")

        if self.tie_policy not in [p.value for p in TieBreakPolicy]:
            errors.append(f"Invalid tie_policy: {self.tie_policy}")

        if self.previous_winners < 0:
            errors.append("previous_winners must be non-negative")

        if self.save_top < 1:
            errors.append("save_top must be at least 1")

        if self.scale < 1:
            errors.append("scale must be at least 1")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Create TournamentConfig from a dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


def _bracket_keep(keep: int, entrants: int) -> int:
    """Clamp keep to the bracket size that the entrants will be padded to."""
    return min(keep, next_power_of_two_at_least(entrants))


def _relegate_instance(args: Tuple[int, List[Strategy], bool, str]) -> Tuple[int, RelegationResult]:
    """Worker function to run one independent relegation tournament."""
    index, population, dedupe, tie_policy = args
    result = run_relegation_tournament(population, dedupe, TieBreakPolicy(tie_policy))
    return index, result


def run_parallel_relegation(
    populations: List[List[Strategy]],
    workers: int = 1,
    dedupe: bool = False,
    tie_policy: TieBreakPolicy = TieBreakPolicy.FIRST,
    show_progress: bool = False
) -> Tuple[RelegationResult, List[RelegationResult]]:
    """
    Run independent relegation tournaments and reduce their winners.

    Each population is relegated on its own; the winners, in population
    order, then play one more relegation tournament.

    Args:
        populations: One population per instance
        workers: Number of worker processes (1 runs in-process)
        dedupe: Merge identical allocations before each tournament
        tie_policy: Resolution of fully tied relegation candidates
        show_progress: Show a progress bar over the instances

    Returns:
        Tuple of (final result over the winners, per-instance results)
    """
    if not populations:
        raise ValueError("Need at least one population")

    jobs = [(i, list(pop), dedupe, tie_policy.value) for i, pop in enumerate(populations)]
    results: List[Optional[RelegationResult]] = [None] * len(jobs)

    with tqdm(total=len(jobs), desc="Tournaments", disable=not show_progress) as bar:
        if workers > 1 and len(jobs) > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(_relegate_instance, job) for job in jobs]
                for future in as_completed(futures):
                    index, result = future.result()
                    results[index] = result
                    bar.update(1)
        else:
            for job in jobs:
                index, result = _relegate_instance(job)
                results[index] = result
                bar.update(1)

    winners = [result.winner for result in results]
    final = run_relegation_tournament(winners, dedupe, tie_policy)
    return final, results


class TournamentRunner:
    """
    Orchestrates a Blotto tournament over a random population.

    Usage:
        runner = TournamentRunner(config)
        result = runner.run(tournament_id="my_tournament")
    """

    def __init__(
        self,
        config: TournamentConfig,
        storage: Optional[TournamentStorage] = None,
        verbose: bool = True,
        show_progress: bool = False
    ):
        """
        Initialize the tournament runner.

        Args:
            config: Tournament configuration
            storage: Optional storage backend (creates default if None and
                config.save is set)
            verbose: Print standings and placings
            show_progress: Show a progress bar over parallel instances
        """
        errors = config.validate()
        if errors:
            raise ValueError("; ".join(errors))

        self.config = config
        self.storage = storage
        if self.storage is None and config.save:
            self.storage = TournamentStorage(config.data_dir)
        self.verbose = verbose
        self.show_progress = show_progress
        self.rng = random.Random(config.seed)

        # Detailed results of the last run, for callers that want more than placings
        self.relegation: Optional[RelegationResult] = None
        self.brackets: List[BracketResult] = []

    def _generate_tournament_id(self) -> str:
        """Generate a unique tournament ID."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        return f"blotto_{timestamp}"

    def _log(self, message: str):
        if self.verbose and message:
            print(message)

    def build_populations(self) -> List[List[Strategy]]:
        """
        Generate one random population per instance.

        Winners of earlier stored tournaments are added to every population
        when config.previous_winners is set. Without a storage backend
        (config.save off) they are read from an existing database in
        config.data_dir, if there is one.
        """
        previous = []
        if self.config.previous_winners:
            storage = self.storage
            if storage is None and (Path(self.config.data_dir) / "blotto.db").exists():
                storage = TournamentStorage(self.config.data_dir)
            if storage is not None:
                previous = [
                    s for s in storage.recent_winners(self.config.previous_winners)
                    if s.scale == self.config.scale
                ]

        populations = []
        for _ in range(self.config.instances):
            population = random_population(self.config.population_size, self.rng, self.config.scale)
            population.extend(previous)
            populations.append(population)
        return populations

    def run(self, tournament_id: Optional[str] = None) -> TournamentResult:
        """
        Run a complete tournament.

        Args:
            tournament_id: Optional ID (auto-generated if None)

        Returns:
            TournamentResult with placings, winner first
        """
        tournament_id = tournament_id or self._generate_tournament_id()
        populations = self.build_populations()
        population_size = sum(len(p) for p in populations)
        created_at = datetime.now(timezone.utc).isoformat()

        if self.storage is not None:
            self.storage.create_tournament(
                tournament_id=tournament_id,
                mode=self.config.mode,
                population_size=population_size,
                config=self.config.to_dict()
            )

        self._log(format_tournament_header(
            tournament_id,
            self.config.mode,
            population_size,
            self.config.instances,
            num_battles(len(populations[0]))
        ))

        start_time = time.time()
        if self.config.mode == BRACKET:
            placings, arbitrary = self._run_brackets(populations), []
        else:
            placings, arbitrary = self._run_relegation(populations)
        elapsed = time.time() - start_time

        self._log("\n" + format_placings(placings))
        self._log(format_tie_break_notice(arbitrary))
        self._log(f"\nTournament completed in {elapsed:.2f}s")

        if self.storage is not None:
            self.storage.complete_tournament(
                tournament_id,
                placings[:self.config.save_top],
                arbitrary_tie_breaks=len(arbitrary),
                elapsed=elapsed
            )

        return TournamentResult(
            tournament_id=tournament_id,
            created_at=created_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
            status='completed',
            mode=self.config.mode,
            population_size=population_size,
            placings=placings,
            config=self.config.to_dict(),
            arbitrary_tie_breaks=len(arbitrary),
            elapsed=elapsed
        )

    def _run_relegation(self, populations: List[List[Strategy]]) -> Tuple[List[Strategy], List[Any]]:
        """
        Relegate each population, reduce the winners, return placings best first.

        The second item lists the rounds decided by the first-of-two fallback:
        plain round numbers for a single instance, otherwise labels such as
        "3 (instance 2)" or "1 (final)".
        """
        policy = TieBreakPolicy(self.config.tie_policy)

        if len(populations) == 1:
            final = run_relegation_tournament(populations[0], self.config.dedupe, policy)
            arbitrary = final.arbitrary_tie_breaks
        else:
            final, instances = run_parallel_relegation(
                populations,
                workers=self.config.workers,
                dedupe=self.config.dedupe,
                tie_policy=policy,
                show_progress=self.show_progress
            )
            arbitrary = [
                f"{r} (instance {i})"
                for i, result in enumerate(instances, 1)
                for r in result.arbitrary_tie_breaks
            ]
            arbitrary.extend(f"{r} (final)" for r in final.arbitrary_tie_breaks)

        if self.verbose and len(final.rounds) <= 20:
            for i in range(len(final.rounds)):
                print(format_relegation_round(final, i))

        self.relegation = final
        return list(reversed(final.order)), arbitrary

    def _run_brackets(self, populations: List[List[Strategy]]) -> List[Strategy]:
        """Run one seeded bracket per population, then a bracket over the winners."""
        keep = self.config.keep
        self.brackets = []

        for population in populations:
            if self.config.dedupe:
                population = dedupe_population(population)
            self.brackets.append(run_seeded_bracket(population, _bracket_keep(keep, len(population)), self.rng))

        if len(self.brackets) == 1:
            final = self.brackets[0]
        else:
            winners = [w for result in self.brackets for w in result.winners]
            final = run_seeded_bracket(winners, _bracket_keep(keep, len(winners)), self.rng)
            self.brackets.append(final)

        self._log(format_standings(final.ranking))
        return list(final.winners)
