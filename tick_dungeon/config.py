"""Simulation tunables."""
from __future__ import annotations

from dataclasses import dataclass, field


def _seed_resources() -> dict[str, float]:
    return {"biomass": 10.0, "mana": 5.0, "nutrients": 3.0}


@dataclass(frozen=True)
class DungeonConfig:
    """Immutable configuration for one simulation.

    Times are in seconds of simulated (elapsed wall-clock) time.

    Attributes:
        update_interval: Nominal driver period used by ``run_forever``.
        evolution_age_threshold: Scaled age at which creatures may evolve.
        dungeon_level_bonus: Production bonus per dungeon level above 1.
        invasion_base_timer: Seconds until the first invasion, and the
            fixed part of every later invasion delay.
        invasion_random_range: Random extra seconds added after each invasion.
        boss_interval: Seconds between boss arrivals.
        boss_min_game_time: Boss-tier intruders are not drawn before this.
        combat_delay: Seconds between an intruder's arrival and its combat.
        log_message_limit: Retained event log entries.
        seed_resources: Ledger contents of a fresh world.
        dungeon_health: Core max health of a fresh world.
        health_per_level: Core max health gained per level-up.
        upgrade_base_cost: Level-up cost factor (cost = base * level ** 3).
        upgrade_resource: Resource spent on level-ups.
        prestige_min_level: Dungeon level needed to prestige.
        synergy_base_rate: Starting per-partner synergy rate.
        slime_colony_rate: Flat biomass per second from every slime.
        slime_price_growth: Slime cost multiplier per purchase.
        minion_stat_ratio: Health/attack fraction inherited by minions.
        minion_rate_ratio: Production fraction inherited by minions.
        boss_bonus_grant: Extra amount of each resource for a boss kill.
        epic_chance: Probability of an epic drop.
        rare_chance: Probability of a rare drop (after the epic band).
    """

    update_interval: float = 0.1
    evolution_age_threshold: float = 30.0
    dungeon_level_bonus: float = 0.05
    invasion_base_timer: float = 60.0
    invasion_random_range: float = 60.0
    boss_interval: float = 300.0
    boss_min_game_time: float = 300.0
    combat_delay: float = 1.0
    log_message_limit: int = 10
    seed_resources: dict[str, float] = field(default_factory=_seed_resources)
    dungeon_health: int = 100
    health_per_level: int = 50
    upgrade_base_cost: int = 50
    upgrade_resource: str = "nutrients"
    prestige_min_level: int = 10
    synergy_base_rate: float = 0.1
    slime_colony_rate: float = 0.5
    slime_price_growth: float = 1.1
    minion_stat_ratio: float = 0.7
    minion_rate_ratio: float = 0.5
    boss_bonus_grant: float = 10.0
    epic_chance: float = 0.05
    rare_chance: float = 0.15

    def __post_init__(self) -> None:
        if self.update_interval <= 0:
            raise ValueError("update_interval must be positive")
        if self.combat_delay < 0:
            raise ValueError(f"combat_delay must be >= 0, got {self.combat_delay}")
        if self.log_message_limit <= 0:
            raise ValueError("log_message_limit must be positive")
        if self.dungeon_health <= 0:
            raise ValueError("dungeon_health must be positive")
        if not 0.0 <= self.epic_chance + self.rare_chance <= 1.0:
            raise ValueError("epic_chance + rare_chance must be within [0, 1]")
        for name, amount in self.seed_resources.items():
            if amount < 0:
                raise ValueError(f"seed amount for {name!r} must be >= 0")
