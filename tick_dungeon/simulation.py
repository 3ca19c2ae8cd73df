"""Simulation - tick driver, deferred combat, and the command facade."""
from __future__ import annotations

import logging
import os
import random
import time
from typing import Any, Callable

from tick_dungeon import evolution, progression, snapshot
from tick_dungeon.catalog import Catalog
from tick_dungeon.clock import Clock
from tick_dungeon.combat import resolve_combat
from tick_dungeon.config import DungeonConfig
from tick_dungeon.events import EventLog
from tick_dungeon.scheduler import DeferredScheduler
from tick_dungeon.systems import (
    System,
    make_achievement_system,
    make_boss_system,
    make_invasion_system,
    make_production_system,
    make_rounding_system,
)
from tick_dungeon.types import CombatOutcome, CreatureId, PrestigeBonus
from tick_dungeon.world import IntruderInstance, World, new_world

logger = logging.getLogger(__name__)


class Simulation:
    """Owns one world and advances it in elapsed-time ticks.

    Each tick runs the systems in order, then fires any combat resolutions
    that have come due. Commands run between ticks and return ``False``
    without changing anything when their preconditions fail.
    """

    def __init__(
        self,
        config: DungeonConfig | None = None,
        catalog: Catalog | None = None,
        seed: int | None = None,
        time_fn: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config if config is not None else DungeonConfig()
        self._catalog = catalog if catalog is not None else Catalog()
        self._clock = Clock(self._config.update_interval, time_fn)
        self._scheduler = DeferredScheduler()
        self._stop_requested = False

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

        self._world = new_world(
            self._config, self._catalog, log=EventLog(self._config.log_message_limit)
        )
        self._systems: list[System] = [
            make_production_system(),
            make_invasion_system(self._schedule_combat),
            make_boss_system(self._schedule_combat),
            make_rounding_system(),
            make_achievement_system(),
        ]

    @property
    def world(self) -> World:
        return self._world

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def scheduler(self) -> DeferredScheduler:
        return self._scheduler

    @property
    def log(self) -> EventLog:
        return self._world.log

    @property
    def seed(self) -> int:
        return self._seed

    # -- Driving --

    def tick(self, dt: float | None = None) -> float:
        """Advance one tick by *dt* seconds, or by the measured elapsed time.

        Returns the dt that was applied.
        """
        if dt is None:
            dt = self._clock.measure()
        elif dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        self._clock.advance(dt)
        self._scheduler.advance(dt)
        ctx = self._clock.context(dt, self._rng)
        self._world.game_time += dt
        for system in self._systems:
            system(self._world, ctx)
        # Combat scheduled by this tick waits out its full delay.
        self._scheduler.run_due()
        return dt

    def run(self, n: int, dt: float | None = None) -> None:
        """Run *n* ticks back to back. *dt* defaults to the nominal interval."""
        step = dt if dt is not None else self._clock.interval
        self._stop_requested = False
        for _ in range(n):
            self.tick(step)
            if self._stop_requested:
                break

    def run_forever(self) -> None:
        """Tick in real time at the nominal interval until :meth:`stop`."""
        self._stop_requested = False
        self._clock.measure()
        interval = self._clock.interval
        while not self._stop_requested:
            start = time.monotonic()
            self.tick()
            elapsed = time.monotonic() - start
            sleep_time = interval - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

    def stop(self) -> None:
        self._stop_requested = True

    # -- Combat scheduling --

    def _schedule_combat(self, world: World, intruder: IntruderInstance) -> None:
        def resolve() -> None:
            if world is not self._world:
                return
            outcome = resolve_combat(world, intruder.id, self._rng)
            if outcome is CombatOutcome.DEFEAT:
                self._reset_after_defeat()
            elif outcome is not CombatOutcome.MISSING:
                progression.check_achievements(world)

        self._scheduler.schedule(
            self._config.combat_delay, f"combat:{intruder.id}", resolve
        )

    def _reset_after_defeat(self) -> None:
        old = self._world
        dropped = self._scheduler.cancel_all()
        logger.debug("core destroyed, dropped %d pending resolutions", dropped)
        self._world = new_world(
            self._config, self._catalog,
            log=old.log, prestige=old.prestige, achievements=old.achievements,
        )
        self._world.emit("reset", "Dungeon core destroyed! Starting anew...")

    # -- Commands --

    def _after_command(self, ok: bool) -> bool:
        if ok:
            progression.check_achievements(self._world)
        return ok

    def spawn(self, type_key: str) -> bool:
        return self._after_command(progression.spawn(self._world, type_key) is not None)

    def upgrade_dungeon(self) -> bool:
        return self._after_command(progression.upgrade_dungeon(self._world))

    def evolve(self, creature_id: CreatureId, target: str) -> bool:
        return self._after_command(evolution.evolve(self._world, creature_id, target))

    def fusion_evolve(
        self, parent_id1: CreatureId, parent_id2: CreatureId, target: str
    ) -> bool:
        return self._after_command(
            evolution.fusion_evolve(self._world, parent_id1, parent_id2, target)
        )

    def evolve_ready(self, type_key: str, target: str) -> bool:
        """Evolve the first eligible creature of *type_key* into *target*."""
        creature = evolution.first_ready(self._world, type_key)
        if creature is None:
            logger.debug("evolve_ready: no eligible %r", type_key)
            return False
        return self.evolve(creature.id, target)

    def fuse_ready(self, target: str) -> bool:
        """Fuse the first eligible pair of parents for *target*."""
        if not self._catalog.has_creature(target):
            return False
        parents = evolution.find_fusion_parents(self._world, target)
        if parents is None:
            logger.debug("fuse_ready: no eligible parents for %r", target)
            return False
        first, second = parents
        return self.fusion_evolve(first.id, second.id, target)

    def unlock_habitat(self, key: str) -> bool:
        return self._after_command(progression.unlock_habitat(self._world, key))

    def prestige(self) -> bool:
        fresh = progression.prestige(self._world)
        if fresh is None:
            return False
        dropped = self._scheduler.cancel_all()
        logger.debug("prestige dropped %d pending resolutions", dropped)
        self._world = fresh
        return True

    def purchase_prestige_bonus(self, kind: PrestigeBonus | str) -> bool:
        if not isinstance(kind, PrestigeBonus):
            try:
                kind = PrestigeBonus(kind)
            except ValueError:
                logger.debug("prestige bonus: unknown kind %r", kind)
                return False
        return self._after_command(progression.purchase_prestige_bonus(self._world, kind))

    def equip_item(self, loot_id: int) -> bool:
        return self._after_command(progression.equip_item(self._world, loot_id))

    # -- Queries --

    def resources(self) -> dict[str, float]:
        return snapshot.resources(self._world)

    def dungeon_status(self) -> dict[str, Any]:
        return snapshot.dungeon_status(self._world)

    def roster(self, grouped: bool = False) -> list[dict[str, Any]]:
        return snapshot.roster(self._world, grouped)

    def pending_intruders(self) -> list[dict[str, Any]]:
        return snapshot.pending_intruders(self._world)

    def habitats(self) -> list[dict[str, Any]]:
        return snapshot.habitats(self._world)

    def evolution_options(self) -> list[dict[str, Any]]:
        return evolution.evolution_options(self._world)

    def prestige_status(self) -> dict[str, Any]:
        return snapshot.prestige_status(self._world)

    def achievements(self) -> dict[str, Any]:
        return snapshot.achievements(self._world)

    def equipment(self) -> dict[str, Any]:
        return snapshot.equipment(self._world)

    def log_messages(self) -> list[str]:
        return snapshot.log_messages(self._world)

    def snapshot(self) -> dict[str, Any]:
        return snapshot.snapshot(self._world)
