"""System factories run by the simulation once per tick."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tick_dungeon.abilities import process_ability
from tick_dungeon.bonuses import production_rates
from tick_dungeon.catalog import STARTER_TYPE
from tick_dungeon.combat import pick_boss, pick_intruder, spawn_intruder
from tick_dungeon.evolution import age_creature
from tick_dungeon.progression import check_achievements

if TYPE_CHECKING:
    from tick_dungeon.clock import TickContext
    from tick_dungeon.world import IntruderInstance, World

System = Callable[["World", "TickContext"], None]


def make_production_system() -> System:
    """Return a system that ages creatures, produces resources and runs abilities.

    Creatures spawned by abilities during the tick start producing on the
    next tick.
    """

    def production_system(world: World, ctx: TickContext) -> None:
        slimes = sum(
            1 for c in world.creatures if c.type == STARTER_TYPE or "Slime" in c.name
        )
        if slimes:
            world.ledger.add({"biomass": slimes * world.config.slime_colony_rate * ctx.dt})

        for creature in list(world.creatures):
            age_creature(world, creature, ctx.dt)
            delta = {
                name: rate * ctx.dt
                for name, rate in production_rates(world, creature).items()
            }
            world.ledger.add(delta)
            process_ability(world, creature, ctx.dt)

    return production_system


def make_invasion_system(on_spawn: Callable[[World, IntruderInstance], None]) -> System:
    """Return a system that counts down to the next invasion.

    ``on_spawn(world, intruder)`` fires for every new intruder so the caller
    can schedule its combat.
    """

    def invasion_system(world: World, ctx: TickContext) -> None:
        world.invasion_timer -= ctx.dt
        if world.invasion_timer > 0:
            return
        intruder = spawn_intruder(world, pick_intruder(world, ctx.random))
        world.invasion_timer = (
            world.config.invasion_base_timer
            + ctx.random.random() * world.config.invasion_random_range
        )
        on_spawn(world, intruder)

    return invasion_system


def make_boss_system(on_spawn: Callable[[World, IntruderInstance], None]) -> System:
    def boss_system(world: World, ctx: TickContext) -> None:
        world.boss_timer -= ctx.dt
        if world.boss_timer > 0:
            return
        intruder = spawn_intruder(world, pick_boss(world, ctx.random))
        world.boss_timer += world.config.boss_interval
        on_spawn(world, intruder)

    return boss_system


def make_rounding_system() -> System:
    def rounding_system(world: World, ctx: TickContext) -> None:
        world.ledger.round_all()

    return rounding_system


def make_achievement_system() -> System:
    def achievement_system(world: World, ctx: TickContext) -> None:
        check_achievements(world)

    return achievement_system
