"""Per-creature timed special abilities."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tick_dungeon.catalog import ABILITY_TEXT
from tick_dungeon.types import Special

if TYPE_CHECKING:
    from tick_dungeon.world import CreatureInstance, World

logger = logging.getLogger(__name__)

SPAWN_MINIONS_INTERVAL = 120.0
RESOURCE_CONVERSION_INTERVAL = 30.0
TOXIC_MASTERY_INTERVAL = 90.0
CRYSTAL_MASTERY_INTERVAL = 20.0

RESOURCE_CONVERSION = ({"biomass": 5.0}, {"mana": 2.0, "nutrients": 1.0})
CRYSTAL_CONVERSION = ({"biomass": 10.0}, {"mana": 5.0, "nutrients": 3.0})

APEX_RAGE_SCALE = 1.5


def spawn_minion(world: World, type_key: str) -> CreatureInstance:
    """Create a reduced-stat minion of *type_key*. Costs nothing."""
    return world.create_creature(type_key, minion=True)


def _spawning(type_key: str, interval: float) -> Callable[[World, CreatureInstance], None]:
    def handler(world: World, creature: CreatureInstance) -> None:
        if creature.ability_timer >= interval:
            creature.ability_timer = 0.0
            minion = spawn_minion(world, type_key)
            world.emit("minion", f"{creature.name} spawned a {minion.name}!",
                       parent=creature.id, minion=minion.id)

    return handler


def _converting(
    conversion: tuple[dict[str, float], dict[str, float]], interval: float
) -> Callable[[World, CreatureInstance], None]:
    cost, gain = conversion

    def handler(world: World, creature: CreatureInstance) -> None:
        if creature.ability_timer >= interval and world.ledger.can_afford(cost):
            creature.ability_timer = 0.0
            world.ledger.deduct(cost)
            world.ledger.add(gain)
            logger.debug("creature %d converted %s into %s", creature.id, cost, gain)

    return handler


def _raging(scale: float) -> Callable[[World, CreatureInstance], None]:
    def handler(world: World, creature: CreatureInstance) -> None:
        fraction = creature.health / creature.max_health if creature.max_health else 0.0
        creature.rage_bonus = 1 + (1 - fraction) * scale

    return handler


def _passive(world: World, creature: CreatureInstance) -> None:
    """Abilities that only matter during combat or on display."""


_HANDLERS: dict[Special, Callable[[World, CreatureInstance], None]] = {
    Special.SPAWN_MINIONS: _spawning("slime", SPAWN_MINIONS_INTERVAL),
    Special.RESOURCE_CONVERSION: _converting(
        RESOURCE_CONVERSION, RESOURCE_CONVERSION_INTERVAL),
    Special.RAGE: _raging(1.0),
    Special.TOXIC_MASTERY: _spawning("poison_slime", TOXIC_MASTERY_INTERVAL),
    Special.CRYSTAL_MASTERY: _converting(CRYSTAL_CONVERSION, CRYSTAL_MASTERY_INTERVAL),
    Special.APEX_MASTERY: _raging(APEX_RAGE_SCALE),
    Special.POISON_AURA: _passive,
    Special.CRYSTAL_ARMOR: _passive,
    Special.LEADERSHIP: _passive,
}


def process_ability(world: World, creature: CreatureInstance, dt: float) -> None:
    """Advance one creature's ability timer by *dt* and fire its ability."""
    special = world.type_def(creature).special
    if special is None:
        return
    creature.ability_timer += dt
    _HANDLERS[special](world, creature)


def ability_description(special: Special | None) -> str:
    if special is None:
        return ""
    return ABILITY_TEXT[special]
