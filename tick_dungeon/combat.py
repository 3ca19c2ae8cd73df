"""Intruder selection and auto-combat resolution."""
from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING

from tick_dungeon.bonuses import creature_attack, is_poison
from tick_dungeon.catalog import FALLBACK_INTRUDER
from tick_dungeon.progression import roll_loot
from tick_dungeon.types import (
    RESOURCES,
    CombatOutcome,
    IntruderSpecial,
    IntruderTypeDef,
    PrestigeBonus,
    Special,
)

if TYPE_CHECKING:
    from tick_dungeon.world import IntruderInstance, World

logger = logging.getLogger(__name__)

MANA_DRAIN = 10.0
POISON_DAMAGE = 2.0
HOLY_AURA_PENALTY = 0.1
HOLY_AURA_FLOOR = 0.5
CRYSTAL_ARMOR_FACTOR = 0.7


def pick_intruder(world: World, rng: random.Random) -> IntruderTypeDef:
    """Weighted draw over the intruder catalog.

    Boss-tier intruders drawn before ``boss_min_game_time`` are replaced
    by the fallback intruder.
    """
    candidates = world.catalog.intruders
    total = sum(defn.weight for defn in candidates)
    roll = rng.random() * total
    selected = candidates[0]
    for defn in candidates:
        roll -= defn.weight
        if roll <= 0:
            selected = defn
            break
    if selected.is_boss and world.game_time < world.config.boss_min_game_time:
        logger.debug("boss %r drawn too early, substituting", selected.name)
        selected = world.catalog.intruder(FALLBACK_INTRUDER)
    return selected


def pick_boss(world: World, rng: random.Random) -> IntruderTypeDef:
    return rng.choice(world.catalog.bosses)


def spawn_intruder(world: World, defn: IntruderTypeDef) -> IntruderInstance:
    intruder = world.add_intruder(defn)
    if intruder.is_boss:
        world.emit("boss", f"BOSS: {intruder.name} has invaded your dungeon!",
                   intruder=intruder.id)
    else:
        world.emit("invasion", f"{intruder.name} has invaded your dungeon!",
                   intruder=intruder.id)
    return intruder


def resolve_combat(
    world: World, intruder_id: int, rng: random.Random
) -> CombatOutcome:
    """Resolve one pending intruder and remove it from play.

    Returns ``MISSING`` without side effects if the intruder is not in this
    world. A ``DEFEAT`` outcome means the core was destroyed; the caller
    owns the reset.
    """
    intruder = world.intruder(intruder_id)
    if intruder is None:
        return CombatOutcome.MISSING

    if not world.creatures:
        outcome = _undefended(world, intruder)
    else:
        outcome = _defended(world, intruder, rng)

    world.remove_intruder(intruder.id)
    if outcome is not CombatOutcome.DEFEAT:
        world.achievements.stats.invasions_survived += 1
    return outcome


def _undefended(world: World, intruder: IntruderInstance) -> CombatOutcome:
    if intruder.special is IntruderSpecial.MANA_DRAIN:
        drained = world.ledger.take("mana", MANA_DRAIN)
        world.emit("drain", f"{intruder.name} drains {drained:g} mana!", amount=drained)

    world.dungeon.health -= intruder.attack
    world.emit("core_damage",
               f"{intruder.name} damages the dungeon core for {intruder.attack:g} damage!",
               damage=intruder.attack)
    if world.dungeon.health <= 0:
        return CombatOutcome.DEFEAT

    stolen: dict[str, float] = {}
    for name, amount in intruder.loot.items():
        stolen[name] = world.ledger.take(name, amount)
    world.emit("theft", f"{intruder.name} steals resources and leaves...", stolen=stolen)
    return CombatOutcome.THEFT


def _defended(
    world: World, intruder: IntruderInstance, rng: random.Random
) -> CombatOutcome:
    total = 0.0
    poison = 0.0
    for creature in world.creatures:
        total += creature_attack(world, creature)
        if world.type_def(creature).special is Special.POISON_AURA:
            poison += POISON_DAMAGE * world.bonuses.toxic
    if poison > 0:
        intruder.health -= poison
        world.emit("poison", f"Poison aura deals {poison:g} damage to {intruder.name}.",
                   damage=poison)

    if intruder.special is IntruderSpecial.HOLY_AURA:
        poisoners = sum(1 for c in world.creatures if is_poison(c.type))
        total *= max(HOLY_AURA_FLOOR, 1 - poisoners * HOLY_AURA_PENALTY)

    logger.debug("combat: attack %.2f vs %s health %.2f",
                 total, intruder.name, intruder.health)
    if total >= intruder.health:
        _reward(world, intruder, rng)
        return CombatOutcome.VICTORY

    damage_creatures(world, intruder)
    return CombatOutcome.ESCAPE


def _reward(world: World, intruder: IntruderInstance, rng: random.Random) -> None:
    stats = world.achievements.stats
    mult = world.prestige_multiplier(PrestigeBonus.HERO_REWARDS)
    world.ledger.add({name: amount * mult for name, amount in intruder.loot.items()})
    stats.intruders_defeated += 1
    world.emit("victory", f"Your monsters defeat {intruder.name}! Gained resources.",
               intruder=intruder.id)
    if not intruder.is_boss:
        return

    stats.bosses_defeated += 1
    grant = world.config.boss_bonus_grant
    world.ledger.add({name: grant for name in RESOURCES})
    world.emit("boss_bonus", "Bonus resources for defeating a boss!")
    if intruder.drops_equipment:
        roll_loot(world, rng)


def damage_creatures(world: World, intruder: IntruderInstance) -> None:
    """Spread the intruder's attack over creatures, weakest first.

    Each creature is assigned damage up to its remaining health. Armored
    creatures lose only part of it, and the rest carries on to the next
    creature.
    """
    remaining = intruder.attack
    for creature in sorted(world.creatures, key=lambda c: c.health):
        if remaining <= 0:
            break
        assigned = min(remaining, creature.health)
        loss = assigned
        if world.type_def(creature).special is Special.CRYSTAL_ARMOR:
            loss = math.floor(assigned * CRYSTAL_ARMOR_FACTOR)
        remaining -= loss
        creature.health -= loss
        if creature.health <= 0:
            world.remove_creature(creature.id)
            world.emit("death", f"{intruder.name} defeats {creature.name}!",
                       creature=creature.id)
    world.emit("escape", f"{intruder.name} damages your monsters and escapes!",
               intruder=intruder.id)
