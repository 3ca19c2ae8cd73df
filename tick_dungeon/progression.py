"""Dungeon levels, spawning, habitats, prestige, achievements, and loot."""
from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, Any, Callable

from tick_dungeon.bonuses import effective_max_health, is_crystal, peak_synergy
from tick_dungeon.catalog import MAJOR_UPGRADE_CYCLE, MAJOR_UPGRADE_TEXT, STARTER_TYPE
from tick_dungeon.types import (
    RESOURCES,
    EquipmentSlot,
    MajorUpgrade,
    PrestigeBonus,
    Rarity,
)
from tick_dungeon.world import AchievementState, LootItem, PrestigeState, new_world

if TYPE_CHECKING:
    from tick_dungeon.world import CreatureInstance, World

logger = logging.getLogger(__name__)

MAJOR_UPGRADE_EVERY = 5
CRYSTAL_STEP = 0.5
COMBAT_STEP = 0.25
TOXIC_STEP = 0.3
SYNERGY_STEP = 0.1


# --- Spawning ---

def slime_cost(world: World) -> dict[str, float]:
    """Starter slime price grows by ``slime_price_growth`` per purchase."""
    base = world.catalog.creature(STARTER_TYPE).cost["biomass"]
    growth = world.config.slime_price_growth ** world.slimes_purchased
    return {"biomass": math.ceil(base * growth)}


def spawn_cost(world: World, type_key: str) -> dict[str, float]:
    if type_key == STARTER_TYPE:
        return slime_cost(world)
    return dict(world.catalog.creature(type_key).cost)


def spawn(world: World, type_key: str) -> CreatureInstance | None:
    """Buy a new creature. Returns None (no change) if unknown or unaffordable."""
    if not world.catalog.has_creature(type_key):
        logger.debug("spawn: unknown type %r", type_key)
        return None
    if not world.ledger.deduct(spawn_cost(world, type_key)):
        logger.debug("spawn: cannot afford %r", type_key)
        return None
    if type_key == STARTER_TYPE:
        world.slimes_purchased += 1
    creature = world.create_creature(type_key)
    world.emit("spawn", f"Spawned {creature.name}!", creature=creature.id)
    return creature


# --- Dungeon level ---

def upgrade_cost(world: World) -> dict[str, float]:
    cost = math.floor(world.config.upgrade_base_cost * world.dungeon.level ** 3)
    return {world.config.upgrade_resource: cost}


def major_upgrade_for(level: int) -> MajorUpgrade | None:
    """Major upgrade granted on reaching *level*, if any."""
    if level <= 0 or level % MAJOR_UPGRADE_EVERY != 0:
        return None
    index = (level // MAJOR_UPGRADE_EVERY - 1) % len(MAJOR_UPGRADE_CYCLE)
    return MAJOR_UPGRADE_CYCLE[index]


def upgrade_benefits(world: World) -> dict[str, Any]:
    level = world.dungeon.level
    step = world.config.dungeon_level_bonus * 100
    next_major = major_upgrade_for(level + 1)
    return {
        "next_level": level + 1,
        "cost": upgrade_cost(world),
        "health_increase": world.config.health_per_level,
        "current_resource_bonus": round((level - 1) * step),
        "next_resource_bonus": round(level * step),
        "next_major": next_major,
        "levels_to_major": MAJOR_UPGRADE_EVERY - (level + 1) % MAJOR_UPGRADE_EVERY
        if next_major is None else 0,
    }


def apply_major_upgrade(world: World, upgrade: MajorUpgrade) -> None:
    bonuses = world.bonuses
    if upgrade is MajorUpgrade.CRYSTAL_ENHANCEMENT:
        bonuses.crystal += CRYSTAL_STEP
        for creature in world.creatures:
            if is_crystal(creature.type):
                creature.crystal_boosted = True
    elif upgrade is MajorUpgrade.COMBAT_MASTERY:
        bonuses.combat += COMBAT_STEP
    elif upgrade is MajorUpgrade.TOXIC_EVOLUTION:
        bonuses.toxic += TOXIC_STEP
    elif upgrade is MajorUpgrade.SYMBIOSIS_MASTERY:
        bonuses.synergy_rate += SYNERGY_STEP


def upgrade_dungeon(world: World) -> bool:
    if not world.ledger.deduct(upgrade_cost(world)):
        logger.debug("upgrade: cannot afford level %d", world.dungeon.level + 1)
        return False
    dungeon = world.dungeon
    dungeon.level += 1
    dungeon.max_health += world.config.health_per_level
    dungeon.health = effective_max_health(world)

    message = (
        f"Dungeon upgraded to level {dungeon.level}! "
        f"Max health: {dungeon.max_health}."
    )
    upgrade = major_upgrade_for(dungeon.level)
    if upgrade is not None:
        apply_major_upgrade(world, upgrade)
        title, description = MAJOR_UPGRADE_TEXT[upgrade]
        message += f" MAJOR UPGRADE: {title}! {description}."
    world.emit("upgrade", message, level=dungeon.level,
               major=upgrade.value if upgrade is not None else None)
    return True


# --- Habitats ---

def unlock_habitat(world: World, key: str) -> bool:
    if not world.catalog.has_habitat(key) or world.habitats.get(key, False):
        return False
    defn = world.catalog.habitat(key)
    if not world.ledger.deduct(defn.cost or {}):
        logger.debug("habitat: cannot afford %r", key)
        return False
    world.habitats[key] = True
    world.achievements.stats.habitats_unlocked += 1
    world.emit("habitat", f"Unlocked {defn.name}!", habitat=key)
    return True


# --- Prestige ---

def can_prestige(world: World) -> bool:
    return world.dungeon.level >= world.config.prestige_min_level


def prestige_reward(world: World) -> int:
    return world.dungeon.level // 2 + len(world.achievements.unlocked)


def prestige(world: World) -> World | None:
    """Reset with carryover. Returns the fresh world, or None if unavailable.

    Essence, prestige level, achievements and their stats carry over;
    everything else starts again from the seed state.
    """
    if not can_prestige(world):
        logger.debug("prestige: level %d is too low", world.dungeon.level)
        return None
    reward = prestige_reward(world)
    carried = PrestigeState(
        level=world.prestige.level + 1,
        essence=world.prestige.essence + reward,
        bonuses=dict(world.prestige.bonuses),
    )
    achievements = world.achievements
    achievements.stats.prestiges += 1
    fresh = new_world(
        world.config, world.catalog,
        log=world.log, prestige=carried, achievements=achievements,
    )
    fresh.emit("prestige",
               f"Prestige {carried.level}! Gained {reward} essence.",
               level=carried.level, reward=reward)
    check_achievements(fresh)
    return fresh


def purchase_prestige_bonus(world: World, kind: PrestigeBonus) -> bool:
    defn = world.catalog.prestige_bonus(kind)
    state = world.prestige
    if state.essence < defn.cost:
        logger.debug("prestige bonus %s: need %d essence", kind.value, defn.cost)
        return False
    state.essence -= defn.cost
    state.bonuses[kind] = state.bonuses.get(kind, 0) + 1
    world.emit("prestige_bonus",
               f"Purchased {defn.name} (level {state.bonuses[kind]}).",
               kind=kind.value, level=state.bonuses[kind])
    return True


# --- Achievements ---

ACHIEVEMENT_CHECKS: dict[str, Callable[[World], bool]] = {
    "first_evolution": lambda w: w.achievements.stats.evolutions >= 1,
    "monster_collector": lambda w: len(w.creatures) >= 10,
    "diverse_dungeon": lambda w: len(w.achievements.stats.types_reached) >= 10,
    "hero_slayer": lambda w: w.achievements.stats.intruders_defeated >= 10,
    "boss_slayer": lambda w: w.achievements.stats.bosses_defeated >= 1,
    "reborn": lambda w: w.achievements.stats.prestiges >= 1,
    "survivor": lambda w: w.achievements.stats.invasions_survived >= 100,
    "habitat_master": lambda w: all(w.habitats.values()),
    "hoarder": lambda w: all(w.ledger.get(r) >= 1000 for r in RESOURCES),
    "synergy_master": lambda w: w.achievements.stats.peak_synergy >= 1.5,
}


def check_achievements(world: World) -> list[str]:
    """Unlock every achievement whose condition now holds.

    Returns newly unlocked keys. Each grants its essence reward once.
    """
    state: AchievementState = world.achievements
    state.stats.peak_synergy = max(state.stats.peak_synergy, peak_synergy(world))

    unlocked: list[str] = []
    for defn in world.catalog.achievements():
        if state.has(defn.key):
            continue
        check = ACHIEVEMENT_CHECKS.get(defn.key)
        if check is None or not check(world):
            continue
        state.unlocked.append(defn.key)
        world.prestige.essence += defn.reward
        unlocked.append(defn.key)
        world.emit("achievement",
                   f"Achievement unlocked: {defn.name}! (+{defn.reward} essence)",
                   key=defn.key)
    return unlocked


# --- Loot and equipment ---

def roll_rarity(world: World, rng: random.Random) -> Rarity:
    roll = rng.random()
    if roll < world.config.epic_chance:
        return Rarity.EPIC
    if roll < world.config.epic_chance + world.config.rare_chance:
        return Rarity.RARE
    return Rarity.COMMON


def roll_loot(world: World, rng: random.Random) -> LootItem:
    rarity = roll_rarity(world, rng)
    slot = rng.choice(list(EquipmentSlot))
    loot = LootItem(id=world.allocate_id(), item=world.catalog.equipment(slot, rarity))
    world.equipment.pending.append(loot)
    world.emit("loot", f"Equipment drop: {loot.item.name} ({rarity.value})!",
               loot=loot.id, slot=slot.value, rarity=rarity.value)
    return loot


def equip_item(world: World, loot_id: int) -> bool:
    """Equip a pending drop, displacing whatever occupied its slot."""
    pending = world.equipment.pending
    for index, loot in enumerate(pending):
        if loot.id == loot_id:
            break
    else:
        logger.debug("equip: no pending loot %s", loot_id)
        return False
    del pending[index]
    world.equipment.slots[loot.item.slot] = loot
    world.dungeon.health = min(world.dungeon.health, effective_max_health(world))
    world.emit("equip", f"Equipped {loot.item.name}.",
               loot=loot.id, slot=loot.item.slot.value)
    return True
