"""Read-only snapshot builders for display layers.

Every function returns fresh plain data (dicts, lists, numbers, strings)
and never mutates the world, so repeated calls without an intervening
command or tick return equal results.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tick_dungeon.abilities import ability_description
from tick_dungeon.bonuses import effective_max_health, production_rates
from tick_dungeon.catalog import MAJOR_UPGRADE_TEXT
from tick_dungeon.evolution import evolution_options, is_eligible
from tick_dungeon.progression import (
    can_prestige,
    prestige_reward,
    slime_cost,
    upgrade_benefits,
)

if TYPE_CHECKING:
    from tick_dungeon.world import CreatureInstance, World


def resources(world: World) -> dict[str, float]:
    return world.ledger.as_dict()


def dungeon_status(world: World) -> dict[str, Any]:
    benefits = upgrade_benefits(world)
    next_major = benefits["next_major"]
    return {
        "health": world.dungeon.health,
        "max_health": effective_max_health(world),
        "base_max_health": world.dungeon.max_health,
        "level": world.dungeon.level,
        "resource_bonus_percent": benefits["current_resource_bonus"],
        "upgrade_cost": benefits["cost"],
        "can_upgrade": world.ledger.can_afford(benefits["cost"]),
        "next_major": MAJOR_UPGRADE_TEXT[next_major][0] if next_major else None,
        "levels_to_major": benefits["levels_to_major"],
        "invasion_timer": world.invasion_timer,
        "boss_timer": world.boss_timer,
        "game_time": world.game_time,
        "slime_cost": slime_cost(world),
        "slimes_purchased": world.slimes_purchased,
        "bonuses": {
            "synergy_rate": world.bonuses.synergy_rate,
            "crystal": world.bonuses.crystal,
            "combat": world.bonuses.combat,
            "toxic": world.bonuses.toxic,
        },
    }


def _creature(world: World, creature: CreatureInstance) -> dict[str, Any]:
    return {
        "id": creature.id,
        "type": creature.type,
        "name": creature.name,
        "health": creature.health,
        "max_health": creature.max_health,
        "attack": creature.attack,
        "age": creature.age,
        "evolution_ready": is_eligible(world, creature),
        "is_minion": creature.is_minion,
        "crystal_boosted": creature.crystal_boosted,
        "production": production_rates(world, creature),
        "ability": ability_description(world.type_def(creature).special),
    }


def roster(world: World, grouped: bool = False) -> list[dict[str, Any]]:
    """Creatures in insertion order, or one entry per type when *grouped*."""
    flat = [_creature(world, c) for c in world.creatures]
    if not grouped:
        return flat

    groups: dict[str, dict[str, Any]] = {}
    for entry in flat:
        group = groups.get(entry["type"])
        if group is None:
            group = groups[entry["type"]] = {
                "type": entry["type"],
                "name": entry["name"],
                "count": 0,
                "ready": 0,
                "ages": [],
                "production": {},
                "ids": [],
            }
        group["count"] += 1
        group["ready"] += 1 if entry["evolution_ready"] else 0
        group["ages"].append(entry["age"])
        group["ids"].append(entry["id"])
        for name, rate in entry["production"].items():
            group["production"][name] = group["production"].get(name, 0.0) + rate

    result: list[dict[str, Any]] = []
    for group in groups.values():
        ages = group.pop("ages")
        group["avg_age"] = sum(ages) / len(ages)
        result.append(group)
    return result


def pending_intruders(world: World) -> list[dict[str, Any]]:
    return [
        {
            "id": i.id,
            "name": i.name,
            "health": i.health,
            "max_health": i.max_health,
            "attack": i.attack,
            "loot": dict(i.loot),
            "special": i.special.value if i.special else None,
            "is_boss": i.is_boss,
            "spawned_at": i.spawned_at,
        }
        for i in world.intruders
    ]


def habitats(world: World) -> list[dict[str, Any]]:
    result: list[dict[str, Any]] = []
    for key in world.catalog.habitat_keys():
        defn = world.catalog.habitat(key)
        unlocked = world.habitats.get(key, False)
        result.append({
            "key": key,
            "name": defn.name,
            "unlocked": unlocked,
            "capacity": defn.capacity,
            "bonus": dict(defn.bonus),
            "cost": dict(defn.cost) if defn.cost else {},
            "can_afford": unlocked or world.ledger.can_afford(defn.cost or {}),
            "residents": sum(
                1 for c in world.creatures if world.type_def(c).habitat == key
            ),
        })
    return result


def prestige_status(world: World) -> dict[str, Any]:
    state = world.prestige
    return {
        "level": state.level,
        "essence": state.essence,
        "available": can_prestige(world),
        "reward": prestige_reward(world),
        "min_level": world.config.prestige_min_level,
        "bonuses": [
            {
                "kind": defn.kind.value,
                "name": defn.name,
                "cost": defn.cost,
                "effect": defn.effect,
                "level": state.purchased(defn.kind),
                "can_afford": state.essence >= defn.cost,
            }
            for defn in world.catalog.prestige_bonuses()
        ],
    }


def achievements(world: World) -> dict[str, Any]:
    state = world.achievements
    stats = state.stats
    return {
        "achievements": [
            {
                "key": defn.key,
                "name": defn.name,
                "description": defn.description,
                "reward": defn.reward,
                "unlocked": state.has(defn.key),
            }
            for defn in world.catalog.achievements()
        ],
        "stats": {
            "evolutions": stats.evolutions,
            "intruders_defeated": stats.intruders_defeated,
            "bosses_defeated": stats.bosses_defeated,
            "invasions_survived": stats.invasions_survived,
            "prestiges": stats.prestiges,
            "types_reached": sorted(stats.types_reached),
            "habitats_unlocked": stats.habitats_unlocked,
            "peak_synergy": stats.peak_synergy,
        },
    }


def equipment(world: World) -> dict[str, Any]:
    def describe(loot: Any) -> dict[str, Any]:
        return {
            "id": loot.id,
            "name": loot.item.name,
            "slot": loot.item.slot.value,
            "rarity": loot.item.rarity.value,
            "channel": loot.item.channel.value,
            "multiplier": loot.item.multiplier,
        }

    return {
        "slots": {
            slot.value: describe(loot) if loot is not None else None
            for slot, loot in world.equipment.slots.items()
        },
        "pending": [describe(loot) for loot in world.equipment.pending],
    }


def log_messages(world: World) -> list[str]:
    return world.log.messages()


def snapshot(world: World) -> dict[str, Any]:
    """Every query at once."""
    return {
        "resources": resources(world),
        "dungeon": dungeon_status(world),
        "roster": roster(world),
        "intruders": pending_intruders(world),
        "habitats": habitats(world),
        "evolution_options": evolution_options(world),
        "prestige": prestige_status(world),
        "achievements": achievements(world),
        "equipment": equipment(world),
        "log": log_messages(world),
    }
