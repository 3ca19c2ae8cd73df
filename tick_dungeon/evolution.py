"""Evolution eligibility, single evolution, and fusion evolution."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tick_dungeon.abilities import ability_description
from tick_dungeon.types import CreatureId, PrestigeBonus

if TYPE_CHECKING:
    from tick_dungeon.world import CreatureInstance, World

logger = logging.getLogger(__name__)


def age_creature(world: World, creature: CreatureInstance, dt: float) -> None:
    """Add scaled age and raise the eligibility flag once old enough."""
    creature.age += dt * world.prestige_multiplier(PrestigeBonus.EVOLUTION_SPEED)
    if (
        not creature.evolution_ready
        and creature.age >= world.config.evolution_age_threshold
        and world.type_def(creature).evolves_to
    ):
        creature.evolution_ready = True


def is_eligible(world: World, creature: CreatureInstance) -> bool:
    return (
        creature.evolution_ready
        and creature.age >= world.config.evolution_age_threshold
    )


def evolve(world: World, creature_id: CreatureId, target: str) -> bool:
    """Evolve one creature into *target*. Returns False and changes nothing
    if any precondition fails."""
    creature = world.creature(creature_id)
    if creature is None:
        logger.debug("evolve: no creature %s", creature_id)
        return False
    if not world.catalog.has_creature(target):
        logger.debug("evolve: unknown target %r", target)
        return False
    defn = world.catalog.creature(target)
    if target not in world.type_def(creature).evolves_to or defn.is_fusion:
        logger.debug("evolve: %s cannot evolve into %r", creature.type, target)
        return False
    if not is_eligible(world, creature):
        logger.debug("evolve: creature %d is not ready", creature.id)
        return False
    if not world.ledger.deduct(defn.cost):
        logger.debug("evolve: cannot afford %r", target)
        return False

    world.apply_type(creature, target)
    world.achievements.stats.evolutions += 1
    world.emit("evolution", f"Monster evolved into {creature.name}!",
               creature=creature.id, type=target)
    return True


def fusion_evolve(
    world: World, parent_id1: CreatureId, parent_id2: CreatureId, target: str
) -> bool:
    """Fuse two eligible parents into *target*.

    The first parent is transformed in place and keeps its id; the second
    is removed from the world.
    """
    if parent_id1 == parent_id2:
        return False
    first = world.creature(parent_id1)
    second = world.creature(parent_id2)
    if first is None or second is None:
        logger.debug("fusion: missing parent %s/%s", parent_id1, parent_id2)
        return False
    if not world.catalog.has_creature(target):
        return False
    defn = world.catalog.creature(target)
    if defn.fusion_parents is None:
        logger.debug("fusion: %r is not a fusion type", target)
        return False
    if sorted((first.type, second.type)) != sorted(defn.fusion_parents):
        logger.debug("fusion: %s + %s does not make %r", first.type, second.type, target)
        return False
    if not (is_eligible(world, first) and is_eligible(world, second)):
        logger.debug("fusion: parents not ready")
        return False
    if not world.ledger.deduct(defn.cost):
        logger.debug("fusion: cannot afford %r", target)
        return False

    world.apply_type(first, target)
    world.remove_creature(second.id)
    world.achievements.stats.evolutions += 1
    world.emit("fusion", f"Fusion successful! {first.name} emerged from the fusion!",
               creature=first.id, consumed=parent_id2, type=target)
    return True


def first_ready(world: World, type_key: str) -> CreatureInstance | None:
    """First eligible creature of *type_key* in insertion order."""
    for creature in world.creatures:
        if creature.type == type_key and is_eligible(world, creature):
            return creature
    return None


def find_fusion_parents(
    world: World, target: str
) -> tuple[CreatureInstance, CreatureInstance] | None:
    defn = world.catalog.creature(target)
    if defn.fusion_parents is None:
        return None
    first_type, second_type = defn.fusion_parents
    first = first_ready(world, first_type)
    second = first_ready(world, second_type)
    if first is None or second is None:
        return None
    return first, second


def evolution_options(world: World) -> list[dict[str, Any]]:
    """Evolution paths for every creature type currently owned.

    Groups are ordered with the starter slime first, then alphabetically.
    """
    groups: dict[str, list[CreatureInstance]] = {}
    for creature in world.creatures:
        groups.setdefault(creature.type, []).append(creature)

    keys = sorted(groups, key=lambda k: (k != "slime", k))
    result: list[dict[str, Any]] = []
    for type_key in keys:
        defn = world.catalog.creature(type_key)
        if not defn.evolves_to:
            continue
        members = groups[type_key]
        ready = sum(1 for c in members if is_eligible(world, c))
        paths: list[dict[str, Any]] = []
        for target in defn.evolves_to:
            tdef = world.catalog.creature(target)
            can_afford = world.ledger.can_afford(tdef.cost)
            if tdef.fusion_parents is not None:
                has_creatures = find_fusion_parents(world, target) is not None
                a, b = tdef.fusion_parents
                requirements = (
                    f"Need: {world.catalog.creature(a).name} + "
                    f"{world.catalog.creature(b).name}"
                )
            else:
                has_creatures = ready > 0
                requirements = ""
            paths.append({
                "target": target,
                "name": tdef.name,
                "is_fusion": tdef.is_fusion,
                "fusion_parents": tdef.fusion_parents,
                "requirements": requirements,
                "cost": dict(tdef.cost),
                "health": tdef.health,
                "attack": tdef.attack,
                "rates": dict(tdef.rates),
                "ability": ability_description(tdef.special),
                "can_afford": can_afford,
                "has_creatures": has_creatures,
                "available": can_afford and has_creatures,
            })
        result.append({
            "type": type_key,
            "name": members[0].name,
            "total": len(members),
            "ready": ready,
            "paths": paths,
        })
    return result
