"""tick-dungeon - tick-driven simulation core for an incremental dungeon game."""

from tick_dungeon.catalog import Catalog
from tick_dungeon.clock import Clock, TickContext
from tick_dungeon.config import DungeonConfig
from tick_dungeon.events import Event, EventLog
from tick_dungeon.ledger import ResourceLedger
from tick_dungeon.scheduler import DeferredScheduler, DeferredTask
from tick_dungeon.simulation import Simulation
from tick_dungeon.types import (
    BonusChannel,
    CatalogError,
    CombatOutcome,
    CreatureId,
    EquipmentSlot,
    IntruderSpecial,
    MajorUpgrade,
    PrestigeBonus,
    Rarity,
    Special,
)
from tick_dungeon.world import CreatureInstance, IntruderInstance, World, new_world

__all__ = [
    "Simulation",
    "World",
    "new_world",
    "DungeonConfig",
    "Catalog",
    "Clock",
    "TickContext",
    "DeferredScheduler",
    "DeferredTask",
    "Event",
    "EventLog",
    "ResourceLedger",
    "CreatureInstance",
    "IntruderInstance",
    "CreatureId",
    "Special",
    "IntruderSpecial",
    "MajorUpgrade",
    "PrestigeBonus",
    "Rarity",
    "EquipmentSlot",
    "BonusChannel",
    "CombatOutcome",
    "CatalogError",
]
