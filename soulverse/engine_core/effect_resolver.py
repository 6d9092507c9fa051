"""
Effect Resolver - LIFO stack of triggered card abilities.

This module handles:
- Collecting the abilities a card fires for a trigger (push_triggers)
- Picking a target when the caller did not supply one
- Draining the stack most-recent-first (resolve_stack)
- Applying DEAL_DAMAGE, HEAL, BUFF_STATS and DRAW_CARD

Resolution is synchronous and may re-enter: damage that kills a creature
fires its ON_DEATH abilities, which are pushed and drained before the
outer resolution continues. Callers of the engine therefore only ever
observe an empty stack.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, TYPE_CHECKING

from ..card_schema import Ability, AbilityTrigger, EffectType, TargetRequirement
from .state import CardInstance, GameStatus, PlayerDuelState

if TYPE_CHECKING:
    from .duel_engine import DuelEngine

logger = logging.getLogger(__name__)


class ResolverState(Enum):
    """State of the effect resolver."""
    READY = "ready"  # Stack empty, nothing resolving
    RESOLVING = "resolving"  # Inside resolve_stack


@dataclass
class PendingEffect:
    """One stack entry: an ability waiting to resolve."""
    source_id: str
    ability: Ability
    controller_id: str | None  # Owner of the source card when pushed
    target_id: str | None = None


@dataclass
class EffectResolver:
    """
    Owns the effect stack of a single duel.

    The resolver mutates the engine's state in place; it never
    raises for a missing target, the effect simply does nothing.
    """
    engine: DuelEngine
    stack: list[PendingEffect] = field(default_factory=list)
    state: ResolverState = ResolverState.READY
    resolved: list[PendingEffect] = field(default_factory=list)  # Resolution order, oldest first
    _depth: int = field(default=0, init=False, repr=False)

    def push_triggers(
        self,
        source: CardInstance,
        trigger: AbilityTrigger,
        manual_target_id: str | None = None,
    ) -> int:
        """
        Push one entry per ability of source matching trigger, in list order.

        Returns the number of entries pushed. PASSIVE abilities never fire.
        """
        if trigger is AbilityTrigger.PASSIVE:
            return 0

        owner = self.engine.owner_of(source.runtime_id)
        controller_id = owner.player_id if owner else None

        pushed = 0
        for ability in source.abilities_for(trigger):
            target_id = self.select_target(ability, source, controller_id, manual_target_id)
            self.stack.append(PendingEffect(
                source_id=source.runtime_id,
                ability=ability,
                controller_id=controller_id,
                target_id=target_id,
            ))
            pushed += 1
            logger.debug(
                "Pushed %s %s(%d) from %s -> %s",
                trigger.value, ability.effect_type.value, ability.value, source.name, target_id,
            )
        return pushed

    def select_target(
        self,
        ability: Ability,
        source: CardInstance,
        controller_id: str | None,
        manual_target_id: str | None = None,
    ) -> str | None:
        """
        Pick the target id for an ability.

        SELF is always the source and NONE never has a target. Otherwise
        a manual target wins, then the automatic first valid target:
        the first enemy battlefield creature for ENEMY_CREATURE and the
        opponent for ENEMY_PLAYER. ALLY_CREATURE has no automatic pick.
        """
        requirement = ability.target_requirement
        if requirement is TargetRequirement.SELF:
            return source.runtime_id
        if requirement is TargetRequirement.NONE:
            return None
        if manual_target_id is not None:
            return manual_target_id

        opponent = self.engine.get_opponent(controller_id) if controller_id else None
        if opponent is None:
            return None
        if requirement is TargetRequirement.ENEMY_CREATURE:
            first = opponent.battlefield.get_at(0)
            return first.runtime_id if first else None
        if requirement is TargetRequirement.ENEMY_PLAYER:
            return opponent.player_id
        return None

    def resolve_stack(self) -> int:
        """
        Pop and resolve entries until the stack is empty.

        Once the duel is FINISHED any remaining entries are discarded.
        Returns the number of entries resolved by this call.
        """
        self.state = ResolverState.RESOLVING
        self._depth += 1
        count = 0
        try:
            while self.stack:
                if self.engine.game_status is GameStatus.FINISHED:
                    logger.debug("Duel finished; discarding %d pending effect(s)", len(self.stack))
                    self.stack.clear()
                    break
                effect = self.stack.pop()
                self.resolve_ability(effect)
                count += 1
        finally:
            self._depth -= 1
            if self._depth == 0:
                self.state = ResolverState.READY
        return count

    def resolve_ability(self, effect: PendingEffect) -> None:
        """Apply a single stack entry to its target."""
        self.resolved.append(effect)
        target = self._lookup_target(effect.target_id)

        handlers: dict[EffectType, Callable] = {
            EffectType.DEAL_DAMAGE: self._apply_damage,
            EffectType.HEAL: self._apply_heal,
            EffectType.BUFF_STATS: self._apply_buff,
            EffectType.DRAW_CARD: self._apply_draw,
        }

        handler = handlers.get(effect.ability.effect_type)
        if not handler:
            logger.warning("Unknown effect type: %s", effect.ability.effect_type)
            return

        handler(effect, target)

    def _lookup_target(self, target_id: str | None) -> CardInstance | PlayerDuelState | None:
        if target_id is None:
            return None
        player = self.engine.get_player(target_id)
        if player is not None:
            return player
        return self.engine.find_card(target_id)

    # ========================================================================
    # Effect handlers
    # ========================================================================

    def _apply_damage(self, effect: PendingEffect, target) -> None:
        value = effect.ability.value
        if isinstance(target, CardInstance):
            if target.take_damage(value):
                self.engine.handle_card_death(target)
        elif isinstance(target, PlayerDuelState):
            target.take_damage(value)
            self.engine.check_win_condition()
        else:
            logger.debug("DEAL_DAMAGE from %s found no target", effect.source_id)

    def _apply_heal(self, effect: PendingEffect, target) -> None:
        if target is None:
            logger.debug("HEAL from %s found no target", effect.source_id)
            return
        target.heal(effect.ability.value)

    def _apply_buff(self, effect: PendingEffect, target) -> None:
        if not isinstance(target, CardInstance):
            logger.debug("BUFF_STATS from %s found no creature", effect.source_id)
            return
        value = effect.ability.value
        target.attack += value
        target.health += value
        target.max_health += value

    def _apply_draw(self, effect: PendingEffect, target) -> None:
        player = self.engine.get_player(effect.controller_id) if effect.controller_id else None
        if player is None:
            player = self.engine.get_active_player()
        if player is not None:
            player.draw_card(effect.ability.value)
