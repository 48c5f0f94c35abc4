import copy
import logging
import threading
from typing import Dict, List, Optional

from scoreboard.models import House, RoundResult
from .catalog import (
    BOARD_LAYOUT,
    CARD_TYPES,
    COLORS,
    ITEM_TYPES,
    add_counts,
    normalize_color,
    to_non_negative_int,
)

logger = logging.getLogger(__name__)


class ScoringEngine:
    """One board session: houses, permanent color bonuses and round scoring.

    The engine is the single writer for its houses and bonus table. Callers
    read through ``houses``, ``color_bonuses`` and ``to_dict()`` and change
    state only through the mutating methods, each of which runs to completion
    under the engine lock.

    Unknown house indexes, colors or item keys are treated as no-ops: the
    method logs a warning and returns ``None`` instead of raising.
    """

    def __init__(self, item_types=ITEM_TYPES, card_types=CARD_TYPES, colors=COLORS, layout=BOARD_LAYOUT):
        self.item_types = tuple(item_types)
        self.card_types = tuple(card_types)
        self.colors = tuple(normalize_color(c) for c in colors)
        self.layout = tuple(layout)
        self._lock = threading.RLock()
        self._houses: List[House] = [self._make_empty_house(name, normalize_color(color)) for name, color in self.layout]
        self._color_bonuses: Dict[str, Dict[str, int]] = {}
        for color in self.colors:
            self._ensure_color_bonuses(color)
        self.current_round = 0
        self.round_history: List[RoundResult] = []

    # ---- state helpers ----

    def _empty_items(self) -> Dict[str, int]:
        return {d.key: 0 for d in self.item_types}

    def _empty_cards(self) -> Dict[str, int]:
        return {d.key: 0 for d in self.card_types}

    def _make_empty_house(self, name: str, color: str) -> House:
        return House(name=name, color=color, items=self._empty_items(), cards=self._empty_cards())

    def _ensure_color_bonuses(self, color: str) -> Dict[str, int]:
        if color not in self._color_bonuses:
            self._color_bonuses[color] = {d.key: 0 for d in self.item_types}
        return self._color_bonuses[color]

    @property
    def houses(self):
        return tuple(self._houses)

    @property
    def color_bonuses(self) -> Dict[str, Dict[str, int]]:
        return copy.deepcopy(self._color_bonuses)

    def house(self, index: int) -> Optional[House]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self._houses):
            return self._houses[index]
        return None

    # ---- scoring ----

    def _points_for(self, color: str, items: Dict[str, int], cards: Dict[str, int]) -> int:
        bonuses = self._color_bonuses.get(color, {})
        total = 0
        for item_type in self.item_types:
            count = items.get(item_type.key, 0)
            if not count:
                continue
            # Bonus is additive to the base unit and must be folded in before cards multiply it
            base_value = 1 + bonuses.get(item_type.key, 0)
            item_multiplier = 1
            for card_type in self.card_types:
                item_multiplier *= card_type.multiplier_for(item_type, cards.get(card_type.key, 0))
            total += count * base_value * item_multiplier
        return total

    def compute_house_points(self, house: House) -> int:
        with self._lock:
            house.points = self._points_for(house.color, house.items, house.cards)
            return house.points

    def compute_total_points(self) -> int:
        with self._lock:
            return sum(self.compute_house_points(h) for h in self._houses)

    # ---- mutations ----

    def apply_house_edit(self, house_index: int, item_counts, card_counts) -> Optional[House]:
        """Overwrite a house's items and cards in full, then rescore it."""
        with self._lock:
            house = self.house(house_index)
            if house is None:
                logger.warning(f"[house-edit] no-op: unknown house index={house_index!r}")
                return None
            item_counts = item_counts or {}
            card_counts = card_counts or {}
            items = {d.key: to_non_negative_int(item_counts.get(d.key)) for d in self.item_types}
            cards = {d.key: to_non_negative_int(card_counts.get(d.key)) for d in self.card_types}
            points = self._points_for(house.color, items, cards)
            house.items, house.cards, house.points = items, cards, points
            logger.info(f"[house-edit] house={house.name} points={house.points}")
            return house

    def apply_color_delta(self, color, item_deltas) -> Optional[List[House]]:
        """Add item deltas to every house of ``color``. Cards and bonuses are untouched."""
        color = normalize_color(color)
        with self._lock:
            if color not in self._color_bonuses:
                logger.warning(f"[color-delta] no-op: unknown color={color!r}")
                return None
            item_deltas = item_deltas or {}
            deltas = {d.key: to_non_negative_int(item_deltas.get(d.key)) for d in self.item_types}
            updates = []
            for house in self._houses:
                if house.color != color:
                    continue
                items = {key: add_counts(house.items.get(key, 0), delta) for key, delta in deltas.items()}
                updates.append((house, items, self._points_for(house.color, items, house.cards)))
            affected = []
            for house, items, points in updates:
                house.items, house.points = items, points
                affected.append(house)
            logger.info(f"[color-delta] color={color} houses={len(affected)}")
            return affected

    def toggle_color_bonus(self, color, item_key: str) -> Optional[int]:
        """Flip the permanent bonus for (color, item) between 0 and 1.

        Houses of that color are rescored immediately, since the bonus changes
        the base value of items already placed.
        """
        color = normalize_color(color)
        with self._lock:
            bonuses = self._color_bonuses.get(color)
            if bonuses is None or item_key not in bonuses:
                logger.warning(f"[bonus] no-op: unknown color={color!r} item={item_key!r}")
                return None
            bonuses[item_key] = 0 if bonuses[item_key] else 1
            for house in self._houses:
                if house.color == color:
                    self.compute_house_points(house)
            logger.info(f"[bonus] color={color} item={item_key} value={bonuses[item_key]}")
            return bonuses[item_key]

    def run_scoring_round(self) -> RoundResult:
        """Tally every house, then clear items and cards for the next round.

        Names, colors and the color bonus table carry over unchanged.
        """
        with self._lock:
            for house in self._houses:
                self.compute_house_points(house)
            total = self.compute_total_points()
            self.current_round += 1
            result = RoundResult(
                round_number=self.current_round,
                total=total,
                houses=tuple((h.name, h.color, h.points) for h in self._houses),
            )
            self.round_history.append(result)

            for house in self._houses:
                house.items = self._empty_items()
                house.cards = self._empty_cards()
                self.compute_house_points(house)
            logger.info(f"[round] round={result.round_number} total={total}")
            return result

    def reset_board(self) -> None:
        """Start over: clear houses, permanent bonuses and round history."""
        with self._lock:
            for house in self._houses:
                house.items = self._empty_items()
                house.cards = self._empty_cards()
                house.points = 0
            self._color_bonuses = {}
            for color in self.colors:
                self._ensure_color_bonuses(color)
            self.current_round = 0
            self.round_history = []
            logger.info("[board-reset] board cleared")

    # ---- rendering ----

    def house_summary(self, index: int) -> Optional[List[str]]:
        house = self.house(index)
        if house is None:
            return None
        return house.summary_lines(self.item_types, self.card_types)

    def to_dict(self):
        with self._lock:
            total = self.compute_total_points()
            houses = []
            for idx, house in enumerate(self._houses):
                hd = house.to_dict()
                hd['index'] = idx
                hd['summary'] = house.summary_lines(self.item_types, self.card_types)
                houses.append(hd)
            return {
                'houses': houses,
                'color_bonuses': self.color_bonuses,
                'total_points': total,
                'current_round': self.current_round,
                'round_history': [r.to_dict() for r in self.round_history],
            }
