from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class ItemType:
    key: str
    label: str
    color: str
    kind: str

    def to_dict(self):
        return {
            'key': self.key,
            'label': self.label,
            'color': self.color,
            'kind': self.kind,
        }


# ---- Card applicability rules ----
# Rules are plain values so a card catalog can be compared, serialized and
# tested without closures.

@dataclass(frozen=True)
class ColorIs:
    color: str

    def matches(self, item: ItemType) -> bool:
        return item.color == self.color

    def to_dict(self):
        return {'rule': 'color_is', 'color': self.color}


@dataclass(frozen=True)
class KindIs:
    kind: str

    def matches(self, item: ItemType) -> bool:
        return item.kind == self.kind

    def to_dict(self):
        return {'rule': 'kind_is', 'kind': self.kind}


@dataclass(frozen=True)
class AllOf:
    rules: Tuple[object, ...]

    def matches(self, item: ItemType) -> bool:
        return all(rule.matches(item) for rule in self.rules)

    def to_dict(self):
        return {'rule': 'all_of', 'rules': [r.to_dict() for r in self.rules]}


@dataclass(frozen=True)
class CardType:
    key: str
    label: str
    factor: int
    applies_to: object

    def multiplier_for(self, item: ItemType, copies: int) -> int:
        """Factor raised to the number of copies held, or 1 if the card does not apply."""
        if not copies or not self.applies_to.matches(item):
            return 1
        return self.factor ** copies

    def to_dict(self):
        return {
            'key': self.key,
            'label': self.label,
            'factor': self.factor,
            'applies_to': self.applies_to.to_dict(),
        }


@dataclass
class House:
    name: str
    color: str
    items: Dict[str, int] = field(default_factory=dict)
    cards: Dict[str, int] = field(default_factory=dict)
    points: int = 0

    def summary_lines(self, item_types, card_types) -> List[str]:
        """Compact text summary: non-zero items, non-zero cards, then points."""
        item_parts = [f"{d.label}:{self.items[d.key]}" for d in item_types if self.items.get(d.key)]
        card_parts = [f"{d.label} x{self.cards[d.key]}" for d in card_types if self.cards.get(d.key)]
        lines = []
        if item_parts:
            lines.append(' | '.join(item_parts))
        if card_parts:
            lines.append(' | '.join(card_parts))
        lines.append(f"Pts: {self.points}")
        return lines

    def to_dict(self):
        return {
            'name': self.name,
            'color': self.color,
            'items': dict(self.items),
            'cards': dict(self.cards),
            'points': self.points,
        }


@dataclass(frozen=True)
class RoundResult:
    round_number: int
    total: int
    houses: Tuple[Tuple[str, str, int], ...]

    def to_dict(self):
        return {
            'round': self.round_number,
            'total': self.total,
            'houses': [
                {'name': name, 'color': color, 'points': points}
                for name, color, points in self.houses
            ],
        }
