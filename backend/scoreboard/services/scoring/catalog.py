import re

from scoreboard.models import AllOf, CardType, ColorIs, ItemType, KindIs


ITEM_TYPES = (
    ItemType(key='redGift', label='R🎁', color='red', kind='gift'),
    ItemType(key='blueGift', label='B🎁', color='blue', kind='gift'),
    ItemType(key='redOrn', label='R❄', color='red', kind='orn'),
    ItemType(key='blueOrn', label='B❄', color='blue', kind='orn'),
)

CARD_TYPES = (
    CardType(key='x3RedAll', label='x3 for RED items', factor=3, applies_to=ColorIs('red')),
    CardType(key='x2BlueAll', label='x2 for BLUE items', factor=2, applies_to=ColorIs('blue')),
    CardType(
        key='x4RedGift',
        label='x4 for RED gifts',
        factor=4,
        applies_to=AllOf((ColorIs('red'), KindIs('gift'))),
    ),
)

# Canonical house color order, used for the bonus table and the board layout
COLORS = ('orange', 'pink', 'red', 'yellow')

# Board order: O,P,R,Y,O,P,R,Y
BOARD_LAYOUT = tuple(
    (f"{color.capitalize()} {n}", color)
    for n in (1, 2)
    for color in COLORS
)

# Ceiling for any single item or card count. Counts above it are clamped,
# which also bounds the size of factor ** copies when scoring.
MAX_COUNT = 99

_LEADING_INT = re.compile(r'^\s*([+-]?)0*(\d+)')


def normalize_color(raw):
    if not raw:
        return raw
    return str(raw).strip().lower()


def to_non_negative_int(value) -> int:
    """Parse the leading integer of ``value`` and clamp it to ``0..MAX_COUNT``.

    Mirrors how the browser reads number inputs: ``'3'``, ``3.7`` and ``'3 gifts'``
    all give 3, while ``None``, ``''``, ``'abc'`` and negatives give 0. Values
    above ``MAX_COUNT``, however many digits they have, give ``MAX_COUNT``.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return min(max(value, 0), MAX_COUNT)
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    sign, digits = match.groups()
    if sign == '-':
        return 0
    # Never convert more digits than MAX_COUNT has
    if len(digits) > len(str(MAX_COUNT)):
        return MAX_COUNT
    return min(int(digits), MAX_COUNT)


def add_counts(current: int, delta: int) -> int:
    return min(current + delta, MAX_COUNT)


def catalog_to_dict(item_types=ITEM_TYPES, card_types=CARD_TYPES, colors=COLORS, layout=BOARD_LAYOUT):
    return {
        'item_types': [d.to_dict() for d in item_types],
        'card_types': [d.to_dict() for d in card_types],
        'colors': list(colors),
        'layout': [{'name': name, 'color': color} for name, color in layout],
    }
