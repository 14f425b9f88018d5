"""Context-sensitive action menus for each court zone.

The catalog is a static lookup; which tier is showing is up to the caller.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .actions import ActionCode, MAKE, MISS
from .errors import ValidationError
from .geometry import FREE_THROW, PAINT, LOGO_SHOT, CORNER_THREE, THREE_POINT, MID_RANGE

PRIMARY = 'primary'
SECONDARY = 'secondary'
TIERS = (PRIMARY, SECONDARY)

NAV_MORE = 'more'
NAV_BACK = 'back'


@dataclass(frozen=True)
class MenuOption:
    code: str
    label: str
    icon: str
    action: Optional[ActionCode] = None

    @property
    def is_navigation(self) -> bool:
        return self.action is None

    def to_dict(self) -> dict:
        if self.is_navigation:
            kind = 'nav'
        elif self.action.is_shot:
            kind = self.action.outcome
        else:
            kind = 'play'
        return {'code': self.code, 'label': self.label, 'icon': self.icon, 'kind': kind}


def _shot(outcome, points, subtype, label, icon):
    action = ActionCode.shot(outcome, points, subtype)
    return MenuOption(action.code, label, icon, action)


def _stat(verb, label, icon):
    return MenuOption(verb, label, icon, ActionCode.stat(verb))


def _nav(target, label, icon):
    return MenuOption(target, label, icon)


REBOUND = _stat('rebound', 'Rebound', '🙌')
ASSIST = _stat('assist', 'Assist', '🤝')
FOUL = _stat('foul', 'Foul', '✋')
MORE = _nav(NAV_MORE, 'More...', '...')
BACK = _nav(NAV_BACK, 'Back', '↩️')

PRIMARY_MENUS: Dict[str, List[MenuOption]] = {
    PAINT: [
        _shot(MAKE, 2, 'layup', 'Layup ✓', '🏀'),
        _shot(MISS, 2, 'layup', 'Layup ✗', '❌'),
        REBOUND, MORE,
    ],
    MID_RANGE: [
        _shot(MAKE, 2, 'jumper', 'Jumper ✓', '🏀'),
        _shot(MISS, 2, 'jumper', 'Jumper ✗', '❌'),
        REBOUND, MORE,
    ],
    THREE_POINT: [
        _shot(MAKE, 3, '3pt', '3PT ✓', '🎯'),
        _shot(MISS, 3, '3pt', '3PT ✗', '❌'),
        REBOUND, MORE,
    ],
    CORNER_THREE: [
        _shot(MAKE, 3, 'corner', 'Corner 3 ✓', '🎯'),
        _shot(MISS, 3, 'corner', 'Corner 3 ✗', '❌'),
        REBOUND, MORE,
    ],
    LOGO_SHOT: [
        _shot(MAKE, 3, 'logo', 'Logo Shot ✓', '🎯'),
        _shot(MISS, 3, 'logo', 'Logo Shot ✗', '❌'),
    ],
    FREE_THROW: [
        _shot(MAKE, 1, 'ft', 'FT ✓', '🎯'),
        _shot(MISS, 1, 'ft', 'FT ✗', '❌'),
    ],
}

_PERIMETER_EXTRAS = [ASSIST, FOUL, BACK]

SECONDARY_MENUS: Dict[str, List[MenuOption]] = {
    PAINT: [
        _shot(MAKE, 2, 'dunk', 'Dunk ✓', '💥'),
        _shot(MAKE, 2, 'post', 'Post Up ✓', '💪'),
        _shot(MISS, 2, 'post', 'Post Up ✗', '🧱'),
        _shot(MAKE, 2, 'floater', 'Floater ✓', '💧'),
        _shot(MISS, 2, 'floater', 'Floater ✗', '💨'),
        ASSIST, FOUL, BACK,
    ],
    MID_RANGE: [
        _shot(MAKE, 2, 'fadeaway', 'Fadeaway ✓', '🏃'),
        _shot(MISS, 2, 'fadeaway', 'Fadeaway ✗', '💨'),
        ASSIST, FOUL, BACK,
    ],
    THREE_POINT: _PERIMETER_EXTRAS,
    CORNER_THREE: _PERIMETER_EXTRAS,
}

# Shortcuts recorded without a court location
QUICK_STATS: Dict[str, ActionCode] = {
    'ft': ActionCode.shot(MAKE, 1, 'ft'),
    'fg2': ActionCode.shot(MAKE, 2, 'shot'),
    'fg3': ActionCode.shot(MAKE, 3, '3pt'),
    'rebound': ActionCode.stat('rebound'),
    'assist': ActionCode.stat('assist'),
    'block': ActionCode.stat('block'),
    'steal': ActionCode.stat('steal'),
    'turnover': ActionCode.stat('turnover'),
}


def menu(zone: str, tier: str = PRIMARY) -> List[MenuOption]:
    """Ordered options for a zone; unknown zones get the mid-range menus."""
    if tier not in TIERS:
        raise ValidationError(f'Unknown menu tier: {tier}')
    primary = PRIMARY_MENUS.get(zone, PRIMARY_MENUS[MID_RANGE])
    if tier == PRIMARY:
        return list(primary)
    if zone not in PRIMARY_MENUS:
        return list(SECONDARY_MENUS[MID_RANGE])
    # free-throw and logo-shot have no secondary tier
    return list(SECONDARY_MENUS.get(zone, primary))


def _published_codes() -> Dict[str, ActionCode]:
    codes = {}
    for table in (PRIMARY_MENUS, SECONDARY_MENUS):
        for options in table.values():
            for option in options:
                if not option.is_navigation:
                    codes[option.code] = option.action
    for action in QUICK_STATS.values():
        codes[action.code] = action
    return codes


_BY_CODE = _published_codes()


def resolve(code: str) -> ActionCode:
    """Look up a recordable action by its wire code."""
    if code in (NAV_MORE, NAV_BACK):
        raise ValidationError(f'"{code}" is a menu navigation, not an action')
    try:
        return _BY_CODE[code]
    except KeyError:
        raise ValidationError(f'Unknown action: {code}') from None


def quick_stat(key: str) -> ActionCode:
    try:
        return QUICK_STATS[key]
    except KeyError:
        raise ValidationError(f'Unknown quick stat: {key}') from None
