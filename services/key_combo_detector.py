import logging
from typing import Callable, Iterable, List, Optional, Set, Tuple

KeyId = Tuple[str, object]
Combo = Tuple[frozenset, Callable[[], None]]


class KeyComboDetector:
    """Detect configured key combinations and run their action on release.

    The action fires once every key has been let go, so the synthetic copy
    and paste keystrokes are not mixed with modifiers the user still holds.
    When combinations overlap the largest fully pressed one wins.
    """

    def __init__(self, combos: List[Tuple[Iterable[KeyId], Callable[[], None]]]):
        self.combo_actions: List[Combo] = sorted(
            ((frozenset(c), a) for c, a in combos), key=lambda item: -len(item[0])
        )
        self.pressed: Set[KeyId] = set()
        self.pending: Optional[Combo] = None

    def press(self, key: KeyId) -> None:
        self.pressed.add(key)
        self._check()

    def release(self, key: KeyId) -> None:
        self.pressed.discard(key)
        if self.pending and not self.pressed:
            combo, action = self.pending
            self.pending = None
            logging.info("Hotkey action executed: %s", sorted(map(str, combo)))
            action()

    def reset(self) -> None:
        self.pressed.clear()
        self.pending = None

    def _check(self) -> None:
        for combo, action in self.combo_actions:
            if combo.issubset(self.pressed):
                if self.pending is None or len(combo) > len(self.pending[0]):
                    logging.debug("Combo detected: %s", combo)
                    self.pending = (combo, action)
                break


def key_to_id(key: object) -> KeyId:
    char = getattr(key, "char", None)
    if char:
        return ("char", char.lower())
    vk = getattr(key, "vk", None)
    if vk is not None:
        return ("vk", vk)
    return ("key", key)
