# app/modules/bookings/tracking.py
import random
import string
import time
from typing import Callable, Optional

TRACKING_PREFIX = "RC"
RANDOM_SUFFIX_LENGTH = 6

_BASE36 = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


class TrackingCodeGenerator:
    """
    Códigos de seguimiento legibles: RC + milisegundos en base36 + sufijo aleatorio.

    El componente temporal permite ordenar aproximadamente por fecha. No es un
    valor sensible, así que usa un RNG no criptográfico. La unicidad la garantiza
    la restricción única en bookings.tracking_code, no este generador.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        suffix_length: int = RANDOM_SUFFIX_LENGTH,
    ):
        self._rng = rng or random.Random()
        self._clock = clock
        self.suffix_length = suffix_length

    def generate(self) -> str:
        millis = int(self._clock() * 1000)
        suffix = "".join(self._rng.choices(_BASE36, k=self.suffix_length))
        return f"{TRACKING_PREFIX}{to_base36(millis)}{suffix}"
