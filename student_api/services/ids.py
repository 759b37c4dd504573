import random
import time

ID_RANGE = 10000


def generate_id() -> int:
    """Return a pseudo-random id in ``[0, ID_RANGE)``.

    The module-level ``random`` source is reseeded from the clock on every
    call. Ids are neither unique nor unpredictable.
    """
    random.seed(time.time_ns())
    return random.randrange(ID_RANGE)
