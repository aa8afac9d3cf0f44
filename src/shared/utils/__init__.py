from src.shared.utils.datetime import utc_now
from src.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
]
