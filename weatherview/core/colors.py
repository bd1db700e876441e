from enum import Enum


class ColorBucket(Enum):
    """Display color used for a temperature range."""

    DEEP_BLUE = "#191970"
    STEEL_BLUE = "#4682B4"
    POWDER_BLUE = "#B0E0E6"
    LIGHT_CYAN = "#E0FFFF"
    MOCCASIN = "#FFE4B5"
    BURLY_WOOD = "#DEB887"
    GOLDEN_ROD = "#DAA520"
    DARK_ORANGE = "#FF8C00"
    FIRE_BRICK = "#B22222"

    @property
    def hex(self) -> str:
        return self.value


def color_for(temp_c: float) -> ColorBucket:
    """Pick the background color bucket for a temperature.

    Args:
        temp_c: Temperature in degrees Celsius

    Returns:
        The matching ColorBucket. Every value maps to a bucket.
    """
    if temp_c < -20:
        return ColorBucket.DEEP_BLUE
    elif temp_c <= -10:
        return ColorBucket.STEEL_BLUE
    elif temp_c <= -5:
        return ColorBucket.POWDER_BLUE
    elif temp_c <= 0:
        return ColorBucket.LIGHT_CYAN
    elif temp_c <= 10:
        return ColorBucket.MOCCASIN
    elif temp_c <= 15:
        return ColorBucket.BURLY_WOOD
    elif temp_c < 21:
        return ColorBucket.GOLDEN_ROD
    elif temp_c < 26:
        return ColorBucket.DARK_ORANGE
    else:
        return ColorBucket.FIRE_BRICK
