"""
Программа: «Fridge» – виртуальный холодильник с магнитами, календарём и почтой кругов.
Модуль: utils/coordinates.py – преобразование координат магнитов.

Назначение модуля:
- Позиция магнита хранится нормализованной: смещение от центра дверцы,
  отвязанное от размеров конкретной поверхности. Поворот хранится в градусах.
- Две поверхности отображения используют разные знаменатели:
  3D-сцена (полуширина/полувысота дверцы, шкала 200 x 300) и 2D DOM
  (сырые пиксельные смещения от центра). Значения между ними не совместимы
  побитово, но каждая пара функций точно обратна в пределах своей дверцы.
- Перетаскивание ограничивает позицию областью дверцы до нормализации,
  поэтому корректный клиент никогда не сохраняет значения за границей.
"""

import math
import random
from dataclasses import dataclass

NORMALIZED_X_SCALE = 200.0
NORMALIZED_Y_SCALE = 300.0

# Разброс стартовой позиции и поворота для новых магнитов
PLACEMENT_SPREAD_X = 100.0
PLACEMENT_SPREAD_Y = 150.0
MAX_PLACEMENT_ROTATION = 15.0


@dataclass(frozen=True)
class NormalizedBounds:
    """Прямоугольник допустимых нормализованных координат."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def contains(self, position_x: float, position_y: float, tolerance: float = 1e-9) -> bool:
        return (
            self.min_x - tolerance <= position_x <= self.max_x + tolerance
            and self.min_y - tolerance <= position_y <= self.max_y + tolerance
        )


@dataclass(frozen=True)
class SceneDoor:
    """Геометрия дверцы в 3D-сцене (единицы сцены, начало в петле)."""
    fridge_width: float = 3.0
    fridge_height: float = 4.5
    inset: float = 0.4
    margin: float = 0.3

    @property
    def door_width(self) -> float:
        return self.fridge_width - self.inset

    @property
    def door_height(self) -> float:
        return self.fridge_height - self.inset

    @property
    def center_x(self) -> float:
        return self.fridge_width / 2

    def to_dict(self) -> dict:
        return {
            "fridgeWidth": self.fridge_width,
            "fridgeHeight": self.fridge_height,
            "doorWidth": self.door_width,
            "doorHeight": self.door_height,
            "margin": self.margin,
            "normalizedScaleX": NORMALIZED_X_SCALE,
            "normalizedScaleY": NORMALIZED_Y_SCALE,
        }


@dataclass(frozen=True)
class DomSurface:
    """Размеры 2D-поверхности для магнитов в пикселях."""
    width: float
    height: float
    magnet_size: float = 80.0


SCENE_DOOR = SceneDoor()


def _require_finite(*values: float) -> None:
    for value in values:
        if not math.isfinite(value):
            raise ValueError(f"Coordinate must be finite, got {value!r}")


# --- 3D-сцена ---

def scene_from_normalized(position_x: float, position_y: float, door: SceneDoor = SCENE_DOOR) -> tuple[float, float]:
    """Нормализованная позиция -> локальные координаты дверцы в сцене."""
    _require_finite(position_x, position_y)
    local_x = (position_x / NORMALIZED_X_SCALE) * (door.door_width / 2)
    local_y = (position_y / NORMALIZED_Y_SCALE) * (door.door_height / 2)
    return door.center_x + local_x, local_y


def normalized_from_scene(x: float, y: float, door: SceneDoor = SCENE_DOOR) -> tuple[float, float]:
    """Локальные координаты дверцы в сцене -> нормализованная позиция."""
    _require_finite(x, y)
    position_x = ((x - door.center_x) / (door.door_width / 2)) * NORMALIZED_X_SCALE
    position_y = (y / (door.door_height / 2)) * NORMALIZED_Y_SCALE
    return position_x, position_y


def clamp_scene_position(x: float, y: float, door: SceneDoor = SCENE_DOOR) -> tuple[float, float]:
    """Удерживает точку внутри дверцы с отступом `margin` от краёв."""
    half_width = door.door_width / 2
    half_height = door.door_height / 2
    min_x = door.center_x - half_width + door.margin
    max_x = door.center_x + half_width - door.margin
    min_y = -half_height + door.margin
    max_y = half_height - door.margin
    return max(min_x, min(max_x, x)), max(min_y, min(max_y, y))


def scene_normalized_bounds(door: SceneDoor = SCENE_DOOR) -> NormalizedBounds:
    limit_x = (1 - door.margin / (door.door_width / 2)) * NORMALIZED_X_SCALE
    limit_y = (1 - door.margin / (door.door_height / 2)) * NORMALIZED_Y_SCALE
    return NormalizedBounds(-limit_x, limit_x, -limit_y, limit_y)


# --- 2D DOM ---

def dom_from_normalized(position_x: float, position_y: float, surface: DomSurface) -> tuple[float, float]:
    """Нормализованная позиция -> (left, top) в пикселях; ось y в DOM направлена вниз."""
    _require_finite(position_x, position_y)
    return surface.width / 2 + position_x, surface.height / 2 - position_y


def normalized_from_dom(left: float, top: float, surface: DomSurface) -> tuple[float, float]:
    _require_finite(left, top)
    return left - surface.width / 2, surface.height / 2 - top


def clamp_dom_position(left: float, top: float, surface: DomSurface) -> tuple[float, float]:
    max_left = max(0.0, surface.width - surface.magnet_size)
    max_top = max(0.0, surface.height - surface.magnet_size)
    return max(0.0, min(max_left, left)), max(0.0, min(max_top, top))


def dom_normalized_bounds(surface: DomSurface) -> NormalizedBounds:
    max_left = max(0.0, surface.width - surface.magnet_size)
    max_top = max(0.0, surface.height - surface.magnet_size)
    return NormalizedBounds(
        min_x=-surface.width / 2,
        max_x=max_left - surface.width / 2,
        min_y=surface.height / 2 - max_top,
        max_y=surface.height / 2,
    )


# --- Поворот ---

def rotation_to_radians(degrees: float) -> float:
    """Перевод выполняется только при отрисовке; хранятся всегда градусы."""
    return math.radians(degrees)


def rotation_from_radians(radians: float) -> float:
    return math.degrees(radians)


def random_rotation(rng: random.Random | None = None) -> float:
    rng = rng or random
    return rng.uniform(-MAX_PLACEMENT_ROTATION, MAX_PLACEMENT_ROTATION)


def random_placement(
    rng: random.Random | None = None,
    door: SceneDoor = SCENE_DOOR,
) -> tuple[float, float, float]:
    """Случайная стартовая позиция внутри дверцы и «небрежный» поворот."""
    rng = rng or random
    bounds = scene_normalized_bounds(door)
    spread_x = min(PLACEMENT_SPREAD_X, bounds.max_x)
    spread_y = min(PLACEMENT_SPREAD_Y, bounds.max_y)
    return (
        rng.uniform(-spread_x, spread_x),
        rng.uniform(-spread_y, spread_y),
        random_rotation(rng),
    )
