import pygame
from towergen.config import WIDTH, HEIGHT


class Camera:
    """Vertical follow camera; x stays fixed on the world column."""

    def __init__(self, world_width: int = WIDTH):
        self.x = (world_width - WIDTH) / 2
        self.y = 0.0
        self.lerp = 0.12

    def update(self, target_y: float):
        ty = target_y - HEIGHT * 0.6
        self.y += (ty - self.y) * self.lerp

    def snap_to(self, target_y: float):
        self.y = target_y - HEIGHT * 0.6

    def to_screen(self, p):
        return (int(p[0] - self.x), int(p[1] - self.y))

    def to_screen_rect(self, r: pygame.Rect):
        return pygame.Rect(int(r.x - self.x), int(r.y - self.y), r.w, r.h)

    def is_visible(self, r: pygame.Rect) -> bool:
        return r.bottom >= self.y and r.top <= self.y + HEIGHT
