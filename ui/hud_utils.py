from __future__ import annotations

import pygame


def _calculate_heat_color(heat_fraction: float) -> tuple[int, int, int]:
    """
    Calculate heat bar color based on how hot the player is.

    Args:
        heat_fraction: heat / max heat (0.0 to 1.0)

    Returns:
        RGB color tuple (red, green, blue)
        - Pale yellow (255, 230, 120) when cool
        - Orange (255, 150, 60) at 50%
        - Red (230, 50, 40) at max heat
    """
    heat_fraction = max(0.0, min(1.0, heat_fraction))

    if heat_fraction < 0.5:
        # Pale yellow to orange
        t = heat_fraction * 2.0  # Maps 0.0-0.5 to 0.0-1.0
        r = 255
        g = int(230 + (150 - 230) * t)
        b = int(120 + (60 - 120) * t)
    else:
        # Orange to red
        t = (heat_fraction - 0.5) * 2.0  # Maps 0.5-1.0 to 0.0-1.0
        r = int(255 + (230 - 255) * t)
        g = int(150 + (50 - 150) * t)
        b = int(60 + (40 - 60) * t)

    return (r, g, b)


def _draw_bar(
    surface: pygame.Surface,
    x: int,
    y: int,
    width: int,
    height: int,
    fraction: float,
    back_color: tuple[int, int, int],
    fill_color: tuple[int, int, int],
    border_color: tuple[int, int, int] | None = (255, 255, 255),
) -> None:
    """
    Utility: draw a simple filled bar (heat, actions).
    """
    fraction = max(0.0, min(1.0, float(fraction)))
    pygame.draw.rect(surface, back_color, (x, y, width, height))
    if fraction > 0.0:
        fill_w = int(width * fraction)
        pygame.draw.rect(surface, fill_color, (x, y, fill_w, height))
    if border_color is not None and width > 2 and height > 2:
        pygame.draw.rect(surface, border_color, (x, y, width, height), 1)


def _draw_resource_bar_with_label(
    surface: pygame.Surface,
    font: pygame.font.Font,
    x: int,
    y: int,
    width: int,
    bar_height: int,
    label: str,
    current: int,
    maximum: int,
    text_color: tuple[int, int, int],
    back_color: tuple[int, int, int],
    fill_color: tuple[int, int, int],
    border_color: tuple[int, int, int] | None = (255, 255, 255),
) -> int:
    """
    Draw a resource bar with label text above it.
    Returns the y position after the bar (for chaining).
    """
    label_surf = font.render(f"{label} {current}/{maximum}", True, text_color)
    surface.blit(label_surf, (x, y))
    y += 20

    fraction = current / maximum if maximum > 0 else 0.0
    _draw_bar(surface, x, y, width, bar_height, fraction, back_color, fill_color, border_color)
    return y + bar_height + 6


def _draw_pips(
    surface: pygame.Surface,
    x: int,
    y: int,
    filled: int,
    total: int,
    size: int = 14,
    gap: int = 6,
    fill_color: tuple[int, int, int] = (140, 210, 160),
    empty_color: tuple[int, int, int] = (50, 60, 55),
) -> int:
    """
    Draw one square per action, the first ``filled`` of them lit.
    Returns the x position after the last pip.
    """
    for i in range(max(0, total)):
        color = fill_color if i < filled else empty_color
        pygame.draw.rect(surface, color, (x, y, size, size))
        pygame.draw.rect(surface, (220, 220, 220), (x, y, size, size), 1)
        x += size + gap
    return x


def _draw_panel(
    surface: pygame.Surface,
    x: int,
    y: int,
    width: int,
    height: int,
    alpha: int = 180,
) -> None:
    """Translucent black panel behind HUD text."""
    panel_surf = pygame.Surface((width, height), pygame.SRCALPHA)
    panel_surf.fill((0, 0, 0, alpha))
    surface.blit(panel_surf, (x, y))
