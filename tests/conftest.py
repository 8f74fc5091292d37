"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import os

# Headless SDL before pygame is initialised
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest
import pygame
from typing import Callable, Generator, Optional, Sequence

from engine.config import RulesConfig
from engine.presentation import RecordingHooks
from engine.signals import SignalBus
from engine.simulation import Simulation
from engine.turn_engine import TurnEngine
from world.board import Board
from world.layouts import parse_layout


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    pygame.display.set_mode((800, 600), pygame.HIDDEN)
    yield
    pygame.quit()


@pytest.fixture
def sample_screen() -> pygame.Surface:
    """
    Create a sample pygame surface for tests that need a screen.
    """
    return pygame.Surface((800, 600))


@pytest.fixture
def open_board() -> Board:
    """
    5x5 board of walkable Normal tiles.
    """
    return Board.open_grid(5, 5)


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture
def bus() -> SignalBus:
    return SignalBus()


@pytest.fixture
def make_engine(hooks, bus) -> Callable[..., TurnEngine]:
    """
    Factory: build a started TurnEngine from an ASCII layout.

        engine = make_engine("PE.G", starting_heat=95)

    Keyword arguments are RulesConfig fields.
    """
    def _make(
        layout_text: str,
        turn_frequencies: Optional[Sequence[int]] = None,
        **rule_overrides,
    ) -> TurnEngine:
        rules = RulesConfig(**rule_overrides).validated()
        ctx = Simulation.from_layout(
            parse_layout(layout_text),
            rules=rules,
            hooks=hooks,
            bus=bus,
            turn_frequencies=turn_frequencies,
        )
        return TurnEngine(ctx)

    return _make
