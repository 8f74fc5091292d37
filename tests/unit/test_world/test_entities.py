"""
Unit tests for units.
"""

from world.entities import Enemy, Player


class TestPlayer:
    """Tests for Player."""

    def test_records_start(self):
        """The starting tile is recorded from the initial position."""
        player = Player(name="Player", position=(1, 2))
        assert player.start == (1, 2)

    def test_reset(self):
        """Reset returns the player to start."""
        player = Player(name="Player", position=(1, 2))
        player.move_to((3, 3))
        player.take_damage(1)
        player.reset()
        assert player.position == (1, 2)
        assert player.is_alive


class TestEnemy:
    """Tests for Enemy."""

    def test_take_damage_and_death(self):
        """Health at or below zero means dead."""
        enemy = Enemy(name="E", position=(0, 0), health=2)
        enemy.take_damage(1)
        assert enemy.is_alive
        enemy.take_damage(1)
        assert enemy.is_dead
        assert not enemy.is_alive

    def test_frequency_one_acts_every_cycle(self):
        """Frequency 1 acts on every tick."""
        enemy = Enemy(name="E", position=(0, 0))
        assert [enemy.tick_counter() for _ in range(3)] == [True, True, True]
        assert enemy.turn_counter == 0

    def test_frequency_three(self):
        """Frequency 3 acts on every third tick."""
        enemy = Enemy(name="E", position=(0, 0), turn_frequency=3)
        ticks = [enemy.tick_counter() for _ in range(6)]
        assert ticks == [False, False, True, False, False, True]

    def test_frequency_clamped(self):
        """A frequency below one is treated as one."""
        enemy = Enemy(name="E", position=(0, 0), turn_frequency=0)
        assert enemy.turn_frequency == 1

    def test_reset_restores_spawn(self):
        """Reset restores spawn position, health and the counter."""
        enemy = Enemy(name="E", position=(4, 4), health=2, turn_frequency=2)
        enemy.move_to((3, 4))
        enemy.take_damage(5)
        enemy.tick_counter()
        enemy.executing_turn = True

        enemy.reset()

        assert enemy.position == (4, 4)
        assert enemy.health == 2
        assert enemy.turn_counter == 0
        assert enemy.executing_turn is False
