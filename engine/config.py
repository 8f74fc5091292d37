"""
Rules configuration: heat, action budget, burn streak and enemy numbers.

Defaults come from settings.py; a JSON file can override any of them.
"""

import json
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import settings
from engine.error_handler import ConfigError, get_logger

log = get_logger("config")

# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_FILE = CONFIG_DIR / "rules.json"


@dataclass
class RulesConfig:
    """Game rule constants. Owned by the simulation, never mutated mid-run."""
    max_heat: int = settings.MAX_HEAT
    starting_heat: int = settings.STARTING_HEAT
    actions_per_turn: int = settings.ACTIONS_PER_TURN
    attack_heat_cost: int = settings.ATTACK_HEAT_COST
    attack_damage: int = settings.ATTACK_DAMAGE
    max_consecutive_burn_tiles: int = settings.MAX_CONSECUTIVE_BURN_TILES
    enemy_attack_heat: int = settings.ENEMY_ATTACK_HEAT
    enemy_health: int = settings.ENEMY_HEALTH
    # enemy sub-cycles between two actions of one enemy (1 = every cycle)
    enemy_turn_frequency: int = settings.ENEMY_TURN_FREQUENCY
    # False = tag-only enemies: they never attack, and ending the turn
    # next to one (diagonals count) loses the run.
    enemies_attack: bool = settings.ENEMIES_ATTACK

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RulesConfig":
        """Build from a dictionary; unknown keys are ignored, missing keys use defaults."""
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                log.warning("Ignoring unknown rules key %r", key)
                continue
            if known[key].type in (bool, "bool"):
                values[key] = bool(value)
            else:
                values[key] = int(value)
        return cls(**values).validated()

    def validated(self) -> "RulesConfig":
        """Return a copy with every value pulled into a usable range."""
        max_heat = max(1, int(self.max_heat))
        return replace(
            self,
            max_heat=max_heat,
            starting_heat=max(0, min(max_heat, int(self.starting_heat))),
            actions_per_turn=max(1, int(self.actions_per_turn)),
            attack_damage=max(0, int(self.attack_damage)),
            max_consecutive_burn_tiles=max(0, int(self.max_consecutive_burn_tiles)),
            enemy_health=max(1, int(self.enemy_health)),
            enemy_turn_frequency=max(1, int(self.enemy_turn_frequency)),
        )

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to file."""
        path = Path(path) if path is not None else CONFIG_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise ConfigError(f"Could not save rules to {path}: {e}") from e

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "RulesConfig":
        """Load config from file. A missing file gives the defaults."""
        path = Path(path) if path is not None else CONFIG_FILE
        if not path.exists():
            return cls()

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(
                f"Could not load rules from {path}: {e}",
                user_message="Rules file is unreadable; using defaults.",
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Rules file {path} must hold a JSON object")
        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Bad value in rules file {path}: {e}") from e


# Global config instance
_rules = RulesConfig()


def get_rules() -> RulesConfig:
    """Get the global rules instance."""
    return _rules


def load_rules(path: Optional[Path] = None) -> RulesConfig:
    """Load the global rules, falling back to defaults on a bad file."""
    global _rules
    try:
        _rules = RulesConfig.load(path)
    except ConfigError as e:
        log.warning(e.user_message)
        _rules = RulesConfig()
    return _rules


def save_rules(path: Optional[Path] = None) -> bool:
    """Save the global rules."""
    try:
        _rules.save(path)
        return True
    except ConfigError as e:
        log.error(str(e))
        return False
