"""CLI entrypoint for running a multi-agent navigation simulation.

Usage::

    rvgnav-simulate --agents 4 --steps 500 --seed 7 --out-dir data/run7 --render

Settings are resolved CLI > ``--config`` JSON file > built-in defaults. The
run summary is printed to stdout as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from rvgnav.config.constants import NUM_AGENTS, NUM_STEPS, TICK_INTERVAL
from rvgnav.config.types import SimulationConfig
from rvgnav.domain.errors import RvgNavError
from rvgnav.simulation.engine import run_simulation

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


class _Settings:
    """Resolves each setting from the CLI, then the config file, then a default."""

    def __init__(self, file_cfg: dict[str, object]) -> None:
        self.file_cfg = file_cfg

    def _raw(self, cli_val: object, key: str, default: object) -> object:
        return cli_val if cli_val is not None else self.file_cfg.get(key, default)

    def integer(self, cli_val: int | None, key: str, default: int) -> int:
        raw = self._raw(cli_val, key, default)
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        if not isinstance(raw, (int, float, str)):
            raise ValueError(f"{key} must be an integer value")
        return int(raw)

    def real(self, cli_val: float | None, key: str, default: float) -> float:
        raw = self._raw(cli_val, key, default)
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise ValueError(f"{key} must be a float value")
        return float(raw)

    def flag(self, cli_val: bool | None, key: str, default: bool) -> bool:
        raw = self._raw(cli_val, key, default)
        if isinstance(raw, bool):
            return raw
        normalized = raw.strip().lower() if isinstance(raw, str) else None
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
        raise ValueError(f"{key} must be a boolean value")

    def path(self, cli_val: Path | None, key: str, default: str) -> Path:
        raw = self._raw(cli_val, key, default)
        if not isinstance(raw, (str, Path)):
            raise ValueError(f"{key} must be a path")
        return Path(raw)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Run a reduced-visibility-graph navigation run")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--agents", type=int, default=None, help="number of agents")
    parser.add_argument("--steps", type=int, default=None, help="number of ticks to simulate")
    parser.add_argument("--dt", type=float, default=None, help="seconds per tick")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument(
        "--render",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="write figures/scene.png at the end of the run",
    )
    parser.add_argument("--log-level", type=str.upper, choices=_LOG_LEVELS, default="INFO")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for a single simulation run."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")
        if not isinstance(file_cfg, dict):
            parser.error(f"Config file must hold a JSON object: {args.config}")

    settings = _Settings(file_cfg)
    try:
        config = SimulationConfig(
            num_agents=settings.integer(args.agents, "agents", NUM_AGENTS),
            steps=settings.integer(args.steps, "steps", NUM_STEPS),
            dt=settings.real(args.dt, "dt", TICK_INTERVAL),
            seed=settings.integer(args.seed, "seed", 0),
            render=settings.flag(args.render, "render", False),
        )
        out_dir = settings.path(args.out_dir, "out_dir", "data")
    except ValueError as exc:
        parser.error(str(exc))

    try:
        summary = run_simulation(config, out_dir)
    except RvgNavError as exc:
        logger.error("simulation setup failed: %s", exc)
        raise SystemExit(1) from exc

    print(json.dumps(summary.to_dict(), ensure_ascii=False))


if __name__ == "__main__":
    main()
