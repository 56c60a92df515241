"""Command-line entry point for models.json generation."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from openclaw_models.providers import IMPLICIT_PROVIDERS, EnvSnapshot
from openclaw_models.runtime.config import get_settings
from openclaw_models.runtime.errors import InvalidModelsConfigError
from openclaw_models.runtime.logging_config import setup_logging
from openclaw_models.runtime.services.models_config_service import ModelsConfigService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_INVALID = 2


def load_config_file(path: Path) -> Any:
    """Read an OpenClaw config file (JSON, or YAML by extension)."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openclaw-models",
        description="Generate the agent models.json from config and environment.",
    )
    parser.add_argument("--log-level", default=None, help="Override OPENCLAW_MODELS_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    ensure = sub.add_parser("ensure", help="Write models.json if it is out of date")
    ensure.add_argument("--config", type=Path, default=None, help="OpenClaw config file (.json/.yaml)")
    ensure.add_argument("--agent-dir", default=None, help="Agent directory override")
    ensure.add_argument("--mode", choices=("merge", "replace"), default=None,
                        help="Default mode when the config does not set models.mode")

    show = sub.add_parser("show", help="Print the current models.json")
    show.add_argument("--agent-dir", default=None, help="Agent directory override")

    sub.add_parser("env", help="List recognised provider env vars (values are never printed)")
    return parser


async def _run_ensure(args: argparse.Namespace, env: EnvSnapshot) -> int:
    config: Any = None
    if args.config is not None:
        try:
            config = load_config_file(args.config)
        except (OSError, UnicodeDecodeError) as e:
            print(f"error: cannot read {args.config}: {e}", file=sys.stderr)
            return EXIT_INVALID
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            print(f"error: cannot parse {args.config}: {e}", file=sys.stderr)
            return EXIT_INVALID

    mode = args.mode or get_settings().models_mode
    service = ModelsConfigService(env=env, default_mode=mode)
    try:
        result = await service.ensure_models_json(config, args.agent_dir)
    except InvalidModelsConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        for err in e.errors:
            location = ".".join(str(part) for part in err.get("loc", ()))
            print(f"  {location}: {err.get('msg')}", file=sys.stderr)
        return EXIT_INVALID

    status = "wrote" if result.wrote else "unchanged"
    print(f"{status} {result.path}")
    return EXIT_OK


async def _run_show(args: argparse.Namespace, env: EnvSnapshot) -> int:
    service = ModelsConfigService(env=env)
    try:
        document = await service.load_models_json(args.agent_dir)
    except (ValidationError, UnicodeDecodeError) as e:
        print(f"error: models.json is malformed: {e}", file=sys.stderr)
        return EXIT_INVALID
    if document is None:
        agent_dir = service.resolve_agent_dir(args.agent_dir)
        print(f"no models.json in {agent_dir}", file=sys.stderr)
        return EXIT_MISSING
    print(json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False))
    return EXIT_OK


def _run_env(env: EnvSnapshot) -> int:
    for definition in IMPLICIT_PROVIDERS.values():
        state = "set" if env.is_set(definition.env_var) else "unset"
        print(f"{definition.env_var:<20} {definition.key:<12} {state}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    env = EnvSnapshot.from_os()
    logger.debug("Running %s", args.command)
    if args.command == "ensure":
        return asyncio.run(_run_ensure(args, env))
    if args.command == "show":
        return asyncio.run(_run_show(args, env))
    return _run_env(env)


if __name__ == "__main__":
    sys.exit(main())
