#!/usr/bin/env python3
"""Synchronize the local game data directory with a Comlink instance.

Usage
-----
Set environment variables and run::

    export CLIENT_URL="http://localhost:3000"
    export DATA_PATH="./data"
    python scripts/sync_data.py

Options::

    --force              Re-download everything even if versions match
    --watch              Keep running and poll for new versions
    --json               Print the resulting version state as JSON
    -v, --verbose        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fakehelp import ComlinkClient, FileStore, HelpConfig, HelpError, SyncEngine, UpdatePoller  # noqa: E402
from fakehelp.models import Metadata, VersionState  # noqa: E402


def _print_state(state: VersionState, as_json: bool) -> None:
    if as_json:
        print(json.dumps(state.model_dump(mode="json"), indent=2, sort_keys=True))
        return
    print(f"Game data:     {state.game_data_version}")
    print(f"Localization:  {state.localization_version}")
    print(f"Collections:   {len(state.known_collections)}")


async def _watch(engine: SyncEngine, client: ComlinkClient, config: HelpConfig, as_json: bool) -> None:
    async def _on_update(metadata: Metadata) -> None:
        state = await engine.update_check(
            metadata.latest_gamedata_version,
            metadata.latest_localization_bundle_version,
        )
        _print_state(state, as_json)

    poller = UpdatePoller(client, _on_update, interval=config.update_interval_seconds)
    await poller.start()
    try:
        await asyncio.Event().wait()
    finally:
        await poller.stop()


async def _main(args: argparse.Namespace) -> int:
    config = HelpConfig.from_env()
    async with ComlinkClient(config) as client:
        engine = SyncEngine(config, client, FileStore(config.data_path))
        try:
            if args.force:
                state = await engine.update_check(force=True)
            else:
                await engine.load()
                state = await engine.update_check()
        except HelpError as exc:
            print(f"Synchronization failed: {exc}", file=sys.stderr)
            return 1
        _print_state(state, args.json)

        if args.watch:
            await _watch(engine, client, config, args.json)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--force", action="store_true", help="Re-download even if versions match")
    parser.add_argument("--watch", action="store_true", help="Keep polling for new versions")
    parser.add_argument("--json", action="store_true", help="Print the version state as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
