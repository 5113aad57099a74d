#!/usr/bin/env python3
"""Drive the title view model from a terminal.

Every observable the UI would bind to is printed as it changes, so the
spinner, snackbar and taps label can be followed while refreshes and
taps run.

Usage
-----
::

    python scripts/refresh_demo.py --clicks 3
    python scripts/refresh_demo.py --error-rate 0.5 --seed 7 --db titles.sqlite3

Options::

    --clicks N           Simulated clicks on the main view (default: 1)
    --interval SECONDS   Pause between clicks (default: 0.2)
    --error-rate RATE    Probability a faked fetch fails
    --seed N             Seed for faked responses
    --db PATH            Persist the title to this SQLite file
    --live               Fetch from PYTITLE_BASE_URL instead of faking
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any

from pytitle import HttpTitleNetwork, MainViewModel, TitleConfig, TitleRepository, get_database


def _printer(name: str) -> Any:
    def _show(value: Any) -> None:
        print(f"  {name:<9}: {value}")

    return _show


async def main() -> None:
    parser = argparse.ArgumentParser(description="Run title refreshes and taps through the view model.")
    parser.add_argument("--clicks", type=int, default=1, help="Simulated clicks on the main view")
    parser.add_argument("--interval", type=float, default=0.2, help="Pause between clicks in seconds")
    parser.add_argument("--error-rate", type=float, help="Probability a faked fetch fails")
    parser.add_argument("--seed", type=int, help="Seed for faked responses")
    parser.add_argument("--db", help="Persist the title to this SQLite file")
    parser.add_argument("--live", action="store_true", help="Fetch over HTTP instead of faking responses")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.error_rate is not None:
        overrides["fake_error_rate"] = args.error_rate
    if args.seed is not None:
        overrides["fake_seed"] = args.seed
    if args.db:
        overrides["database_path"] = args.db
    if args.live:
        overrides["skip_network"] = False
    config = TitleConfig.from_env(**overrides)

    database = get_database(config)
    async with HttpTitleNetwork.from_config(config) as network:
        repository = TitleRepository(network, database.title_dao)
        async with MainViewModel.from_config(repository, config) as view_model:
            view_model.title.subscribe(lambda title: _printer("title")(title.title if title else None))
            view_model.spinner.subscribe(_printer("spinner"))
            view_model.snackbar.subscribe(_printer("snackbar"))
            view_model.taps.subscribe(_printer("taps"))

            for _ in range(args.clicks):
                view_model.on_main_view_clicked()
                await asyncio.sleep(args.interval)

            # Let the last refresh and tap tasks finish before tearing down.
            await asyncio.sleep(max(config.tap_delay, config.fake_delay) + 0.1)
            if view_model.snackbar.value is not None:
                view_model.on_snackbar_shown()

            print(view_model.state.model_dump_json(indent=2))


if __name__ == "__main__":
    asyncio.run(main())
