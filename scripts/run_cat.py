#!/usr/bin/env python3
"""Main entry point — a cat that gets stressed by the noise in the room.

Usage:
    python scripts/run_cat.py
    python scripts/run_cat.py --sensitivity 2.0 --transition 5
    python scripts/run_cat.py --thresholds 5 25 50 80 --rate-model linear
    python scripts/run_cat.py --settings-file /tmp/cat.json --no-save
    python scripts/run_cat.py --no-keys          # no live tuning from the keyboard
"""

import argparse
import asyncio
import signal
import sys

from noisecat.app import NoiseCatApp
from noisecat.config import NoiseCatConfig
from noisecat.control.keyboard import KeyboardTuner
from noisecat.mood.rates import RATE_MODELS
from noisecat.storage.repository import MemorySettingsRepository


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Noise-reactive cat")
    ap.add_argument("-s", "--sensitivity", type=float,
                    help="loudness to stress gain (saved for next time)")
    ap.add_argument("-t", "--transition", type=float,
                    help="seconds to cross one mood band (saved for next time)")
    ap.add_argument("--thresholds", type=float, nargs=4,
                    metavar=("CALM", "ANXIOUS", "IRRITATED", "PANIC"),
                    help="stress lower bounds of the four waking moods")
    ap.add_argument("--rate-model", choices=sorted(RATE_MODELS), default="band")
    ap.add_argument("--volume-threshold", type=float, default=10.0,
                    help="ignore loudness at or below this level (0-255)")
    ap.add_argument("--fps", type=float, default=60.0, help="frames per second")
    ap.add_argument("--device", default=None, help="sounddevice input device")
    ap.add_argument("--settings-file", default=None, help="settings JSON path")
    ap.add_argument("--no-save", action="store_true",
                    help="keep settings changes in memory only")
    ap.add_argument("--no-keys", action="store_true",
                    help="disable live tuning keys (-/+ sensitivity, [/] transition)")
    return ap.parse_args(argv)


async def main():
    args = parse_args()

    config = NoiseCatConfig(
        frame_rate=args.fps,
        volume_threshold=args.volume_threshold,
        rate_model=args.rate_model,
        input_device=int(args.device) if args.device and args.device.isdigit() else args.device,
    )
    if args.settings_file:
        config.settings_path = args.settings_file

    app = NoiseCatApp(config, repository=MemorySettingsRepository() if args.no_save else None)

    if args.sensitivity is not None or args.transition is not None or args.thresholds:
        try:
            app.apply_settings(args.sensitivity, args.transition, args.thresholds)
        except OSError as e:
            print(f"Could not save settings: {e}", file=sys.stderr)

    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, lambda: asyncio.ensure_future(app.stop()))

    tuner = None if args.no_keys else KeyboardTuner(app)
    if tuner is not None:
        tuner.attach(loop)
    try:
        await app.start()
    finally:
        if tuner is not None:
            tuner.detach(loop)


if __name__ == "__main__":
    asyncio.run(main())
