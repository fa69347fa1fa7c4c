#!/usr/bin/env python3
"""Simulate a noise script through the accumulator and plot stress and mood.

Useful for tuning thresholds and transition time without a microphone.

Usage:
    python scripts/plot_stress.py
    python scripts/plot_stress.py --transition 5 --sensitivity 0.5
    python scripts/plot_stress.py --rate-model linear --out output/linear.png
"""

import argparse
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from noisecat.config import NoiseCatConfig
from noisecat.app import build_rate_model
from noisecat.mood.base import Mood
from noisecat.mood.machine import StateMachine
from noisecat.mood.rates import RATE_MODELS

MOOD_COLORS = {
    Mood.SLEEPING: "#9467bd",
    Mood.CALM: "#2ca02c",
    Mood.ANXIOUS: "#bcbd22",
    Mood.IRRITATED: "#ff7f0e",
    Mood.PANICKED: "#d62728",
}

# (seconds, loudness) segments
SCRIPT = [
    (2.0, 0.0),
    (8.0, 60.0),
    (6.0, 200.0),
    (4.0, 5.0),
    (5.0, 255.0),
    (15.0, 0.0),
]


def loudness_trace(fps: float, rng: np.random.Generator) -> np.ndarray:
    parts = []
    for seconds, level in SCRIPT:
        n = int(seconds * fps)
        noise = rng.normal(0.0, 4.0, n) if level > 0 else np.zeros(n)
        parts.append(np.clip(level + noise, 0.0, 255.0))
    return np.concatenate(parts)


def simulate(machine: StateMachine, loudness: np.ndarray):
    stress = np.zeros(len(loudness))
    moods = []
    changes = []
    machine.on_state_change = lambda d: changes.append((len(moods), d.mood))
    for i, level in enumerate(loudness):
        reading = machine.update(level)
        stress[i] = reading.stress
        moods.append(reading.mood)
    return stress, moods, changes


def main():
    ap = argparse.ArgumentParser(description="Plot simulated stress response")
    ap.add_argument("-s", "--sensitivity", type=float, default=1.0)
    ap.add_argument("-t", "--transition", type=float, default=3.0)
    ap.add_argument("--rate-model", choices=sorted(RATE_MODELS), default="band")
    ap.add_argument("--out", default="output/stress_simulation.png")
    args = ap.parse_args()

    config = NoiseCatConfig(rate_model=args.rate_model)
    machine = StateMachine(rate_model=build_rate_model(config))
    machine.set_settings(args.sensitivity, args.transition, config.thresholds)

    loudness = loudness_trace(config.frame_rate, np.random.default_rng(42))
    stress, moods, changes = simulate(machine, loudness)
    t = np.arange(len(loudness)) / config.frame_rate

    fig, axes = plt.subplots(2, 1, figsize=(14, 8), sharex=True)
    fig.suptitle(
        f"Stress response — {args.rate_model} rate, sensitivity {args.sensitivity:.1f}, "
        f"transition {args.transition:.1f}s",
        fontsize=14, fontweight="bold",
    )

    ax = axes[0]
    ax.plot(t, loudness, color="gray", linewidth=0.6)
    ax.axhline(config.volume_threshold, color="black", linestyle="--", linewidth=1,
               label=f"volume threshold ({config.volume_threshold:g})")
    ax.set_ylabel("Loudness (0-255)")
    ax.set_ylim(0, 260)
    ax.legend(loc="upper right", fontsize=8)
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(t, stress, color="black", linewidth=1.5)
    edges = machine.settings.thresholds.edges()
    for mood, low, high in zip(Mood, edges[:-1], edges[1:]):
        ax.axhspan(low, high, color=MOOD_COLORS[mood], alpha=0.12, label=mood.name)
    for frame, mood in changes:
        ax.axvline(t[frame], color=MOOD_COLORS[mood], linewidth=0.8, alpha=0.7)
    ax.set_ylabel("Stress")
    ax.set_xlabel("Time (seconds)")
    ax.set_ylim(0, 100)
    ax.set_xlim(0, t[-1])
    ax.legend(loc="upper right", fontsize=8)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    plt.savefig(args.out, dpi=150)
    print(f"Saved {args.out}")
    print(f"{len(changes)} mood changes, final mood {moods[-1].name}")
    plt.close()


if __name__ == "__main__":
    main()
