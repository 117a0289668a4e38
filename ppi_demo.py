#!/usr/bin/env python3
"""
PPI Sweep Display Demo

Runs the radar display headless for a number of simulation ticks and saves:
- Indicator snapshots at several sweep angles (bezel + radar video)
- Illumination of each target against sweep angle

Terrain comes from a heightmap image when given, otherwise from seeded
synthetic relief.
"""
import argparse
import logging
import time

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from ppisim import RadarApp, RadarConfig
from ppisim.app import DEFAULT_TARGETS
from ppisim.terrain import load_image_heightmap, synthetic_heightmap


def main():
    ap = argparse.ArgumentParser(description="PPI sweep display demo (headless)")
    ap.add_argument("--config", type=str, help="RadarConfig YAML file")
    ap.add_argument("--heightmap", type=str, help="Heightmap image (avg RGB = elevation)")
    ap.add_argument("--ticks", type=int, default=360, help="Simulation ticks to run")
    ap.add_argument("--size", type=int, default=None, help="Indicator size in pixels")
    ap.add_argument("--snapshots", type=int, default=4, help="Indicator images to save")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    config = RadarConfig.from_yaml(args.config) if args.config else RadarConfig()
    if args.size:
        config.indicator_size_px = args.size
    config.ensure_valid()

    print("=" * 70)
    print("  PPI SWEEP DISPLAY")
    print("=" * 70)
    print(f"  Map size:       {config.map_size_m:.0f}")
    print(f"  Antenna height: {config.antenna_height_m:.1f}")
    print(f"  Gain:           {config.gain:.2f}")
    print(f"  Max range:      {config.effective_max_range_m:.0f}")
    print(f"  Indicator:      {config.indicator_size_px}px")

    print("\n[1/3] Loading terrain...")
    if args.heightmap:
        grid = load_image_heightmap(args.heightmap, config.terrain_max_height_m)
    else:
        grid = synthetic_heightmap(160, 160, max_height=config.terrain_max_height_m)
    print(f"      {grid.width}x{grid.height} samples, "
          f"elevation {grid.elevations.min():.1f} - {grid.elevations.max():.1f}")

    app = RadarApp(config, grid)
    app.seed_targets(DEFAULT_TARGETS)
    app.start()

    print(f"\n[2/3] Running {args.ticks} ticks...")
    snapshot_every = max(args.ticks // max(args.snapshots, 1), 1)
    snapshots = []
    angles = []
    traces = {t.name: [] for t in app.world.targets}

    t0 = time.time()
    for i in range(args.ticks):
        app.step()
        frame = app.pipeline.latest
        angles.append(frame.snapshot.sweep_angle_deg)
        for ret in frame.capture.targets:
            traces[ret.name].append(ret.illumination if ret.detected else 0.0)
        if (i + 1) % snapshot_every == 0 and len(snapshots) < args.snapshots:
            snapshots.append((frame.snapshot.sweep_angle_deg, app.display_image()))
    run_time = time.time() - t0
    print(f"      {args.ticks} ticks in {run_time:.1f}s ({args.ticks / max(run_time, 1e-9):.1f} ticks/s)")

    print("\n[3/3] Saving figures...")
    fig, axes = plt.subplots(1, len(snapshots), figsize=(5 * len(snapshots), 5))
    for ax, (angle, image) in zip(np.atleast_1d(axes), snapshots):
        ax.imshow(np.clip(image, 0, 1))
        ax.set_title(f"Sweep {angle:.0f}°", color='yellow', fontsize=11)
        ax.set_axis_off()
    fig.patch.set_facecolor('black')
    plt.tight_layout()
    plt.savefig("ppi_sweep_snapshots.png", dpi=120, facecolor='black', bbox_inches='tight')
    plt.close()
    print("      Saved: ppi_sweep_snapshots.png")

    fig, ax = plt.subplots(figsize=(10, 4))
    for name, values in traces.items():
        ax.plot(angles, values, '.', markersize=3, label=name)
    ax.axhline(1.0 - config.gain, color='gray', linestyle='--', linewidth=0.8, label='Gain threshold')
    ax.set_xlabel("Sweep angle (deg)")
    ax.set_ylabel("Displayed illumination")
    ax.set_xlim(0, 360)
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper right')
    plt.tight_layout()
    plt.savefig("ppi_target_illumination.png", dpi=120, bbox_inches='tight')
    plt.close()
    print("      Saved: ppi_target_illumination.png")

    print("\n" + "=" * 70)
    print("  DEMO COMPLETE")
    print("=" * 70)
    for entity in app.world.targets:
        x, y, z = entity.xyz
        print(f"  {entity.name}: ({x:.1f}, {y:.1f}, {z:.1f})")


if __name__ == "__main__":
    main()
