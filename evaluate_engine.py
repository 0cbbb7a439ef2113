import os
import csv
import math
import random
import argparse
from datetime import datetime

import numpy as np
import matplotlib.pyplot as plt

from bubble_engine import BubbleShooterEngine
from bubble_geometry import (
    BUBBLE_COLORS, BUBBLE_COLORS_COUNT, MAX_AIM_ANGLE, SCREEN_HEIGHT, SHOOT_SPEED,
    encode_color_planes,
)
from bubble_matching import STATUS_PLAYING

# Slowest climb is at the steepest aim; the board height bounds every flight
MAX_TICKS_PER_SHOT = int(SCREEN_HEIGHT / (SHOOT_SPEED * math.cos(MAX_AIM_ANGLE))) + 1


def ensure_dir(path: str):
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def play_shot(engine: BubbleShooterEngine, angle: float):
    """Aim, fire and tick until the shot lands. Returns the landing TickResult or None."""
    engine.set_aim(angle)
    if not engine.fire():
        return None
    for _ in range(MAX_TICKS_PER_SHOT):
        result = engine.tick()
        if result.impact is not None:
            return result
    print(f"Warning: shot at angle {angle:.3f} did not land within {MAX_TICKS_PER_SHOT} ticks")
    return None


def play_random_game(seed: int, max_shots: int = 200):
    """
    Play one game with uniformly random aim.

    Returns:
        (engine, rows) where rows holds one dict per shot
    """
    rng = random.Random(seed)
    engine = BubbleShooterEngine(seed=seed)
    rows = []
    while engine.status == STATUS_PLAYING and engine.shots_fired < max_shots:
        angle = rng.uniform(-MAX_AIM_ANGLE, MAX_AIM_ANGLE)
        before = len(engine.grid)
        result = play_shot(engine, angle)
        if result is None:
            break
        match = result.match
        rows.append({
            "shot": engine.shots_fired,
            "angle": round(angle, 4),
            "ticks": result.impact.projectile.move_frames,
            "bounces": result.impact.projectile.bounce_count,
            "hit_ceiling": int(result.impact.hit is None),
            "cluster": len(match.cluster) if match else 0,
            "popped": int(bool(match and match.popped)),
            "floating": len(match.floating) if match else 0,
            "score_delta": result.score_delta,
            "bubbles_before": before,
            "bubbles_after": len(engine.grid),
            "status": result.status,
        })
    return engine, rows


def evaluate_random_policy(num_games: int, output_dir: str, seed: int = 42,
                           max_shots: int = 200, plot: bool = True):
    ensure_dir(output_dir)
    csv_path = os.path.join(output_dir, "shots.csv")
    fieldnames = ["game", "shot", "angle", "ticks", "bounces", "hit_ceiling", "cluster", "popped",
                  "floating", "score_delta", "bubbles_before", "bubbles_after", "status"]

    final_scores = []
    shots_per_game = []
    outcomes = {"won": 0, "lost": 0, "playing": 0}
    color_totals = np.zeros(BUBBLE_COLORS_COUNT)

    with open(csv_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for game in range(num_games):
            engine, rows = play_random_game(seed + game, max_shots)
            for row in rows:
                writer.writerow(dict(row, game=game))
            final_scores.append(engine.score)
            shots_per_game.append(engine.shots_fired)
            outcomes[engine.status] += 1
            # Bubbles left on the final board, per color
            color_totals += encode_color_planes(engine.grid.snapshot()).sum(axis=1)

    avg_score = sum(final_scores) / len(final_scores) if final_scores else 0.0
    avg_shots = sum(shots_per_game) / len(shots_per_game) if shots_per_game else 0.0
    color_occupancy = color_totals / num_games if num_games else color_totals
    with open(os.path.join(output_dir, "summary.txt"), "w") as sf:
        sf.write(f"Games: {num_games}\n")
        sf.write(f"Won: {outcomes['won']}  Lost: {outcomes['lost']}  Unfinished: {outcomes['playing']}\n")
        sf.write(f"Average score: {avg_score:.2f}\n")
        sf.write(f"Average shots: {avg_shots:.2f}\n")
        sf.write("Average bubbles left per color:\n")
        for color_idx, avg_left in enumerate(color_occupancy):
            sf.write(f"  Color {color_idx} {BUBBLE_COLORS[color_idx]}: {avg_left:.2f}\n")

    if plot and final_scores:
        fig, (ax1, ax2, ax3) = plt.subplots(1, 3, figsize=(17, 5))
        bins = max(1, int(math.sqrt(len(final_scores))))
        ax1.hist(final_scores, bins=bins, color="tab:blue")
        ax1.set_xlabel("Final score")
        ax1.set_ylabel("Games")
        ax1.set_title("Score distribution (random aim)")
        ax2.scatter(shots_per_game, final_scores, s=12, color="tab:orange")
        ax2.set_xlabel("Shots fired")
        ax2.set_ylabel("Final score")
        ax2.set_title("Score vs. game length")
        bar_colors = [tuple(c / 255.0 for c in rgb) for rgb in BUBBLE_COLORS]
        ax3.bar(range(BUBBLE_COLORS_COUNT), color_occupancy, color=bar_colors, edgecolor="black")
        ax3.set_xlabel("Color index")
        ax3.set_ylabel("Avg bubbles left")
        ax3.set_title("Final board occupancy by color")
        plt.tight_layout()
        plt.savefig(os.path.join(output_dir, "scores.png"), dpi=150)
        plt.close(fig)

    return {
        "scores": final_scores,
        "shots": shots_per_game,
        "outcomes": outcomes,
        "color_occupancy": color_occupancy.tolist(),
        "csv": csv_path,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play headless random-aim games and report statistics")
    parser.add_argument("--games", type=int, default=100)
    parser.add_argument("--max_shots", type=int, default=200, help="Stop a game after N shots (default: 200)")
    parser.add_argument("--out", type=str, default="eval_outputs")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--no_plot", action="store_true", help="Skip the matplotlib charts")
    args = parser.parse_args(argv)

    ts_dir = os.path.join(args.out, datetime.now().strftime("%Y%m%d_%H%M%S"))
    evaluate_random_policy(args.games, ts_dir, seed=args.seed, max_shots=args.max_shots, plot=not args.no_plot)
    print(f"Evaluation complete. Results in: {ts_dir}")


if __name__ == "__main__":
    main()
