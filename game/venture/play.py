"""
Play the room core in an arcade window

Usage:
    python -m game.venture.play [--seed N] [--sound-dir DIR] [--no-music] [--debug]

Controls:
    Arrow keys: Move
    Space: Fire
    Escape: Quit
"""

import argparse

import arcade

from .config import make_config
from .room_scene import RoomScene
from .sounds import ArcadeSoundBoard, SoundBoard
from .window import VentureWindow


def main():
    parser = argparse.ArgumentParser(description="Play Venture Arcade")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for room layouts and enemy rolls (default: random)",
    )
    parser.add_argument(
        "--sound-dir",
        type=str,
        default=None,
        help="Directory with shoot/hit/boom/pickup/powerUp sound files (default: silent)",
    )
    parser.add_argument(
        "--no-music",
        action="store_true",
        help="Skip the background music",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print spawn rolls and room transitions",
    )

    args = parser.parse_args()

    config = make_config(debug_log=args.debug)
    sounds = ArcadeSoundBoard(args.sound_dir, mute_music=args.no_music) if args.sound_dir else SoundBoard()

    scene = RoomScene(config=config, sounds=sounds, seed=args.seed)
    window = VentureWindow(scene, interactive=True)

    def on_exit(final_score: int):
        # The menu and high-score list live elsewhere; report and close
        print(f"Final score: {final_score}  (room {scene.room_index})")
        window.close()

    scene.on_exit = on_exit
    scene.create()

    arcade.run()
    scene.shutdown()


if __name__ == "__main__":
    main()
