"""
Tests for the room scene: input, firing, scoring, room exits and the game over hand-off.
"""
import pytest
from game.venture.config import DEFAULT_CONFIG, COLORS, SoundKeys
from game.venture.room_scene import Controls, RoomScene, direction_from_velocity
from game.venture.state import GamePhase
from game.venture.utils import bodies_overlap

FRAME_MS = 16


def quiet_scene(sounds, seed=11, on_exit=None):
    """Scene with no enemies and no divider, so only what a test adds can interfere"""
    scene = RoomScene(DEFAULT_CONFIG, sounds, seed=seed, on_exit=on_exit).create()
    scene.enemy_director.clear_enemies()
    scene.room_builder.divider.destroy()
    scene.room_builder.treasure.set_position(300.0, 300.0)
    return scene


def place_enemy(scene, dx=0.0, dy=0.0, hunter=False):
    director = scene.enemy_director
    enemy = director.spawn_hunter() if hunter else director.spawn_enemy()
    enemy.set_position(scene.player.x + dx, scene.player.y + dy)
    enemy.set_velocity(0.0, 0.0)
    return enemy


class TestDirection:

    @pytest.mark.parametrize("vx, vy, expected", [
        (0, -1, 0), (1, -1, 1), (1, 0, 2), (1, 1, 3),
        (0, 1, 4), (-1, 1, 5), (-1, 0, 6), (-1, -1, 7),
    ])
    def test_eight_way(self, vx, vy, expected):
        assert direction_from_velocity(vx, vy) == expected

    def test_zero_keeps_facing(self):
        assert direction_from_velocity(0, 0, 5) == 5


class TestLifecycle:

    def test_create(self, sounds):
        scene = RoomScene(DEFAULT_CONFIG, sounds, seed=1).create()

        assert scene.room_index == 1
        assert scene.score == 0
        assert scene.state.phase is GamePhase.PLAYING
        assert len(scene.room_builder.walls) == 6
        assert scene.enemy_director.wandering_count() == DEFAULT_CONFIG.enemy_count
        assert scene.room_builder.door is not None
        assert scene.room_builder.treasure is not None
        assert (scene.player.x, scene.player.y) == DEFAULT_CONFIG.player_spawn
        assert scene.player.facing == 0
        assert sounds.music_started == 1
        assert scene.clock.pending_count == 2

    def test_update_before_create(self):
        with pytest.raises(RuntimeError):
            RoomScene().update(FRAME_MS)

    def test_shutdown_twice(self, sounds):
        scene = RoomScene(DEFAULT_CONFIG, sounds, seed=1).create()
        scene.shutdown()
        scene.shutdown()

        assert scene.clock.pending_count == 0
        assert all(not c.active for c in scene.world.colliders)

    def test_create_restarts(self, sounds):
        scene = quiet_scene(sounds)
        scene.state.add_score(75)
        scene.state.room_index = 4

        scene.create()

        assert scene.score == 0
        assert scene.room_index == 1
        assert scene.now == 0
        assert sounds.music_started == 2

    def test_same_seed_same_room(self, sounds):
        first = RoomScene(DEFAULT_CONFIG, sounds, seed=5).create()
        second = RoomScene(DEFAULT_CONFIG, sounds, seed=5).create()

        t1, t2 = first.room_builder.treasure, second.room_builder.treasure
        assert (t1.x, t1.y) == (t2.x, t2.y)
        assert [(e.x, e.y) for e in first.enemy_director.enemies] == \
            [(e.x, e.y) for e in second.enemy_director.enemies]


class TestInput:
    """Controls become player velocity and facing."""

    def test_move_right(self, sounds):
        scene = quiet_scene(sounds)
        x0 = scene.player.x

        scene.update(100, Controls(right=True))

        assert scene.player.vx == pytest.approx(DEFAULT_CONFIG.player_speed)
        assert scene.player.x == pytest.approx(x0 + 20.0)
        assert scene.player.facing == 2

    def test_diagonal_scaled(self, sounds):
        scene = quiet_scene(sounds)
        scene.update(FRAME_MS, Controls(up=True, right=True))

        expected = DEFAULT_CONFIG.player_speed * DEFAULT_CONFIG.diagonal_multiplier
        assert scene.player.vx == pytest.approx(expected)
        assert scene.player.vy == pytest.approx(-expected)
        assert scene.player.facing == 1

    def test_left_wins_over_right(self, sounds):
        scene = quiet_scene(sounds)
        scene.update(FRAME_MS, Controls(left=True, right=True, up=True, down=True))

        assert scene.player.facing == 7
        assert scene.player.vx < 0 and scene.player.vy < 0

    def test_release_keeps_facing(self, sounds):
        scene = quiet_scene(sounds)
        scene.update(FRAME_MS, Controls(down=True))
        scene.update(FRAME_MS, Controls())

        assert scene.player.facing == 4
        assert (scene.player.vx, scene.player.vy) == (0.0, 0.0)

    def test_fire_once_while_held(self, sounds):
        scene = quiet_scene(sounds)

        scene.update(FRAME_MS, Controls(fire=True))
        assert scene.events["shot"] == 1.0

        scene.update(FRAME_MS, Controls(fire=True))
        assert scene.events["shot"] == 0.0
        assert sounds.count(SoundKeys.SHOOT) == 1

    def test_walls_stop_player(self, sounds):
        scene = quiet_scene(sounds)
        for _ in range(300):
            scene.update(FRAME_MS, Controls(left=True))

        left_wall_edge = DEFAULT_CONFIG.wall_thickness
        assert scene.player.x - scene.player.radius >= left_wall_edge - 1e-6

    def test_idle_player_inside_divider_stays_in_room(self, sounds):
        """A player spawned inside the divider is not pushed toward the door."""
        scene = RoomScene(DEFAULT_CONFIG, sounds, seed=11).create()
        scene.enemy_director.clear_enemies()
        scene.room_builder.treasure.set_position(300.0, 300.0)
        spawn_x, spawn_y = DEFAULT_CONFIG.player_spawn
        divider = scene.room_builder.divider
        divider.set_position(spawn_x, spawn_y - 50.0)
        assert bodies_overlap(scene.player, divider)

        for _ in range(30):
            scene.update(FRAME_MS, Controls())

        assert scene.room_index == 1
        assert (scene.player.x, scene.player.y) == (spawn_x, spawn_y)
        assert sounds.count(SoundKeys.POWER_UP) == 0

    def test_player_walks_out_of_divider(self, sounds):
        scene = RoomScene(DEFAULT_CONFIG, sounds, seed=11).create()
        scene.enemy_director.clear_enemies()
        scene.room_builder.treasure.set_position(300.0, 300.0)
        spawn_x, spawn_y = DEFAULT_CONFIG.player_spawn
        scene.room_builder.divider.set_position(spawn_x, spawn_y - 50.0)

        for _ in range(20):
            scene.update(FRAME_MS, Controls(left=True))

        assert scene.player.x < spawn_x - 50.0
        assert scene.player.y == spawn_y
        assert scene.room_index == 1


class TestScoring:

    def test_treasure_pickup(self, sounds):
        scene = quiet_scene(sounds)
        treasure = scene.room_builder.treasure
        scene.player.set_position(treasure.x, treasure.y)

        scene.update(FRAME_MS)

        assert scene.score == DEFAULT_CONFIG.score_treasure
        assert scene.events["score"] == DEFAULT_CONFIG.score_treasure
        assert scene.events["treasure"] == 1.0
        assert scene.room_builder.treasure is None
        assert sounds.count(SoundKeys.PICKUP) == 1

    def test_arrow_stuns_enemy(self, sounds):
        scene = quiet_scene(sounds)
        enemy = place_enemy(scene, dy=-60.0)

        scene.update(FRAME_MS, Controls(fire=True))
        for _ in range(10):
            scene.update(FRAME_MS)

        assert enemy.hit
        assert enemy.color == COLORS["ENEMY_HIT"]
        assert scene.score == DEFAULT_CONFIG.score_enemy
        assert sounds.count(SoundKeys.HIT) == 1

    def test_arrow_ignored_by_hunter(self, sounds):
        scene = quiet_scene(sounds)
        hunter = place_enemy(scene, dy=-150.0, hunter=True)

        scene.update(FRAME_MS, Controls(fire=True))
        for _ in range(20):
            scene.update(FRAME_MS)

        assert hunter.active and not hunter.hit
        assert scene.score == 0
        assert scene.arrow_manager.active_count() == 0


class TestEnemies:

    def test_hunter_chases(self, sounds):
        scene = quiet_scene(sounds)
        hunter = place_enemy(scene, dy=-150.0, hunter=True)

        scene.update(FRAME_MS)

        assert hunter.vx == pytest.approx(0.0, abs=1e-9)
        assert hunter.vy == pytest.approx(DEFAULT_CONFIG.hunter_speed)

    def test_spawn_roll_waits_for_threshold(self, sounds):
        scene = quiet_scene(sounds)

        scene.clock.advance(4999)
        assert scene.enemy_director.spawn_rolls == 0

        scene.clock.advance(1)
        assert scene.enemy_director.spawn_rolls == 1

    def test_hunter_appears_by_cap_time(self, sounds):
        scene = quiet_scene(sounds)
        scene.clock.advance(DEFAULT_CONFIG.spawn_cap_time * 1000)

        assert scene.enemy_director.hunter_count() == 1


class TestDoor:

    def test_next_room(self, sounds):
        scene = quiet_scene(sounds)
        old_treasure = scene.room_builder.treasure
        door = scene.room_builder.door
        scene.player.set_position(door.x, door.y)

        scene.update(FRAME_MS)

        assert scene.room_index == 2
        assert scene.events["room"] == 1.0
        assert sounds.count(SoundKeys.POWER_UP) == 1
        assert (scene.player.x, scene.player.y) == DEFAULT_CONFIG.player_spawn
        assert scene.enemy_director.wandering_count() == DEFAULT_CONFIG.enemy_count
        assert scene.room_builder.treasure is not old_treasure
        assert not old_treasure.active
        assert scene.room_builder.door is door

    def test_score_carries_over(self, sounds):
        scene = quiet_scene(sounds)
        scene.state.add_score(50)
        door = scene.room_builder.door
        scene.player.set_position(door.x, door.y)

        scene.update(FRAME_MS)

        assert scene.score == 50
        assert scene.enemy_director.room_start_time == scene.now - FRAME_MS


class TestGameOver:
    """Touching an enemy freezes the room and hands the score off two seconds later."""

    def test_exit_after_delay(self, sounds):
        exits = []
        scene = quiet_scene(sounds, on_exit=exits.append)
        scene.state.add_score(25)
        place_enemy(scene)
        place_enemy(scene, dx=3.0)

        scene.update(FRAME_MS)

        assert scene.is_game_over
        assert scene.state.game_over_time == 0
        assert scene.events["game_over"] == 1.0
        assert scene.world.paused
        assert scene.player.color == COLORS["GAME_OVER"]
        assert sounds.count(SoundKeys.BOOM) == 1

        scene.update(DEFAULT_CONFIG.game_over_transition_delay - FRAME_MS - 1)
        assert not scene.exited
        assert exits == []

        scene.update(1)
        assert scene.exited
        assert exits == [25]

        scene.update(5000)
        assert exits == [25]

    def test_frozen_after_game_over(self, sounds):
        scene = quiet_scene(sounds)
        place_enemy(scene)
        scene.update(FRAME_MS)
        x, y = scene.player.x, scene.player.y

        scene.update(FRAME_MS, Controls(right=True, fire=True))

        assert (scene.player.x, scene.player.y) == (x, y)
        assert scene.events["shot"] == 0.0
        assert scene.enemy_director.is_game_over

    def test_no_exit_after_shutdown(self, sounds):
        exits = []
        scene = quiet_scene(sounds, on_exit=exits.append)
        place_enemy(scene)
        scene.update(FRAME_MS)

        scene.shutdown()
        scene.clock.advance(5000)

        assert exits == []
