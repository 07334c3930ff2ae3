"""
Interactive simulation with a pygame 3D viewer.
"""

import json
import math
import sys
from typing import List, Optional, Tuple

import pygame

from ..core.config import FlockingParams, SimulationConfig
from ..core.terrain import HeightmapTerrain
from .engine import FlockSimulation


Vector3 = pygame.math.Vector3

# Camera settings
CAMERA_DISTANCE = 650.0
FOV = 700.0
TERRAIN_GRID = 24

# Follow camera: chase offset behind and above the boid, easing rate per second
FOLLOW_DISTANCE = 40.0
FOLLOW_HEIGHT = 12.0
FOLLOW_LOOK_AHEAD = 10.0
FOLLOW_EASING = 2.0

WEIGHT_STEP = 0.1
MAX_WEIGHT = 5.0
RADIUS_STEP = 1.0
MIN_RADIUS = 5.0
MAX_RADIUS = 100.0


class Camera:
    """Perspective camera orbiting a target point, or chasing a moving one."""

    def __init__(self, screen_size: Tuple[int, int], target=(0.0, 60.0, 0.0)):
        self.width, self.height = screen_size
        self.target = Vector3(target)
        self.yaw = math.radians(-90.0)
        self.pitch = math.radians(-25.0)
        self.rotate_speed = 0.03
        self._update_vectors()

    def _update_vectors(self) -> None:
        """Update camera basis vectors based on yaw and pitch."""
        self._set_basis(Vector3(
            math.cos(self.pitch) * math.cos(self.yaw),
            math.sin(self.pitch),
            math.cos(self.pitch) * math.sin(self.yaw)
        ))
        self.position = self.target - self.forward * CAMERA_DISTANCE
        self.focus = Vector3(self.target)

    def _set_basis(self, forward: Vector3) -> None:
        if forward.length_squared() == 0:
            return
        self.forward = forward.normalize()

        right = self.forward.cross(Vector3(0, 1, 0))
        # Looking straight up or down: any horizontal right vector works
        self.right = right.normalize() if right.length_squared() > 0 else Vector3(1, 0, 0)
        self.up = self.right.cross(self.forward).normalize()

    def follow(self, position: Vector3, heading: Optional[Vector3], delta_seconds: float) -> None:
        """
        Ease toward a chase view behind and above a moving point.

        Args:
            position: Point being followed
            heading: Its unit facing direction (current camera forward if None)
            delta_seconds: Elapsed time, which sets how far to ease this frame
        """
        if heading is None:
            heading = self.forward
        desired = position - heading * FOLLOW_DISTANCE + Vector3(0, FOLLOW_HEIGHT, 0)
        look_at = position + heading * FOLLOW_LOOK_AHEAD

        t = max(0.0, min(1.0, delta_seconds * FOLLOW_EASING))
        self.position = self.position.lerp(desired, t)
        self.focus = self.focus.lerp(look_at, t)
        self._set_basis(self.focus - self.position)

    def reset_orbit(self) -> None:
        """Return to the orbit view around the target."""
        self._update_vectors()

    def rotate(self, yaw_delta: float, pitch_delta: float) -> None:
        """Orbit by yaw and pitch deltas."""
        self.yaw += yaw_delta * self.rotate_speed
        self.pitch += pitch_delta * self.rotate_speed

        # Clamp pitch to avoid flipping over the pole
        self.pitch = max(-math.pi / 2 + 0.1, min(math.pi / 2 - 0.1, self.pitch))

        self._update_vectors()

    def project(self, point: Vector3) -> Tuple[Optional[Tuple[int, int]], float]:
        """
        Project a 3D point to 2D screen coordinates.

        Returns:
            ((x, y), scale), or (None, 0) if the point is behind the camera
        """
        to_point = point - self.position

        x = to_point.dot(self.right)
        y = to_point.dot(self.up)
        z = to_point.dot(self.forward)

        if z <= 1:
            return None, 0

        scale = FOV / z
        screen_x = int(self.width / 2 + x * scale)
        screen_y = int(self.height / 2 - y * scale)
        return (screen_x, screen_y), scale


def altitude_color(clearance: float, base: List[int]) -> Tuple[int, int, int]:
    """
    Shade a boid by its height above the ground: warm near the floor,
    the base color once comfortably high.
    """
    t = max(0.0, min(1.0, clearance / 100.0))
    low = (255, 90, 40)
    return tuple(int(low[i] + (base[i] - low[i]) * t) for i in range(3))


class Simulation:
    """
    Interactive flocking simulation with pygame visualization.

    Supports keyboard controls for adjusting flocking weights and radii in
    real-time, orbiting the camera, and following a single boid.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 params: Optional[FlockingParams] = None, oracle=None):
        """
        Initialize the simulation.

        Args:
            config: Simulation configuration (uses defaults if None)
            params: Flocking params (uses defaults if None)
            oracle: HeightOracle; a heightmap is generated from config if None
        """
        pygame.init()

        self.config = config if config else SimulationConfig()
        self.params = params if params else FlockingParams()
        self.oracle = oracle if oracle is not None else HeightmapTerrain.from_config(self.config)

        width = self.config.screenWidth
        height = self.config.screenHeight
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Flocking over Terrain")
        self.clock = pygame.time.Clock()

        self.simulation = FlockSimulation(self.config, self.oracle, self.params)
        self.camera = Camera((width, height))
        self.terrain_points = self._sample_terrain()

        self.follow_mode = False
        self.follow_index = 0
        self.running = True
        self.stats = {"avg_speed": 0.0, "avg_altitude": 0.0}

    def _sample_terrain(self) -> List[List[Vector3]]:
        """Sample the oracle on a coarse grid for the wireframe ground."""
        bound = self.config.worldBound
        coords = [-bound + 2 * bound * i / TERRAIN_GRID for i in range(TERRAIN_GRID + 1)]
        return [[Vector3(x, self.oracle.elevation_at(x, z), z) for x in coords] for z in coords]

    def update(self, delta_seconds: float) -> None:
        """Update simulation state for one frame."""
        self.simulation.step(delta_seconds)
        if self.follow_mode:
            self._update_follow_camera(delta_seconds)
        self._update_statistics()

    def followed_boid(self):
        """The boid the follow camera tracks, or None for an empty flock."""
        boids = self.simulation.agents()
        if not boids:
            return None
        return boids[self.follow_index % len(boids)]

    def _update_follow_camera(self, delta_seconds: float) -> None:
        boid = self.followed_boid()
        if boid is not None:
            self.camera.follow(boid.position, boid.heading, delta_seconds)

    def _update_statistics(self) -> None:
        boids = self.simulation.agents()
        if not boids:
            return
        self.stats["avg_speed"] = sum(b.velocity.length() for b in boids) / len(boids)
        self.stats["avg_altitude"] = sum(b.position.y for b in boids) / len(boids)

    def draw(self) -> None:
        """Render the current frame."""
        self.screen.fill(self.config.backgroundColor)
        self._draw_terrain()

        draw_list = []
        for boid in self.simulation.agents():
            pos_2d, scale = self.camera.project(boid.position)
            if pos_2d:
                dist = (boid.position - self.camera.position).length_squared()
                draw_list.append((dist, boid, pos_2d, scale))

        # Painter's algorithm: farthest first
        draw_list.sort(key=lambda item: item[0], reverse=True)

        for _, boid, pos_2d, scale in draw_list:
            clearance = boid.position.y - self.oracle.elevation_at(boid.position.x, boid.position.z)
            color = altitude_color(clearance, self.config.boidColor)
            size = max(2, min(12, int(3 * scale)))
            pygame.draw.circle(self.screen, color, pos_2d, size)

            if boid.heading is not None:
                tip, _ = self.camera.project(boid.position + boid.heading * 8)
                if tip:
                    pygame.draw.line(self.screen, color, pos_2d, tip, 1)

        self._draw_stats()
        pygame.display.flip()

    def _draw_terrain(self) -> None:
        """Draw the ground as a wireframe grid."""
        color = (62, 138, 74)
        rows = self.terrain_points
        for r, row in enumerate(rows):
            for c, point in enumerate(row):
                start, _ = self.camera.project(point)
                if not start:
                    continue
                if c + 1 < len(row):
                    end, _ = self.camera.project(row[c + 1])
                    if end:
                        pygame.draw.line(self.screen, color, start, end, 1)
                if r + 1 < len(rows):
                    end, _ = self.camera.project(rows[r + 1][c])
                    if end:
                        pygame.draw.line(self.screen, color, start, end, 1)

    def _draw_stats(self) -> None:
        """Draw statistics overlay."""
        font = pygame.font.Font(None, 24)
        y_offset = 10

        stats_text = [
            f"FPS: {int(self.clock.get_fps())}",
            f"Boids: {len(self.simulation.flock)}",
            f"Avg Speed: {self.stats['avg_speed']:.2f}",
            f"Avg Altitude: {self.stats['avg_altitude']:.1f}",
            f"Separation (Q/A): {self.params.separationWeight:.1f}",
            f"Alignment (W/S): {self.params.alignmentWeight:.1f}",
            f"Cohesion (E/D): {self.params.cohesionWeight:.1f}",
            f"Radii sep/ali/coh (R/F T/G Y/H): {self.params.separationRadius:.0f}/"
            f"{self.params.alignmentRadius:.0f}/{self.params.cohesionRadius:.0f}",
            f"Camera (V, N next): {'Bird View' if self.follow_mode else 'Orbit'}",
            f"Double buffer (B): {'ON' if self.config.doubleBuffered else 'OFF'}",
            f"Lift before integrate (L): {'ON' if self.config.liftBeforeIntegrate else 'OFF'}",
        ]

        for text in stats_text:
            surface = font.render(text, True, (20, 20, 30))
            self.screen.blit(surface, (10, y_offset))
            y_offset += 25

    def save_score(self) -> None:
        """Save run statistics to JSON file."""
        score_data = {
            "frame_count": self.simulation.frame_count,
            "boid_count": len(self.simulation.flock),
            "statistics": self.stats,
            "params": self.params.to_dict(),
            "config": self.config.to_dict(),
        }

        try:
            with open(self.config.scoreOutputFile, 'w') as f:
                json.dump(score_data, f, indent=4)
            print(f"Stats saved to {self.config.scoreOutputFile}")
        except OSError as e:
            print(f"Error saving stats: {e}")

    def run(self) -> None:
        """Run the simulation main loop."""
        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event.key)

            keys = pygame.key.get_pressed()
            yaw_delta = keys[pygame.K_RIGHT] - keys[pygame.K_LEFT]
            pitch_delta = keys[pygame.K_UP] - keys[pygame.K_DOWN]
            if (yaw_delta or pitch_delta) and not self.follow_mode:
                self.camera.rotate(yaw_delta, pitch_delta)

            delta_seconds = self.clock.tick(self.config.fpsTarget) / 1000.0
            self.update(delta_seconds)
            self.draw()

        pygame.quit()
        sys.exit()

    def _adjust_weight(self, name: str, delta: float) -> None:
        value = getattr(self.params, name) + delta
        setattr(self.params, name, round(max(0.0, min(MAX_WEIGHT, value)), 2))

    def _adjust_radius(self, name: str, delta: float) -> None:
        value = getattr(self.params, name) + delta
        setattr(self.params, name, max(MIN_RADIUS, min(MAX_RADIUS, value)))

    def toggle_follow(self) -> None:
        """Switch between the orbit view and following a single boid."""
        self.follow_mode = not self.follow_mode
        if not self.follow_mode:
            self.camera.reset_orbit()
        print(f"Camera: {'Bird View' if self.follow_mode else 'Orbit'}")

    def _handle_keydown(self, key: int) -> None:
        """Handle keyboard input."""
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_q:
            self._adjust_weight("separationWeight", WEIGHT_STEP)
        elif key == pygame.K_a:
            self._adjust_weight("separationWeight", -WEIGHT_STEP)
        elif key == pygame.K_w:
            self._adjust_weight("alignmentWeight", WEIGHT_STEP)
        elif key == pygame.K_s:
            self._adjust_weight("alignmentWeight", -WEIGHT_STEP)
        elif key == pygame.K_e:
            self._adjust_weight("cohesionWeight", WEIGHT_STEP)
        elif key == pygame.K_d:
            self._adjust_weight("cohesionWeight", -WEIGHT_STEP)
        elif key == pygame.K_r:
            self._adjust_radius("separationRadius", RADIUS_STEP)
        elif key == pygame.K_f:
            self._adjust_radius("separationRadius", -RADIUS_STEP)
        elif key == pygame.K_t:
            self._adjust_radius("alignmentRadius", RADIUS_STEP)
        elif key == pygame.K_g:
            self._adjust_radius("alignmentRadius", -RADIUS_STEP)
        elif key == pygame.K_y:
            self._adjust_radius("cohesionRadius", RADIUS_STEP)
        elif key == pygame.K_h:
            self._adjust_radius("cohesionRadius", -RADIUS_STEP)
        elif key == pygame.K_v:
            self.toggle_follow()
        elif key == pygame.K_n:
            self.follow_index += 1
        elif key == pygame.K_b:
            self.config.doubleBuffered = not self.config.doubleBuffered
            print(f"Double buffering: {'ON' if self.config.doubleBuffered else 'OFF'}")
        elif key == pygame.K_l:
            self.config.liftBeforeIntegrate = not self.config.liftBeforeIntegrate
            print(f"Lift before integrate: {'ON' if self.config.liftBeforeIntegrate else 'OFF'}")
        elif key == pygame.K_SPACE:
            self.save_score()
