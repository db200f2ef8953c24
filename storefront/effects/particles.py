"""
Particle primitives for the celebration effects

Time is measured in frames of a 60 fps animation: `dt=1.0` advances one
frame, velocities are pixels per frame. Every effect owns a seedable
random.Random so a seed reproduces the exact same animation.

Author: TM3
Date: 2026-03-02
"""
import heapq
import itertools
import math
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

FRAME_MS = 1000.0 / 60.0
TWO_PI = math.pi * 2


@dataclass
class Particle:
    """
    One moving sprite.

    `size` is the diameter (or the width of rectangular shapes, whose
    height goes in `height`). A particle with a `life` fades with its
    remaining life; otherwise it loses `fade` opacity per frame.
    """
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    size: float = 1.0
    height: float = 0.0
    color: str = "#FFFFFF"
    shape: str = "circle"
    label: str = ""
    gravity: float = 0.0
    rotation: float = 0.0
    spin: float = 0.0
    opacity: float = 1.0
    fade: float = 0.0
    life: Optional[float] = None
    max_life: Optional[float] = None
    shrink: bool = False
    data: Dict[str, Any] = field(default_factory=dict)

    def step(self, dt: float = 1.0):
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.vy += self.gravity * dt
        self.rotation += self.spin * dt

        if self.life is not None:
            self.life -= dt
            self.opacity = max(self.life, 0.0) / self.max_life
        elif self.fade:
            self.opacity = max(0.0, self.opacity - self.fade * dt)

    @property
    def alive(self) -> bool:
        if self.life is not None and self.life <= 0:
            return False
        return self.opacity > 0

    def snapshot(self) -> Dict[str, Any]:
        size = self.size * self.opacity if self.shrink else self.size
        state = {
            "shape": self.shape,
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "size": round(size, 2),
            "color": self.color,
            "rotation": round(self.rotation, 4),
            "opacity": round(self.opacity, 3),
        }
        if self.height:
            state["height"] = round(self.height, 2)
        if self.label:
            state["label"] = self.label
        return state


class Effect:
    """
    Base class of an effect: a particle list, a clock and delayed spawns.

    Subclasses fill `start()` with the initial particles and may override
    `advance()` (per particle motion) and `after_update()` (per frame
    bookkeeping such as launching new bursts).
    """

    name = ""

    def __init__(self, width: float, height: float, seed: Optional[int] = None):
        self.width = float(width)
        self.height = float(height)
        self.rng = random.Random(seed)
        self.particles: List[Particle] = []
        self.elapsed_ms = 0.0
        self.frame_index = 0
        self._scheduled: List[Tuple[float, int, Callable[[], None]]] = []
        self._order = itertools.count()
        self.start()

    def start(self):
        raise NotImplementedError

    # Randomness

    def uniform(self, low: float, high: float) -> float:
        return low + self.rng.random() * (high - low)

    def spread(self, amount: float) -> float:
        """Symmetric random value in [-amount/2, amount/2)"""
        return (self.rng.random() - 0.5) * amount

    def pick(self, choices: Sequence[str]) -> str:
        return self.rng.choice(choices)

    # Scheduling

    def schedule(self, delay_ms: float, callback: Callable[[], None]):
        heapq.heappush(self._scheduled, (self.elapsed_ms + delay_ms, next(self._order), callback))

    @property
    def has_pending(self) -> bool:
        return bool(self._scheduled)

    def _run_due(self):
        while self._scheduled and self._scheduled[0][0] <= self.elapsed_ms:
            _, _, callback = heapq.heappop(self._scheduled)
            callback()

    # Simulation

    def advance(self, particle: Particle, dt: float):
        particle.step(dt)

    def after_update(self):
        pass

    def update(self, dt: float = 1.0):
        self.elapsed_ms += dt * FRAME_MS
        self.frame_index += 1
        self._run_due()

        for particle in list(self.particles):
            self.advance(particle, dt)
        self.particles = [p for p in self.particles if p.alive]

        self.after_update()

    @property
    def finished(self) -> bool:
        return False

    def snapshot(self) -> List[Dict[str, Any]]:
        return [p.snapshot() for p in self.particles]
