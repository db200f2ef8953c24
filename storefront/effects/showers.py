"""
Shower effects: sprites that drift across the screen and wrap around

Falling showers (coins, bills, diamonds, cards) respawn above the top edge
once they leave the bottom; shopping bags rise and respawn below the
bottom edge. Balloons rise once and the effect ends when all are gone.

Author: TM3
Date: 2026-03-02
"""
import math
from typing import Sequence

from storefront.effects.particles import TWO_PI, Effect, Particle


class ShowerEffect(Effect):
    """Spawns `count` particles, one every `stagger_ms`"""

    count = 0
    stagger_ms = 0.0
    colors: Sequence[str] = ("#FFFFFF",)

    def start(self):
        for index in range(self.count):
            if self.stagger_ms:
                self.schedule(index * self.stagger_ms, self._spawn)
            else:
                self._spawn()

    def _spawn(self):
        self.particles.append(self.make())

    def make(self) -> Particle:
        raise NotImplementedError

    def recycle(self, particle: Particle):
        pass

    def advance(self, particle: Particle, dt: float):
        particle.step(dt)
        self.recycle(particle)

    def random_x(self) -> float:
        return self.rng.random() * self.width


class CoinShower(ShowerEffect):
    name = "coin_shower"
    count = 100
    stagger_ms = 50
    colors = ("#FFD700",)

    def make(self) -> Particle:
        size = self.uniform(20, 50)
        return Particle(
            shape="coin",
            x=self.random_x(),
            y=-size - self.rng.random() * 500,
            size=size,
            vy=self.uniform(2, 7),
            vx=self.spread(2),
            rotation=self.rng.random() * TWO_PI,
            spin=self.spread(0.2),
            color=self.colors[0],
            label="$",
        )

    def recycle(self, particle: Particle):
        if particle.y > self.height + particle.size:
            particle.y = -particle.size
            particle.x = self.random_x()


class MoneyRain(ShowerEffect):
    name = "money_rain"
    count = 150
    colors = ("#85bb65", "#118C4F", "#66a359", "#D4AF37")
    denominations = ("$", "$$", "$$$")

    def make(self) -> Particle:
        width = self.uniform(60, 120)
        return Particle(
            shape="bill",
            x=self.random_x(),
            y=-100 - self.rng.random() * 1000,
            size=width,
            height=width * 0.45,
            vy=self.uniform(2, 10),
            rotation=self.rng.random() * TWO_PI,
            spin=self.spread(0.1),
            color=self.pick(self.colors),
            label=self.pick(self.denominations),
        )

    def recycle(self, particle: Particle):
        if particle.y > self.height + 100:
            particle.y = -100 - self.rng.random() * 200
            particle.x = self.random_x()


class DiamondShower(ShowerEffect):
    name = "diamond_shower"
    count = 100
    stagger_ms = 50
    colors = ("#A5F2F3", "#DEF8F9", "#A1EAFB", "#D1F4FF", "#FFFFFF", "#E0F7FA", "#84FFFF", "#18FFFF")

    def make(self) -> Particle:
        size = self.uniform(30, 80)
        return Particle(
            shape="diamond",
            x=self.random_x(),
            y=-size - self.rng.random() * 500,
            size=size,
            vy=self.uniform(1, 5),
            vx=self.spread(2),
            rotation=self.rng.random() * TWO_PI,
            spin=self.spread(0.1),
            opacity=self.uniform(0.7, 1.0),
            color=self.pick(self.colors),
        )

    def recycle(self, particle: Particle):
        if particle.y > self.height + particle.size:
            particle.y = -particle.size
            particle.x = self.random_x()


class CreditCardRain(ShowerEffect):
    name = "credit_card_rain"
    count = 50
    stagger_ms = 100
    colors = ("#5D5FEF", "#EF5DA8", "#5DEFCB", "#EFCF5D", "#A6A6A6")

    def make(self) -> Particle:
        width = self.uniform(60, 80)
        height = width * 0.63
        return Particle(
            shape="card",
            x=self.random_x(),
            y=-height - self.rng.random() * 500,
            size=width,
            height=height,
            vy=self.uniform(1, 4),
            vx=self.spread(1.5),
            rotation=self.rng.random() * TWO_PI,
            spin=self.spread(0.05),
            color=self.pick(self.colors),
        )

    def recycle(self, particle: Particle):
        if particle.y > self.height + particle.height:
            particle.y = -particle.height
            particle.x = self.random_x()


class GiftCardRain(CreditCardRain):
    name = "gift_card"
    stagger_ms = 80
    colors = ("#FF5252", "#FF9800", "#4CAF50", "#2196F3", "#9C27B0", "#F44336")
    values = ("$10", "$25", "$50", "$100", "$200", "VIP")

    def make(self) -> Particle:
        width = self.uniform(80, 120)
        height = width * 0.6
        return Particle(
            shape="gift_card",
            x=self.random_x(),
            y=-height - self.rng.random() * 500,
            size=width,
            height=height,
            vy=self.uniform(1, 4),
            vx=self.spread(1.5),
            rotation=self.rng.random() * TWO_PI,
            spin=self.spread(0.05),
            color=self.pick(self.colors),
            label=self.pick(self.values),
        )


class ShoppingBags(ShowerEffect):
    name = "shopping_bags"
    count = 40
    stagger_ms = 100
    colors = ("#FF5252", "#FF9800", "#4CAF50", "#2196F3", "#9C27B0")

    def make(self) -> Particle:
        size = self.uniform(40, 80)
        return Particle(
            shape="bag",
            x=self.random_x(),
            y=self.height + size,
            size=size,
            vy=-self.uniform(1, 4),
            vx=self.spread(1.5),
            rotation=self.rng.random() * math.pi * 0.2 - math.pi * 0.1,
            spin=self.spread(0.02),
            opacity=self.uniform(0.8, 1.0),
            color=self.pick(self.colors),
        )

    def recycle(self, particle: Particle):
        if particle.y < -particle.size * 2:
            particle.y = self.height + particle.size
            particle.x = self.random_x()
            particle.vy = -self.uniform(1, 4)


class BalloonRelease(ShowerEffect):
    """Balloons rise with a sideways wobble; nothing respawns"""

    name = "balloon_release"
    count = 30
    colors = ("#FF5252", "#FFD740", "#64FFDA", "#448AFF", "#E040FB", "#69F0AE")
    clock_step = 0.01

    def start(self):
        self.clock = 0.0
        super().start()

    def make(self) -> Particle:
        radius = self.uniform(20, 50)
        return Particle(
            shape="balloon",
            x=self.random_x(),
            y=self.height + radius + self.rng.random() * 200,
            size=radius * 2,
            vx=self.spread(0.5),
            vy=-self.uniform(1, 2.5),
            color=self.pick(self.colors),
            data={
                "wobble_speed": self.uniform(0.01, 0.03),
                "wobble_amount": self.uniform(2, 5),
                "wobble_offset": self.rng.random() * TWO_PI,
                "string_length": self.uniform(50, 100),
            },
        )

    def update(self, dt: float = 1.0):
        self.clock += self.clock_step * dt
        super().update(dt)

    def advance(self, particle: Particle, dt: float):
        data = particle.data
        particle.step(dt)
        particle.x += math.sin(self.clock * data["wobble_speed"] + data["wobble_offset"]) * data["wobble_amount"] * dt

        # Gone once the string has left the top edge
        if particle.y + particle.size / 2 + data["string_length"] <= 0:
            particle.opacity = 0.0

    @property
    def finished(self) -> bool:
        return not self.particles and not self.has_pending
