"""
Burst effects: particles thrown out of a point that fade away

Author: TM3
Date: 2026-03-02
"""
import math

from storefront.effects.particles import TWO_PI, Effect, Particle


class RainbowExplosion(Effect):
    """
    Confetti: one large central burst, then volleys of smaller bursts.
    A new volley starts whenever every particle has burnt out.
    """

    name = "confetti"
    colors = ("#FF0000", "#FF7F00", "#FFFF00", "#00FF00", "#0000FF", "#4B0082", "#9400D3")
    volley_size = 5
    volley_delay_ms = 300

    def start(self):
        self.explode(self.width / 2, self.height / 2, 200)
        self.schedule(1000, self.volley)

    def explode(self, x: float, y: float, count: int):
        for _ in range(count):
            angle = self.rng.random() * TWO_PI
            speed = self.uniform(2, 12)
            life = self.uniform(50, 150)
            self.particles.append(Particle(
                x=x,
                y=y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
                size=self.uniform(5, 15) * 2,
                color=self.pick(self.colors),
                gravity=0.1,
                life=life,
                max_life=life,
                shrink=True,
            ))

    def volley(self):
        for index in range(self.volley_size):
            self.schedule(index * self.volley_delay_ms, self._random_burst)

    def _random_burst(self):
        x = self.rng.random() * self.width
        y = self.rng.random() * self.height * 0.7
        self.explode(x, y, 100)

    def after_update(self):
        if not self.particles and not self.has_pending:
            self.volley()


class FireworksDisplay(Effect):
    """Rockets climb to a random height and explode; a new one every 800 ms"""

    name = "fireworks"
    colors = ("#FF5252", "#FFD740", "#64FFDA", "#448AFF", "#E040FB")
    launch_interval_ms = 800

    def start(self):
        self.last_launch_ms = 0.0
        for index in range(5):
            self.schedule(index * 500, self.launch)

    def launch(self):
        self.particles.append(Particle(
            shape="rocket",
            x=self.rng.random() * self.width,
            y=self.height,
            vy=-self.uniform(3, 7),
            size=4,
            color=self.pick(self.colors),
            data={"target_y": self.height * 0.2 + self.rng.random() * self.height * 0.5},
        ))

    def explode(self, rocket: Particle):
        count = 100 + int(self.rng.random() * 50)
        for _ in range(count):
            angle = self.rng.random() * TWO_PI
            speed = self.uniform(2, 7)
            self.particles.append(Particle(
                shape="spark",
                x=rocket.x,
                y=rocket.y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
                size=self.uniform(1, 4) * 2,
                color=rocket.color,
                gravity=self.uniform(0.05, 0.08),
                fade=self.uniform(0.01, 0.02),
            ))
        rocket.opacity = 0.0

    def advance(self, particle: Particle, dt: float):
        particle.step(dt)
        if particle.shape == "rocket" and particle.y <= particle.data["target_y"]:
            self.explode(particle)

    def after_update(self):
        if self.elapsed_ms - self.last_launch_ms > self.launch_interval_ms:
            self.launch()
            self.last_launch_ms = self.elapsed_ms
