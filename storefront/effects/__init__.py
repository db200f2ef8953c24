"""
Celebration effects played after a completed task

Each effect is an independent particle simulation. `render_frames` runs
one headless and returns per-frame particle snapshots that the task page
draws on a canvas.
"""
from typing import Any, Dict, List, Optional, Type

from storefront.core.errors import NotFoundError
from storefront.effects.bursts import FireworksDisplay, RainbowExplosion
from storefront.effects.particles import FRAME_MS, Effect, Particle
from storefront.effects.showers import (
    BalloonRelease,
    CoinShower,
    CreditCardRain,
    DiamondShower,
    GiftCardRain,
    MoneyRain,
    ShoppingBags,
)

EFFECTS: Dict[str, Type[Effect]] = {
    cls.name: cls
    for cls in (
        RainbowExplosion,
        CoinShower,
        FireworksDisplay,
        MoneyRain,
        BalloonRelease,
        DiamondShower,
        CreditCardRain,
        ShoppingBags,
        GiftCardRain,
    )
}

EFFECT_NAMES = tuple(EFFECTS)


def create_effect(name: str, width: float, height: float, seed: Optional[int] = None) -> Effect:
    try:
        effect_cls = EFFECTS[name]
    except KeyError:
        raise NotFoundError(f"Unknown effect {name}") from None
    return effect_cls(width, height, seed=seed)


# Upper bounds for one render: 5 s of animation at 60 fps, and the particles
# drawn per frame
MAX_FRAMES = 300
MAX_PARTICLES = 300


def render_frames(
    name: str,
    width: float,
    height: float,
    frames: int,
    seed: Optional[int] = None,
    dt: float = 1.0
) -> List[List[Dict[str, Any]]]:
    """
    Simulate `frames` steps of an effect

    Runs at most MAX_FRAMES steps and keeps at most MAX_PARTICLES particles
    in each frame.

    Returns:
        One list of particle snapshots per frame, stopping early when the
        effect has finished
    """
    effect = create_effect(name, width, height, seed)
    rendered = []
    for _ in range(min(frames, MAX_FRAMES)):
        effect.update(dt)
        rendered.append(effect.snapshot()[:MAX_PARTICLES])
        if effect.finished:
            break
    return rendered


__all__ = [
    'EFFECTS',
    'EFFECT_NAMES',
    'FRAME_MS',
    'MAX_FRAMES',
    'MAX_PARTICLES',
    'Effect',
    'Particle',
    'create_effect',
    'render_frames',
]
