"""
Effects API Endpoints
Pre-rendered particle frames for the celebration animations

Author: TM3
Date: 2026-03-02
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront.core.auth import SessionUser, get_current_user
from storefront.effects import EFFECT_NAMES, FRAME_MS, MAX_FRAMES, render_frames

router = APIRouter()


@router.get("")
async def list_effects():
    return {"status": "success", "count": len(EFFECT_NAMES), "data": list(EFFECT_NAMES)}


# Plain def: the simulation is CPU-bound and runs in the threadpool
@router.get("/{name}")
def get_effect_frames(
    name: str,
    width: int = Query(800, ge=100, le=2560),
    height: int = Query(600, ge=100, le=2560),
    frames: int = Query(180, ge=1, le=MAX_FRAMES),
    seed: Optional[int] = Query(None, description="Same seed, same animation"),
    _: SessionUser = Depends(get_current_user)
):
    """
    Simulate an effect headless, for the signed-in task page

    Returns:
        {"status": "success", "effect", "width", "height", "frame_ms", "count", "frames": [[particle, ...], ...]}
    """
    rendered = render_frames(name, width, height, frames, seed=seed)
    return {
        "status": "success",
        "effect": name,
        "width": width,
        "height": height,
        "frame_ms": FRAME_MS,
        "count": len(rendered),
        "frames": rendered
    }
