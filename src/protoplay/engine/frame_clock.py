"""
Frame Clock

Frame-boundary yield used between installing transitions and writing the
animated values, so the renderer sees the "before" state for one frame.
"""

import asyncio


class FrameClock:
    """
    Args:
        frame_interval: Seconds per frame; 0 yields to the loop once
    """

    def __init__(self, frame_interval: float = 0.0):
        self.frame_interval = max(0.0, frame_interval)
        self.frames = 0

    async def next_frame(self) -> None:
        self.frames += 1
        await asyncio.sleep(self.frame_interval)

    def __repr__(self):
        return f"FrameClock({self.frame_interval}s, {self.frames} frames)"
