"""Generation session — text/photo submissions -> extracted record -> Scene.

A Session owns the single-slot request gate and the feedback log. All
other state lives in immutable SessionContext values: every call takes
the current context and returns the next one.

State flow:
    IDLE --submit_text--> EXTRACTING -> COMPOSING -> READY
    READY --submit_image--> COMPOSING -> READY   (image failure -> ERROR)
    READY --regenerate--> COMPOSING -> READY
    ERROR --any valid input--> normal flow

Usage:
    session = Session(Config().session, on_scene=viewer.render)
    ctx = await session.submit_text(SessionContext(), "A cozy bedroom")
    ctx = await session.submit_image(ctx, Path("reference.jpg"))
    ctx = await session.regenerate(ctx)
    ctx = session.remove_image(ctx)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from config import ImageConfig, SessionConfig
from room_gen.composer import compose
from room_gen.extractor import AttributeRecord, extract, generate_prompt_from_info
from room_gen.image_summary import ImageError, ImageSource, ImageSummary, summarize
from room_gen.primitives import Scene

log = logging.getLogger(__name__)

NO_DESCRIPTION = "Please provide a description first"


class SessionState(Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    COMPOSING = "composing"
    READY = "ready"
    ERROR = "error"


class SessionBusyError(RuntimeError):
    """A request was issued while another one is still in flight."""


@dataclass(frozen=True)
class SessionContext:
    """Snapshot of one session's inputs and outputs.

    Attributes:
        text: Last accepted room description ("" before the first one)
        record: Attributes extracted from text
        image: Summary of the last accepted reference photo
        scene: Last composed scene
        state: Where the last call left the session
        message: User-facing status or error text
    """

    text: str = ""
    record: AttributeRecord | None = None
    image: ImageSummary | None = None
    scene: Scene | None = None
    state: SessionState = SessionState.IDLE
    message: str = ""

    @property
    def has_description(self) -> bool:
        return bool(self.text) and self.record is not None

    @property
    def prompt(self) -> str:
        return generate_prompt_from_info(self.record) if self.record else ""


@dataclass(frozen=True)
class Feedback:
    rating: str  # "positive" or "negative"
    comment: str = ""


class Session:
    """Orchestrates extraction, photo analysis and composition.

    Args:
        cfg: Session settings (artificial generation latency)
        image_cfg: Photo analysis settings
        on_scene: Called with every finished scene, never a partial one
        on_state: Called on every state transition (progress display)
    """

    def __init__(
        self,
        cfg: SessionConfig | None = None,
        image_cfg: ImageConfig | None = None,
        on_scene: Callable[[Scene], object] | None = None,
        on_state: Callable[[SessionState], object] | None = None,
    ):
        self.cfg = cfg or SessionConfig()
        self.image_cfg = image_cfg or ImageConfig()
        self.on_scene = on_scene
        self.on_state = on_state
        self.feedback: list[Feedback] = []
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    # -- gate --------------------------------------------------------------

    def _acquire(self):
        if self._busy:
            raise SessionBusyError("A generation request is already in progress")
        self._busy = True

    def _release(self):
        self._busy = False

    def _enter(self, state: SessionState):
        log.debug("Session state -> %s", state.value)
        if self.on_state is not None:
            self.on_state(state)

    # -- composition -------------------------------------------------------

    async def _compose(
        self, record: AttributeRecord, image: ImageSummary | None
    ) -> Scene:
        self._enter(SessionState.COMPOSING)
        if self.cfg.generate_latency_s > 0:
            await asyncio.sleep(self.cfg.generate_latency_s)
        scene = compose(record, image)
        if self.on_scene is not None:
            self.on_scene(scene)
        return scene

    def _fail(self, ctx: SessionContext, message: str) -> SessionContext:
        self._enter(SessionState.ERROR)
        return replace(ctx, state=SessionState.ERROR, message=message)

    # -- operations --------------------------------------------------------

    async def submit_text(self, ctx: SessionContext, text: str) -> SessionContext:
        """Extract attributes from text and compose a fresh scene."""
        self._acquire()
        try:
            if not text.strip():
                return self._fail(ctx, NO_DESCRIPTION)

            self._enter(SessionState.EXTRACTING)
            record = extract(text)
            log.info("Extracted %s: %s", record.room_type, generate_prompt_from_info(record))

            scene = await self._compose(record, ctx.image)
            self._enter(SessionState.READY)
            return replace(
                ctx,
                text=text,
                record=record,
                scene=scene,
                state=SessionState.READY,
                message="3D model generated successfully",
            )
        finally:
            self._release()

    async def submit_image(
        self, ctx: SessionContext, source: ImageSource
    ) -> SessionContext:
        """Analyze a reference photo; recompose if a description exists."""
        self._acquire()
        try:
            try:
                image = await summarize(source, self.image_cfg)
            except ImageError as e:
                log.warning("Image rejected: %s", e)
                return self._fail(ctx, str(e))

            log.info(
                "Reference photo %dx%d, colors %s",
                image.width,
                image.height,
                image.css_colors(),
            )
            if not ctx.has_description:
                state = SessionState.READY if ctx.scene is not None else SessionState.IDLE
                self._enter(state)
                return replace(
                    ctx, image=image, state=state, message="Image processed successfully"
                )

            scene = await self._compose(ctx.record, image)
            self._enter(SessionState.READY)
            return replace(
                ctx,
                image=image,
                scene=scene,
                state=SessionState.READY,
                message="3D model updated with new image",
            )
        finally:
            self._release()

    async def regenerate(self, ctx: SessionContext) -> SessionContext:
        """Recompose from the last description and photo."""
        self._acquire()
        try:
            if not ctx.has_description:
                return self._fail(ctx, NO_DESCRIPTION)
            scene = await self._compose(ctx.record, ctx.image)
            self._enter(SessionState.READY)
            return replace(
                ctx,
                scene=scene,
                state=SessionState.READY,
                message="3D model regenerated successfully",
            )
        finally:
            self._release()

    def remove_image(self, ctx: SessionContext) -> SessionContext:
        """Forget the reference photo. The scene is kept as is."""
        if ctx.image is None:
            return ctx
        log.info("Reference photo removed")
        return replace(ctx, image=None, message="Image removed")

    def submit_feedback(self, rating: str, comment: str = "") -> Feedback:
        """Record a like/dislike for the current scene. Kept in memory only."""
        if rating not in ("positive", "negative"):
            raise ValueError(f"rating must be 'positive' or 'negative', got {rating!r}")
        fb = Feedback(rating, comment.strip())
        self.feedback.append(fb)
        log.info("Feedback received: %s %r", fb.rating, fb.comment)
        return fb
