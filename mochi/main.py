"""Mochi face entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time

log = logging.getLogger(__name__)

WINDOW_TITLE = "Mochi"
HUD_H = 110


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Mochi animated face")
    p.add_argument("--config", default=None, help="YAML config file path")
    p.add_argument("--log-level", default="INFO", help="Log level")
    p.add_argument("--width", type=int, default=None, help="Window width")
    p.add_argument("--height", type=int, default=None, help="Window height")
    p.add_argument("--fullscreen", action="store_true", help="Open fullscreen")
    p.add_argument("--seed", type=int, default=None, help="Blink RNG seed")
    p.add_argument("--no-hud", action="store_true", help="Hide debug HUD and timeline")
    p.add_argument(
        "--no-sensor", action="store_true", help="Run without a motion sensor"
    )
    p.add_argument(
        "--no-permission-prompt",
        action="store_true",
        help="Treat motion access as granted up front",
    )
    p.add_argument(
        "--headless",
        type=int,
        default=None,
        metavar="FRAMES",
        help="Render FRAMES frames to a recording canvas without a window",
    )
    return p.parse_args(argv)


def build_config(args: argparse.Namespace):
    from mochi.config import load_config

    cfg = load_config(args.config)
    if args.width is not None:
        cfg.display.width = args.width
    if args.height is not None:
        cfg.display.height = args.height
    if args.fullscreen:
        cfg.display.fullscreen = True
    if args.seed is not None:
        cfg.seed = args.seed
    if args.no_hud:
        cfg.display.show_hud = False
        cfg.display.show_timeline = False
    if args.no_sensor:
        cfg.sensor.enabled = False
    if args.no_permission_prompt:
        cfg.sensor.require_permission = False
    return cfg


async def run_headless(cfg, frames: int) -> int:
    from mochi.loop import FrameLoop
    from mochi.render.canvas import RecordingCanvas
    from mochi.state.session import Session

    session = Session(cfg)
    canvas = RecordingCanvas(cfg.display.width, cfg.display.height)
    loop = FrameLoop(
        session,
        canvas,
        size=lambda: canvas.size,
        fps=cfg.display.fps,
    )
    await loop.run(max_frames=frames)
    log.info(
        "headless: %d frames, %d draw ops, final mood %s",
        loop.frames,
        len(canvas.ops),
        session.mood.kind.name,
    )
    return 0


async def async_main(args: argparse.Namespace) -> int:
    cfg = build_config(args)
    if args.headless is not None:
        return await run_headless(cfg, max(1, args.headless))

    import pygame

    from mochi.debug.overlay import DebugOverlay
    from mochi.debug.timeline import Timeline
    from mochi.input.command_bus import CommandBus
    from mochi.input.gestures import GestureRecognizer
    from mochi.input.keyboard import KeyboardHandler
    from mochi.input.sensors import SimulatedAccelerometer, UnavailableSensor, run_sensor
    from mochi.loop import FrameLoop
    from mochi.render.canvas import PygameCanvas
    from mochi.state.motion import MotionEvent
    from mochi.state.permission import PermissionPrompt
    from mochi.state.session import FaceSnapshot, Session

    pygame.init()
    flags = pygame.FULLSCREEN if cfg.display.fullscreen else pygame.RESIZABLE
    try:
        screen = pygame.display.set_mode((cfg.display.width, cfg.display.height), flags)
    except pygame.error as e:
        log.error("cannot open display: %s", e)
        pygame.quit()
        return 1
    pygame.display.set_caption(WINDOW_TITLE)

    session = Session(cfg)
    bus = CommandBus()
    canvas = PygameCanvas(screen)

    sim: SimulatedAccelerometer | None = None
    if cfg.sensor.enabled:
        sim = SimulatedAccelerometer(noise=cfg.sensor.noise)
        feed = sim
    else:
        feed = UnavailableSensor()

    prompt = PermissionPrompt()
    keyboard = KeyboardHandler(
        bus,
        GestureRecognizer(cfg.gestures.double_tap_window_s),
        session.permission,
        prompt,
        sensor=sim,
    )
    keyboard.show_hud = cfg.display.show_hud

    overlay = DebugOverlay()
    timeline = Timeline()
    timeline.attach(session)

    frame_loop = FrameLoop(
        session,
        canvas,
        size=lambda: canvas.size,
        bus=bus,
        fps=cfg.display.fps,
    )

    frame_start = 0.0

    def on_input(now: float) -> None:
        nonlocal frame_start
        frame_start = now
        for event in pygame.event.get():
            keyboard.handle_event(event, now)
        keyboard.poll(now)
        if keyboard.resized is not None:
            canvas.resize(*keyboard.resized)
            keyboard.resized = None
        notice = session.permission.take_notice()
        if notice is not None:
            overlay.show_notice(notice, session.elapsed)
        if keyboard.quit_requested:
            frame_loop.stop()

    def on_frame(snap: FaceSnapshot, _events: list[MotionEvent]) -> None:
        timeline.advance(snap.elapsed)

        if keyboard.show_hud:
            w, h = canvas.size
            overlay.frame_time_ms = (time.monotonic() - frame_start) * 1000.0
            overlay.render(canvas.surface, max(0, h - HUD_H), session, prompt)
            if cfg.display.show_timeline:
                timeline.render(canvas.surface, 10, 6, w - 20)
        pygame.display.flip()

    frame_loop.add_input_hook(on_input)
    frame_loop.add_hook(on_frame)

    sensor_task = asyncio.create_task(run_sensor(feed, bus, cfg.sensor.hz))
    try:
        await frame_loop.run()
    finally:
        sensor_task.cancel()
        try:
            await sensor_task
        except asyncio.CancelledError:
            pass
        pygame.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        code = asyncio.run(async_main(args))
    except KeyboardInterrupt:
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
