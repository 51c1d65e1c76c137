"""Interactive pygame viewer for a swingby session.

Keys: space start/pause, R reset, E export CSV, left/right halve/double the
step multiplier, 1-4 switch the trail policy and Tab cycles the preset
scenarios (both start a new session), Esc quit.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pygame

from swingby.core.config import (
    LOG_CFG,
    MAX_SPEED,
    MIN_SPEED,
    PHYSICS_CFG,
    POLICIES,
    RENDER_CFG,
    TRAIL_CFG,
    VIEW_CFG,
    LogCfg,
    RenderCfg,
    SimulationConfig,
    TrailCfg,
)
from swingby.core.export import write_trail_csv
from swingby.core.logging_utils import RunLogger
from swingby.core.scheduling import FrameScheduler, FrameTimer
from swingby.core.session import SimulationSession
from swingby.data.scenarios import DEFAULT_SCENARIO_KEY, get_scenario, next_scenario_key

from .assets import get_text_surface, load_font
from .camera import Camera
from .draw import draw_earth, draw_grid, draw_hud, draw_spacecraft, draw_trail

POLICY_KEYS = {
    pygame.K_1: POLICIES[0],
    pygame.K_2: POLICIES[1],
    pygame.K_3: POLICIES[2],
    pygame.K_4: POLICIES[3],
}


def initial_ppm(config: SimulationConfig, size: tuple[int, int]) -> float:
    """Scale that shows the initial radius with some margin around Earth."""

    radius = max(float(abs(config.position).max()), PHYSICS_CFG.earth_radius)
    return min(size) / (2.0 * radius * VIEW_CFG.padding)


def run_viewer(
    config: Optional[SimulationConfig] = None,
    trail_cfg: TrailCfg = TRAIL_CFG,
    *,
    scenario: str = DEFAULT_SCENARIO_KEY,
    render_cfg: RenderCfg = RENDER_CFG,
    log_runs: bool = False,
    log_cfg: LogCfg = LOG_CFG,
    export_dir: str | Path = ".",
) -> None:
    """Open the viewer on ``config``, or on the ``scenario`` preset when none is given."""

    config = config or get_scenario(scenario).config()
    pygame.init()
    size = (render_cfg.width, render_cfg.height)
    screen = pygame.display.set_mode(size, pygame.RESIZABLE)
    pygame.display.set_caption("Swingby")
    clock = pygame.time.Clock()
    timer = FrameTimer()
    font = load_font(16)
    scheduler = FrameScheduler()
    camera = Camera(size, initial_ppm(config, size))

    def new_session(cfg: TrailCfg) -> SimulationSession:
        logger = RunLogger(cfg=log_cfg) if log_runs else None
        return SimulationSession.create(
            config,
            cfg,
            scheduler=scheduler,
            logger=logger,
            log_every_ticks=log_cfg.log_every_ticks,
        )

    session = new_session(trail_cfg)
    status_message = ""

    try:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    camera.update_size((event.w, event.h))
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        if session.running:
                            session.pause()
                        else:
                            session.start()
                    elif event.key == pygame.K_r:
                        session.pause()
                        session.reset()
                        camera.reset(ppm=initial_ppm(session.config, camera.size))
                    elif event.key == pygame.K_e:
                        path = write_trail_csv(
                            session.export(), Path(export_dir) / render_cfg.export_filename
                        )
                        status_message = f"exported {session.store.count()} points to {path}"
                    elif event.key == pygame.K_RIGHT:
                        session.set_speed(min(MAX_SPEED, session.config.speed * 2))
                    elif event.key == pygame.K_LEFT:
                        session.set_speed(max(MIN_SPEED, session.config.speed // 2))
                    elif event.key in POLICY_KEYS:
                        config = session.config
                        session.destroy()
                        trail_cfg = trail_cfg.with_policy(POLICY_KEYS[event.key])
                        session = new_session(trail_cfg)
                        status_message = f"policy: {trail_cfg.policy}"
                    elif event.key == pygame.K_TAB:
                        scenario = next_scenario_key(scenario)
                        preset = get_scenario(scenario)
                        config = preset.config()
                        session.destroy()
                        session = new_session(trail_cfg)
                        camera.reset((0.0, 0.0), initial_ppm(config, camera.size))
                        status_message = f"scenario: {preset.name}"

            scheduler.run_pending()
            frame = session.frame()
            camera.update(
                [(0.0, 0.0), (frame.state.x, frame.state.y)],
                screen.get_size(),
            )

            screen.fill(render_cfg.background_color)
            draw_grid(screen, camera, render_cfg=render_cfg)
            draw_earth(screen, camera, PHYSICS_CFG.earth_radius, render_cfg=render_cfg)
            draw_trail(screen, frame, camera, render_cfg=render_cfg)
            draw_spacecraft(
                screen, camera.to_pixels(frame.state.x, frame.state.y), render_cfg=render_cfg
            )
            draw_hud(screen, frame, font, render_cfg=render_cfg)
            footer = f"{timer.smoothed_fps:5.1f} fps  {status_message}"
            screen.blit(
                get_text_surface(font, footer, render_cfg.hud_text_color),
                (10, screen.get_height() - 24),
            )

            pygame.display.flip()
            clock.tick(render_cfg.fps)
            timer.tick()
    finally:
        session.destroy()
        pygame.quit()


__all__ = ["initial_ppm", "run_viewer"]
