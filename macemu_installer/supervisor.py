"""Foreground session supervision.

Runs inside the X session started on the console. It paints a plain
background, starts the window manager and helpers, then keeps the emulator in
the foreground: a non-zero exit relaunches it, exit status 0 (the guest was
shut down) ends the session. Nothing is ever shown on screen; diagnostics go
to the session log only.
"""

from __future__ import annotations

import enum
import logging
import subprocess
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .lib.command import CommandRunner

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    RESTARTING = "restarting"
    ENDING = "ending"


class Process(Protocol):
    def poll(self) -> Optional[int]:
        ...

    def wait(self, timeout: Optional[float] = None) -> int:
        ...

    def terminate(self) -> None:
        ...

    def kill(self) -> None:
        ...


class ProcessLauncher:
    def spawn(self, argv: Sequence[str]) -> Process:
        logger.info("Spawning %s", " ".join(argv))
        return subprocess.Popen(list(argv))


class Readiness(Protocol):
    def wait(self, process: Process) -> None:
        ...


class BoundedWait:
    """Wait for the window manager to attach.

    With a probe, returns as soon as it reports ready; without one (or if it
    never does) the full timeout elapses. Returns early if the process died.
    """

    def __init__(
        self,
        timeout_s: float = 2.0,
        *,
        interval_s: float = 0.1,
        probe: Optional[Callable[[], bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout_s = timeout_s
        self.interval_s = interval_s
        self.probe = probe
        self.sleep = sleep
        self.clock = clock

    def wait(self, process: Process) -> None:
        deadline = self.clock() + self.timeout_s
        while self.clock() < deadline:
            if process.poll() is not None:
                logger.warning("Window manager exited early (status %s)", process.poll())
                return
            if self.probe is not None and self.probe():
                return
            self.sleep(self.interval_s)


@dataclass
class SupervisionSession:
    window_manager: Optional[Process] = None
    helpers: List[Process] = field(default_factory=list)
    emulator: Optional[Process] = None
    restart_count: int = 0
    state: SessionState = SessionState.STARTING
    history: List[SessionState] = field(default_factory=lambda: [SessionState.STARTING])

    def transition(self, new: SessionState) -> None:
        logger.info("Session %s -> %s", self.state.value, new.value)
        self.state = new
        self.history.append(new)


def stop_process(p: Optional[Process], *, timeout_s: float = 5.0) -> None:
    if p is None or p.poll() is not None:
        return
    p.terminate()
    try:
        p.wait(timeout=timeout_s)
    except subprocess.TimeoutExpired:
        p.kill()
        p.wait()


class SessionSupervisor:
    def __init__(
        self,
        *,
        emulator_argv: Callable[[], List[str]],
        runner: Optional[CommandRunner] = None,
        launcher: Optional[ProcessLauncher] = None,
        readiness: Optional[Readiness] = None,
        sleep: Callable[[float], None] = time.sleep,
        restart_delay_s: float = 2.0,
        background_color: str = "#BDBDBD",
        window_manager: str = "openbox",
    ) -> None:
        self.emulator_argv = emulator_argv
        self.runner = runner or CommandRunner()
        self.launcher = launcher or ProcessLauncher()
        self.readiness = readiness or BoundedWait()
        self.sleep = sleep
        self.restart_delay_s = restart_delay_s
        self.background_color = background_color
        self.window_manager = window_manager

    def start(self, session: SupervisionSession) -> None:
        # Display setup is cosmetic; a failure must not stop the emulator.
        for argv in (
            ["xsetroot", "-solid", self.background_color],
            ["xset", "s", "off"],
            ["xset", "-dpms"],
            ["xset", "s", "noblank"],
        ):
            if not self.runner.run(argv, check=False).ok:
                logger.warning("Display setup failed: %s", " ".join(argv))

        session.helpers.append(self.launcher.spawn(["unclutter", "-idle", "1", "-root"]))
        session.window_manager = self.launcher.spawn([self.window_manager])
        self.readiness.wait(session.window_manager)

    def supervise(self, session: SupervisionSession) -> None:
        while True:
            session.transition(SessionState.RUNNING)
            session.emulator = None
            try:
                argv = self.emulator_argv()
                logger.info("Starting emulator (restarts so far: %d)", session.restart_count)
                session.emulator = self.launcher.spawn(argv)
                code: Optional[int] = session.emulator.wait()
            except Exception:
                # A launch failure is a crash like any other.
                logger.exception("Emulator launch failed")
                code = None
            else:
                logger.info("Emulator exited with code %s", code)

            if code == 0:
                logger.info("Clean exit, stopping session")
                return

            session.transition(SessionState.RESTARTING)
            self.sleep(self.restart_delay_s)
            session.restart_count += 1

    def teardown(self, session: SupervisionSession) -> None:
        session.transition(SessionState.ENDING)
        stop_process(session.emulator)
        stop_process(session.window_manager)
        for helper in session.helpers:
            stop_process(helper)
        logger.info("Session ended after %d restarts", session.restart_count)

    def run(self, session: Optional[SupervisionSession] = None) -> SupervisionSession:
        session = session or SupervisionSession()
        try:
            self.start(session)
            self.supervise(session)
        finally:
            self.teardown(session)
        return session
