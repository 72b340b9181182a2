from __future__ import annotations

from direct.gui.OnscreenText import OnscreenText
from direct.showbase.ShowBase import ShowBase
from panda3d.core import (
    AmbientLight,
    ClockObject,
    DirectionalLight,
    LVector3,
    LVector4,
    TextNode,
    loadPrcFileData,
)

from walker.app_config import RunConfig
from walker.common.error_log import ErrorLog
from walker.driver import CharacterDriver
from walker.input.bindings import InputAction
from walker.settings import Settings, load_settings, save_settings
from walker.telemetry import LocomotionRecorder

SPAWN = LVector3(0, 0, 0.5)


class WalkerApp(ShowBase):
    def __init__(self, cfg: RunConfig) -> None:
        # Keep audio from being a dependency for early smoke runs / CI.
        loadPrcFileData("", "audio-library-name null")

        if cfg.smoke:
            # Avoid flashing a window in quick verification runs.
            loadPrcFileData("", "window-type offscreen")

        super().__init__()

        self.disableMouse()
        self.cfg = cfg
        self.settings: Settings = load_settings(cfg.settings_path)
        self.error_log = ErrorLog(max_items=30)
        self.recorder = LocomotionRecorder() if (cfg.telemetry_path or self.settings.flags.record_telemetry) else None
        self._held = {"left": False, "right": False, "turn_left": False, "turn_right": False}

        self._setup_scene()
        self._setup_character()
        self._setup_input()
        self._setup_ui()

        self.taskMgr.add(self._update, "update-loop")

        if cfg.smoke:
            self._frames_left = 8
            self.taskMgr.add(self._smoke_task, "smoke-exit")

    def _setup_scene(self) -> None:
        floor = self.loader.loadModel("models/box")
        floor.reparentTo(self.render)
        floor.setScale(60.0, 60.0, 0.5)
        floor.setPos(-30.0, -30.0, -0.5)

        ambient = AmbientLight("ambient")
        ambient.setColor(LVector4(0.25, 0.25, 0.25, 1))
        self.render.setLight(self.render.attachNewNode(ambient))

        sun = DirectionalLight("sun")
        sun.setColor(LVector4(0.9, 0.9, 0.9, 1))
        sun_np = self.render.attachNewNode(sun)
        sun_np.setHpr(45, -45, 0)
        self.render.setLight(sun_np)

    def _setup_character(self) -> None:
        tuning = self.settings.tuning
        self.character = self.render.attachNewNode("character")
        self.character.setPos(SPAWN)
        body = self.loader.loadModel("models/box")
        body.reparentTo(self.character)
        body.setScale(0.6, 0.6, 1.8)
        body.setPos(-0.3, -0.3, 0.0)

        self.driver = CharacterDriver(node=self.character, tuning=tuning, recorder=self.recorder, errors=self.error_log)

    def _setup_input(self) -> None:
        for key, action in [
            ("w", InputAction.FORWARD),
            ("arrow_up", InputAction.FORWARD),
            ("s", InputAction.BACKWARD),
            ("arrow_down", InputAction.BACKWARD),
            ("space", InputAction.STOP),
        ]:
            self.accept(key, self._press, [action])

        for key, name in [
            ("a", "left"),
            ("d", "right"),
            ("q", "turn_left"),
            ("e", "turn_right"),
        ]:
            self.accept(key, self._set_held, [name, True])
            self.accept(f"{key}-up", self._set_held, [name, False])

        self.accept("r", self._reset_character)
        self.accept("f3", self._toggle_debug)
        self.accept("f5", self._save_settings)

    def _setup_ui(self) -> None:
        self._debug_text = OnscreenText(
            text="",
            parent=self.aspect2d,
            pos=(-1.32, 0.9),
            align=TextNode.ALeft,
            scale=0.045,
            fg=(1, 1, 1, 1),
            shadow=(0, 0, 0, 0.6),
        )

    def _press(self, action: InputAction) -> None:
        self._safe_call("input.press", lambda: self.driver.input.press(action, now=ClockObject.getGlobalClock().getFrameTime()))

    def _set_held(self, name: str, pressed: bool) -> None:
        self._held[name] = pressed

    def _reset_character(self) -> None:
        self.driver.reset(spawn=SPAWN)

    def _toggle_debug(self) -> None:
        self.settings.flags.show_debug = not self.settings.flags.show_debug

    def _save_settings(self) -> None:
        try:
            save_settings(self.settings, self.cfg.settings_path)
        except OSError as e:
            self.error_log.record(context="settings.save", exc=e, tick=self.driver.tick)

    def _safe_call(self, context: str, fn) -> None:
        self.driver.guard(context, fn)

    def _update(self, task):  # type: ignore[no-untyped-def]
        dt = min(ClockObject.getGlobalClock().getDt(), 0.05)
        self._safe_call("update.frame", lambda: self._step_frame(dt))
        # Outside the guarded call so a failing frame still shows up on the HUD.
        self._update_debug_text()
        return task.cont

    def _step_frame(self, dt: float) -> None:
        turn_axis = float(self._held["right"]) - float(self._held["left"])
        rate_axis = float(self._held["turn_right"]) - float(self._held["turn_left"])
        self.driver.frame(dt, turn_axis=turn_axis, rate_axis=rate_axis)
        self._update_camera()

    def _update_camera(self) -> None:
        boom = self.settings.tuning.camera_boom_length
        self.camera.setPos(self.driver.rig.boom_camera_pos(boom_length=boom))
        self.camera.lookAt(self.driver.rig.look_target())

    def _update_debug_text(self) -> None:
        if not self.settings.flags.show_debug:
            self._debug_text.setText("")
            return

        step = self.driver.last_step
        locomotion = self.driver.locomotion
        movement = self.driver.movement
        lines = [
            "Controls: W/Up faster (double tap = full) | S/Down slower (double tap = full back) | Space stop",
            "A/D turn body | Q/E turn camera | R reset | F3 toggle HUD | F5 save JSON",
            "",
            f"Level: {locomotion.level:+.0f}   Last: {locomotion.last_level:+.0f}",
            f"Multiplier: {locomotion.multiplier:.3f}",
            f"Max speed: {movement.max_speed:.2f} / base {locomotion.base_speed:.2f}",
            f"Phase: {step.phase.value if step is not None else '-'}",
            f"Speed: {movement.velocity.length():.2f}",
            f"Settings path: {self.cfg.settings_path.name}",
        ]
        last_error = self.error_log.last()
        if last_error is not None:
            lines.append(f"Last error: {last_error.summary_line()}")
        self._debug_text.setText("\n".join(lines))

    def _smoke_task(self, task):  # type: ignore[no-untyped-def]
        # Drive the locomotion core so smoke runs exercise the full tick path.
        if self._frames_left == 8:
            self.driver.input.on_double_click(InputAction.FORWARD)
        self._frames_left -= 1
        if self._frames_left <= 0:
            self.userExit()
            return task.done
        return task.cont

    def export_telemetry(self) -> None:
        if self.recorder is None:
            return
        out = self.cfg.telemetry_path if self.cfg.telemetry_path is not None else self.cfg.settings_path.with_name("walker_telemetry.csv")
        try:
            self.recorder.export(csv_path=out)
        except OSError as e:
            self.error_log.record(context="telemetry.export", exc=e, tick=self.driver.tick)

    def userExit(self) -> None:  # noqa: N802
        self.export_telemetry()
        super().userExit()


def run(*, cfg: RunConfig) -> None:
    app = WalkerApp(cfg)
    app.run()
