import argparse
import logging
import sys
import webbrowser
from pathlib import Path

import dearpygui.dearpygui as dpg

import exporter
import scope
from audio_engine import AudioEngine
from errors import AudioUnsupportedError, InvalidArgumentError
from mutations import MutationKind
from playback import PlaybackController
from scheduler import MutationScheduler
from state import AMOUNT_SLIDER_MAX, AppState, amount_from_slider, slider_from_amount
from waveforms import WaveKind, generate

logger = logging.getLogger("wavemutator")

# --- SETTINGS ---
W_WIDTH = 900
W_HEIGHT = 520

WAVE_NAMES = [kind.value for kind in WaveKind]
MUTATION_NAMES = [kind.value for kind in MutationKind]


def _positive_float(text):
    value = float(text)
    if not value > 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {text}")
    return value


def parse_args(argv=None):
    defaults = AppState()
    parser = argparse.ArgumentParser(description="Loop a single-cycle waveform and mutate it while it plays.")
    parser.add_argument("--freq", type=_positive_float, default=defaults.frequency, help="Frequency in Hz")
    parser.add_argument("--wave", choices=WAVE_NAMES, default=defaults.wave)
    parser.add_argument("--mutation", choices=MUTATION_NAMES, default=defaults.mutation)
    parser.add_argument("--amount", type=float, default=defaults.mutation_amount,
                        help="Mutation amount (the UI slider covers -20..20)")
    parser.add_argument("--gain", type=float, default=defaults.gain)
    parser.add_argument("--sample-rate", type=int, default=defaults.sample_rate)
    parser.add_argument("--period", type=_positive_float, default=defaults.mutation_period,
                        help="Seconds between mutation ticks")
    parser.add_argument("--export-dir", type=Path, default=defaults.export_dir)
    parser.add_argument("--no-open", action="store_true", help="Don't open exported files")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def build_state(args):
    s = AppState()
    s.frequency = args.freq
    s.wave = args.wave
    s.mutation = args.mutation
    s.mutation_amount = args.amount
    s.gain = args.gain
    s.sample_rate = args.sample_rate
    s.mutation_period = args.period
    s.export_dir = args.export_dir
    s.open_exports = not args.no_open
    return s


def export_current(s, playback):
    """Write the live buffer into the export directory. Returns a status line."""
    path = Path(s.export_dir) / exporter.export_filename()
    try:
        exporter.save_wav(playback.current_buffer, path)
    except (OSError, RuntimeError) as exc:
        # Missing or read-only directory; soundfile errors are RuntimeErrors
        logger.warning("Export failed: %s", exc)
        return f"Export failed: {exc}"
    if s.open_exports:
        webbrowser.open(path.resolve().as_uri())
    return f"Saved {path.name}"


def build_window(s, playback, scheduler):
    def set_status(text):
        dpg.set_value("status", text)

    def on_play(sender, app_data, user_data):
        playback.toggle_playback()
        dpg.set_item_label("play_button", "PAUSE" if playback.running else "PLAY")

    def on_regenerate(sender, app_data, user_data):
        setattr(s, user_data, app_data)
        try:
            buffer = generate(s.frequency, s.wave, s.sample_rate)
        except InvalidArgumentError as exc:
            logger.warning("Not regenerating: %s", exc)
            set_status(str(exc))
            return
        playback.install(buffer)
        scope.draw(buffer)
        set_status(f"{s.wave} at {scope.frequency_label(buffer)}")

    def on_volume(sender, app_data, user_data):
        try:
            playback.set_gain(app_data)
        except InvalidArgumentError as exc:
            logger.warning("Ignoring volume: %s", exc)
            return
        s.gain = app_data

    def on_mutation(sender, app_data, user_data):
        s.mutation = app_data

    def on_amount(sender, app_data, user_data):
        s.mutation_amount = amount_from_slider(app_data)

    def on_mutate(sender, app_data, user_data):
        scheduler.toggle()
        dpg.set_item_label("mutate_button", "STOP" if scheduler.active else "START")

    def on_export(sender, app_data, user_data):
        set_status(export_current(s, playback))

    with dpg.window(tag="Primary Window"):

        # Split Layout: Left (Controls) | Right (Scope)
        with dpg.group(horizontal=True):

            # --- LEFT PANEL: CONTROLS ---
            with dpg.child_window(width=300):
                dpg.add_text("WAVEFORM", color=(0, 255, 0))
                dpg.add_separator()
                dpg.add_input_float(label="Frequency", default_value=s.frequency, min_value=1.0,
                                    min_clamped=True, step=10.0, on_enter=True,
                                    callback=on_regenerate, user_data="frequency")
                dpg.add_combo(WAVE_NAMES, label="Wave", default_value=s.wave,
                              callback=on_regenerate, user_data="wave")
                dpg.add_slider_float(label="Volume", default_value=s.gain, min_value=0.0, max_value=1.0,
                                     callback=on_volume)
                dpg.add_button(label="PLAY", tag="play_button", width=-1, callback=on_play)

                dpg.add_spacer(height=20)
                dpg.add_text("MUTATION", color=(0, 255, 0))
                dpg.add_separator()
                dpg.add_combo(MUTATION_NAMES, label="Mutation", default_value=s.mutation,
                              callback=on_mutation)
                dpg.add_slider_int(label="Amount", default_value=slider_from_amount(s.mutation_amount),
                                   min_value=0, max_value=AMOUNT_SLIDER_MAX, callback=on_amount)
                dpg.add_button(label="START", tag="mutate_button", width=-1, callback=on_mutate)

                dpg.add_spacer(height=20)
                dpg.add_button(label="EXPORT", width=-1, callback=on_export)
                dpg.add_text("", tag="status", wrap=280)

            # --- RIGHT PANEL: SCOPE ---
            with dpg.child_window(width=-1):
                dpg.add_text("", tag="scope_freq", color=(0, 255, 0))
                with dpg.plot(height=-1, width=-1, no_menus=True):
                    dpg.add_plot_axis(dpg.mvXAxis, no_tick_labels=True, tag="scope_x_axis")
                    y_axis = dpg.add_plot_axis(dpg.mvYAxis, label="Amp")
                    dpg.set_axis_limits(y_axis, -1.1, 1.1)
                    dpg.add_line_series([], [], tag="scope_series", parent=y_axis)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    s = build_state(args)

    try:
        audio = AudioEngine(s.sample_rate, s.frames_per_buffer, s.gain)
    except AudioUnsupportedError as exc:
        logger.error("Audio output unsupported: %s", exc)
        return 1

    playback = PlaybackController(audio)
    try:
        playback.set_gain(s.gain)
        playback.open(generate(s.frequency, s.wave, s.sample_rate))
    except InvalidArgumentError as exc:
        logger.error("%s", exc)
        playback.close()
        return 2
    scheduler = MutationScheduler(playback, s, period=s.mutation_period, on_install=scope.draw)

    # Callbacks run from the loop below, on this thread
    dpg.create_context()
    dpg.configure_app(manual_callback_management=True)
    try:
        build_window(s, playback, scheduler)
        dpg.create_viewport(title="Wave Mutator", width=W_WIDTH, height=W_HEIGHT)
        dpg.setup_dearpygui()
        dpg.set_primary_window("Primary Window", True)
        dpg.show_viewport()
        scope.draw(playback.current_buffer)

        while dpg.is_dearpygui_running():
            dpg.run_callbacks(dpg.get_callback_queue())
            scheduler.poll()
            dpg.render_dearpygui_frame()
    finally:
        # --- CLEANUP ---
        scheduler.stop()
        playback.close()
        dpg.destroy_context()
    return 0


if __name__ == "__main__":
    sys.exit(main())
