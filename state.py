# state.py
from pathlib import Path


class AppState:
    def __init__(self):
        # --- Audio Output ---
        self.sample_rate = 44100
        self.frames_per_buffer = 256
        self.gain = 0.5          # Master Volume

        # --- Waveform ---
        self.frequency = 220.0   # Requested pitch, rounded to whole samples
        self.wave = "sine"       # sine / saw / square / noise

        # --- Mutation ---
        self.mutation = "sinify"
        self.mutation_amount = 5.0   # Signed step scale, any finite value
        self.mutation_period = 0.2   # Seconds between ticks

        # --- Export ---
        self.export_dir = Path.cwd()
        self.open_exports = True


# Slider 0..40 in the UI, centred on zero
AMOUNT_SLIDER_MAX = 40
AMOUNT_SLIDER_OFFSET = 20


def amount_from_slider(value):
    return float(value) - AMOUNT_SLIDER_OFFSET


def slider_from_amount(amount):
    return int(round(amount)) + AMOUNT_SLIDER_OFFSET
