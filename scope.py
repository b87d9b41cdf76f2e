"""Waveform trace and frequency readout for the scope plot."""
import dearpygui.dearpygui as dpg


def frequency_label(buffer):
    return f"{buffer.frequency:.1f} Hz"


def trace(buffer):
    samples = buffer.samples
    return list(range(len(samples))), samples.tolist()


def draw(buffer):
    if dpg.does_item_exist("scope_series"):
        dpg.set_value("scope_series", list(trace(buffer)))
    if dpg.does_item_exist("scope_x_axis"):
        dpg.set_axis_limits("scope_x_axis", 0, max(len(buffer) - 1, 1))
    if dpg.does_item_exist("scope_freq"):
        dpg.set_value("scope_freq", frequency_label(buffer))
