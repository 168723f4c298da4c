"""Reusable Tkinter slider widgets."""

import tkinter as tk
from tkinter import ttk


def create_slider(
    label,
    min_val,
    max_val,
    initial_val,
    step_size,
    parent,
    update_callback=None,
    *,
    visible=True,
):
    """Labelled horizontal slider with a linked entry, snapped to *step_size*.

    Returns ``(variable, slider)``; the variable holds an ``int``.
    """
    frame = ttk.Frame(parent)
    if visible:
        frame.pack(pady=5, fill=tk.X)
    label_widget = ttk.Label(frame, text=label, font=("Helvetica", 10))
    label_widget.pack(anchor=tk.W)
    slider_var = tk.IntVar(value=int(initial_val))

    def snap(value):
        value = max(min_val, min(max_val, float(value)))
        return int(round(value / step_size) * step_size)

    def slider_command(val):
        precise_value = snap(val)
        if precise_value == slider_var.get():
            return
        slider_var.set(precise_value)
        if update_callback is not None:
            update_callback()

    slider_row = ttk.Frame(frame)
    slider_row.pack(fill=tk.X, expand=True, padx=5)
    slider_row.columnconfigure(0, weight=1)

    slider = ttk.Scale(
        slider_row,
        from_=min_val,
        to=max_val,
        orient=tk.HORIZONTAL,
        value=int(initial_val),
        command=slider_command,
    )
    slider.grid(row=0, column=0, sticky=tk.EW)

    entry = ttk.Entry(slider_row, textvariable=slider_var, width=8)
    entry.grid(row=0, column=1, sticky=tk.E, padx=(5, 0))

    def apply_entry_value(event=None):
        try:
            value = float(entry.get())
        except (tk.TclError, ValueError):
            return
        precise_value = snap(value)
        slider.set(precise_value)
        slider_var.set(precise_value)
        if update_callback is not None:
            update_callback()

    entry.bind("<FocusOut>", apply_entry_value)
    entry.bind("<Return>", apply_entry_value)

    return slider_var, slider
