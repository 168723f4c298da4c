"""GUI view helpers used by the aurora_field Tk viewer."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from aurora_field.field.types import Hemisphere


def create_root_window(title: str = "Aurora Forecast") -> tk.Tk:
    """Create and return a Tk root window with the provided title."""

    root = tk.Tk()
    root.title(title)
    return root


def create_hemisphere_selector(parent, initial: Hemisphere, command) -> tk.StringVar:
    """Radio buttons for the two hemispheres; *command* receives a :class:`Hemisphere`."""

    frame = ttk.Frame(parent)
    frame.pack(pady=5, fill=tk.X)
    ttk.Label(frame, text="Hemisphere", font=("Helvetica", 10)).pack(anchor=tk.W)
    var = tk.StringVar(value=initial.value)
    for hemisphere in Hemisphere:
        ttk.Radiobutton(
            frame,
            text=hemisphere.value,
            value=hemisphere.value,
            variable=var,
            command=lambda: command(Hemisphere.parse(var.get())),
        ).pack(anchor=tk.W, padx=5)
    return var


def create_status_bar(parent) -> tk.StringVar:
    var = tk.StringVar(value="")
    ttk.Label(parent, textvariable=var, anchor=tk.W, font=("Helvetica", 9)).pack(
        side=tk.BOTTOM, fill=tk.X, padx=5, pady=2
    )
    return var
