from matplotlib.figure import Figure


def setup_figure(width_px=1200, height_px=600, background="#05070d", dpi=100):
    """Return a Matplotlib ``Figure`` and a borderless map ``Axes`` for the GUI."""
    fig = Figure(figsize=(width_px / dpi, height_px / dpi), dpi=dpi, facecolor=background)
    ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
    return fig, ax
