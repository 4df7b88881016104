from .plotly_renderer import PlotlyRenderer, PlotSurface, SurfaceReleased  # noqa: F401
