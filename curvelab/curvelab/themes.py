import plotly.io as pio

THEMES = {
    "Plotly (Light)": "plotly",
    "Plotly (Dark)": "plotly_dark",
    "GGPlot2": "ggplot2",
    "Seaborn": "seaborn",
    "Simple White": "simple_white",
    "Presentation": "presentation",
}
DEFAULT_THEME = "Plotly (Light)"


def template_for(name: str) -> str:
    return THEMES.get(name, "plotly")


def set_theme(name: str):
    tmpl = template_for(name)
    pio.templates.default = tmpl
    return tmpl
