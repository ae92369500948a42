from __future__ import annotations

from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_leaderboard(data: dict) -> str:
    env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("leaderboard.html")
    return template.render(
        league_name=data["leagueName"],
        gameweek=data["currentGW"],
        entries=data["entries"],
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )


def generate_html(data: dict, output_path: str = "leaderboard.html") -> None:
    Path(output_path).write_text(render_leaderboard(data), encoding="utf-8")
