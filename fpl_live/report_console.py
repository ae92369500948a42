from __future__ import annotations

from rich.console import Console
from rich.table import Table


def leaderboard_table(data: dict) -> Table:
    table = Table(title=f"{data['leagueName']} (GW{data['currentGW']})", show_lines=False)
    table.add_column("#", justify="right", width=3)
    table.add_column("Manager", style="bold white", min_width=14)
    table.add_column("Team Name", min_width=14)
    table.add_column("Team", width=4)
    table.add_column("Chip", width=8)
    table.add_column("Played", justify="right", width=6)
    table.add_column("Hit", justify="right", width=4)
    table.add_column("GW", justify="right", style="bold green", width=5)
    table.add_column("Total", justify="right", width=6)

    for e in data["entries"]:
        played = e["playedInfo"]
        hit = e["entryHistory"]["transferCost"]
        table.add_row(
            str(e["rank"]),
            e["manager"],
            e["teamName"],
            e["team"] or "",
            e["activeChip"] or "",
            f"{played['played']}/{played['total']}",
            f"-{hit}" if hit else "",
            str(e["gwPoint"]),
            str(e["totalPoint"]),
        )
    return table


def print_leaderboard(data: dict, show_transfers: bool = False) -> None:
    console = Console()

    console.print()
    console.print(leaderboard_table(data))
    console.print()

    if show_transfers:
        t_table = Table(title="Transfers This Gameweek", show_lines=False)
        t_table.add_column("Manager", min_width=14)
        t_table.add_column("Out", style="red", min_width=12)
        t_table.add_column("In", style="green", min_width=12)
        for e in data["entries"]:
            for t in e["transfers"]:
                t_table.add_row(e["manager"], t["element_out_name"] or "?", t["element_in_name"] or "?")
        console.print(t_table)
        console.print()
