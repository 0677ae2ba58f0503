from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from orbit_trace.core.constants import R_EARTH_KM
from orbit_trace.simulation.engine import OutputRow

PLOT_KINDS = ("ground", "orbit")


def _earth_mesh(radius_km: float = R_EARTH_KM, n_lat: int = 30, n_lon: int = 60):
    # Parametric sphere, rows of constant latitude
    lat_grid = [math.pi * (i / (n_lat - 1) - 0.5) for i in range(n_lat)]
    lon_grid = [math.pi * (2.0 * j / (n_lon - 1) - 1.0) for j in range(n_lon)]

    x = [[radius_km * math.cos(la) * math.cos(lo) for lo in lon_grid] for la in lat_grid]
    y = [[radius_km * math.cos(la) * math.sin(lo) for lo in lon_grid] for la in lat_grid]
    z = [[radius_km * math.sin(la) for _ in lon_grid] for la in lat_grid]
    return x, y, z


def split_at_antimeridian(rows: Sequence[OutputRow]) -> Tuple[List[Optional[float]], List[Optional[float]]]:
    """
    Lat/lon series with a None gap wherever the track wraps around ±180°,
    so line plots do not draw across the whole map.
    """
    lats: List[Optional[float]] = []
    lons: List[Optional[float]] = []
    prev_lon = None
    for row in rows:
        if prev_lon is not None and abs(row.longitude_deg - prev_lon) > 180.0:
            lats.append(None)
            lons.append(None)
        lats.append(row.latitude_deg)
        lons.append(row.longitude_deg)
        prev_lon = row.longitude_deg
    return lats, lons


def _hover_text(rows: Sequence[OutputRow]) -> List[str]:
    return [f"{r.formatted_timestamp} UTC<br>{r.latitude_deg:.3f}, {r.longitude_deg:.3f}" for r in rows]


def build_ground_track_figure(rows: Sequence[OutputRow], label: str) -> go.Figure:
    """Sub-satellite track on an equirectangular map, first/last samples marked."""
    if not rows:
        raise ValueError("No rows to plot.")

    lats, lons = split_at_antimeridian(rows)
    first, last = rows[0], rows[-1]

    fig = go.Figure()
    fig.add_trace(go.Scattergeo(lat=lats, lon=lons, mode="lines", name=f"{label} ground track",
                                hoverinfo="skip"))
    fig.add_trace(go.Scattergeo(
        lat=[r.latitude_deg for r in rows],
        lon=[r.longitude_deg for r in rows],
        mode="markers",
        marker=dict(size=3),
        text=_hover_text(rows),
        hoverinfo="text",
        name="samples",
    ))
    for row, tag, symbol in ((first, "start", "circle"), (last, "end", "square")):
        fig.add_trace(go.Scattergeo(
            lat=[row.latitude_deg], lon=[row.longitude_deg],
            mode="markers",
            marker=dict(size=8, symbol=symbol),
            name=f"{tag} ({row.formatted_timestamp})",
        ))

    fig.update_layout(
        title=f"Ground track: {label} ({len(rows)} points)",
        geo=dict(projection_type="equirectangular", showland=True, showcountries=True),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )
    return fig


def build_orbit_figure(rows: Sequence[OutputRow], label: str, show_earth: bool = True) -> go.Figure:
    """
    TEME positions in 3D around an Earth sphere, samples colored by hours
    since the first row.
    """
    if not rows:
        raise ValueError("No rows to plot.")

    t0 = rows[0].timestamp
    xs, ys, zs = zip(*(r.position_km for r in rows))

    fig = go.Figure()
    if show_earth:
        ex, ey, ez = _earth_mesh()
        fig.add_trace(go.Surface(x=ex, y=ey, z=ez, showscale=False, opacity=0.35, name="Earth",
                                 hoverinfo="skip"))

    fig.add_trace(go.Scatter3d(
        x=xs, y=ys, z=zs,
        mode="lines+markers",
        line=dict(width=2),
        marker=dict(
            size=2,
            color=[(r.timestamp - t0) / 3600.0 for r in rows],
            colorscale="Viridis",
            colorbar=dict(title="h"),
        ),
        text=[r.formatted_timestamp for r in rows],
        name=f"{label} track",
    ))

    fig.update_layout(
        title=f"Trajectory (TEME): {label}",
        scene=dict(
            xaxis_title="X (km)",
            yaxis_title="Y (km)",
            zaxis_title="Z (km)",
            aspectmode="data",
        ),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )
    return fig


def render_trace(
    rows: Sequence[OutputRow],
    label: str,
    out_html: str = "out/ground_track.html",
    kind: str = "ground",
) -> str:
    """Write the ground-track map (kind="ground") or 3D orbit (kind="orbit") to HTML."""
    if kind not in PLOT_KINDS:
        raise ValueError(f"Unknown plot kind: {kind!r}")
    builder = build_ground_track_figure if kind == "ground" else build_orbit_figure
    fig = builder(rows, label)

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(out_html), auto_open=False)
    return str(out_html)
