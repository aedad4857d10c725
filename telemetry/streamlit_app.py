from __future__ import annotations

import argparse
import time

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import streamlit as st

from telemetry.logger import read_records


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--log-path",
        type=str,
        default="telemetry_logs/rover.jsonl",
        help="Path to telemetry JSONL log file.",
    )
    return parser.parse_args()


def load_telemetry(path: str, max_rows: int = 2000) -> pd.DataFrame:
    records = read_records(path)
    if not records:
        return pd.DataFrame()
    df = pd.json_normalize(records)
    return df.tail(max_rows)


def latest_route(df: pd.DataFrame) -> np.ndarray:
    """Cells of the most recent plan as an (n, 2) array, empty if it found no path."""
    if "kind" not in df.columns or "route" not in df.columns:
        return np.empty((0, 2))
    plans = df[df["kind"] == "plan"]
    if plans.empty:
        return np.empty((0, 2))
    route = plans["route"].iloc[-1]
    if not isinstance(route, list) or not route:
        return np.empty((0, 2))
    return np.asarray(route, dtype=float).reshape(-1, 2)


def main() -> None:
    args = parse_args()

    st.set_page_config(page_title="Rover Telemetry", layout="wide")
    st.title("Rover Telemetry Dashboard")

    status_placeholder = st.empty()

    col1, col2 = st.columns(2)
    map_fig = col1.empty()
    energy_fig = col2.empty()
    downlink_placeholder = st.empty()

    refresh_interval = st.sidebar.slider("Refresh interval (s)", 0.5, 5.0, 1.0, 0.5)

    while True:
        df = load_telemetry(args.log_path)
        if df.empty or "state.x" not in df.columns:
            status_placeholder.info(f"Waiting for telemetry at '{args.log_path}'...")
            time.sleep(refresh_interval)
            continue

        status_placeholder.success(f"Streaming from '{args.log_path}' ({len(df)} records)")

        states = df.dropna(subset=["state.x", "state.y"])
        latest = states.iloc[-1]

        st.sidebar.subheader("Rover State")
        st.sidebar.write(
            f"x={latest.get('state.x', 0.0):.2f}, "
            f"y={latest.get('state.y', 0.0):.2f}, "
            f"heading={latest.get('state.orientation', 0.0):.1f} deg"
        )
        st.sidebar.write(
            f"battery={latest.get('state.battery', 0.0):.1f}%, "
            f"energy={latest.get('state.energy_consumed', 0.0):.1f} J"
        )

        # Map view: trail plus the last planned route (row -> x, col -> y)
        with map_fig.container():
            fig, ax = plt.subplots()
            ax.plot(states["state.x"], states["state.y"], "-y", label="Trail")
            ax.scatter([latest["state.x"]], [latest["state.y"]], c="b", label="Rover")
            route = latest_route(df)
            if len(route):
                ax.plot(route[:, 0], route[:, 1], "-g", marker=".", label="Route")
                ax.scatter(route[-1, 0], route[-1, 1], c="g", marker="*", label="Goal")
            ax.set_aspect("equal", adjustable="box")
            ax.set_xlabel("x [m]")
            ax.set_ylabel("y [m]")
            ax.set_title("Rover Path")
            ax.legend(loc="upper right")
            map_fig.pyplot(fig)
            plt.close(fig)

        energy_cols = [c for c in ("state.battery", "state.energy_consumed") if c in states.columns]
        if energy_cols:
            with energy_fig.container():
                fig2, ax2 = plt.subplots()
                for col in energy_cols:
                    ax2.plot(states[col].values, label=col.split(".", 1)[1])
                ax2.set_title("Battery and Energy")
                ax2.set_xlabel("Record")
                ax2.legend(loc="upper right")
                energy_fig.pyplot(fig2)
                plt.close(fig2)

        if "kind" in df.columns:
            downlinks = df[df["kind"] == "downlink"]
            if not downlinks.empty:
                cols = [c for c in ("time", "payload.message") if c in downlinks.columns]
                downlink_placeholder.dataframe(downlinks[cols].tail(10))

        time.sleep(refresh_interval)


if __name__ == "__main__":
    main()
