import logging
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from pokedash import data as dc
from pokedash.filters import ALL
from pokedash.metrics_debug import compute_debug
from pokedash.metrics_explorer import compute_explorer
from pokedash.metrics_radar import compute_radar
from pokedash.metrics_scatter import compute_scatter
from pokedash.stats import Stat, generation_label

logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(generation: str, pokemon_type: str) -> str:
    gen_chip = "Generation: All" if generation == ALL else f"Generation: {generation_label(generation)}"
    type_chip = f"Type: {pokemon_type}"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [gen_chip, type_chip]])


def render_page_header(title: str, breadcrumb: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{format_filter_summary(selected_generation, selected_type)}</div>", unsafe_allow_html=True)


def stat_selectbox(label: str, default: Stat, key: str) -> Stat:
    options = list(Stat)
    choice = st.selectbox(label, options=options, index=options.index(default), format_func=lambda s: s.label, key=key)
    return choice


# ---------- UI setup ----------
st.set_page_config(page_title="Pokémon Stats Dashboard", layout="wide")
inject_base_styles()
st.title("Pokémon Stats Dashboard")
st.caption("Attack vs. defense, average stats and a configurable stat explorer.")

try:
    data_ctx = dc.load_dashboard_data()
except (dc.MalformedInputError, OSError) as exc:
    logger.exception("Loading %s failed", dc.DATA_PATH)
    st.error(f"Could not load {dc.DATA_PATH.name}: {exc}")
    st.stop()

pokemon = data_ctx.get("pokemon", pd.DataFrame())
if not data_ctx.get("file"):
    st.error(f"No data found. Place {dc.DATA_PATH.name} in {dc.DATA_DIR}.")
    st.stop()
if pokemon.empty:
    st.error(f"{data_ctx['file']} has no rows.")
    st.stop()

# ----- Sidebar: navigation + filters -----
with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Attack vs Defense", "Average Stats", "Stat Explorer", "Data Quality"], index=0)

    st.markdown("---")
    st.markdown("### Filters")
    generation_options = [ALL] + [str(g) for g in data_ctx.get("generations", [])]
    selected_generation = st.selectbox(
        "Generation",
        options=generation_options,
        format_func=lambda g: g if g == ALL else generation_label(g),
    )
    selected_type = st.selectbox("Type", options=[ALL] + list(data_ctx.get("types", [])))

    st.markdown("---")
    with st.expander("Explorer settings", expanded=nav_choice == "Stat Explorer"):
        x_stat = stat_selectbox("X axis", Stat.ATTACK, key="x_stat")
        y_stat = stat_selectbox("Y axis", Stat.DEFENSE, key="y_stat")
        z_stat = stat_selectbox("Z axis (3D)", Stat.SPEED, key="z_stat")
        top_n = st.slider("Top N rows", min_value=5, max_value=50, value=15, step=5)

filters = {
    "generation": selected_generation,
    "pokemon_type": selected_type,
    "x_stat": x_stat,
    "y_stat": y_stat,
    "z_stat": z_stat,
    "top_n": top_n,
}

ctx = dc.prepare_context(filters, data_ctx)
filt = ctx["filters"]
filtered = ctx["filtered"]


# ----- Page renderers -----
def render_sprite_tile(col, label: str, record: Optional[dict]):
    with col:
        if record is None:
            st.metric(label, "N/A")
            return
        st.metric(label, record["name"], delta=f"{record['value']}", delta_color="off")
        if record.get("image_url"):
            st.image(record["image_url"], width=96)


def render_scatter_page():
    render_page_header("Attack vs Defense", "Home / Attack vs Defense", export_df=filtered, export_name="pokemon.csv")
    payload = compute_scatter(filt, ctx)
    kpis = payload["kpis"]
    cols = st.columns(3)
    cols[0].metric("Pokémon", f"{kpis['count']:,}", help=f"{kpis['plotted']:,} have both attack and defense.")
    render_sprite_tile(cols[1], "Strongest attacker", kpis["strongest_attacker"])
    render_sprite_tile(cols[2], "Strongest defender", kpis["strongest_defender"])

    with card("Attack vs Defense"):
        if "scatter" not in payload["charts"]:
            st.info("No Pokémon match the current filters.")
        else:
            st.vega_lite_chart(payload["charts"]["scatter"], use_container_width=True)
            st.caption("Hover a point to see its sprite. Click a legend entry to highlight a type.")


def render_radar_page():
    render_page_header("Average Stats", "Home / Average Stats", export_df=filtered, export_name="pokemon.csv")
    payload = compute_radar(filt, ctx)
    if payload["count"] == 0:
        st.info("No Pokémon match the current filters; averages default to 0.")
    left, right = st.columns([3, 2])
    with left:
        with card(f"Average stats: {payload['selection']}"):
            st.plotly_chart(payload["charts"]["radar"], use_container_width=True)
    with right:
        with card("Averages"):
            table = pd.DataFrame(payload["table"])[["label", "average", "baseline"]]
            table.columns = ["Stat", "Selection", "All Pokémon"]
            st.dataframe(table.round(1), hide_index=True, use_container_width=True)
            st.caption(f"{payload['count']:,} Pokémon in selection. Missing stats are left out of each mean.")


def render_explorer_page():
    render_page_header("Stat Explorer", "Home / Stat Explorer", export_df=filtered, export_name="pokemon.csv")
    payload = compute_explorer(filt, ctx)
    if not payload["charts"]:
        st.info("No Pokémon match the current filters.")
        return
    tab_2d, tab_3d, tab_table = st.tabs(["2D Scatter", "3D Scatter", f"Top {filt.top_n}"])
    with tab_2d:
        st.vega_lite_chart(payload["charts"]["scatter"], use_container_width=True)
    with tab_3d:
        st.plotly_chart(payload["charts"]["scatter_3d"], use_container_width=True)
    with tab_table:
        st.dataframe(pd.DataFrame(payload["top"]), hide_index=True, use_container_width=True)
        st.caption(f"Ranked by {filt.x_stat.label}.")


def render_debug_page():
    render_page_header("Data Quality", "Home / Data Quality")
    payload = compute_debug(filt, ctx)
    c1, c2 = st.columns(2)
    with c1:
        with card("Row counts"):
            st.write(payload["row_counts"])
            st.markdown("**Missing stat values**")
            st.write(payload["missing_stats"])
        with card("Generations"):
            st.dataframe(pd.DataFrame(payload["generation_counts"]), hide_index=True)
    with c2:
        with card("Unknown generation"):
            if payload["unknown_generation"]:
                st.dataframe(pd.DataFrame(payload["unknown_generation"]), hide_index=True)
            else:
                st.success("Every id falls in a known generation.")
        with card("Without types"):
            if payload["untyped"]:
                st.dataframe(pd.DataFrame(payload["untyped"]), hide_index=True)
            else:
                st.success("Every Pokémon has a primary type.")
    st.caption(f"Source: {data_ctx['file']}")


if nav_choice == "Attack vs Defense":
    render_scatter_page()
elif nav_choice == "Average Stats":
    render_radar_page()
elif nav_choice == "Stat Explorer":
    render_explorer_page()
else:
    render_debug_page()
