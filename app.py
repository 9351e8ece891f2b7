#!/usr/bin/env python3
"""
RFA Allocation Dashboard - Streamlit App

Run with: streamlit run app.py
"""

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

from rfa_tracker.calculator.aggregator import OTHERS_LABEL, AllocationAggregator
from rfa_tracker.core.config import get_config
from rfa_tracker.core.types import AllocationTier, Denomination, SortDirection, SortField, TimeRange
from rfa_tracker.orchestrator import AllocationTracker
from rfa_tracker.output.formatters import (
    UNKNOWN_LABEL,
    format_amount_cell,
    format_bera,
    format_premium,
    format_usd_cell,
)
from rfa_tracker.ranking.ranker import format_rank, next_sort_state

# Series colors, baseline first
SERIES_COLORS = ["#F5A623", "#636EFA", "#00CC96", "#EF553B", "#AB63FA"]

config = get_config()

# Page config
st.set_page_config(
    page_title="RFA Allocation Tracker",
    page_icon="🐻",
    layout="wide"
)


@st.cache_resource
def get_tracker():
    return AllocationTracker(config=config)


# Reloaded on every refresh interval; a failed reload keeps the page usable
@st.cache_data(ttl=config.refresh_seconds)
def load_snapshot():
    return get_tracker().load_snapshot()


@st.cache_data(ttl=config.refresh_seconds)
def load_bera_price():
    return get_tracker().get_bera_price()


@st.cache_data(ttl=config.refresh_seconds)
def load_wrapper_report(time_range: str, denomination: str):
    return get_tracker().get_wrapper_report(
        time_range=TimeRange(time_range),
        denomination=Denomination(denomination),
    )


tracker = get_tracker()
snapshot = load_snapshot()
bera_price = load_bera_price()

# Sidebar - Page selection
st.sidebar.title("RFA Tracker")
st.sidebar.markdown("---")
page = st.sidebar.radio("View", ["Allocations", "Analytics", "BGT Wrappers"])
st.sidebar.markdown("---")
st.sidebar.metric("BERA Price", f"${format_bera(bera_price)}")
st.sidebar.caption(f"Data refreshes every {config.refresh_seconds}s")

if "sort_field" not in st.session_state:
    st.session_state.sort_field = SortField.AMOUNT
    st.session_state.sort_direction = SortDirection.DESC


def toggle_sort(field: SortField) -> None:
    st.session_state.sort_field, st.session_state.sort_direction = next_sort_state(
        st.session_state.sort_field, st.session_state.sort_direction, field
    )


def sort_label(field: SortField, title: str) -> str:
    if st.session_state.sort_field is not field:
        return title
    arrow = "▼" if st.session_state.sort_direction is SortDirection.DESC else "▲"
    return f"{title} {arrow}"


# ============================================================================
# ALLOCATIONS TABLE
# ============================================================================

if page == "Allocations":
    st.header("RFA Allocations")
    st.markdown(f"**Current BERA Price:** ${format_bera(bera_price)}")

    if not snapshot.projects:
        st.warning(f"No allocations loaded from {config.csv_path}")

    query = st.text_input("Search projects", placeholder="Search by name or @handle")

    col_sort1, col_sort2, _ = st.columns([1, 1, 4])
    with col_sort1:
        st.button(sort_label(SortField.NAME, "Project"), on_click=toggle_sort, args=(SortField.NAME,))
    with col_sort2:
        st.button(sort_label(SortField.AMOUNT, "BERA Amount"), on_click=toggle_sort, args=(SortField.AMOUNT,))

    rows = tracker.build_table(
        snapshot,
        query=query,
        sort_field=st.session_state.sort_field,
        sort_direction=st.session_state.sort_direction,
        bera_price=bera_price,
        with_avatars=True,
    )

    table_data = []
    for row in rows:
        table_data.append({
            "#": format_rank(row.rank),
            "Avatar": row.avatar_url or "",
            "Initials": row.initials if not row.avatar_url else "",
            "Project": row.project.profile_url,
            "BERA Amount": format_amount_cell(row),
            "USD Value": format_usd_cell(row),
        })

    if table_data:
        st.dataframe(
            pd.DataFrame(table_data),
            use_container_width=True,
            hide_index=True,
            column_config={
                "Avatar": st.column_config.ImageColumn("Avatar", width="small"),
                "Project": st.column_config.LinkColumn(
                    "Project", display_text=r"https://twitter\.com/(.*)"
                ),
            },
        )
    elif query:
        st.info(f"No projects match \"{query}\"")

    st.caption(f"Note: \"{UNKNOWN_LABEL}\" means the allocation amount is not yet confirmed.")

# ============================================================================
# ANALYTICS
# ============================================================================

elif page == "Analytics":
    st.header("Allocation Analytics")

    stats = tracker.get_stats(snapshot)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total BERA Allocated", format_bera(stats.total_allocation))
    with col2:
        st.metric("Known Projects", stats.known_count)
    with col3:
        st.metric("Unknown Projects", stats.unknown_count)
    with col4:
        st.metric("Average Allocation", format_bera(stats.average_allocation))

    st.markdown("---")

    st.subheader("Allocation Tiers")
    col_tier1, col_tier2, col_tier3 = st.columns(3)
    with col_tier1:
        st.metric(AllocationTier.LARGE.display_name, stats.tiers.large)
    with col_tier2:
        st.metric(AllocationTier.MEDIUM.display_name, stats.tiers.medium)
    with col_tier3:
        st.metric(AllocationTier.SMALL.display_name, stats.tiers.small)

    st.markdown("---")

    col_pie, col_top = st.columns(2)

    with col_pie:
        st.subheader("Allocation Distribution")
        slices = AllocationAggregator().pie_slices(stats)
        if slices:
            hover = []
            for s in slices:
                if s.name == OTHERS_LABEL:
                    lines = [f"{o.name}: {format_bera(o.amount)}" for o in stats.others.top]
                    if stats.others.remaining_count > 0:
                        lines.append(f"and {stats.others.remaining_count} more projects...")
                    hover.append("<br>".join(lines))
                else:
                    hover.append(f"{format_bera(s.amount)} BERA")

            fig_pie = go.Figure(data=[go.Pie(
                labels=[s.name for s in slices],
                values=[s.amount for s in slices],
                customdata=hover,
                hovertemplate="<b>%{label}</b> (%{percent})<br>%{customdata}<extra></extra>",
                hole=0.4,
            )])
            fig_pie.update_layout(showlegend=True, height=450)
            st.plotly_chart(fig_pie, use_container_width=True)
        else:
            st.info("No confirmed allocations yet")

    with col_top:
        st.subheader("Top 10 Projects")
        top_data = [
            {
                "Project": share.name,
                "Share": f"{share.percentage:.1f}%",
                "BERA": format_bera(share.amount),
            }
            for share in stats.top_projects
        ]
        if top_data:
            st.dataframe(pd.DataFrame(top_data), use_container_width=True, hide_index=True)
        if stats.others.count:
            st.markdown(
                f"**Others:** {stats.others.count} projects, "
                f"{format_bera(stats.others.total_amount)} BERA"
            )

# ============================================================================
# BGT WRAPPERS
# ============================================================================

else:
    st.header("BGT Wrappers")

    col_range, col_unit = st.columns(2)
    with col_range:
        time_range = st.radio(
            "Time range", [r.value for r in TimeRange], horizontal=True,
            format_func=lambda v: v.upper(),
        )
    with col_unit:
        denomination = st.radio(
            "Denomination", [d.value for d in Denomination], horizontal=True,
            format_func=lambda v: v.upper(),
        )

    report = load_wrapper_report(time_range, denomination)

    cols = st.columns(len(report.wrappers))
    for col, wrapper in zip(cols, report.wrappers):
        with col:
            delta = None if wrapper.address == "-" else format_premium(wrapper.premium_percent)
            st.metric(wrapper.name, f"${wrapper.latest_price:.2f}", delta=delta)
            if wrapper.website_url:
                st.markdown(f"[{wrapper.symbol}]({wrapper.website_url})")
            if wrapper.address != "-":
                st.caption(wrapper.address)

    st.markdown("---")

    names = {w.key: w.symbol for w in report.wrappers}
    unit_label = "BERA" if denomination == Denomination.BERA.value else "USD"

    st.subheader(f"Price History ({unit_label})")
    if report.price_rows:
        fig_prices = go.Figure()
        for i, wrapper in enumerate(report.wrappers):
            fig_prices.add_trace(go.Scatter(
                x=[row.label for row in report.price_rows],
                y=[row.values.get(wrapper.key, 0.0) for row in report.price_rows],
                mode="lines",
                name=names[wrapper.key],
                line=dict(color=SERIES_COLORS[i % len(SERIES_COLORS)]),
            ))
        fig_prices.update_layout(
            yaxis=dict(tickformat="$.2f" if unit_label == "USD" else ".4f"),
            hovermode='x unified'
        )
        st.plotly_chart(fig_prices, use_container_width=True)
    else:
        st.info("No historical price data available")

    st.subheader("Premium over BERA (%)")
    if report.premium_rows:
        fig_premium = go.Figure()
        for i, wrapper in enumerate(report.wrappers[1:], 1):
            fig_premium.add_trace(go.Scatter(
                x=[row.label for row in report.premium_rows],
                y=[row.values.get(wrapper.key, 0.0) for row in report.premium_rows],
                mode="lines",
                name=names[wrapper.key],
                line=dict(color=SERIES_COLORS[i % len(SERIES_COLORS)]),
            ))
        fig_premium.add_hline(y=0, line_dash="dot", line_color="gray")
        fig_premium.update_layout(yaxis=dict(ticksuffix="%"), hovermode='x unified')
        st.plotly_chart(fig_premium, use_container_width=True)

    st.markdown("**Source:** [Berachain API](https://api.berachain.com/)")
