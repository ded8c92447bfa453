"""iContribute: interactive Streamlit dashboard over the contributor snapshot."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import plotly.express as px
import streamlit as st

from icontribute.config import COLLECTION_FILENAME, Settings
from icontribute.models import CONTRIBUTOR, MAINTAINER
from icontribute.store import load_contributors

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="iContribute",
    page_icon="👥",
    layout="wide",
)

ROLE_COLORS: dict[str, str] = {
    MAINTAINER:  "#2ecc71",
    CONTRIBUTOR: "#3498db",
}

# ---------------------------------------------------------------------------
# Sidebar: pick the snapshot directory
# ---------------------------------------------------------------------------
st.sidebar.title("👥 iContribute")
st.sidebar.markdown("Contributors from git history")

default_dir = Settings.from_env().data_dir
data_dir = Path(st.sidebar.text_input("Data directory", value=str(default_dir)))

contributors = load_contributors(data_dir)
if not contributors:
    st.error(
        f"No contributors in `{data_dir / COLLECTION_FILENAME}`\n\n"
        "Run `python main.py collect` to generate it."
    )
    st.stop()

df = pd.DataFrame(contributors)
for col, default in [("username", ""), ("email", ""), ("avatar", ""), ("role", CONTRIBUTOR), ("commits", 0)]:
    if col not in df.columns:
        df[col] = default
df["username"] = df["username"].fillna("")
df = df.sort_values("commits", ascending=False).reset_index(drop=True)

roles = sorted(df["role"].unique().tolist())
selected_roles = st.sidebar.multiselect("Roles", options=roles, default=roles)
if selected_roles:
    df = df[df["role"].isin(selected_roles)]

st.sidebar.divider()
st.sidebar.caption(f"Snapshot: {data_dir / COLLECTION_FILENAME}")

# ---------------------------------------------------------------------------
# Metric cards
# ---------------------------------------------------------------------------
st.title("Contributors")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Contributors", f"{len(df):,}")
c2.metric("Maintainers", f"{(df['role'] == MAINTAINER).sum():,}")
c3.metric("Total commits", f"{int(df['commits'].sum()):,}")
c4.metric("Known handles", f"{(df['username'] != '').sum():,}")

st.divider()

col_lb, col_roles = st.columns([3, 1])

# --- Leaderboard ---
with col_lb:
    st.subheader("Commit leaderboard")
    top_n = st.slider("Top N contributors", 5, 50, 15, key="lb_n")
    top = df.nlargest(top_n, "commits").sort_values("commits")
    fig_lb = px.bar(
        top,
        x="commits",
        y="name",
        color="role",
        orientation="h",
        color_discrete_map=ROLE_COLORS,
        labels={"name": "", "commits": "Commits", "role": "Role"},
        text="commits",
    )
    fig_lb.update_traces(texttemplate="%{text:,}", textposition="outside")
    fig_lb.update_layout(
        height=max(280, top_n * 28),
        margin=dict(l=0, r=60, t=10, b=0),
        yaxis=dict(tickfont=dict(size=12)),
    )
    st.plotly_chart(fig_lb, use_container_width=True)

# --- Role split ---
with col_roles:
    st.subheader("Roles")
    role_counts = df["role"].value_counts().reset_index()
    role_counts.columns = ["role", "count"]
    fig_roles = px.pie(
        role_counts, names="role", values="count",
        hole=0.45,
        color="role",
        color_discrete_map=ROLE_COLORS,
    )
    fig_roles.update_traces(textposition="inside", textinfo="percent+label")
    fig_roles.update_layout(
        height=300,
        margin=dict(l=0, r=0, t=10, b=10),
        showlegend=False,
    )
    st.plotly_chart(fig_roles, use_container_width=True)

st.divider()

# --- Table ---
st.subheader("All contributors")
st.dataframe(
    df[["avatar", "name", "username", "email", "role", "commits"]],
    column_config={
        "avatar": st.column_config.ImageColumn("Avatar", width="small"),
        "name": "Name",
        "username": "Handle",
        "email": "Email",
        "role": "Role",
        "commits": st.column_config.NumberColumn("Commits", format="%d"),
    },
    use_container_width=True,
    hide_index=True,
)
