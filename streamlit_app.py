import os

import pandas as pd
import requests
import streamlit as st


def get_secret(name, default=None):
    """Read a setting from the environment, then from st.secrets."""
    if name in os.environ:
        return os.environ[name]
    try:
        return st.secrets[name]
    except (FileNotFoundError, KeyError):
        return default


# Fetch settings
API_BASE_URL = get_secret("TOTALI_API_URL", "http://localhost:8000/api/v1").rstrip("/")
API_TOKEN = get_secret("TOTALI_API_TOKEN")
REQUEST_TIMEOUT = 10  # seconds


class ApiError(Exception):
    pass


def api_get(path, token, params=None):
    """GET an API route and unwrap the response envelope."""
    response = requests.get(
        f"{API_BASE_URL}{path}",
        headers={"Authorization": f"Bearer {token}"},
        params=params,
        timeout=REQUEST_TIMEOUT,
    )
    try:
        body = response.json()
    except ValueError:
        raise ApiError(f"{response.status_code}: {response.text[:200]}")

    if not response.ok or not body.get("success"):
        raise ApiError(body.get("error") or f"Request failed with status {response.status_code}")
    return body.get("data")


def format_money(value):
    return f"{value:,.2f}"


def render_overview(token):
    overview = api_get("/items/statistics/overview", token)

    col1, col2, col3 = st.columns(3)
    col1.metric("Items", overview["totalItems"])
    col2.metric("Total value", format_money(overview["totalValue"]))
    col3.metric("Avg. daily cost", format_money(overview["averageDailyCost"]))

    col1, col2, col3 = st.columns(3)
    col1.metric("Active", overview["activeItems"])
    col2.metric("Retired", overview["retiredItems"])
    col3.metric("Sold", overview["soldItems"])


def efficiency_frame(entries):
    frame = pd.DataFrame(entries)
    if frame.empty:
        return frame
    frame["usageEfficiency"] = (frame["usageEfficiency"] * 100).round(2)
    return frame[[
        "categoryIcon", "name", "categoryName", "usageEfficiency",
        "dailyCost", "daysUsed", "purchasePrice",
    ]].rename(columns={
        "categoryIcon": "",
        "name": "Item",
        "categoryName": "Category",
        "usageEfficiency": "Efficiency %",
        "dailyCost": "Daily cost",
        "daysUsed": "Days used",
        "purchasePrice": "Price",
    })


def render_efficiency(token, limit, days):
    efficiency = api_get("/items/analytics/efficiency", token, {"limit": limit, "days": days})
    st.metric("Overall usage rate", f"{efficiency['overallUsageRate']:.2f}%")

    if not efficiency["topEfficient"]:
        st.info("No items have been owned for at least a day in this window.")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Most used**")
        st.dataframe(efficiency_frame(efficiency["topEfficient"]), hide_index=True)
    with col2:
        st.markdown("**Least used**")
        st.dataframe(efficiency_frame(efficiency["leastEfficient"]), hide_index=True)


def render_categories(token):
    comparison = api_get("/items/analytics/categories", token)
    frame = pd.DataFrame(comparison["categories"])
    if frame.empty:
        st.info("No items yet.")
        return

    frame["label"] = frame["categoryIcon"] + " " + frame["categoryName"]
    st.bar_chart(frame.set_index("label")["averageEfficiency"])
    st.dataframe(
        frame[["label", "itemCount", "totalValue", "averageEfficiency", "averageDailyCost"]].rename(columns={
            "label": "Category",
            "itemCount": "Items",
            "totalValue": "Total value",
            "averageEfficiency": "Avg. efficiency",
            "averageDailyCost": "Avg. daily cost",
        }),
        hide_index=True,
    )


def render_trend(token, days):
    trend = api_get("/items/analytics/trend", token, {"days": days})
    frame = pd.DataFrame(trend["dataPoints"])
    if frame.empty:
        return

    frame["date"] = pd.to_datetime(frame["date"])
    frame = frame.set_index("date")
    st.line_chart(frame[["totalItems", "newItems"]])
    st.line_chart(frame[["totalValue", "newItemsValue"]])


def main():
    st.set_page_config(page_title="Totali", page_icon="📦", layout="wide")
    st.title("Totali")
    st.caption("What your things cost you per day, and how much you use them.")

    with st.sidebar:
        token = st.text_input("Access token", value=API_TOKEN or "", type="password")
        ranking_limit = st.slider("Ranking size", min_value=1, max_value=50, value=5)
        ranking_days = st.number_input("Ranking window (days, 0 = all time)", min_value=0, value=0)
        trend_days = st.slider("Trend days", min_value=1, max_value=365, value=30)

    if not token:
        st.warning("Enter an access token to load your items.")
        return

    try:
        st.header("Overview")
        render_overview(token)

        st.header("Usage efficiency")
        render_efficiency(token, ranking_limit, int(ranking_days))

        st.header("Categories")
        render_categories(token)

        st.header(f"Last {trend_days} days")
        render_trend(token, trend_days)
    except ApiError as e:
        st.error(f"API error: {e}")
    except requests.RequestException as e:
        st.error(f"Could not reach the API at {API_BASE_URL}: {e}")


if __name__ == "__main__":
    main()
