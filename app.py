import html
import logging

import streamlit as st

from depot.data_ingestion import ingest_uploaded_file
from depot.export import export_filename, export_to_excel, records_to_frame
from depot.formatting import format_file_size, format_number
from depot.layout import DEFAULT_LOW_STOCK_THRESHOLD, LOCATIONS, LOCATION_LABELS
from depot.query import (
    ALL_LOCATIONS,
    ASCENDING,
    SORT_FIELDS,
    apply_filters,
    parse_threshold,
    summarize,
    toggle_sort
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(
    page_title="Depot Stock",
    page_icon="◼",
    layout="wide",
    initial_sidebar_state="collapsed"
)

st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

    * {
        font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
    }

    .block-container {
        padding: 1.5rem 3rem 2rem 3rem;
        max-width: 1200px;
    }

    #MainMenu, footer, header {visibility: hidden;}

    .header-bar {
        display: flex;
        justify-content: space-between;
        align-items: center;
        padding-bottom: 1.5rem;
        border-bottom: 1px solid #f0f0f0;
        margin-bottom: 2rem;
    }

    .logo {
        font-size: 1.1rem;
        font-weight: 600;
        color: #111;
        letter-spacing: -0.02em;
    }

    .file-meta {
        font-size: 0.7rem;
        color: #666;
    }

    /* Statistics cards */
    .stats-row {
        display: grid;
        grid-template-columns: repeat(4, 1fr);
        gap: 1rem;
        margin-bottom: 2rem;
    }

    .stat-card {
        background: #fafafa;
        border-radius: 8px;
        padding: 1.25rem;
    }

    .stat-card .label {
        font-size: 0.6rem;
        color: #999;
        text-transform: uppercase;
        letter-spacing: 0.1em;
        margin-bottom: 0.5rem;
    }

    .stat-card .value {
        font-size: 1.25rem;
        font-weight: 600;
        color: #111;
    }

    .stat-card .value.low { color: #991b1b; }

    /* Error states */
    .error-box {
        background: #fef2f2;
        border: 1px solid #fecaca;
        border-radius: 8px;
        padding: 1.5rem;
        text-align: center;
    }

    .error-box .title {
        font-size: 0.9rem;
        font-weight: 600;
        color: #991b1b;
        margin-bottom: 0.5rem;
    }

    .error-box .message {
        font-size: 0.85rem;
        color: #7f1d1d;
        line-height: 1.5;
    }

    /* Upload prompt */
    .upload-prompt {
        text-align: center;
        padding: 4rem 2rem;
        color: #888;
    }

    .upload-prompt .icon {
        font-size: 2.5rem;
        margin-bottom: 1rem;
        opacity: 0.5;
    }

    .upload-prompt .title {
        font-size: 1rem;
        font-weight: 500;
        color: #555;
        margin-bottom: 0.5rem;
    }

    .upload-prompt .subtitle {
        font-size: 0.8rem;
        color: #999;
    }

    .section-label {
        font-size: 0.6rem;
        color: #999;
        text-transform: uppercase;
        letter-spacing: 0.1em;
        margin-bottom: 0.75rem;
    }

    .footer-note {
        text-align: center;
        font-size: 0.65rem;
        color: #ccc;
        margin-top: 3rem;
        padding-top: 1.5rem;
        border-top: 1px solid #f5f5f5;
    }
</style>
""", unsafe_allow_html=True)


st.markdown("""
    <div class="header-bar">
        <div class="logo">Depot Stock</div>
    </div>
""", unsafe_allow_html=True)

st.markdown('<div class="section-label">Upload Stock Report</div>', unsafe_allow_html=True)

uploaded_file = st.file_uploader(
    "Choose a stock report",
    type=["xlsx", "xlsm", "csv"],
    label_visibility="collapsed"
)

if uploaded_file is not None:
    with st.spinner("Parsing..."):
        result = ingest_uploaded_file(uploaded_file)

    if not result.valid:
        st.markdown(f"""
            <div class="error-box">
                <div class="title">Unable to Process File</div>
                <div class="message">{html.escape(result.message)}</div>
            </div>
        """, unsafe_allow_html=True)

    else:
        st.markdown(f"""
            <div class="file-meta">
                {html.escape(result.source_name)} · {format_file_size(uploaded_file.size)}
                · Report date: {html.escape(result.report_date)}
            </div>
        """, unsafe_allow_html=True)

        # Controls
        st.markdown('<div class="section-label">Filters</div>', unsafe_allow_html=True)
        col1, col2, col3 = st.columns([1, 1, 2])
        with col1:
            threshold = parse_threshold(
                st.number_input("Low stock threshold", min_value=0, value=DEFAULT_LOW_STOCK_THRESHOLD, step=10)
            )
        with col2:
            location = st.selectbox(
                "Location",
                [ALL_LOCATIONS] + list(LOCATIONS),
                format_func=lambda key: "All locations" if key == ALL_LOCATIONS else LOCATION_LABELS[key]
            )
        with col3:
            search_text = st.text_input("Search product, pack size or portfolio")

        # Sort: clicking the active column flips direction
        if "sort_field" not in st.session_state:
            st.session_state.sort_field = "product"
            st.session_state.sort_direction = ASCENDING

        st.markdown('<div class="section-label">Sort by</div>', unsafe_allow_html=True)
        for column, field in zip(st.columns(len(SORT_FIELDS)), SORT_FIELDS):
            label = LOCATION_LABELS.get(field, field.title())
            if field == st.session_state.sort_field:
                label += " ▲" if st.session_state.sort_direction == ASCENDING else " ▼"
            with column:
                if st.button(label, key=f"sort_{field}", use_container_width=True):
                    st.session_state.sort_field, st.session_state.sort_direction = toggle_sort(
                        st.session_state.sort_field, st.session_state.sort_direction, field
                    )
                    st.rerun()

        filtered = apply_filters(
            result.records,
            search_text=search_text,
            location=location,
            sort_field=st.session_state.sort_field,
            sort_direction=st.session_state.sort_direction
        )
        stats = summarize(filtered, threshold)

        low_class = "low" if stats["low_stock_count"] else ""
        st.markdown(f"""
            <div class="stats-row">
                <div class="stat-card">
                    <div class="label">Products</div>
                    <div class="value">{stats["count"]}</div>
                </div>
                <div class="stat-card">
                    <div class="label">Total Units</div>
                    <div class="value">{format_number(stats["total_units"])}</div>
                </div>
                <div class="stat-card">
                    <div class="label">Low Stock Items</div>
                    <div class="value {low_class}">{stats["low_stock_count"]}</div>
                </div>
                <div class="stat-card">
                    <div class="label">Active Depots</div>
                    <div class="value">{stats["active_location_count"]}</div>
                </div>
            </div>
        """, unsafe_allow_html=True)

        if filtered:
            st.dataframe(
                records_to_frame(filtered, threshold, location),
                use_container_width=True,
                hide_index=True
            )

            st.download_button(
                "Export to Excel",
                data=export_to_excel(filtered, threshold, result.source_name),
                file_name=export_filename(),
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
            )
        else:
            st.markdown(f"""
                <div class="upload-prompt">
                    <div class="title">No products to show</div>
                    <div class="subtitle">{html.escape(result.message)}</div>
                </div>
            """, unsafe_allow_html=True)

else:
    st.markdown("""
        <div class="upload-prompt">
            <div class="icon">📊</div>
            <div class="title">Upload a depot stock report</div>
            <div class="subtitle">Excel (.xlsx) and CSV files supported</div>
        </div>
    """, unsafe_allow_html=True)

st.markdown('<div class="footer-note">Depot Stock Dashboard</div>', unsafe_allow_html=True)
