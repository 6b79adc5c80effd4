"""
Shift Floor Dashboard: throughput reporting for a sorting / warehouse floor

Analytics backend for turning station status exports into per-station
pieces-per-hour (PPH) reports, planning snapshots and shift task lists.

To analyse a routing export:
    result = loaders.load_routing_csv(text)
    window = SelectionWindow(*result.time_index.default_window())
    report = dashboard.generate_pph_report(result.series, result.time_index,
                                           window, registry)
    The report is plain data; report.to_frame() gives a table for display.

To connect to Streamlit:
    See app.py. Every widget change rebuilds the report from the cached
    ingest result; nothing in the package keeps state between calls.

To change the status tiers:
    Edit config.STATUS_TIERS (ordered, first matching ratio wins).
"""
