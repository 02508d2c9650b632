"""Core (UI-agnostic) Pokémon dashboard logic.

This package contains:
- stat and generation definitions
- data loading (CSV -> pandas)
- filter normalization
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict, Plotly -> figure dict)
"""
