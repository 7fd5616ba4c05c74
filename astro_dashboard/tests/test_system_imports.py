import importlib

CRITICAL_IMPORTS = [
    ("astro_dashboard.config", "settings"),
    ("astro_dashboard.errors", "DashboardError"),
    ("astro_dashboard.persistence.db", "DatabasePools"),
    ("astro_dashboard.persistence.queries", "StatsQueries"),
    ("astro_dashboard.services.dashboard_stats", "DashboardStatsService"),
    ("astro_dashboard.api.router", "api_router"),
    ("astro_dashboard.app", "app"),
]

def test_critical_imports():
    missing = []
    for module_name, symbol in CRITICAL_IMPORTS:
        module = importlib.import_module(module_name)
        if not hasattr(module, symbol):
            missing.append(f"{module_name}:{symbol}")
    assert not missing, f"Missing symbols: {missing}"
