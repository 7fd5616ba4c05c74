from astro_dashboard.tests.fakes import make_settings


def test_allowed_databases_parsing():
    s = make_settings(DASHBOARD_DATABASES=" ichigo , asterdex ,, ")
    assert s.allowed_databases() == ["ichigo", "asterdex"]


def test_default_database_prefers_db_name_in_allow_list():
    assert make_settings(DB_NAME="asterdex").default_database() == "asterdex"
    assert make_settings(DB_NAME="postgres").default_database() == "ichigo"


def test_missing_database_settings_in_order():
    s = make_settings(DB_HOST="", DB_PORT=None, DB_PASSWORD="  ")
    assert s.missing_database_settings() == ["DB_HOST", "DB_PORT", "DB_PASSWORD"]
    assert make_settings().missing_database_settings() == []
