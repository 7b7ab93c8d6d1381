"""Operator commands."""

from sqlalchemy import create_engine, inspect

from jti_store.scripts import init_db


def test_init_db_creates_table(tmp_path, mocker) -> None:
    mocker.patch.object(init_db, "setup_logging")
    url = f"sqlite:///{tmp_path / 'init.db'}"

    assert init_db.main(["--url", url]) == 0

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert "idn_oidc_jti" in inspector.get_table_names()
        columns = {column["name"] for column in inspector.get_columns("idn_oidc_jti")}
        assert columns == {"jwt_id", "exp_time", "time_created"}
    finally:
        engine.dispose()


def test_init_db_drop_recreates_table(tmp_path, mocker) -> None:
    mocker.patch.object(init_db, "setup_logging")
    url = f"sqlite:///{tmp_path / 'init.db'}"

    assert init_db.main(["--url", url]) == 0
    assert init_db.main(["--url", url, "--drop"]) == 0


def test_init_db_reports_failure(mocker) -> None:
    mocker.patch.object(init_db, "setup_logging")
    url = "sqlite:////nonexistent-dir/for/jti/init.db"

    assert init_db.main(["--url", url]) == 1
