import pytest

from ticketing.database import db_connection, init_db


def test_get_db_closes_connection(mocker):
    conn = mocker.MagicMock()
    mocker.patch("ticketing.database.db_connection.connect", return_value=conn)
    mocker.patch("ticketing.database.db_connection.DB_POOL_MAX", 0)

    with db_connection.get_db() as acquired:
        assert acquired is conn

    conn.close.assert_called_once()
    conn.rollback.assert_not_called()


def test_get_db_rolls_back_and_closes_on_error(mocker):
    conn = mocker.MagicMock()
    mocker.patch("ticketing.database.db_connection.connect", return_value=conn)
    mocker.patch("ticketing.database.db_connection.DB_POOL_MAX", 0)

    with pytest.raises(RuntimeError):
        with db_connection.get_db():
            raise RuntimeError("boom")

    conn.rollback.assert_called_once()
    conn.close.assert_called_once()


def test_get_db_uses_pool_when_configured(mocker):
    conn = mocker.MagicMock()
    pool = mocker.MagicMock()
    pool.getconn.return_value = conn
    mocker.patch("ticketing.database.db_connection.DB_POOL_MAX", 5)
    mocker.patch("ticketing.database.db_connection._get_pool", return_value=pool)

    with db_connection.get_db() as acquired:
        assert acquired is conn

    pool.putconn.assert_called_once_with(conn)
    conn.close.assert_not_called()


def test_missing_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError):
        db_connection.get_database_url()


def test_init_db_reset(mocker):
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    mock_cursor.__enter__.return_value = mock_cursor
    mock_conn.cursor.return_value = mock_cursor
    mocker.patch("ticketing.database.init_db.get_db", return_value=mock_conn)

    init_db.main(["--reset"])

    statements = [c[0][0] for c in mock_cursor.execute.call_args_list]
    assert "CREATE TABLE IF NOT EXISTS users" in statements[0]
    assert statements[1].startswith("TRUNCATE TABLE users, partners, customers, events")
    assert mock_conn.commit.call_count == 2


def test_init_db_without_reset_keeps_data(mocker):
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    mock_cursor.__enter__.return_value = mock_cursor
    mock_conn.cursor.return_value = mock_cursor
    mocker.patch("ticketing.database.init_db.get_db", return_value=mock_conn)

    init_db.main([])

    assert mock_cursor.execute.call_count == 1
