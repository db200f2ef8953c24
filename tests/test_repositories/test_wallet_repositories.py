"""
Unit tests for the repositories that move money or store jsonb

Author: TM3
Date: 2026-03-02
"""
import pytest
from psycopg2.extras import Json
from unittest.mock import MagicMock, patch

from storefront.domain.withdrawal import WithdrawalStatus
from storefront.repositories.sale_repository import SaleRepository
from storefront.repositories.task_repository import TaskRepository
from storefront.repositories.withdrawal_repository import WithdrawalRepository


def mock_connection(mock_get_conn):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


class TestWithdrawalRepository:

    @patch('storefront.repositories.withdrawal_repository.get_db_connection_dict')
    def test_approve_and_debit_in_one_transaction(self, mock_get_conn, now):
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            'id': 'wd-1',
            'user_id': 'user-1',
            'withdraw_amount': 40,
            'requested_at': now,
            'status': 2
        }

        # Act
        withdrawal = WithdrawalRepository().approve_and_debit('wd-1')

        # Assert
        assert withdrawal.status == WithdrawalStatus.APPROVED
        approve_call, debit_call = mock_cursor.execute.call_args_list
        assert approve_call[0][1] == (2, 'wd-1', 1)
        assert "GREATEST(0" in debit_call[0][0]
        assert debit_call[0][1] == (40, 'user-1')
        mock_conn.commit.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('storefront.repositories.withdrawal_repository.get_db_connection_dict')
    def test_approve_skips_debit_when_not_pending(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act
        withdrawal = WithdrawalRepository().approve_and_debit('wd-1')

        # Assert
        assert withdrawal is None
        mock_cursor.execute.assert_called_once()
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_status_change_only_matches_pending_rows(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act
        withdrawal = WithdrawalRepository().set_status_if_pending('wd-1', WithdrawalStatus.REJECTED)

        # Assert
        assert withdrawal is None
        query, params = mock_cursor.execute.call_args[0]
        assert "status = %s" in query.split("WHERE")[1]
        assert params == (3, 'wd-1', 1)
        mock_conn.commit.assert_called_once()

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_find_all_with_empty_user_list(self, mock_get_conn):
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        # Act
        withdrawals, total = WithdrawalRepository().find_all(user_ids=[])

        # Assert
        assert (withdrawals, total) == ([], 0)
        count_call = mock_cursor.execute.call_args_list[0]
        assert "ANY(%s)" in count_call[0][0]
        assert count_call[0][1] == [[]]


class TestSaleRepository:

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_increment_adds_in_sql(self, mock_get_conn, now):
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'id': 'sale-1', 'user_id': 'user-1', 'balance': 55.4}

        # Act
        sale = SaleRepository().increment('sale-1', {'balance': 5.4}, {'today_bonus_date': now})

        # Assert
        query, params = mock_cursor.execute.call_args[0]
        assert "balance = COALESCE(balance, 0) + %s" in query
        assert "today_bonus_date = %s" in query
        assert params == [5.4, now, 'sale-1']
        assert sale.balance == 55.4

    def test_increment_rejects_non_numeric_columns(self):
        with pytest.raises(ValueError):
            SaleRepository().increment('sale-1', {'user_id': 1})


class TestTaskRepository:

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_progress_is_stored_as_json(self, mock_get_conn, now):
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            'id': 'task-1',
            'user_id': 'user-1',
            'progress': {'task1': False},
            'allow_system_reset': False,
            'last_edit': now
        }

        # Act
        task = TaskRepository().create('user-1', {'task1': False}, now)

        # Assert
        params = mock_cursor.execute.call_args[0][1]
        assert any(isinstance(param, Json) for param in params)
        assert task.progress == {'task1': False}
