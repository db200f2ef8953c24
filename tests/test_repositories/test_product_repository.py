"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.

Author: TM3
Date: 2026-03-02
"""
import psycopg2
import pytest
from unittest.mock import MagicMock, patch

from storefront.core.errors import BackendError
from storefront.domain.product import Product, ProductCreate
from storefront.repositories.product_repository import ProductRepository


def mock_connection(mock_get_conn):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_find_by_id_returns_product(self, mock_get_conn, sample_product_row):
        """Test find_by_id returns a Product domain model"""
        # Arrange: Mock database connection
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = sample_product_row

        # Act: Call repository method
        repo = ProductRepository()
        product = repo.find_by_id('prod-1')

        # Assert: Verify result
        assert isinstance(product, Product)
        assert product.name == 'Ceramic Mug'
        assert product.final_price == 90

        # Verify database was called correctly
        mock_cursor.execute.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn):
        """Test find_by_id returns None when product doesn't exist"""
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act
        product = ProductRepository().find_by_id('missing')

        # Assert
        assert product is None

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_find_all_filters_by_keyword(self, mock_get_conn, sample_product_row):
        """Test find_all counts and pages with the same keyword filter"""
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [sample_product_row]

        # Act
        products, total = ProductRepository().find_all(keyword='mug', limit=10, offset=20)

        # Assert
        assert total == 1
        assert len(products) == 1

        count_call, page_call = mock_cursor.execute.call_args_list
        assert "ILIKE" in count_call[0][0]
        assert count_call[0][1] == ['%mug%']
        assert page_call[0][1] == ['%mug%', 10, 20]
        assert "ORDER BY created_at DESC" in page_call[0][0]

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_create_returns_inserted_row(self, mock_get_conn, sample_product_row):
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = sample_product_row

        # Act
        product = ProductRepository().create(ProductCreate(name='Ceramic Mug', price=100, discount_rate=10, quantity=5))

        # Assert
        query = mock_cursor.execute.call_args[0][0]
        assert "INSERT INTO products" in query
        assert "RETURNING" in query
        assert product.id == 'prod-1'
        mock_conn.commit.assert_called_once()

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_decrement_quantity_short_on_stock(self, mock_get_conn):
        """No row comes back when the guarded UPDATE matches nothing"""
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act
        product = ProductRepository().decrement_quantity('prod-1', 10)

        # Assert
        assert product is None
        query, params = mock_cursor.execute.call_args[0]
        assert "quantity >= %s" in query
        assert params == (10, 'prod-1', 10)

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_write_failure_rolls_back(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg2.Error("boom")

        # Act / Assert
        with pytest.raises(BackendError):
            ProductRepository().delete('prod-1')

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('storefront.repositories.base.get_db_connection_dict')
    def test_update_ignores_unknown_columns(self, mock_get_conn, sample_product_row):
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = sample_product_row

        # Act
        ProductRepository().update('prod-1', {'price': 120, 'id': 'hijack'})

        # Assert
        query, params = mock_cursor.execute.call_args[0]
        assert "price = %s" in query
        assert "id = %s" in query.split("WHERE")[1]
        assert params == [120, 'prod-1']
