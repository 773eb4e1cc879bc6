"""
Product API — Product Service Unit Tests
=========================================

What:  Tests for ProductService (create, find_all, find_by_id, update_by_id,
       delete_by_id) with a mocked session: no database involved.

What we test:
    ✅ Validation errors raised before anything touches the session
    ✅ Malformed ids raise InvalidIdError, absent ids raise NotFoundError
    ✅ Partial updates only touch supplied fields and bump updated_at
    ✅ SQLAlchemy failures are wrapped in DatabaseError
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from product_api.exceptions import (
    DatabaseError,
    InvalidIdError,
    NotFoundError,
    ValidationError,
)
from product_api.models.product import Product
from product_api.services.product_service import ProductService, next_timestamp, parse_id


class TestParseId:

    def test_valid_uuid(self):
        uid = uuid4()
        assert parse_id(str(uid)) == uid

    @pytest.mark.parametrize("value", ["abc", "123", "", "not-a-uuid-at-all"])
    def test_malformed_id_rejected(self, value):
        with pytest.raises(InvalidIdError) as exc_info:
            parse_id(value)
        assert exc_info.value.message == "Invalid id format"


class TestNextTimestamp:

    def test_strictly_after_previous(self):
        future = datetime.now(timezone.utc) + timedelta(seconds=5)
        assert next_timestamp(future) > future

    def test_naive_previous_treated_as_utc(self):
        previous = datetime.now(timezone.utc).replace(tzinfo=None)
        result = next_timestamp(previous)
        assert result.tzinfo is not None
        assert result > previous.replace(tzinfo=timezone.utc)


class TestProductServiceCreate:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_create_success(self, mock_db_session):
        result = await self.service.create(
            mock_db_session, {"name": "  Desk Lamp  ", "price": 19.99}
        )

        assert result.name == "Desk Lamp"
        assert result.price == 19.99
        assert result.description == ""
        assert result.id is not None
        assert result.created_at == result.updated_at
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_ignores_client_supplied_id(self, mock_db_session):
        client_id = uuid4()
        result = await self.service.create(
            mock_db_session, {"id": str(client_id), "name": "Mug", "price": 5}
        )
        assert result.id != client_id

    @pytest.mark.asyncio
    async def test_create_missing_name(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_db_session, {"price": 10})

        assert "name" in exc_info.value.message
        assert exc_info.value.fields == ["name"]
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_missing_name_and_price(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_db_session, {})

        assert exc_info.value.message.startswith("Product validation failed:")
        assert set(exc_info.value.fields) == {"name", "price"}

    @pytest.mark.asyncio
    async def test_create_blank_name_rejected(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.create(mock_db_session, {"name": "   ", "price": 1})

    @pytest.mark.asyncio
    async def test_create_non_numeric_price_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(mock_db_session, {"name": "Pen", "price": "cheap"})
        assert exc_info.value.fields == ["price"]

    @pytest.mark.asyncio
    async def test_create_database_failure_wrapped(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("connection lost"))
        )
        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create(mock_db_session, {"name": "Pen", "price": 1})
        assert exc_info.value.context["operation"] == "create"


class TestProductServiceFind:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_find_by_id_found(self, mock_db_session, sample_product_data):
        mock_db_session.get.return_value = Product(**sample_product_data)

        result = await self.service.find_by_id(mock_db_session, str(sample_product_data["id"]))

        assert result.id == sample_product_data["id"]
        assert result.name == sample_product_data["name"]

    @pytest.mark.asyncio
    async def test_find_by_id_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.find_by_id(mock_db_session, str(uuid4()))
        assert exc_info.value.message == "Product not found"

    @pytest.mark.asyncio
    async def test_find_by_id_malformed_never_queries(self, mock_db_session):
        with pytest.raises(InvalidIdError):
            await self.service.find_by_id(mock_db_session, "abc")
        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_all_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        assert await self.service.find_all(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_find_all_database_failure_wrapped(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("gone"))
        )
        with pytest.raises(DatabaseError):
            await self.service.find_all(mock_db_session)


class TestProductServiceUpdate:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_update_price_only(self, mock_db_session, sample_product_data):
        product = Product(**sample_product_data)
        mock_db_session.get.return_value = product

        result = await self.service.update_by_id(
            mock_db_session, str(product.id), {"price": 120}
        )

        assert result.price == 120
        assert result.name == sample_product_data["name"]
        assert result.description == sample_product_data["description"]
        assert result.updated_at > sample_product_data["updated_at"]
        assert result.created_at == sample_product_data["created_at"]

    @pytest.mark.asyncio
    async def test_update_cannot_blank_name(self, mock_db_session, sample_product_data):
        mock_db_session.get.return_value = Product(**sample_product_data)

        with pytest.raises(ValidationError):
            await self.service.update_by_id(
                mock_db_session, str(sample_product_data["id"]), {"name": ""}
            )

    @pytest.mark.asyncio
    async def test_update_cannot_null_price(self, mock_db_session, sample_product_data):
        mock_db_session.get.return_value = Product(**sample_product_data)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_by_id(
                mock_db_session, str(sample_product_data["id"]), {"price": None}
            )
        assert exc_info.value.message == "Product validation failed: price: Field required"

    @pytest.mark.asyncio
    async def test_update_null_description_resets(self, mock_db_session, sample_product_data):
        mock_db_session.get.return_value = Product(**sample_product_data)

        result = await self.service.update_by_id(
            mock_db_session, str(sample_product_data["id"]), {"description": None}
        )
        assert result.description == ""

    @pytest.mark.asyncio
    async def test_update_malformed_id_checked_first(self, mock_db_session):
        with pytest.raises(InvalidIdError):
            await self.service.update_by_id(mock_db_session, "abc", {"price": None})

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.update_by_id(mock_db_session, str(uuid4()), {"price": 1})


class TestProductServiceDelete:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_delete_returns_deleted_record(self, mock_db_session, sample_product_data):
        product = Product(**sample_product_data)
        mock_db_session.get.return_value = product

        result = await self.service.delete_by_id(mock_db_session, str(product.id))

        assert result.id == product.id
        mock_db_session.delete.assert_awaited_once_with(product)

    @pytest.mark.asyncio
    async def test_delete_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.delete_by_id(mock_db_session, str(uuid4()))
        mock_db_session.delete.assert_not_awaited()
