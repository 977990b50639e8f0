"""Transaction handling shared by every service."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_api.core.exceptions import (
    NotFoundException,
    RepositoryException,
    ServiceException,
    TransientDatabaseException,
)
from booking_api.services.base import BaseService


@pytest.fixture
def session():
    return MagicMock(spec=Session)


@pytest.fixture
def service(session):
    return BaseService(session)


class TestTransaction:
    def test_commits_on_success(self, service, session):
        with service.transaction():
            pass
        session.commit.assert_called_once()
        session.rollback.assert_not_called()

    def test_domain_exception_rolls_back_and_propagates(self, service, session):
        with pytest.raises(NotFoundException):
            with service.transaction():
                raise NotFoundException("missing")
        session.rollback.assert_called_once()
        session.commit.assert_not_called()

    def test_lost_connection_becomes_transient(self, service, session):
        error = OperationalError(
            "UPDATE availability", {}, Exception("server closed the connection")
        )
        with pytest.raises(TransientDatabaseException) as exc_info:
            with service.transaction():
                raise error
        assert exc_info.value.__cause__ is error
        session.rollback.assert_called_once()

    def test_repository_error_wrapping_timeout_becomes_transient(self, service):
        cause = OperationalError(
            "SELECT", {}, Exception("canceling statement due to statement timeout")
        )
        wrapped = RepositoryException("Failed to lock AvailabilitySlot")
        wrapped.__cause__ = cause
        with pytest.raises(TransientDatabaseException):
            with service.transaction():
                raise wrapped

    def test_other_database_error_becomes_internal(self, service, session):
        with pytest.raises(ServiceException) as exc_info:
            with service.transaction():
                raise IntegrityError("INSERT", {}, Exception("CHECK constraint failed"))
        assert not isinstance(exc_info.value, TransientDatabaseException)
        assert "CHECK constraint failed" in exc_info.value.error
        session.rollback.assert_called_once()

    def test_commit_failure_rolls_back(self, service, session):
        session.commit.side_effect = SQLAlchemyError("commit failed")
        with pytest.raises(ServiceException):
            with service.transaction():
                pass
        session.rollback.assert_called_once()

    def test_rollback_failure_does_not_mask_original_error(self, service, session):
        session.rollback.side_effect = SQLAlchemyError("connection already closed")
        with pytest.raises(NotFoundException):
            with service.transaction():
                raise NotFoundException("missing")

    def test_unexpected_error_rolls_back_and_propagates(self, service, session):
        with pytest.raises(RuntimeError):
            with service.transaction():
                raise RuntimeError("bug")
        session.rollback.assert_called_once()


class TestRead:
    def test_read_translates_database_errors(self, service):
        def failing():
            raise RepositoryException("Failed to execute listing")

        with pytest.raises(ServiceException):
            service.read("listing", failing)

    def test_read_returns_result(self, service):
        assert service.read("listing", lambda: [1, 2]) == [1, 2]


class TestMeasureOperation:
    def test_records_success_and_failure(self, session):
        class Sample(BaseService):
            @BaseService.measure_operation("sample_op")
            def run(self, fail: bool) -> str:
                if fail:
                    raise ValueError("nope")
                return "ok"

        sample = Sample(session)
        assert sample.run(False) == "ok"
        with pytest.raises(ValueError):
            sample.run(True)

        metrics = sample.get_metrics()["sample_op"]
        assert metrics["count"] == 2
        assert metrics["success_count"] == 1
        assert metrics["failure_count"] == 1
