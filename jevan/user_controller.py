"""HTTP handlers for user operations."""

from __future__ import annotations

import json
from typing import Any, Protocol

from flask import Flask, jsonify, request

from jevan.applog import new_logger_with_correlation_id
from jevan.commons import api_error_response, print_struct
from jevan.models import User


class _UserOperations(Protocol):
    def get_user_by_id(self, user_id: str) -> User: ...

    def delete_user_by_id(self, user_id: str) -> None: ...

    def get_users(self) -> list[User]: ...

    def create_user(self, user: User) -> str: ...

    def update_user(self, user: User, user_id: str) -> None: ...


def _read_user() -> User | None:
    """Decode the request body as a user; None when there is none.

    Raises ``ValueError`` when the body is not a valid user.
    """
    raw = request.get_data(cache=True)
    if not raw:
        return None
    if not request.is_json:
        raise ValueError("unsupported media type")
    body = json.loads(raw)
    if body is None:
        return None
    return User.from_dict(body)


def _bad_request(message: str) -> Any:
    return jsonify(api_error_response(message).to_dict()), 400


def _validation_error(user: User | None) -> str | None:
    if user is None:
        return "invalid request payload"
    if not user.name.strip():
        return "'name' is required"
    if not user.email.strip():
        return "'email' is required"
    return None


def _parse_user() -> tuple[User | None, str | None]:
    try:
        user = _read_user()
    except ValueError:
        user = None
    return user, _validation_error(user)


class UserController:
    """Routes for managing users."""

    def __init__(self, user_service: _UserOperations) -> None:
        self._service = user_service

    def register(self, app: Flask) -> None:
        """Attach the user routes to ``app``."""
        app.add_url_rule(
            "/users", endpoint="user_list", view_func=self.get_users, methods=["GET"]
        )
        app.add_url_rule(
            "/users/<user_id>",
            endpoint="user_get",
            view_func=self.get_user_by_id,
            methods=["GET"],
        )
        app.add_url_rule(
            "/users/<user_id>",
            endpoint="user_delete",
            view_func=self.delete_user_by_id,
            methods=["DELETE"],
        )
        app.add_url_rule(
            "/users", endpoint="user_create", view_func=self.create_user, methods=["POST"]
        )
        app.add_url_rule(
            "/users/<user_id>",
            endpoint="user_update",
            view_func=self.update_user,
            methods=["PATCH"],
        )

    def get_user_by_id(self, user_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Executing GetUserById, userId: %s", user_id)
        if not user_id.strip():
            logger.error("'id' is required")
            return _bad_request("'id' is required")
        try:
            user = self._service.get_user_by_id(user_id)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info(
            "Executed GetUserById, userId:%s, user %s", user_id, print_struct(user)
        )
        return jsonify(user.to_dict()), 200

    def delete_user_by_id(self, user_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Executing DeleteUserById, userId: %s", user_id)
        if not user_id.strip():
            logger.error("'id' is required")
            return _bad_request("'id' is required")
        try:
            self._service.delete_user_by_id(user_id)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed DeleteUserById, userId: %s", user_id)
        return "", 204

    def get_users(self) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Executing Get All Users")
        try:
            users = self._service.get_users()
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed GetUsers, users %s", print_struct(users))
        return (
            jsonify({"total": len(users), "users": [user.to_dict() for user in users]}),
            200,
        )

    def create_user(self) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Executing CreateUser")
        user, problem = _parse_user()
        if problem is not None:
            logger.error(problem)
            return _bad_request(problem)
        try:
            user_id = self._service.create_user(user)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed CreateUser")
        return jsonify({"id": user_id}), 201

    def update_user(self, user_id: str) -> Any:
        logger = new_logger_with_correlation_id()
        logger.info("Executing UpdateUser, userId: %s", user_id)
        if not user_id.strip():
            logger.error("'id' is required")
            return _bad_request("'id' is required")
        user, problem = _parse_user()
        if problem is not None:
            logger.error(problem)
            return _bad_request(problem)
        try:
            self._service.update_user(user, user_id)
        except Exception as exc:
            logger.error("%s", exc)
            return _bad_request(str(exc))
        logger.info("Executed UpdateUser, userId: %s", user_id)
        return "", 200