"""
Copyright (C) 2025  ProfileVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of ProfileVault. See the LICENSE file in the project
root for full license details.
"""
from http import HTTPStatus
import typing
from pydantic import BaseModel, ValidationError
import quart

# Header set by the upstream proxy once it has authenticated the caller.
PRINCIPAL_HEADER = "X-Principal"

# Widest principal the database columns accept.
PRINCIPAL_MAX_LENGTH = 128


class BaseApiView:
    """
    Helpers shared by the API views: request body parsing, caller lookup
    and turning data service results into responses.
    """

    async def _parse_body(self, model: typing.Type[BaseModel]):
        """
        Validate the JSON body of the current request against ``model``.

        Returns:
            tuple: ``(instance, None)`` on success or ``(None, response)``
            where ``response`` is a 400 error ready to return.
        """
        data = await quart.request.get_json(silent=True)

        if data is None or not isinstance(data, dict):
            return None, (quart.jsonify(
                {"error": "Invalid or missing JSON body"}),
                HTTPStatus.BAD_REQUEST)

        try:
            return model(**data), None

        except ValidationError as ex:
            return None, (quart.jsonify({"error": str(ex)}),
                          HTTPStatus.BAD_REQUEST)

    @staticmethod
    def _caller_principal():
        """
        Read the authenticated caller from the request headers.

        Returns:
            tuple: ``(principal, None)`` or ``(None, response)`` where
            ``response`` is a 401 when no principal was supplied and a 400
            when it is wider than PRINCIPAL_MAX_LENGTH.
        """
        principal = quart.request.headers.get(PRINCIPAL_HEADER, "").strip()

        if not principal:
            return None, (quart.jsonify(
                {"error": "Missing caller principal"}),
                HTTPStatus.UNAUTHORIZED)

        if len(principal) > PRINCIPAL_MAX_LENGTH:
            return None, (quart.jsonify(
                {"error": "Caller principal exceeds "
                          f"{PRINCIPAL_MAX_LENGTH} characters"}),
                HTTPStatus.BAD_REQUEST)

        return principal, None

    @staticmethod
    def _result_response(result: dict):
        """
        Convert a data service result dict into ``(json, status)``.
        """
        return quart.jsonify({k: v for k, v in result.items()
                              if k != "status"}), result["status"]
