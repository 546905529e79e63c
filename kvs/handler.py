"""
KVSHandler - Map HTTP requests onto Storage operations.
"""

import logging

from http_server.request import Request
from http_server.response import Response, response
from kvs.interfaces.storage import Storage
from kvs.models.exceptions import ErrorKind, StorageError

logger = logging.getLogger(__name__)


class KVSHandler:
    """
    HTTP front for a Storage backend.

    The URL path (leading slash included) is the key and the body is the
    value:
    - GET /<key>    -> 200 with the value, 404 if absent
    - PUT /<key>    -> 204, 400 if the body is empty
    - DELETE /<key> -> 204, 404 if absent
    Methods are case-sensitive; any other method is 405. Storage failures are 500 with the message
    forwarded.
    """

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    async def __call__(self, request: Request) -> Response:
        return await self.handle(request)

    async def handle(self, request: Request) -> Response:
        if request.path == "/":
            return response(status_code=404).text("key must not be empty")

        if request.method == "GET":
            return await self.handle_get(request)
        if request.method == "PUT":
            return await self.handle_put(request)
        if request.method == "DELETE":
            return await self.handle_delete(request)

        return response(status_code=405).text("Method Not Allowed")

    async def handle_get(self, request: Request) -> Response:
        try:
            value = await self.storage.get(self.key_of(request))
        except StorageError as e:
            return self.error_response(e)
        return response(status_code=200).data(value)

    async def handle_put(self, request: Request) -> Response:
        if len(request.body) == 0:
            return response(status_code=400).text("size must be larger than 0")

        try:
            await self.storage.set(self.key_of(request), request.body)
        except StorageError as e:
            return self.error_response(e)
        return response(status_code=204)

    async def handle_delete(self, request: Request) -> Response:
        try:
            await self.storage.delete(self.key_of(request))
        except StorageError as e:
            return self.error_response(e)
        return response(status_code=204)

    @staticmethod
    def key_of(request: Request) -> bytes:
        return request.path.encode("utf-8")

    @staticmethod
    def error_response(error: StorageError) -> Response:
        if error.kind is ErrorKind.NOT_FOUND:
            return response(status_code=404).text("404 page not found")

        logger.error(f"Storage error: {error}")
        return response(status_code=500).text(str(error))
