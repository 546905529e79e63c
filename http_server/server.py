import asyncio
import time
from typing import Awaitable, Callable, Optional
from urllib.parse import parse_qs, unquote, urlsplit
from .request import Request
from .response import Response
import logging

logger = logging.getLogger()

Handler = Callable[[Request], Awaitable[Response]]

# Limit body size to 10MB
MAX_BODY_SIZE = 10 * 1024 * 1024


class HTTPServer:
    def __init__(self, handler: Handler, host: str = '127.0.0.1', port: int = 12345):
        self.handler = handler
        self.host = host
        self.port = port
        self._server: Optional[asyncio.AbstractServer] = None

    async def parse_request(self, reader: asyncio.StreamReader) -> Optional[Request]:
        """Parse HTTP request with timeout and size limits"""
        try:
            # Read request line with timeout
            request_line = await asyncio.wait_for(
                reader.readline(),
                timeout=5.0
            )

            if not request_line:
                return None

            request_line = request_line.decode('utf-8').strip()
            method, full_path, version = request_line.split(' ', 2)

            # Split target into path and query; "//key" is a path, not a host
            raw_path, _, query = full_path.partition('?')
            if raw_path.startswith(('http://', 'https://')):
                raw_path = urlsplit(raw_path).path or '/'
            path = unquote(raw_path)
            query_params = parse_qs(query)

            # Parse headers
            headers = {}
            while True:
                line = await asyncio.wait_for(reader.readline(), timeout=5.0)
                if line == b'\r\n' or line == b'\n' or not line:
                    break

                header_line = line.decode('utf-8').strip()
                if ':' in header_line:
                    key, value = header_line.split(':', 1)
                    headers[key.strip().lower()] = value.strip()

            # Read body if present
            body = b''
            content_length = int(headers.get('content-length', 0))

            if content_length > 0:
                if content_length > MAX_BODY_SIZE:
                    raise ValueError("Request body too large")

                body = await asyncio.wait_for(
                    reader.readexactly(content_length),
                    timeout=30.0
                )

            return Request(
                method=method,
                path=path,
                headers=headers,
                query_params=query_params,
                body=body,
                version=version
            )

        except asyncio.TimeoutError:
            return None
        except Exception as e:
            logger.error(f"Error parsing request: {e}")
            return None

    def build_response(self, response: Response) -> bytes:
        """Build HTTP response bytes"""
        status_messages = {
            200: 'OK',
            204: 'No Content',
            400: 'Bad Request',
            404: 'Not Found',
            405: 'Method Not Allowed',
            500: 'Internal Server Error',
        }

        status_text = status_messages.get(response.status, 'Unknown')

        # 204 carries neither a body nor body headers
        if response.status == 204:
            response.body = b''
            response.headers.pop('content-type', None)
        else:
            if 'content-type' not in response.headers:
                response.headers['content-type'] = 'text/plain; charset=utf-8'
            response.headers['content-length'] = str(len(response.body))

        response.headers['server'] = 'SimpleKVS/1.0'

        # Build response
        response_line = f"HTTP/1.1 {response.status} {status_text}\r\n"
        header_lines = ''.join(
            f"{key}: {value}\r\n"
            for key, value in response.headers.items()
        )

        response_bytes = (
            response_line.encode() +
            header_lines.encode() +
            b'\r\n' +
            response.body
        )

        return response_bytes

    async def handle_request(self, request: Request) -> Response:
        """Pass request to the application handler"""
        try:
            result = await self.handler(request)

            if isinstance(result, Response):
                return result

            raise TypeError("Handler must return a Response")
        except Exception as e:
            logger.error(f"Handler error: {e}")
            return Response(
                status=500,
                body=b'Internal Server Error\n'
            )

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle a single client connection with keep-alive"""
        peer = writer.get_extra_info('peername')

        try:
            # Keep-alive loop
            while True:
                request = await self.parse_request(reader)
                if request is None:
                    break

                start_time = time.perf_counter()
                logger.debug(f"--> {request.method} {request.path}")

                # Handle request
                response = await self.handle_request(request)
                keep_alive = request.keep_alive
                response.headers['connection'] = 'keep-alive' if keep_alive else 'close'

                # Send response
                response_bytes = self.build_response(response)
                writer.write(response_bytes)
                await writer.drain()

                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.debug(
                    f"<-- {response.status} - {len(response.body)} bytes - {elapsed_ms:.2f}ms"
                )

                if not keep_alive:
                    break

        except ConnectionResetError:
            pass
        except Exception as e:
            logger.error(f"Connection error from {peer}: {e}")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def listen(self) -> asyncio.AbstractServer:
        """Bind the listening socket"""
        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port
        )

        addr = self._server.sockets[0].getsockname()
        self.port = addr[1]
        logger.info(f'KVS HTTP Server running on http://{addr[0]}:{addr[1]}')
        return self._server

    async def start(self):
        """Start the HTTP server"""
        server = self._server or await self.listen()

        try:
            async with server:
                await server.serve_forever()
        except asyncio.CancelledError:
            logger.info("Server shutdown requested")
        finally:
            await self.shutdown(server)

    async def shutdown(self, server):
        """Gracefully shutdown the server"""
        logger.info("Shutting down server...")
        server.close()
        await server.wait_closed()
        logger.info("Server shutdown complete")
